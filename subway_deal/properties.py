"""
Property sets and the per-player property book.

Completeness and rent are always derived from the current card count;
nothing about a set's status is stored redundantly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from subway_deal.cards import COLOR_RULES, UNIMPROVABLE_COLORS, Card
from subway_deal.config import GameConfig
from subway_deal.exceptions import (
    InvalidPlacement,
    NoSuchSet,
    NotEligible,
    NotFound,
    UnknownColor,
)
from subway_deal.player import PlayerState
from subway_deal.types import Color, Improvement

logger = logging.getLogger(__name__)


@dataclass
class PropertySet:
    """Cards of one color owned by a single player."""

    color: Color
    cards: List[Card] = field(default_factory=list)
    improvements: List[Improvement] = field(default_factory=list)

    @property
    def set_size(self) -> int:
        rule = COLOR_RULES.get(self.color)
        if rule is None:
            raise UnknownColor(f"No rule for color {self.color!r}")
        return rule.set_size

    @property
    def is_complete(self) -> bool:
        return len(self.cards) >= self.set_size

    def has(self, kind: Improvement) -> bool:
        return kind in self.improvements

    def card(self, card_id: str) -> Optional[Card]:
        for card in self.cards:
            if card.id == card_id:
                return card
        return None

    def rent(self, express_bonus: int = 3, station_bonus: int = 4) -> int:
        rent = COLOR_RULES[self.color].rent_for_count(len(self.cards))
        if self.has(Improvement.EXPRESS):
            rent += express_bonus
        if self.has(Improvement.STATION):
            rent += station_bonus
        return rent

    def can_improve(self, kind: Improvement) -> bool:
        """
        Check whether an improvement may be added.

        Requirements:
        - The set is complete
        - The color is not railroad or utility
        - express: not already present
        - station: express present, station not already present
        """
        if not self.is_complete or self.color in UNIMPROVABLE_COLORS:
            return False
        if kind == Improvement.EXPRESS:
            return not self.has(Improvement.EXPRESS)
        return self.has(Improvement.EXPRESS) and not self.has(Improvement.STATION)


class PropertyBook:
    """Property operations over every player's sets in one match."""

    def __init__(self, players: Dict[str, PlayerState], config: GameConfig):
        self._players = players
        self._config = config

    def _player(self, player_id: str) -> PlayerState:
        try:
            return self._players[player_id]
        except KeyError:
            raise NotFound(f"Unknown player: {player_id!r}") from None

    def get_set(self, player_id: str, color: Color) -> PropertySet:
        color = Color.parse(color)
        property_set = self._player(player_id).properties.get(color)
        if property_set is None:
            raise NoSuchSet(f"{player_id} owns no {color.value} properties")
        return property_set

    def locate(self, card_id: str) -> Optional[Tuple[str, Color]]:
        """Find which player and color currently hold a property card."""
        for player_id, player in self._players.items():
            for color, property_set in player.properties.items():
                if property_set.card(card_id) is not None:
                    return player_id, color
        return None

    def place(self, player_id: str, color: Color, card: Card) -> PropertySet:
        """Append a property or wildcard to the player's set of ``color``."""
        color = Color.parse(color)
        player = self._player(player_id)
        if not card.is_property:
            raise InvalidPlacement(f"{card.name} is not a property")
        if not card.can_be(color):
            raise InvalidPlacement(f"{card.name} cannot be used as {color.value}")
        owner = self.locate(card.id)
        if owner is not None:
            raise InvalidPlacement(f"{card.id} is already in {owner[0]}'s {owner[1].value} set")

        property_set = player.properties.get(color)
        if property_set is None:
            property_set = PropertySet(color)
            player.properties[color] = property_set
        property_set.cards.append(card)
        return property_set

    def remove(self, player_id: str, color: Color, card_id: str) -> Card:
        """Detach a card; an emptied set is deleted with its improvements."""
        color = Color.parse(color)
        player = self._player(player_id)
        property_set = player.properties.get(color)
        card = property_set.card(card_id) if property_set else None
        if card is None:
            raise NotFound(f"{card_id} is not in {player_id}'s {color.value} set")

        property_set.cards.remove(card)
        if not property_set.cards:
            if property_set.improvements:
                logger.debug(
                    "Discarding improvements %s with emptied %s set of %s",
                    [i.value for i in property_set.improvements],
                    color.value,
                    player_id,
                )
            del player.properties[color]
        return card

    def rent_for(self, player_id: str, color: Color) -> int:
        property_set = self.get_set(player_id, color)
        return property_set.rent(self._config.express_bonus, self._config.station_bonus)

    def add_improvement(self, player_id: str, color: Color, kind: Improvement) -> PropertySet:
        try:
            property_set = self.get_set(player_id, color)
        except NoSuchSet as exc:
            raise NotEligible(exc.message) from None
        if not property_set.can_improve(kind):
            raise NotEligible(f"Cannot add {kind.value} to {player_id}'s {property_set.color.value} set")
        property_set.improvements.append(kind)
        return property_set

    def complete_sets(self, player_id: str) -> int:
        return self._player(player_id).complete_sets

    def move_card(
        self, from_id: str, to_id: str, color: Color, card_id: str, to_color: Optional[Color] = None
    ) -> Card:
        """Reassign one card between players, leaving the source set first."""
        card = self.remove(from_id, color, card_id)
        self.place(to_id, to_color or color, card)
        return card

    def transfer_set(self, from_id: str, to_id: str, color: Color) -> PropertySet:
        """Move a whole set, improvements included, merging into any existing set."""
        color = Color.parse(color)
        source = self._player(from_id)
        property_set = self.get_set(from_id, color)
        del source.properties[color]

        destination = self._player(to_id)
        existing = destination.properties.get(color)
        if existing is None:
            destination.properties[color] = property_set
            return property_set

        existing.cards.extend(property_set.cards)
        for kind in Improvement:
            if property_set.has(kind) and not existing.has(kind):
                existing.improvements.append(kind)
        existing.improvements.sort(key=list(Improvement).index)
        return existing
