"""
Player state and management.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Optional

from subway_deal.cards import Card
from subway_deal.exceptions import CardNotInHand
from subway_deal.types import Color

if TYPE_CHECKING:
    from subway_deal.properties import PropertySet


class PlayerState:
    """Represents the complete state of a player in the match."""

    def __init__(self, player_id: str, name: str):
        self.player_id = player_id
        self.name = name
        self.hand: List[Card] = []
        self.bank: List[Card] = []
        self.properties: Dict[Color, "PropertySet"] = {}

    @property
    def bank_total(self) -> int:
        return sum(card.value for card in self.bank)

    @property
    def complete_sets(self) -> int:
        return sum(1 for property_set in self.properties.values() if property_set.is_complete)

    def hand_card(self, card_id: str) -> Optional[Card]:
        for card in self.hand:
            if card.id == card_id:
                return card
        return None

    def take_from_hand(self, card_id: str) -> Card:
        """Remove a card from the hand and return it."""
        card = self.hand_card(card_id)
        if card is None:
            raise CardNotInHand(f"{self.name} does not hold {card_id}")
        self.hand.remove(card)
        return card

    def property_cards(self) -> List[Card]:
        return [card for property_set in self.properties.values() for card in property_set.cards]

    def __repr__(self) -> str:
        return (
            f"PlayerState(id={self.player_id!r}, name='{self.name}', "
            f"hand={len(self.hand)}, bank={self.bank_total}, sets={self.complete_sets})"
        )


class Player:
    """
    Convenience wrapper for player information.
    This is what the lobby hands over at match start.
    """

    def __init__(self, player_id: str, name: str):
        self.player_id = player_id
        self.name = name

    def __repr__(self) -> str:
        return f"Player(id={self.player_id!r}, name='{self.name}')"
