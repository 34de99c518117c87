"""
Card catalog: static definitions of every Subway Deal card.

The catalog is pure data. Multi-copy definitions are expanded into card
instances with ids ``<base>_<n>``; single-copy cards keep their base id.
"""

from __future__ import annotations

import random
from dataclasses import dataclass, replace
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from subway_deal.exceptions import IntegrityError, UnknownCard
from subway_deal.types import ActionType, CardType, Color


@dataclass(frozen=True)
class ColorRule:
    """Set size and rent schedule for one color."""

    set_size: int
    rent: Tuple[int, ...]

    def rent_for_count(self, count: int) -> int:
        """Rent for a set holding ``count`` cards, capped at the full-set value."""
        if count <= 0:
            return 0
        return self.rent[min(count, len(self.rent)) - 1]


COLOR_RULES: Dict[Color, ColorRule] = {
    Color.BROWN: ColorRule(2, (1, 2)),
    Color.BLUE: ColorRule(3, (1, 2, 3)),
    Color.PINK: ColorRule(3, (1, 2, 4)),
    Color.ORANGE: ColorRule(3, (1, 3, 5)),
    Color.RED: ColorRule(3, (2, 3, 6)),
    Color.YELLOW: ColorRule(3, (2, 4, 6)),
    Color.GREEN: ColorRule(3, (2, 4, 7)),
    Color.DARKBLUE: ColorRule(2, (3, 8)),
    Color.RAILROAD: ColorRule(4, (1, 2, 3, 4)),
    Color.UTILITY: ColorRule(2, (1, 2)),
}

# Sets that can never carry improvements.
UNIMPROVABLE_COLORS = frozenset({Color.RAILROAD, Color.UTILITY})


@dataclass(frozen=True)
class Card:
    """An immutable catalog entry or card instance."""

    id: str
    card_type: CardType
    name: str
    value: int
    colors: Tuple[Color, ...] = ()
    effect: str = ""
    quantity: int = 1
    action: Optional[ActionType] = None
    universal: bool = False
    targets_all: bool = True

    @property
    def is_property(self) -> bool:
        return self.card_type in (CardType.PROPERTY, CardType.WILDCARD)

    def can_be(self, color: Color) -> bool:
        """Whether this card may sit in (or charge rent on) ``color``."""
        return self.universal or color in self.colors

    def __deepcopy__(self, memo) -> "Card":
        return self

    def __repr__(self) -> str:
        return f"Card('{self.id}')"


def _property(card_id: str, name: str, value: int, color: Color) -> Card:
    return Card(card_id, CardType.PROPERTY, name, value, (color,))


def _wildcard(
    card_id: str, name: str, value: int, colors: Tuple[Color, ...], quantity: int = 1
) -> Card:
    return Card(
        card_id,
        CardType.WILDCARD,
        name,
        value,
        colors,
        effect="Can be used as " + " or ".join(c.value for c in colors),
        quantity=quantity,
    )


def _action(
    card_id: str, name: str, value: int, action: ActionType, effect: str, quantity: int
) -> Card:
    return Card(
        card_id, CardType.ACTION, name, value, effect=effect, quantity=quantity, action=action
    )


def _rent(card_id: str, colors: Tuple[Color, ...], quantity: int = 2) -> Card:
    return Card(
        card_id,
        CardType.RENT,
        "Rent",
        1,
        colors,
        effect="All players pay you rent for one of these colors",
        quantity=quantity,
        action=ActionType.PLAY_RENT,
    )


def _money(value: int, quantity: int) -> Card:
    return Card(f"money_{value}", CardType.MONEY, f"${value}", value, quantity=quantity)


STANDARD_CARDS: List[Card] = [
    # Properties
    _property("prop_j", "J", 1, Color.BROWN),
    _property("prop_z", "Z", 1, Color.BROWN),
    _property("prop_a", "A", 1, Color.BLUE),
    _property("prop_c", "C", 1, Color.BLUE),
    _property("prop_e", "E", 1, Color.BLUE),
    _property("prop_42nd_shuttle", "42nd St Shuttle", 2, Color.PINK),
    _property("prop_franklin_shuttle", "Franklin Ave Shuttle", 2, Color.PINK),
    _property("prop_rockaway_shuttle", "Rockaway Park Shuttle", 2, Color.PINK),
    _property("prop_b", "B", 2, Color.ORANGE),
    _property("prop_d", "D", 2, Color.ORANGE),
    _property("prop_f", "F", 2, Color.ORANGE),
    _property("prop_1", "1", 3, Color.RED),
    _property("prop_2", "2", 3, Color.RED),
    _property("prop_3", "3", 3, Color.RED),
    _property("prop_n", "N", 3, Color.YELLOW),
    _property("prop_q", "Q", 3, Color.YELLOW),
    _property("prop_r", "R", 3, Color.YELLOW),
    _property("prop_penn", "Penn Station", 4, Color.GREEN),
    _property("prop_grand_central", "Grand Central", 4, Color.GREEN),
    _property("prop_atlantic", "Atlantic Terminal", 4, Color.GREEN),
    _property("prop_citi_field", "Citi Field", 4, Color.DARKBLUE),
    _property("prop_yankee_stadium", "Yankee Stadium", 4, Color.DARKBLUE),
    _property("prop_lirr", "LIRR", 2, Color.RAILROAD),
    _property("prop_metro_north", "Metro-North", 2, Color.RAILROAD),
    _property("prop_nj_transit", "NJ Transit", 2, Color.RAILROAD),
    _property("prop_path", "PATH", 2, Color.RAILROAD),
    _property("prop_g", "G", 2, Color.UTILITY),
    _property("prop_l", "L", 2, Color.UTILITY),
    # Wildcards
    _wildcard("wild_broadway", "Broadway Junction", 1, (Color.BLUE, Color.BROWN)),
    _wildcard("wild_jamaica", "Jamaica Station", 4, (Color.BLUE, Color.RAILROAD)),
    _wildcard("wild_service_advisory", "Service Advisory", 2, (Color.PINK, Color.ORANGE), 2),
    _wildcard("wild_times_square", "Times Square", 3, (Color.RED, Color.YELLOW), 2),
    _wildcard("wild_big_game", "Big Game", 4, (Color.DARKBLUE, Color.GREEN)),
    _wildcard("wild_grand_central", "Grand Central", 4, (Color.GREEN, Color.RAILROAD)),
    _wildcard("wild_weekend_service", "Weekend Service", 2, (Color.UTILITY, Color.RAILROAD)),
    Card(
        "wild_fulton",
        CardType.WILDCARD,
        "Fulton Center",
        0,
        tuple(Color),
        effect="Can be used as any color (no cash value)",
        quantity=2,
        universal=True,
    ),
    # Actions
    _action("action_swipe_in", "Swipe In", 1, ActionType.SWIPE_IN, "Draw 2 extra cards", 10),
    _action(
        "action_fare_evasion",
        "Fare Evasion",
        4,
        ActionType.PLAY_FARE_EVASION,
        "Cancel any action card played against you",
        3,
    ),
    _action(
        "action_power_broker",
        "Power Broker",
        3,
        ActionType.POWER_BROKER,
        "Steal a property from any player (not from a complete set)",
        3,
    ),
    _action(
        "action_service_change",
        "Service Change",
        3,
        ActionType.SERVICE_CHANGE,
        "Swap one of your properties with another player's (not from complete sets)",
        3,
    ),
    _action(
        "action_line_closure",
        "Line Closure",
        5,
        ActionType.LINE_CLOSURE,
        "Steal a complete property set from any player (includes improvements)",
        2,
    ),
    _action(
        "action_missed_train",
        "Missed Your Train",
        3,
        ActionType.MISSED_YOUR_TRAIN,
        "Force any player to pay you $5",
        3,
    ),
    _action(
        "action_its_my_stop",
        "It's My Stop!",
        2,
        ActionType.ITS_MY_STOP,
        "All players pay you $2",
        3,
    ),
    _action(
        "action_rush_hour",
        "Rush Hour",
        1,
        ActionType.RUSH_HOUR,
        "Play with a rent card to double the rent amount",
        2,
    ),
    _action(
        "action_express_service",
        "Express Service",
        3,
        ActionType.EXPRESS_SERVICE,
        "Add to a complete set to add $3 to rent (not on Railroads/Utilities)",
        3,
    ),
    _action(
        "action_new_station",
        "New Station",
        4,
        ActionType.NEW_STATION,
        "Add to a complete set with Express Service to add $4 to rent",
        2,
    ),
    # Rent
    _rent("rent_blue_brown", (Color.BLUE, Color.BROWN)),
    _rent("rent_pink_orange", (Color.PINK, Color.ORANGE)),
    _rent("rent_red_yellow", (Color.RED, Color.YELLOW)),
    _rent("rent_darkblue_green", (Color.DARKBLUE, Color.GREEN)),
    _rent("rent_railroad_utility", (Color.RAILROAD, Color.UTILITY)),
    Card(
        "rent_wild",
        CardType.RENT,
        "Wild Rent",
        3,
        effect="One player pays you rent for any color",
        quantity=3,
        action=ActionType.PLAY_RENT,
        universal=True,
        targets_all=False,
    ),
    # Money
    _money(1, 6),
    _money(2, 5),
    _money(3, 3),
    _money(4, 3),
    _money(5, 2),
    _money(10, 1),
]


def expand(definition: Card) -> Iterator[Card]:
    """Yield the card instances described by one catalog definition."""
    if definition.quantity == 1:
        yield definition
        return
    for copy in range(1, definition.quantity + 1):
        yield replace(definition, id=f"{definition.id}_{copy}", quantity=1)


class CardCatalog:
    """Read-only lookup of card instances by id."""

    def __init__(self, definitions: Iterable[Card]):
        self.definitions: List[Card] = list(definitions)
        self._cards: Dict[str, Card] = {}
        for definition in self.definitions:
            for card in expand(definition):
                if card.id in self._cards:
                    raise IntegrityError(f"Duplicate card id in catalog: {card.id}")
                self._cards[card.id] = card

    @classmethod
    def standard(cls) -> "CardCatalog":
        """The full 106-card Subway Deal deck."""
        return cls(STANDARD_CARDS)

    def get(self, card_id: str) -> Card:
        try:
            return self._cards[card_id]
        except KeyError:
            raise UnknownCard(f"Unknown card id: {card_id!r}") from None

    def by_type(self, card_type: CardType) -> List[Card]:
        return [card for card in self._cards.values() if card.card_type == card_type]

    def instances(self) -> List[Card]:
        return list(self._cards.values())

    def __contains__(self, card_id: object) -> bool:
        return card_id in self._cards

    def __iter__(self) -> Iterator[Card]:
        return iter(self._cards.values())

    def __len__(self) -> int:
        return len(self._cards)


def build_deck(catalog: CardCatalog, rng: random.Random) -> List[Card]:
    """Create a shuffled draw pile holding every card instance once."""
    deck = catalog.instances()
    rng.shuffle(deck)
    return deck
