from __future__ import annotations

from enum import Enum

from subway_deal.exceptions import UnknownColor


class Color(str, Enum):
    BROWN = "brown"
    BLUE = "blue"
    PINK = "pink"
    ORANGE = "orange"
    RED = "red"
    YELLOW = "yellow"
    GREEN = "green"
    DARKBLUE = "darkblue"
    RAILROAD = "railroad"
    UTILITY = "utility"

    @classmethod
    def parse(cls, value: object) -> "Color":
        """Resolve a color tag; an undefined tag is an integrity error."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise UnknownColor(f"Unknown color: {value!r}") from None


class CardType(str, Enum):
    PROPERTY = "property"
    WILDCARD = "wildcard"
    RENT = "rent"
    MONEY = "money"
    ACTION = "action"


class ActionType(str, Enum):
    END_TURN = "END_TURN"
    PLAY_MONEY = "PLAY_MONEY"
    PLAY_PROPERTY = "PLAY_PROPERTY"
    PLAY_RENT = "PLAY_RENT"
    FLIP_WILDCARD = "FLIP_WILDCARD"

    SWIPE_IN = "SWIPE_IN"
    POWER_BROKER = "POWER_BROKER"
    LINE_CLOSURE = "LINE_CLOSURE"
    SERVICE_CHANGE = "SERVICE_CHANGE"
    MISSED_YOUR_TRAIN = "MISSED_YOUR_TRAIN"
    ITS_MY_STOP = "ITS_MY_STOP"
    RUSH_HOUR = "RUSH_HOUR"
    EXPRESS_SERVICE = "EXPRESS_SERVICE"
    NEW_STATION = "NEW_STATION"

    ACCEPT = "ACCEPT"
    PLAY_FARE_EVASION = "PLAY_FARE_EVASION"


RESPONSE_ACTIONS = frozenset({ActionType.ACCEPT, ActionType.PLAY_FARE_EVASION})


class Improvement(str, Enum):
    EXPRESS = "express"
    STATION = "station"


class GamePhase(str, Enum):
    PLAYING = "playing"
    AWAITING_RESPONSE = "awaiting_response"
    GAME_OVER = "game_over"
