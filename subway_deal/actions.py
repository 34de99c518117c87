"""
Action vocabulary: one typed payload per action kind.

Clients submit ``{type, playerId, data}`` with camelCase keys; every choice
(target player, target card, color) must be given explicitly in ``data``.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple, Type

from subway_deal.exceptions import MalformedPayload, UnknownAction
from subway_deal.types import ActionType, Color


@dataclass(frozen=True)
class EndTurn:
    discard_card_ids: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PlayCard:
    """Payload for actions that only name the card being played."""

    card_id: str


@dataclass(frozen=True)
class PlayProperty:
    card_id: str
    color: Optional[Color] = None


@dataclass(frozen=True)
class PlayRent:
    card_id: str
    color: Color
    target_player_id: Optional[str] = None
    rush_hour_card_id: Optional[str] = None


@dataclass(frozen=True)
class FlipWildcard:
    card_id: str
    color: Color


@dataclass(frozen=True)
class StealProperty:
    card_id: str
    target_player_id: str
    color: Color
    target_card_id: str


@dataclass(frozen=True)
class StealSet:
    card_id: str
    target_player_id: str
    color: Color


@dataclass(frozen=True)
class SwapProperties:
    card_id: str
    target_player_id: str
    color: Color
    target_card_id: str
    player_color: Color
    player_card_id: str


@dataclass(frozen=True)
class CollectDebt:
    card_id: str
    target_player_id: str


@dataclass(frozen=True)
class Improve:
    card_id: str
    color: Color


@dataclass(frozen=True)
class Accept:
    pass


PAYLOAD_TYPES: Dict[ActionType, Type[Any]] = {
    ActionType.END_TURN: EndTurn,
    ActionType.PLAY_MONEY: PlayCard,
    ActionType.PLAY_PROPERTY: PlayProperty,
    ActionType.PLAY_RENT: PlayRent,
    ActionType.FLIP_WILDCARD: FlipWildcard,
    ActionType.SWIPE_IN: PlayCard,
    ActionType.POWER_BROKER: StealProperty,
    ActionType.LINE_CLOSURE: StealSet,
    ActionType.SERVICE_CHANGE: SwapProperties,
    ActionType.MISSED_YOUR_TRAIN: CollectDebt,
    ActionType.ITS_MY_STOP: PlayCard,
    ActionType.EXPRESS_SERVICE: Improve,
    ActionType.NEW_STATION: Improve,
    ActionType.ACCEPT: Accept,
    ActionType.PLAY_FARE_EVASION: PlayCard,
}


def wire_key(field_name: str) -> str:
    """``target_player_id`` -> ``targetPlayerId``."""
    head, *rest = field_name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def parse_action_type(value: Any) -> ActionType:
    if isinstance(value, ActionType):
        return value
    try:
        return ActionType(str(value).upper())
    except ValueError:
        raise UnknownAction(f"Unknown action type: {value!r}") from None


def _coerce(action_type: ActionType, key: str, field_name: str, value: Any) -> Any:
    if field_name.endswith("color"):
        return Color.parse(value)
    if field_name.endswith("_ids"):
        if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
            raise MalformedPayload(f"{action_type.value}: {key} must be a list of card ids")
        return tuple(value)
    if not isinstance(value, str):
        raise MalformedPayload(f"{action_type.value}: {key} must be a string")
    return value


def parse_payload(action_type: Any, data: Optional[Mapping[str, Any]] = None) -> Any:
    """Build the typed payload for ``action_type`` from wire data."""
    action_type = parse_action_type(action_type)
    payload_cls = PAYLOAD_TYPES.get(action_type)
    if payload_cls is None:
        raise UnknownAction(f"{action_type.value} cannot be submitted on its own")
    if data is None:
        data = {}
    if not isinstance(data, Mapping):
        raise MalformedPayload(f"{action_type.value}: data must be an object")

    kwargs: Dict[str, Any] = {}
    for field in dataclasses.fields(payload_cls):
        key = wire_key(field.name)
        value = data.get(key)
        required = field.default is dataclasses.MISSING
        if value is None or value == "":
            if required:
                raise MalformedPayload(f"{action_type.value} requires {key}")
            continue
        kwargs[field.name] = _coerce(action_type, key, field.name, value)
    return payload_cls(**kwargs)

