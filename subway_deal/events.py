"""
Game event logging.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class EventType(Enum):
    """Types of game events."""

    GAME_START = "game_start"
    TURN_START = "turn_start"
    TURN_END = "turn_end"

    DRAW = "draw"
    RESHUFFLE = "reshuffle"
    DISCARD = "discard"

    BANK = "bank"
    PLAY_PROPERTY = "play_property"
    FLIP_WILDCARD = "flip_wildcard"
    IMPROVEMENT = "improvement"
    ACTION_PLAYED = "action_played"

    DEMAND = "demand"
    PAYMENT = "payment"
    PROPERTY_STOLEN = "property_stolen"
    SET_STOLEN = "set_stolen"
    PROPERTY_SWAPPED = "property_swapped"
    COUNTERED = "countered"
    PENDING_RESOLVED = "pending_resolved"

    GAME_END = "game_end"


@dataclass
class GameEvent:
    """A logged event in the game."""

    event_type: EventType
    player_id: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"event_type": self.event_type.value}
        if self.player_id is not None:
            data["player_id"] = self.player_id
        data.update(self.details)
        return data

    def __repr__(self) -> str:
        player_str = self.player_id if self.player_id is not None else "System"
        return f"[{player_str}] {self.event_type.value}: {self.details}"


class EventLog:
    """Manages the game event log."""

    def __init__(self):
        self.events: List[GameEvent] = []

    def log(self, event_type: EventType, player_id: Optional[str] = None, **details: Any) -> GameEvent:
        """Log a game event."""
        event = GameEvent(event_type, player_id, details)
        self.events.append(event)
        return event

    def get_events(self) -> List[GameEvent]:
        """Get all logged events."""
        return self.events.copy()

    def truncate(self, length: int) -> None:
        """Forget every event after the first ``length`` entries."""
        del self.events[length:]

    def since(self, index: int) -> List[GameEvent]:
        """Events logged after the first ``index`` entries."""
        return self.events[index:]

    def __len__(self) -> int:
        return len(self.events)
