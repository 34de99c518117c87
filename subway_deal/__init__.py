"""
Subway Deal Rules Engine

An authoritative, deterministic implementation of the Subway Deal card game rules.
"""

from .cards import Card, CardCatalog
from .config import GameConfig
from .exceptions import IntegrityError, SubwayDealError, ValidationError
from .game import GameState, create_game
from .player import Player, PlayerState
from .rules import ActionResult, get_legal_actions, submit
from .snapshot import serialize_view
from .types import ActionType, Color, GamePhase

__all__ = [
    "ActionResult",
    "ActionType",
    "Card",
    "CardCatalog",
    "Color",
    "GameConfig",
    "GamePhase",
    "GameState",
    "IntegrityError",
    "Player",
    "PlayerState",
    "SubwayDealError",
    "ValidationError",
    "create_game",
    "get_legal_actions",
    "serialize_view",
    "submit",
]
