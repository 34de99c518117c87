"""
Game configuration settings.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class GameConfig:
    """Configuration for a Subway Deal match."""

    max_actions_per_turn: int = 3
    hand_limit: int = 7

    initial_hand_size: int = 5
    draw_per_turn: int = 2
    empty_hand_draw: int = 5

    sets_to_win: int = 3

    express_bonus: int = 3
    station_bonus: int = 4

    missed_train_amount: int = 5
    its_my_stop_amount: int = 2

    min_players: int = 2
    max_players: int = 5

    seed: Optional[int] = None
