"""
Turn ledger: whose turn it is and how many actions they have left.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from subway_deal.exceptions import ActionBudgetExhausted, NotFound


@dataclass
class TurnLedger:
    """Per-match turn counters over a fixed rotation of players."""

    turn_order: List[str]
    max_actions_per_turn: int = 3
    current_index: int = 0
    actions_played: int = 0
    turn_number: int = 1

    @property
    def current_player(self) -> str:
        return self.turn_order[self.current_index % len(self.turn_order)]

    @property
    def remaining(self) -> int:
        return self.max_actions_per_turn - self.actions_played

    def require(self, units: int = 1) -> None:
        """Fail unless ``units`` actions are still available this turn."""
        if self.actions_played + units > self.max_actions_per_turn:
            raise ActionBudgetExhausted(
                f"{self.current_player} has played {self.actions_played} of "
                f"{self.max_actions_per_turn} actions"
            )

    def consume_action(self, units: int = 1) -> int:
        self.require(units)
        self.actions_played += units
        return self.actions_played

    def advance_turn(self) -> str:
        """Reset the budget and rotate to the next player."""
        self.actions_played = 0
        self.current_index = (self.current_index + 1) % len(self.turn_order)
        self.turn_number += 1
        return self.current_player

    def opponents_of(self, player_id: str) -> List[str]:
        """Other players in turn order, starting with the one after ``player_id``."""
        if player_id not in self.turn_order:
            raise NotFound(f"Unknown player: {player_id!r}")
        start = self.turn_order.index(player_id)
        count = len(self.turn_order)
        return [self.turn_order[(start + offset) % count] for offset in range(1, count)]
