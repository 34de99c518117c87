"""
Match state and the primitives the rules engine mutates it through.
"""

from __future__ import annotations

import copy
import logging
import random
from typing import Any, Dict, Iterable, List, Optional

from subway_deal.cards import Card, CardCatalog, build_deck
from subway_deal.config import GameConfig
from subway_deal.events import EventLog, EventType
from subway_deal.exceptions import NotEligible, NotFound, PendingActionOutstanding
from subway_deal.pending import PendingAction, PendingActionQueue
from subway_deal.player import Player, PlayerState
from subway_deal.properties import PropertyBook
from subway_deal.turns import TurnLedger
from subway_deal.types import GamePhase

logger = logging.getLogger(__name__)

# Attributes a submission may change; everything else is fixed for the match.
TABLE_STATE = ("players", "book", "ledger", "draw_pile", "discard_pile", "pending_action", "winner")


class GameState:
    """
    Represents the complete state of a Subway Deal match.
    Owned by the rules engine; the property book, turn ledger and
    pending queue are views over this object, never copies of it.
    """

    def __init__(
        self,
        config: GameConfig,
        players: List[Player],
        catalog: Optional[CardCatalog] = None,
        deck: Optional[Iterable[Card]] = None,
    ):
        self.config = config
        self.catalog = catalog or CardCatalog.standard()
        self.event_log = EventLog()

        # Initialize RNG
        self.rng = random.Random(config.seed)

        # Initialize players, keeping lobby order as turn order
        self.players: Dict[str, PlayerState] = {}
        for player in players:
            if player.player_id in self.players:
                raise ValueError(f"Duplicate player id: {player.player_id}")
            self.players[player.player_id] = PlayerState(player.player_id, player.name)

        self.ledger = TurnLedger(list(self.players), config.max_actions_per_turn)

        if deck is None:
            self.draw_pile: List[Card] = build_deck(self.catalog, self.rng)
        else:
            self.draw_pile = [self.catalog.get(card.id) for card in deck]
        self.discard_pile: List[Card] = []

        self.pending_action: Optional[PendingAction] = None
        self.winner: Optional[str] = None

        self.book = PropertyBook(self.players, config)
        self.queue = PendingActionQueue(self)

    @property
    def phase(self) -> GamePhase:
        if self.winner is not None:
            return GamePhase.GAME_OVER
        if self.pending_action is not None:
            return GamePhase.AWAITING_RESPONSE
        return GamePhase.PLAYING

    @property
    def game_over(self) -> bool:
        return self.winner is not None

    @property
    def current_player_id(self) -> str:
        return self.ledger.current_player

    def get_current_player(self) -> PlayerState:
        """Get the player whose turn it is."""
        return self.players[self.ledger.current_player]

    def get_player(self, player_id: str) -> PlayerState:
        try:
            return self.players[player_id]
        except KeyError:
            raise NotFound(f"Unknown player: {player_id!r}") from None

    def opponents(self, player_id: str) -> List[str]:
        return self.ledger.opponents_of(player_id)

    # === Deck ===

    def _draw_one(self) -> Optional[Card]:
        if not self.draw_pile and self.discard_pile:
            self.draw_pile = self.discard_pile
            self.discard_pile = []
            self.rng.shuffle(self.draw_pile)
            self.event_log.log(EventType.RESHUFFLE, cards=len(self.draw_pile))
        if not self.draw_pile:
            return None
        return self.draw_pile.pop(0)

    def draw_cards(self, player_id: str, count: int) -> List[Card]:
        """Move up to ``count`` cards from the draw pile into a hand."""
        player = self.get_player(player_id)
        drawn: List[Card] = []
        for _ in range(count):
            card = self._draw_one()
            if card is None:
                break
            player.hand.append(card)
            drawn.append(card)
        self.event_log.log(EventType.DRAW, player_id=player_id, count=len(drawn))
        return drawn

    def discard(self, card: Card) -> None:
        self.discard_pile.append(card)

    # === Turn flow ===

    def deal(self) -> None:
        for player_id in self.ledger.turn_order:
            self.draw_cards(player_id, self.config.initial_hand_size)

    def start_turn(self) -> None:
        """Draw for the current player: two cards, or five from an empty hand."""
        player = self.get_current_player()
        count = self.config.empty_hand_draw if not player.hand else self.config.draw_per_turn
        self.event_log.log(
            EventType.TURN_START, player_id=player.player_id, turn=self.ledger.turn_number
        )
        self.draw_cards(player.player_id, count)

    def enforce_hand_limit(self, player_id: str, discard_ids: Iterable[str] = ()) -> List[Card]:
        """
        Discard the chosen cards, then trim any remaining excess.
        Excess beyond the hand limit is taken from the most recently drawn cards.
        A player may not choose more discards than the excess.
        """
        player = self.get_player(player_id)
        chosen = [self.catalog.get(card_id) for card_id in discard_ids]
        excess = max(0, len(player.hand) - self.config.hand_limit)
        if len(chosen) > excess:
            raise NotEligible(
                f"{player.name} may discard at most {excess} card(s), chose {len(chosen)}"
            )
        discarded: List[Card] = []
        for card in chosen:
            card = player.take_from_hand(card.id)
            self.discard(card)
            discarded.append(card)
        while len(player.hand) > self.config.hand_limit:
            card = player.hand.pop()
            self.discard(card)
            discarded.append(card)
        if discarded:
            self.event_log.log(
                EventType.DISCARD, player_id=player_id, cards=[c.id for c in discarded]
            )
        return discarded

    def advance_turn(self) -> str:
        """Rotate to the next player and start their turn."""
        if self.pending_action is not None:
            raise PendingActionOutstanding(
                f"{self.pending_action.action_type.value} is still awaiting responses"
            )
        self.event_log.log(
            EventType.TURN_END,
            player_id=self.ledger.current_player,
            actions_played=self.ledger.actions_played,
        )
        next_player = self.ledger.advance_turn()
        self.start_turn()
        return next_player

    # === Win condition ===

    def check_winner(self) -> Optional[str]:
        """
        End the match as soon as any player holds enough complete sets.
        Any outstanding responses are abandoned.
        """
        if self.winner is not None:
            return self.winner
        for player_id in self.ledger.turn_order:
            player = self.players[player_id]
            if player.complete_sets >= self.config.sets_to_win:
                self.winner = player_id
                abandoned = self.pending_action
                self.pending_action = None
                self.event_log.log(
                    EventType.GAME_END,
                    player_id=player_id,
                    complete_sets=player.complete_sets,
                    abandoned=abandoned.action_type.value if abandoned else None,
                )
                logger.info("Match won by %s (%s)", player.name, player_id)
                return player_id
        return None

    # === Transactions ===

    def checkpoint(self) -> Dict[str, Any]:
        """
        Copy the table state so a failed submission can be undone.
        Cards and config are immutable and stay shared; the event log is
        only appended to, so remembering its length is enough.
        """
        memo: Dict[int, Any] = {id(self): self, id(self.config): self.config}
        memo.update((id(card), card) for card in self.catalog)
        state = copy.deepcopy({name: getattr(self, name) for name in TABLE_STATE}, memo)
        state["rng_state"] = self.rng.getstate()
        state["event_count"] = len(self.event_log)
        return state

    def restore(self, checkpoint: Dict[str, Any]) -> None:
        for name in TABLE_STATE:
            setattr(self, name, checkpoint[name])
        self.rng.setstate(checkpoint["rng_state"])
        self.event_log.truncate(checkpoint["event_count"])


def create_game(
    config: GameConfig,
    players: List[Player],
    catalog: Optional[CardCatalog] = None,
    deck: Optional[Iterable[Card]] = None,
) -> GameState:
    """
    Create a new match: deal opening hands and start the first turn.

    Args:
        config: Game configuration
        players: Ordered players supplied by the lobby (turn order)
        catalog: Card catalog (defaults to the standard deck)
        deck: Explicit draw order; shuffled from the catalog when omitted

    Returns:
        Initialized GameState
    """
    if not config.min_players <= len(players) <= config.max_players:
        raise ValueError(
            f"Match requires {config.min_players}-{config.max_players} players, got {len(players)}"
        )

    game = GameState(config, players, catalog=catalog, deck=deck)
    game.event_log.log(
        EventType.GAME_START,
        players=[p.name for p in players],
        seed=config.seed,
    )
    game.deal()
    game.start_turn()
    return game
