"""
High-level rules API for controlling game flow.
This module provides the public interface for submitting actions and legal move detection.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from subway_deal.actions import PAYLOAD_TYPES, parse_action_type, parse_payload
from subway_deal.effects import HANDLERS
from subway_deal.exceptions import (
    GameAlreadyOver,
    IntegrityError,
    NotEligible,
    NotYourResponse,
    NotYourTurn,
    SubwayDealError,
    ValidationError,
)
from subway_deal.game import GameState
from subway_deal.types import RESPONSE_ACTIONS, ActionType, CardType, Color, GamePhase, Improvement

logger = logging.getLogger(__name__)

# Actions that do not draw on the active player's budget.
FREE_ACTIONS = frozenset({ActionType.END_TURN, ActionType.FLIP_WILDCARD}) | RESPONSE_ACTIONS


@dataclass
class ActionResult:
    """Typed outcome of one submission; the engine never raises past ``submit``."""

    accepted: bool
    reason: Optional[str] = None
    message: str = ""
    outcome: Dict[str, Any] = field(default_factory=dict)
    events: List[Dict[str, Any]] = field(default_factory=list)

    @classmethod
    def rejected(cls, error: SubwayDealError) -> "ActionResult":
        return cls(False, reason=error.code, message=error.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"accepted": self.accepted, "reason": self.reason, "message": self.message}


def _check_turn(game: GameState, player_id: str, action_type: ActionType) -> None:
    if game.phase == GamePhase.AWAITING_RESPONSE:
        pending = game.pending_action
        if player_id != pending.current_target() or action_type not in RESPONSE_ACTIONS:
            raise NotYourResponse(
                f"Waiting on {pending.current_target()} to answer {pending.action_type.value}"
            )
        return

    if player_id != game.current_player_id:
        raise NotYourTurn(f"It is {game.current_player_id}'s turn")
    if action_type in RESPONSE_ACTIONS:
        raise NotEligible(f"{action_type.value} is only a response to a pending action")
    if action_type not in FREE_ACTIONS:
        game.ledger.require()


def _apply(game: GameState, player_id: str, action_type: Any, data: Any) -> Dict[str, Any]:
    if game.phase == GamePhase.GAME_OVER:
        raise GameAlreadyOver(f"{game.players[game.winner].name} has already won")
    action_type = parse_action_type(action_type)
    _check_turn(game, player_id, action_type)

    payload_cls = PAYLOAD_TYPES.get(action_type)
    if payload_cls is not None and isinstance(data, payload_cls):
        payload = data
    else:
        payload = parse_payload(action_type, data)
    outcome = HANDLERS[action_type](game, player_id, payload)
    game.check_winner()
    return outcome


def submit(game: GameState, player_id: str, action_type: Any, data: Any = None) -> ActionResult:
    """
    Submit one action to the match.

    This is the engine boundary: the action is applied atomically or not
    at all, and every failure comes back as a rejected ActionResult.

    Args:
        game: Match state (mutated in place on success)
        player_id: Submitting player
        action_type: ActionType or its wire name
        data: Wire payload (camelCase mapping) or an already typed payload

    Returns:
        ActionResult describing acceptance, reason code and new events
    """
    checkpoint = game.checkpoint()
    mark = len(game.event_log)
    try:
        outcome = _apply(game, player_id, action_type, data)
    except ValidationError as e:
        game.restore(checkpoint)
        logger.info("Rejected %s from %s: %s (%s)", action_type, player_id, e.code, e.message)
        return ActionResult.rejected(e)
    except IntegrityError as e:
        game.restore(checkpoint)
        logger.error("Integrity failure on %s from %s: %s (%s)", action_type, player_id, e.code, e.message)
        return ActionResult.rejected(e)
    except Exception:
        game.restore(checkpoint)
        logger.exception("Failed to apply %s from %s", action_type, player_id)
        return ActionResult(False, reason="Internal", message="Unexpected engine failure")

    logger.debug("Applied %s from %s: %s", action_type, player_id, outcome)
    return ActionResult(
        True,
        outcome=outcome,
        events=[event.to_dict() for event in game.event_log.since(mark)],
    )


@dataclass
class LegalAction:
    """A move the display layer can offer; choices still have to be filled in."""

    action_type: ActionType
    card_id: Optional[str] = None
    colors: Tuple[Color, ...] = ()
    targets: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.action_type.value}
        if self.card_id is not None:
            data["cardId"] = self.card_id
        if self.colors:
            data["colors"] = [color.value for color in self.colors]
        if self.targets:
            data["targets"] = list(self.targets)
        return data

    def __repr__(self) -> str:
        return f"LegalAction({self.action_type.value}, {self.card_id})"


def get_legal_actions(game: GameState, player_id: str) -> List[LegalAction]:
    """
    Get all legal actions available to a player.

    Args:
        game: Current game state
        player_id: Player to get actions for

    Returns:
        List of LegalAction objects (empty when the player cannot act)
    """
    if game.game_over or player_id not in game.players:
        return []

    player = game.players[player_id]
    actions: List[LegalAction] = []

    # During a response phase only the current target may act
    if game.pending_action is not None:
        if game.pending_action.current_target() != player_id:
            return []
        actions.append(LegalAction(ActionType.ACCEPT))
        for card in player.hand:
            if card.action == ActionType.PLAY_FARE_EVASION:
                actions.append(LegalAction(ActionType.PLAY_FARE_EVASION, card.id))
        return actions

    if game.current_player_id != player_id:
        return []

    actions.append(LegalAction(ActionType.END_TURN))
    actions.extend(_flip_actions(game, player_id))
    if game.ledger.remaining < 1:
        return actions

    for card in player.hand:
        actions.extend(_card_actions(game, player_id, card))
    return actions


def _flip_actions(game: GameState, player_id: str) -> List[LegalAction]:
    actions: List[LegalAction] = []
    for color, property_set in game.players[player_id].properties.items():
        if property_set.is_complete:
            continue
        for card in property_set.cards:
            if card.card_type != CardType.WILDCARD:
                continue
            options = tuple(c for c in Color if c != color and card.can_be(c))
            if options:
                actions.append(LegalAction(ActionType.FLIP_WILDCARD, card.id, options))
    return actions


def _card_actions(game: GameState, player_id: str, card) -> List[LegalAction]:
    player = game.players[player_id]
    opponents = tuple(game.opponents(player_id))
    actions: List[LegalAction] = []

    if card.is_property:
        colors = tuple(c for c in Color if card.can_be(c))
        actions.append(LegalAction(ActionType.PLAY_PROPERTY, card.id, colors))
        return actions

    if card.value > 0:
        actions.append(LegalAction(ActionType.PLAY_MONEY, card.id))

    if card.card_type == CardType.RENT:
        colors = tuple(c for c in player.properties if card.can_be(c))
        if colors:
            actions.append(LegalAction(ActionType.PLAY_RENT, card.id, colors, opponents))
        return actions

    action = card.action
    if action in (ActionType.SWIPE_IN, ActionType.ITS_MY_STOP, ActionType.MISSED_YOUR_TRAIN):
        targets = () if action == ActionType.SWIPE_IN else opponents
        actions.append(LegalAction(action, card.id, targets=targets))
    elif action == ActionType.POWER_BROKER:
        targets = tuple(o for o in opponents if _has_set(game, o, complete=False))
        if targets:
            actions.append(LegalAction(action, card.id, targets=targets))
    elif action == ActionType.LINE_CLOSURE:
        targets = tuple(o for o in opponents if _has_set(game, o, complete=True))
        if targets:
            actions.append(LegalAction(action, card.id, targets=targets))
    elif action == ActionType.SERVICE_CHANGE:
        targets = tuple(o for o in opponents if _has_set(game, o, complete=False))
        if targets and _has_set(game, player_id, complete=False):
            actions.append(LegalAction(action, card.id, targets=targets))
    elif action in (ActionType.EXPRESS_SERVICE, ActionType.NEW_STATION):
        kind = Improvement.EXPRESS if action == ActionType.EXPRESS_SERVICE else Improvement.STATION
        colors = tuple(c for c, s in player.properties.items() if s.can_improve(kind))
        if colors:
            actions.append(LegalAction(action, card.id, colors))
    return actions


def _has_set(game: GameState, player_id: str, complete: bool) -> bool:
    return any(s.is_complete == complete for s in game.players[player_id].properties.values())
