"""
Pending actions: the response sub-protocol.

A targeted action suspends the source player's turn until every target has
either accepted the effect or cancelled it with a Fare Evasion card. Targets
respond strictly one at a time, in queue order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from subway_deal.exceptions import (
    AlreadyPending,
    CorruptedSet,
    NoCounterAvailable,
    NoSuchSet,
    NotEligible,
    NotFound,
)
from subway_deal.events import EventType
from subway_deal.types import ActionType, Color

if TYPE_CHECKING:
    from subway_deal.game import GameState

logger = logging.getLogger(__name__)

PAYMENT_ACTIONS = frozenset(
    {ActionType.PLAY_RENT, ActionType.MISSED_YOUR_TRAIN, ActionType.ITS_MY_STOP}
)


@dataclass
class Payment:
    """Outcome of one player settling a debt."""

    payer_id: str
    payee_id: str
    amount_due: int
    paid: int = 0
    bank_cards: List[str] = field(default_factory=list)
    property_cards: List[str] = field(default_factory=list)

    @property
    def shortfall(self) -> int:
        return max(0, self.amount_due - self.paid)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from": self.payer_id,
            "to": self.payee_id,
            "amount_due": self.amount_due,
            "paid": self.paid,
            "shortfall": self.shortfall,
            "bank_cards": list(self.bank_cards),
            "property_cards": list(self.property_cards),
        }


@dataclass
class PendingAction:
    """An action waiting on target responses."""

    action_type: ActionType
    source_player: str
    targets: List[str]
    payload: Any = None
    rent_amount: int = 0
    rent_color: Optional[Color] = None
    accepted: List[str] = field(default_factory=list)
    countered: List[str] = field(default_factory=list)

    def current_target(self) -> str:
        return self.targets[0]


class PendingActionQueue:
    """Creates, advances and clears the single in-flight pending action."""

    def __init__(self, game: "GameState"):
        self._game = game

    @property
    def active(self) -> Optional[PendingAction]:
        return self._game.pending_action

    def _require(self) -> PendingAction:
        pending = self._game.pending_action
        if pending is None:
            raise NotFound("No action is awaiting a response")
        return pending

    def enqueue(
        self,
        action_type: ActionType,
        source_player: str,
        targets: List[str],
        payload: Any = None,
        rent_amount: int = 0,
        rent_color: Optional[Color] = None,
    ) -> PendingAction:
        if self._game.pending_action is not None:
            raise AlreadyPending(
                f"{self._game.pending_action.action_type.value} is still awaiting responses"
            )
        if not targets:
            raise NotEligible(f"{action_type.value} has no one to target")
        if source_player in targets:
            raise NotEligible("A player cannot target themselves")

        pending = PendingAction(
            action_type=action_type,
            source_player=source_player,
            targets=list(targets),
            payload=payload,
            rent_amount=rent_amount,
            rent_color=rent_color,
        )
        self._game.pending_action = pending
        self._game.event_log.log(
            EventType.DEMAND,
            player_id=source_player,
            action=action_type.value,
            targets=list(targets),
            rent_amount=rent_amount,
            rent_color=rent_color.value if rent_color else None,
        )
        return pending

    def current_target(self) -> str:
        return self._require().current_target()

    def resolve_accept(self) -> Dict[str, Any]:
        """Apply the pending effect to the current target and pop them."""
        pending = self._require()
        target = pending.current_target()
        outcome = self._apply_effect(pending, target)
        pending.accepted.append(target)
        self._pop(pending)
        return outcome

    def resolve_counter(self, card_id: str) -> Dict[str, Any]:
        """Cancel the current target's obligation with a Fare Evasion card."""
        pending = self._require()
        target = pending.current_target()
        player = self._game.players[target]
        card = player.hand_card(card_id)
        if card is None or card.action != ActionType.PLAY_FARE_EVASION:
            raise NoCounterAvailable(f"{player.name} holds no Fare Evasion card {card_id!r}")

        player.hand.remove(card)
        self._game.discard(card)
        pending.countered.append(target)
        self._game.event_log.log(
            EventType.COUNTERED,
            player_id=target,
            action=pending.action_type.value,
            source=pending.source_player,
            card=card.id,
        )
        self._pop(pending)
        return {"countered": target}

    def _pop(self, pending: PendingAction) -> None:
        pending.targets.pop(0)
        if pending.targets:
            return
        self._game.pending_action = None
        self._game.event_log.log(
            EventType.PENDING_RESOLVED,
            player_id=pending.source_player,
            action=pending.action_type.value,
            accepted=list(pending.accepted),
            countered=list(pending.countered),
        )

    def _apply_effect(self, pending: PendingAction, target: str) -> Dict[str, Any]:
        source = pending.source_player
        book = self._game.book
        payload = pending.payload
        try:
            if pending.action_type in PAYMENT_ACTIONS:
                payment = self.collect(target, source, pending.rent_amount)
                return {"payment": payment.to_dict()}

            if pending.action_type == ActionType.POWER_BROKER:
                card = book.move_card(target, source, payload.color, payload.target_card_id)
                self._game.event_log.log(
                    EventType.PROPERTY_STOLEN,
                    player_id=source,
                    victim=target,
                    card=card.id,
                    color=payload.color.value,
                )
                return {"stolen": card.id}

            if pending.action_type == ActionType.LINE_CLOSURE:
                stolen = book.get_set(target, payload.color)
                card_ids = [card.id for card in stolen.cards]
                improvements = [kind.value for kind in stolen.improvements]
                book.transfer_set(target, source, payload.color)
                self._game.event_log.log(
                    EventType.SET_STOLEN,
                    player_id=source,
                    victim=target,
                    color=payload.color.value,
                    cards=card_ids,
                    improvements=improvements,
                )
                return {"stolen_set": payload.color.value, "cards": card_ids}

            if pending.action_type == ActionType.SERVICE_CHANGE:
                given = book.remove(source, payload.player_color, payload.player_card_id)
                taken = book.remove(target, payload.color, payload.target_card_id)
                book.place(source, payload.color, taken)
                book.place(target, payload.player_color, given)
                self._game.event_log.log(
                    EventType.PROPERTY_SWAPPED,
                    player_id=source,
                    victim=target,
                    given=given.id,
                    taken=taken.id,
                )
                return {"given": given.id, "taken": taken.id}
        except (NotFound, NoSuchSet) as exc:
            raise CorruptedSet(
                f"{pending.action_type.value} against {target} no longer matches the table: {exc.message}"
            ) from exc

        raise CorruptedSet(f"No resolution for pending {pending.action_type.value}")

    def collect(self, payer_id: str, payee_id: str, amount: int) -> Payment:
        """
        Move value from payer to payee.

        Bank cards go first, smallest first, until the debt is covered; no
        change is given. If the bank runs dry, property cards follow,
        highest value first. Whatever cannot be covered is a shortfall.
        """
        payer = self._game.players[payer_id]
        payee = self._game.players[payee_id]
        payment = Payment(payer_id, payee_id, amount)

        for card in sorted(payer.bank, key=lambda c: c.value):
            if payment.paid >= amount:
                break
            payer.bank.remove(card)
            payee.bank.append(card)
            payment.paid += card.value
            payment.bank_cards.append(card.id)

        if payment.paid < amount:
            table = [
                (card, color)
                for color, property_set in payer.properties.items()
                for card in property_set.cards
            ]
            table.sort(key=lambda item: item[0].value, reverse=True)
            for card, color in table:
                if payment.paid >= amount:
                    break
                if card.value <= 0:
                    continue
                self._game.book.move_card(payer_id, payee_id, color, card.id)
                payment.paid += card.value
                payment.property_cards.append(card.id)

        if payment.shortfall:
            logger.debug("%s is short %d paying %s", payer_id, payment.shortfall, payee_id)
        self._game.event_log.log(EventType.PAYMENT, player_id=payer_id, **payment.to_dict())
        return payment
