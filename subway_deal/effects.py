"""
Card effects: one handler per action kind.

Every handler validates its whole payload before touching state, then
either mutates immediately (banking, drawing, placing, improving) or hands
the effect to the pending queue when other players must respond.
Handlers return a small dict describing the outcome.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from subway_deal.actions import (
    Accept,
    CollectDebt,
    EndTurn,
    FlipWildcard,
    Improve,
    PlayCard,
    PlayProperty,
    PlayRent,
    StealProperty,
    StealSet,
    SwapProperties,
)
from subway_deal.cards import Card
from subway_deal.events import EventType
from subway_deal.exceptions import (
    CardNotBankable,
    CardNotInHand,
    InvalidPlacement,
    MalformedPayload,
    NotEligible,
    NotFound,
)
from subway_deal.game import GameState
from subway_deal.properties import PropertySet
from subway_deal.types import ActionType, CardType, Color, Improvement

Handler = Callable[[GameState, str, Any], Dict[str, Any]]


# === Shared validation ===


def _hand_card(game: GameState, player_id: str, card_id: str) -> Card:
    """Resolve a held card; ids missing from the catalog raise UnknownCard."""
    game.catalog.get(card_id)
    player = game.get_player(player_id)
    card = player.hand_card(card_id)
    if card is None:
        raise CardNotInHand(f"{player.name} does not hold {card_id}")
    return card


def _action_card(game: GameState, player_id: str, card_id: str, action_type: ActionType) -> Card:
    """The card must be in hand and must actually perform ``action_type``."""
    card = _hand_card(game, player_id, card_id)
    if card.action != action_type:
        raise NotEligible(f"{card.name} cannot be played as {action_type.value}")
    return card


def _opponent(game: GameState, player_id: str, target_id: Optional[str]) -> str:
    if not target_id:
        raise MalformedPayload("targetPlayerId is required")
    if target_id == player_id:
        raise NotEligible("A player cannot target themselves")
    if target_id not in game.players:
        raise NotFound(f"Unknown player: {target_id!r}")
    return target_id


def _stealable_card(game: GameState, owner_id: str, color: Color, card_id: str) -> PropertySet:
    """The named card must sit in the owner's set of ``color``, and that set must be incomplete."""
    game.catalog.get(card_id)
    property_set = game.book.get_set(owner_id, color)
    if property_set.card(card_id) is None:
        raise NotFound(f"{card_id} is not in {owner_id}'s {color.value} set")
    if property_set.is_complete:
        raise NotEligible(f"{owner_id}'s {color.value} set is complete")
    return property_set


def _spend(game: GameState, player_id: str, card: Card) -> None:
    """Charge the budget, discard the played card and record the play."""
    game.ledger.consume_action()
    game.get_player(player_id).take_from_hand(card.id)
    game.discard(card)
    game.event_log.log(
        EventType.ACTION_PLAYED,
        player_id=player_id,
        card=card.id,
        action=card.action.value if card.action else None,
    )


# === Immediate effects ===


def end_turn(game: GameState, player_id: str, payload: EndTurn) -> Dict[str, Any]:
    discarded = game.enforce_hand_limit(player_id, payload.discard_card_ids)
    next_player = game.advance_turn()
    return {"discarded": [card.id for card in discarded], "next_player": next_player}


def play_money(game: GameState, player_id: str, payload: PlayCard) -> Dict[str, Any]:
    """Place a card from hand into the bank."""
    card = _hand_card(game, player_id, payload.card_id)
    if card.is_property or card.value <= 0:
        raise CardNotBankable(f"{card.name} has no bank value")

    game.ledger.consume_action()
    player = game.get_player(player_id)
    player.take_from_hand(card.id)
    player.bank.append(card)
    game.event_log.log(EventType.BANK, player_id=player_id, card=card.id, value=card.value)
    return {"banked": card.id, "bank_total": player.bank_total}


def play_property(game: GameState, player_id: str, payload: PlayProperty) -> Dict[str, Any]:
    card = _hand_card(game, player_id, payload.card_id)
    if not card.is_property:
        raise NotEligible(f"{card.name} is not a property")
    color = payload.color
    if color is None:
        if card.card_type == CardType.WILDCARD:
            raise MalformedPayload(f"{card.name} is a wildcard: color is required")
        color = card.colors[0]
    if not card.can_be(color):
        raise InvalidPlacement(f"{card.name} cannot be used as {color.value}")

    game.ledger.consume_action()
    game.get_player(player_id).take_from_hand(card.id)
    property_set = game.book.place(player_id, color, card)
    game.event_log.log(
        EventType.PLAY_PROPERTY,
        player_id=player_id,
        card=card.id,
        color=color.value,
        complete=property_set.is_complete,
    )
    return {"color": color.value, "card_count": len(property_set.cards)}


def flip_wildcard(game: GameState, player_id: str, payload: FlipWildcard) -> Dict[str, Any]:
    """Move a wildcard already on the table to another of its colors. Free."""
    game.catalog.get(payload.card_id)
    location = game.book.locate(payload.card_id)
    if location is None or location[0] != player_id:
        raise NotFound(f"{payload.card_id} is not on {player_id}'s table")
    current_color = location[1]
    source = game.book.get_set(player_id, current_color)
    card = source.card(payload.card_id)
    if card.card_type != CardType.WILDCARD:
        raise NotEligible(f"{card.name} is not a wildcard")
    if payload.color == current_color:
        raise NotEligible(f"{card.name} is already used as {current_color.value}")
    if not card.can_be(payload.color):
        raise InvalidPlacement(f"{card.name} cannot be used as {payload.color.value}")
    if source.is_complete:
        raise NotEligible(f"Cannot break up the complete {current_color.value} set")

    game.book.move_card(player_id, player_id, current_color, card.id, to_color=payload.color)
    game.event_log.log(
        EventType.FLIP_WILDCARD,
        player_id=player_id,
        card=card.id,
        from_color=current_color.value,
        to_color=payload.color.value,
    )
    return {"card": card.id, "color": payload.color.value}


def swipe_in(game: GameState, player_id: str, payload: PlayCard) -> Dict[str, Any]:
    card = _action_card(game, player_id, payload.card_id, ActionType.SWIPE_IN)
    _spend(game, player_id, card)
    drawn = game.draw_cards(player_id, 2)
    return {"drawn": len(drawn)}


def improve(kind: Improvement, action_type: ActionType) -> Handler:
    """Build the handler for an improvement card."""

    def handler(game: GameState, player_id: str, payload: Improve) -> Dict[str, Any]:
        card = _action_card(game, player_id, payload.card_id, action_type)
        property_set = game.get_player(player_id).properties.get(payload.color)
        if property_set is None or not property_set.can_improve(kind):
            raise NotEligible(f"Cannot add {kind.value} to {player_id}'s {payload.color.value} set")

        _spend(game, player_id, card)
        game.book.add_improvement(player_id, payload.color, kind)
        game.event_log.log(
            EventType.IMPROVEMENT,
            player_id=player_id,
            color=payload.color.value,
            improvement=kind.value,
            rent=game.book.rent_for(player_id, payload.color),
        )
        return {"color": payload.color.value, "improvement": kind.value}

    return handler


# === Effects that need a response ===


def play_rent(game: GameState, player_id: str, payload: PlayRent) -> Dict[str, Any]:
    """Charge rent on one of the player's colors, optionally doubled by Rush Hour."""
    card = _hand_card(game, player_id, payload.card_id)
    if card.card_type != CardType.RENT:
        raise NotEligible(f"{card.name} is not a rent card")
    if not card.can_be(payload.color):
        raise NotEligible(f"{card.name} cannot charge rent on {payload.color.value}")
    amount = game.book.rent_for(player_id, payload.color)

    if card.targets_all:
        targets = game.opponents(player_id)
    else:
        targets = [_opponent(game, player_id, payload.target_player_id)]

    played: List[Card] = [card]
    if payload.rush_hour_card_id:
        rush_hour = _action_card(game, player_id, payload.rush_hour_card_id, ActionType.RUSH_HOUR)
        game.ledger.require(2)
        played.append(rush_hour)
        amount *= 2

    for played_card in played:
        _spend(game, player_id, played_card)
    game.queue.enqueue(
        ActionType.PLAY_RENT,
        player_id,
        targets,
        payload=payload,
        rent_amount=amount,
        rent_color=payload.color,
    )
    return {"rent_amount": amount, "targets": targets}


def power_broker(game: GameState, player_id: str, payload: StealProperty) -> Dict[str, Any]:
    card = _action_card(game, player_id, payload.card_id, ActionType.POWER_BROKER)
    target = _opponent(game, player_id, payload.target_player_id)
    _stealable_card(game, target, payload.color, payload.target_card_id)

    _spend(game, player_id, card)
    game.queue.enqueue(ActionType.POWER_BROKER, player_id, [target], payload=payload)
    return {"targets": [target]}


def line_closure(game: GameState, player_id: str, payload: StealSet) -> Dict[str, Any]:
    card = _action_card(game, player_id, payload.card_id, ActionType.LINE_CLOSURE)
    target = _opponent(game, player_id, payload.target_player_id)
    property_set = game.book.get_set(target, payload.color)
    if not property_set.is_complete:
        raise NotEligible(f"{target}'s {payload.color.value} set is not complete")

    _spend(game, player_id, card)
    game.queue.enqueue(ActionType.LINE_CLOSURE, player_id, [target], payload=payload)
    return {"targets": [target]}


def service_change(game: GameState, player_id: str, payload: SwapProperties) -> Dict[str, Any]:
    card = _action_card(game, player_id, payload.card_id, ActionType.SERVICE_CHANGE)
    target = _opponent(game, player_id, payload.target_player_id)
    _stealable_card(game, target, payload.color, payload.target_card_id)
    _stealable_card(game, player_id, payload.player_color, payload.player_card_id)

    _spend(game, player_id, card)
    game.queue.enqueue(ActionType.SERVICE_CHANGE, player_id, [target], payload=payload)
    return {"targets": [target]}


def missed_your_train(game: GameState, player_id: str, payload: CollectDebt) -> Dict[str, Any]:
    card = _action_card(game, player_id, payload.card_id, ActionType.MISSED_YOUR_TRAIN)
    target = _opponent(game, player_id, payload.target_player_id)

    _spend(game, player_id, card)
    amount = game.config.missed_train_amount
    game.queue.enqueue(
        ActionType.MISSED_YOUR_TRAIN, player_id, [target], payload=payload, rent_amount=amount
    )
    return {"rent_amount": amount, "targets": [target]}


def its_my_stop(game: GameState, player_id: str, payload: PlayCard) -> Dict[str, Any]:
    card = _action_card(game, player_id, payload.card_id, ActionType.ITS_MY_STOP)
    targets = game.opponents(player_id)

    _spend(game, player_id, card)
    amount = game.config.its_my_stop_amount
    game.queue.enqueue(
        ActionType.ITS_MY_STOP, player_id, targets, payload=payload, rent_amount=amount
    )
    return {"rent_amount": amount, "targets": targets}


# === Responses ===


def accept(game: GameState, player_id: str, payload: Accept) -> Dict[str, Any]:
    return game.queue.resolve_accept()


def fare_evasion(game: GameState, player_id: str, payload: PlayCard) -> Dict[str, Any]:
    game.catalog.get(payload.card_id)
    return game.queue.resolve_counter(payload.card_id)


HANDLERS: Dict[ActionType, Handler] = {
    ActionType.END_TURN: end_turn,
    ActionType.PLAY_MONEY: play_money,
    ActionType.PLAY_PROPERTY: play_property,
    ActionType.PLAY_RENT: play_rent,
    ActionType.FLIP_WILDCARD: flip_wildcard,
    ActionType.SWIPE_IN: swipe_in,
    ActionType.POWER_BROKER: power_broker,
    ActionType.LINE_CLOSURE: line_closure,
    ActionType.SERVICE_CHANGE: service_change,
    ActionType.MISSED_YOUR_TRAIN: missed_your_train,
    ActionType.ITS_MY_STOP: its_my_stop,
    ActionType.EXPRESS_SERVICE: improve(Improvement.EXPRESS, ActionType.EXPRESS_SERVICE),
    ActionType.NEW_STATION: improve(Improvement.STATION, ActionType.NEW_STATION),
    ActionType.ACCEPT: accept,
    ActionType.PLAY_FARE_EVASION: fare_evasion,
}
