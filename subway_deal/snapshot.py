"""
Per-player snapshot serialization of GameState.

Produces the view a single participant is allowed to see: their own hand
in full, every other hand only as a count. Deck order is never exposed.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from subway_deal.cards import Card
from subway_deal.game import GameState
from subway_deal.player import PlayerState


def serialize_card(card: Card) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": card.id,
        "type": card.card_type.value,
        "name": card.name,
        "value": card.value,
    }
    if card.colors:
        data["colors"] = [color.value for color in card.colors]
    if card.action is not None:
        data["action"] = card.action.value
    return data


def _serialize_player(game: GameState, player: PlayerState, viewer_id: Optional[str]) -> Dict[str, Any]:
    properties: List[Dict[str, Any]] = []
    for color, property_set in player.properties.items():
        properties.append(
            {
                "color": color.value,
                "cardCount": len(property_set.cards),
                "cards": [card.id for card in property_set.cards],
                "complete": property_set.is_complete,
                "rent": game.book.rent_for(player.player_id, color),
                "improvements": [kind.value for kind in property_set.improvements],
            }
        )

    entry: Dict[str, Any] = {
        "id": player.player_id,
        "name": player.name,
        "bankTotal": player.bank_total,
        "bank": [card.id for card in player.bank],
        "completeSets": player.complete_sets,
        "properties": properties,
    }
    if player.player_id == viewer_id:
        entry["hand"] = [serialize_card(card) for card in player.hand]
    else:
        entry["handCount"] = len(player.hand)
    return entry


def serialize_view(game: GameState, player_id: Optional[str] = None) -> Dict[str, Any]:
    """Serialize a GameState for one recipient.

    The view includes:
    - players in turn order (own hand, or handCount for everyone else)
    - currentPlayer, maxActionsPerTurn and actionsPlayedThisTurn
    - pendingAction (type, sourcePlayer, targets, rentAmount, rentColor) or null
    - winner ({id, name}) or null
    - phase and draw/discard pile sizes

    Passing no player id yields a spectator-safe view with no hands at all.
    """
    players = [
        _serialize_player(game, game.players[pid], player_id) for pid in game.ledger.turn_order
    ]

    pending = None
    if game.pending_action is not None:
        p = game.pending_action
        pending = {
            "type": p.action_type.value,
            "sourcePlayer": p.source_player,
            "targets": list(p.targets),
            "rentAmount": p.rent_amount,
            "rentColor": p.rent_color.value if p.rent_color else None,
        }

    winner = None
    if game.winner is not None:
        winner = {"id": game.winner, "name": game.players[game.winner].name}

    return {
        "players": players,
        "currentPlayer": game.current_player_id,
        "maxActionsPerTurn": game.ledger.max_actions_per_turn,
        "actionsPlayedThisTurn": game.ledger.actions_played,
        "turnNumber": game.ledger.turn_number,
        "phase": game.phase.value,
        "pendingAction": pending,
        "winner": winner,
        "drawPileCount": len(game.draw_pile),
        "discardPileCount": len(game.discard_pile),
        "discardTop": serialize_card(game.discard_pile[-1]) if game.discard_pile else None,
    }
