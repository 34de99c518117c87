from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

from subway_deal.game import GameState
from subway_deal.rules import ActionResult, get_legal_actions, submit
from subway_deal.snapshot import serialize_view

logger = logging.getLogger(__name__)


class MatchRunner:
    """Owns a single GameState and serializes every mutation against it.

    Responsibilities:
    - Apply submitted actions one at a time under a per-match lock
    - Broadcast each subscriber's own view after every accepted action
    - Relay new engine events to subscribed WebSocket clients
    """

    def __init__(self, match_id: str, game: GameState, queue_size: int = 256):
        self.match_id = match_id
        self.game = game
        self._queue_size = queue_size
        self._apply_lock = asyncio.Lock()
        # each client gets a queue of outbound messages, keyed to the viewer it renders for
        self._clients: Dict[asyncio.Queue, Optional[str]] = {}
        self._last_engine_idx = len(self.game.event_log)

    # Subscription management for WS
    async def subscribe(self, player_id: Optional[str] = None) -> asyncio.Queue:
        q: asyncio.Queue = asyncio.Queue(maxsize=self._queue_size)
        self._clients[q] = player_id
        # Send initial snapshot
        await q.put(self._view_message(player_id))
        return q

    async def unsubscribe(self, q: asyncio.Queue) -> None:
        self._clients.pop(q, None)

    @property
    def subscriber_count(self) -> int:
        return len(self._clients)

    def _view_message(self, player_id: Optional[str]) -> Dict[str, Any]:
        return {
            "type": "snapshot",
            "match_id": self.match_id,
            "snapshot": serialize_view(self.game, player_id),
            "last_event_index": len(self.game.event_log),
        }

    async def _broadcast_views(self, events: List[Dict[str, Any]]) -> None:
        for q, viewer in list(self._clients.items()):
            try:
                if events:
                    q.put_nowait({"type": "events", "match_id": self.match_id, "events": events})
                q.put_nowait(self._view_message(viewer))
            except asyncio.QueueFull:
                # Drop client if it cannot keep up
                self._clients.pop(q, None)
                logger.warning("Match %s dropped a slow subscriber (viewer %s)", self.match_id, viewer)

    async def flush_and_broadcast(self) -> None:
        evs = self.game.event_log.since(self._last_engine_idx)
        self._last_engine_idx = len(self.game.event_log)
        await self._broadcast_views([e.to_dict() for e in evs])

    # ---- External control helpers ----
    async def snapshot(self, player_id: Optional[str] = None) -> Dict[str, Any]:
        async with self._apply_lock:
            return serialize_view(self.game, player_id)

    async def get_legal_actions(self, player_id: str) -> List[Dict[str, Any]]:
        async with self._apply_lock:
            return [a.to_dict() for a in get_legal_actions(self.game, player_id)]

    async def submit(self, player_id: str, action_type: str, data: Optional[Dict[str, Any]] = None) -> ActionResult:
        """Apply one action for a player; concurrent submissions queue on the lock."""
        async with self._apply_lock:
            result = submit(self.game, player_id, action_type, data or {})
            if result.accepted:
                await self.flush_and_broadcast()
            else:
                logger.debug("Match %s rejected %s from %s: %s", self.match_id, action_type, player_id, result.reason)
            return result

    async def status(self) -> Dict[str, Any]:
        return {
            "match_id": self.match_id,
            "phase": self.game.phase.value,
            "current_player": self.game.current_player_id,
            "turn_number": self.game.ledger.turn_number,
            "winner": self.game.winner,
            "subscribers": self.subscriber_count,
        }

    async def stop(self) -> None:
        for q in list(self._clients):
            try:
                q.put_nowait({"type": "closed", "match_id": self.match_id})
            except asyncio.QueueFull:
                logger.debug("Match %s closed without notifying a full subscriber", self.match_id)
        self._clients.clear()
