from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Dict, List, Optional, Tuple

from subway_deal import Player, create_game
from subway_deal.settings import ServerSettings, get_server_settings

from server.runner import MatchRunner

logger = logging.getLogger(__name__)


class MatchRegistry:
    """In-memory registry of running matches."""

    def __init__(self, settings: Optional[ServerSettings] = None):
        self._matches: Dict[str, MatchRunner] = {}
        self._lock = asyncio.Lock()
        self._settings = settings

    @property
    def settings(self) -> ServerSettings:
        return self._settings or get_server_settings()

    async def create_match(self, players: List[Tuple[str, str]], seed: Optional[int] = None) -> str:
        """Start a match for an ordered list of (player_id, name) pairs from the lobby."""
        config = self.settings.game_config(seed)
        game = create_game(config, [Player(pid, name) for pid, name in players])
        match_id = uuid.uuid4().hex[:12]
        runner = MatchRunner(match_id, game, queue_size=self.settings.client_queue_size)
        async with self._lock:
            self._matches[match_id] = runner
        logger.info("Created match %s with %d players", match_id, len(players))
        return match_id

    async def get(self, match_id: str) -> Optional[MatchRunner]:
        return self._matches.get(match_id)

    async def stop(self, match_id: str) -> bool:
        async with self._lock:
            runner = self._matches.get(match_id)
            if not runner:
                return False
            await runner.stop()
            del self._matches[match_id]
            logger.info("Stopped match %s", match_id)
            return True

    async def stop_all(self) -> None:
        for match_id in list(self._matches):
            await self.stop(match_id)
