from __future__ import annotations

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Optional

from fastapi import Request

from sternhalma.game import Game

from ..config import Settings, settings

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Session dataclass
# ---------------------------------------------------------------------------

@dataclass
class Session:
    game: Game
    created_at: float       = field(default_factory=time.time)
    last_accessed: float    = field(default_factory=time.time)


# ---------------------------------------------------------------------------
# SessionManager
# ---------------------------------------------------------------------------

class SessionManager:
    def __init__(
        self,
        ttl_seconds: int = settings.session_ttl_seconds,
        cleanup_interval: int = settings.cleanup_interval_seconds,
        default_player_count: int = settings.default_player_count,
    ) -> None:
        self._sessions: dict[str, Session] = {}
        self.ttl_seconds = ttl_seconds
        self.cleanup_interval = cleanup_interval
        self.default_player_count = default_player_count

    @classmethod
    def from_settings(cls, config: Settings) -> SessionManager:
        return cls(
            ttl_seconds=config.session_ttl_seconds,
            cleanup_interval=config.cleanup_interval_seconds,
            default_player_count=config.default_player_count,
        )

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def create(self, player_count: Optional[int] = None) -> tuple[str, Session]:
        if player_count is None:
            player_count = self.default_player_count
        session_id = str(uuid.uuid4())
        session = Session(game=Game(player_count))
        self._sessions[session_id] = session
        logger.info("Created session %s with %d players", session_id, session.game.player_count)
        return session_id, session

    def get(self, session_id: str) -> Optional[Session]:
        session = self._sessions.get(session_id)
        if session is not None:
            session.last_accessed = time.time()
        return session

    def delete(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is not None:
            logger.info("Deleted session %s", session_id)

    def __len__(self) -> int:
        return len(self._sessions)

    # ------------------------------------------------------------------
    # TTL cleanup
    # ------------------------------------------------------------------

    def cleanup_stale(self) -> int:
        cutoff = time.time() - self.ttl_seconds
        stale = [sid for sid, s in self._sessions.items() if s.last_accessed < cutoff]
        for sid in stale:
            del self._sessions[sid]
        return len(stale)

    async def cleanup_loop(self) -> None:
        """Background coroutine: purge stale sessions every ``cleanup_interval`` seconds."""
        while True:
            await asyncio.sleep(self.cleanup_interval)
            removed = self.cleanup_stale()
            if removed:
                logger.info("Removed %d stale session(s).", removed)



# ---------------------------------------------------------------------------
# Route dependency: the manager owned by the running app
# ---------------------------------------------------------------------------

def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.session_manager
