"""TTL-scoped registry of dashboard sessions, keyed by the session cookie."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime

from stratify.core.security import new_session_id
from stratify.core.structured_logging import log_json
from stratify.services.dashboard import DashboardSession

logger = logging.getLogger(__name__)


class SessionNotFoundError(KeyError):
    """Raised when a session ID is unknown or has expired."""


@dataclass
class _Entry:
    session: DashboardSession
    last_accessed: float  # monotonic clock for TTL checks
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))


class DashboardRegistry:
    """Holds one :class:`DashboardSession` per browser.

    Expiry is lazy: idle sessions are closed when they are next looked up or
    when any new session is created.
    """

    def __init__(self, factory: Callable[[], DashboardSession], ttl_seconds: int = 1800):
        self._factory = factory
        self._ttl = ttl_seconds
        self._entries: dict[str, _Entry] = {}

    @property
    def active_count(self) -> int:
        now = time.monotonic()
        return sum(1 for e in self._entries.values() if now - e.last_accessed <= self._ttl)

    async def create(self) -> tuple[str, DashboardSession]:
        """Create and start a new session; returns its id and context."""
        await self.purge_expired()
        session_id = new_session_id()
        session = self._factory()
        await session.start()
        self._entries[session_id] = _Entry(session=session, last_accessed=time.monotonic())
        log_json(logger, logging.INFO, "dashboard_session_created", mode=session.mode)
        return session_id, session

    async def get(self, session_id: str) -> DashboardSession:
        """Session for an id, refreshing its idle timer.

        Raises:
            SessionNotFoundError: If the id is unknown or expired
        """
        entry = self._entries.get(session_id)
        if entry is None:
            raise SessionNotFoundError(f"Session '{session_id}' not found")
        now = time.monotonic()
        if now - entry.last_accessed > self._ttl:
            await self.close(session_id)
            raise SessionNotFoundError(f"Session '{session_id}' has expired")
        entry.last_accessed = now
        return entry.session

    async def close(self, session_id: str) -> None:
        entry = self._entries.pop(session_id, None)
        if entry is not None:
            await entry.session.close()

    async def purge_expired(self) -> int:
        now = time.monotonic()
        expired = [sid for sid, e in self._entries.items() if now - e.last_accessed > self._ttl]
        for session_id in expired:
            await self.close(session_id)
        if expired:
            log_json(logger, logging.INFO, "dashboard_sessions_expired", count=len(expired))
        return len(expired)

    async def close_all(self) -> None:
        for session_id in list(self._entries):
            await self.close(session_id)
