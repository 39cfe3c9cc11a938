"""
Memory Session Adapter - In-process session storage with TTL expiry.

Sessions are lost on restart. Each entry gets its own expiry timer on the
running event loop; lookups also check the deadline, so an entry whose
timer has not fired yet is still never observable after it expires.
"""

import asyncio
import logging
import threading
from typing import Callable, Dict, Optional
from datetime import datetime

from solid_mcp.domain.session import Session, utcnow
from solid_mcp.errors import BadRequest, Unauthorized
from solid_mcp.ports.credential_port import AuthenticatedRequester
from solid_mcp.ports.session_port import SessionPort

logger = logging.getLogger(__name__)


def mask(value: str) -> str:
    """Shorten a secret for logging."""
    if len(value) >= 12:
        return f"{value[:4]}...{value[-4:]}"
    return f"{value[:2]}..."


class MemorySessionAdapter(SessionPort):
    """
    In-memory session store.

    The session map is the only shared mutable state; all mutations happen
    under one lock. Timers are per session and never block operations on
    other sessions.
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        """
        Initialize in-memory storage.

        Args:
            clock: Source of the current UTC time (injectable for tests)
        """
        self._sessions: Dict[str, Session] = {}
        self._timers: Dict[str, asyncio.TimerHandle] = {}
        self._lock = threading.Lock()
        self._clock = clock or utcnow

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def create(self, credential: AuthenticatedRequester, ttl: int = 3600) -> str:
        """Create a session and schedule its removal after ttl seconds."""
        with self._lock:
            session = Session.create(credential, ttl=ttl, now=self._clock())
            while session.session_id in self._sessions:
                session = Session.create(credential, ttl=ttl, now=self._clock())
            self._sessions[session.session_id] = session
            self._schedule_expiry(session)

        logger.info(
            "Session created: id=%s, webid=%s, ttl=%ss",
            mask(session.session_id),
            credential.webid,
            ttl,
        )
        return session.session_id

    def resolve(self, session_id: str) -> AuthenticatedRequester:
        """Return the credential of a live session."""
        if not session_id:
            raise BadRequest("A session ID is required. Please login first using the 'solid_login' tool.")

        with self._lock:
            session = self._sessions.get(session_id)
            if session is not None and not session.is_valid(self._clock()):
                self._remove(session_id)
                logger.info("Session expired: id=%s", mask(session_id))
                session = None

        if session is None:
            logger.warning("Session lookup failed: id=%s", mask(session_id))
            raise Unauthorized("Session not found or expired. Please login again using the 'solid_login' tool.")

        return session.credential

    def delete(self, session_id: str) -> bool:
        """Delete a session and cancel its timer."""
        with self._lock:
            removed = self._remove(session_id)
        if removed:
            logger.info("Session deleted: id=%s", mask(session_id))
        return removed

    def cleanup_expired(self) -> int:
        """Clean up sessions whose deadline has passed."""
        now = self._clock()
        with self._lock:
            expired_ids = [
                sid for sid, session in self._sessions.items()
                if not session.is_valid(now)
            ]
            for session_id in expired_ids:
                self._remove(session_id)

        for session_id in expired_ids:
            logger.info("Session expired: id=%s", mask(session_id))
        return len(expired_ids)

    def close(self):
        """Cancel all timers and drop all sessions."""
        with self._lock:
            for handle in self._timers.values():
                handle.cancel()
            self._timers.clear()
            self._sessions.clear()

    def _schedule_expiry(self, session: Session):
        """Arm the expiry timer if an event loop is running (lock held)."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop: expiry is enforced on lookup only
            return
        self._timers[session.session_id] = loop.call_later(
            session.ttl, self._expire, session.session_id
        )

    def _expire(self, session_id: str):
        """Timer callback: drop the session once its TTL elapsed."""
        with self._lock:
            self._timers.pop(session_id, None)
            removed = self._sessions.pop(session_id, None) is not None
        if removed:
            logger.info("Session expired: id=%s", mask(session_id))

    def _remove(self, session_id: str) -> bool:
        """Remove a session and its timer (lock held)."""
        handle = self._timers.pop(session_id, None)
        if handle is not None:
            handle.cancel()
        return self._sessions.pop(session_id, None) is not None
