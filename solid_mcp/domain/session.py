"""
Session Domain Model - Binds an opaque session ID to an acquired credential.
"""

from dataclasses import dataclass
from typing import Optional
from datetime import datetime, timedelta, timezone
import secrets

from solid_mcp.ports.credential_port import AuthenticatedRequester


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


@dataclass
class Session:
    """
    Session entity - an authenticated Pod session.

    Domain rules:
    - session_id is cryptographically random, never a counter
    - credential is stored and handed back, never inspected
    - expires_at is fixed at creation (no sliding expiration)
    """
    session_id: str
    credential: AuthenticatedRequester
    created_at: datetime
    expires_at: datetime

    @classmethod
    def create(
        cls,
        credential: AuthenticatedRequester,
        ttl: int,
        now: Optional[datetime] = None,
    ) -> "Session":
        """
        Create a new session with a generated ID.

        Args:
            credential: Authenticated-request capability from the handshake
            ttl: Time-to-live in seconds
            now: Creation time (defaults to current UTC time)

        Returns:
            New session instance
        """
        if ttl <= 0:
            raise ValueError(f"Session TTL must be positive, got {ttl}")

        created_at = now or utcnow()
        return cls(
            session_id=secrets.token_urlsafe(32),
            credential=credential,
            created_at=created_at,
            expires_at=created_at + timedelta(seconds=ttl),
        )

    @property
    def ttl(self) -> float:
        """Lifetime in seconds."""
        return (self.expires_at - self.created_at).total_seconds()

    def is_valid(self, now: Optional[datetime] = None) -> bool:
        """Check if the session deadline has not yet passed."""
        return (now or utcnow()) < self.expires_at
