"""
Session Port - Interface for session management.

The session store is the sole authority for "is this session usable".

Implementations:
- MemorySessionAdapter: In-process sessions with per-entry expiry timers
"""

from abc import ABC, abstractmethod

from solid_mcp.ports.credential_port import AuthenticatedRequester


class SessionPort(ABC):
    """Port: Map opaque session IDs to credentials with a bounded lifetime."""

    @abstractmethod
    def create(self, credential: AuthenticatedRequester, ttl: int = 3600) -> str:
        """
        Register a credential under a fresh session ID.

        Args:
            credential: Credential produced by a successful handshake
            ttl: Time-to-live in seconds (default 1 hour)

        Returns:
            New session ID
        """
        pass

    @abstractmethod
    def resolve(self, session_id: str) -> AuthenticatedRequester:
        """
        Look up the credential for a live session.

        Args:
            session_id: Session ID returned by create()

        Returns:
            The stored credential (TTL is not extended)

        Raises:
            BadRequest: If session_id is empty
            Unauthorized: If no live session exists for session_id
        """
        pass

    @abstractmethod
    def delete(self, session_id: str) -> bool:
        """
        Remove a session.

        Args:
            session_id: Session ID

        Returns:
            True if deleted, False if not found
        """
        pass

    @abstractmethod
    def cleanup_expired(self) -> int:
        """
        Remove sessions whose deadline has passed.

        Returns:
            Number of sessions deleted
        """
        pass
