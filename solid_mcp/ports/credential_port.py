"""
Credential Port - The authenticated-request capability.

Possession of an AuthenticatedRequester implies authorization for every
delegated Pod operation. Callers only store it and hand it back; its token
and key material stay private to the implementation.

Implementations:
- DPoPCredential: DPoP-bound bearer token from the CSS handshake
"""

from abc import ABC, abstractmethod
from typing import Optional, Mapping

import httpx


class AuthenticatedRequester(ABC):
    """Port: Produce authenticated requests against Pod resources."""

    @property
    @abstractmethod
    def webid(self) -> str:
        """WebID the credential was issued for."""
        pass

    @property
    def expires_in(self) -> Optional[int]:
        """Token lifetime in seconds as reported by the issuer, if known."""
        return None

    @abstractmethod
    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        content: Optional[str] = None,
    ) -> httpx.Response:
        """
        Send an authenticated request.

        Args:
            method: HTTP method (GET, PUT, DELETE, ...)
            url: Absolute resource URL
            headers: Extra request headers
            content: Request body

        Returns:
            The raw response (status codes are not interpreted here)
        """
        pass
