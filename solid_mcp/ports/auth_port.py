"""
Credential Acquirer Port - Turn a login identity into a credential.

Implementations:
- CssClientCredentialsAcquirer: Community Solid Server account API +
  client_credentials grant with DPoP
"""

from abc import ABC, abstractmethod

from solid_mcp.domain.identity import Identity
from solid_mcp.ports.credential_port import AuthenticatedRequester


class CredentialAcquirerPort(ABC):
    """Port: Acquire an authenticated-request capability from an issuer."""

    @abstractmethod
    async def acquire(self, issuer_url: str, identity: Identity) -> AuthenticatedRequester:
        """
        Run the authentication handshake.

        Args:
            issuer_url: OIDC issuer base URL (e.g. http://localhost:3000/)
            identity: Account email and password

        Returns:
            Credential for subsequent delegated requests

        Raises:
            UpstreamError: If a handshake step returns an unusable response
            httpx.HTTPError: If a handshake step fails at the transport level
        """
        pass
