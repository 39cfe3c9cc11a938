"""
Solid Client - High-level SDK for session-scoped Pod operations.

login() runs the handshake and registers the credential under a new
session ID. Every data operation first passes through authorize(), the
single place where a session ID becomes a credential.
"""

import logging
from typing import Optional, List

from solid_mcp.config import SolidSettings
from solid_mcp.domain.access import AccessModes
from solid_mcp.domain.identity import Identity
from solid_mcp.errors import ConfigurationError
from solid_mcp.ports.auth_port import CredentialAcquirerPort
from solid_mcp.ports.credential_port import AuthenticatedRequester
from solid_mcp.ports.pod_port import PodStoragePort
from solid_mcp.ports.session_port import SessionPort

logger = logging.getLogger(__name__)


class SolidClient:
    """
    High-level Solid client.

    Example:
        from solid_mcp import SolidClient
        from solid_mcp.adapters import (
            CssClientCredentialsAcquirer,
            MemorySessionAdapter,
            SolidPodAdapter,
        )

        client = SolidClient(
            acquirer=CssClientCredentialsAcquirer(),
            sessions=MemorySessionAdapter(),
            storage=SolidPodAdapter(),
        )

        session_id = await client.login("http://localhost:3000/", "alice@example.com", "secret")
        text = await client.read_resource(session_id, "http://localhost:3000/alice/file.txt")
    """

    def __init__(
        self,
        acquirer: CredentialAcquirerPort,
        sessions: SessionPort,
        storage: PodStoragePort,
        settings: Optional[SolidSettings] = None,
    ):
        """
        Initialize the client with adapters.

        Args:
            acquirer: Credential acquirer (handshake)
            sessions: Session store
            storage: Pod storage adapter
            settings: Settings (defaults to SolidSettings.from_env())
        """
        self._acquirer = acquirer
        self._sessions = sessions
        self._storage = storage
        self._settings = settings or SolidSettings.from_env()

    async def login(
        self,
        oidc_issuer: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
    ) -> str:
        """
        Authenticate against an issuer and open a session.

        Args:
            oidc_issuer: Issuer base URL (falls back to SOLID_OIDC_ISSUER)
            email: Account email (falls back to SOLID_EMAIL)
            password: Account password (falls back to SOLID_PASSWORD)

        Returns:
            New session ID

        Raises:
            ConfigurationError: If issuer or identity is missing, or the
                configured session TTL is not positive
        """
        issuer = oidc_issuer or self._settings.oidc_issuer
        if not issuer:
            raise ConfigurationError(
                "An OIDC issuer URL is required: pass oidc_issuer or set SOLID_OIDC_ISSUER."
            )
        identity = Identity.resolve(email, password, self._settings)
        if self._settings.session_ttl <= 0:
            raise ConfigurationError(
                f"SOLID_SESSION_TTL must be a positive number of seconds, got {self._settings.session_ttl}."
            )

        logger.info("Login requested for %s at %s", identity.email, issuer)
        credential = await self._acquirer.acquire(issuer, identity)

        ttl = self._settings.session_ttl
        # non-positive token lifetimes are ignored
        if credential.expires_in and credential.expires_in > 0:
            ttl = min(ttl, credential.expires_in)
        return self._sessions.create(credential, ttl=ttl)

    def logout(self, session_id: str) -> bool:
        """
        End a session.

        Returns:
            True if a session was removed
        """
        removed = self._sessions.delete(session_id)
        if not removed:
            logger.warning("Logout for unknown session")
        return removed

    def authorize(self, session_id: str) -> AuthenticatedRequester:
        """
        Resolve a session ID to its credential.

        Raises:
            BadRequest: If session_id is empty
            Unauthorized: If the session does not exist or has expired
        """
        return self._sessions.resolve(session_id)

    async def read_resource(self, session_id: str, resource_url: str) -> str:
        requester = self.authorize(session_id)
        return await self._storage.read_resource(requester, resource_url)

    async def write_text_resource(
        self,
        session_id: str,
        resource_url: str,
        content: str,
        content_type: Optional[str] = None,
    ) -> str:
        requester = self.authorize(session_id)
        return await self._storage.write_text_resource(
            requester, resource_url, content, content_type or "text/plain"
        )

    async def list_container(self, session_id: str, container_url: str) -> List[str]:
        requester = self.authorize(session_id)
        return await self._storage.list_container(requester, container_url)

    async def delete_resource(self, session_id: str, resource_url: str) -> str:
        requester = self.authorize(session_id)
        return await self._storage.delete_resource(requester, resource_url)

    async def update_rdf_resource(
        self,
        session_id: str,
        resource_url: str,
        thing_url: str,
        predicate: str,
        value: str,
    ) -> str:
        requester = self.authorize(session_id)
        return await self._storage.update_rdf_resource(
            requester, resource_url, thing_url, predicate, value
        )

    async def grant_access(
        self,
        session_id: str,
        resource_url: str,
        agent_webid: str,
        modes: AccessModes,
    ) -> str:
        requester = self.authorize(session_id)
        return await self._storage.grant_access(requester, resource_url, agent_webid, modes)
