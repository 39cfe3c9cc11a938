"""
Pod Storage Port - Delegated operations on Solid Pod resources.

Resource semantics are owned by the remote Pod; implementations only
translate calls into authenticated HTTP requests.

Implementations:
- SolidPodAdapter: LDP + Turtle + Web Access Control over HTTP
"""

from abc import ABC, abstractmethod
from typing import List

from solid_mcp.domain.access import AccessModes
from solid_mcp.ports.credential_port import AuthenticatedRequester


class PodStoragePort(ABC):
    """Port: Read and modify resources on a Pod with a resolved credential."""

    @abstractmethod
    async def read_resource(self, requester: AuthenticatedRequester, url: str) -> str:
        """Return the body of a resource as text."""
        pass

    @abstractmethod
    async def write_text_resource(
        self,
        requester: AuthenticatedRequester,
        url: str,
        content: str,
        content_type: str = "text/plain",
    ) -> str:
        """Create or overwrite a resource; return a status message."""
        pass

    @abstractmethod
    async def list_container(self, requester: AuthenticatedRequester, url: str) -> List[str]:
        """Return the URLs of resources contained in a container."""
        pass

    @abstractmethod
    async def delete_resource(self, requester: AuthenticatedRequester, url: str) -> str:
        """Delete a resource; return a status message."""
        pass

    @abstractmethod
    async def update_rdf_resource(
        self,
        requester: AuthenticatedRequester,
        url: str,
        thing_url: str,
        predicate: str,
        value: str,
    ) -> str:
        """Set the value of one predicate on one subject of an RDF resource."""
        pass

    @abstractmethod
    async def grant_access(
        self,
        requester: AuthenticatedRequester,
        url: str,
        agent_webid: str,
        modes: AccessModes,
    ) -> str:
        """Grant an agent access modes on a resource."""
        pass
