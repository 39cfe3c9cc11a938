"""
Solid Pod Adapter - Resource operations against a Solid Pod over HTTP.

Containers and RDF resources are exchanged as Turtle and handled with
rdflib. Access grants use Web Access Control (the resource's ACL document
is discovered through its Link: rel="acl" header).
"""

import hashlib
import logging
from typing import Iterable, List, Mapping, Optional
from urllib.parse import urljoin

import httpx
from rdflib import Graph, Literal, Namespace, URIRef
from rdflib.namespace import RDF
from rdflib.term import Node

from solid_mcp.domain.access import AccessModes
from solid_mcp.errors import BadRequest, DelegatedOperationError
from solid_mcp.ports.credential_port import AuthenticatedRequester
from solid_mcp.ports.pod_port import PodStoragePort

logger = logging.getLogger(__name__)

LDP = Namespace("http://www.w3.org/ns/ldp#")
ACL = Namespace("http://www.w3.org/ns/auth/acl#")

TURTLE = "text/turtle"


def to_term(value: str) -> Node:
    """IRIs for http(s) values, plain literals otherwise."""
    if value.startswith(("http://", "https://")):
        return URIRef(value)
    return Literal(value)


class SolidPodAdapter(PodStoragePort):
    """
    Solid Pod storage adapter.

    Every call goes through the requester it is given; any response with
    status >= 400 raises DelegatedOperationError carrying that status.
    """

    async def _send(
        self,
        requester: AuthenticatedRequester,
        method: str,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        content: Optional[str] = None,
        allow: Iterable[int] = (),
    ) -> httpx.Response:
        response = await requester.request(method, url, headers=headers, content=content)
        if response.is_error and response.status_code not in allow:
            logger.warning("%s %s returned HTTP %s", method, url, response.status_code)
            raise DelegatedOperationError(response.status_code, url)
        return response

    async def _get_graph(self, requester: AuthenticatedRequester, url: str) -> Graph:
        response = await self._send(requester, "GET", url, headers={"Accept": TURTLE})
        graph = Graph()
        graph.parse(data=response.text, format="turtle", publicID=url)
        return graph

    async def read_resource(self, requester: AuthenticatedRequester, url: str) -> str:
        response = await self._send(requester, "GET", url)
        return response.text

    async def write_text_resource(
        self,
        requester: AuthenticatedRequester,
        url: str,
        content: str,
        content_type: str = "text/plain",
    ) -> str:
        await self._send(
            requester, "PUT", url,
            headers={"Content-Type": content_type or "text/plain"},
            content=content,
        )
        logger.info("Wrote %s (%s)", url, content_type)
        return f"Resource written: {url}"

    async def list_container(self, requester: AuthenticatedRequester, url: str) -> List[str]:
        graph = await self._get_graph(requester, url)
        return sorted(str(item) for item in graph.objects(URIRef(url), LDP.contains))

    async def delete_resource(self, requester: AuthenticatedRequester, url: str) -> str:
        await self._send(requester, "DELETE", url)
        logger.info("Deleted %s", url)
        return f"Resource deleted: {url}"

    async def update_rdf_resource(
        self,
        requester: AuthenticatedRequester,
        url: str,
        thing_url: str,
        predicate: str,
        value: str,
    ) -> str:
        """Replace every value of (thing, predicate) with value, then write back."""
        graph = await self._get_graph(requester, url)
        graph.set((URIRef(thing_url), URIRef(predicate), to_term(value)))

        await self._send(
            requester, "PUT", url,
            headers={"Content-Type": TURTLE},
            content=graph.serialize(format="turtle"),
        )
        logger.info("Updated %s on %s in %s", predicate, thing_url, url)
        return f"Updated <{predicate}> of <{thing_url}> in {url}"

    async def grant_access(
        self,
        requester: AuthenticatedRequester,
        url: str,
        agent_webid: str,
        modes: AccessModes,
    ) -> str:
        """
        Grant an agent access to a resource through its ACL document.

        A missing ACL document is created with full control for the
        requester's own WebID, so the owner keeps access.
        """
        if not modes.any():
            raise BadRequest("At least one access mode (read, write, append) must be granted.")

        head = await self._send(requester, "HEAD", url)
        acl_link = head.links.get("acl", {}).get("url")
        if not acl_link:
            raise DelegatedOperationError(501, url, f"{url} does not advertise an ACL document")
        acl_url = urljoin(url, acl_link)

        response = await self._send(requester, "GET", acl_url, headers={"Accept": TURTLE}, allow=(404,))
        graph = Graph()
        if response.status_code == 404:
            self._authorize(graph, acl_url, url, requester.webid, ["Read", "Write", "Control"], name="owner")
        else:
            graph.parse(data=response.text, format="turtle", publicID=acl_url)

        granted = modes.names()
        self._authorize(graph, acl_url, url, agent_webid, granted)

        await self._send(
            requester, "PUT", acl_url,
            headers={"Content-Type": TURTLE},
            content=graph.serialize(format="turtle"),
        )
        logger.info("Granted %s on %s to %s", granted, url, agent_webid)
        return f"Granted {', '.join(granted)} access on {url} to {agent_webid}"

    @staticmethod
    def _authorize(
        graph: Graph,
        acl_url: str,
        resource_url: str,
        agent: str,
        modes: List[str],
        name: Optional[str] = None,
    ):
        """Upsert the acl:Authorization for one agent."""
        if name is None:
            name = "agent-" + hashlib.sha256(agent.encode("utf-8")).hexdigest()[:12]
        node = URIRef(f"{acl_url}#{name}")

        graph.remove((node, ACL.mode, None))
        graph.add((node, RDF.type, ACL.Authorization))
        graph.add((node, ACL.agent, URIRef(agent)))
        graph.add((node, ACL.accessTo, URIRef(resource_url)))
        if resource_url.endswith("/"):
            graph.add((node, ACL.default, URIRef(resource_url)))
        for mode in modes:
            graph.add((node, ACL.mode, ACL[mode]))
