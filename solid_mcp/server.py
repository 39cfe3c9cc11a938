"""Solid Pod MCP Server.

Exposes session-scoped Solid Pod operations as MCP tools. A client first
calls solid_login to obtain a session ID, then passes it to every other tool.

Usage:
    # Run as module
    python -m solid_mcp

    # Or import and run
    from solid_mcp.server import SolidMCPServer
    server = SolidMCPServer()
    server.run()

Tools provided:
    - solid_login: Authenticate and open a session
    - solid_logout: Close a session
    - read_resource / write_text_resource / delete_resource
    - list_container
    - update_rdf_resource
    - grant_access
    - ping
"""

import asyncio
import logging
import sys
from typing import Optional

import httpx
from dotenv import load_dotenv
from mcp.server.fastmcp import FastMCP

from solid_mcp import __version__
from solid_mcp.adapters.css_account_auth import CssClientCredentialsAcquirer
from solid_mcp.adapters.dpop import delegated_http_client
from solid_mcp.adapters.memory_session import MemorySessionAdapter
from solid_mcp.adapters.solid_pod import SolidPodAdapter
from solid_mcp.config import SolidSettings
from solid_mcp.domain.access import AccessModes
from solid_mcp.errors import render_error
from solid_mcp.sdk.client import SolidClient

logger = logging.getLogger(__name__)

SERVER_NAME = "solid-pod-mcp-server"


def setup_logging(level: str = "INFO") -> None:
    """Log to stderr; stdout carries the stdio transport."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


class SolidMCPServer:
    """MCP server exposing Solid Pod tools.

    Every tool returns text. Errors raised behind a tool are rendered by
    render_error() instead of crossing the protocol boundary; only unknown
    tools and malformed calls are protocol faults.

    Attributes:
        settings: Server settings.
        client: SolidClient used by all tools.
        mcp: FastMCP server instance.
    """

    def __init__(
        self,
        settings: Optional[SolidSettings] = None,
        client: Optional[SolidClient] = None,
    ):
        """Initialize the server.

        Args:
            settings: Settings (defaults to SolidSettings.from_env()).
            client: Pre-built client; built from settings if omitted.
        """
        self.settings = settings or SolidSettings.from_env()
        self._http: Optional[httpx.AsyncClient] = None

        if client is None:
            self._http = delegated_http_client(self.settings.http_timeout)
            client = SolidClient(
                acquirer=CssClientCredentialsAcquirer(
                    http=self._http,
                    client_name=self.settings.client_name,
                    timeout=self.settings.http_timeout,
                ),
                sessions=MemorySessionAdapter(),
                storage=SolidPodAdapter(),
                settings=self.settings,
            )
        self.client = client

        self.mcp = FastMCP(name=SERVER_NAME)
        self._register_tools()

    def _register_tools(self) -> None:
        """Register all MCP tools."""
        tools = [
            (self.solid_login, "solid_login",
             "Logs into a Solid Pod and returns a session ID for the other tools."),
            (self.solid_logout, "solid_logout",
             "Ends a Solid Pod session."),
            (self.read_resource, "read_resource",
             "Reads the content of a resource from the Solid Pod."),
            (self.write_text_resource, "write_text_resource",
             "Writes or overwrites a text-based resource on the Solid Pod."),
            (self.list_container, "list_container",
             "Lists all resources within a specified container on the Solid Pod."),
            (self.delete_resource, "delete_resource",
             "Deletes a resource from the Solid Pod."),
            (self.update_rdf_resource, "update_rdf_resource",
             "Sets the value of a predicate on a thing inside an RDF resource."),
            (self.grant_access, "grant_access",
             "Grants an agent read, write and/or append access to a resource."),
            (self.ping, "ping", "Test connectivity"),
        ]
        for fn, name, description in tools:
            self.mcp.add_tool(fn, name=name, description=description)
        logger.info("Registered %d Solid Pod tools", len(tools))

    def _failed(self, tool: str, error: Exception) -> str:
        logger.error("Tool %s failed: %s", tool, error)
        return render_error(error)

    # =========================================================================
    # Tools
    # =========================================================================

    async def solid_login(
        self,
        oidc_issuer: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
    ) -> str:
        """Log into a Solid Pod.

        Args:
            oidc_issuer: The OIDC issuer URL (e.g. http://localhost:3000/).
            email: The account email (defaults to SOLID_EMAIL).
            password: The account password (defaults to SOLID_PASSWORD).
        """
        try:
            session_id = await self.client.login(oidc_issuer, email, password)
            return f"Login successful. Session ID: {session_id}"
        except Exception as e:
            return self._failed("solid_login", e)

    async def solid_logout(self, session_id: str) -> str:
        """End a session."""
        try:
            if self.client.logout(session_id):
                return "Logged out. Session closed."
            return "No active session with that ID."
        except Exception as e:
            return self._failed("solid_logout", e)

    async def read_resource(self, session_id: str, resource_url: str) -> str:
        """Read a resource as text."""
        try:
            return await self.client.read_resource(session_id, resource_url)
        except Exception as e:
            return self._failed("read_resource", e)

    async def write_text_resource(
        self,
        session_id: str,
        resource_url: str,
        content: str,
        content_type: str = "text/plain",
    ) -> str:
        """Write a text resource.

        Args:
            session_id: Session ID from solid_login.
            resource_url: The full URL of the resource to write.
            content: The text content to write to the file.
            content_type: The MIME type (e.g., text/plain).
        """
        try:
            return await self.client.write_text_resource(
                session_id, resource_url, content, content_type
            )
        except Exception as e:
            return self._failed("write_text_resource", e)

    async def list_container(self, session_id: str, container_url: str) -> str:
        """List the resources in a container, one URL per line."""
        try:
            urls = await self.client.list_container(session_id, container_url)
            if not urls:
                return f"Container {container_url} is empty."
            return "\n".join(urls)
        except Exception as e:
            return self._failed("list_container", e)

    async def delete_resource(self, session_id: str, resource_url: str) -> str:
        """Delete a resource."""
        try:
            return await self.client.delete_resource(session_id, resource_url)
        except Exception as e:
            return self._failed("delete_resource", e)

    async def update_rdf_resource(
        self,
        session_id: str,
        resource_url: str,
        thing_url: str,
        predicate: str,
        value: str,
    ) -> str:
        """Set a predicate value on a thing in an RDF resource.

        Args:
            session_id: Session ID from solid_login.
            resource_url: URL of the RDF document.
            thing_url: Subject IRI inside the document.
            predicate: Predicate IRI.
            value: New value; http(s) values are stored as IRIs.
        """
        try:
            return await self.client.update_rdf_resource(
                session_id, resource_url, thing_url, predicate, value
            )
        except Exception as e:
            return self._failed("update_rdf_resource", e)

    async def grant_access(
        self,
        session_id: str,
        resource_url: str,
        agent_webid: str,
        read: bool = False,
        write: bool = False,
        append: bool = False,
    ) -> str:
        """Grant an agent access to a resource."""
        try:
            modes = AccessModes(read=read, write=write, append=append)
            return await self.client.grant_access(session_id, resource_url, agent_webid, modes)
        except Exception as e:
            return self._failed("grant_access", e)

    async def ping(self) -> str:
        return "pong"

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def aclose(self) -> None:
        """Close the HTTP client created by this server."""
        if self._http is not None:
            await self._http.aclose()

    async def serve(self, transport: str = "stdio") -> None:
        """Serve until the transport closes, then release the HTTP client."""
        logger.info("Starting %s %s (%s)", SERVER_NAME, __version__, transport)
        try:
            if transport == "sse":
                await self.mcp.run_sse_async()
            else:
                await self.mcp.run_stdio_async()
        finally:
            await self.aclose()
            logger.info("%s stopped", SERVER_NAME)

    def run(self, transport: str = "stdio") -> None:
        """Run the server until the transport closes."""
        asyncio.run(self.serve(transport))


def main() -> None:
    """CLI entry point for the MCP server."""
    import argparse

    load_dotenv()

    parser = argparse.ArgumentParser(description="Solid Pod MCP Server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default="stdio",
        help="Transport to use (default: stdio)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: SOLID_LOG_LEVEL or INFO)",
    )
    args = parser.parse_args()

    settings = SolidSettings.from_env()
    if args.log_level:
        settings.log_level = args.log_level
    setup_logging(settings.log_level)

    server = SolidMCPServer(settings=settings)
    server.run(transport=args.transport)


if __name__ == "__main__":
    main()
