"""
Solid MCP - Session-scoped Solid Pod tools for MCP clients.

Hexagonal architecture: a credential acquirer runs the Community Solid
Server client-credentials handshake, a session store keeps the resulting
DPoP-bound credential behind an opaque session ID, and every Pod operation
resolves that ID first.

Usage:
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

    # Authenticate
    session_id = await client.login("http://localhost:3000/", email, password)

    # Use the session
    text = await client.read_resource(session_id, "http://localhost:3000/alice/file.txt")
"""

__version__ = "0.1.0"

from solid_mcp.sdk.client import SolidClient
from solid_mcp.domain.session import Session
from solid_mcp.domain.identity import Identity
from solid_mcp.domain.access import AccessModes
from solid_mcp.config import SolidSettings

__all__ = [
    "SolidClient",
    "Session",
    "Identity",
    "AccessModes",
    "SolidSettings",
]
