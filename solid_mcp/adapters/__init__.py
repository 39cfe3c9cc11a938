"""
Adapters - Implementations of ports.

Authentication & Sessions:
- CssClientCredentialsAcquirer: Community Solid Server client-credentials handshake
- DPoPCredential: DPoP-bound access token (the authenticated-request capability)
- MemorySessionAdapter: In-process sessions with TTL expiry

Pod Storage:
- SolidPodAdapter: LDP/Turtle/WAC resource operations
"""

from solid_mcp.adapters.dpop import DPoPCredential, DPoPKey
from solid_mcp.adapters.css_account_auth import CssClientCredentialsAcquirer
from solid_mcp.adapters.memory_session import MemorySessionAdapter
from solid_mcp.adapters.solid_pod import SolidPodAdapter

__all__ = [
    # Authentication & Sessions
    "CssClientCredentialsAcquirer",
    "DPoPCredential",
    "DPoPKey",
    "MemorySessionAdapter",
    # Pod Storage
    "SolidPodAdapter",
]
