"""
Domain Models - Pure business entities.

No infrastructure dependencies. Domain logic only.
"""

from solid_mcp.domain.session import Session
from solid_mcp.domain.identity import Identity
from solid_mcp.domain.access import AccessModes

__all__ = [
    "Session",
    "Identity",
    "AccessModes",
]
