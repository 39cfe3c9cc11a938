"""
Configuration for the Solid MCP server.

Values come from the process environment (optionally populated from a .env
file by the CLI entry point). Nothing here is validated at import or start
time: missing identity values are reported when a login is attempted.

Environment variables:
- SOLID_EMAIL: Account email used when solid_login omits one
- SOLID_PASSWORD: Account password used when solid_login omits one
- SOLID_OIDC_ISSUER: Default issuer base URL (e.g. http://localhost:3000/)
- SOLID_SESSION_TTL: Session lifetime in seconds (default 3600)
- SOLID_HTTP_TIMEOUT: Timeout in seconds for each outbound call (default 30)
- SOLID_CLIENT_NAME: Name given to issued client credentials
- SOLID_LOG_LEVEL: Logging level (default INFO)
"""

import os
from dataclasses import dataclass, field
from typing import Optional

DEFAULT_SESSION_TTL = 3600
DEFAULT_HTTP_TIMEOUT = 30.0
DEFAULT_CLIENT_NAME = "mcp-demo-token"


def _env(name: str) -> Optional[str]:
    """Read an environment variable, treating empty strings as unset."""
    return os.environ.get(name) or None


@dataclass
class SolidSettings:
    """Process-wide settings for the Solid MCP server."""

    email: Optional[str] = field(default_factory=lambda: _env("SOLID_EMAIL"))
    password: Optional[str] = field(default_factory=lambda: _env("SOLID_PASSWORD"))
    oidc_issuer: Optional[str] = field(default_factory=lambda: _env("SOLID_OIDC_ISSUER"))

    session_ttl: int = field(
        default_factory=lambda: int(os.environ.get("SOLID_SESSION_TTL", DEFAULT_SESSION_TTL))
    )
    http_timeout: float = field(
        default_factory=lambda: float(os.environ.get("SOLID_HTTP_TIMEOUT", DEFAULT_HTTP_TIMEOUT))
    )
    client_name: str = field(
        default_factory=lambda: os.environ.get("SOLID_CLIENT_NAME", DEFAULT_CLIENT_NAME)
    )
    log_level: str = field(default_factory=lambda: os.environ.get("SOLID_LOG_LEVEL", "INFO"))

    @classmethod
    def from_env(cls) -> "SolidSettings":
        """Create settings from environment variables."""
        return cls()
