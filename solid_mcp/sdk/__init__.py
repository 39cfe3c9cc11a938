"""High-level client combining credential acquisition, sessions and Pod storage."""

from solid_mcp.sdk.client import SolidClient

__all__ = ["SolidClient"]
