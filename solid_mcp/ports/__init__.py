"""
Ports - Interfaces for credential acquisition, sessions and Pod storage.

Hexagonal architecture: These define WHAT we need, not HOW.
Adapters provide the HOW.
"""

from solid_mcp.ports.credential_port import AuthenticatedRequester
from solid_mcp.ports.session_port import SessionPort
from solid_mcp.ports.auth_port import CredentialAcquirerPort
from solid_mcp.ports.pod_port import PodStoragePort

__all__ = [
    # Credential capability
    "AuthenticatedRequester",
    # Authentication & Sessions
    "CredentialAcquirerPort",
    "SessionPort",
    # Delegated storage
    "PodStoragePort",
]
