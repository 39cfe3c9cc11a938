"""
Errors - Tagged error hierarchy for the Solid MCP server.

Every error carries an HTTP-style status so the tool layer can render a
uniform message without inspecting arbitrary exceptions.

Taxonomy:
- ConfigurationError: identity or issuer inputs missing
- UpstreamError: a handshake step returned an unusable response
- BadRequest: a tool call is missing a required value (e.g. session ID)
- Unauthorized: the session ID does not resolve to a live session
- DelegatedOperationError: the Pod rejected a delegated operation
"""

from typing import Optional

import httpx


class SolidToolError(Exception):
    """Base error for everything this package raises deliberately."""

    status: int = 500

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status


class ConfigurationError(SolidToolError):
    """Required identity inputs are absent."""

    status = 500


class UpstreamError(SolidToolError):
    """A step of the account handshake failed or returned an unexpected shape."""

    status = 502

    def __init__(self, message: str, step: Optional[str] = None, status: Optional[int] = None):
        super().__init__(message, status)
        self.step = step


class BadRequest(SolidToolError):
    """A required argument (typically the session ID) is missing."""

    status = 400


class Unauthorized(SolidToolError):
    """Session ID present but not resolvable (never existed or expired)."""

    status = 401


class DelegatedOperationError(SolidToolError):
    """
    The remote Pod rejected a delegated operation.

    Carries the remote status code. Never implies that the local session is
    invalid: a remote 401 leaves the session store untouched.
    """

    def __init__(self, status: int, url: str, message: Optional[str] = None):
        super().__init__(message or f"Request to {url} failed with HTTP {status}", status)
        self.url = url


_DELEGATED_HINTS = {
    401: "Unauthorized. Your session may have expired.",
    403: "Forbidden. You may not have permission for this action.",
    404: "Resource not found.",
}


def render_error(error: BaseException) -> str:
    """
    Render any exception raised behind a tool into a single text result.

    Args:
        error: Exception caught at the tool boundary

    Returns:
        Human-readable error message
    """
    if isinstance(error, DelegatedOperationError):
        message = f"A Solid error occurred ({error.status})."
        hint = _DELEGATED_HINTS.get(error.status)
        if hint:
            message += f" {hint}"
        return message

    if isinstance(error, SolidToolError):
        return f"Error ({error.status}): {error.message}"

    # InvalidURL is raised by httpx but is not an HTTPError
    if isinstance(error, (httpx.HTTPError, httpx.InvalidURL)):
        return f"Upstream request failed: {error}"

    return f"An unexpected error occurred: {error}"
