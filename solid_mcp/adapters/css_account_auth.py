"""
CSS Account Auth Adapter - Client-credentials handshake against a
Community Solid Server account API.

Five strictly sequential steps, each one outbound call:
1. GET  <issuer>.account/                 -> controls.password.login
2. POST login link {email, password}      -> authorization (account token)
3. GET  <issuer>.account/ (account token) -> controls.account.clientCredentials
4. POST client credentials link {name, webId} -> id, secret
5. POST <issuer>.oidc/token (Basic + DPoP) -> access_token

No retries. The first failure aborts the sequence: unusable responses raise
UpstreamError, transport failures propagate unchanged.
"""

import base64
import logging
from typing import Optional, Dict, Any
from urllib.parse import quote, urljoin, urlsplit

import httpx

from solid_mcp.adapters.dpop import DPoPCredential, DPoPKey, delegated_http_client
from solid_mcp.config import DEFAULT_CLIENT_NAME, DEFAULT_HTTP_TIMEOUT
from solid_mcp.domain.identity import Identity
from solid_mcp.errors import ConfigurationError, UpstreamError
from solid_mcp.ports.auth_port import CredentialAcquirerPort

logger = logging.getLogger(__name__)

STEP_DISCOVER = "discover"
STEP_LOGIN = "login"
STEP_CONTROLS = "controls"
STEP_CLIENT_CREDENTIALS = "client_credentials"
STEP_TOKEN = "token"

STEP_DESCRIPTIONS = {
    STEP_DISCOVER: "Account API discovery",
    STEP_LOGIN: "Account login",
    STEP_CONTROLS: "Authenticated account API discovery",
    STEP_CLIENT_CREDENTIALS: "Client credentials request",
    STEP_TOKEN: "Access token request",
}

# encodeURIComponent leaves these unescaped as well
_URI_COMPONENT_SAFE = "!~*'()"


def normalize_issuer(issuer_url: str) -> str:
    """Ensure the issuer is an absolute http(s) URL ending with a slash."""
    if not issuer_url:
        raise ConfigurationError("An OIDC issuer URL is required (e.g. http://localhost:3000/).")
    parts = urlsplit(issuer_url)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ConfigurationError(
            f"Invalid OIDC issuer URL '{issuer_url}': expected an absolute http(s) URL "
            "(e.g. http://localhost:3000/)."
        )
    return issuer_url if issuer_url.endswith("/") else f"{issuer_url}/"



def _parse_json(response: httpx.Response, step: str) -> Dict[str, Any]:
    """Return the JSON object body of a handshake response."""
    description = STEP_DESCRIPTIONS[step]
    if response.is_error:
        raise UpstreamError(
            f"{description} failed with HTTP {response.status_code}",
            step=step,
        )
    try:
        data = response.json()
    except ValueError:
        raise UpstreamError(f"{description} returned a non-JSON response", step=step)
    if not isinstance(data, dict):
        raise UpstreamError(f"{description} returned an unexpected response shape", step=step)
    return data


def _field(data: Dict[str, Any], *path: str, step: str) -> str:
    """Extract a non-empty string at a nested path of a handshake response."""
    value: Any = data
    for key in path:
        value = value.get(key) if isinstance(value, dict) else None
    if not isinstance(value, str) or not value:
        raise UpstreamError(
            f"{STEP_DESCRIPTIONS[step]} response is missing '{'.'.join(path)}'",
            step=step,
        )
    return value


class CssClientCredentialsAcquirer(CredentialAcquirerPort):
    """
    Credential acquirer for Community Solid Server.

    Produces a DPoPCredential; the DPoP key generated in step 5 is reused
    for every later request made through that credential.

    Each handshake runs on its own short-lived client, so account cookies
    set during login die with the handshake and never reach delegated
    requests or another user's login.
    """

    def __init__(
        self,
        http: Optional[httpx.AsyncClient] = None,
        client_name: str = DEFAULT_CLIENT_NAME,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the acquirer.

        Args:
            http: Shared client for delegated Pod requests (created if omitted)
            client_name: Name registered for issued client credentials
            timeout: Per-request timeout in seconds
            transport: Transport for handshake clients (default network transport)
        """
        self._owns_http = http is None
        self._http = http or delegated_http_client(timeout, transport)
        self._client_name = client_name
        self._timeout = timeout
        self._transport = transport

    async def acquire(self, issuer_url: str, identity: Identity) -> DPoPCredential:
        """Run the five-step handshake and return a DPoP-bound credential."""
        issuer = normalize_issuer(issuer_url)

        async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as handshake:
            access_token, key, expires_in = await self._handshake(handshake, issuer, identity)

        webid = identity.webid_for(issuer)
        logger.info("Authentication complete for %s", webid)
        return DPoPCredential(
            access_token=access_token,
            key=key,
            webid=webid,
            http=self._http,
            expires_in=int(expires_in) if isinstance(expires_in, (int, float)) else None,
        )

    async def _handshake(self, http: httpx.AsyncClient, issuer: str, identity: Identity):
        account_url = f"{issuer}.account/"

        logger.info("Discovering account API at %s", account_url)
        index = _parse_json(await http.get(account_url), STEP_DISCOVER)
        login_url = urljoin(issuer, _field(index, "controls", "password", "login", step=STEP_DISCOVER))

        logger.info("Logging in to account API as %s", identity.email)
        login = _parse_json(
            await http.post(login_url, json={"email": identity.email, "password": identity.password}),
            STEP_LOGIN,
        )
        account_token = _field(login, "authorization", step=STEP_LOGIN)
        account_headers = {"authorization": f"CSS-Account-Token {account_token}"}

        controls = _parse_json(
            await http.get(account_url, headers=account_headers),
            STEP_CONTROLS,
        )
        credentials_url = urljoin(
            issuer,
            _field(controls, "controls", "account", "clientCredentials", step=STEP_CONTROLS),
        )

        webid = identity.webid_for(issuer)
        logger.info("Requesting client credentials for WebID %s", webid)
        issued = _parse_json(
            await http.post(
                credentials_url,
                json={"name": self._client_name, "webId": webid},
                headers=account_headers,
            ),
            STEP_CLIENT_CREDENTIALS,
        )
        client_id = _field(issued, "id", step=STEP_CLIENT_CREDENTIALS)
        client_secret = _field(issued, "secret", step=STEP_CLIENT_CREDENTIALS)

        key = DPoPKey.generate()
        token_url = f"{issuer}.oidc/token"
        basic = base64.b64encode(
            f"{quote(client_id, safe=_URI_COMPONENT_SAFE)}:{quote(client_secret, safe=_URI_COMPONENT_SAFE)}".encode()
        ).decode("ascii")

        logger.info("Requesting access token from %s", token_url)
        token = _parse_json(
            await http.post(
                token_url,
                headers={
                    "authorization": f"Basic {basic}",
                    "content-type": "application/x-www-form-urlencoded",
                    "dpop": key.proof(token_url, "POST"),
                },
                content="grant_type=client_credentials&scope=webid",
            ),
            STEP_TOKEN,
        )
        access_token = _field(token, "access_token", step=STEP_TOKEN)
        return access_token, key, token.get("expires_in")

    async def aclose(self):
        """Close the delegated-request client if this adapter created it."""
        if self._owns_http:
            await self._http.aclose()
