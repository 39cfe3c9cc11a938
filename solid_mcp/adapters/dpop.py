"""
DPoP Credential - Bearer token bound to a proof-of-possession key.

Every request made through the credential carries a fresh DPoP proof (a
short-lived ES256 JWT) signed with the same key used during the token
request, so the token is useless without the key.
"""

import base64
import hashlib
import json
import time
import uuid
from http.cookiejar import CookieJar, DefaultCookiePolicy
from typing import Optional, Mapping, Dict, Any
from urllib.parse import urlsplit, urlunsplit

import httpx
import jwt
from jwt.algorithms import ECAlgorithm
from cryptography.hazmat.primitives.asymmetric import ec

from solid_mcp.ports.credential_port import AuthenticatedRequester


def delegated_http_client(
    timeout: float, transport: Optional[httpx.AsyncBaseTransport] = None
) -> httpx.AsyncClient:
    """
    Client shared by delegated requests of every session.

    Its cookie jar accepts no cookies, so nothing one user's responses set
    is replayed on another user's requests.
    """
    jar = CookieJar(policy=DefaultCookiePolicy(allowed_domains=[]))
    return httpx.AsyncClient(timeout=timeout, transport=transport, cookies=jar)


def _b64url(data: bytes) -> str:
    """Unpadded base64url encoding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _htu(url: str) -> str:
    """Strip query and fragment, as required for the htu claim."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


class DPoPKey:
    """
    EC P-256 keypair used to sign DPoP proofs.

    A new key is generated for every handshake and never leaves the
    credential it was generated for.
    """

    algorithm = "ES256"

    def __init__(self, private_key: ec.EllipticCurvePrivateKey):
        self._private_key = private_key
        self.public_jwk: Dict[str, Any] = json.loads(
            ECAlgorithm.to_jwk(private_key.public_key())
        )

    @classmethod
    def generate(cls) -> "DPoPKey":
        """Generate a fresh keypair."""
        return cls(ec.generate_private_key(ec.SECP256R1()))

    def public_key(self) -> ec.EllipticCurvePublicKey:
        return self._private_key.public_key()

    def proof(self, url: str, method: str, access_token: Optional[str] = None) -> str:
        """
        Create a DPoP proof JWT for a single request.

        Args:
            url: Target URL (query and fragment are dropped)
            method: HTTP method
            access_token: Bound access token; adds the ath claim when given

        Returns:
            Signed proof, suitable for the DPoP header
        """
        claims: Dict[str, Any] = {
            "htu": _htu(url),
            "htm": method.upper(),
            "jti": str(uuid.uuid4()),
            "iat": int(time.time()),
        }
        if access_token:
            claims["ath"] = _b64url(hashlib.sha256(access_token.encode("ascii")).digest())

        return jwt.encode(
            claims,
            self._private_key,
            algorithm=self.algorithm,
            headers={"typ": "dpop+jwt", "jwk": self.public_jwk},
        )


class DPoPCredential(AuthenticatedRequester):
    """
    DPoP-bound access token, usable only through request().

    The access token and key are kept private; repr() hides both.
    """

    def __init__(
        self,
        access_token: str,
        key: DPoPKey,
        webid: str,
        http: httpx.AsyncClient,
        expires_in: Optional[int] = None,
    ):
        """
        Initialize the credential.

        Args:
            access_token: Access token from the token endpoint
            key: Key the token was bound to during the token request
            webid: WebID the token was issued for
            http: HTTP client used for delegated requests
            expires_in: Token lifetime in seconds, if reported
        """
        self._access_token = access_token
        self._key = key
        self._webid = webid
        self._http = http
        self._expires_in = expires_in

    @property
    def webid(self) -> str:
        return self._webid

    @property
    def expires_in(self) -> Optional[int]:
        return self._expires_in

    async def request(
        self,
        method: str,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        content: Optional[str] = None,
    ) -> httpx.Response:
        """Send a request with DPoP authorization and a fresh proof."""
        merged = dict(headers or {})
        merged["Authorization"] = f"DPoP {self._access_token}"
        merged["DPoP"] = self._key.proof(url, method, access_token=self._access_token)

        return await self._http.request(method, url, headers=merged, content=content)

    def __repr__(self) -> str:
        return f"DPoPCredential(webid={self._webid!r})"
