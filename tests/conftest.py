"""
Shared fixtures: an in-process fake Community Solid Server.

FakeSolidServer is an httpx.MockTransport handler emulating the account
API, the token endpoint and a Pod, so no test touches the network.
"""

import json
from typing import Dict, List, Optional, Tuple

import httpx
import pytest
import pytest_asyncio

ISSUER = "http://localhost:3000/"
WEBID = "http://localhost:3000/alice/profile/card#me"
EMAIL = "alice@example.com"
PASSWORD = "password"

ACCOUNT_TOKEN = "mock_account_token"
CLIENT_ID = "mock_client_id"
CLIENT_SECRET = "mock_client_secret"
ACCESS_TOKEN = "mock_access_token"


class FakeSolidServer:
    """
    Fake CSS instance.

    Attributes:
        calls: Every request received, in order
        resources: url -> (content_type, body)
        forbidden: URLs that answer 403 to any method
        failures: 1-based call number -> Response or Exception to use instead
        accounts: email -> password accepted by the login endpoint
        login_cookie: Set-Cookie value sent with a successful login, if any
    """

    def __init__(self, issuer: str = ISSUER, relative_links: bool = False, expires_in: Optional[int] = 600,
                 login_cookie: Optional[str] = None):
        self.issuer = issuer
        self.relative_links = relative_links
        self.expires_in = expires_in
        self.calls: List[httpx.Request] = []
        self.resources: Dict[str, Tuple[str, str]] = {}
        self.forbidden: set = set()
        self.failures: Dict[int, object] = {}
        self.accounts: Dict[str, str] = {EMAIL: PASSWORD}
        self.login_cookie = login_cookie

    def _link(self, path: str) -> str:
        return path if self.relative_links else f"{self.issuer}{path}"

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        failure = self.failures.get(len(self.calls))
        if isinstance(failure, Exception):
            raise failure
        if isinstance(failure, httpx.Response):
            return failure

        url = str(request.url)
        path = url[len(self.issuer):] if url.startswith(self.issuer) else None

        if path == ".account/":
            return self._account_index(request)
        if path == ".account/login/password/" and request.method == "POST":
            body = json.loads(request.content)
            if self.accounts.get(body.get("email")) == body.get("password"):
                headers = {"set-cookie": self.login_cookie} if self.login_cookie else {}
                return httpx.Response(200, json={"authorization": ACCOUNT_TOKEN}, headers=headers)
            return httpx.Response(403, json={"message": "Invalid email/password combination."})
        if path == ".account/account/1/client-credentials/" and request.method == "POST":
            if request.headers.get("authorization") != f"CSS-Account-Token {ACCOUNT_TOKEN}":
                return httpx.Response(401, json={"message": "Not logged in"})
            return httpx.Response(200, json={"id": CLIENT_ID, "secret": CLIENT_SECRET})
        if path == ".oidc/token" and request.method == "POST":
            if "dpop" not in request.headers:
                return httpx.Response(400, json={"error": "invalid_dpop_proof"})
            body = {"access_token": ACCESS_TOKEN, "token_type": "DPoP"}
            if self.expires_in is not None:
                body["expires_in"] = self.expires_in
            return httpx.Response(200, json=body)

        return self._pod(request, url)

    def _account_index(self, request: httpx.Request) -> httpx.Response:
        controls = {"password": {"login": self._link(".account/login/password/")}}
        if request.headers.get("authorization") == f"CSS-Account-Token {ACCOUNT_TOKEN}":
            controls["account"] = {
                "clientCredentials": self._link(".account/account/1/client-credentials/"),
            }
        return httpx.Response(200, json={"controls": controls})

    def _pod(self, request: httpx.Request, url: str) -> httpx.Response:
        if request.headers.get("authorization") != f"DPoP {ACCESS_TOKEN}" or "dpop" not in request.headers:
            return httpx.Response(401)
        if url in self.forbidden:
            return httpx.Response(403)

        if request.method == "HEAD":
            if url not in self.resources and not url.endswith("/"):
                return httpx.Response(404)
            return httpx.Response(200, headers={"Link": f'<{url.rsplit("/", 1)[-1]}.acl>; rel="acl"'})
        if request.method == "GET":
            if url.endswith("/") and url not in self.resources:
                return self._container(url)
            if url not in self.resources:
                return httpx.Response(404)
            content_type, body = self.resources[url]
            return httpx.Response(200, text=body, headers={"Content-Type": content_type})
        if request.method == "PUT":
            created = url not in self.resources
            self.resources[url] = (request.headers.get("content-type", ""), request.content.decode())
            return httpx.Response(201 if created else 205)
        if request.method == "DELETE":
            if self.resources.pop(url, None) is None:
                return httpx.Response(404)
            return httpx.Response(205)
        return httpx.Response(405)

    def _container(self, url: str) -> httpx.Response:
        children = sorted({
            key[len(url):].split("/")[0] + ("/" if "/" in key[len(url):] else "")
            for key in self.resources
            if key.startswith(url) and key != url and not key.endswith(".acl")
        })
        lines = [
            "@prefix ldp: <http://www.w3.org/ns/ldp#>.",
            "<> a ldp:Container, ldp:BasicContainer.",
        ]
        for child in children:
            lines.append(f"<> ldp:contains <{child}>.")
        return httpx.Response(200, text="\n".join(lines), headers={"Content-Type": "text/turtle"})

    def requests_to(self, suffix: str) -> List[httpx.Request]:
        return [call for call in self.calls if str(call.url).endswith(suffix)]


@pytest.fixture
def fake_server():
    """A fresh fake Solid server."""
    return FakeSolidServer()


@pytest.fixture
def transport(fake_server):
    """Mock transport routing every request to the fake server."""
    return httpx.MockTransport(fake_server)


@pytest_asyncio.fixture
async def http(transport):
    """Async HTTP client wired to the fake server."""
    client = httpx.AsyncClient(transport=transport)
    yield client
    await client.aclose()
