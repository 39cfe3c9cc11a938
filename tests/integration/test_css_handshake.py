"""
Integration tests for the CSS client-credentials handshake.
"""

import base64
import json

import httpx
import jwt
import pytest

from conftest import (
    ACCESS_TOKEN,
    ACCOUNT_TOKEN,
    CLIENT_ID,
    CLIENT_SECRET,
    EMAIL,
    ISSUER,
    PASSWORD,
    WEBID,
    FakeSolidServer,
)
from solid_mcp.adapters.css_account_auth import CssClientCredentialsAcquirer, normalize_issuer
from solid_mcp.adapters.dpop import DPoPCredential
from solid_mcp.domain.identity import Identity
from solid_mcp.errors import ConfigurationError, UpstreamError

IDENTITY = Identity(EMAIL, PASSWORD)


@pytest.mark.asyncio
async def test_handshake_makes_five_sequential_calls(fake_server, http, transport):
    acquirer = CssClientCredentialsAcquirer(http=http, transport=transport)

    credential = await acquirer.acquire(ISSUER, IDENTITY)

    assert isinstance(credential, DPoPCredential)
    assert credential.webid == WEBID
    assert credential.expires_in == 600

    calls = fake_server.calls
    assert len(calls) == 5
    assert [(c.method, str(c.url)) for c in calls] == [
        ("GET", "http://localhost:3000/.account/"),
        ("POST", "http://localhost:3000/.account/login/password/"),
        ("GET", "http://localhost:3000/.account/"),
        ("POST", "http://localhost:3000/.account/account/1/client-credentials/"),
        ("POST", "http://localhost:3000/.oidc/token"),
    ]

    assert json.loads(calls[1].content) == {"email": EMAIL, "password": PASSWORD}
    assert calls[2].headers["authorization"] == f"CSS-Account-Token {ACCOUNT_TOKEN}"
    assert calls[3].headers["authorization"] == f"CSS-Account-Token {ACCOUNT_TOKEN}"
    assert json.loads(calls[3].content) == {"name": "mcp-demo-token", "webId": WEBID}


@pytest.mark.asyncio
async def test_token_request_uses_basic_auth_and_dpop(fake_server, http, transport):
    acquirer = CssClientCredentialsAcquirer(http=http, transport=transport)
    await acquirer.acquire(ISSUER, IDENTITY)

    token_request = fake_server.calls[4]
    basic = base64.b64decode(token_request.headers["authorization"].split(" ", 1)[1]).decode()
    assert basic == f"{CLIENT_ID}:{CLIENT_SECRET}"
    assert token_request.headers["content-type"] == "application/x-www-form-urlencoded"
    assert token_request.content == b"grant_type=client_credentials&scope=webid"

    proof = jwt.decode(
        token_request.headers["dpop"],
        options={"verify_signature": False},
    )
    assert proof["htu"] == "http://localhost:3000/.oidc/token"
    assert proof["htm"] == "POST"


@pytest.mark.asyncio
async def test_client_secret_is_uri_encoded():
    server = FakeSolidServer()
    server.failures[4] = httpx.Response(200, json={"id": "id:with/chars", "secret": "s e@cret"})

    transport = httpx.MockTransport(server)
    async with httpx.AsyncClient(transport=transport) as http:
        await CssClientCredentialsAcquirer(http=http, transport=transport).acquire(ISSUER, IDENTITY)

    basic = base64.b64decode(server.calls[4].headers["authorization"].split(" ", 1)[1]).decode()
    assert basic == "id%3Awith%2Fchars:s%20e%40cret"


@pytest.mark.asyncio
async def test_credential_reuses_handshake_key(fake_server, http, transport):
    credential = await CssClientCredentialsAcquirer(http=http, transport=transport).acquire(ISSUER, IDENTITY)
    fake_server.resources["http://localhost:3000/alice/file.txt"] = ("text/plain", "hello")

    response = await credential.request("GET", "http://localhost:3000/alice/file.txt")

    token_jwk = jwt.get_unverified_header(fake_server.calls[4].headers["dpop"])["jwk"]
    request_jwk = jwt.get_unverified_header(fake_server.calls[5].headers["dpop"])["jwk"]
    assert response.text == "hello"
    assert fake_server.calls[5].headers["authorization"] == f"DPoP {ACCESS_TOKEN}"
    assert token_jwk == request_jwk


@pytest.mark.asyncio
async def test_relative_control_links_are_resolved():
    server = FakeSolidServer(relative_links=True)

    transport = httpx.MockTransport(server)
    async with httpx.AsyncClient(transport=transport) as http:
        await CssClientCredentialsAcquirer(http=http, transport=transport).acquire("http://localhost:3000", IDENTITY)

    assert str(server.calls[1].url) == "http://localhost:3000/.account/login/password/"
    assert str(server.calls[3].url) == "http://localhost:3000/.account/account/1/client-credentials/"


@pytest.mark.asyncio
@pytest.mark.parametrize("call_number", [1, 2, 3, 4, 5])
async def test_transport_failure_propagates_unchanged(fake_server, http, transport, call_number):
    """A network failure at any step surfaces as the very same exception."""
    error = httpx.ConnectError("connection refused")
    fake_server.failures[call_number] = error

    with pytest.raises(httpx.ConnectError) as exc_info:
        await CssClientCredentialsAcquirer(http=http, transport=transport).acquire(ISSUER, IDENTITY)

    assert exc_info.value is error
    assert len(fake_server.calls) == call_number  # No later step ran


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "call_number, body, step, missing",
    [
        (1, {"controls": {}}, "discover", "controls.password.login"),
        (2, {"message": "ok"}, "login", "authorization"),
        (3, {"controls": {"password": {}}}, "controls", "controls.account.clientCredentials"),
        (4, {"id": "only-id"}, "client_credentials", "secret"),
        (5, {"token_type": "DPoP"}, "token", "access_token"),
    ],
)
async def test_missing_field_raises_upstream_error(fake_server, http, transport, call_number, body, step, missing):
    fake_server.failures[call_number] = httpx.Response(200, json=body)

    with pytest.raises(UpstreamError) as exc_info:
        await CssClientCredentialsAcquirer(http=http, transport=transport).acquire(ISSUER, IDENTITY)

    assert exc_info.value.step == step
    assert missing in str(exc_info.value)


@pytest.mark.asyncio
async def test_error_status_raises_upstream_error(fake_server, http, transport):
    fake_server.failures[1] = httpx.Response(500, json={"error": "Server Error"})

    with pytest.raises(UpstreamError) as exc_info:
        await CssClientCredentialsAcquirer(http=http, transport=transport).acquire(ISSUER, IDENTITY)

    assert "HTTP 500" in str(exc_info.value)
    assert len(fake_server.calls) == 1


@pytest.mark.asyncio
async def test_wrong_password_is_reported(http, transport):
    with pytest.raises(UpstreamError) as exc_info:
        await CssClientCredentialsAcquirer(http=http, transport=transport).acquire(ISSUER, Identity(EMAIL, "wrong"))

    assert exc_info.value.step == "login"
    assert "HTTP 403" in exc_info.value.message


@pytest.mark.asyncio
async def test_non_json_response(fake_server, http, transport):
    fake_server.failures[1] = httpx.Response(200, text="<html>not json</html>")

    with pytest.raises(UpstreamError, match="non-JSON"):
        await CssClientCredentialsAcquirer(http=http, transport=transport).acquire(ISSUER, IDENTITY)


def test_normalize_issuer():
    assert normalize_issuer("http://localhost:3000") == "http://localhost:3000/"
    assert normalize_issuer("http://localhost:3000/") == "http://localhost:3000/"
    assert normalize_issuer("https://pod.example/base") == "https://pod.example/base/"
    with pytest.raises(ConfigurationError):
        normalize_issuer("")


@pytest.mark.parametrize("issuer", ["localhost:3000/", "//localhost:3000/", "ftp://localhost/", "http://"])
def test_normalize_issuer_rejects_non_http_urls(issuer):
    with pytest.raises(ConfigurationError, match="Invalid OIDC issuer URL"):
        normalize_issuer(issuer)


@pytest.mark.asyncio
async def test_invalid_issuer_fails_before_any_call(fake_server, http, transport):
    with pytest.raises(ConfigurationError):
        await CssClientCredentialsAcquirer(http=http, transport=transport).acquire("localhost:3000/", IDENTITY)

    assert fake_server.calls == []


@pytest.mark.asyncio
async def test_handshake_client_is_not_the_delegated_client(fake_server, http, transport):
    """Account cookies from the login step stay in the handshake client."""
    fake_server.login_cookie = "css-account=mock_account_token; Path=/"

    await CssClientCredentialsAcquirer(http=http, transport=transport).acquire(ISSUER, IDENTITY)

    assert fake_server.calls[4].headers["cookie"] == "css-account=mock_account_token"
    assert len(http.cookies) == 0
