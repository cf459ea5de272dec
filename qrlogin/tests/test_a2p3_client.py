"""A2P3 client against a recorded fake HTTP session."""

from __future__ import annotations

import jwt
import pytest
import requests

pytestmark = pytest.mark.unit

from qrlogin.core.exchange.a2p3 import REQUEST_CLAIM, A2P3Client, check_api_hosts
from qrlogin.core.exchange.errors import ExchangeError, FetchError

SECRET = "unit-test-secret"
IX_URL = "http://ix.a2p3.net"


class _FakeResponse:
    def __init__(self, payload, status_code: int = 200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


class _FakeHttp:
    def __init__(self, routes):
        self.routes = routes
        self.calls = []

    def post(self, url, json=None, timeout=None):
        self.calls.append((url, json))
        route = self.routes[url]
        if isinstance(route, Exception):
            raise route
        return route


def _client(routes) -> A2P3Client:
    return A2P3Client("app.example.com", SECRET, IX_URL, key_id="k1", http=_FakeHttp(routes))


def _decode(token: str, audience: str) -> dict:
    return jwt.decode(token, SECRET, algorithms=["HS256"], audience=audience)


def test_agent_request_is_signed_and_embeds_callback_and_resources():
    client = _client({})

    token = client.create_agent_request("http://app.example/response", ["scope/a", "scope/b"])

    claims = _decode(token, IX_URL)
    assert claims["iss"] == "app.example.com"
    assert claims[REQUEST_CLAIM] == {
        "returnURL": "http://app.example/response",
        "resources": ["scope/a", "scope/b"],
    }
    assert jwt.get_unverified_header(token)["kid"] == "k1"


def test_exchange_then_call_multiple():
    routes = {
        f"{IX_URL}/exchange": _FakeResponse(
            {"result": {"sub": "DI-123", "tokens": {"email.a2p3.net": "rs-token"}}}
        ),
        "http://email.a2p3.net/email/default": _FakeResponse({"result": {"email": "user@example.com"}}),
    }
    client = _client(routes)
    resource = client.new_resource()

    assert resource.exchange("AR1", "T1") == "DI-123"
    results = resource.call_multiple({"http://email.a2p3.net/email/default": None})

    assert results == {"email.a2p3.net": {"email": "user@example.com"}}
    exchange_url, exchange_body = client.http.calls[0]
    assert exchange_url == f"{IX_URL}/exchange"
    assert _decode(exchange_body["request"], IX_URL)[REQUEST_CLAIM] == {"token": "T1", "request": "AR1"}
    api_claims = _decode(client.http.calls[1][1]["request"], "http://email.a2p3.net/email/default")
    assert api_claims[REQUEST_CLAIM] == {"token": "rs-token"}


@pytest.mark.parametrize(
    "route",
    [
        _FakeResponse({"error": {"code": "EXPIRED", "message": "token expired"}}),
        _FakeResponse({"result": {}}),
        _FakeResponse({"result": "oops"}),
        _FakeResponse({"result": ["sub", "DI"]}),
        _FakeResponse({"result": {"sub": {"id": "DI"}, "tokens": {}}}),
        _FakeResponse({"result": {"sub": "DI", "tokens": ["x"]}}),
        _FakeResponse({"result": {"sub": "DI", "tokens": "email.a2p3.net"}}),
        _FakeResponse({}, status_code=500),
        _FakeResponse(ValueError("not json")),
        requests.ConnectionError("ix unreachable"),
    ],
)
def test_exchange_failures_raise_exchange_error(route):
    client = _client({f"{IX_URL}/exchange": route})

    with pytest.raises(ExchangeError):
        client.new_resource().exchange("AR1", "T1")


def test_call_multiple_before_exchange_fails():
    with pytest.raises(FetchError):
        _client({}).new_resource().call_multiple({"http://email.a2p3.net/email/default": None})


def test_call_multiple_without_token_for_host_fails():
    routes = {f"{IX_URL}/exchange": _FakeResponse({"result": {"sub": "DI", "tokens": {}}})}
    resource = _client(routes).new_resource()
    resource.exchange("AR1", "T1")

    with pytest.raises(FetchError):
        resource.call_multiple({"http://people.a2p3.net/details": None})


def test_call_multiple_api_error_raises_fetch_error():
    routes = {
        f"{IX_URL}/exchange": _FakeResponse({"result": {"sub": "DI", "tokens": {"si.a2p3.net": "t"}}}),
        "http://si.a2p3.net/number": _FakeResponse({}, status_code=403),
    }
    resource = _client(routes).new_resource()
    resource.exchange("AR1", "T1")

    with pytest.raises(FetchError):
        resource.call_multiple({"http://si.a2p3.net/number": None})


def test_from_config_reads_app_settings():
    client = A2P3Client.from_config(
        {
            "A2P3_APP_ID": "app.example.com",
            "A2P3_APP_SECRET": SECRET,
            "A2P3_IX_URL": "http://ix.example/",
            "A2P3_KEY_ID": "",
            "A2P3_REQUEST_TTL_SECONDS": 60,
            "A2P3_HTTP_TIMEOUT": 5,
        }
    )

    assert client.ix_url == "http://ix.example"
    assert client.key_id is None
    assert client.request_ttl == 60
    assert client.timeout == 5.0


@pytest.mark.parametrize("payload", ["not-an-object", ["email"], 42])
def test_call_multiple_non_object_result_raises_fetch_error(payload):
    routes = {
        f"{IX_URL}/exchange": _FakeResponse({"result": {"sub": "DI", "tokens": {"email.a2p3.net": "t"}}}),
        "http://email.a2p3.net/email/default": _FakeResponse({"result": payload}),
    }
    resource = _client(routes).new_resource()
    resource.exchange("AR1", "T1")

    with pytest.raises(FetchError):
        resource.call_multiple({"http://email.a2p3.net/email/default": None})


def test_api_hosts_must_be_unique():
    check_api_hosts(["http://email.a2p3.net/email/default", "http://si.a2p3.net/number"])

    with pytest.raises(ValueError, match="share host email.a2p3.net"):
        check_api_hosts(["http://email.a2p3.net/email/default", "http://email.a2p3.net/email/work"])


def test_from_config_rejects_apis_sharing_a_host():
    with pytest.raises(ValueError):
        A2P3Client.from_config(
            {
                "A2P3_APP_ID": "app.example.com",
                "A2P3_APP_SECRET": SECRET,
                "A2P3_IX_URL": IX_URL,
                "A2P3_APIS": ["http://si.a2p3.net/number", "http://si.a2p3.net/other"],
            }
        )
