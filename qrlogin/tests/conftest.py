import sys
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from qrlogin import create_app
from qrlogin.core.exchange.client import IdentityExchangeClient, ResourceSession
from qrlogin.core.exchange.errors import ExchangeError, FetchError


# ==================== Pytest Markers ====================
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (Flask app + test client)")


class FakeResource(ResourceSession):
    def __init__(self, client: "FakeExchangeClient") -> None:
        self.client = client

    def exchange(self, agent_request: str, exchange_token: str) -> str:
        self.client.exchanges.append((agent_request, exchange_token))
        if self.client.fail_exchange:
            raise ExchangeError("token rejected")
        return f"di-{exchange_token}"

    def call_multiple(self, apis: Mapping[str, Optional[Any]]) -> Dict[str, Any]:
        if self.client.fail_fetch:
            raise FetchError("resource server unavailable")
        return {"email.a2p3.net": {"email": "user@example.com"}}


class FakeExchangeClient(IdentityExchangeClient):
    """In-memory stand-in for the identity exchange."""

    def __init__(self) -> None:
        self.fail_exchange = False
        self.fail_fetch = False
        self.requests_created = 0
        self.exchanges: List[Tuple[str, str]] = []

    def create_agent_request(self, callback_url: str, resources) -> str:
        self.requests_created += 1
        return f"AR{self.requests_created}"

    def new_resource(self) -> FakeResource:
        return FakeResource(self)


@pytest.fixture()
def exchange_client():
    return FakeExchangeClient()


@pytest.fixture()
def app(exchange_client):
    app = create_app("testing", exchange_client=exchange_client)
    ctx = app.app_context()
    ctx.push()
    try:
        yield app
    finally:
        ctx.pop()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def relay_store(app):
    return app.extensions["relay_store"]


@pytest.fixture()
def coordinator(app):
    return app.extensions["handshake"]
