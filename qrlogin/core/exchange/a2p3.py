"""A2P3 identity exchange client (HTTP + signed JWT requests)."""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Iterable, Mapping, Optional
from urllib.parse import urlparse

import jwt
import requests

from qrlogin.core.exchange.client import IdentityExchangeClient, ResourceSession
from qrlogin.core.exchange.errors import ExchangeError, FetchError, IdentityExchangeError

logger = logging.getLogger(__name__)

REQUEST_CLAIM = "request.a2p3.org"
SIGNING_ALGORITHM = "HS256"


def check_api_hosts(apis: Iterable[str]) -> None:
    """Profile results are keyed by API host, so each host may appear only once."""
    seen: Dict[str, str] = {}
    for api_url in apis:
        host = urlparse(api_url).netloc
        if not host:
            raise ValueError(f"A2P3 API URL has no host: {api_url!r}")
        if host in seen:
            raise ValueError(f"A2P3 APIs {seen[host]!r} and {api_url!r} share host {host}")
        seen[host] = api_url


class A2P3Client(IdentityExchangeClient):
    """Signs agent requests for this app and talks to the identity exchange."""

    def __init__(
        self,
        app_id: str,
        app_secret: str,
        ix_url: str,
        *,
        key_id: Optional[str] = None,
        request_ttl: int = 300,
        timeout: float = 10.0,
        http: Optional[requests.Session] = None,
    ) -> None:
        self.app_id = app_id
        self.app_secret = app_secret
        self.ix_url = ix_url.rstrip("/")
        self.key_id = key_id
        self.request_ttl = request_ttl
        self.timeout = timeout
        self.http = http or requests.Session()

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "A2P3Client":
        check_api_hosts(config.get("A2P3_APIS") or ())
        return cls(
            app_id=config["A2P3_APP_ID"],
            app_secret=config["A2P3_APP_SECRET"],
            ix_url=config["A2P3_IX_URL"],
            key_id=config.get("A2P3_KEY_ID") or None,
            request_ttl=int(config.get("A2P3_REQUEST_TTL_SECONDS", 300)),
            timeout=float(config.get("A2P3_HTTP_TIMEOUT", 10)),
        )

    def create_agent_request(self, callback_url: str, resources: Iterable[str]) -> str:
        return self.sign(
            self.ix_url,
            {"returnURL": callback_url, "resources": list(resources)},
        )

    def new_resource(self) -> "A2P3Resource":
        return A2P3Resource(self)

    def sign(self, audience: str, request: Dict[str, Any]) -> str:
        now = int(time.time())
        claims = {
            "iss": self.app_id,
            "aud": audience,
            "iat": now,
            "exp": now + self.request_ttl,
            REQUEST_CLAIM: request,
        }
        headers = {"kid": self.key_id} if self.key_id else None
        return jwt.encode(claims, self.app_secret, algorithm=SIGNING_ALGORITHM, headers=headers)

    def post(self, url: str, signed_request: str, error_cls: type[IdentityExchangeError]) -> Dict[str, Any]:
        """POST a signed request and unwrap the ``result`` member of the reply."""
        try:
            resp = self.http.post(url, json={"request": signed_request}, timeout=self.timeout)
            resp.raise_for_status()
            body = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"A2P3 call to {url} failed: {e}")
            raise error_cls(f"Request to {url} failed: {e}") from e

        if not isinstance(body, dict):
            raise error_cls(f"Unexpected response from {url}")
        if body.get("error"):
            error = body["error"]
            message = error.get("message") if isinstance(error, dict) else str(error)
            logger.warning(f"A2P3 call to {url} returned error: {message}")
            raise error_cls(message or "remote error")
        result = body.get("result")
        if result is None:
            return {}
        if not isinstance(result, dict):
            logger.warning(f"A2P3 call to {url} returned a non-object result")
            raise error_cls(f"Unexpected result from {url}")
        return result


class A2P3Resource(ResourceSession):
    """Holds the resource-server tokens between exchange and call_multiple."""

    def __init__(self, client: A2P3Client) -> None:
        self.client = client
        self.directed_id: Optional[str] = None
        self.tokens: Optional[Dict[str, str]] = None

    def exchange(self, agent_request: str, exchange_token: str) -> str:
        signed = self.client.sign(
            self.client.ix_url,
            {"token": exchange_token, "request": agent_request},
        )
        result = self.client.post(f"{self.client.ix_url}/exchange", signed, ExchangeError)
        directed_id = result.get("sub")
        if not directed_id or not isinstance(directed_id, str):
            raise ExchangeError("Exchange response missing directed identifier")
        tokens = result.get("tokens") or {}
        if not isinstance(tokens, dict):
            raise ExchangeError("Exchange response has malformed resource tokens")
        self.directed_id = directed_id
        self.tokens = dict(tokens)
        return directed_id

    def call_multiple(self, apis: Mapping[str, Optional[Any]]) -> Dict[str, Any]:
        """Call each API with its resource-server token; results are keyed by API host."""
        if self.tokens is None:
            raise FetchError("exchange() must succeed before call_multiple()")

        results: Dict[str, Any] = {}
        for api_url, params in apis.items():
            host = urlparse(api_url).netloc
            token = self.tokens.get(host)
            if not token or not isinstance(token, str):
                raise FetchError(f"No access token issued for {host}")
            request: Dict[str, Any] = {"token": token}
            if params:
                request["params"] = params
            signed = self.client.sign(api_url, request)
            results[host] = self.client.post(api_url, signed, FetchError)
        return results


__all__ = ["A2P3Client", "A2P3Resource", "REQUEST_CLAIM", "check_api_hosts"]
