"""Handshake coordinator: ties QR sessions, agent callbacks and polling together.

Lifecycle of one login attempt::

    CODE_ISSUED -> AGENT_ENGAGED -> RELAYED | DIRECT_RESOLVED -> CONSUMED

The callback endpoint serves both delivery paths. A ``state`` parameter means
the agent scanned a QR code shown on another device and the proof is relayed
through the store; no ``state`` means the agent was launched from this very
browser and the profile is resolved straight into the caller's session. A
missing state is never mapped onto any QR session.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Mapping, MutableMapping, Optional

from qrlogin.core.exchange.client import IdentityExchangeClient
from qrlogin.core.exchange.errors import ExchangeError, FetchError
from qrlogin.core.handshake.constants import (
    DIRECTED_ID_PROVIDER,
    EXCHANGE_ERROR,
    FETCH_ERROR,
    MISSING_PARAMETER,
    SESSION_KEY_NOTIFICATION_URL,
    SESSION_KEY_REMEMBER,
    VALIDATION_ERROR,
)
from qrlogin.core.handshake.identifiers import generate_session_id, is_valid_session_id
from qrlogin.core.handshake.models import Engagement, IssuedCode, Outcome
from qrlogin.core.handshake.relay_store import RelayStore
from qrlogin.core.profile.cache import store_profile

logger = logging.getLogger(__name__)


class HandshakeCoordinator:
    """Entry points of the cross-device login protocol."""

    def __init__(
        self,
        store: RelayStore,
        exchange_client: IdentityExchangeClient,
        *,
        resources: Iterable[str],
        apis: Mapping[str, Optional[Any]],
        callback_path: str = "/response",
        qr_path: str = "/QR/",
    ) -> None:
        self.store = store
        self.exchange_client = exchange_client
        self.resources = list(resources)
        self.apis = dict(apis)
        self.callback_path = callback_path
        self.qr_path = qr_path

    def issue_code(self, host_url: str) -> IssuedCode:
        """Mint a QR session id; nothing is stored until the agent answers."""
        session_id = generate_session_id()
        return IssuedCode(session_id=session_id, qr_url=f"{host_url}{self.qr_path}{session_id}")

    def engage_agent(self, host_url: str, session_id: Optional[str] = None) -> Optional[Engagement]:
        """
        Build a fresh agent request for an agent that is about to log in.

        Returns None when ``session_id`` is given but malformed; the store is
        not consulted in that case.
        """
        if session_id is not None and not is_valid_session_id(session_id):
            logger.info("Rejected malformed QR session id on agent engagement")
            return None

        agent_request = self.exchange_client.create_agent_request(
            f"{host_url}{self.callback_path}", self.resources
        )
        if session_id is None:
            return Engagement(agent_request=agent_request)
        remember = self.store.get_remember(session_id)
        return Engagement(agent_request=agent_request, state=session_id, notification_url=remember)

    def submit_proof(
        self,
        agent_request: Optional[str],
        exchange_token: Optional[str],
        caller_session: MutableMapping[str, Any],
        *,
        state: Optional[str] = None,
        notification_url: Optional[str] = None,
    ) -> Outcome:
        """Handle the agent callback for either delivery path."""
        if not agent_request or not exchange_token:
            return Outcome.failure(VALIDATION_ERROR)

        if state:
            if not is_valid_session_id(state):
                logger.info("Rejected malformed QR session id on agent callback")
                return Outcome.failure(VALIDATION_ERROR)
            self.store.put(state, agent_request, exchange_token, notification_url)
            return Outcome.success()

        # Direct path: agent and browser are the same device.
        return self._resolve_into(caller_session, agent_request, exchange_token)

    def poll(self, session_id: Optional[str], caller_session: MutableMapping[str, Any]) -> Outcome:
        """Check whether the agent has answered for ``session_id``."""
        if not session_id:
            return Outcome.failure(MISSING_PARAMETER)
        if not is_valid_session_id(session_id):
            return Outcome.failure(VALIDATION_ERROR)

        entry = self.store.take_if_ready(session_id)
        if entry is None:
            return Outcome.waiting()

        outcome = self._resolve_into(caller_session, entry.agent_request, entry.exchange_token)
        if outcome.ok and (entry.notification_url or entry.remember):
            outcome.notify = True
            # Lets the next visit from this browser offer agent notification.
            caller_session[SESSION_KEY_REMEMBER] = True
            if entry.notification_url:
                caller_session[SESSION_KEY_NOTIFICATION_URL] = entry.notification_url
        return outcome

    def set_remember(self, session_id: Optional[str], remember: Any) -> Outcome:
        if not session_id or not remember or not is_valid_session_id(session_id):
            return Outcome.failure(VALIDATION_ERROR)
        self.store.set_remember(session_id, bool(remember))
        return Outcome.success()

    def resolve(self, agent_request: str, exchange_token: str) -> Dict[str, Any]:
        """
        Exchange the agent's token and fetch every configured profile API.

        Returns:
            Mapping of provider host -> attributes, plus the directed
            identifier under ``ix.a2p3.net``.

        Raises:
            ExchangeError: the token pair was rejected
            FetchError: a profile API call failed
        """
        resource = self.exchange_client.new_resource()
        directed_id = resource.exchange(agent_request, exchange_token)
        results = dict(resource.call_multiple(self.apis) or {})
        results[DIRECTED_ID_PROVIDER] = {"di": directed_id}
        return results

    def _resolve_into(
        self,
        caller_session: MutableMapping[str, Any],
        agent_request: str,
        exchange_token: str,
    ) -> Outcome:
        try:
            profile = self.resolve(agent_request, exchange_token)
        except ExchangeError as exc:
            logger.warning(f"Identity exchange failed: {exc}")
            return Outcome.failure(EXCHANGE_ERROR)
        except FetchError as exc:
            logger.warning(f"Profile fetch failed: {exc}")
            return Outcome.failure(FETCH_ERROR)
        store_profile(caller_session, profile)
        return Outcome.result(profile)


__all__ = ["HandshakeCoordinator"]
