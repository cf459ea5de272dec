"""Contract for the identity exchange collaborator."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Mapping, Optional


class ResourceSession(ABC):
    """One exchange attempt: trade the agent's token, then fetch attributes.

    Tokens obtained by ``exchange`` are kept on the instance and used by
    ``call_multiple``, so a session must not be shared between logins.
    """

    @abstractmethod
    def exchange(self, agent_request: str, exchange_token: str) -> str:
        """
        Trade the agent request and token for the user's directed identifier.

        Raises:
            ExchangeError: token pair invalid, expired or rejected
        """

    @abstractmethod
    def call_multiple(self, apis: Mapping[str, Optional[Any]]) -> Dict[str, Any]:
        """
        Call every API in ``apis`` and return results keyed by provider host.

        Raises:
            FetchError: any API call failed
        """


class IdentityExchangeClient(ABC):
    """Builds agent requests and opens resource sessions."""

    @abstractmethod
    def create_agent_request(self, callback_url: str, resources: Iterable[str]) -> str:
        """Return an opaque agent request embedding the callback URL and scopes."""

    @abstractmethod
    def new_resource(self) -> ResourceSession:
        pass


__all__ = ["IdentityExchangeClient", "ResourceSession"]
