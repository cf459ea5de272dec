"""Identity exchange failures."""

from __future__ import annotations


class IdentityExchangeError(Exception):
    """Base exception for identity exchange operations."""

    pass


class ExchangeError(IdentityExchangeError):
    """Raised when the agent request/token pair is rejected or cannot be exchanged."""

    pass


class FetchError(IdentityExchangeError):
    """Raised when fetching profile attributes from a resource server fails."""

    pass


__all__ = ["IdentityExchangeError", "ExchangeError", "FetchError"]
