"""Identity exchange collaborator: contract, A2P3 implementation, errors."""

from qrlogin.core.exchange.a2p3 import A2P3Client
from qrlogin.core.exchange.client import IdentityExchangeClient, ResourceSession
from qrlogin.core.exchange.errors import ExchangeError, FetchError, IdentityExchangeError

__all__ = [
    "A2P3Client",
    "IdentityExchangeClient",
    "ResourceSession",
    "IdentityExchangeError",
    "ExchangeError",
    "FetchError",
]
