"""Value objects returned by the handshake coordinator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from qrlogin.core.handshake.constants import (
    STATUS_ERROR,
    STATUS_RESULT,
    STATUS_SUCCESS,
    STATUS_WAITING,
)


@dataclass
class IssuedCode:
    session_id: str
    qr_url: str


@dataclass
class Engagement:
    """Agent request handed to an agent, optionally tied to a QR session."""

    agent_request: str
    state: Optional[str] = None
    notification_url: bool = False


@dataclass
class Outcome:
    """Result of a coordinator operation; failures never escape as exceptions."""

    status: str
    profile: Optional[Dict[str, Any]] = None
    error: Optional[str] = None
    # Set when the consumed relay entry asked for agent notification
    notify: bool = False

    @property
    def ok(self) -> bool:
        return self.status != STATUS_ERROR

    @classmethod
    def waiting(cls) -> "Outcome":
        return cls(status=STATUS_WAITING)

    @classmethod
    def success(cls) -> "Outcome":
        return cls(status=STATUS_SUCCESS)

    @classmethod
    def result(cls, profile: Dict[str, Any]) -> "Outcome":
        return cls(status=STATUS_RESULT, profile=profile)

    @classmethod
    def failure(cls, error: str) -> "Outcome":
        return cls(status=STATUS_ERROR, error=error)


__all__ = ["IssuedCode", "Engagement", "Outcome"]
