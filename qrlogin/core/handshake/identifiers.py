"""QR session identifiers: generation and shape validation."""

from __future__ import annotations

import re
import secrets
from typing import Any

SESSION_ID_BYTES = 16

_SESSION_ID_CHARS = re.compile(r"[A-Za-z0-9_-]+")


def generate_session_id() -> str:
    """Return a fresh URL-safe identifier built from 16 random bytes."""
    return secrets.token_urlsafe(SESSION_ID_BYTES)


# Computed once from the generator so validation can never drift from it.
SESSION_ID_LENGTH = len(generate_session_id())


def is_valid_session_id(value: Any) -> bool:
    """Check an untrusted identifier before it is used as a store key."""
    if not isinstance(value, str) or len(value) != SESSION_ID_LENGTH:
        return False
    return _SESSION_ID_CHARS.fullmatch(value) is not None


__all__ = ["SESSION_ID_LENGTH", "generate_session_id", "is_valid_session_id"]
