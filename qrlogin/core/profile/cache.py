"""Resolved profile kept in the caller's browser session."""

from __future__ import annotations

from typing import Any, Dict, MutableMapping, Optional

PROFILE_SESSION_KEY = "profile"

NOT_LOGGED_IN = "NOT_LOGGED_IN"


def store_profile(session: MutableMapping[str, Any], profile: Dict[str, Any]) -> None:
    """Overwrite whatever profile the session held."""
    session[PROFILE_SESSION_KEY] = profile


def fetch_profile(session: MutableMapping[str, Any]) -> Optional[Dict[str, Any]]:
    """Return the stored profile, or None when the caller is not logged in."""
    return session.get(PROFILE_SESSION_KEY) or None


def clear_profile(session: MutableMapping[str, Any]) -> None:
    """Log out: the profile goes together with any handshake state."""
    session.clear()


__all__ = ["PROFILE_SESSION_KEY", "NOT_LOGGED_IN", "store_profile", "fetch_profile", "clear_profile"]
