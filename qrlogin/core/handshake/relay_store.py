"""Process-local relay store keyed by QR session id.

The agent delivers its request/token pair here; the browser that displayed
the QR code picks it up with a take-and-delete. Everything lives in this
process only, so the app must run as a single worker (threads are fine).
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, replace
from threading import Lock
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass
class RelayEntry:
    """State relayed for one QR session."""

    agent_request: Optional[str] = None
    exchange_token: Optional[str] = None
    notification_url: Optional[str] = None
    remember: bool = False
    created_at: float = 0.0
    updated_at: float = 0.0

    @property
    def is_ready(self) -> bool:
        return bool(self.agent_request and self.exchange_token)


class RelayStore:
    """Thread-safe map of QR session id -> RelayEntry.

    ``ttl_seconds`` of 0 disables eviction; otherwise entries untouched for
    longer than the TTL are purged lazily on writes.
    """

    def __init__(self, ttl_seconds: int = 0, clock: Optional[Callable[[], float]] = None) -> None:
        self._entries: Dict[str, RelayEntry] = {}
        self._lock = Lock()
        self._clock = clock or time.monotonic
        self.ttl_seconds = ttl_seconds

    def put(
        self,
        session_id: str,
        agent_request: str,
        exchange_token: str,
        notification_url: Optional[str] = None,
    ) -> None:
        """Record the agent's pair, keeping any remember flag already set."""
        with self._lock:
            self._purge_expired()
            entry = self._entry_for(session_id)
            entry.agent_request = agent_request
            entry.exchange_token = exchange_token
            entry.notification_url = notification_url
            entry.updated_at = self._clock()
        logger.debug("Relay pair stored for %s...", session_id[:8])

    def take_if_ready(self, session_id: str) -> Optional[RelayEntry]:
        """Remove and return the entry only if the agent has delivered its pair."""
        with self._lock:
            entry = self._entries.get(session_id)
            if entry is None or not entry.is_ready:
                return None
            del self._entries[session_id]
        logger.debug("Relay entry consumed for %s...", session_id[:8])
        return entry

    def set_remember(self, session_id: str, remember: bool) -> None:
        with self._lock:
            self._purge_expired()
            entry = self._entry_for(session_id)
            entry.remember = bool(remember)
            entry.updated_at = self._clock()

    def get_remember(self, session_id: str) -> bool:
        with self._lock:
            entry = self._entries.get(session_id)
            return bool(entry and entry.remember)

    def peek(self, session_id: str) -> Optional[RelayEntry]:
        """Copy of the current entry, for inspection only."""
        with self._lock:
            entry = self._entries.get(session_id)
            return replace(entry) if entry else None

    def purge_expired(self) -> int:
        with self._lock:
            return self._purge_expired()

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def _entry_for(self, session_id: str) -> RelayEntry:
        # Caller holds the lock.
        entry = self._entries.get(session_id)
        if entry is None:
            now = self._clock()
            entry = self._entries[session_id] = RelayEntry(created_at=now, updated_at=now)
        return entry

    def _purge_expired(self) -> int:
        # Caller holds the lock.
        if not self.ttl_seconds:
            return 0
        cutoff = self._clock() - self.ttl_seconds
        stale = [sid for sid, entry in self._entries.items() if entry.updated_at < cutoff]
        for sid in stale:
            del self._entries[sid]
        if stale:
            logger.info("Purged %d stale relay entries", len(stale))
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._entries


__all__ = ["RelayEntry", "RelayStore"]
