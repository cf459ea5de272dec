"""URL helpers for building links the agent and browser will follow."""

from __future__ import annotations

from typing import Optional
from urllib.parse import urlencode

from flask import current_app, request


def host_url() -> str:
    """Public origin of this app: configured value, else the one the request came in on."""
    configured = current_app.config.get("PUBLIC_HOST_URL")
    if configured:
        return configured.rstrip("/")
    return request.host_url.rstrip("/")


def agent_url(base: str, **params: Optional[str]) -> str:
    """Append non-empty query parameters to an agent launch URL."""
    query = urlencode({k: v for k, v in params.items() if v})
    return f"{base}?{query}" if query else base
