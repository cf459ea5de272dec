"""Application configuration for qrlogin."""

from __future__ import annotations

import os
import secrets
from typing import Dict, List, Optional, Type

from dotenv import load_dotenv

load_dotenv()

DEFAULT_RESOURCES = [
    "http://email.a2p3.net/scope/default",
    "http://people.a2p3.net/scope/details",
    "http://si.a2p3.net/scope/number",
    "http://health.a2p3.net/scope/prov_number",
]

DEFAULT_APIS = [
    "http://email.a2p3.net/email/default",
    "http://people.a2p3.net/details",
    "http://si.a2p3.net/number",
    "http://health.a2p3.net/prov_number",
]


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.environ.get(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def _env_flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


def _public_host_url() -> Optional[str]:
    url = os.environ.get("PUBLIC_HOST_URL")
    if url:
        return url.rstrip("/")
    # Legacy DotCloud deployments only expose the host name.
    dotcloud_host = os.environ.get("DOTCLOUD_WWW_HTTP_HOST")
    if dotcloud_host:
        return f"https://{dotcloud_host}"
    return None


class BaseConfig:
    """Base configuration loaded for all environments."""

    # A fresh secret per process unless one is supplied; existing cookies die on restart.
    SECRET_KEY = os.environ.get("SECRET_KEY") or secrets.token_urlsafe(16)
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = "Lax"
    SESSION_COOKIE_PATH = "/"
    SESSION_COOKIE_SECURE = _env_flag("SESSION_COOKIE_SECURE")

    # Small JSON/form bodies only
    MAX_CONTENT_LENGTH = int(os.environ.get("MAX_CONTENT_LENGTH", str(10 * 1024)))

    LISTEN_PORT = int(os.environ.get("LISTEN_PORT", "8080"))
    PUBLIC_HOST_URL = _public_host_url()

    RATELIMIT_DEFAULT = "300/hour"
    RATELIMIT_STORAGE_URI = os.environ.get("RATELIMIT_STORAGE_URI", "memory://")
    RATELIMIT_ENABLED = _env_flag("RATELIMIT_ENABLED", "true")

    # Identity exchange
    A2P3_APP_ID = os.environ.get("A2P3_APP_ID", "app.example.com")
    A2P3_APP_SECRET = os.environ.get("A2P3_APP_SECRET", "change-me")
    A2P3_KEY_ID = os.environ.get("A2P3_KEY_ID", "")
    A2P3_IX_URL = os.environ.get("A2P3_IX_URL", "http://ix.a2p3.net")
    A2P3_REQUEST_TTL_SECONDS = int(os.environ.get("A2P3_REQUEST_TTL_SECONDS", "300"))
    A2P3_HTTP_TIMEOUT = float(os.environ.get("A2P3_HTTP_TIMEOUT", "10"))
    A2P3_RESOURCES = _env_list("A2P3_RESOURCES", DEFAULT_RESOURCES)
    A2P3_APIS = _env_list("A2P3_APIS", DEFAULT_APIS)

    # Agent launch URLs
    AGENT_DIRECT_URL = os.environ.get("AGENT_DIRECT_URL", "a2p3.net://token")
    AGENT_QR_URL = os.environ.get("AGENT_QR_URL", "a2p3://token")
    BACKDOOR_LOGIN_URL = os.environ.get("BACKDOOR_LOGIN_URL", "http://setup.a2p3.net/backdoor/login")

    # 0 keeps relay entries until consumed or the process restarts
    RELAY_ENTRY_TTL_SECONDS = int(os.environ.get("RELAY_ENTRY_TTL_SECONDS", "0"))


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    ENV = "development"


class TestingConfig(BaseConfig):
    TESTING = True
    SECRET_KEY = "testing-secret"
    RATELIMIT_ENABLED = False
    PUBLIC_HOST_URL = "http://localhost:8080"
    A2P3_APP_SECRET = "testing-app-secret"
    RELAY_ENTRY_TTL_SECONDS = 0


class ProductionConfig(BaseConfig):
    ENV = "production"
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_SAMESITE = "Lax"


config_by_name: Dict[str, Type[BaseConfig]] = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    # CI pipelines set APP_ENV=ci; map to testing defaults.
    "ci": TestingConfig,
}
