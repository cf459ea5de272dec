"""qrlogin application factory and bootstrap."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from flask import Flask

from qrlogin.config import config_by_name
from qrlogin.core.exchange import A2P3Client, IdentityExchangeClient
from qrlogin.core.handshake.coordinator import HandshakeCoordinator
from qrlogin.core.handshake.relay_store import RelayStore
from qrlogin.extensions import init_extensions


def create_app(
    config_name: Optional[str] = None,
    *,
    exchange_client: Optional[IdentityExchangeClient] = None,
) -> Flask:
    """Create and configure the qrlogin Flask application."""
    env_name = (config_name or os.environ.get("APP_ENV") or "development").lower()

    app = Flask(
        __name__,
        static_folder=str(Path(__file__).parent / "static"),
        static_url_path="",
        template_folder=str(Path(__file__).parent / "templates"),
    )
    config_cls = config_by_name.get(env_name, config_by_name["development"])
    app.config.from_object(config_cls)

    init_extensions(app)

    # Shared engines. The relay store is process-local: run a single worker.
    relay_store = RelayStore(ttl_seconds=app.config.get("RELAY_ENTRY_TTL_SECONDS", 0))
    app.extensions["relay_store"] = relay_store
    app.extensions["handshake"] = HandshakeCoordinator(
        relay_store,
        exchange_client or A2P3Client.from_config(app.config),
        resources=app.config["A2P3_RESOURCES"],
        apis={url: None for url in app.config["A2P3_APIS"]},
    )

    _register_blueprints(app)
    _register_error_handlers(app)

    from qrlogin.scripts.commands import register_commands

    register_commands(app)

    return app


def _register_blueprints(app: Flask) -> None:
    """Lazy import and register all controllers."""
    from qrlogin.core.handshake.controllers import backdoor_bp, handshake_bp
    from qrlogin.core.pages.controllers import pages_bp
    from qrlogin.core.profile.controllers import profile_bp

    app.register_blueprint(handshake_bp)
    app.register_blueprint(profile_bp)
    app.register_blueprint(pages_bp)

    # Development login against the setup service; never exposed in production.
    env = (app.config.get("ENV") or "").lower()
    if env != "production" or app.debug:
        app.register_blueprint(backdoor_bp)


def _register_error_handlers(app: Flask) -> None:
    """Basic JSON error responses."""
    from werkzeug.exceptions import HTTPException

    @app.errorhandler(HTTPException)
    def _http_error(exc: HTTPException):
        return {"ok": False, "error": exc.description}, exc.code

    @app.errorhandler(Exception)
    def _generic_error(exc: Exception):
        app.logger.exception("Unhandled error: %s", exc)
        # In debug/testing, surface the exception message to speed up diagnosis
        if app.debug or app.testing:
            return {"ok": False, "error": str(exc)}, 500
        return {"ok": False, "error": "unexpected_error"}, 500


__all__ = ["create_app"]
