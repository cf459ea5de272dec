"""Fixed HTML pages served from the static folder."""

from __future__ import annotations

from flask import Blueprint, current_app

pages_bp = Blueprint("pages", __name__)


@pages_bp.get("/")
def index():
    return current_app.send_static_file("pages/index.html")


@pages_bp.get("/error")
def login_error():
    return current_app.send_static_file("pages/login_error.html")


@pages_bp.get("/complete")
def login_complete():
    return current_app.send_static_file("pages/login_complete.html")


@pages_bp.get("/agent/install")
def agent_install():
    return current_app.send_static_file("pages/agent_install.html")
