"""CLI helpers for manual agent testing.

Usage:
    flask new-session-id
    flask agent-request --callback http://localhost:8080/response
"""

from __future__ import annotations

import click
from flask import current_app
from flask.cli import with_appcontext

from qrlogin.core.handshake.identifiers import generate_session_id


@click.command("new-session-id")
def new_session_id_command():
    """Print a fresh QR session id."""
    click.echo(generate_session_id())


@click.command("agent-request")
@click.option("--callback", "-c", default=None, help="Callback URL (defaults to <host>/response)")
@with_appcontext
def agent_request_command(callback: str | None):
    """Print a signed agent request for the configured resources."""
    coordinator = current_app.extensions["handshake"]
    host = current_app.config.get("PUBLIC_HOST_URL") or f"http://localhost:{current_app.config['LISTEN_PORT']}"
    callback_url = callback or f"{host}{coordinator.callback_path}"
    click.echo(coordinator.exchange_client.create_agent_request(callback_url, coordinator.resources))


def register_commands(app):
    """Register CLI commands with the app."""
    app.cli.add_command(new_session_id_command)
    app.cli.add_command(agent_request_command)
