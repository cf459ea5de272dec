from __future__ import annotations

import pytest

pytestmark = pytest.mark.integration

from qrlogin.core.handshake.identifiers import is_valid_session_id


def test_new_session_id_prints_valid_id(app):
    result = app.test_cli_runner().invoke(args=["new-session-id"])

    assert result.exit_code == 0
    assert is_valid_session_id(result.output.strip())


def test_agent_request_uses_configured_client(app, exchange_client):
    result = app.test_cli_runner().invoke(args=["agent-request", "--callback", "http://cb.example/response"])

    assert result.exit_code == 0
    assert result.output.strip() == "AR1"
    assert exchange_client.requests_created == 1
