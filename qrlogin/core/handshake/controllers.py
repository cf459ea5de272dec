"""Handshake HTTP controllers.

JSON endpoints are called by the web page; ``/QR/<id>``, ``/login/direct`` and
``/response`` are followed by the agent (or a plain QR reader) and answer
with pages or redirects.
"""

from __future__ import annotations

from flask import (
    Blueprint,
    current_app,
    jsonify,
    redirect,
    render_template,
    request,
    session,
    url_for,
)
from pydantic import ValidationError

from qrlogin.core.handshake.constants import (
    ERROR_CODE_EXCHANGE_FAILED,
    ERROR_CODE_INVALID_REQUEST,
    ERROR_CODE_MISSING_PARAMETER,
    MISSING_PARAMETER,
    SESSION_KEY_QR,
    STATUS_SUCCESS,
    STATUS_WAITING,
    VALIDATION_ERROR,
)
from qrlogin.core.handshake.coordinator import HandshakeCoordinator
from qrlogin.core.handshake.models import Outcome
from qrlogin.core.handshake.schemas import PollRequest, ProofCallback, RememberRequest
from qrlogin.core.utils.urls import agent_url, host_url
from qrlogin.extensions import limiter

handshake_bp = Blueprint("handshake", __name__)
backdoor_bp = Blueprint("backdoor", __name__)


def _coordinator() -> HandshakeCoordinator:
    return current_app.extensions["handshake"]


def _payload() -> dict:
    # The web page may post JSON or a plain form.
    return request.get_json(silent=True) or request.form.to_dict()


def _error_response(outcome: Outcome):
    if outcome.error == MISSING_PARAMETER:
        return jsonify({"ok": False, "error": ERROR_CODE_MISSING_PARAMETER}), 400
    if outcome.error == VALIDATION_ERROR:
        return jsonify({"ok": False, "error": ERROR_CODE_INVALID_REQUEST}), 400
    return jsonify({"ok": False, "error": ERROR_CODE_EXCHANGE_FAILED}), 502


def _meta_refresh(redirect_url: str):
    # Shows an info page when no agent is registered for the URL scheme.
    return render_template("meta_refresh.html", redirect_url=redirect_url)


@handshake_bp.get("/login/QR")
@limiter.limit("30/minute")
def login_qr():
    issued = _coordinator().issue_code(host_url())
    session[SESSION_KEY_QR] = issued.session_id
    return jsonify({"ok": True, "result": {"qrURL": issued.qr_url, "qrSession": issued.session_id}})


@handshake_bp.get("/login/direct")
@limiter.limit("30/minute")
def login_direct():
    engagement = _coordinator().engage_agent(host_url())
    return _meta_refresh(
        agent_url(current_app.config["AGENT_DIRECT_URL"], request=engagement.agent_request)
    )


@handshake_bp.get("/QR/<qr_session>")
@limiter.limit("60/minute")
def qr_code(qr_session: str):
    engagement = _coordinator().engage_agent(host_url(), qr_session)
    if engagement is None:
        return redirect(url_for("pages.login_error"))

    # Agents append json=true when scanning; generic readers get a launch page.
    if request.args.get("json"):
        result = {"agentRequest": engagement.agent_request, "state": engagement.state}
        if engagement.notification_url:
            result["notificationURL"] = True
        return jsonify({"ok": True, "result": result})

    return _meta_refresh(
        agent_url(
            current_app.config["AGENT_QR_URL"],
            request=engagement.agent_request,
            state=engagement.state,
            notificationURL="true" if engagement.notification_url else None,
        )
    )


@handshake_bp.get("/response")
@limiter.limit("30/minute")
def login_response():
    try:
        data = ProofCallback.model_validate(request.args.to_dict())
    except ValidationError:
        return redirect(url_for("pages.login_error"))

    outcome = _coordinator().submit_proof(
        data.request,
        data.token,
        session,
        state=data.state,
        notification_url=data.notification_url,
    )
    if not outcome.ok:
        return redirect(url_for("pages.login_error"))
    if outcome.status == STATUS_SUCCESS:
        # Relayed for a browser on another device.
        return redirect(url_for("pages.login_complete"))
    return redirect(url_for("pages.index"))


@handshake_bp.post("/check/QR")
@limiter.limit("120/minute")
def check_qr():
    try:
        data = PollRequest.model_validate(_payload())
    except ValidationError:
        return jsonify({"ok": False, "error": ERROR_CODE_INVALID_REQUEST}), 400

    outcome = _coordinator().poll(data.qr_session, session)
    if outcome.status == STATUS_WAITING:
        return jsonify({"ok": True, "status": STATUS_WAITING})
    if not outcome.ok:
        return _error_response(outcome)

    body = {"ok": True, "result": outcome.profile}
    if outcome.notify:
        body["notificationURL"] = True
    return jsonify(body)


@handshake_bp.post("/remember/me")
@limiter.limit("10/minute")
def remember_me():
    try:
        data = RememberRequest.model_validate(_payload())
    except ValidationError:
        return jsonify({"ok": False, "error": ERROR_CODE_INVALID_REQUEST}), 400

    outcome = _coordinator().set_remember(session.get(SESSION_KEY_QR), data.remember)
    if not outcome.ok:
        return jsonify({"ok": False, "error": ERROR_CODE_INVALID_REQUEST}), 400
    return jsonify({"ok": True, "result": {"success": True}})


@backdoor_bp.get("/login/backdoor")
def login_backdoor():
    engagement = _coordinator().engage_agent(host_url())
    return redirect(agent_url(current_app.config["BACKDOOR_LOGIN_URL"], request=engagement.agent_request))
