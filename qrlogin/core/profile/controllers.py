"""Profile HTTP controllers (read back / forget the logged-in profile)."""

from __future__ import annotations

from flask import Blueprint, jsonify, redirect, session, url_for

from qrlogin.core.profile.cache import NOT_LOGGED_IN, clear_profile, fetch_profile

profile_bp = Blueprint("profile", __name__)


@profile_bp.get("/profile")
def profile():
    result = fetch_profile(session)
    if result is None:
        return jsonify({"ok": False, "error": NOT_LOGGED_IN})
    return jsonify({"ok": True, "result": result})


@profile_bp.get("/logout")
def logout():
    clear_profile(session)
    return redirect(url_for("pages.index"))
