"""Handshake outcome and error codes."""

from __future__ import annotations

# Outcome statuses
STATUS_WAITING = "waiting"
STATUS_RESULT = "result"
STATUS_SUCCESS = "success"
STATUS_ERROR = "error"

# Error kinds (internal); clients only ever see the public codes below
VALIDATION_ERROR = "validation_error"
MISSING_PARAMETER = "missing_parameter"
EXCHANGE_ERROR = "exchange_error"
FETCH_ERROR = "fetch_error"

# Public error codes in JSON responses
ERROR_CODE_INVALID_REQUEST = "invalid_request"
ERROR_CODE_MISSING_PARAMETER = "missing_parameter"
ERROR_CODE_EXCHANGE_FAILED = "exchange_failed"

# Synthetic provider key for the directed identifier
DIRECTED_ID_PROVIDER = "ix.a2p3.net"

# Browser session keys
SESSION_KEY_QR = "qr_session"
SESSION_KEY_NOTIFICATION_URL = "notification_url"
SESSION_KEY_REMEMBER = "remember"

__all__ = [
    "STATUS_WAITING",
    "STATUS_RESULT",
    "STATUS_SUCCESS",
    "STATUS_ERROR",
    "VALIDATION_ERROR",
    "MISSING_PARAMETER",
    "EXCHANGE_ERROR",
    "FETCH_ERROR",
    "ERROR_CODE_INVALID_REQUEST",
    "ERROR_CODE_MISSING_PARAMETER",
    "ERROR_CODE_EXCHANGE_FAILED",
    "DIRECTED_ID_PROVIDER",
    "SESSION_KEY_QR",
    "SESSION_KEY_NOTIFICATION_URL",
    "SESSION_KEY_REMEMBER",
]
