"""
Gunicorn configuration for qrlogin.

The relay store is held in process memory, so the app runs as a single
worker process; concurrency comes from gthread threads. All settings can be
overridden from the environment.

    gunicorn -c deploy/gunicorn.conf.py qrlogin.wsgi:app
"""

from __future__ import annotations

import logging
import os

# ===== Server Binding =====
bind = os.environ.get("GUNICORN_BIND", f"0.0.0.0:{os.environ.get('PORT', '8080')}")
backlog = int(os.environ.get("GUNICORN_BACKLOG", "2048"))

# ===== Worker Settings =====
# More than one worker would split the relay store between processes.
worker_class = "gthread"
workers = 1
threads = int(os.environ.get("GUNICORN_THREADS", "8"))
max_requests = 0
worker_tmp_dir = os.environ.get("GUNICORN_WORKER_TMP_DIR", "/dev/shm")

# ===== Timeout Settings =====
# Covers the round trips to the identity exchange and resource servers.
timeout = int(os.environ.get("GUNICORN_TIMEOUT", "60"))
graceful_timeout = int(os.environ.get("GUNICORN_GRACEFUL_TIMEOUT", "30"))
keepalive = int(os.environ.get("GUNICORN_KEEPALIVE", "5"))

# ===== Logging =====
accesslog = os.environ.get("GUNICORN_ACCESSLOG", "-")
errorlog = os.environ.get("GUNICORN_ERRORLOG", "-")
loglevel = os.environ.get("GUNICORN_LOGLEVEL", "info")
capture_output = True

# Query strings carry agent tokens; log the path only.
access_log_format = os.environ.get(
    "GUNICORN_ACCESS_LOG_FORMAT",
    '{"timestamp": "%(t)s", "remote": "%(h)s", "method": "%(m)s", "path": "%(U)s", '
    '"status": %(s)s, "bytes": %(b)s, "response_time": %(D)s}',
)

# ===== Server Mechanics =====
daemon = False
preload_app = False

# ===== Security Settings =====
limit_request_line = int(os.environ.get("GUNICORN_LIMIT_REQUEST_LINE", "8190"))
limit_request_fields = int(os.environ.get("GUNICORN_LIMIT_REQUEST_FIELDS", "100"))
limit_request_field_size = int(os.environ.get("GUNICORN_LIMIT_REQUEST_FIELD_SIZE", "8190"))
forwarded_allow_ips = os.environ.get("GUNICORN_FORWARDED_ALLOW_IPS", "127.0.0.1")

proc_name = os.environ.get("GUNICORN_PROC_NAME", "qrlogin")


# ===== Lifecycle Hooks =====
def when_ready(server):
    logging.getLogger(__name__).info(f"qrlogin ready on {bind} ({threads} threads, single worker)")


def worker_abort(worker):
    logging.getLogger(__name__).warning(f"Worker {worker.pid} timed out (>{timeout}s); relay state is lost")
