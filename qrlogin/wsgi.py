"""WSGI entrypoint for qrlogin."""

from __future__ import annotations

from qrlogin import create_app

app = create_app()

if __name__ == "__main__":
    import os

    host = os.environ.get("FLASK_RUN_HOST", "127.0.0.1")
    port = int(os.environ.get("FLASK_RUN_PORT", str(app.config["LISTEN_PORT"])))
    # Threaded, single process: the relay store lives in this process.
    app.run(host=host, port=port, threaded=True)  # nosec B104
