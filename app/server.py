"""
project: Hallway Planner
module: server.py
License: MIT

Server bootstrap.

Exposes a helper to start the Flask development server with logging wired
to both the console and a rotating file under instance/.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from app import app


def start_server(host="0.0.0.0", port=5000, debug: bool = False):  # pragma: no cover (integration / runtime only)
    """Start the HTTP server.

    When debug=True, Flask's debugger and reloader provide verbose tracebacks.
    Also configures application logging to a rotating file and console.
    """
    _configure_logging()
    try:
        print(f"[INFO] Starting floor plan server on {host}:{port}")
        app.run(host=host, port=port, debug=debug)
    except KeyboardInterrupt:
        print("\n[INFO] Server stopped by user (Ctrl+C)")
        sys.exit(0)


def _configure_logging(log_dir=None):
    """Configure logging to both console and a rotating file.

    The file path defaults to instance/app.log. Retains a few backups to avoid growth.
    Returns the log file path.
    """
    log_dir = log_dir or app.instance_path
    try:
        os.makedirs(log_dir, exist_ok=True)
    except OSError:
        pass
    log_path = os.path.join(log_dir, "app.log")

    root = logging.getLogger()
    root.setLevel(logging.INFO)
    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    file_handler = RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=3)
    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(fmt)

    console = logging.StreamHandler()
    console.setLevel(logging.INFO)
    console.setFormatter(fmt)

    # Avoid duplicate handlers if reconfigured
    for h in list(root.handlers):
        root.removeHandler(h)

    root.addHandler(file_handler)
    root.addHandler(console)
    return log_path
