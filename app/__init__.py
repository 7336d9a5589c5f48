"""
project: Hallway Planner
module: __init__.py
License: MIT

Flask application factory for the floor plan service.

Configuration is sourced from environment variables (optionally loaded from
a local .env) with defaults suitable for development. A local `instance/`
directory holds the rotating log file written by the server entrypoint.
"""

import logging
import os
import uuid

from dotenv import load_dotenv
from flask import Flask, jsonify

# Load .env if present so FLOORPLAN_* flags can be supplied without
# exporting shell variables during development.
load_dotenv()

app = Flask(__name__, instance_relative_config=True)

try:
    os.makedirs(app.instance_path, exist_ok=True)
except OSError:
    # Read-only checkouts still serve plans; only file logging is lost.
    pass


def _env_flag(name: str, default: str = "1") -> bool:
    return os.getenv(name, default).strip().lower() not in {"0", "false", "no", "off", ""}


app.config.update(
    SECRET_KEY=os.getenv("SECRET_KEY", "dev-secret-change-me"),
    JSON_SORT_KEYS=False,
    FLOORPLAN_ENABLE_METRICS=_env_flag("FLOORPLAN_ENABLE_METRICS"),
)

from app.routes.floorplan_api import bp_floorplan  # noqa: E402

app.register_blueprint(bp_floorplan)


def create_app():
    """Return the Flask app instance."""
    return app


@app.errorhandler(500)
def internal_error(e):
    error_id = uuid.uuid4().hex[:8]
    logging.exception("Unhandled exception (id=%s)", error_id)
    return jsonify({"error": "internal server error", "error_id": error_id}), 500
