"""
project: Hallway Planner
module: floorplan_api.py
License: MIT

Floor plan generation API.

GET or POST /api/floorplan generates a plan. Options come from the JSON body
(POST) or the query string (GET) using the camelCase option names; pass
metrics=1 to include generation metrics in the response. Strict-mode
failures map to 422 with the error kind and user-facing suggestions.
"""
from flask import Blueprint, jsonify, request

from app.floorplan import FloorPlanError, FloorPlanOptions, generate_floor_plan, metrics_enabled
from app.floorplan.config import OPTION_RANGES
from app.logging_utils import get_logger

bp_floorplan = Blueprint("floorplan", __name__)
log = get_logger("floorplan.api")

_TRUTHY = {"1", "true", "yes", "on"}


def _request_options():
    """Merge query string and JSON body (body wins). Returns None on a bad body."""
    data = {k: v for k, v in request.args.items() if k != "metrics"}
    if request.method == "POST" and request.get_data():
        body = request.get_json(silent=True)
        if not isinstance(body, dict):
            return None
        data.update({k: v for k, v in body.items() if k != "metrics"})
    return data


def _wants_metrics() -> bool:
    raw = request.args.get("metrics")
    if raw is None and request.is_json:
        body = request.get_json(silent=True) or {}
        raw = body.get("metrics") if isinstance(body, dict) else None
    if raw is None:
        return False
    return str(raw).strip().lower() in _TRUTHY and metrics_enabled()


@bp_floorplan.route("/api/floorplan", methods=["GET", "POST"])
def floorplan():
    data = _request_options()
    if data is None:
        return jsonify({"error": "request body must be a JSON object", "kind": "bad_request"}), 400
    include_metrics = _wants_metrics()
    try:
        plan = generate_floor_plan(data, enable_metrics=include_metrics or None)
    except FloorPlanError as exc:
        log.warn(event="floorplan_rejected", kind=exc.kind, requested=exc.requested, placed=exc.placed)
        return jsonify(exc.to_dict()), 422
    return jsonify(plan.to_dict(include_metrics=include_metrics))


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


@bp_floorplan.route("/api/floorplan/defaults")
def floorplan_defaults():
    data = FloorPlanOptions().to_dict()
    data["ranges"] = {_camel(name): {"min": lo, "max": hi, "integer": is_int} for name, (lo, hi, is_int) in OPTION_RANGES.items()}
    return jsonify(data)


@bp_floorplan.route("/api/floorplan/health")
def floorplan_health():
    return jsonify({"status": "ok", "metrics": metrics_enabled()})
