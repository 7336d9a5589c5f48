#!/usr/bin/env python3
"""Floor plan structural diagnostics for specific seeds.

Usage:
  python scripts/diagnose_seeds.py 1 42 9001

If no seeds are provided as CLI args, a default list is used. Plans are
generated in best-effort mode so unmet targets are reported instead of raised.
Exits with non-zero status if structural issues are detected.
"""

from __future__ import annotations

import json
import os
import sys
from typing import List

# Ensure project root on path if executed directly
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from app.floorplan import FloorPlanOptions, generate_floor_plan  # noqa: E402 import after path fix
from app.floorplan.debug_checks import analyze  # noqa: E402 import after path fix

DEFAULT_SEEDS = [1, 42, 292372, 730727]


def run_for_seed(seed: int) -> dict:
    plan = generate_floor_plan(seed=seed, strict_door_count=False, require_exterior_exits=False)
    res = analyze(plan, style=FloorPlanOptions().shape_style)
    issues = {k: len(v) for k, v in res.items()}
    return {
        "seed": seed,
        "issues": issues,
        "door_count_met": plan.meta.door_count_met,
        "exterior_exits": plan.meta.has_exterior_exit,
        "attempts": plan.meta.attempts,
        "ok": all(v == 0 for v in issues.values()),
    }


def main(argv: List[str]) -> int:
    seeds = [int(a) for a in argv] if argv else DEFAULT_SEEDS
    results = [run_for_seed(s) for s in seeds]
    print(json.dumps({"results": results}, indent=2))
    # Non-zero exit if any failure
    if not all(r["ok"] for r in results):
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
