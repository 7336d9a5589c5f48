"""Structural diagnostics for generated plans.

`analyze(plan)` recomputes the invariants a valid plan must satisfy and
returns the offending items per category. Every list is empty for a healthy
plan; `scripts/diagnose_seeds.py` turns non-empty lists into a failing exit.
"""
from __future__ import annotations
from collections import Counter
from typing import Any, Dict, List, Optional

from .cells import perimeter_of
from .config import GrowthTuning
from .geometry import DOOR, MIN_SEGMENT_LENGTH, WINDOW
from .plan import Plan

AXIS_EPSILON = 1e-6


def _axis_aligned(seg) -> bool:
    return abs(seg.x1 - seg.x2) < AXIS_EPSILON or abs(seg.y1 - seg.y2) < AXIS_EPSILON


def _in_bounds(seg, width: float, height: float) -> bool:
    return all(-AXIS_EPSILON <= v <= width + AXIS_EPSILON for v in (seg.x1, seg.x2)) and all(
        -AXIS_EPSILON <= v <= height + AXIS_EPSILON for v in (seg.y1, seg.y2)
    )


def analyze(plan: Plan, style: Optional[float] = None, tuning: Optional[GrowthTuning] = None) -> Dict[str, List[Any]]:
    """Invariant violations by category. `style` (0..1) enables the ratio ceiling check."""
    cols = max((x for h in plan.hallways for x, _ in h.cells), default=-1) + 1
    cols = max([cols] + [r.x + r.width for r in plan.rooms])
    rows = max([max((y for h in plan.hallways for _, y in h.cells), default=-1) + 1] + [r.y + r.height for r in plan.rooms])
    width = max(plan.meta.width, cols)
    height = max(plan.meta.height, rows)

    hallway_cells = plan.hallway_cells()
    seen = Counter()
    for room in plan.rooms:
        seen.update(room.cells)
    overlapping = sorted(c for c, n in seen.items() if n > 1)
    room_in_hallway = sorted(set(seen) & hallway_cells)

    segments = list(plan.walls) + list(plan.openings)
    return {
        "overlapping_room_cells": overlapping,
        "room_cells_in_hallway": room_in_hallway,
        "empty_rooms": [r.id for r in plan.rooms if not r.cells],
        "non_axis_segments": [s for s in segments if not _axis_aligned(s)],
        "off_grid_segments": [s for s in segments if _axis_aligned(s) and not _on_grid_line(s)],
        "short_wall_segments": [s for s in plan.walls if s.length <= MIN_SEGMENT_LENGTH],
        "out_of_bounds_segments": [s for s in segments if not _in_bounds(s, width, height)],
        "unknown_opening_kinds": [o for o in plan.openings if o.kind not in (DOOR, WINDOW)],
        "door_count_mismatch": (
            [] if plan.meta.placed_door_count <= plan.meta.requested_door_count
            else [(plan.meta.requested_door_count, plan.meta.placed_door_count)]
        ),
        "ratio_ceiling_breaches": _ratio_breaches(plan, style, tuning or GrowthTuning()),
    }


def _on_grid_line(seg) -> bool:
    if abs(seg.y1 - seg.y2) < AXIS_EPSILON:
        return abs(seg.y1 - round(seg.y1)) < AXIS_EPSILON
    return abs(seg.x1 - round(seg.x1)) < AXIS_EPSILON


def _ratio_breaches(plan: Plan, style: Optional[float], tuning: GrowthTuning) -> List[str]:
    if style is None:
        return []
    out = []
    for room in plan.rooms:
        cells = set(room.cells)
        if cells and perimeter_of(cells) / len(cells) > tuning.ratio_ceiling(len(cells), style) + AXIS_EPSILON:
            out.append(room.id)
    return out


def is_clean(report: Dict[str, List[Any]]) -> bool:
    return all(not v for v in report.values())


__all__ = ["analyze", "is_clean"]
