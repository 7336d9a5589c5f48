"""Pipeline orchestration for floor plan generation.

One attempt runs every stage on a fresh seeded stream:

    hallways -> hallway walls -> door candidates -> rooms (adaptive scale,
    growth, exterior exits) -> windows -> wall / opening compilation

`generate_floor_plan` repeats attempts with decorrelated seeds until one
meets the door and exit targets or the attempt budget runs out, then applies
the strict-mode checks to the best attempt seen.
"""
from __future__ import annotations
import os
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from ..logging_utils import get_logger
from .compiler import CompiledWalls, compile_walls
from .config import Bounds, FloorPlanOptions, derive_room_size_scale
from .doors import choose_door_openings
from .errors import DoorCountUnmetError, ExteriorExitUnmetError
from .geometry import WINDOW, Opening, Wall
from .hallways import HallwayGroup, build_hallway_groups, hallway_ownership
from .metrics import init_metrics
from .plan import Plan, PlanHallway, PlanMeta, PlanRoom
from .rng import ATTEMPT_SEED_STRIDE, SeededRng, derive_seed
from .rooms import RoomLayout, generate_rooms_adaptive
from .walls import extract_hallway_walls
from .windows import choose_window_openings

STRICT_ATTEMPTS = 48
RELAXED_ATTEMPTS = 12

log = get_logger("floorplan")


@dataclass
class AttemptResult:
    seed: int
    hallways: List[HallwayGroup]
    hallway_walls: List[Wall]
    door_candidates: int
    layout: RoomLayout
    windows: List[Opening]
    compiled: CompiledWalls
    scales_tried: int
    phase_ms: Dict[str, int] = field(default_factory=dict)

    @property
    def placed_doors(self) -> int:
        return len(self.layout.connected_doors)

    @property
    def has_exterior_exits(self) -> bool:
        return self.layout.has_exterior_exits

    def score(self):
        return (self.placed_doors, self.has_exterior_exits)

    def meets(self, options: FloorPlanOptions) -> bool:
        return self.placed_doors == options.door_count and self.has_exterior_exits


def _phase(phase_ms: Dict[str, int], label: str, fn, *a, **k):
    ps = time.perf_counter()
    r = fn(*a, **k)
    phase_ms[label] = phase_ms.get(label, 0) + int((time.perf_counter() - ps) * 1000)
    return r


def generate_attempt(options: FloorPlanOptions, bounds: Bounds, seed: int) -> AttemptResult:
    """Run every stage once for `seed`. Nothing here outlives the attempt."""
    phase_ms: Dict[str, int] = {}
    rng = SeededRng(seed)
    scale = derive_room_size_scale(options, bounds)

    hallway_cells, groups = _phase(
        phase_ms, "hallways", build_hallway_groups, bounds, options.hallway_count, options.corridor_width_cells, rng
    )
    owner = hallway_ownership(groups)
    hallway_walls = _phase(phase_ms, "hallway_walls", extract_hallway_walls, bounds, hallway_cells, owner)
    door_openings = _phase(phase_ms, "doors", choose_door_openings, hallway_walls, groups, options, rng)
    adaptive = _phase(
        phase_ms,
        "rooms",
        generate_rooms_adaptive,
        bounds,
        hallway_cells,
        owner,
        door_openings,
        options,
        scale,
        seed,
    )
    layout = adaptive.best
    windows = _phase(
        phase_ms,
        "windows",
        choose_window_openings,
        layout.room_walls,
        hallway_walls,
        layout.connected_doors + layout.exterior_exits,
        options.max_window_count,
        options.window_width,
        rng,
    )
    compiled = _phase(
        phase_ms,
        "compile",
        compile_walls,
        hallway_walls + layout.room_walls,
        layout.connected_doors + layout.exterior_exits + windows,
    )
    return AttemptResult(
        seed, groups, hallway_walls, len(door_openings), layout, windows, compiled, len(adaptive.scales_tried), phase_ms
    )


def metrics_enabled(explicit: Optional[bool] = None) -> bool:
    """Explicit argument > Flask app config > FLOORPLAN_ENABLE_METRICS env (default on)."""
    if explicit is not None:
        return bool(explicit)
    from flask import current_app, has_app_context

    if has_app_context() and "FLOORPLAN_ENABLE_METRICS" in current_app.config:
        return bool(current_app.config["FLOORPLAN_ENABLE_METRICS"])
    return os.getenv("FLOORPLAN_ENABLE_METRICS", "1").lower() not in {"0", "false", "no", ""}


def _build_plan(options: FloorPlanOptions, attempt: AttemptResult, attempts_used: int, metrics: Dict[str, Any]) -> Plan:
    rooms = tuple(PlanRoom.from_record(r) for r in attempt.layout.rooms)
    hallways = tuple(PlanHallway.from_group(g) for g in attempt.hallways if g.cells)
    walls = tuple(attempt.compiled.walls)
    openings = tuple(attempt.compiled.openings)
    meta = PlanMeta(
        width=options.width,
        height=options.height,
        seed=options.seed,
        room_count=len(rooms),
        hallway_count=len(hallways),
        requested_door_count=options.door_count,
        placed_door_count=attempt.placed_doors,
        has_exterior_exit=attempt.has_exterior_exits,
        window_count=sum(1 for o in openings if o.kind == WINDOW),
        wall_count=len(walls),
        attempts=attempts_used,
    )
    return Plan(meta, rooms, hallways, walls, openings, metrics)


def generate_floor_plan(
    options: Optional[FloorPlanOptions | Mapping[str, Any]] = None,
    *,
    enable_metrics: Optional[bool] = None,
    **overrides,
) -> Plan:
    """Generate a plan, retrying attempts until the targets are met.

    `options` may be a FloorPlanOptions or a loose mapping (camelCase keys
    accepted); keyword overrides win. Raises DoorCountUnmetError /
    ExteriorExitUnmetError only when the matching strict flag is set.
    """
    if isinstance(options, FloorPlanOptions):
        opts = FloorPlanOptions.from_mapping(vars(options), **overrides) if overrides else options
    else:
        opts = FloorPlanOptions.from_mapping(options, **overrides)
    opts = opts.normalized()
    bounds = opts.bounds()
    with_metrics = metrics_enabled(enable_metrics)
    metrics = init_metrics() if with_metrics else {}
    start = time.perf_counter()

    limit = STRICT_ATTEMPTS if opts.requires_targets else RELAXED_ATTEMPTS
    best: Optional[AttemptResult] = None
    best_index = -1
    used = 0
    scales_tried = 0
    for index in range(limit):
        attempt = generate_attempt(opts, bounds, derive_seed(opts.seed, index, ATTEMPT_SEED_STRIDE))
        used += 1
        scales_tried += attempt.scales_tried
        log.debug(
            event="floorplan_attempt",
            seed=opts.seed,
            attempt=index,
            placed_doors=attempt.placed_doors,
            exterior_exits=len(attempt.layout.exterior_exits),
        )
        if best is None or attempt.score() > best.score():
            best, best_index = attempt, index
        if attempt.meets(opts):
            best, best_index = attempt, index
            break

    if with_metrics:
        metrics.update(
            attempts=used,
            attempt_limit=limit,
            scales_tried=scales_tried,
            winning_attempt=best_index,
            winning_scale=round(best.layout.room_size_scale, 4),
            hallways=len(best.hallways),
            door_candidates=best.door_candidates,
            rooms=len(best.layout.rooms),
            cells_grown=best.layout.grown_cells,
            walls=len(best.compiled.walls),
            windows=len(best.windows),
            exterior_exits=len(best.layout.exterior_exits),
            phase_ms=dict(best.phase_ms),
            runtime_ms=int((time.perf_counter() - start) * 1000),
        )

    if opts.strict_door_count and best.placed_doors != opts.door_count:
        log.warn(event="floorplan_door_count_unmet", seed=opts.seed, requested=opts.door_count, placed=best.placed_doors)
        raise DoorCountUnmetError(opts.door_count, best.placed_doors)
    if opts.require_exterior_exits and not best.has_exterior_exits:
        log.warn(event="floorplan_exterior_exit_unmet", seed=opts.seed, exits=len(best.layout.exterior_exits))
        raise ExteriorExitUnmetError(len(best.layout.exterior_exits))

    plan = _build_plan(opts, best, used, metrics)
    log.info(
        event="floorplan_generated",
        seed=opts.seed,
        attempts=used,
        rooms=plan.meta.room_count,
        doors=plan.meta.placed_door_count,
        exits=plan.meta.has_exterior_exit,
    )
    return plan


__all__ = [
    "AttemptResult",
    "RELAXED_ATTEMPTS",
    "STRICT_ATTEMPTS",
    "generate_attempt",
    "generate_floor_plan",
    "metrics_enabled",
]
