"""Room placement behind hallway doors, plus the adaptive scale search.

For every door a rectangle is sized from the door's wall and the current
room-size scale, centred on the door, clamped to the grid and rejected if it
overlaps anything already occupied. Rooms that fit are then grown
organically and the finished layout is scored.
"""
from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from .cells import AttemptWorkspace, Coord2D, Rect, RoomRecord
from .config import Bounds, FloorPlanOptions, clamp, round_half_up
from .doors import choose_exterior_exits
from .geometry import Opening, Wall
from .growth import grow_rooms
from .rng import SCALE_SEED_STRIDE, SeededRng, derive_seed
from .walls import NORTH, WEST, extract_room_walls, hallway_side

LARGE, NORMAL, COMPACT = "large", "normal", "compact"
SIZE_MODE_FACTORS = {LARGE: 1.55, NORMAL: 1.3, COMPACT: 0.75}
# Large rooms are only attempted on sparse layouts.
LARGE_MODE_MIN_SCALE = 1.2
LARGE_MODE_MAX_DOORS = 10
SCALE_STEPS = (1.0, 0.9, 0.8, 0.7)


def size_modes(room_size_scale: float, door_candidate_count: int) -> List[str]:
    if room_size_scale >= LARGE_MODE_MIN_SCALE or door_candidate_count <= LARGE_MODE_MAX_DOORS:
        return [LARGE, NORMAL, COMPACT]
    return [NORMAL, COMPACT]


def build_room_rect(opening: Opening, side: str, bounds: Bounds, rng, room_size_scale: float, mode: str) -> Optional[Rect]:
    """Size and place one rectangle on the open `side` of the door's hallway wall."""
    edge = opening.wall.edge
    compact = mode == COMPACT
    if compact:
        scaled = max(1.0, room_size_scale * SIZE_MODE_FACTORS[COMPACT])
    else:
        scaled = room_size_scale * SIZE_MODE_FACTORS[mode]
    wall_cells = max(1, int(math.floor(edge.length)))
    door_span = math.ceil(opening.end - opening.start)

    if compact:
        min_front = max(4, round_half_up((door_span + 2) * scaled))
        max_front = max(min_front, min(round_half_up(12 * scaled), wall_cells))
    else:
        min_front = max(6, round_half_up((door_span + 5) * scaled))
        max_front = max(min_front, min(round_half_up(30 * scaled), wall_cells))
    frontage = rng.randint(min_front, max_front)

    depth_cap = max(10, int(math.floor(min(bounds.cols, bounds.rows) * 0.8)))
    if compact:
        min_depth = 5
        max_depth = min(round_half_up(12 * scaled), depth_cap)
    else:
        min_depth = max(9, round_half_up(8 * scaled))
        max_depth = min(round_half_up(30 * scaled), depth_cap)
    if max_depth < min_depth:
        return None
    depth = rng.randint(min_depth, max_depth)
    door_center = (opening.start + opening.end) / 2

    if edge.horizontal:
        wall_y = int(edge.y1)
        lo_wall, hi_wall = min(edge.x1, edge.x2), max(edge.x1, edge.x2)
        min_x = max(0, int(lo_wall))
        max_x = min(bounds.cols - frontage, int(hi_wall) - frontage)
        if max_x < min_x:
            return None
        x = clamp(round_half_up(edge.x1 + door_center - frontage / 2), min_x, max_x)
        if side == NORTH:
            y = wall_y - depth
            if y < 0:
                return None
            return Rect(x, y, frontage, depth)
        if wall_y + depth > bounds.rows:
            return None
        return Rect(x, wall_y, frontage, depth)

    wall_x = int(edge.x1)
    lo_wall, hi_wall = min(edge.y1, edge.y2), max(edge.y1, edge.y2)
    min_y = max(0, int(lo_wall))
    max_y = min(bounds.rows - frontage, int(hi_wall) - frontage)
    if max_y < min_y:
        return None
    y = clamp(round_half_up(edge.y1 + door_center - frontage / 2), min_y, max_y)
    if side == WEST:
        x = wall_x - depth
        if x < 0:
            return None
        return Rect(x, y, depth, frontage)
    if wall_x + depth > bounds.cols:
        return None
    return Rect(wall_x, y, depth, frontage)


@dataclass
class RoomLayout:
    """Result of one placement + growth pass at a single scale."""

    workspace: AttemptWorkspace
    room_walls: List[Wall]
    connected_doors: List[Opening]
    exterior_exits: List[Opening]
    room_size_scale: float
    grown_cells: int = 0

    @property
    def rooms(self) -> List[RoomRecord]:
        return self.workspace.rooms

    @property
    def has_exterior_exits(self) -> bool:
        return len(self.exterior_exits) >= 2

    def score(self):
        return (len(self.connected_doors), self.has_exterior_exits)


class RoomPlacer:
    """Attaches rooms to door openings inside one workspace."""

    def __init__(self, workspace: AttemptWorkspace, openings: List[Opening], options: FloorPlanOptions, rng, room_size_scale: float):
        self.ws = workspace
        self.openings = openings
        self.options = options
        self.rng = rng
        self.scale = room_size_scale
        self.connected: List[Opening] = []
        self.connected_keys: Set[tuple] = set()
        self.modes = size_modes(room_size_scale, len(openings))

    @property
    def at_target(self) -> bool:
        return len(self.connected) >= self.options.door_count

    def try_attach(self, opening: Opening) -> bool:
        side = hallway_side(opening.wall.edge, self.ws.hallway_cells)
        if side is None:
            return False
        rect = None
        for mode in self.modes:
            candidate = build_room_rect(opening, side, self.ws.bounds, self.rng, self.scale, mode)
            if candidate is None or not self.ws.rect_is_free(candidate):
                continue
            rect = candidate
            break
        if rect is None:
            return False
        room = RoomRecord.from_rect(f"room-{len(self.ws.rooms) + 1}", rect, opening.hallway_id)
        self.ws.add_room(room)
        self.connected.append(opening)
        self.connected_keys.add(opening.wall.key)
        return True

    def place_all(self) -> None:
        for opening in self.openings:
            if self.at_target:
                break
            self.try_attach(opening)

    def backfill(self) -> None:
        """Give each hallway still lacking a room another shot, while under target."""
        served = {o.hallway_id for o in self.connected if o.hallway_id is not None}
        by_hall: Dict[str, List[Opening]] = {}
        for opening in self.openings:
            if opening.hallway_id is not None:
                by_hall.setdefault(opening.hallway_id, []).append(opening)
        for hall_id, openings in by_hall.items():
            if hall_id in served:
                continue
            for opening in self.rng.shuffled(openings):
                if self.at_target:
                    return
                if opening.wall.key in self.connected_keys:
                    continue
                if self.try_attach(opening):
                    served.add(hall_id)
                    break


def layout_rooms(
    bounds: Bounds,
    hallway_cells: Set[Coord2D],
    hallway_owner: Dict[Coord2D, str],
    openings: List[Opening],
    options: FloorPlanOptions,
    rng,
    room_size_scale: float,
) -> RoomLayout:
    """Place, backfill, grow, wall and pick exits for one scale."""
    ws = AttemptWorkspace(bounds, hallway_cells, hallway_owner)
    placer = RoomPlacer(ws, openings, options, rng, room_size_scale)
    placer.place_all()
    placer.backfill()
    grown = grow_rooms(ws, rng, room_size_scale, options.shape_style, options.growth)
    room_walls = extract_room_walls(ws.rooms, hallway_cells)
    exits = choose_exterior_exits(room_walls, ws.rooms, ws.room_owner, options, rng)
    return RoomLayout(ws, room_walls, placer.connected, exits, room_size_scale, grown)


def scale_candidates(base_scale: float) -> List[float]:
    return [max(1.0, base_scale * step) for step in SCALE_STEPS]


@dataclass
class AdaptiveResult:
    best: RoomLayout
    scales_tried: List[float] = field(default_factory=list)


def generate_rooms_adaptive(
    bounds: Bounds,
    hallway_cells: Set[Coord2D],
    hallway_owner: Dict[Coord2D, str],
    openings: List[Opening],
    options: FloorPlanOptions,
    base_scale: float,
    attempt_seed: int,
) -> AdaptiveResult:
    """Try descending room-size scales; keep the best-scoring layout.

    Stops early on a layout that hits the exact door target and has two
    exterior exits. Each scale runs on its own decorrelated stream.
    """
    best: Optional[RoomLayout] = None
    tried: List[float] = []
    for index, scale in enumerate(scale_candidates(base_scale)):
        rng = SeededRng(derive_seed(attempt_seed, index + 1, SCALE_SEED_STRIDE))
        layout = layout_rooms(bounds, hallway_cells, hallway_owner, openings, options, rng, scale)
        tried.append(scale)
        if best is None or layout.score() > best.score():
            best = layout
        if len(layout.connected_doors) == options.door_count and layout.has_exterior_exits:
            best = layout
            break
    return AdaptiveResult(best, tried)


__all__ = [
    "AdaptiveResult",
    "COMPACT",
    "LARGE",
    "NORMAL",
    "RoomLayout",
    "RoomPlacer",
    "build_room_rect",
    "generate_rooms_adaptive",
    "layout_rooms",
    "scale_candidates",
    "size_modes",
]
