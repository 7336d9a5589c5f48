"""Hallway carving.

Each hallway is a random orthogonal polyline (L, U, S or T shaped) stamped
with a square brush of the corridor width. Several hallways are unioned into
one cell set but keep their own ids so doors can be spread across them.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Set, Tuple

from .cells import Coord2D, cell_centroid, sorted_cells
from .config import Bounds

HALLWAY_SHAPES = ("L", "U", "S", "T")
WAYPOINT_MARGIN = 3
MAX_ATTEMPTS_PER_HALLWAY = 12
MIN_HALLWAY_CELLS = 10


@dataclass
class HallwayGroup:
    id: str
    shape: str
    waypoints: List[Coord2D]
    cells: Set[Coord2D]

    @property
    def label_position(self) -> Tuple[float, float]:
        return cell_centroid(self.cells)


def make_waypoints(shape: str, bounds: Bounds, rng) -> List[Coord2D]:
    """Shape-specific waypoints inside a margin-bounded region."""
    min_x = WAYPOINT_MARGIN
    max_x = max(min_x + 1, bounds.cols - WAYPOINT_MARGIN - 1)
    min_y = WAYPOINT_MARGIN
    max_y = max(min_y + 1, bounds.rows - WAYPOINT_MARGIN - 1)
    xa, xb, xc = (rng.randint(min_x, max_x) for _ in range(3))
    ya, yb, yc = (rng.randint(min_y, max_y) for _ in range(3))

    if shape == "U":
        left, right = min(xa, xb), max(xa, xb)
        top, bottom = min(ya, yb), max(ya, yc)
        return [(left, top), (left, bottom), (right, bottom), (right, top)]
    if shape == "T":
        top, bottom = min(ya, yb), max(ya, yb)
        left, right = min(xb, xc), max(xb, xc)
        branch_y = rng.randint(top, bottom)
        return [(xa, top), (xa, bottom), (left, branch_y), (right, branch_y)]
    if shape == "S":
        return [(xa, ya), (xb, ya), (xb, yc), (xc, yc), (xc, yb)]
    # L: one elbow
    return [(xa, ya), (xb, ya), (xb, yb)]


def manhattan_path(points: List[Coord2D]) -> List[Coord2D]:
    """Walk x first then y between consecutive waypoints, one cell per step."""
    if not points:
        return []
    path = [points[0]]
    for nx, ny in points[1:]:
        cx, cy = path[-1]
        while cx != nx:
            cx += 1 if nx > cx else -1
            path.append((cx, cy))
        while cy != ny:
            cy += 1 if ny > cy else -1
            path.append((cx, cy))
    return path


def stamp(cells: Set[Coord2D], bounds: Bounds, x: int, y: int, radius: int) -> None:
    for dy in range(-radius, radius + 1):
        for dx in range(-radius, radius + 1):
            if bounds.contains(x + dx, y + dy):
                cells.add((x + dx, y + dy))


def carve_hallway(shape: str, bounds: Bounds, corridor_width: int, rng) -> Tuple[List[Coord2D], Set[Coord2D]]:
    waypoints = make_waypoints(shape, bounds, rng)
    radius = max(0, (corridor_width - 1) // 2)
    cells: Set[Coord2D] = set()
    for x, y in manhattan_path(waypoints):
        stamp(cells, bounds, x, y, radius)
    return waypoints, cells


def build_hallway_groups(bounds: Bounds, hallway_count: int, corridor_width: int, rng) -> Tuple[Set[Coord2D], List[HallwayGroup]]:
    """Carve `hallway_count` hallways. Returns (union of cells, groups).

    A hallway whose footprint stays under MIN_HALLWAY_CELLS after every retry
    is skipped, except that the plan always gets at least one hallway.
    """
    combined: Set[Coord2D] = set()
    groups: List[HallwayGroup] = []
    for _ in range(hallway_count):
        placed = False
        for _attempt in range(MAX_ATTEMPTS_PER_HALLWAY):
            shape = rng.choice(HALLWAY_SHAPES)
            waypoints, cells = carve_hallway(shape, bounds, corridor_width, rng)
            if len(cells) < MIN_HALLWAY_CELLS:
                continue
            combined |= cells
            groups.append(HallwayGroup(f"hall-{len(groups) + 1}", shape, waypoints, cells))
            placed = True
            break
        if not placed and not groups:
            shape = rng.choice(HALLWAY_SHAPES)
            waypoints, cells = carve_hallway(shape, bounds, corridor_width, rng)
            combined |= cells
            groups.append(HallwayGroup("hall-1", shape, waypoints, cells))
    return combined, groups


def hallway_ownership(groups: List[HallwayGroup]) -> Dict[Coord2D, str]:
    """Cell -> hallway id. Where hallways cross, the later one wins."""
    owner: Dict[Coord2D, str] = {}
    for group in groups:
        for cell in sorted_cells(group.cells):
            owner[cell] = group.id
    return owner


__all__ = [
    "HALLWAY_SHAPES",
    "HallwayGroup",
    "MAX_ATTEMPTS_PER_HALLWAY",
    "MIN_HALLWAY_CELLS",
    "build_hallway_groups",
    "carve_hallway",
    "hallway_ownership",
    "make_waypoints",
    "manhattan_path",
    "stamp",
]
