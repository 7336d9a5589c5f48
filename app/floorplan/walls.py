"""Boundary extraction and collinear merging.

Every occupied cell contributes one unit edge per side whose neighbour is
owned differently. Unit edges are bucketed by (axis, fixed coordinate) and
touching runs are coalesced. Room edges are merged per room so that two
rooms whose walls happen to be collinear and adjacent never fuse.
"""
from __future__ import annotations
import math
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Set

from .cells import Coord2D, RoomRecord, sorted_cells
from .config import Bounds
from .geometry import MERGE_EPSILON, Edge, Wall

NORTH, SOUTH, EAST, WEST = "north", "south", "east", "west"


def unit_edges(cells: Set[Coord2D], blocked: Set[Coord2D] = frozenset()) -> List[Edge]:
    """Boundary unit edges of `cells`; sides facing a `blocked` cell are skipped."""
    edges: List[Edge] = []
    for x, y in sorted_cells(cells):
        for nx, ny, edge in (
            (x, y - 1, (x, y, x + 1, y)),
            (x, y + 1, (x, y + 1, x + 1, y + 1)),
            (x - 1, y, (x, y, x, y + 1)),
            (x + 1, y, (x + 1, y, x + 1, y + 1)),
        ):
            if (nx, ny) in cells or (nx, ny) in blocked:
                continue
            edges.append(Edge.normalized(*edge))
    return edges


def merge_collinear(edges: Iterable[Edge]) -> List[Edge]:
    buckets: Dict[tuple, List[List[float]]] = defaultdict(list)
    for e in edges:
        if e.horizontal:
            buckets[("h", e.y1)].append([min(e.x1, e.x2), max(e.x1, e.x2)])
        else:
            buckets[("v", e.x1)].append([min(e.y1, e.y2), max(e.y1, e.y2)])

    merged: List[Edge] = []
    for (axis, coord), runs in buckets.items():
        runs.sort(key=lambda r: r[0])
        current = None
        for run in runs:
            if current is None:
                current = list(run)
            elif run[0] <= current[1] + MERGE_EPSILON:
                current[1] = max(current[1], run[1])
            else:
                merged.append(_run_to_edge(axis, coord, current))
                current = list(run)
        if current is not None:
            merged.append(_run_to_edge(axis, coord, current))
    return merged


def _run_to_edge(axis: str, coord, run) -> Edge:
    if axis == "h":
        return Edge.normalized(run[0], coord, run[1], coord)
    return Edge.normalized(coord, run[0], coord, run[1])


def straddling_cells(edge: Edge):
    """The two cells straddling the midpoint of `edge`: (before, after).

    before = above / left, after = below / right.
    """
    if edge.horizontal:
        y = int(edge.y1)
        sx = max(0, int(math.floor((edge.x1 + edge.x2) / 2)))
        return (sx, y - 1), (sx, y)
    x = int(edge.x1)
    sy = max(0, int(math.floor((edge.y1 + edge.y2) / 2)))
    return (x - 1, sy), (x, sy)


def hallway_side(edge: Edge, hallway_cells: Set[Coord2D]) -> Optional[str]:
    """Which side of a hallway wall is open for a room, or None if ambiguous."""
    before, after = straddling_cells(edge)
    in_before = before in hallway_cells
    in_after = after in hallway_cells
    if in_before == in_after:
        return None
    if edge.horizontal:
        return NORTH if in_after else SOUTH
    return WEST if in_after else EAST


def hallway_id_for_edge(edge: Edge, hallway_cells: Set[Coord2D], owner: Dict[Coord2D, str]) -> Optional[str]:
    before, after = straddling_cells(edge)
    in_before = before in hallway_cells
    in_after = after in hallway_cells
    if in_after and not in_before:
        return owner.get(after)
    if in_before and not in_after:
        return owner.get(before)
    return None


def extract_hallway_walls(bounds: Bounds, hallway_cells: Set[Coord2D], owner: Dict[Coord2D, str]) -> List[Wall]:
    cells = {c for c in hallway_cells if bounds.contains(*c)}
    return [
        Wall(edge, hallway_id=hallway_id_for_edge(edge, cells, owner))
        for edge in merge_collinear(unit_edges(cells))
    ]


def extract_room_walls(rooms: List[RoomRecord], hallway_cells: Set[Coord2D]) -> List[Wall]:
    """Perimeter walls per room, minus the sides shared with a hallway."""
    walls: List[Wall] = []
    for room in rooms:
        for edge in merge_collinear(unit_edges(room.cells, hallway_cells)):
            walls.append(Wall(edge, room_id=room.id))
    return walls


__all__ = [
    "EAST",
    "NORTH",
    "SOUTH",
    "WEST",
    "extract_hallway_walls",
    "extract_room_walls",
    "hallway_id_for_edge",
    "hallway_side",
    "merge_collinear",
    "straddling_cells",
    "unit_edges",
]
