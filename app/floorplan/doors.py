"""Door and exterior-exit selection.

Doors are cut into hallway walls first; a room is later attached behind
each one that fits. Exterior exits are extra doors on finished room walls,
placed on the two rooms farthest apart so a level gets spread-out exits.
"""
from __future__ import annotations
from collections import OrderedDict
from typing import Dict, Iterable, List, Set

from .cells import Coord2D, RoomRecord
from .config import FloorPlanOptions
from .geometry import DOOR, Opening, Wall, offset_window
from .hallways import HallwayGroup
from .walls import straddling_cells

DOOR_LENGTH_MARGIN = 0.8
EXIT_LENGTH_MARGIN = 0.5
DOOR_OFFSET_MARGIN = 0.1


def door_candidates(walls: Iterable[Wall], door_width: float) -> List[Wall]:
    return [w for w in walls if w.length >= door_width + DOOR_LENGTH_MARGIN]


def choose_door_openings(hallway_walls: List[Wall], groups: List[HallwayGroup], options: FloorPlanOptions, rng) -> List[Opening]:
    """Pick up to 2 x door_count distinct hallway walls and cut one door in each.

    The first round takes one random wall per hallway group so every hallway
    gets a chance at a room; the rest are uniform picks over all candidates.
    """
    candidates = door_candidates(hallway_walls, options.door_width)
    if not candidates or options.door_count <= 0:
        return []
    max_doors = min(options.door_count * 2, len(candidates))

    by_hall: Dict[str, List[Wall]] = OrderedDict()
    for wall in candidates:
        if wall.hallway_id is not None:
            by_hall.setdefault(wall.hallway_id, []).append(wall)

    picked: List[Wall] = []
    picked_keys: Set[tuple] = set()
    for group in groups[:max_doors]:
        if len(picked) >= max_doors:
            break
        pool = by_hall.get(group.id) or []
        if not pool:
            continue
        wall = pool[rng.randint(0, len(pool) - 1)]
        if wall.key in picked_keys:
            continue
        picked_keys.add(wall.key)
        picked.append(wall)

    while len(picked) < max_doors:
        wall = candidates[rng.randint(0, len(candidates) - 1)]
        if wall.key in picked_keys:
            continue
        picked_keys.add(wall.key)
        picked.append(wall)

    openings = []
    for wall in picked:
        start, end = offset_window(rng, wall.length, options.door_width, DOOR_OFFSET_MARGIN)
        openings.append(Opening(wall, DOOR, start, end, hallway_id=wall.hallway_id))
    return openings


def choose_exterior_exits(
    room_walls: List[Wall],
    rooms: List[RoomRecord],
    room_owner: Dict[Coord2D, str],
    options: FloorPlanOptions,
    rng,
) -> List[Opening]:
    """Two exits on the two eligible rooms with the farthest-apart centroids.

    Room walls never border a hallway; eligible walls are long enough for a
    door and touch no other room. Returns [] when fewer than two rooms have
    an eligible wall; callers treat anything under two exits as "exterior exits unmet".
    """
    by_room: Dict[str, List[Wall]] = OrderedDict()
    for wall in room_walls:
        if wall.room_id is None or wall.length < options.door_width + EXIT_LENGTH_MARGIN:
            continue
        if _faces_other_room(wall, room_owner):
            continue
        by_room.setdefault(wall.room_id, []).append(wall)

    room_ids = list(by_room)
    if len(room_ids) < 2:
        return []

    centers = {r.id: (r.centroid_x, r.centroid_y) for r in rooms}
    selected = (room_ids[0], room_ids[1])
    best = -1.0
    for i, first in enumerate(room_ids):
        for second in room_ids[i + 1:]:
            if first not in centers or second not in centers:
                continue
            (ax, ay), (bx, by) = centers[first], centers[second]
            dist_sq = (ax - bx) ** 2 + (ay - by) ** 2
            if dist_sq > best:
                best = dist_sq
                selected = (first, second)

    exits = []
    for room_id in selected:
        pool = by_room[room_id]
        wall = pool[rng.randint(0, len(pool) - 1)]
        start, end = offset_window(rng, wall.length, options.door_width, DOOR_OFFSET_MARGIN)
        exits.append(Opening(wall, DOOR, start, end, room_id=room_id))
    return exits


def _faces_other_room(wall: Wall, room_owner: Dict[Coord2D, str]) -> bool:
    for cell in straddling_cells(wall.edge):
        owner = room_owner.get(cell)
        if owner is not None and owner != wall.room_id:
            return True
    return False


__all__ = [
    "DOOR_LENGTH_MARGIN",
    "DOOR_OFFSET_MARGIN",
    "EXIT_LENGTH_MARGIN",
    "choose_door_openings",
    "choose_exterior_exits",
    "door_candidates",
]
