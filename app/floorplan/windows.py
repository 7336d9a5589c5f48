"""Window placement on walls that do not already carry a door."""
from __future__ import annotations
from typing import Iterable, List

from .geometry import WINDOW, Opening, Wall, offset_window

WINDOW_LENGTH_MARGIN = 0.8
WINDOW_OFFSET_MARGIN = 0.15


def choose_window_openings(
    room_walls: List[Wall],
    hallway_walls: List[Wall],
    door_openings: Iterable[Opening],
    max_windows: int,
    window_width: float,
    rng,
) -> List[Opening]:
    if max_windows <= 0:
        return []
    door_edges = {o.wall.edge for o in door_openings}
    pool = [
        w
        for w in list(room_walls) + list(hallway_walls)
        if w.length >= window_width + WINDOW_LENGTH_MARGIN and w.edge not in door_edges
    ]
    if not pool:
        return []
    rng.shuffle(pool)
    openings = []
    for wall in pool[:max_windows]:
        start, end = offset_window(rng, wall.length, window_width, WINDOW_OFFSET_MARGIN)
        openings.append(Opening(wall, WINDOW, start, end, hallway_id=wall.hallway_id, room_id=wall.room_id))
    return openings


__all__ = ["WINDOW_LENGTH_MARGIN", "WINDOW_OFFSET_MARGIN", "choose_window_openings"]
