"""Cut walls around their openings and emit opening glyphs.

Openings are grouped per wall, sorted by start offset, clamped to the wall
and trimmed so none overlaps its predecessor. The solid remainder becomes
the final wall segments; each surviving opening becomes a tagged segment in
world coordinates.
"""
from __future__ import annotations
from collections import OrderedDict
from typing import Dict, Iterable, List, NamedTuple, Tuple

from .geometry import MERGE_EPSILON, MIN_SEGMENT_LENGTH, WALL, Opening, Segment, Wall, segment_along


class CompiledWalls(NamedTuple):
    walls: List[Segment]
    openings: List[Segment]


def normalize_openings(length: float, openings: Iterable[Opening]) -> List[Tuple[float, float, Opening]]:
    """Sorted, clamped, non-overlapping (start, end, opening) triples."""
    spans = []
    cursor = 0.0
    for opening in sorted(openings, key=lambda o: o.start):
        start = max(0.0, min(length, opening.start))
        end = max(0.0, min(length, opening.end))
        start = max(start, cursor)
        if end - start <= MERGE_EPSILON:
            continue
        spans.append((start, end, opening))
        cursor = end
    return spans


def solid_intervals(length: float, spans: List[Tuple[float, float, Opening]]) -> List[Tuple[float, float]]:
    intervals = []
    cursor = 0.0
    for start, end, _ in spans:
        if start > cursor:
            intervals.append((cursor, start))
        cursor = max(cursor, end)
    if cursor < length:
        intervals.append((cursor, length))
    return [(a, b) for a, b in intervals if b - a > MIN_SEGMENT_LENGTH]


def compile_walls(walls: Iterable[Wall], openings: Iterable[Opening]) -> CompiledWalls:
    by_wall: Dict[tuple, List[Opening]] = OrderedDict()
    for opening in openings:
        by_wall.setdefault(opening.wall.key, []).append(opening)

    wall_segments: List[Segment] = []
    glyphs: List[Segment] = []
    for wall in walls:
        length = wall.length
        spans = normalize_openings(length, by_wall.get(wall.key, ()))
        for a, b in solid_intervals(length, spans):
            wall_segments.append(segment_along(wall.edge, a, b, WALL))
        if length == 0:
            continue
        for start, end, opening in spans:
            glyphs.append(segment_along(wall.edge, start, end, opening.kind))
    return CompiledWalls(wall_segments, glyphs)


__all__ = ["CompiledWalls", "compile_walls", "normalize_openings", "solid_intervals"]
