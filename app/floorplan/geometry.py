"""Wall edges, openings and output line segments."""
from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Dict, NamedTuple, Optional, Tuple

DOOR = "door"
WINDOW = "window"
WALL = "wall"

# Merge tolerance for touching runs and the floor for compiled segments.
MERGE_EPSILON = 1e-6
MIN_SEGMENT_LENGTH = 0.08


class Edge(NamedTuple):
    """Axis-aligned grid edge in canonical order (smaller endpoint first)."""

    x1: float
    y1: float
    x2: float
    y2: float

    @classmethod
    def normalized(cls, x1, y1, x2, y2) -> "Edge":
        if x1 < x2 or (x1 == x2 and y1 <= y2):
            return cls(x1, y1, x2, y2)
        return cls(x2, y2, x1, y1)

    @property
    def horizontal(self) -> bool:
        return self.y1 == self.y2

    @property
    def length(self) -> float:
        return math.hypot(self.x2 - self.x1, self.y2 - self.y1)

    def point_at(self, offset: float) -> Tuple[float, float]:
        """World point `offset` units along the edge from (x1, y1)."""
        length = self.length
        if length == 0:
            return self.x1, self.y1
        t = offset / length
        return self.x1 + (self.x2 - self.x1) * t, self.y1 + (self.y2 - self.y1) * t


@dataclass(frozen=True)
class Wall:
    """A merged boundary run owned by a room (room_id) or a hallway (hallway_id).

    hallway_id stays None on hallway walls whose owner is ambiguous.
    """

    edge: Edge
    hallway_id: Optional[str] = None
    room_id: Optional[str] = None

    @property
    def key(self) -> Tuple[Optional[str], Optional[str], Edge]:
        # Two rooms may produce geometrically identical walls; owner keeps them apart.
        return (self.room_id, self.hallway_id, self.edge)

    @property
    def length(self) -> float:
        return self.edge.length


@dataclass(frozen=True)
class Opening:
    """A door or window cut into `wall` between `start` and `end` (offsets along the wall)."""

    wall: Wall
    kind: str
    start: float
    end: float
    hallway_id: Optional[str] = None
    room_id: Optional[str] = None

    @property
    def length(self) -> float:
        return self.end - self.start


class Segment(NamedTuple):
    x1: float
    y1: float
    x2: float
    y2: float
    kind: str = WALL

    @property
    def length(self) -> float:
        return math.hypot(self.x2 - self.x1, self.y2 - self.y1)

    def to_dict(self) -> Dict[str, object]:
        return {"x1": self.x1, "y1": self.y1, "x2": self.x2, "y2": self.y2, "type": self.kind}


def segment_along(edge: Edge, start: float, end: float, kind: str) -> Segment:
    x1, y1 = edge.point_at(start)
    x2, y2 = edge.point_at(end)
    return Segment(x1, y1, x2, y2, kind)


def offset_window(rng, wall_length: float, width: float, margin: float) -> Tuple[float, float]:
    """Random [start, end) of `width` units kept `margin` away from both wall ends."""
    remaining = max(0.2, wall_length - width)
    lo = margin
    hi = max(lo, remaining - margin)
    start = lo + rng.random() * (hi - lo)
    return start, start + width


__all__ = [
    "DOOR",
    "Edge",
    "MERGE_EPSILON",
    "MIN_SEGMENT_LENGTH",
    "Opening",
    "Segment",
    "WALL",
    "WINDOW",
    "Wall",
    "offset_window",
    "segment_along",
]
