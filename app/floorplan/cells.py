"""Cell-level primitives and the per-attempt scratch arena."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional, Set, Tuple

from .config import Bounds

Coord2D = Tuple[int, int]

# north, east, south, west
ORTHOGONAL: Tuple[Coord2D, ...] = ((0, -1), (1, 0), (0, 1), (-1, 0))
DIAGONAL: Tuple[Coord2D, ...] = ((-1, -1), (1, -1), (1, 1), (-1, 1))


class Rect(NamedTuple):
    x: int
    y: int
    w: int
    h: int

    def cells(self) -> Iterator[Coord2D]:
        for iy in range(self.y, self.y + self.h):
            for ix in range(self.x, self.x + self.w):
                yield ix, iy

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.w / 2, self.y + self.h / 2)


def count_orthogonal(cells: Set[Coord2D], x: int, y: int) -> int:
    return sum(1 for dx, dy in ORTHOGONAL if (x + dx, y + dy) in cells)


def count_diagonal(cells: Set[Coord2D], x: int, y: int) -> int:
    return sum(1 for dx, dy in DIAGONAL if (x + dx, y + dy) in cells)


def perimeter_of(cells: Set[Coord2D]) -> int:
    return sum(4 - count_orthogonal(cells, x, y) for x, y in cells)


def sorted_cells(cells: Iterable[Coord2D]) -> List[Coord2D]:
    """Row-major order (y, then x)."""
    return sorted(cells, key=lambda c: (c[1], c[0]))


def cell_centroid(cells: Iterable[Coord2D]) -> Tuple[float, float]:
    sx = sy = 0.0
    n = 0
    for x, y in cells:
        sx += x + 0.5
        sy += y + 0.5
        n += 1
    n = max(1, n)
    return sx / n, sy / n


@dataclass
class RoomRecord:
    """A room while it is still being placed / grown.

    `centroid`, `cell_count` and `perimeter` are maintained incrementally by
    `claim()` so growth checks stay O(1) per candidate.
    """

    id: str
    cells: Set[Coord2D]
    centroid_x: float
    centroid_y: float
    cell_count: int
    perimeter: int
    hallway_id: Optional[str] = None

    @classmethod
    def from_rect(cls, room_id: str, rect: Rect, hallway_id: Optional[str] = None) -> "RoomRecord":
        cells = set(rect.cells())
        cx, cy = rect.center
        return cls(room_id, cells, cx, cy, len(cells), perimeter_of(cells), hallway_id)

    def claim(self, cell: Coord2D, new_perimeter: int) -> None:
        x, y = cell
        n = self.cell_count + 1
        self.centroid_x = (self.centroid_x * self.cell_count + x + 0.5) / n
        self.centroid_y = (self.centroid_y * self.cell_count + y + 0.5) / n
        self.cell_count = n
        self.perimeter = new_perimeter
        self.cells.add(cell)


@dataclass
class AttemptWorkspace:
    """Mutable grid state owned by exactly one room-placement pass.

    Created fresh for every (attempt, scale) combination and thrown away
    afterwards; nothing here is module-global.
    """

    bounds: Bounds
    hallway_cells: Set[Coord2D]
    hallway_owner: Dict[Coord2D, str] = field(default_factory=dict)
    room_owner: Dict[Coord2D, str] = field(default_factory=dict)
    rooms: List[RoomRecord] = field(default_factory=list)

    def is_occupied(self, cell: Coord2D) -> bool:
        return cell in self.hallway_cells or cell in self.room_owner

    def rect_is_free(self, rect: Rect) -> bool:
        return not any(self.is_occupied(c) for c in rect.cells())

    def add_room(self, room: RoomRecord) -> None:
        for cell in room.cells:
            self.room_owner[cell] = room.id
        self.rooms.append(room)

    def is_claimable(self, cell: Coord2D, room_id: str) -> bool:
        """Free, not hallway, and every owned 4-neighbour belongs to `room_id`."""
        x, y = cell
        if not self.bounds.contains(x, y):
            return False
        if cell in self.hallway_cells or cell in self.room_owner:
            return False
        for dx, dy in ORTHOGONAL:
            owner = self.room_owner.get((x + dx, y + dy))
            if owner is not None and owner != room_id:
                return False
        return True


__all__ = [
    "AttemptWorkspace",
    "Coord2D",
    "DIAGONAL",
    "ORTHOGONAL",
    "Rect",
    "RoomRecord",
    "cell_centroid",
    "count_diagonal",
    "count_orthogonal",
    "perimeter_of",
    "sorted_cells",
]
