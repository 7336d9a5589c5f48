"""Organic room growth.

After rectangles are placed, rooms claim free neighbouring cells one at a
time until a global fill target is met. A style value in [0, 1] blends a
compact scorer (hug the centroid, many same-room neighbours) with an organic
one (reach outward). Claims that would let two rooms touch, grow one-cell
tendrils, or push the perimeter/area ratio over its ceiling are refused.

Compact styles demand two-edge support. A plain rectangle offers no such
cell, so a compact room may open a new row or column with a single-edge
claim whenever none of its candidates has two-edge support; the cells next
to that seed then qualify.
"""
from __future__ import annotations
import math
from typing import Dict, List, Optional, Set

from .cells import DIAGONAL, ORTHOGONAL, AttemptWorkspace, Coord2D, RoomRecord, count_diagonal, count_orthogonal, sorted_cells
from .config import GrowthTuning, clamp, round_half_up

MAX_GROWTH_PASSES = 96
MIN_GROWTH_PASSES = 40


def target_fill_ratio(room_size_scale: float, style: float, tuning: GrowthTuning) -> float:
    ratio = tuning.base_fill_ratio + max(0.0, room_size_scale - 1) * 0.1 + (style - 0.5) * 0.16
    return clamp(ratio, tuning.min_fill_ratio, tuning.max_fill_ratio)


def sample_size(candidate_count: int, style: float) -> int:
    return min(candidate_count, max(8, round_half_up(12 + style * 16)))


def claims_per_pass(room_size_scale: float, style: float) -> int:
    return max(1, round_half_up(room_size_scale * (1.0 + style * 0.9)))


def score_candidate(room: RoomRecord, cell: Coord2D, style: float, orth: Optional[int] = None, diag: Optional[int] = None) -> float:
    x, y = cell
    if orth is None:
        orth = count_orthogonal(room.cells, x, y)
    if diag is None:
        diag = count_diagonal(room.cells, x, y)
    distance = math.hypot(x + 0.5 - room.centroid_x, y + 0.5 - room.centroid_y)
    compact = orth * 3 + diag * 1.4 - distance * 0.45
    organic = orth * 1.6 + diag * 0.8 + distance * 0.35
    return compact * (1 - style) + organic * style


def pick_candidate(
    room: RoomRecord,
    candidates: List[Coord2D],
    rng,
    style: float,
    orth_counts: Optional[Dict[Coord2D, int]] = None,
    diag_counts: Optional[Dict[Coord2D, int]] = None,
) -> Optional[int]:
    """Index of the best-scoring candidate within a bounded random sample.

    `orth_counts` / `diag_counts` are cached same-room neighbour counts; cells
    missing from them are counted on the spot.
    """
    if not candidates:
        return None
    size = sample_size(len(candidates), style)
    if size >= len(candidates):
        indices = range(len(candidates))
    else:
        chosen: Set[int] = set()
        ordered: List[int] = []
        while len(ordered) < size:
            idx = rng.randint(0, len(candidates) - 1)
            if idx in chosen:
                continue
            chosen.add(idx)
            ordered.append(idx)
        indices = ordered
    orth_counts = orth_counts or {}
    best_idx = None
    best_score = -math.inf
    for idx in indices:
        cell = candidates[idx]
        orth = orth_counts.get(cell)
        diag = diag_counts.get(cell, 0) if diag_counts is not None else None
        score = score_candidate(room, cell, style, orth, diag)
        if score > best_score:
            best_score = score
            best_idx = idx
    return best_idx


def has_strong_support(room: RoomRecord, x: int, y: int) -> bool:
    """True unless the cell would hang off a single edge with no solid anchor."""
    orth = count_orthogonal(room.cells, x, y)
    if orth >= 2:
        return True
    if orth == 0:
        return False
    if count_diagonal(room.cells, x, y) < 1:
        return False
    for dx, dy in ORTHOGONAL:
        ax, ay = x + dx, y + dy
        if (ax, ay) in room.cells and count_orthogonal(room.cells, ax, ay) >= 2:
            return True
    return False


def projected_perimeter(room: RoomRecord, orth: int) -> int:
    return room.perimeter + (4 - orth * 2)


def required_support(style: float, tuning: GrowthTuning, best_available: int) -> int:
    """Orthogonal support a claim needs, given the best support any candidate offers.

    The style minimum only binds once some candidate can meet it.
    """
    return min(tuning.min_orthogonal_support(style), max(1, best_available))


def accepts_claim(
    room: RoomRecord,
    cell: Coord2D,
    style: float,
    tuning: GrowthTuning,
    orth: Optional[int] = None,
    diag: Optional[int] = None,
    min_orth: Optional[int] = None,
) -> Optional[int]:
    """Shape checks for a claim. Returns the room's new perimeter, or None."""
    x, y = cell
    if orth is None:
        orth = count_orthogonal(room.cells, x, y)
    if diag is None:
        diag = count_diagonal(room.cells, x, y)
    if min_orth is None:
        min_orth = tuning.min_orthogonal_support(style)
    if orth < min_orth:
        return None
    if orth == 1 and (diag == 0 or not has_strong_support(room, x, y)):
        return None
    perimeter = projected_perimeter(room, orth)
    area = room.cell_count + 1
    ceiling = tuning.ratio_ceiling(area, style)
    if orth == 1:
        ceiling -= tuning.single_edge_penalty
    if perimeter / area > ceiling:
        return None
    return perimeter


class GrowthEngine:
    """Grows every room in `workspace` in shuffled passes.

    Each room keeps a frontier (free cell -> same-room orthogonal neighbours)
    and a diagonal neighbour count map, both updated on every claim. A cell
    that stops being claimable never becomes claimable again (rooms and
    hallways only grow), so it is dropped from the frontier for good.
    """

    def __init__(self, workspace: AttemptWorkspace, rng, room_size_scale: float, style: float, tuning: GrowthTuning):
        self.ws = workspace
        self.rng = rng
        self.scale = room_size_scale
        self.style = style
        self.tuning = tuning
        self.frontier: Dict[str, Dict[Coord2D, int]] = {}
        self.diagonals: Dict[str, Dict[Coord2D, int]] = {}
        for room in workspace.rooms:
            front: Dict[Coord2D, int] = {}
            diag: Dict[Coord2D, int] = {}
            for x, y in sorted_cells(room.cells):
                for dx, dy in ORTHOGONAL:
                    n = (x + dx, y + dy)
                    if n not in room.cells:
                        front[n] = front.get(n, 0) + 1
                for dx, dy in DIAGONAL:
                    n = (x + dx, y + dy)
                    if n not in room.cells:
                        diag[n] = diag.get(n, 0) + 1
            self.frontier[room.id] = front
            self.diagonals[room.id] = diag

    def target_cell_count(self) -> int:
        non_hallway = max(1, self.ws.bounds.area - len(self.ws.hallway_cells))
        return int(math.floor(non_hallway * target_fill_ratio(self.scale, self.style, self.tuning)))

    def _candidates(self, room: RoomRecord) -> List[Coord2D]:
        front = self.frontier[room.id]
        dead = [c for c in front if not self.ws.is_claimable(c, room.id)]
        for c in dead:
            del front[c]
        return list(front)

    def _claim(self, room: RoomRecord, cell: Coord2D, perimeter: int) -> None:
        room.claim(cell, perimeter)
        self.ws.room_owner[cell] = room.id
        x, y = cell
        front = self.frontier[room.id]
        diag = self.diagonals[room.id]
        front.pop(cell, None)
        diag.pop(cell, None)
        for dx, dy in ORTHOGONAL:
            n = (x + dx, y + dy)
            if n in room.cells:
                continue
            if n in front:
                front[n] += 1
            elif self.ws.is_claimable(n, room.id):
                front[n] = count_orthogonal(room.cells, n[0], n[1])
        for dx, dy in DIAGONAL:
            n = (x + dx, y + dy)
            if n not in room.cells:
                diag[n] = diag.get(n, 0) + 1

    def run(self) -> int:
        """Grow until the fill target or a pass with no claims. Returns cells claimed."""
        rooms = self.ws.rooms
        if not rooms:
            return 0
        target = self.target_cell_count()
        claimed = len(self.ws.room_owner)
        if claimed >= target:
            return 0
        start = claimed
        max_passes = min(MAX_GROWTH_PASSES, max(MIN_GROWTH_PASSES, math.ceil(target / max(1, len(rooms) * 2.2))))
        per_pass = claims_per_pass(self.scale, self.style)
        style_minimum = self.tuning.min_orthogonal_support(self.style)
        for _ in range(max_passes):
            progress = False
            for room in self.rng.shuffled(rooms):
                if claimed >= target:
                    return claimed - start
                candidates = self._candidates(room)
                if not candidates:
                    continue
                front = self.frontier[room.id]
                diag = self.diagonals[room.id]
                min_orth = 1
                if style_minimum > 1:
                    best = max(front[c] for c in candidates)
                    min_orth = required_support(self.style, self.tuning, best)
                    candidates = [c for c in candidates if front[c] >= min_orth]
                for _claim in range(min(len(candidates), per_pass)):
                    if not candidates or claimed >= target:
                        break
                    idx = pick_candidate(room, candidates, self.rng, self.style, front, diag)
                    if idx is None:
                        break
                    cell = candidates.pop(idx)
                    if not self.ws.is_claimable(cell, room.id):
                        front.pop(cell, None)
                        continue
                    perimeter = accepts_claim(room, cell, self.style, self.tuning, front[cell], diag.get(cell, 0), min_orth)
                    if perimeter is None:
                        continue
                    self._claim(room, cell, perimeter)
                    claimed += 1
                    progress = True
            if not progress:
                break
        return claimed - start


def grow_rooms(workspace: AttemptWorkspace, rng, room_size_scale: float, style: float, tuning: GrowthTuning) -> int:
    return GrowthEngine(workspace, rng, room_size_scale, style, tuning).run()


__all__ = [
    "GrowthEngine",
    "accepts_claim",
    "claims_per_pass",
    "grow_rooms",
    "has_strong_support",
    "pick_candidate",
    "required_support",
    "sample_size",
    "score_candidate",
    "target_fill_ratio",
]
