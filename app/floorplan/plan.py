"""Immutable plan records handed to renderers / level builders."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from .cells import Coord2D, RoomRecord, cell_centroid, sorted_cells
from .geometry import DOOR, WINDOW, Segment
from .hallways import HallwayGroup


def _cells_to_dicts(cells: Tuple[Coord2D, ...]):
    return [{"x": x, "y": y} for x, y in cells]


@dataclass(frozen=True)
class PlanRoom:
    id: str
    x: int
    y: int
    width: int
    height: int
    cells: Tuple[Coord2D, ...]
    label_x: float
    label_y: float
    hallway_id: Optional[str] = None

    @classmethod
    def from_record(cls, room: RoomRecord) -> "PlanRoom":
        cells = tuple(sorted_cells(room.cells))
        xs = [c[0] for c in cells]
        ys = [c[1] for c in cells]
        lx, ly = cell_centroid(cells)
        return cls(
            room.id,
            min(xs),
            min(ys),
            max(xs) - min(xs) + 1,
            max(ys) - min(ys) + 1,
            cells,
            lx,
            ly,
            room.hallway_id,
        )

    @property
    def area(self) -> int:
        return len(self.cells)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "cells": _cells_to_dicts(self.cells),
            "labelX": self.label_x,
            "labelY": self.label_y,
        }


@dataclass(frozen=True)
class PlanHallway:
    id: str
    shape: str
    label_x: float
    label_y: float
    cells: Tuple[Coord2D, ...]
    waypoints: Tuple[Coord2D, ...] = ()

    @classmethod
    def from_group(cls, group: HallwayGroup) -> "PlanHallway":
        lx, ly = group.label_position
        return cls(group.id, group.shape, lx, ly, tuple(sorted_cells(group.cells)), tuple(group.waypoints))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "shape": self.shape,
            "labelX": self.label_x,
            "labelY": self.label_y,
            "cells": _cells_to_dicts(self.cells),
        }


@dataclass(frozen=True)
class PlanMeta:
    width: float
    height: float
    seed: int
    room_count: int
    hallway_count: int
    requested_door_count: int
    placed_door_count: int
    has_exterior_exit: bool
    window_count: int
    wall_count: int
    attempts: int = 1

    @property
    def door_count_met(self) -> bool:
        return self.placed_door_count == self.requested_door_count

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "seed": self.seed,
            "roomCount": self.room_count,
            "hallwayCount": self.hallway_count,
            "requestedDoorCount": self.requested_door_count,
            "placedDoorCount": self.placed_door_count,
            "hasExteriorExit": self.has_exterior_exit,
            "windowCount": self.window_count,
            "wallCount": self.wall_count,
            "doorCountMet": self.door_count_met,
            "attempts": self.attempts,
        }


@dataclass(frozen=True)
class Plan:
    meta: PlanMeta
    rooms: Tuple[PlanRoom, ...]
    hallways: Tuple[PlanHallway, ...]
    walls: Tuple[Segment, ...]
    openings: Tuple[Segment, ...]
    metrics: Mapping[str, Any] = field(default_factory=dict, compare=False)

    @property
    def doors(self) -> Tuple[Segment, ...]:
        return tuple(o for o in self.openings if o.kind == DOOR)

    @property
    def windows(self) -> Tuple[Segment, ...]:
        return tuple(o for o in self.openings if o.kind == WINDOW)

    def hallway_cells(self):
        cells = set()
        for hallway in self.hallways:
            cells.update(hallway.cells)
        return cells

    def to_dict(self, include_metrics: bool = False) -> Dict[str, Any]:
        data = {
            "meta": self.meta.to_dict(),
            "rooms": [r.to_dict() for r in self.rooms],
            "hallways": [h.to_dict() for h in self.hallways],
            "walls": [w.to_dict() for w in self.walls],
            "openings": [o.to_dict() for o in self.openings],
        }
        if include_metrics:
            data["metrics"] = dict(self.metrics)
        return data


__all__ = ["Plan", "PlanHallway", "PlanMeta", "PlanRoom"]
