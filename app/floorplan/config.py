"""Generation options: defaults, clamping and derived grid parameters.

Out-of-range values are clamped rather than rejected; missing or garbage
values fall back to the field default. `FloorPlanOptions.normalized()` is the
single place this happens, every stage downstream receives the clamped,
immutable record.
"""
from __future__ import annotations
import hashlib
import math
import random
from dataclasses import dataclass, field, fields, replace
from typing import Any, Dict, Mapping, NamedTuple, Optional, Tuple

MIN_SIZE_M, MAX_SIZE_M = 12, 100

# field -> (min, max, is_integer)
OPTION_RANGES: Dict[str, Tuple[float, float, bool]] = {
    "width": (MIN_SIZE_M, MAX_SIZE_M, False),
    "height": (MIN_SIZE_M, MAX_SIZE_M, False),
    "hallway_count": (1, 12, True),
    "door_count": (0, 40, True),
    "room_shape_style": (0, 100, True),
    "door_width": (0.8, 2.5, False),
    "max_window_count": (0, 40, True),
    "window_width": (0.8, 2.8, False),
    "corridor_width_cells": (1, 5, True),
}

_CAMEL_ALIASES = {
    "hallwayCount": "hallway_count",
    "doorCount": "door_count",
    "roomShapeStyle": "room_shape_style",
    "doorWidth": "door_width",
    "maxWindowCount": "max_window_count",
    "windowWidth": "window_width",
    "corridorWidthCells": "corridor_width_cells",
    "strictDoorCount": "strict_door_count",
    "requireExteriorExits": "require_exterior_exits",
}

_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off", ""}


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives (builtin round() is banker's)."""
    return int(math.floor(value + 0.5))


def clamp(value, lo, hi):
    return max(lo, min(hi, value))


@dataclass(frozen=True)
class GrowthTuning:
    """Empirically tuned growth thresholds.

    Ceiling tiers are (exclusive area upper bound, max perimeter/area ratio);
    areas at or above the last bound use `ratio_floor`.
    """

    ratio_tiers: Tuple[Tuple[int, float], ...] = ((20, 3.2), (40, 2.8), (80, 2.55))
    ratio_floor: float = 2.35
    style_ratio_allowance: float = 0.3
    single_edge_penalty: float = 0.3
    compact_style_threshold: float = 0.35
    compact_min_orthogonal: int = 2
    organic_min_orthogonal: int = 1
    base_fill_ratio: float = 0.58
    min_fill_ratio: float = 0.5
    max_fill_ratio: float = 0.86

    def max_ratio_for_area(self, area: int) -> float:
        for bound, ratio in self.ratio_tiers:
            if area < bound:
                return ratio
        return self.ratio_floor

    def ratio_ceiling(self, area: int, style: float) -> float:
        return self.max_ratio_for_area(area) + style * self.style_ratio_allowance

    def min_orthogonal_support(self, style: float) -> int:
        if style < self.compact_style_threshold:
            return self.compact_min_orthogonal
        return self.organic_min_orthogonal


class Bounds(NamedTuple):
    cols: int
    rows: int

    @property
    def area(self) -> int:
        return self.cols * self.rows

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.cols and 0 <= y < self.rows


def coerce_seed(value: Any) -> int:
    """Turn an int / numeric string / free-form string into an integer seed.

    None or blank draws a fresh random seed. Non-numeric strings are hashed so
    that named seeds ("tower-a") stay reproducible.
    """
    if value is None or isinstance(value, bool):
        return random.randint(1, 1_000_000)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else random.randint(1, 1_000_000)
    s = str(value).strip()
    if not s:
        return random.randint(1, 1_000_000)
    if s.lstrip("-").isdigit():
        return int(s)
    h = hashlib.sha256(s.encode("utf-8")).digest()
    return int.from_bytes(h[:4], "big")


def _coerce_number(value: Any, default: float) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return number


def _coerce_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    s = str(value).strip().lower()
    if s in _TRUE_STRINGS:
        return True
    if s in _FALSE_STRINGS:
        return False
    return default


@dataclass(frozen=True)
class FloorPlanOptions:
    width: float = 36
    height: float = 24
    hallway_count: int = 1
    door_count: int = 6
    room_shape_style: int = 45
    door_width: float = 1.2
    max_window_count: int = 8
    window_width: float = 1.6
    corridor_width_cells: int = 3
    seed: Optional[int] = None
    strict_door_count: bool = True
    require_exterior_exits: bool = True
    growth: GrowthTuning = field(default_factory=GrowthTuning)

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]] = None, **overrides) -> "FloorPlanOptions":
        """Build options from a loose mapping (camelCase or snake_case keys).

        Unknown keys are ignored. The result is *not* normalized yet.
        """
        merged: Dict[str, Any] = {}
        known = {f.name for f in fields(cls)}
        for source in (data or {}, overrides):
            for key, value in source.items():
                name = _CAMEL_ALIASES.get(key, key)
                if name in known:
                    merged[name] = value
        return cls(**merged)

    def normalized(self) -> "FloorPlanOptions":
        defaults = FloorPlanOptions()
        values: Dict[str, Any] = {}
        for name, (lo, hi, is_int) in OPTION_RANGES.items():
            number = clamp(_coerce_number(getattr(self, name), getattr(defaults, name)), lo, hi)
            values[name] = round_half_up(number) if is_int else number
        values["seed"] = coerce_seed(self.seed)
        values["strict_door_count"] = _coerce_bool(self.strict_door_count, True)
        values["require_exterior_exits"] = _coerce_bool(self.require_exterior_exits, True)
        growth = self.growth if isinstance(self.growth, GrowthTuning) else GrowthTuning()
        return replace(self, growth=growth, **values)

    @property
    def shape_style(self) -> float:
        """roomShapeStyle mapped onto [0, 1]."""
        return clamp(_coerce_number(self.room_shape_style, 45) / 100.0, 0.0, 1.0)

    @property
    def requires_targets(self) -> bool:
        return bool(self.strict_door_count or self.require_exterior_exits)

    def bounds(self) -> Bounds:
        return Bounds(
            max(MIN_SIZE_M, round_half_up(self.width)),
            max(MIN_SIZE_M, round_half_up(self.height)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "hallwayCount": self.hallway_count,
            "doorCount": self.door_count,
            "roomShapeStyle": self.room_shape_style,
            "doorWidth": self.door_width,
            "maxWindowCount": self.max_window_count,
            "windowWidth": self.window_width,
            "corridorWidthCells": self.corridor_width_cells,
            "seed": self.seed,
            "strictDoorCount": self.strict_door_count,
            "requireExteriorExits": self.require_exterior_exits,
        }


def derive_room_size_scale(options: FloorPlanOptions, bounds: Bounds) -> float:
    """Sparser maps (few hallways / doors per area) allow bigger rooms."""
    area = max(1, bounds.area)
    hallways = max(1, options.hallway_count)
    rooms = max(1, options.door_count)
    sparsity = area / (hallways * rooms)
    return clamp(sparsity / 60.0, 1.15, 4.2)


__all__ = [
    "Bounds",
    "FloorPlanOptions",
    "GrowthTuning",
    "OPTION_RANGES",
    "clamp",
    "coerce_seed",
    "derive_room_size_scale",
    "round_half_up",
]
