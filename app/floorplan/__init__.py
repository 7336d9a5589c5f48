"""Public floor plan package interface."""

from .config import Bounds, FloorPlanOptions, GrowthTuning  # noqa: F401
from .errors import DoorCountUnmetError, ExteriorExitUnmetError, FloorPlanError  # noqa: F401
from .geometry import DOOR, WALL, WINDOW, Segment  # noqa: F401
from .pipeline import generate_attempt, generate_floor_plan, metrics_enabled  # noqa: F401
from .plan import Plan, PlanHallway, PlanMeta, PlanRoom  # noqa: F401
from .rng import SeededRng  # noqa: F401

__all__ = [
    "Bounds",
    "DOOR",
    "DoorCountUnmetError",
    "ExteriorExitUnmetError",
    "FloorPlanError",
    "FloorPlanOptions",
    "GrowthTuning",
    "Plan",
    "PlanHallway",
    "PlanMeta",
    "PlanRoom",
    "Segment",
    "SeededRng",
    "WALL",
    "WINDOW",
    "generate_attempt",
    "generate_floor_plan",
    "metrics_enabled",
]
