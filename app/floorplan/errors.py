"""User-facing generation failures (raised only in strict modes)."""
from __future__ import annotations
from typing import List, Optional


class FloorPlanError(Exception):
    kind = "floorplan_error"

    def __init__(self, message: str, requested: Optional[int] = None, placed: Optional[int] = None, suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.requested = requested
        self.placed = placed
        self.suggestions = list(suggestions or [])

    def to_dict(self):
        return {
            "error": str(self),
            "kind": self.kind,
            "requested": self.requested,
            "placed": self.placed,
            "suggestions": self.suggestions,
        }


class DoorCountUnmetError(FloorPlanError):
    kind = "door_count_unmet"

    def __init__(self, requested: int, placed: int):
        super().__init__(
            f"Could not place {requested} room-connected doors (placed {placed}). "
            "Try fewer doors, fewer hallways, or larger map dimensions.",
            requested=requested,
            placed=placed,
            suggestions=["fewer doors", "fewer hallways", "larger map dimensions"],
        )


class ExteriorExitUnmetError(FloorPlanError):
    kind = "exterior_exit_unmet"

    def __init__(self, placed: int):
        super().__init__(
            "Could not place at least 2 exterior exits on different rooms. "
            "Try regenerating or increasing map size.",
            requested=2,
            placed=placed,
            suggestions=["regenerate with another seed", "larger map dimensions"],
        )


__all__ = ["DoorCountUnmetError", "ExteriorExitUnmetError", "FloorPlanError"]
