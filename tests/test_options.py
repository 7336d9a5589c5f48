import pytest

from app.floorplan import FloorPlanOptions
from app.floorplan.config import (
    GrowthTuning,
    coerce_seed,
    derive_room_size_scale,
    round_half_up,
)


def test_defaults():
    opts = FloorPlanOptions(seed=3).normalized()
    assert opts.width == 36 and opts.height == 24
    assert opts.hallway_count == 1
    assert opts.door_count == 6
    assert opts.room_shape_style == 45
    assert opts.strict_door_count is True
    assert opts.require_exterior_exits is True
    assert opts.bounds() == (36, 24)


@pytest.mark.parametrize(
    "field,value,expected",
    [
        ("width", 5, 12),
        ("width", 500, 100),
        ("hallway_count", 0, 1),
        ("hallway_count", 99, 12),
        ("door_count", -3, 0),
        ("door_width", 9, 2.5),
        ("window_width", 0.1, 0.8),
        ("corridor_width_cells", 9, 5),
        ("room_shape_style", 140, 100),
    ],
)
def test_out_of_range_values_are_clamped(field, value, expected):
    opts = FloorPlanOptions.from_mapping({field: value, "seed": 1}).normalized()
    assert getattr(opts, field) == expected


def test_camel_case_keys_and_garbage_values():
    opts = FloorPlanOptions.from_mapping(
        {"doorCount": "4", "hallwayCount": "two", "roomShapeStyle": 0, "strictDoorCount": "false", "unknown": 1}
    ).normalized()
    assert opts.door_count == 4
    assert opts.hallway_count == 1  # garbage falls back to default
    assert opts.room_shape_style == 0  # zero is a real value, not "missing"
    assert opts.strict_door_count is False


def test_overrides_win_over_mapping():
    opts = FloorPlanOptions.from_mapping({"doorCount": 4}, door_count=9).normalized()
    assert opts.door_count == 9


def test_integer_fields_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    opts = FloorPlanOptions.from_mapping({"doorCount": 4.5, "seed": 1}).normalized()
    assert opts.door_count == 5


def test_seed_coercion():
    assert coerce_seed(42) == 42
    assert coerce_seed("42") == 42
    assert coerce_seed("tower-a") == coerce_seed("tower-a")
    assert coerce_seed("tower-a") != coerce_seed("tower-b")
    drawn = coerce_seed(None)
    assert 1 <= drawn <= 1_000_000


def test_room_size_scale_clamped():
    small = FloorPlanOptions(width=12, height=12, door_count=40, seed=1).normalized()
    big = FloorPlanOptions(width=100, height=100, door_count=1, seed=1).normalized()
    assert derive_room_size_scale(small, small.bounds()) == pytest.approx(1.15)
    assert derive_room_size_scale(big, big.bounds()) == pytest.approx(4.2)


def test_growth_tuning_tiers():
    t = GrowthTuning()
    assert t.max_ratio_for_area(10) == 3.2
    assert t.max_ratio_for_area(20) == 2.8
    assert t.max_ratio_for_area(79) == 2.55
    assert t.max_ratio_for_area(500) == 2.35
    assert t.ratio_ceiling(500, 1.0) == pytest.approx(2.65)
    assert t.min_orthogonal_support(0.1) == 2
    assert t.min_orthogonal_support(0.8) == 1


def test_to_dict_uses_camel_case():
    data = FloorPlanOptions().to_dict()
    assert data["doorCount"] == 6
    assert "corridorWidthCells" in data
    assert "door_count" not in data
