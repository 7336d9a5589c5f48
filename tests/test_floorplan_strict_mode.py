import pytest

from app.floorplan import (
    DoorCountUnmetError,
    ExteriorExitUnmetError,
    FloorPlanError,
    generate_floor_plan,
)
from app.floorplan.pipeline import RELAXED_ATTEMPTS, STRICT_ATTEMPTS

SCENARIO = dict(seed=1, width=36, height=24, hallway_count=1, door_count=6)


@pytest.mark.strict_mode
def test_strict_scenario_meets_targets_or_raises():
    try:
        plan = generate_floor_plan(strict_door_count=True, require_exterior_exits=True, **SCENARIO)
    except (DoorCountUnmetError, ExteriorExitUnmetError) as exc:
        assert exc.kind in ("door_count_unmet", "exterior_exit_unmet")
        assert exc.suggestions
        return
    assert plan.meta.placed_door_count == 6
    assert plan.meta.has_exterior_exit is True
    assert plan.meta.door_count_met is True


@pytest.mark.strict_mode
def test_best_effort_never_raises_and_never_exceeds_request():
    for seed in range(1, 9):
        params = dict(SCENARIO, seed=seed)
        plan = generate_floor_plan(strict_door_count=False, require_exterior_exits=False, **params)
        assert plan.meta.placed_door_count <= plan.meta.requested_door_count


@pytest.mark.strict_mode
def test_impossible_door_count_raises_with_both_values():
    with pytest.raises(DoorCountUnmetError) as exc:
        generate_floor_plan(seed=3, width=12, height=12, door_count=40, require_exterior_exits=False)
    err = exc.value
    assert err.requested == 40
    assert err.placed < 40
    assert "40" in str(err)
    assert isinstance(err, FloorPlanError)
    assert err.to_dict()["kind"] == "door_count_unmet"


@pytest.mark.strict_mode
def test_exit_requirement_alone():
    # Door-count strictness off: only the exterior exit rule may fail.
    try:
        plan = generate_floor_plan(seed=3, width=12, height=12, door_count=40, strict_door_count=False)
    except ExteriorExitUnmetError as exc:
        assert exc.requested == 2
        return
    assert plan.meta.has_exterior_exit


def test_attempt_budget_depends_on_strictness(monkeypatch):
    from app.floorplan import pipeline

    calls = []
    real = pipeline.generate_attempt

    def counting(options, bounds, seed):
        calls.append(seed)
        return real(options, bounds, seed)

    monkeypatch.setattr(pipeline, "generate_attempt", counting)
    impossible = dict(seed=3, width=12, height=12, door_count=40)
    with pytest.raises(DoorCountUnmetError):
        generate_floor_plan(require_exterior_exits=False, **impossible)
    assert len(calls) == STRICT_ATTEMPTS
    assert len(set(calls)) == STRICT_ATTEMPTS

    calls.clear()
    plan = generate_floor_plan(strict_door_count=False, require_exterior_exits=False, **impossible)
    assert len(calls) == RELAXED_ATTEMPTS
    assert plan.meta.attempts == RELAXED_ATTEMPTS
