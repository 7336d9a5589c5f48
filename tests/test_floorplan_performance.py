import time

import pytest

from app.floorplan import generate_floor_plan

# Simple performance guardrail. Not a strict micro-benchmark; aims to catch large regressions.
# Adjust thresholds if CI hardware differs significantly.


@pytest.mark.performance
def test_default_plan_generation_time():
    seeds = [10101, 20202, 30303]
    max_seconds_per = 5.0  # generous threshold; tune as needed
    timings = []
    for s in seeds:
        start = time.perf_counter()
        plan = generate_floor_plan(seed=s, strict_door_count=False, require_exterior_exits=False)
        elapsed = time.perf_counter() - start
        timings.append(elapsed)
        assert plan.walls
        assert elapsed < max_seconds_per, f"Seed {s} took {elapsed:.3f}s (> {max_seconds_per}s)"


@pytest.mark.performance
def test_large_plan_generation_time():
    start = time.perf_counter()
    generate_floor_plan(
        seed=7, width=100, height=100, hallway_count=4, door_count=20, strict_door_count=False, require_exterior_exits=False
    )
    elapsed = time.perf_counter() - start
    assert elapsed < 30.0, f"100x100 plan took {elapsed:.3f}s"
