import pytest

from tests.floorplan_test_utils import perimeter_area_ratio


def _mean_ratio(make_plan, style, seeds):
    ratios = []
    for seed in seeds:
        plan = make_plan(seed=seed, room_shape_style=style, door_count=6)
        ratios.extend(perimeter_area_ratio(r.cells) for r in plan.rooms)
    return sum(ratios) / max(1, len(ratios))


@pytest.mark.statistical
def test_organic_style_raises_mean_perimeter_ratio(best_effort_plan):
    seeds = range(100, 130)
    compact = _mean_ratio(best_effort_plan, 0, seeds)
    organic = _mean_ratio(best_effort_plan, 100, seeds)
    assert organic > compact, f"style 100 ratio {organic:.3f} <= style 0 ratio {compact:.3f}"
