import dataclasses

from app.floorplan.debug_checks import analyze, is_clean
from app.floorplan.geometry import Segment


def test_generated_plans_are_clean(best_effort_plan):
    for seed in (1, 42, 292372):
        report = analyze(best_effort_plan(seed=seed, hallway_count=2, door_count=8), style=0.45)
        assert is_clean(report), report


def test_overlap_detected(best_effort_plan):
    plan = best_effort_plan(seed=42)
    if len(plan.rooms) < 2:
        return
    first, second = plan.rooms[0], plan.rooms[1]
    tampered = dataclasses.replace(second, cells=second.cells + first.cells[:1])
    broken = dataclasses.replace(plan, rooms=(first, tampered) + plan.rooms[2:])
    report = analyze(broken)
    assert report["overlapping_room_cells"] == [first.cells[0]]
    assert not is_clean(report)


def test_diagonal_segment_detected(best_effort_plan):
    plan = best_effort_plan(seed=42)
    broken = dataclasses.replace(plan, walls=plan.walls + (Segment(0, 0, 1, 1),))
    assert analyze(broken)["non_axis_segments"] == [Segment(0, 0, 1, 1)]


def test_diagnose_script_reports_ok(capsys):
    from scripts.diagnose_seeds import main, run_for_seed

    result = run_for_seed(42)
    assert result["ok"] is True
    assert set(result["issues"]) >= {"overlapping_room_cells", "non_axis_segments"}
    assert main(["42"]) == 0
    assert '"seed": 42' in capsys.readouterr().out
