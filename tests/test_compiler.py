import pytest

from app.floorplan.compiler import compile_walls, normalize_openings, solid_intervals
from app.floorplan.geometry import DOOR, MIN_SEGMENT_LENGTH, WALL, WINDOW, Edge, Opening, Wall


def test_wall_without_openings_is_one_segment():
    wall = Wall(Edge(0, 0, 5, 0), room_id="room-1")
    compiled = compile_walls([wall], [])
    assert [tuple(s) for s in compiled.walls] == [(0, 0, 5, 0, WALL)]
    assert compiled.openings == []


def test_door_splits_wall():
    wall = Wall(Edge(2, 3, 2, 9), hallway_id="hall-1")
    door = Opening(wall, DOOR, 1.0, 2.2, hallway_id="hall-1")
    compiled = compile_walls([wall], [door])
    assert len(compiled.walls) == 2
    a, b = compiled.walls
    assert (a.y1, a.y2) == pytest.approx((3, 4))
    assert (b.y1, b.y2) == pytest.approx((5.2, 9))
    (glyph,) = compiled.openings
    assert glyph.kind == DOOR
    assert (glyph.x1, glyph.y1, glyph.x2, glyph.y2) == pytest.approx((2, 4, 2, 5.2))


def test_slivers_dropped():
    wall = Wall(Edge(0, 0, 3, 0), room_id="room-1")
    door = Opening(wall, DOOR, 0.05, 1.25)
    compiled = compile_walls([wall], [door])
    assert all(s.length > MIN_SEGMENT_LENGTH for s in compiled.walls)
    assert len(compiled.walls) == 1


def test_overlapping_openings_trimmed():
    wall = Wall(Edge(0, 0, 10, 0), room_id="room-1")
    spans = normalize_openings(
        10,
        [Opening(wall, WINDOW, 3.0, 5.0), Opening(wall, DOOR, 1.0, 4.0), Opening(wall, WINDOW, 9.0, 12.0)],
    )
    assert [(s, e) for s, e, _ in spans] == [(1.0, 4.0), (4.0, 5.0), (9.0, 10)]
    assert solid_intervals(10, spans) == [(0.0, 1.0), (5.0, 9.0)]


def test_openings_only_cut_their_own_wall():
    # Two rooms share the same geometric edge; the door belongs to room-1 only.
    edge = Edge(4, 0, 4, 6)
    w1 = Wall(edge, room_id="room-1")
    w2 = Wall(edge, room_id="room-2")
    compiled = compile_walls([w1, w2], [Opening(w1, DOOR, 2.0, 3.2)])
    assert len(compiled.walls) == 3
    assert len(compiled.openings) == 1
