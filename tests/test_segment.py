import math

import pytest

from mandala.geometry import GeometryError
from mandala.mandala import Mandala
from mandala.models import Angle, Line, Rect
from mandala.path import Path
from mandala.segment import MandalaDrawing, MandalaSegment, PathsDrawing


def _segment(**overrides) -> MandalaSegment:
    fields = dict(breadth=1.0, r_base=2.0, angle_base=Angle(0.5), sweep=math.pi, center=(3.0, 4.0))
    fields.update(overrides)
    return MandalaSegment(**fields)


def test_to_global() -> None:
    x, y = _segment().to_global(5.0, 6.0)
    assert abs(x - 3.8392861498283923) < 1e-12
    assert abs(y - 4.647455603656524) < 1e-12


def test_to_local_round_trip() -> None:
    s = _segment()
    c, r = s.to_local(*s.to_global(5.0, 6.0))
    assert abs(c - 5.0) < 1e-6
    assert abs(r - 6.0) < 1e-6
    assert round(c) == 5 and round(r) == 6


def test_to_local_round_trip_across_zero_angle() -> None:
    s = _segment(angle_base=Angle(-0.2), sweep=0.4, r_base=10.0, breadth=4.0)
    for c, r in [(0.0, 0.0), (10.0, 50.0), (90.0, 100.0)]:
        c2, r2 = s.to_local(*s.to_global(c, r))
        assert abs(c2 - c) < 1e-6
        assert abs(r2 - r) < 1e-6


def test_float_angle_base_is_wrapped() -> None:
    s = _segment(angle_base=-math.pi / 2.0)
    assert isinstance(s.angle_base, Angle)
    assert abs(s.angle_base.radians - 1.5 * math.pi) < 1e-12


@pytest.mark.parametrize(
    "overrides",
    [
        {"breadth": 0.0},
        {"breadth": 3.0},
        {"r_base": -1.0},
        {"sweep": 0.0},
        {"normalized": 0.0},
    ],
)
def test_degenerate_segment_fails(overrides: dict) -> None:
    with pytest.raises(GeometryError):
        _segment(**overrides)


def test_missing_field_fails() -> None:
    with pytest.raises(TypeError):
        MandalaSegment(breadth=1.0, r_base=2.0, angle_base=Angle(0.0), center=(0.0, 0.0))


def test_render_maps_local_paths() -> None:
    s = _segment(angle_base=Angle(0.0), sweep=math.pi / 2.0, center=(0.0, 0.0), r_base=10.0, breadth=5.0)
    s.draw(PathsDrawing([Path.new(Line((0.0, 0.0), (0.0, 100.0)))]))
    [path] = s.render()
    assert path.segments[0] == Line((5.0, 0.0), (10.0, 0.0))


def test_replica_renders_rotated_original() -> None:
    s = _segment(angle_base=Angle(0.0), sweep=math.pi / 2.0, center=(0.0, 0.0), r_base=10.0, breadth=5.0)
    s.draw(PathsDrawing([Path.new(Line((0.0, 0.0), (0.0, 100.0)))]))
    replica = s.replicate(Angle(math.pi / 2.0))
    assert replica.replica_id == s.id
    [path] = replica.render(s)
    line = path.segments[0]
    assert abs(line.start[0]) < 1e-9 and abs(line.start[1] - 5.0) < 1e-9
    assert abs(line.end[0]) < 1e-9 and abs(line.end[1] - 10.0) < 1e-9


def test_nested_mandala_is_fitted_into_placement() -> None:
    s = _segment(angle_base=Angle(0.0), sweep=math.pi / 2.0, center=(0.0, 0.0), r_base=100.0, breadth=50.0)
    nested = Mandala((50.0, 50.0), seed=3)
    nested.generate_epoch()
    s.draw(MandalaDrawing(nested, Rect(25.0, 25.0, 50.0, 50.0)))

    corners = [s.to_global(c, r) for c, r in [(25.0, 25.0), (75.0, 25.0), (75.0, 75.0), (25.0, 75.0)]]
    target = Rect.from_points(corners)
    paths = s.render()
    assert paths
    for path in paths:
        box = path.bbox()
        assert box.min_x >= target.min_x - 1e-6
        assert box.max_x <= target.max_x + 1e-6
        assert box.min_y >= target.min_y - 1e-6
        assert box.max_y <= target.max_y + 1e-6


def test_translate_and_scale_keep_id() -> None:
    s = _segment()
    moved = s.translate((1.0, 1.0))
    assert moved.center == (4.0, 5.0)
    assert moved.id == s.id
    scaled = s.scale(2.0, origin=(3.0, 4.0))
    assert scaled.r_base == 4.0
    assert scaled.breadth == 2.0
    assert scaled.center == (3.0, 4.0)
