import math

import pytest

from mandala import segments as seg
from mandala.geometry import EPSILON, GeometryError
from mandala.models import Angle, Arc, CubicCurve, Line, PointSegment, QuadraticCurve, SweepArc


def test_tolerable_line_is_clamped_to_epsilon() -> None:
    assert seg.tolerable(Line((0.0, 0.0), (1.0, 1.0))) == EPSILON
    assert seg.tolerable(PointSegment((1.0, 1.0))) == EPSILON


def test_tolerable_arc() -> None:
    arc = Arc((0.0, 0.0), (2.0, 0.0), (1.0, 1.0), sweep=True)
    assert seg.tolerable(arc) == pytest.approx(0.15915494309189535, rel=1e-12)


def test_tolerable_quadratic() -> None:
    quad = QuadraticCurve((1.0, 1.0), (2.0, 2.0), (3.0, 1.0))
    assert seg.tolerable(quad) == pytest.approx(0.616057448634553, rel=1e-9)


def test_tolerable_cubic_splits_at_inflection() -> None:
    cubic = CubicCurve((1.0, 1.0), (2.0, 2.0), (3.0, 0.0), (4.0, 1.0))
    assert seg.cubic_inflections(cubic) == [0.5]
    assert abs(seg.tolerable(cubic) - 0.5749) < 1e-3


def test_cubic_to_quadratic_control_point() -> None:
    cubic = CubicCurve((0.0, 0.0), (1.0, 2.0), (3.0, 2.0), (4.0, 0.0))
    assert seg.cubic_to_quadratic(cubic).ctrl == (2.0, 3.0)


def test_lengths() -> None:
    assert seg.length(Line((0.0, 0.0), (3.0, 4.0))) == 5.0
    assert seg.length(PointSegment((3.0, 4.0))) == 0.0
    half = SweepArc((0.0, 0.0), (10.0, 10.0), Angle(), math.pi)
    assert abs(seg.length(half) - 10.0 * math.pi) < 0.05


def test_endpoints_of_sweep_arc() -> None:
    arc = SweepArc((0.0, 0.0), (2.0, 2.0), Angle(), math.pi / 2.0)
    assert seg.start_point(arc) == (2.0, 0.0)
    end = seg.end_point(arc)
    assert abs(end[0]) < 1e-12 and abs(end[1] - 2.0) < 1e-12
    assert seg.key_points(arc) == [(0.0, 0.0)]


def test_flattened_curve_keeps_endpoints() -> None:
    quad = QuadraticCurve((0.0, 0.0), (5.0, 10.0), (10.0, 0.0))
    lines = seg.flattened(quad)
    assert len(lines) > 1
    assert lines[0].start == (0.0, 0.0)
    assert lines[-1].end == (10.0, 0.0)
    for a, b in zip(lines, lines[1:]):
        assert a.end == b.start


def test_line_intersection_line() -> None:
    hits = seg.line_intersection(Line((0.0, 0.0), (2.0, 2.0)), Line((0.0, 2.0), (2.0, 0.0)))
    assert hits == [(1.0, 1.0)]
    assert seg.line_intersection(Line((0.0, 0.0), (1.0, 0.0)), Line((0.0, 1.0), (1.0, 1.0))) is None


def test_line_intersection_cubic() -> None:
    cubic = CubicCurve((0.0, 0.0), (0.0, 10.0), (10.0, 10.0), (10.0, 0.0))
    hits = seg.line_intersection(cubic, Line((5.0, -1.0), (5.0, 20.0)))
    assert hits is not None and len(hits) == 1
    assert abs(hits[0][0] - 5.0) < 1e-6
    assert abs(hits[0][1] - 7.5) < 1e-6
    assert seg.line_intersection(cubic, Line((20.0, 0.0), (30.0, 0.0))) is None


def test_line_intersection_circle_arc() -> None:
    circle = SweepArc((0.0, 0.0), (5.0, 5.0), Angle(), math.tau)
    hits = seg.line_intersection(circle, Line((-10.0, 0.5), (10.0, 0.5)))
    assert hits is not None and len(hits) == 2
    for x, y in hits:
        assert abs(math.hypot(x, y) - 5.0) < 1e-2


def test_point_segment_on_line() -> None:
    assert seg.line_intersection(PointSegment((1.0, 0.0)), Line((0.0, 0.0), (2.0, 0.0))) == [(1.0, 0.0)]
    assert seg.line_intersection(PointSegment((1.0, 1.0)), Line((0.0, 0.0), (2.0, 0.0))) is None


def test_flip_reverses_line() -> None:
    flipped = seg.flip_along_x(Line((0.0, 1.0), (2.0, 3.0)), 0.0)
    assert flipped == Line((2.0, -3.0), (0.0, -1.0))


def test_flip_sweep_arc_is_exact_mirror() -> None:
    arc = SweepArc((0.0, 0.0), (1.0, 1.0), Angle(), math.pi / 2.0)
    flipped = seg.flip_along_y(arc, 0.0)
    start = seg.start_point(flipped)
    end = seg.end_point(flipped)
    # reversed: starts at the mirrored end, ends at the mirrored start
    assert abs(start[0]) < 1e-12 and abs(start[1] - 1.0) < 1e-12
    assert abs(end[0] + 1.0) < 1e-12 and abs(end[1]) < 1e-12


def test_rotate_arc_moves_endpoints() -> None:
    arc = Arc((1.0, 0.0), (-1.0, 0.0), (1.0, 1.0), sweep=True)
    rotated = seg.rotate(arc, Angle(math.pi / 2.0))
    assert abs(rotated.start[0]) < 1e-9 and abs(rotated.start[1] - 1.0) < 1e-9
    assert abs(rotated.end[0]) < 1e-9 and abs(rotated.end[1] + 1.0) < 1e-9


def test_rotate_straight_arc_fails() -> None:
    with pytest.raises(GeometryError):
        seg.rotate(Arc((0.0, 0.0), (1.0, 0.0), (0.0, 0.0)), Angle(1.0))
    with pytest.raises(GeometryError):
        seg.scale(Arc((0.0, 0.0), (0.0, 0.0), (1.0, 1.0)), 2.0)


def test_scale_sweep_arc() -> None:
    arc = SweepArc((1.0, 1.0), (2.0, 3.0), Angle(), math.pi)
    scaled = seg.scale(arc, 2.0)
    assert scaled.center == (2.0, 2.0)
    assert scaled.radii == (4.0, 6.0)


def test_translate_curve() -> None:
    cubic = CubicCurve((0.0, 0.0), (1.0, 1.0), (2.0, 1.0), (3.0, 0.0))
    moved = seg.translate(cubic, (1.0, 2.0))
    assert moved == CubicCurve((1.0, 2.0), (2.0, 3.0), (3.0, 3.0), (4.0, 2.0))


def test_endpoint_arc_to_cubics_follows_the_circle() -> None:
    half = Arc((10.0, 0.0), (-10.0, 0.0), (10.0, 10.0), sweep=True)
    cubics = seg.to_cubics(half)
    assert len(cubics) == 2
    assert cubics[0].start == (10.0, 0.0)
    assert cubics[-1].end == (-10.0, 0.0)
    assert abs(cubics[0].end[0]) < 1e-9 and abs(cubics[0].end[1] - 10.0) < 1e-9
    for c in cubics:
        mid_x = (c.start[0] + 3 * c.ctrl1[0] + 3 * c.ctrl2[0] + c.end[0]) / 8.0
        mid_y = (c.start[1] + 3 * c.ctrl1[1] + 3 * c.ctrl2[1] + c.end[1]) / 8.0
        assert abs(math.hypot(mid_x, mid_y) - 10.0) < 1e-2


def test_bbox_of_zero_sweep_arc_fails() -> None:
    with pytest.raises(GeometryError):
        seg.bbox(SweepArc((0.0, 0.0), (1.0, 1.0), Angle(), 0.0))
