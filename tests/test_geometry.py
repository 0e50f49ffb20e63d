import math
import random

import pytest

from mandala.geometry import (
    GeometryError,
    arc_center_form,
    arc_to_cubics,
    mirror_x,
    mirror_y,
    rand_pt_in_bounds,
    rotate_point,
    segment_intersection,
)
from mandala.models import Angle, Arc, Rect


def test_angle_wraps_into_full_turn() -> None:
    assert abs(Angle.from_degrees(-90.0).degrees - 270.0) < 1e-9
    assert Angle.from_degrees(360.0).radians == 0.0
    assert abs((Angle(6.0) + Angle(1.0)).radians - (7.0 - math.tau)) < 1e-12


def test_angle_division() -> None:
    assert Angle(1.0) / Angle(0.5) == 2.0
    assert Angle(1.0) / 2.0 == Angle(0.5)


def test_rect_accessors_and_inner_rect() -> None:
    r = Rect(0.0, 0.0, 30.0, 20.0)
    assert r.center == (15.0, 10.0)
    assert r.area() == 600.0
    assert r.inner_rect(top=10.0) == Rect(0.0, 10.0, 30.0, 10.0)
    assert r.inner_rect(left=40.0).width == 0.0
    assert Rect.from_center((5.0, 5.0), (10.0, 10.0)) == Rect(0.0, 0.0, 10.0, 10.0)


def test_rotate_point_quarter_turn() -> None:
    x, y = rotate_point((2.0, 1.0), Angle(math.pi / 2.0), origin=(1.0, 1.0))
    assert abs(x - 1.0) < 1e-12
    assert abs(y - 2.0) < 1e-12


def test_mirrors() -> None:
    assert mirror_x((3.0, 1.0), 2.0) == (3.0, 3.0)
    assert mirror_y((3.0, 1.0), 2.0) == (1.0, 1.0)


def test_segment_intersection() -> None:
    assert segment_intersection((0.0, 0.0), (2.0, 2.0), (0.0, 2.0), (2.0, 0.0)) == (1.0, 1.0)
    assert segment_intersection((0.0, 0.0), (1.0, 0.0), (0.0, 1.0), (1.0, 1.0)) is None
    assert segment_intersection((0.0, 0.0), (1.0, 1.0), (3.0, 0.0), (2.0, 5.0)) is None


def test_arc_center_form_half_circle() -> None:
    arc = Arc((0.0, 0.0), (2.0, 0.0), (1.0, 1.0), sweep=True)
    center, radii, _start, sweep = arc_center_form(arc)
    assert abs(center[0] - 1.0) < 1e-9
    assert abs(center[1]) < 1e-9
    assert abs(radii[0] - 1.0) < 1e-9
    assert abs(abs(sweep) - math.pi) < 1e-9


def test_arc_center_form_rejects_straight_arc() -> None:
    with pytest.raises(GeometryError):
        arc_center_form(Arc((0.0, 0.0), (2.0, 0.0), (0.0, 0.0)))


def test_arc_to_cubics_quarter_circle() -> None:
    cubics = arc_to_cubics((0.0, 0.0), (10.0, 10.0), 0.0, 0.0, math.pi / 2.0)
    assert len(cubics) == 1
    assert cubics[0].start == (10.0, 0.0)
    assert abs(cubics[0].end[0]) < 1e-12
    assert abs(cubics[0].end[1] - 10.0) < 1e-12
    assert len(arc_to_cubics((0.0, 0.0), (1.0, 1.0), 0.0, 0.0, math.tau)) == 4


def test_rand_pt_in_bounds() -> None:
    rng = random.Random(7)
    for _ in range(20):
        x, y = rand_pt_in_bounds(rng, Rect(0.0, 0.0, 10.0, 10.0))
        assert 0.0 <= x <= 10.0 and 0.0 <= y <= 10.0
    assert rand_pt_in_bounds(rng, Rect(5.0, 0.0, 0.0, 10.0))[0] == 5.0
