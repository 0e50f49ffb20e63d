from __future__ import annotations

import math
import random
import sys

from svgpathtools import Arc as _SvgArc

from .models import Angle, Arc, CubicCurve, Point, Rect, Vector

EPSILON = sys.float_info.epsilon


class GeometryError(ValueError):
    """Raised for degenerate or impossible geometry."""


def almost_equal_points(a: Point, b: Point, eps: float = 1e-9) -> bool:
    return math.isclose(a[0], b[0], abs_tol=eps) and math.isclose(a[1], b[1], abs_tol=eps)


def distance(a: Point, b: Point) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


def translate_point(p: Point, by: Vector) -> Point:
    return (p[0] + by[0], p[1] + by[1])


def rotate_point(p: Point, angle: Angle, origin: Point = (0.0, 0.0)) -> Point:
    cos_a = angle.cos()
    sin_a = angle.sin()
    dx = p[0] - origin[0]
    dy = p[1] - origin[1]
    return (origin[0] + dx * cos_a - dy * sin_a, origin[1] + dx * sin_a + dy * cos_a)


def scale_point(p: Point, factor: float, origin: Point = (0.0, 0.0)) -> Point:
    return (origin[0] + (p[0] - origin[0]) * factor, origin[1] + (p[1] - origin[1]) * factor)


def mirror_x(p: Point, y_axis: float) -> Point:
    """Mirror across the horizontal line y = y_axis."""
    return (p[0], y_axis - (p[1] - y_axis))


def mirror_y(p: Point, x_axis: float) -> Point:
    """Mirror across the vertical line x = x_axis."""
    return (x_axis - (p[0] - x_axis), p[1])


def segment_intersection(a0: Point, a1: Point, b0: Point, b1: Point) -> Point | None:
    """Crossing point of segments a0-a1 and b0-b1, None when parallel or disjoint."""
    d1 = (a1[0] - a0[0], a1[1] - a0[1])
    d2 = (b1[0] - b0[0], b1[1] - b0[1])
    det = d1[0] * d2[1] - d1[1] * d2[0]
    if abs(det) < 1e-12:
        return None
    wx = b0[0] - a0[0]
    wy = b0[1] - a0[1]
    t = (wx * d2[1] - wy * d2[0]) / det
    s = (wx * d1[1] - wy * d1[0]) / det
    tol = 1e-12
    if t < -tol or t > 1.0 + tol or s < -tol or s > 1.0 + tol:
        return None
    return (a0[0] + t * d1[0], a0[1] + t * d1[1])


def point_segment_distance(p: Point, a: Point, b: Point) -> float:
    dx = b[0] - a[0]
    dy = b[1] - a[1]
    length_sq = dx * dx + dy * dy
    if length_sq == 0.0:
        return distance(p, a)
    t = ((p[0] - a[0]) * dx + (p[1] - a[1]) * dy) / length_sq
    t = min(1.0, max(0.0, t))
    return distance(p, (a[0] + t * dx, a[1] + t * dy))


def ellipse_point(center: Point, radii: Vector, x_rotation: float, angle: float) -> Point:
    """Point at parametric `angle` on an ellipse rotated by `x_rotation` radians."""
    return _map_unit(center, radii, x_rotation, math.cos(angle), math.sin(angle))


def arc_is_straight_line(arc: Arc) -> bool:
    return (
        abs(arc.radii[0]) <= EPSILON
        or abs(arc.radii[1]) <= EPSILON
        or almost_equal_points(arc.start, arc.end, eps=EPSILON)
    )


def svg_arc_of(arc: Arc) -> _SvgArc:
    if arc_is_straight_line(arc):
        raise GeometryError(f"Arc is a straight line: {arc!r}")
    return _SvgArc(
        complex(*arc.start),
        complex(abs(arc.radii[0]), abs(arc.radii[1])),
        arc.x_rotation.degrees,
        arc.large_arc,
        arc.sweep,
        complex(*arc.end),
    )


def arc_center_form(arc: Arc) -> tuple[Point, Vector, float, float]:
    """Return (center, radii, start_angle, sweep) for an endpoint arc; angles in radians.

    Radii too small to span the endpoints are scaled up as SVG prescribes.
    """
    svg_arc = svg_arc_of(arc)
    center = (float(svg_arc.center.real), float(svg_arc.center.imag))
    radii = (float(svg_arc.radius.real), float(svg_arc.radius.imag))
    return center, radii, math.radians(svg_arc.theta), math.radians(svg_arc.delta)


def arc_from_center_form(
    center: Point, radii: Vector, x_rotation: Angle, start_angle: float, sweep: float
) -> Arc:
    return Arc(
        start=ellipse_point(center, radii, x_rotation.radians, start_angle),
        end=ellipse_point(center, radii, x_rotation.radians, start_angle + sweep),
        radii=radii,
        x_rotation=x_rotation,
        large_arc=abs(sweep) > math.pi,
        sweep=sweep > 0.0,
    )


def arc_to_cubics(
    center: Point, radii: Vector, x_rotation: float, start_angle: float, sweep: float
) -> list[CubicCurve]:
    """Split an elliptical arc into cubic beziers spanning at most 90 degrees each.

    Used for center-form arcs, which may sweep a full turn and so have no
    SVG endpoint form.
    """
    if sweep == 0.0:
        return []
    count = max(1, int(math.ceil(abs(sweep) / (math.pi / 2.0) - 1e-9)))
    step = sweep / count
    k = 4.0 / 3.0 * math.tan(step / 4.0)

    def unit_to_global(ux: float, uy: float) -> Point:
        return _map_unit(center, radii, x_rotation, ux, uy)

    cubics: list[CubicCurve] = []
    for i in range(count):
        a0 = start_angle + step * i
        a1 = a0 + step
        p0 = (math.cos(a0), math.sin(a0))
        p1 = (math.cos(a1), math.sin(a1))
        c1 = (p0[0] - k * p0[1], p0[1] + k * p0[0])
        c2 = (p1[0] + k * p1[1], p1[1] - k * p1[0])
        cubics.append(
            CubicCurve(
                start=unit_to_global(*p0),
                ctrl1=unit_to_global(*c1),
                ctrl2=unit_to_global(*c2),
                end=unit_to_global(*p1),
            )
        )
    return cubics


def _map_unit(center: Point, radii: Vector, x_rotation: float, ux: float, uy: float) -> Point:
    sx = radii[0] * ux
    sy = radii[1] * uy
    cos_r = math.cos(x_rotation)
    sin_r = math.sin(x_rotation)
    return (center[0] + sx * cos_r - sy * sin_r, center[1] + sx * sin_r + sy * cos_r)


def rand_pt_in_bounds(rng: random.Random, bounds: Rect) -> Point:
    """Uniform random point; an empty axis range yields that axis' max."""
    x = bounds.max_x if bounds.width <= 0.0 else rng.uniform(bounds.min_x, bounds.max_x)
    y = bounds.max_y if bounds.height <= 0.0 else rng.uniform(bounds.min_y, bounds.max_y)
    return (x, y)
