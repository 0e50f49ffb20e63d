"""Operations on individual path segments.

Every function dispatches over the closed set of segment variants defined in
:mod:`mandala.models`. Curve evaluation, bezier lengths and bezier/line
intersections are delegated to svgpathtools; points cross that boundary as
complex numbers.
"""

from __future__ import annotations

import math
from typing import Callable

from svgpathtools import CubicBezier as _SvgCubic
from svgpathtools import Line as _SvgLine
from svgpathtools import QuadraticBezier as _SvgQuadratic

from .geometry import (
    EPSILON,
    GeometryError,
    almost_equal_points,
    arc_center_form,
    arc_from_center_form,
    arc_is_straight_line,
    arc_to_cubics,
    distance,
    mirror_x,
    mirror_y,
    point_segment_distance,
    rotate_point,
    scale_point,
    segment_intersection,
    svg_arc_of,
    translate_point,
)
from .models import (
    Angle,
    Arc,
    CubicCurve,
    Line,
    PathSegment,
    Point,
    PointSegment,
    QuadraticCurve,
    Rect,
    SweepArc,
    Vector,
)

_MAX_FLATTEN_STEPS = 1024
_FULL_SWEEP_TOL = 1e-9


def start_point(segment: PathSegment) -> Point:
    if isinstance(segment, PointSegment):
        return segment.at
    if isinstance(segment, SweepArc):
        return _sweep_arc_point(segment, 0.0)
    return segment.start


def end_point(segment: PathSegment) -> Point:
    if isinstance(segment, PointSegment):
        return segment.at
    if isinstance(segment, SweepArc):
        return _sweep_arc_point(segment, segment.sweep_angle)
    return segment.end


def key_points(segment: PathSegment) -> list[Point]:
    if isinstance(segment, PointSegment):
        return [segment.at]
    if isinstance(segment, Line):
        return [segment.start, segment.end]
    if isinstance(segment, Arc):
        return [segment.start, segment.end]
    if isinstance(segment, SweepArc):
        return [segment.center]
    if isinstance(segment, QuadraticCurve):
        return [segment.start, segment.ctrl, segment.end]
    if isinstance(segment, CubicCurve):
        return [segment.start, segment.ctrl1, segment.ctrl2, segment.end]
    raise TypeError(f"Unsupported path segment: {segment!r}")


def map_points(segment: PathSegment, fn: Callable[[Point], Point]) -> PathSegment:
    """Apply `fn` to every key point; radii and angles are left as they are."""
    if isinstance(segment, PointSegment):
        return PointSegment(fn(segment.at))
    if isinstance(segment, Line):
        return Line(fn(segment.start), fn(segment.end))
    if isinstance(segment, Arc):
        return Arc(
            start=fn(segment.start),
            end=fn(segment.end),
            radii=segment.radii,
            x_rotation=segment.x_rotation,
            large_arc=segment.large_arc,
            sweep=segment.sweep,
        )
    if isinstance(segment, SweepArc):
        return SweepArc(
            center=fn(segment.center),
            radii=segment.radii,
            start_angle=segment.start_angle,
            sweep_angle=segment.sweep_angle,
            x_rotation=segment.x_rotation,
        )
    if isinstance(segment, QuadraticCurve):
        return QuadraticCurve(fn(segment.start), fn(segment.ctrl), fn(segment.end))
    if isinstance(segment, CubicCurve):
        return CubicCurve(fn(segment.start), fn(segment.ctrl1), fn(segment.ctrl2), fn(segment.end))
    raise TypeError(f"Unsupported path segment: {segment!r}")


def is_full_sweep(segment: PathSegment) -> bool:
    return isinstance(segment, SweepArc) and abs(segment.sweep_angle) >= math.tau - _FULL_SWEEP_TOL


def to_cubics(segment: Arc | SweepArc) -> list[CubicCurve]:
    """Cubic bezier approximation of an arc, at most 90 degrees per piece."""
    if isinstance(segment, SweepArc):
        return arc_to_cubics(
            segment.center,
            segment.radii,
            segment.x_rotation.radians,
            segment.start_angle.radians,
            segment.sweep_angle,
        )
    if isinstance(segment, Arc):
        if arc_is_straight_line(segment):
            return []
        svg_arc = svg_arc_of(segment)
        count = max(1, int(math.ceil(abs(svg_arc.delta) / 90.0 - 1e-9)))
        return [_from_svg_cubic(c) for c in svg_arc.as_cubic_curves(curves=count)]
    raise TypeError(f"Not an arc: {segment!r}")


def length(segment: PathSegment) -> float:
    if isinstance(segment, PointSegment):
        return 0.0
    if isinstance(segment, Line):
        return distance(segment.start, segment.end)
    if isinstance(segment, QuadraticCurve):
        if _is_degenerate(segment):
            return 0.0
        return float(_to_svg(segment).length())
    if isinstance(segment, CubicCurve):
        if _is_degenerate(segment):
            return 0.0
        return float(_to_svg(segment).length(error=tolerable(segment)))
    if isinstance(segment, (Arc, SweepArc)):
        if isinstance(segment, Arc) and arc_is_straight_line(segment):
            return distance(segment.start, segment.end)
        return sum(length(c) for c in to_cubics(segment))
    raise TypeError(f"Unsupported path segment: {segment!r}")


def tolerable(segment: PathSegment) -> float:
    """Flattening tolerance adapted to the segment's shape, within [EPSILON, 1.0]."""
    if isinstance(segment, (PointSegment, Line)):
        value = 0.0
    elif isinstance(segment, Arc):
        r = min(abs(segment.radii[0]), abs(segment.radii[1]))
        value = r / (r * math.tau) if r > 0.0 else 1.0
    elif isinstance(segment, SweepArc):
        r = min(abs(segment.radii[0]), abs(segment.radii[1]))
        sweep = abs(segment.sweep_angle)
        value = r / (r * sweep) if r > 0.0 and sweep > 0.0 else 1.0
    elif isinstance(segment, QuadraticCurve):
        value = _quadratic_tolerance(segment)
    elif isinstance(segment, CubicCurve):
        inflections = cubic_inflections(segment)
        if inflections:
            before, after = split_cubic(segment, inflections[-1])
            quads = [cubic_to_quadratic(before), cubic_to_quadratic(after)]
        else:
            quads = [cubic_to_quadratic(segment)]
        value = min(_quadratic_tolerance(q) for q in quads)
    else:
        raise TypeError(f"Unsupported path segment: {segment!r}")
    return min(1.0, max(EPSILON, value))


def flattened(segment: PathSegment) -> list[Line]:
    """Polyline approximation within the segment's tolerance."""
    if isinstance(segment, PointSegment):
        return [Line(segment.at, segment.at)]
    if isinstance(segment, Line):
        return [segment]
    if isinstance(segment, (QuadraticCurve, CubicCurve)):
        return _sample(segment, tolerable(segment))
    if isinstance(segment, (Arc, SweepArc)):
        if isinstance(segment, Arc) and arc_is_straight_line(segment):
            return [Line(segment.start, segment.end)]
        tolerance = tolerable(segment)
        lines: list[Line] = []
        for cubic in to_cubics(segment):
            lines.extend(_sample(cubic, tolerance))
        return lines
    raise TypeError(f"Unsupported path segment: {segment!r}")


def bbox(segment: PathSegment) -> Rect:
    points: list[Point] = []
    for ln in flattened(segment):
        points.append(ln.start)
        points.append(ln.end)
    if not points:
        raise GeometryError(f"Segment has no extent: {segment!r}")
    return Rect.from_points(points)


def line_intersection(segment: PathSegment, line: Line) -> list[Point] | None:
    """All points where `segment` crosses `line`, or None."""
    if almost_equal_points(line.start, line.end, eps=EPSILON):
        found = _touches_point(segment, line.start)
        return [line.start] if found else None

    if isinstance(segment, PointSegment):
        if point_segment_distance(segment.at, line.start, line.end) <= EPSILON**2:
            return [segment.at]
        return None
    if isinstance(segment, Line):
        pt = segment_intersection(segment.start, segment.end, line.start, line.end)
        return [pt] if pt is not None else None
    if isinstance(segment, (QuadraticCurve, CubicCurve)):
        return _dedupe(_bezier_line_points(segment, line)) or None
    if isinstance(segment, (Arc, SweepArc)):
        if isinstance(segment, Arc) and arc_is_straight_line(segment):
            return line_intersection(Line(segment.start, segment.end), line)
        found: list[Point] = []
        for cubic in to_cubics(segment):
            found.extend(_bezier_line_points(cubic, line))
        return _dedupe(found) or None
    raise TypeError(f"Unsupported path segment: {segment!r}")


def intersection(segment: PathSegment, other: PathSegment) -> list[Point] | None:
    """Crossings of `segment` with the flattened polyline of `other`."""
    if isinstance(other, Line):
        return line_intersection(segment, other)
    found: list[Point] = []
    for ln in flattened(other):
        hits = line_intersection(segment, ln)
        if hits:
            found.extend(hits)
    return _dedupe(found) or None


def translate(segment: PathSegment, by: Vector) -> PathSegment:
    return map_points(segment, lambda p: translate_point(p, by))


def rotate(segment: PathSegment, angle: Angle, origin: Point = (0.0, 0.0)) -> PathSegment:
    if isinstance(segment, Arc):
        center, radii, start, sweep = arc_center_form(segment)
        return arc_from_center_form(
            rotate_point(center, angle, origin), radii, segment.x_rotation + angle, start, sweep
        )
    if isinstance(segment, SweepArc):
        return SweepArc(
            center=rotate_point(segment.center, angle, origin),
            radii=segment.radii,
            start_angle=segment.start_angle,
            sweep_angle=segment.sweep_angle,
            x_rotation=segment.x_rotation + angle,
        )
    return map_points(segment, lambda p: rotate_point(p, angle, origin))


def scale(segment: PathSegment, factor: float, origin: Point = (0.0, 0.0)) -> PathSegment:
    if factor == 0.0:
        raise GeometryError("Scale factor may not be 0.0")
    # a negative factor is a point reflection, i.e. a half turn of the ellipse
    turn = Angle(math.pi) if factor < 0.0 else Angle(0.0)
    if isinstance(segment, Arc):
        center, radii, start, sweep = arc_center_form(segment)
        return arc_from_center_form(
            scale_point(center, factor, origin),
            (radii[0] * abs(factor), radii[1] * abs(factor)),
            segment.x_rotation + turn,
            start,
            sweep,
        )
    if isinstance(segment, SweepArc):
        return SweepArc(
            center=scale_point(segment.center, factor, origin),
            radii=(segment.radii[0] * abs(factor), segment.radii[1] * abs(factor)),
            start_angle=segment.start_angle,
            sweep_angle=segment.sweep_angle,
            x_rotation=segment.x_rotation + turn,
        )
    return map_points(segment, lambda p: scale_point(p, factor, origin))


def flip_along_x(segment: PathSegment, y_axis: float) -> PathSegment:
    """Mirror across the horizontal line y = y_axis; drawn segments are reversed."""
    return _flip(segment, lambda p: mirror_x(p, y_axis), 0.0)


def flip_along_y(segment: PathSegment, x_axis: float) -> PathSegment:
    """Mirror across the vertical line x = x_axis; drawn segments are reversed."""
    return _flip(segment, lambda p: mirror_y(p, x_axis), math.pi)


def _flip(segment: PathSegment, mirror: Callable[[Point], Point], base: float) -> PathSegment:
    if isinstance(segment, PointSegment):
        return PointSegment(mirror(segment.at))
    if isinstance(segment, Line):
        return Line(mirror(segment.end), mirror(segment.start))
    if isinstance(segment, Arc):
        return Arc(
            start=mirror(segment.end),
            end=mirror(segment.start),
            radii=segment.radii,
            x_rotation=Angle(-segment.x_rotation.radians),
            large_arc=segment.large_arc,
            sweep=segment.sweep,
        )
    if isinstance(segment, SweepArc):
        # the parametric angle a maps to base - a under the mirror
        return SweepArc(
            center=mirror(segment.center),
            radii=segment.radii,
            start_angle=Angle(base - segment.start_angle.radians - segment.sweep_angle),
            sweep_angle=segment.sweep_angle,
            x_rotation=Angle(-segment.x_rotation.radians),
        )
    if isinstance(segment, QuadraticCurve):
        return QuadraticCurve(mirror(segment.end), mirror(segment.ctrl), mirror(segment.start))
    if isinstance(segment, CubicCurve):
        return CubicCurve(
            mirror(segment.end), mirror(segment.ctrl2), mirror(segment.ctrl1), mirror(segment.start)
        )
    raise TypeError(f"Unsupported path segment: {segment!r}")


def cubic_inflections(cubic: CubicCurve) -> list[float]:
    """Parameters in (0, 1) where the curvature of `cubic` changes sign."""
    p0, p1, p2, p3 = cubic.start, cubic.ctrl1, cubic.ctrl2, cubic.end
    a = (p1[0] - p0[0], p1[1] - p0[1])
    b = (p2[0] - 2.0 * p1[0] + p0[0], p2[1] - 2.0 * p1[1] + p0[1])
    c = (
        p3[0] - 3.0 * p2[0] + 3.0 * p1[0] - p0[0],
        p3[1] - 3.0 * p2[1] + 3.0 * p1[1] - p0[1],
    )
    qa = _cross(b, c)
    qb = _cross(a, c)
    qc = _cross(a, b)

    roots: list[float] = []
    if abs(qa) < 1e-12:
        if abs(qb) > 1e-12:
            roots.append(-qc / qb)
    else:
        disc = qb * qb - 4.0 * qa * qc
        if disc >= 0.0:
            sq = math.sqrt(disc)
            roots.extend(sorted(((-qb - sq) / (2.0 * qa), (-qb + sq) / (2.0 * qa))))
    return [t for t in roots if 0.0 < t < 1.0]


def split_cubic(cubic: CubicCurve, t: float) -> tuple[CubicCurve, CubicCurve]:
    first, second = _to_svg(cubic).split(t)
    return _from_svg_cubic(first), _from_svg_cubic(second)


def cubic_to_quadratic(cubic: CubicCurve) -> QuadraticCurve:
    ctrl = (
        (3.0 * cubic.ctrl1[0] - cubic.start[0] + 3.0 * cubic.ctrl2[0] - cubic.end[0]) / 4.0,
        (3.0 * cubic.ctrl1[1] - cubic.start[1] + 3.0 * cubic.ctrl2[1] - cubic.end[1]) / 4.0,
    )
    return QuadraticCurve(cubic.start, ctrl, cubic.end)


def _quadratic_tolerance(quad: QuadraticCurve) -> float:
    shortest = min(
        distance(quad.start, quad.ctrl),
        distance(quad.start, quad.end),
        distance(quad.ctrl, quad.end),
    )
    total = length(quad)
    if total <= 0.0:
        return 1.0
    return shortest / total


def _sweep_arc_point(arc: SweepArc, angle: float) -> Point:
    a = arc.start_angle.radians + angle
    ux = arc.radii[0] * math.cos(a)
    uy = arc.radii[1] * math.sin(a)
    cos_r = arc.x_rotation.cos()
    sin_r = arc.x_rotation.sin()
    return (arc.center[0] + ux * cos_r - uy * sin_r, arc.center[1] + ux * sin_r + uy * cos_r)


def _sample(segment: QuadraticCurve | CubicCurve, tolerance: float) -> list[Line]:
    if _is_degenerate(segment):
        return [Line(segment.start, segment.end)]
    svg = _to_svg(segment)
    seg_len = float(svg.length(error=tolerance)) if isinstance(segment, CubicCurve) else length(segment)
    steps = min(_MAX_FLATTEN_STEPS, max(1, int(math.ceil(seg_len / tolerance))))
    points = [segment.start]
    for i in range(1, steps):
        p = svg.point(i / steps)
        points.append((float(p.real), float(p.imag)))
    points.append(segment.end)
    return [Line(a, b) for a, b in zip(points, points[1:])]


def _bezier_line_points(segment: QuadraticCurve | CubicCurve, line: Line) -> list[Point]:
    if _is_degenerate(segment):
        pt = segment_intersection(segment.start, segment.end, line.start, line.end)
        return [pt] if pt is not None else []
    svg = _to_svg(segment)
    svg_line = _SvgLine(complex(*line.start), complex(*line.end))
    points: list[Point] = []
    for t_self, _t_line in svg.intersect(svg_line):
        p = svg.point(t_self)
        points.append((float(p.real), float(p.imag)))
    return points


def _touches_point(segment: PathSegment, point: Point) -> bool:
    return any(
        point_segment_distance(point, ln.start, ln.end) <= 1e-9 for ln in flattened(segment)
    )


def _dedupe(points: list[Point]) -> list[Point]:
    unique: list[Point] = []
    for p in points:
        if not any(almost_equal_points(p, q) for q in unique):
            unique.append(p)
    return unique


def _is_degenerate(segment: QuadraticCurve | CubicCurve) -> bool:
    pts = key_points(segment)
    return all(almost_equal_points(pts[0], p, eps=EPSILON) for p in pts[1:])


def _cross(a: Vector, b: Vector) -> float:
    return a[0] * b[1] - a[1] * b[0]


def _to_svg(segment: QuadraticCurve | CubicCurve):
    if isinstance(segment, QuadraticCurve):
        return _SvgQuadratic(complex(*segment.start), complex(*segment.ctrl), complex(*segment.end))
    return _SvgCubic(
        complex(*segment.start),
        complex(*segment.ctrl1),
        complex(*segment.ctrl2),
        complex(*segment.end),
    )


def _from_svg_cubic(svg: _SvgCubic) -> CubicCurve:
    return CubicCurve(
        (float(svg.start.real), float(svg.start.imag)),
        (float(svg.control1.real), float(svg.control1.imag)),
        (float(svg.control2.real), float(svg.control2.imag)),
        (float(svg.end.real), float(svg.end.imag)),
    )
