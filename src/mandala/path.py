from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Callable

from . import segments as seg
from .geometry import GeometryError, almost_equal_points, rotate_point
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
    Size,
    SweepArc,
    Vector,
)


class ContinuityError(GeometryError):
    """Raised when a segment does not start where the path currently ends."""


@dataclass(slots=True)
class Path:
    """Ordered, front-to-back continuous sequence of segments.

    A ``PointSegment`` starts a new disconnected sub-path; every other segment
    must start where the previous one ended.
    """

    segments: list[PathSegment] = field(default_factory=list)

    def __post_init__(self) -> None:
        pending = list(self.segments)
        self.segments = []
        for s in pending:
            self.push(s)

    @classmethod
    def new(cls, first: PathSegment) -> Path:
        return cls([first])

    @classmethod
    def _unchecked(cls, segments: list[PathSegment]) -> Path:
        path = cls()
        path.segments = list(segments)
        return path

    # -- construction -----------------------------------------------------

    def push(self, segment: PathSegment) -> None:
        if self.segments and not isinstance(segment, PointSegment):
            last_end = seg.end_point(self.segments[-1])
            next_start = seg.start_point(segment)
            if not almost_equal_points(last_end, next_start):
                raise ContinuityError(
                    f"Segment starts at {next_start} but the path ends at {last_end}"
                )
        self.segments.append(segment)

    def draw_next(self, fn: Callable[[PathSegment], PathSegment]) -> None:
        if not self.segments:
            raise GeometryError("Cannot draw from an empty path")
        self.push(fn(self.segments[-1]))

    def move_to(self, point: Point) -> None:
        self.segments.append(PointSegment(point))

    def line_to(self, point: Point) -> None:
        self.push(Line(self.end, point))

    def quadratic_to(self, ctrl: Point, end: Point) -> None:
        self.push(QuadraticCurve(self.end, ctrl, end))

    def cubic_to(self, ctrl1: Point, ctrl2: Point, end: Point) -> None:
        self.push(CubicCurve(self.end, ctrl1, ctrl2, end))

    def arc_to(
        self,
        end: Point,
        radii: Vector,
        x_rotation: Angle = Angle(),
        large_arc: bool = False,
        sweep: bool = False,
    ) -> None:
        self.push(Arc(self.end, end, radii, x_rotation, large_arc, sweep))

    # -- shapes -----------------------------------------------------------

    @classmethod
    def rect(cls, center: Point, size: Size) -> Path:
        r = Rect.from_center(center, size)
        corners = [(r.min_x, r.min_y), (r.max_x, r.min_y), (r.max_x, r.max_y), (r.min_x, r.max_y)]
        return cls([Line(a, b) for a, b in zip(corners, corners[1:] + corners[:1])])

    @classmethod
    def circle(cls, center: Point, radius: float) -> Path:
        return cls.ellipse(center, radius, radius)

    @classmethod
    def ellipse(cls, center: Point, rx: float, ry: float) -> Path:
        if rx <= 0.0 or ry <= 0.0:
            raise GeometryError(f"Ellipse radii must be positive, got ({rx}, {ry})")
        return cls([SweepArc(center, (rx, ry), Angle(), math.tau)])

    @classmethod
    def polygon(
        cls, center: Point, radius: float, n_sides: int, start_angle: Angle = Angle()
    ) -> Path:
        if n_sides < 3:
            raise GeometryError(f"A polygon needs at least 3 sides, got {n_sides}")
        if radius <= 0.0:
            raise GeometryError(f"Polygon radius must be positive, got {radius}")
        first = (center[0] + radius, center[1])
        vertices = [
            rotate_point(first, start_angle + Angle(math.tau * i / n_sides), center)
            for i in range(n_sides)
        ]
        return cls([Line(a, b) for a, b in zip(vertices, vertices[1:] + vertices[:1])])

    # -- queries ----------------------------------------------------------

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self):
        return iter(self.segments)

    @property
    def start(self) -> Point:
        if not self.segments:
            raise GeometryError("Empty path has no start")
        return seg.start_point(self.segments[0])

    @property
    def end(self) -> Point:
        if not self.segments:
            raise GeometryError("Empty path has no end")
        return seg.end_point(self.segments[-1])

    def is_closed(self) -> bool:
        if len(self.segments) == 1:
            return seg.is_full_sweep(self.segments[0])
        if len(self.segments) < 2:
            return False
        return almost_equal_points(self.end, self.start)

    def length(self) -> float:
        return sum(seg.length(s) for s in self.segments)

    def flattened(self) -> list[Line]:
        lines: list[Line] = []
        for s in self.segments:
            lines.extend(seg.flattened(s))
        return lines

    def key_points(self) -> list[Point]:
        points: list[Point] = []
        for s in self.segments:
            points.extend(seg.key_points(s))
        return points

    def bbox(self) -> Rect:
        points: list[Point] = []
        for ln in self.flattened():
            points.append(ln.start)
            points.append(ln.end)
        if not points:
            raise GeometryError("Empty path has no bounding box")
        return Rect.from_points(points)

    def line_intersections(self, line: Line) -> list[Point] | None:
        found: list[Point] = []
        for s in self.segments:
            hits = seg.line_intersection(s, line)
            if hits:
                found.extend(hits)
        return found or None

    def intersections(self, other: Path) -> list[Point] | None:
        found: list[Point] = []
        for ln in other.flattened():
            hits = self.line_intersections(ln)
            if hits:
                found.extend(p for p in hits if not any(almost_equal_points(p, q) for q in found))
        return found or None

    # -- transforms -------------------------------------------------------

    def map_points(self, fn: Callable[[Point], Point]) -> Path:
        """Apply `fn` to every key point. Non-rigid maps may break continuity."""
        return Path._unchecked([seg.map_points(s, fn) for s in self.segments])

    def translate(self, by: Vector) -> Path:
        return Path._unchecked([seg.translate(s, by) for s in self.segments])

    def rotate(self, angle: Angle, origin: Point = (0.0, 0.0)) -> Path:
        return Path._unchecked([seg.rotate(s, angle, origin) for s in self.segments])

    def scale(self, factor: float, origin: Point = (0.0, 0.0)) -> Path:
        return Path._unchecked([seg.scale(s, factor, origin) for s in self.segments])

    def flip_along_x(self, y_axis: float) -> Path:
        return self._flipped(lambda s: seg.flip_along_x(s, y_axis))

    def flip_along_y(self, x_axis: float) -> Path:
        return self._flipped(lambda s: seg.flip_along_y(s, x_axis))

    def _flipped(self, flip: Callable[[PathSegment], PathSegment]) -> Path:
        # flipping reverses each sub-path so that it stays continuous
        out: list[PathSegment] = []
        for marker, body in self._subpaths():
            reversed_body = [flip(s) for s in reversed(body)]
            if marker is not None:
                at = seg.start_point(reversed_body[0]) if reversed_body else flip(marker).at
                out.append(PointSegment(at))
            out.extend(reversed_body)
        return Path._unchecked(out)

    def _subpaths(self) -> list[tuple[PointSegment | None, list[PathSegment]]]:
        groups: list[tuple[PointSegment | None, list[PathSegment]]] = []
        for s in self.segments:
            if isinstance(s, PointSegment):
                groups.append((s, []))
            elif not groups:
                groups.append((None, [s]))
            else:
                groups[-1][1].append(s)
        return groups

    # -- output -----------------------------------------------------------

    def to_svg_path_d(self) -> str:
        if not self.segments:
            return ""
        # a leading PointSegment already writes its own M
        tokens: list[str] = []
        if not isinstance(self.segments[0], PointSegment):
            tokens = ["M", _fmt_point(self.start)]
        for s in self.segments:
            tokens.extend(_svg_command(s))
        if self.is_closed():
            tokens.append("Z")
        return " ".join(tokens)


def _svg_command(s: PathSegment) -> list[str]:
    if isinstance(s, PointSegment):
        return ["M", _fmt_point(s.at)]
    if isinstance(s, Line):
        return ["L", _fmt_point(s.end)]
    if isinstance(s, QuadraticCurve):
        return ["Q", _fmt_point(s.ctrl), _fmt_point(s.end)]
    if isinstance(s, CubicCurve):
        return ["C", _fmt_point(s.ctrl1), _fmt_point(s.ctrl2), _fmt_point(s.end)]
    if isinstance(s, Arc):
        return [
            "A",
            _fmt_point(s.radii),
            format_number(s.x_rotation.degrees),
            f"{int(s.large_arc)},{int(s.sweep)}",
            _fmt_point(s.end),
        ]
    if isinstance(s, SweepArc):
        if seg.is_full_sweep(s):
            # a 360 degree A command is degenerate in SVG
            tokens: list[str] = []
            for cubic in seg.to_cubics(s):
                tokens.extend(_svg_command(cubic))
            return tokens
        return [
            "A",
            _fmt_point(s.radii),
            format_number(s.x_rotation.degrees),
            f"{int(abs(s.sweep_angle) > math.pi)},{int(s.sweep_angle > 0.0)}",
            _fmt_point(seg.end_point(s)),
        ]
    raise TypeError(f"Unsupported path segment: {s!r}")


def format_number(value: float) -> str:
    text = repr(float(value))
    if text.endswith(".0"):
        text = text[:-2]
    return "0" if text == "-0" else text


def _fmt_point(p: Point) -> str:
    return f"{format_number(p[0])},{format_number(p[1])}"
