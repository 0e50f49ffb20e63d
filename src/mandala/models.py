from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TypeAlias

Point: TypeAlias = tuple[float, float]
Vector: TypeAlias = tuple[float, float]
Size: TypeAlias = tuple[float, float]


@dataclass(frozen=True, slots=True)
class Angle:
    """Angle in radians, always wrapped to [0, 2π)."""

    radians: float = 0.0

    def __post_init__(self) -> None:
        wrapped = math.fmod(float(self.radians), math.tau)
        if wrapped < 0.0:
            wrapped += math.tau
        if wrapped >= math.tau:
            wrapped = 0.0
        object.__setattr__(self, "radians", wrapped)

    @classmethod
    def from_degrees(cls, degrees: float) -> Angle:
        return cls(math.radians(degrees))

    @property
    def degrees(self) -> float:
        return math.degrees(self.radians)

    def cos(self) -> float:
        return math.cos(self.radians)

    def sin(self) -> float:
        return math.sin(self.radians)

    def __add__(self, other: Angle) -> Angle:
        return Angle(self.radians + other.radians)

    def __sub__(self, other: Angle) -> Angle:
        return Angle(self.radians - other.radians)

    def __mul__(self, factor: float) -> Angle:
        return Angle(self.radians * factor)

    def __truediv__(self, other: float | Angle) -> Angle | float:
        if isinstance(other, Angle):
            return self.radians / other.radians
        return Angle(self.radians / other)


@dataclass(frozen=True, slots=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @classmethod
    def from_size(cls, size: Size) -> Rect:
        return cls(0.0, 0.0, size[0], size[1])

    @classmethod
    def from_center(cls, center: Point, size: Size) -> Rect:
        return cls(center[0] - size[0] / 2.0, center[1] - size[1] / 2.0, size[0], size[1])

    @classmethod
    def from_points(cls, points: list[Point]) -> Rect:
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        return cls(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))

    @property
    def min_x(self) -> float:
        return self.x

    @property
    def max_x(self) -> float:
        return self.x + self.width

    @property
    def min_y(self) -> float:
        return self.y

    @property
    def max_y(self) -> float:
        return self.y + self.height

    @property
    def origin(self) -> Point:
        return (self.x, self.y)

    @property
    def size(self) -> Size:
        return (self.width, self.height)

    @property
    def center(self) -> Point:
        return (self.x + self.width / 2.0, self.y + self.height / 2.0)

    def area(self) -> float:
        return self.width * self.height

    def contains(self, point: Point) -> bool:
        return self.min_x <= point[0] <= self.max_x and self.min_y <= point[1] <= self.max_y

    def translate(self, by: Vector) -> Rect:
        return Rect(self.x + by[0], self.y + by[1], self.width, self.height)

    def scale(self, factor: float) -> Rect:
        return Rect(self.x * factor, self.y * factor, self.width * factor, self.height * factor)

    def inner_rect(
        self, top: float = 0.0, right: float = 0.0, bottom: float = 0.0, left: float = 0.0
    ) -> Rect:
        return Rect(
            self.x + left,
            self.y + top,
            max(0.0, self.width - left - right),
            max(0.0, self.height - top - bottom),
        )


@dataclass(frozen=True, slots=True)
class PointSegment:
    """Bare point; starts a new disconnected sub-path (move-to)."""

    at: Point


@dataclass(frozen=True, slots=True)
class Line:
    start: Point
    end: Point


@dataclass(frozen=True, slots=True)
class Arc:
    """SVG style elliptical arc between two endpoints."""

    start: Point
    end: Point
    radii: Vector
    x_rotation: Angle = Angle()
    large_arc: bool = False
    sweep: bool = False


@dataclass(frozen=True, slots=True)
class SweepArc:
    """Elliptical arc given by its center, start angle and signed sweep (radians)."""

    center: Point
    radii: Vector
    start_angle: Angle
    sweep_angle: float
    x_rotation: Angle = Angle()


@dataclass(frozen=True, slots=True)
class QuadraticCurve:
    start: Point
    ctrl: Point
    end: Point


@dataclass(frozen=True, slots=True)
class CubicCurve:
    start: Point
    ctrl1: Point
    ctrl2: Point
    end: Point


PathSegment: TypeAlias = PointSegment | Line | Arc | SweepArc | QuadraticCurve | CubicCurve
