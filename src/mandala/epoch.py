from __future__ import annotations

import logging
import math
import uuid
from dataclasses import dataclass, field, replace
from typing import Callable, TypeAlias

from .geometry import GeometryError, scale_point, translate_point
from .models import Angle, Point, Size, Vector
from .path import Path
from .segment import MandalaSegment, ReplicaSegment

logger = logging.getLogger(__name__)

_FILL_EPS = 1e-9

DrawFn: TypeAlias = Callable[[Angle, float, Point], MandalaSegment]


class ReplicaNotFoundError(LookupError):
    """Raised when a replica's original is not a segment of the same epoch."""


@dataclass(slots=True)
class CircleLayout:
    radius: float


@dataclass(slots=True)
class EllipseLayout:
    radii: Size


@dataclass(slots=True)
class PolygonLayout:
    n_sides: int
    radius: float


@dataclass(slots=True)
class RectangleLayout:
    rect: Size


EpochLayout: TypeAlias = CircleLayout | EllipseLayout | PolygonLayout | RectangleLayout
EpochSegment: TypeAlias = MandalaSegment | ReplicaSegment


def layout_radius(layout: EpochLayout) -> float:
    """Outer radius of the layout shape; rectangles use their inscribed circle."""
    if isinstance(layout, CircleLayout):
        return layout.radius
    if isinstance(layout, EllipseLayout):
        return max(layout.radii)
    if isinstance(layout, PolygonLayout):
        return layout.radius
    if isinstance(layout, RectangleLayout):
        return min(layout.rect) / 2.0
    raise TypeError(f"Unsupported epoch layout: {layout!r}")


def scale_layout(layout: EpochLayout, factor: float) -> EpochLayout:
    if isinstance(layout, CircleLayout):
        return CircleLayout(layout.radius * factor)
    if isinstance(layout, EllipseLayout):
        return EllipseLayout((layout.radii[0] * factor, layout.radii[1] * factor))
    if isinstance(layout, PolygonLayout):
        return PolygonLayout(layout.n_sides, layout.radius * factor)
    if isinstance(layout, RectangleLayout):
        return RectangleLayout((layout.rect[0] * factor, layout.rect[1] * factor))
    raise TypeError(f"Unsupported epoch layout: {layout!r}")


@dataclass(slots=True)
class Epoch:
    """One ring of segments placed around `center`.

    The angular state (where the next segment starts, how much of the full
    turn is left) is derived from `segments` on every call.
    """

    center: Point
    layout: EpochLayout
    segments: list[EpochSegment] = field(default_factory=list)
    outline: bool = False
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def resolve(self, replica: ReplicaSegment) -> MandalaSegment:
        for s in self.segments:
            if isinstance(s, MandalaSegment) and s.id == replica.replica_id:
                return s
        raise ReplicaNotFoundError(
            f"Replica {replica.id} refers to {replica.replica_id}, which is not in epoch {self.id}"
        )

    def _placement(self, s: EpochSegment) -> tuple[Angle, float]:
        if isinstance(s, MandalaSegment):
            return s.angle_base, s.sweep
        return s.angle_base, self.resolve(s).sweep

    def start_angle(self) -> Angle:
        total = Angle()
        for s in self.segments:
            base, sweep = self._placement(s)
            total = total + base + Angle(sweep)
        return total

    def max_sweep(self) -> float:
        return math.tau - sum(self._placement(s)[1] for s in self.segments)

    def inner_radius(self) -> float:
        radii = [s.inner_radius for s in self.segments if isinstance(s, MandalaSegment)]
        if not radii:
            return layout_radius(self.layout)
        return min(radii)

    def draw_segment(self, f: DrawFn) -> MandalaSegment:
        segment = f(self.start_angle(), self.max_sweep(), self.center)
        return self._append(segment)

    def draw_fill(self, f: DrawFn) -> MandalaSegment:
        """Draw one segment and repeat it by replicas until the turn is full."""
        segment = self.draw_segment(f)
        count = int(math.floor(self.max_sweep() / abs(segment.sweep) + _FILL_EPS))
        for k in range(1, count + 1):
            self.segments.append(segment.replicate(segment.angle_base + Angle(segment.sweep * k)))
        logger.debug("Epoch %s: filled with %d replicas of %s", self.id, count, segment.id)
        return segment

    def draw_range(self, f: DrawFn, steps: range) -> list[MandalaSegment]:
        n = len(steps)
        if n == 0:
            return []
        remaining = self.max_sweep()
        share = remaining / n
        start = self.start_angle()
        drawn: list[MandalaSegment] = []
        for _ in steps:
            segment = self._append(f(start, min(share, remaining), self.center))
            remaining -= segment.sweep
            start = start + Angle(segment.sweep)
            drawn.append(segment)
        return drawn

    def _append(self, segment: MandalaSegment) -> MandalaSegment:
        if not isinstance(segment, MandalaSegment):
            raise TypeError(f"Draw callback must return a MandalaSegment, got {segment!r}")
        self.segments.append(segment)
        logger.debug(
            "Epoch %s: placed segment %s at %.6f rad, sweep %.6f",
            self.id,
            segment.id,
            segment.angle_base.radians,
            segment.sweep,
        )
        return segment

    def outline_path(self) -> Path:
        layout = self.layout
        if isinstance(layout, CircleLayout):
            return Path.circle(self.center, layout.radius)
        if isinstance(layout, EllipseLayout):
            return Path.ellipse(self.center, layout.radii[0], layout.radii[1])
        if isinstance(layout, PolygonLayout):
            return Path.polygon(self.center, layout.radius, layout.n_sides)
        if isinstance(layout, RectangleLayout):
            return Path.rect(self.center, layout.rect)
        raise TypeError(f"Unsupported epoch layout: {layout!r}")

    def render(self) -> list[Path]:
        originals = {s.id: s for s in self.segments if isinstance(s, MandalaSegment)}
        paths: list[Path] = []
        for s in self.segments:
            if isinstance(s, MandalaSegment):
                paths.extend(s.render())
                continue
            original = originals.get(s.replica_id)
            if original is None:
                raise ReplicaNotFoundError(
                    f"Replica {s.id} refers to {s.replica_id}, which is not in epoch {self.id}"
                )
            paths.extend(s.render(original))
        if self.outline:
            paths.append(self.outline_path())
        return paths

    def translate(self, by: Vector) -> Epoch:
        return replace(
            self,
            center=translate_point(self.center, by),
            segments=[s.translate(by) if isinstance(s, MandalaSegment) else s for s in self.segments],
        )

    def scale(self, factor: float, origin: Point = (0.0, 0.0)) -> Epoch:
        if factor <= 0.0:
            raise GeometryError(f"Scale factor must be positive, got {factor}")
        return replace(
            self,
            center=scale_point(self.center, factor, origin),
            layout=scale_layout(self.layout, factor),
            segments=[
                s.scale(factor, origin) if isinstance(s, MandalaSegment) else s for s in self.segments
            ],
        )
