from __future__ import annotations

import copy
import math
import uuid
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, TypeAlias

from .geometry import EPSILON, GeometryError, scale_point, translate_point
from .models import Angle, Point, Rect, Vector
from .path import Path

if TYPE_CHECKING:
    from .mandala import Mandala


@dataclass(slots=True)
class PathsDrawing:
    """Paths in the segment's local (c, r) coordinates."""

    paths: list[Path] = field(default_factory=list)


@dataclass(slots=True)
class MandalaDrawing:
    """A nested mandala fitted into `placement`, a box in local (c, r) coordinates."""

    mandala: Mandala
    placement: Rect


SegmentDrawing: TypeAlias = PathsDrawing | MandalaDrawing


@dataclass(frozen=True, slots=True)
class MandalaSegment:
    """One radial patch around `center`.

    Local coordinates: ``c`` runs from 0 at `angle_base` to `normalized` at
    ``angle_base + sweep``; ``r`` runs from 0 at the inner edge
    (``r_base - breadth``) to `normalized` at the outer edge (`r_base`).
    """

    breadth: float
    r_base: float
    angle_base: Angle
    sweep: float
    center: Point
    normalized: float = 100.0
    drawing: list[SegmentDrawing] = field(default_factory=list)
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def __post_init__(self) -> None:
        if not isinstance(self.angle_base, Angle):
            object.__setattr__(self, "angle_base", Angle(self.angle_base))
        if self.r_base <= 0.0:
            raise GeometryError(f"r_base must be positive, got {self.r_base}")
        if not 0.0 < self.breadth <= self.r_base:
            raise GeometryError(
                f"breadth must be in (0, r_base={self.r_base}], got {self.breadth}"
            )
        if self.normalized <= 0.0:
            raise GeometryError(f"normalized must be positive, got {self.normalized}")
        if self.sweep == 0.0:
            raise GeometryError("sweep may not be 0")

    @property
    def inner_radius(self) -> float:
        return self.r_base - self.breadth

    def to_global(self, c: float, r: float) -> Point:
        radius = r / self.normalized * self.breadth + self.inner_radius
        theta = self.angle_base.radians + (c / self.normalized) * self.sweep
        return (self.center[0] + radius * math.cos(theta), self.center[1] + radius * math.sin(theta))

    def to_local(self, x: float, y: float) -> Point:
        dx = x - self.center[0]
        dy = y - self.center[1]
        radius = math.hypot(dx, dy)
        # measure the angle within half a turn of the patch middle
        half = self.sweep / 2.0
        offset = math.atan2(dy, dx) - self.angle_base.radians - half
        offset = (offset + math.pi) % math.tau - math.pi
        c = (offset + half) / self.sweep * self.normalized
        r = (radius - self.inner_radius) / self.breadth * self.normalized
        return (c, r)

    def to_angle(self, x: float, y: float) -> Angle:
        return Angle(math.atan2(y - self.center[1], x - self.center[0]))

    def draw(self, drawing: SegmentDrawing) -> None:
        self.drawing.append(drawing)

    def render(self) -> list[Path]:
        paths: list[Path] = []
        for item in self.drawing:
            if isinstance(item, PathsDrawing):
                for path in item.paths:
                    paths.append(path.map_points(lambda p: self.to_global(p[0], p[1])))
            elif isinstance(item, MandalaDrawing):
                paths.extend(self._render_nested(item))
            else:
                raise TypeError(f"Unsupported segment drawing: {item!r}")
        return paths

    def _render_nested(self, item: MandalaDrawing) -> list[Path]:
        box = item.placement
        corners = [
            self.to_global(box.min_x, box.min_y),
            self.to_global(box.max_x, box.min_y),
            self.to_global(box.max_x, box.max_y),
            self.to_global(box.min_x, box.max_y),
        ]
        target = Rect.from_points(corners)
        bounds = item.mandala.bounds
        if bounds.width <= 0.0 or bounds.height <= 0.0:
            raise GeometryError(f"Nested mandala has empty bounds {bounds}")
        factor = min(target.width / bounds.width, target.height / bounds.height)
        shift = (-bounds.center[0], -bounds.center[1])

        placed: list[Path] = []
        for path in item.mandala.render():
            if path.length() < EPSILON**2:
                continue
            placed.append(path.translate(shift).scale(factor).translate(target.center))
        return placed

    def replicate(self, angle: Angle, id: uuid.UUID | None = None) -> ReplicaSegment:
        return ReplicaSegment(
            replica_id=self.id, angle_base=angle, id=id if id is not None else uuid.uuid4()
        )

    def translate(self, by: Vector) -> MandalaSegment:
        return replace(
            self, center=translate_point(self.center, by), drawing=copy.deepcopy(self.drawing)
        )

    def scale(self, factor: float, origin: Point = (0.0, 0.0)) -> MandalaSegment:
        if factor <= 0.0:
            raise GeometryError(f"Scale factor must be positive, got {factor}")
        return replace(
            self,
            center=scale_point(self.center, factor, origin),
            r_base=self.r_base * factor,
            breadth=self.breadth * factor,
            drawing=copy.deepcopy(self.drawing),
        )


@dataclass(frozen=True, slots=True)
class ReplicaSegment:
    """Reference to a `MandalaSegment` of the same epoch, drawn at another angle."""

    replica_id: uuid.UUID
    angle_base: Angle
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def __post_init__(self) -> None:
        if not isinstance(self.angle_base, Angle):
            object.__setattr__(self, "angle_base", Angle(self.angle_base))

    def render(self, original: MandalaSegment) -> list[Path]:
        turn = self.angle_base - original.angle_base
        return [path.rotate(turn, original.center) for path in original.render()]
