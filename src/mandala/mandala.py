from __future__ import annotations

import logging
import math
import random
import uuid
from typing import Callable

from .config import GenerationConfig
from .epoch import CircleLayout, Epoch
from .geometry import GeometryError, distance, rand_pt_in_bounds, scale_point, translate_point
from .models import Angle, Line, Point, Rect, Size, Vector
from .path import Path
from .segment import MandalaSegment, PathsDrawing

logger = logging.getLogger(__name__)


class Mandala:
    """Ordered list of epochs forming one drawing.

    The first epoch is always a zero-segment boundary circle filling the
    bounds. All randomness, including generated ids, comes from the owned RNG
    so a seeded mandala replays identically.
    """

    def __init__(
        self, size: Size, seed: int | None = None, config: GenerationConfig | None = None
    ) -> None:
        if size[0] <= 0.0 or size[1] <= 0.0:
            raise GeometryError(f"Mandala size must be positive, got {size}")
        self.bounds = Rect.from_size(size)
        self.config = config if config is not None else GenerationConfig()
        self.rng = random.Random(seed)
        self.displacements: set[Point] = set()
        self.epochs: list[Epoch] = [
            Epoch(
                center=self.bounds.center,
                layout=CircleLayout(min(size) / 2.0),
                outline=True,
                id=self._new_id(),
            )
        ]
        self._cache: list[Path] | None = None

    def _new_id(self) -> uuid.UUID:
        return uuid.UUID(int=self.rng.getrandbits(128), version=4)

    def draw_epoch(self, f: Callable[[Epoch, random.Random], Epoch]) -> Epoch:
        epoch = f(self.epochs[-1], self.rng)
        if not isinstance(epoch, Epoch):
            raise TypeError(f"Draw callback must return an Epoch, got {epoch!r}")
        self.epochs.append(epoch)
        for path in epoch.render():
            self.displacements.update(path.key_points())
        self._cache = None
        return epoch

    def render(self) -> list[Path]:
        """All epoch paths in order. Callers get copies; the cache stays intact."""
        if self._cache is None:
            self._cache = [path for epoch in self.epochs for path in epoch.render()]
        return [Path._unchecked(path.segments) for path in self._cache]

    def space_next(self) -> Rect:
        last = self.epochs[-1]
        r = last.inner_radius()
        return Rect.from_center(last.center, (2.0 * r, 2.0 * r))

    def propose_epoch_displacements(self) -> set[Point]:
        return self.displacements - {epoch.center for epoch in self.epochs}

    def free_room(self, at: Point) -> float:
        """Distance from `at` to the nearest bounds edge or epoch center."""
        b = self.bounds
        room = min(at[0] - b.min_x, b.max_x - at[0], at[1] - b.min_y, b.max_y - at[1])
        for epoch in self.epochs:
            room = min(room, distance(at, epoch.center))
        return max(0.0, room)

    def generate_epoch(self) -> Epoch:
        """Grow the mandala by one epoch holding a single random segment."""
        cfg = self.config
        last = self.epochs[-1]
        space = self.space_next()

        if space.area() > min(self.bounds.size) / 2.0:
            center = last.center
            radius = last.inner_radius()
        else:
            proposals = sorted(self.propose_epoch_displacements())
            if proposals:
                center = self.rng.choice(proposals)
            else:
                center = rand_pt_in_bounds(self.rng, self.bounds)
            half_size = min(self.bounds.size) / 2.0
            floor = cfg.min_room * 2.0 * half_size
            room = self.free_room(center)
            if room < floor:
                radius = self.rng.uniform(floor, half_size)
            else:
                radius = self.rng.uniform(room / 2.0, room)

        n_segments = self.rng.choice(cfg.primes)
        divisor = self.rng.choice(cfg.primes)
        epoch_id = self._new_id()
        segment_id = self._new_id()
        walk = self._random_walk()

        def draw_segment(start: Angle, max_sweep: float, at: Point) -> MandalaSegment:
            return MandalaSegment(
                breadth=radius / divisor,
                r_base=radius,
                angle_base=start,
                sweep=math.tau / n_segments,
                center=at,
                normalized=cfg.normalized,
                drawing=[PathsDrawing([walk])],
                id=segment_id,
            )

        def draw(_last: Epoch, _rng: random.Random) -> Epoch:
            epoch = Epoch(center=center, layout=CircleLayout(radius), outline=cfg.outline, id=epoch_id)
            epoch.draw_segment(draw_segment)
            return epoch

        epoch = self.draw_epoch(draw)
        logger.debug(
            "Generated epoch %d at (%.3f, %.3f), radius %.3f, 1/%d turn, breadth 1/%d",
            len(self.epochs) - 1,
            center[0],
            center[1],
            radius,
            n_segments,
            divisor,
        )
        return epoch

    def _random_walk(self) -> Path:
        cfg = self.config
        n = cfg.normalized
        symmetric = self.rng.random() < cfg.symmetry_probability
        span = n / 2.0 if symmetric else n
        step = span / (cfg.detail - 1)

        r = self.rng.uniform(0.0, n)
        points: list[Point] = []
        for i in range(cfg.detail):
            points.append((step * i, r))
            r = min(n, max(0.0, r + self.rng.uniform(-n / 4.0, n / 4.0)))
        if symmetric:
            points.extend((n - c, v) for c, v in reversed(points[:-1]))
        return Path([Line(a, b) for a, b in zip(points, points[1:])])

    def resize(self, new_size: Size) -> None:
        """Scale uniformly about the center to fit `new_size`."""
        if new_size[0] <= 0.0 or new_size[1] <= 0.0:
            raise GeometryError(f"Mandala size must be positive, got {new_size}")
        old_center = self.bounds.center
        factor = min(new_size[0] / self.bounds.width, new_size[1] / self.bounds.height)
        self.bounds = Rect(self.bounds.x, self.bounds.y, new_size[0], new_size[1])
        shift = (self.bounds.center[0] - old_center[0], self.bounds.center[1] - old_center[1])

        self.epochs = [e.scale(factor, old_center).translate(shift) for e in self.epochs]
        self.displacements = {
            translate_point(scale_point(p, factor, old_center), shift) for p in self.displacements
        }
        self._rebuild()

    def translate(self, by: Vector) -> None:
        self.bounds = self.bounds.translate(by)
        self.epochs = [e.translate(by) for e in self.epochs]
        self.displacements = {translate_point(p, by) for p in self.displacements}
        self._rebuild()

    def _rebuild(self) -> None:
        self._cache = None
        self.render()
