"""Tiling generator: fills a rectangle with transformed copies of a shape."""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, TypeAlias

from .geometry import GeometryError
from .models import Angle, Rect, Size
from .path import Path

Renderer: TypeAlias = Callable[[random.Random, Size], Path]


def _add(a: Any, b: Any) -> Any:
    if isinstance(a, tuple):
        return tuple(x + y for x, y in zip(a, b))
    return a + b


@dataclass(frozen=True, slots=True)
class Static:
    value: Any

    def value_at(self, i: int, rng: random.Random | None = None) -> Any:
        return self.value


@dataclass(frozen=True, slots=True)
class Incremental:
    """``init`` plus ``i`` times ``increment``."""

    init: Any
    increment: Any

    def value_at(self, i: int, rng: random.Random | None = None) -> Any:
        value = self.init
        for _ in range(i):
            value = _add(value, self.increment)
        return value


@dataclass(frozen=True, slots=True)
class Varying:
    """Cycles through `values`, starting over once they run out."""

    values: tuple[Any, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))
        if not self.values:
            raise ValueError("Varying needs at least one value")

    def value_at(self, i: int, rng: random.Random | None = None) -> Any:
        return self.values[i % len(self.values)]


@dataclass(frozen=True, slots=True)
class Rand:
    """Uniform pick from `values` on every step."""

    values: tuple[Any, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))
        if not self.values:
            raise ValueError("Rand needs at least one value")

    def value_at(self, i: int, rng: random.Random | None = None) -> Any:
        if rng is None:
            raise ValueError("Rand fill values need a random source")
        return rng.choice(self.values)


FillValue: TypeAlias = Static | Incremental | Varying | Rand


@dataclass(frozen=True, slots=True)
class Scale:
    value: FillValue


@dataclass(frozen=True, slots=True)
class Rotate:
    value: FillValue


@dataclass(frozen=True, slots=True)
class Translate:
    value: FillValue


Transform: TypeAlias = Scale | Rotate | Translate

_TRANSFORM_ORDER = {Scale: 0, Rotate: 1, Translate: 2}


def _positive(name: str, value: float) -> None:
    if value <= 0.0:
        raise GeometryError(f"{name} must be positive, got {value}")


@dataclass(frozen=True, slots=True)
class Block:
    """The whole bounds as a single block."""


@dataclass(frozen=True, slots=True)
class XStep:
    step: float

    def __post_init__(self) -> None:
        _positive("XStep step", self.step)


@dataclass(frozen=True, slots=True)
class YStep:
    step: float

    def __post_init__(self) -> None:
        _positive("YStep step", self.step)


@dataclass(frozen=True, slots=True)
class XYStep:
    x: float
    y: float

    def __post_init__(self) -> None:
        _positive("XYStep x", self.x)
        _positive("XYStep y", self.y)


@dataclass(frozen=True, slots=True)
class GridStep:
    row_height: float
    column_width: float

    def __post_init__(self) -> None:
        _positive("GridStep row_height", self.row_height)
        _positive("GridStep column_width", self.column_width)


@dataclass(frozen=True, slots=True)
class XSymmetry:
    """Generate below the horizontal `axis` and mirror the result across it."""

    mode: GeneratorMode
    axis: float


@dataclass(frozen=True, slots=True)
class YSymmetry:
    """Generate right of the vertical `axis` and mirror the result across it."""

    mode: GeneratorMode
    axis: float


GeneratorMode: TypeAlias = Block | XStep | YStep | XYStep | GridStep | XSymmetry | YSymmetry


def bounds_iter(mode: GeneratorMode, bounds: Rect) -> Iterator[Rect]:
    """Lazily partition `bounds` into the sub-rectangles of `mode`."""
    if isinstance(mode, Block):
        yield bounds
    elif isinstance(mode, XStep):
        x = bounds.min_x
        while x < bounds.max_x:
            yield Rect(x, bounds.min_y, mode.step, bounds.height)
            x += mode.step
    elif isinstance(mode, YStep):
        y = bounds.min_y
        while y < bounds.max_y:
            yield Rect(bounds.min_x, y, bounds.width, mode.step)
            y += mode.step
    elif isinstance(mode, XYStep):
        x, y = bounds.min_x, bounds.min_y
        while x < bounds.max_x and y < bounds.max_y:
            yield Rect(x, y, mode.x, mode.y)
            x += mode.x
            y += mode.y
    elif isinstance(mode, GridStep):
        x, y = bounds.min_x, bounds.min_y
        while x < bounds.max_x and y < bounds.max_y:
            yield Rect(x, y, mode.column_width, mode.row_height)
            x += mode.column_width
            if x >= bounds.max_x:
                x = bounds.min_x
                y += mode.row_height
    elif isinstance(mode, XSymmetry):
        yield from bounds_iter(mode.mode, bounds.inner_rect(top=mode.axis))
    elif isinstance(mode, YSymmetry):
        yield from bounds_iter(mode.mode, bounds.inner_rect(left=mode.axis))
    else:
        raise TypeError(f"Unsupported generator mode: {mode!r}")


def post_generate(mode: GeneratorMode, generated: list[Path]) -> list[Path]:
    """Add the mirrored copies requested by symmetry modes, innermost last."""
    if isinstance(mode, XSymmetry):
        mirrored = [p.flip_along_x(mode.axis) for p in generated]
        return post_generate(mode.mode, mirrored + generated)
    if isinstance(mode, YSymmetry):
        mirrored = [p.flip_along_y(mode.axis) for p in generated]
        return post_generate(mode.mode, mirrored + generated)
    return generated


def apply_transform(path: Path, transform: Transform, i: int, rng: random.Random) -> Path:
    value = transform.value.value_at(i, rng)
    if isinstance(transform, Scale):
        return path.scale(float(value))
    if isinstance(transform, Rotate):
        angle = value if isinstance(value, Angle) else Angle(float(value))
        return path.rotate(angle)
    if isinstance(transform, Translate):
        return path.translate((float(value[0]), float(value[1])))
    raise TypeError(f"Unsupported transform: {transform!r}")


@dataclass(slots=True)
class Generator:
    mode: GeneratorMode
    renderer: Renderer
    rng: random.Random = field(default_factory=random.Random)
    transformations: list[Transform] = field(default_factory=list)

    def transform(self, transform: Transform) -> Generator:
        self.transformations.append(transform)
        return self

    def generate(self, bounds: Rect) -> list[Path]:
        local = Rect(0.0, 0.0, bounds.width, bounds.height)
        ordered = sorted(self.transformations, key=lambda t: _TRANSFORM_ORDER[type(t)])
        result: list[Path] = []
        for i, rect in enumerate(bounds_iter(self.mode, local)):
            path = self.renderer(self.rng, rect.size)
            for transform in ordered:
                path = apply_transform(path, transform, i, self.rng)
            result.append(path.translate(rect.origin))
        return [p.translate(bounds.origin) for p in post_generate(self.mode, result)]
