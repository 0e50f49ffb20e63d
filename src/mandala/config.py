from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class GenerationConfig:
    """Tunables of `Mandala.generate_epoch`.

    `min_room` is the smallest free room, as a fraction of the drawing's
    smaller side, that a displaced epoch may be sized from. Below it the
    radius is drawn from up to half the drawing size instead.
    """

    symmetry_probability: float = 0.5
    detail: int = 8
    primes: tuple[int, ...] = (2, 3, 5, 7, 11)
    normalized: float = 100.0
    outline: bool = True
    min_room: float = 0.05

    def __post_init__(self) -> None:
        if not 0.0 <= self.symmetry_probability <= 1.0:
            raise ValueError(
                f"symmetry_probability must be within [0, 1], got {self.symmetry_probability}"
            )
        if self.detail < 2:
            raise ValueError(f"detail must be at least 2, got {self.detail}")
        if not self.primes:
            raise ValueError("primes may not be empty")
        if any(p < 1 for p in self.primes):
            raise ValueError(f"primes must be positive, got {self.primes}")
        if self.normalized <= 0.0:
            raise ValueError(f"normalized must be positive, got {self.normalized}")
        if not 0.0 < self.min_room <= 0.5:
            raise ValueError(f"min_room must be within (0, 0.5], got {self.min_room}")
