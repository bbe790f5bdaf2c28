"""
Grid Primitives.

A `Sample` links one emissions coordinate (A, B) to one response coordinate
(X, Y). The same type carries the synthetic points created while refining a
quad, so every corner of every quad can be blended the same way.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from ekmagrid.config import KEY_DECIMALS

if TYPE_CHECKING:
    import numpy.typing as npt


def canonical_key(a: float, b: float) -> tuple[float, float]:
    """
    Fixed-precision lookup key for an emissions coordinate.

    Rounds both values to ``KEY_DECIMALS`` digits so that keys computed from
    slightly different float paths compare equal. Adding 0.0 folds -0.0 into 0.0.
    """
    return round(float(a), KEY_DECIMALS) + 0.0, round(float(b), KEY_DECIMALS) + 0.0


@dataclass(frozen=True)
class Sample:
    """A point of the EKMA grid in both coordinate spaces."""
    a: float  # Emissions precursor A (e.g. VOC)
    b: float  # Emissions precursor B (e.g. NOx)
    x: float  # Response X (e.g. 24h NOx)
    y: float  # Response Y (e.g. M1M1 O3)

    @property
    def key(self) -> tuple[float, float]:
        return canonical_key(self.a, self.b)

    def midpoint(self, other: Sample) -> Sample:
        """Point halfway between two samples, in both spaces."""
        return Sample(
            a=(self.a + other.a) / 2,
            b=(self.b + other.b) / 2,
            x=(self.x + other.x) / 2,
            y=(self.y + other.y) / 2,
        )

    def distance2_to(self, x: float, y: float) -> float:
        """Squared Euclidean distance to (x, y) in response space."""
        dx = self.x - x
        dy = self.y - y
        return dx * dx + dy * dy

    def to_array(self) -> npt.NDArray[np.float64]:
        return np.array([self.a, self.b, self.x, self.y])


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned bounding rectangle in one coordinate space."""
    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @classmethod
    def from_arrays(cls, xs: npt.NDArray[np.float64], ys: npt.NDArray[np.float64]) -> Bounds:
        return cls(
            min_x=float(np.min(xs)),
            max_x=float(np.max(xs)),
            min_y=float(np.min(ys)),
            max_y=float(np.max(ys)),
        )

    def contains(self, x: float, y: float, tol: float = 0.0) -> bool:
        """Inclusive containment test, widened by `tol` on every side."""
        return (
            self.min_x - tol <= x <= self.max_x + tol
            and self.min_y - tol <= y <= self.max_y + tol
        )
