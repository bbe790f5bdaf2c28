"""
EKMA Grid (Data Model)
======================
This module turns raw tabular rows into the indexed, immutable grid that every
mapping operation reads from.

Why is this file needed?
------------------------
1. Validation: Rows coming from a table loader are untrusted. Only rows with
   four finite numeric fields become `Sample` objects; the rest are dropped.
2. Indexing: The mapping algorithms need sorted unique axis values, exact-key
   lookups, axis-index lookups and bounding boxes. They are computed once here.
3. Immutability: A built `Grid` is never modified. Rebuilding produces a new
   object, so a holder can swap references without exposing a half-built grid.

Classes:
    RowColumns: Names of the four fields read from each row.
    Grid: The immutable grid snapshot.
    EmptyGridError: Raised when no row survives validation.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from numbers import Real
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional, TYPE_CHECKING

import numpy as np

from ekmagrid.config import (
    AXIS_TOLERANCE, COLUMN_A, COLUMN_B, COLUMN_X, COLUMN_Y, KEY_DECIMALS
)
from ekmagrid.model.quad import Quad
from ekmagrid.model.sample import Bounds, Sample, canonical_key

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


class EmptyGridError(ValueError):
    """No row passed validation, so there is no grid to return."""


@dataclass(frozen=True)
class RowColumns:
    """Field names of the emissions (a, b) and response (x, y) values in a row."""
    a: str = COLUMN_A
    b: str = COLUMN_B
    x: str = COLUMN_X
    y: str = COLUMN_Y

    def as_tuple(self) -> tuple[str, str, str, str]:
        return self.a, self.b, self.x, self.y


DEFAULT_COLUMNS = RowColumns()


@dataclass(frozen=True, eq=False)
class Grid:
    """
    Immutable snapshot of the sampled emissions/response grid.

    Attributes:
        samples: All retained samples, in first-seen key order.
        a_values: Sorted unique A values (read-only array).
        b_values: Sorted unique B values (read-only array).
        a_step: Smallest positive gap between consecutive A values, 0 if unknown.
        b_step: Smallest positive gap between consecutive B values, 0 if unknown.
        emissions_bounds: Bounding box over (A, B).
        response_bounds: Bounding box over (X, Y).
        xs: Response X of each sample, aligned with `samples`.
        ys: Response Y of each sample, aligned with `samples`.
    """
    samples: tuple[Sample, ...]
    a_values: npt.NDArray[np.float64]
    b_values: npt.NDArray[np.float64]
    a_step: float
    b_step: float
    emissions_bounds: Bounds
    response_bounds: Bounds
    xs: npt.NDArray[np.float64]
    ys: npt.NDArray[np.float64]
    _by_key: Mapping[tuple[float, float], Sample]
    _by_index: Mapping[tuple[int, int], Sample]

    def __len__(self) -> int:
        return len(self.samples)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(samples={len(self.samples)}, "
            f"a_axis={len(self.a_values)}, b_axis={len(self.b_values)})"
        )

    @property
    def shape(self) -> tuple[int, int]:
        """Number of unique (A, B) axis values."""
        return len(self.a_values), len(self.b_values)

    def get(self, a: float, b: float) -> Optional[Sample]:
        """Exact lookup by emissions coordinate (6-decimal canonical key)."""
        return self._by_key.get(canonical_key(a, b))

    def at(self, i: int, j: int) -> Optional[Sample]:
        """Lookup by axis index: i into `a_values`, j into `b_values`."""
        return self._by_index.get((i, j))

    def index_of(self, sample: Sample) -> tuple[int, int]:
        """Axis indices (i, j) of a sample's emissions coordinate."""
        return axis_index(self.a_values, sample.a), axis_index(self.b_values, sample.b)

    def cell(self, i: int, j: int) -> Optional[Quad]:
        """
        The quad spanning axis indices [i, i+1] x [j, j+1], or None when the
        cell leaves the grid or one of its corners was never sampled.

        Corners are in cyclic order (i, j), (i+1, j), (i+1, j+1), (i, j+1).
        """
        corners = (
            self.at(i, j), self.at(i + 1, j), self.at(i + 1, j + 1), self.at(i, j + 1)
        )
        if any(c is None for c in corners):
            return None
        return Quad(corners)


def axis_index(axis: npt.NDArray[np.float64], value: float) -> int:
    """Index of the axis value equal to `value` within the axis tolerance."""
    return int(np.searchsorted(axis, value - AXIS_TOLERANCE, side="left"))


def unique_axis(values: npt.NDArray[np.float64], tol: float = AXIS_TOLERANCE) -> npt.NDArray[np.float64]:
    """Sorted values with neighbours closer than `tol` merged into the first one."""
    ordered = np.sort(values)
    kept: list[float] = []
    for v in ordered:
        if not kept or v - kept[-1] > tol:
            kept.append(float(v))
    return np.array(kept, dtype=np.float64)


def axis_step(axis: npt.NDArray[np.float64]) -> float:
    """Smallest positive gap between consecutive axis values, 0 with fewer than 2."""
    if len(axis) < 2:
        return 0.0
    deltas = np.diff(axis)
    positive = deltas[deltas > 0]
    return float(positive.min()) if positive.size else 0.0


def _read_field(row: Any, name: str) -> Any:
    if isinstance(row, Mapping):
        return row.get(name)
    return getattr(row, name, None)


def _is_finite_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def validate_row(row: Any, columns: RowColumns = DEFAULT_COLUMNS) -> Optional[Sample]:
    """
    Convert one row into a `Sample`.

    Returns:
        The sample, or None when any of the four fields is missing, not a real
        number, or not finite.
    """
    values = [_read_field(row, name) for name in columns.as_tuple()]
    if not all(_is_finite_number(v) for v in values):
        return None
    a, b, x, y = (float(v) for v in values)
    return Sample(a=a, b=b, x=x, y=y)


def _readonly(array: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    array.flags.writeable = False
    return array


def build_grid(rows: Iterable[Any], columns: RowColumns = DEFAULT_COLUMNS) -> Grid:
    """
    Build an immutable `Grid` from raw rows.

    Args:
        rows: Mappings (or attribute objects) exposing the four named fields.
        columns: Names of the A, B, X and Y fields.

    Raises:
        EmptyGridError: If no row passes validation.

    Returns:
        The new grid. Nothing global is modified.
    """
    by_key: dict[tuple[float, float], Sample] = {}
    n_rows = 0
    n_dropped = 0
    for n_rows, row in enumerate(rows, start=1):
        sample = validate_row(row, columns)
        if sample is None:
            n_dropped += 1
            logger.debug(f"Dropping row {n_rows}: not four finite numbers in {columns.as_tuple()}")
            continue
        # A later row with the same key replaces the earlier one
        by_key[sample.key] = sample

    if not by_key:
        raise EmptyGridError(
            f"No valid rows among {n_rows} (need finite numeric {', '.join(columns.as_tuple())})."
        )

    samples = tuple(by_key.values())
    data = np.array([s.to_array() for s in samples], dtype=np.float64)

    a_values = unique_axis(data[:, 0])
    b_values = unique_axis(data[:, 1])

    by_index: dict[tuple[int, int], Sample] = {}
    for s in samples:
        by_index[(axis_index(a_values, s.a), axis_index(b_values, s.b))] = s

    grid = Grid(
        samples=samples,
        a_values=_readonly(a_values),
        b_values=_readonly(b_values),
        a_step=axis_step(a_values),
        b_step=axis_step(b_values),
        emissions_bounds=Bounds.from_arrays(data[:, 0], data[:, 1]),
        response_bounds=Bounds.from_arrays(data[:, 2], data[:, 3]),
        xs=_readonly(data[:, 2].copy()),
        ys=_readonly(data[:, 3].copy()),
        _by_key=MappingProxyType(by_key),
        _by_index=MappingProxyType(by_index),
    )

    duplicates = n_rows - n_dropped - len(samples)
    logger.info(
        f"Grid built: {len(samples)} samples on {grid.shape[0]}x{grid.shape[1]} axes "
        f"({n_dropped} rows dropped, {duplicates} duplicates replaced, "
        f"key precision {KEY_DECIMALS} decimals)."
    )
    return grid


def is_ready(grid: Optional[Grid]) -> bool:
    """True when `grid` exists and holds at least one sample."""
    return grid is not None and len(grid.samples) > 0
