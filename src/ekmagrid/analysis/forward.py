"""
Forward mapping: emissions (A, B) -> response (X, Y).

Bilinear interpolation inside the grid cell that brackets the query.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from ekmagrid.config import BOUNDS_TOLERANCE
from ekmagrid.model.results import BracketCorners, FailureReason, ForwardResult

if TYPE_CHECKING:
    import numpy.typing as npt
    from ekmagrid.model.grid import Grid

logger = logging.getLogger(__name__)


def bracket(axis: npt.NDArray[np.float64], value: float, eps: float = BOUNDS_TOLERANCE) -> tuple[int, int]:
    """
    Indices of the axis values enclosing `value`.

    Returns (i0, i1) with axis[i0] <= value <= axis[i1]. When `value` coincides
    with an axis value (within `eps`) both indices point at it.

    The caller guarantees that `value` lies within the axis range (up to `eps`).
    """
    n = len(axis)
    idx = int(np.searchsorted(axis, value, side="left"))
    if idx < n and abs(axis[idx] - value) <= eps:
        return idx, idx
    if idx > 0 and abs(axis[idx - 1] - value) <= eps:
        return idx - 1, idx - 1
    return idx - 1, idx


def map_forward(grid: Grid, a: float, b: float) -> ForwardResult:
    """
    Interpolate the response coordinate of emissions point (a, b).

    Args:
        grid: The grid snapshot.
        a: Emissions coordinate A.
        b: Emissions coordinate B.

    Returns:
        On success the blended (x, y), the bracketing axis values and the
        weights (t, u). Fails with `out_of_range` outside the emissions box and
        with `outside` when a bracketing corner was never sampled; `missing`
        then lists the absent (A, B) corners.
    """
    if not grid.emissions_bounds.contains(a, b, BOUNDS_TOLERANCE):
        logger.debug(f"Forward query ({a}, {b}) outside emissions bounds {grid.emissions_bounds}")
        return ForwardResult.failure(FailureReason.OUT_OF_RANGE)

    i0, i1 = bracket(grid.a_values, a)
    j0, j1 = bracket(grid.b_values, b)
    a0, a1 = float(grid.a_values[i0]), float(grid.a_values[i1])
    b0, b1 = float(grid.b_values[j0]), float(grid.b_values[j1])
    corners = BracketCorners(a0=a0, b0=b0, a1=a1, b1=b1)

    p00 = grid.at(i0, j0)
    p10 = grid.at(i1, j0)
    p01 = grid.at(i0, j1)
    p11 = grid.at(i1, j1)

    lookup = (((a0, b0), p00), ((a1, b0), p10), ((a0, b1), p01), ((a1, b1), p11))
    missing = tuple(dict.fromkeys(ab for ab, p in lookup if p is None))
    if missing:
        logger.debug(f"Forward query ({a}, {b}) falls in a hole, missing corners {missing}")
        return ForwardResult.failure(FailureReason.OUTSIDE, corners=corners, missing=missing)

    t = 0.0 if a1 == a0 else (a - a0) / (a1 - a0)
    u = 0.0 if b1 == b0 else (b - b0) / (b1 - b0)

    w00 = (1 - t) * (1 - u)
    w10 = t * (1 - u)
    w01 = (1 - t) * u
    w11 = t * u

    x = w00 * p00.x + w10 * p10.x + w01 * p01.x + w11 * p11.x
    y = w00 * p00.y + w10 * p10.y + w01 * p01.y + w11 * p11.y

    return ForwardResult(ok=True, x=x, y=y, corners=corners, weights=(t, u))
