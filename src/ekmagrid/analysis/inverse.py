"""
Inverse mapping: response (X, Y) -> emissions (A, B).

Pipeline: bounding-box check -> nearest sample -> coarse containing cell ->
subdivision refinement -> inverse bilinear solve.
"""
from __future__ import annotations

import logging
from typing import Optional, TYPE_CHECKING

from ekmagrid.analysis.localizer import check_levels, refine, search_containing_quad
from ekmagrid.analysis.nearest import nearest as find_nearest
from ekmagrid.analysis.solver import blend_emissions, invert_corners
from ekmagrid.config import BOUNDS_TOLERANCE, DEFAULT_LEVELS
from ekmagrid.model.results import FailureReason, InverseResult

if TYPE_CHECKING:
    from ekmagrid.model.grid import Grid
    from ekmagrid.model.quad import Quad

logger = logging.getLogger(__name__)


def _locate(grid: Grid, x: float, y: float, levels: int) -> tuple[Optional[Quad], InverseResult]:
    """
    Shared steps of both inverse modes.

    Returns:
        (final refined quad, partial success carrying the nearest sample), or
        (None, failure result).
    """
    check_levels(levels)
    if not grid.response_bounds.contains(x, y, BOUNDS_TOLERANCE):
        logger.debug(f"Inverse query ({x}, {y}) outside response bounds {grid.response_bounds}")
        return None, InverseResult.failure(FailureReason.OUTSIDE_BOUNDS)

    near = find_nearest(grid, x, y)
    if near is None:
        return None, InverseResult.failure(FailureReason.NO_NEAREST)

    coarse, checked = search_containing_quad(grid, x, y, near)
    if coarse is None:
        return None, InverseResult.failure(
            FailureReason.OUTSIDE, nearest=near, quads_checked=checked
        )

    return refine(coarse, x, y, levels), InverseResult(ok=True, nearest=near, quads_checked=checked)


def map_inverse(grid: Grid, x: float, y: float, levels: int = DEFAULT_LEVELS) -> InverseResult:
    """
    Continuous emissions estimate for response point (x, y).

    Args:
        grid: The grid snapshot.
        x: Response coordinate X.
        y: Response coordinate Y.
        levels: Subdivision levels used to refine the containing cell.

    Returns:
        On success (a, b), the solved (t, u) and the final refined quad. Fails
        with `outside_bounds`, `no_nearest` or `outside`.

    Raises:
        ValueError: If `levels` is not a non-negative integer.
    """
    final_quad, located = _locate(grid, x, y, levels)
    if final_quad is None:
        return located

    corners = final_quad.canonical()
    t, u = invert_corners(corners, x, y)
    a, b = blend_emissions(corners, t, u)
    return InverseResult(
        ok=True,
        a=a,
        b=b,
        uv=(t, u),
        final_quad=final_quad,
        nearest=located.nearest,
        quads_checked=located.quads_checked,
    )


def map_inverse_corner_fallback(grid: Grid, x: float, y: float, levels: int = DEFAULT_LEVELS) -> InverseResult:
    """
    Emissions coordinate of the refined-quad corner nearest to (x, y).

    Degraded counterpart of `map_inverse` for comparison displays. Fails in
    exactly the same cases.
    """
    final_quad, located = _locate(grid, x, y, levels)
    if final_quad is None:
        return located

    corner = final_quad.nearest_corner(x, y)
    return InverseResult(
        ok=True,
        a=corner.a,
        b=corner.b,
        final_quad=final_quad,
        corner=corner,
        nearest=located.nearest,
        quads_checked=located.quads_checked,
    )
