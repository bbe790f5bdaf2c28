"""
Quad localization for inverse mapping.

Two phases:

1. Coarse search: walk square neighbourhoods of grid cells around the nearest
   sample (radius 1, 2, 3 in axis-index units) until a cell contains the query.
2. Refinement: subdivide the found cell a fixed number of times, always keeping
   the child that contains the query. The final corners are synthetic points
   blended from the original samples, which keeps the inverse solve continuous
   instead of snapped to the sampling resolution.
"""
from __future__ import annotations

import logging
from numbers import Integral
from typing import Iterator, Optional, TYPE_CHECKING

from ekmagrid.config import DEFAULT_LEVELS, EDGE_TOLERANCE, MAX_SEARCH_RADIUS

if TYPE_CHECKING:
    from ekmagrid.model.grid import Grid
    from ekmagrid.model.quad import Quad
    from ekmagrid.model.sample import Sample

logger = logging.getLogger(__name__)


def neighbourhood_cells(
    grid: Grid,
    center: tuple[int, int],
    radius: int,
    skip_radius: int = 0
) -> Iterator[tuple[int, int]]:
    """
    Lower-left axis indices of the cells around `center` within `radius`.

    A cell (ci, cj) spans [ci, ci+1] x [cj, cj+1]; it is yielded when both its
    index ranges lie within `radius` of `center`. Cells that also lie within
    `skip_radius` are left out, so growing radii only visit new cells.
    Order is by B index, then A index.
    """
    i, j = center
    n_a, n_b = grid.shape
    for cj in range(max(0, j - radius), min(n_b - 2, j + radius - 1) + 1):
        for ci in range(max(0, i - radius), min(n_a - 2, i + radius - 1) + 1):
            if (
                skip_radius > 0
                and i - skip_radius <= ci <= i + skip_radius - 1
                and j - skip_radius <= cj <= j + skip_radius - 1
            ):
                continue
            yield ci, cj


def search_containing_quad(
    grid: Grid,
    x: float,
    y: float,
    nearest: Sample,
    max_radius: int = MAX_SEARCH_RADIUS,
    eps: float = EDGE_TOLERANCE
) -> tuple[Optional[Quad], int]:
    """
    Coarse containment search around the nearest sample.

    Returns:
        The first containing quad (by radius, then enumeration order) or None,
        together with the number of complete quads tested.
    """
    center = grid.index_of(nearest)
    checked = 0
    for radius in range(1, max_radius + 1):
        for ci, cj in neighbourhood_cells(grid, center, radius, skip_radius=radius - 1):
            quad = grid.cell(ci, cj)
            if quad is None:
                continue
            checked += 1
            if quad.contains(x, y, eps):
                logger.debug(f"Point ({x}, {y}) contained in cell {(ci, cj)} at radius {radius}")
                return quad, checked
    logger.debug(f"No cell within radius {max_radius} of {center} contains ({x}, {y}); {checked} checked")
    return None, checked


def localize(
    grid: Grid,
    x: float,
    y: float,
    nearest: Sample,
    max_radius: int = MAX_SEARCH_RADIUS
) -> Optional[Quad]:
    """Grid cell containing (x, y), searched around `nearest`; None if not found."""
    quad, _ = search_containing_quad(grid, x, y, nearest, max_radius)
    return quad


def choose_child(children: list[Quad], x: float, y: float, eps: float = EDGE_TOLERANCE) -> Quad:
    """
    First child containing (x, y); otherwise the child whose centroid is nearest.
    """
    for child in children:
        if child.contains(x, y, eps):
            return child
    return min(children, key=lambda q: q.centroid().distance2_to(x, y))


def check_levels(levels: int) -> None:
    if isinstance(levels, bool) or not isinstance(levels, Integral) or levels < 0:
        raise ValueError(f"'levels' must be a non-negative integer, got {levels!r}.")


def refine(quad: Quad, x: float, y: float, levels: int = DEFAULT_LEVELS) -> Quad:
    """
    Subdivide `quad` `levels` times towards (x, y).

    Args:
        quad: The coarse containing quad.
        x, y: Query point in response space.
        levels: Number of subdivision levels; 0 returns `quad` itself.

    Raises:
        ValueError: If `levels` is negative or not an integer.
    """
    check_levels(levels)
    for _ in range(levels):
        quad = choose_child(quad.subdivide(), x, y)
    return quad
