"""
Nearest-sample search in response space.
"""
from __future__ import annotations

from typing import Optional, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    from ekmagrid.model.grid import Grid
    from ekmagrid.model.sample import Sample


def nearest(grid: Optional[Grid], x: float, y: float) -> Optional[Sample]:
    """
    Find the sample closest to (x, y) in response space.

    Scans every sample and minimises the squared Euclidean distance. Ties go to
    the sample that comes first in the grid's sample order.

    Args:
        grid: The grid snapshot.
        x: Response coordinate X.
        y: Response coordinate Y.

    Returns:
        The nearest sample, or None if the grid is missing or empty.
    """
    if grid is None or len(grid.samples) == 0:
        return None
    d2 = (grid.xs - x) ** 2 + (grid.ys - y) ** 2
    # argmin returns the first occurrence of the minimum
    return grid.samples[int(np.argmin(d2))]
