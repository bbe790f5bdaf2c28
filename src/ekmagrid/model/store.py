"""
Grid Store (Process-Wide Holder)
================================
This module owns the single grid reference a running application reads from.

Why is this file needed?
------------------------
1. Lifecycle: The grid is built once per data source and then only read.
   Rebuilding builds a complete new grid first and swaps the reference in one
   assignment, so readers never see a partially built grid.
2. Failure isolation: A failed rebuild leaves the previous grid in place.
3. Convenience: Views call the mapping operations through the store and get a
   `not_ready` failure instead of an exception when nothing is loaded yet.
4. Sources: The grid comes from a CSV table or from an HDF5 snapshot written by
   a previous session.

Classes:
    GridStore: Holder of the current grid snapshot.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from ekmagrid.analysis.forward import map_forward
from ekmagrid.analysis.inverse import map_inverse, map_inverse_corner_fallback
from ekmagrid.config import DEFAULT_GRID_PATH, DEFAULT_LEVELS, SNAPSHOT_SUFFIXES
from ekmagrid.model.grid import DEFAULT_COLUMNS, Grid, RowColumns, build_grid, is_ready
from ekmagrid.model.io import GridIO
from ekmagrid.model.results import FailureReason, ForwardResult, InverseResult
from ekmagrid.pre.loader import read_rows

logger = logging.getLogger(__name__)


def is_snapshot_path(filepath: str) -> bool:
    return filepath.lower().endswith(SNAPSHOT_SUFFIXES)


class GridStore:
    """
    Holds the current `Grid`. Pass one instance to every consumer.
    """
    def __init__(self, grid: Optional[Grid] = None) -> None:
        self._grid = grid
        self.source: Optional[str] = None
        self.columns: RowColumns = DEFAULT_COLUMNS

    @property
    def grid(self) -> Optional[Grid]:
        return self._grid

    def is_ready(self) -> bool:
        return is_ready(self._grid)

    def _install(self, grid: Grid, columns: RowColumns, source: Optional[str]) -> Grid:
        self._grid = grid
        self.columns = columns
        self.source = source
        logger.info(f"Installed grid from {source or 'rows'}: {grid!r}")
        return grid

    def _is_cached(self, filepath: str, force: bool) -> bool:
        return not force and self.is_ready() and self.source == filepath

    def rebuild(self, rows: Iterable[Any], columns: RowColumns = DEFAULT_COLUMNS, source: Optional[str] = None) -> Grid:
        """
        Build a new grid and install it.

        Raises:
            EmptyGridError: If no row is valid. The previous grid is kept.
        """
        try:
            grid = build_grid(rows, columns)
        except ValueError as e:
            logger.error(f"Grid rebuild failed, keeping previous grid: {e}")
            raise
        return self._install(grid, columns, source)

    def load_csv(
        self,
        filepath: str = DEFAULT_GRID_PATH,
        columns: RowColumns = DEFAULT_COLUMNS,
        force: bool = False
    ) -> Grid:
        """
        Load the grid from a CSV table.

        Returns the current grid without reading the file when it is ready and
        was loaded from the same path, unless `force` is set.
        """
        if self._is_cached(filepath, force):
            return self._grid
        return self.rebuild(read_rows(filepath), columns, source=filepath)

    def load_snapshot(self, filepath: str, force: bool = False) -> Grid:
        """
        Load the grid from an HDF5 snapshot, under the column names stored in it.

        Raises:
            ValueError: If the file is not a grid snapshot. The previous grid is kept.
        """
        if self._is_cached(filepath, force):
            return self._grid
        grid, columns = GridIO.load_grid(filepath)
        return self._install(grid, columns, filepath)

    def load(self, filepath: str = DEFAULT_GRID_PATH, force: bool = False) -> Grid:
        """Load a snapshot (.h5/.hdf5) or a CSV table, chosen by file suffix."""
        if is_snapshot_path(filepath):
            return self.load_snapshot(filepath, force)
        return self.load_csv(filepath, force=force)

    def save_snapshot(self, filepath: str) -> None:
        """
        Write the current grid to an HDF5 snapshot.

        Raises:
            ValueError: If no grid is loaded.
        """
        if not self.is_ready():
            raise ValueError("No grid loaded, nothing to save.")
        GridIO.save_grid(self._grid, filepath, self.columns, self.source)

    def clear(self) -> None:
        """Forget the current grid."""
        self._grid = None
        self.source = None
        self.columns = DEFAULT_COLUMNS
        logger.info("Grid store has been cleared.")

    def map_forward(self, a: float, b: float) -> ForwardResult:
        grid = self._grid
        if not is_ready(grid):
            return ForwardResult.failure(FailureReason.NOT_READY)
        return map_forward(grid, a, b)

    def map_inverse(self, x: float, y: float, levels: int = DEFAULT_LEVELS) -> InverseResult:
        grid = self._grid
        if not is_ready(grid):
            return InverseResult.failure(FailureReason.NOT_READY)
        return map_inverse(grid, x, y, levels)

    def map_inverse_corner_fallback(self, x: float, y: float, levels: int = DEFAULT_LEVELS) -> InverseResult:
        grid = self._grid
        if not is_ready(grid):
            return InverseResult.failure(FailureReason.NOT_READY)
        return map_inverse_corner_fallback(grid, x, y, levels)
