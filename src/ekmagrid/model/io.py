"""
Input/Output Manager (HDF5)
Handles saving a built Grid snapshot to .h5 files and rebuilding it on load.
"""
import logging
from importlib.metadata import PackageNotFoundError, version
from typing import Optional

import h5py
import numpy as np

from ekmagrid.model.grid import DEFAULT_COLUMNS, Grid, RowColumns, build_grid

# Get module logger
logger = logging.getLogger(__name__)

try:
    APP_VERSION = version("ekmagrid")
except PackageNotFoundError:
    APP_VERSION = "0.0.0-dev"


class GridIO:
    SAMPLES_DATASET = "samples"

    @staticmethod
    def save_grid(
        grid: Grid,
        filepath: str,
        columns: RowColumns = DEFAULT_COLUMNS,
        source: Optional[str] = None
    ) -> None:
        """
        Write the grid's samples as an (N, 4) dataset of [A, B, X, Y] rows.

        Column names and the data source are kept as attributes so the table can
        be read back under its original names.
        """
        logger.info(f"Saving grid snapshot to: {filepath}")
        try:
            with h5py.File(filepath, "w") as f:
                f.attrs["version"] = APP_VERSION
                f.attrs["columns"] = list(columns.as_tuple())
                if source:
                    f.attrs["source"] = source

                data = np.array([s.to_array() for s in grid.samples], dtype=np.float64)
                dset = f.create_dataset(GridIO.SAMPLES_DATASET, data=data, compression="gzip")
                dset.attrs["a_step"] = grid.a_step
                dset.attrs["b_step"] = grid.b_step

            logger.info(f"Grid snapshot saved ({len(grid.samples)} samples).")
        except OSError as e:
            logger.exception(f"Failed to save grid snapshot: {e}")
            raise

    @staticmethod
    def load_grid(filepath: str) -> tuple[Grid, RowColumns]:
        """
        Rebuild a grid from a snapshot written by `save_grid`.

        Raises:
            ValueError: If the file is not HDF5 or holds no sample dataset.
            EmptyGridError: If no stored sample is valid.

        Returns:
            The grid and the column names it was saved with.
        """
        logger.info(f"Loading grid snapshot from: {filepath}")
        if not h5py.is_hdf5(filepath):
            msg = f"File '{filepath}' is not a valid HDF5 file."
            logger.error(msg)
            raise ValueError(msg)

        with h5py.File(filepath, "r") as f:
            if GridIO.SAMPLES_DATASET not in f:
                msg = f"File '{filepath}' holds no '{GridIO.SAMPLES_DATASET}' dataset."
                logger.error(msg)
                raise ValueError(msg)

            names = [n.decode("utf-8") if isinstance(n, bytes) else str(n)
                     for n in f.attrs.get("columns", DEFAULT_COLUMNS.as_tuple())]
            columns = RowColumns(*names)
            data = f[GridIO.SAMPLES_DATASET][:]

        rows = [dict(zip(columns.as_tuple(), (float(v) for v in row))) for row in data]
        grid = build_grid(rows, columns)
        logger.info(f"Grid snapshot loaded from: {filepath}")
        return grid, columns
