"""
Configuration & Path Management
===============================
This module serves as the central registry for file paths and global constants.

Why is this file needed?
------------------------
1. Abstraction: It prevents hardcoded paths and magic tolerances scattered
   throughout the mapping code.
2. Deployment: It handles the logic required by PyInstaller (sys._MEIPASS) to
   find the bundled grid tables when the app is frozen into an .exe.

Exports:
    ASSETS_PATH (str): Absolute path to the assets directory.
    DEFAULT_GRID_PATH (str): Absolute path to the bundled EKMA grid table.
    DEFAULT_SITES_PATH (str): Absolute path to the bundled site observations.
"""
import logging
import os
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        # PyInstaller temp folder
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, relative_path)

    # Development mode: resolve relative to this file
    # config.py is in src/ekmagrid/
    current_file_path: Path = Path(__file__)
    project_root: Path = current_file_path.parent.parent.parent
    return os.path.join(str(project_root), relative_path)


# Paths
ASSETS_PATH: str = get_resource_path("assets")
DEFAULT_GRID_PATH: str = os.path.join(ASSETS_PATH, "ekma_grid.csv")
DEFAULT_SITES_PATH: str = os.path.join(ASSETS_PATH, "sites.csv")

# File suffixes read as HDF5 grid snapshots instead of CSV tables
SNAPSHOT_SUFFIXES: tuple[str, ...] = (".h5", ".hdf5")

if not os.path.exists(ASSETS_PATH):
    logger.warning(f"Assets path not found at {ASSETS_PATH}")

# Column names of the grid table: emissions (A, B) and response (X, Y)
COLUMN_A: str = "VOC"
COLUMN_B: str = "NOX"
COLUMN_X: str = "24NOX"
COLUMN_Y: str = "M1M1O3"

# Column names of the site observation table
COLUMN_STATION: str = "Station"
COLUMN_YEAR: str = "Year"

# Numeric tolerances
KEY_DECIMALS: int = 6
AXIS_TOLERANCE: float = 1e-6
BOUNDS_TOLERANCE: float = 1e-9
EDGE_TOLERANCE: float = 1e-9

# Inverse localization
DEFAULT_LEVELS: int = 8
MAX_SEARCH_RADIUS: int = 3

# Inverse bilinear Newton solve
NEWTON_MAX_ITER: int = 12
NEWTON_TOLERANCE: float = 1e-9
JACOBIAN_EPS: float = 1e-12

# Emission-control scenario factors
FACTOR_MIN: float = 0.05
FACTOR_MAX: float = 10.0
