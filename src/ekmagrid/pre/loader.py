"""
Tabular row loader.

Reads a header CSV into plain row dictionaries with dynamically typed cells.
Validation of the rows is left to the grid builder.
"""
from __future__ import annotations

import csv
import logging
from typing import Any, Optional

from ekmagrid.model.grid import DEFAULT_COLUMNS, Grid, RowColumns, build_grid

logger = logging.getLogger(__name__)


def parse_cell(text: Optional[str]) -> Any:
    """
    Dynamic typing of one CSV cell.

    Empty cells become None, numbers become floats (a decimal comma is
    accepted), anything else stays as the stripped string.
    """
    if text is None:
        return None
    value = text.strip()
    if not value:
        return None
    try:
        return float(value.replace(',', '.'))
    except ValueError:
        return value


def sniff_delimiter(header: str) -> str:
    return ';' if ';' in header else ','


def read_rows(filepath: str, delimiter: Optional[str] = None) -> list[dict[str, Any]]:
    """
    Read a CSV file with a header line into a list of row dictionaries.

    Args:
        filepath: Path to the CSV file (UTF-8, optional BOM).
        delimiter: Field delimiter; sniffed from the header (';' or ',') if None.

    Raises:
        IOError: If the file cannot be read or parsed.

    Returns:
        One dict per non-empty data line, keyed by the stripped header names.
    """
    rows: list[dict[str, Any]] = []
    try:
        with open(filepath, mode='r', encoding='utf-8-sig', newline='') as f:
            header = f.readline()
            if delimiter is None:
                delimiter = sniff_delimiter(header)
            f.seek(0)
            reader = csv.reader(f, delimiter=delimiter)
            fieldnames = next(reader, None)
            if not fieldnames:
                raise ValueError("missing header line")
            names = [name.strip() for name in fieldnames]
            for raw in reader:
                if not raw or all(not cell.strip() for cell in raw):
                    continue
                rows.append({name: parse_cell(cell) for name, cell in zip(names, raw)})
    except (OSError, ValueError, csv.Error) as e:
        logger.error(f"CSV import of '{filepath}' failed: {e}")
        raise IOError(f"Failed to read CSV '{filepath}': {e}") from e

    logger.info(f"Read {len(rows)} rows from {filepath}")
    return rows


def load_grid(filepath: str, columns: RowColumns = DEFAULT_COLUMNS, delimiter: Optional[str] = None) -> Grid:
    """Read a CSV table and build the grid from it."""
    return build_grid(read_rows(filepath, delimiter), columns)
