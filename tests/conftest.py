"""Shared fixtures for the ekmagrid test suite."""
from __future__ import annotations

import numpy as np
import pytest

from ekmagrid.model.grid import build_grid


def response_of(a: float, b: float) -> tuple[float, float]:
    """Smooth, one-to-one response surface used to synthesise test grids."""
    return 1.8 * b + 0.1 * a, 20.0 + 5.0 * a - 0.6 * b + 0.1 * a * b


def make_row(a: float, b: float, x: float, y: float) -> dict:
    return {"VOC": a, "NOX": b, "24NOX": x, "M1M1O3": y}


@pytest.fixture
def unit_square_rows():
    return [
        make_row(0.0, 0.0, 0.0, 0.0),
        make_row(1.0, 0.0, 1.0, 0.0),
        make_row(0.0, 1.0, 0.0, 1.0),
        make_row(1.0, 1.0, 1.0, 1.0),
    ]


@pytest.fixture
def unit_square_grid(unit_square_rows):
    return build_grid(unit_square_rows)


@pytest.fixture
def holed_grid(unit_square_rows):
    """Unit square with the (A=1, B=1) corner never sampled."""
    return build_grid(unit_square_rows[:3])


@pytest.fixture
def ring_grid():
    """3x3 identity grid without its centre sample: no cell is complete."""
    rows = [
        make_row(float(a), float(b), float(a), float(b))
        for b in range(3) for a in range(3)
        if (a, b) != (1, 1)
    ]
    return build_grid(rows)


@pytest.fixture
def ekma_rows():
    """VOC 0..5 step 0.5, NOX 1..10 step 1, response from `response_of`."""
    rows = []
    for b in range(1, 11):
        for a in np.arange(0.0, 5.01, 0.5):
            x, y = response_of(float(a), float(b))
            rows.append(make_row(float(a), float(b), x, y))
    return rows


@pytest.fixture
def ekma_grid(ekma_rows):
    return build_grid(ekma_rows)


@pytest.fixture
def nonuniform_grid():
    """Irregular axis spacing on both axes."""
    a_axis = [0.0, 0.3, 1.0, 2.5, 2.7]
    b_axis = [1.0, 1.5, 4.0, 9.0]
    rows = []
    for b in b_axis:
        for a in a_axis:
            x, y = response_of(a, b)
            rows.append(make_row(a, b, x, y))
    return build_grid(rows)
