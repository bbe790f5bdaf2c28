"""
Isopleths of the EKMA grid.

An isopleth is the polyline traced in response space by all samples sharing one
emissions axis value: constant-B lines ordered by A, and constant-A lines ordered
by B. Together they form the background of an EKMA diagram.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import Optional, TYPE_CHECKING

import numpy as np

from ekmagrid.config import COLUMN_A, COLUMN_B, COLUMN_X, COLUMN_Y
from ekmagrid.model.grid import axis_index

if TYPE_CHECKING:
    import numpy.typing as npt
    from matplotlib.axes import Axes
    from ekmagrid.model.grid import Grid

logger = logging.getLogger(__name__)


class IsoplethAxis(StrEnum):
    A = "a"
    B = "b"


@dataclass(frozen=True)
class Isopleth:
    """A line of constant A (axis 'a') or constant B (axis 'b')."""
    axis: IsoplethAxis
    value: float
    xs: npt.NDArray[np.float64]
    ys: npt.NDArray[np.float64]

    def __len__(self) -> int:
        return len(self.xs)

    @property
    def label(self) -> str:
        name = COLUMN_A if self.axis == IsoplethAxis.A else COLUMN_B
        return f"{name}={self.value:g}"


def color_fraction(value: float, v_min: float, v_max: float) -> float:
    """Position of `value` in [v_min, v_max] as a fraction in [0, 1]."""
    return (value - v_min) / max(1e-9, v_max - v_min)


def extract_isopleths(grid: Grid) -> list[Isopleth]:
    """
    Trace every isopleth of the grid.

    Returns:
        Constant-B lines (ascending B) followed by constant-A lines (ascending A).
    """
    by_a: dict[int, list] = {}
    by_b: dict[int, list] = {}
    for s in grid.samples:
        i = axis_index(grid.a_values, s.a)
        j = axis_index(grid.b_values, s.b)
        by_a.setdefault(i, []).append(s)
        by_b.setdefault(j, []).append(s)

    lines: list[Isopleth] = []
    for j in sorted(by_b):
        pts = sorted(by_b[j], key=lambda s: s.a)
        lines.append(Isopleth(
            axis=IsoplethAxis.B,
            value=float(grid.b_values[j]),
            xs=np.array([p.x for p in pts]),
            ys=np.array([p.y for p in pts]),
        ))
    for i in sorted(by_a):
        pts = sorted(by_a[i], key=lambda s: s.b)
        lines.append(Isopleth(
            axis=IsoplethAxis.A,
            value=float(grid.a_values[i]),
            xs=np.array([p.x for p in pts]),
            ys=np.array([p.y for p in pts]),
        ))

    logger.debug(f"Extracted {len(by_b)} constant-B and {len(by_a)} constant-A isopleths.")
    return lines


def plot_isopleths(isopleths: list[Isopleth], ax: Optional[Axes] = None, show: bool = True) -> Axes:
    """
    Quick preview of the EKMA diagram.

    Constant-A lines are coloured blue -> red by A value; constant-B lines are
    dotted grey.
    """
    import matplotlib.pyplot as plt

    if ax is None:
        plt.rcParams["figure.constrained_layout.use"] = True
        fig = plt.figure(figsize=(8, 6))
        ax = fig.add_subplot()

    a_values = [iso.value for iso in isopleths if iso.axis == IsoplethAxis.A]
    a_min = min(a_values, default=0.0)
    a_max = max(a_values, default=1.0)
    cmap = plt.get_cmap("coolwarm")

    for iso in isopleths:
        if iso.axis == IsoplethAxis.B:
            ax.plot(iso.xs, iso.ys, color="#8a8a8a", lw=0.8, ls=":")
        else:
            ax.plot(iso.xs, iso.ys, color=cmap(color_fraction(iso.value, a_min, a_max)), lw=1.2, label=iso.label)

    ax.set_xlabel(COLUMN_X)
    ax.set_ylabel(COLUMN_Y)
    ax.grid(visible=True, which='major', axis='both', linestyle='-', color='gray', lw=0.5)
    if a_values:
        ax.legend(loc="center left", bbox_to_anchor=(1.02, 0.5), fontsize="small")

    if show:
        plt.show()
    return ax
