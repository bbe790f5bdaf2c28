"""
Bidirectional mapping between emissions and response coordinates of an EKMA grid.

Core operations:
    build_grid: rows -> immutable Grid (raises EmptyGridError).
    is_ready: True for a built, non-empty grid.
    map_forward: emissions (A, B) -> response (X, Y).
    map_inverse: response (X, Y) -> continuous emissions (A, B).
    map_inverse_corner_fallback: response (X, Y) -> nearest refined corner (A, B).

Queries report unmappable points as results with ok=False and a FailureReason.
Both inverse operations raise ValueError when `levels` is not a non-negative
integer.
"""
from ekmagrid.analysis.forward import map_forward
from ekmagrid.analysis.inverse import map_inverse, map_inverse_corner_fallback
from ekmagrid.model.grid import EmptyGridError, Grid, RowColumns, build_grid, is_ready
from ekmagrid.model.results import FailureReason, ForwardResult, InverseResult
from ekmagrid.model.sample import Sample

__all__ = [
    "EmptyGridError",
    "FailureReason",
    "ForwardResult",
    "Grid",
    "InverseResult",
    "RowColumns",
    "Sample",
    "build_grid",
    "is_ready",
    "map_forward",
    "map_inverse",
    "map_inverse_corner_fallback",
]
