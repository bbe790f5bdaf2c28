"""
Emission-control scenarios.

Starting from an observed response point, estimate the emissions that produce
it, scale them by control factors, and predict the response of the scaled
emissions:

    (x, y) --inverse--> (a, b) --factors--> (a', b') --forward--> (x', y')
"""
from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from ekmagrid.analysis.forward import map_forward
from ekmagrid.analysis.inverse import map_inverse, map_inverse_corner_fallback
from ekmagrid.config import DEFAULT_LEVELS, FACTOR_MAX, FACTOR_MIN
from ekmagrid.model.results import ScenarioResult

if TYPE_CHECKING:
    from ekmagrid.model.grid import Grid

logger = logging.getLogger(__name__)


def clamp_factor(value: float) -> float:
    """Non-finite factors mean 'no change'; others are kept within [FACTOR_MIN, FACTOR_MAX]."""
    if not math.isfinite(value):
        return 1.0
    return min(FACTOR_MAX, max(FACTOR_MIN, value))


def project_scenario(
    grid: Grid,
    x: float,
    y: float,
    factor_a: float = 1.0,
    factor_b: float = 1.0,
    levels: int = DEFAULT_LEVELS,
    corner_fallback: bool = False
) -> ScenarioResult:
    """
    Predict the response point after scaling the emissions behind (x, y).

    Args:
        grid: The grid snapshot.
        x, y: Observed response point.
        factor_a: Multiplier for emissions A (clamped, see `clamp_factor`).
        factor_b: Multiplier for emissions B.
        levels: Subdivision levels for the inverse step.
        corner_fallback: Use the corner estimate instead of the continuous one.

    Returns:
        A `ScenarioResult`. When a step fails, `stage` names it and the values
        computed before it are kept.
    """
    factors = (clamp_factor(factor_a), clamp_factor(factor_b))
    base = (x, y)

    inverse = map_inverse_corner_fallback if corner_fallback else map_inverse
    estimate = inverse(grid, x, y, levels)
    if not estimate.ok:
        return ScenarioResult(
            ok=False, base=base, factors=factors, reason=estimate.reason, stage="inverse"
        )

    iso = (estimate.a, estimate.b)
    target = (iso[0] * factors[0], iso[1] * factors[1])

    predicted = map_forward(grid, *target)
    if not predicted.ok:
        logger.debug(f"Scenario target {target} could not be mapped forward: {predicted.reason}")
        return ScenarioResult(
            ok=False, base=base, factors=factors, reason=predicted.reason, stage="forward",
            iso=iso, target=target
        )

    logger.debug(f"Scenario base={base} iso={iso} factors={factors} target={target} "
                 f"predicted=({predicted.x}, {predicted.y})")
    return ScenarioResult(
        ok=True, base=base, factors=factors, iso=iso, target=target,
        predicted=(predicted.x, predicted.y)
    )
