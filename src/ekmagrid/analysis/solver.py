"""
Inverse bilinear solve.

Given a quad with corners P00, P10, P01, P11, the bilinear map

    F(t, u) = (1-t)(1-u) P00 + t(1-u) P10 + (1-t)u P01 + tu P11

sends the unit square onto the quad in response space. This module recovers the
(t, u) that maps to a target (x, y) by Newton iteration.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ekmagrid.config import JACOBIAN_EPS, NEWTON_MAX_ITER, NEWTON_TOLERANCE

if TYPE_CHECKING:
    from ekmagrid.model.quad import CanonicalCorners, Quad

logger = logging.getLogger(__name__)


def _clamp01(value: float) -> float:
    return min(1.0, max(0.0, value))


def bilinear_point(corners: CanonicalCorners, t: float, u: float) -> tuple[float, float]:
    """Response coordinate F(t, u) of the bilinear map."""
    p00, p10, p01, p11 = corners.p00, corners.p10, corners.p01, corners.p11
    w00 = (1 - t) * (1 - u)
    w10 = t * (1 - u)
    w01 = (1 - t) * u
    w11 = t * u
    return (
        w00 * p00.x + w10 * p10.x + w01 * p01.x + w11 * p11.x,
        w00 * p00.y + w10 * p10.y + w01 * p01.y + w11 * p11.y,
    )


def jacobian(corners: CanonicalCorners, t: float, u: float) -> tuple[float, float, float, float]:
    """
    Partial derivatives of F at (t, u).

    Returns:
        (dX/dt, dX/du, dY/dt, dY/du)
    """
    p00, p10, p01, p11 = corners.p00, corners.p10, corners.p01, corners.p11
    dx_dt = (1 - u) * (p10.x - p00.x) + u * (p11.x - p01.x)
    dx_du = (1 - t) * (p01.x - p00.x) + t * (p11.x - p10.x)
    dy_dt = (1 - u) * (p10.y - p00.y) + u * (p11.y - p01.y)
    dy_du = (1 - t) * (p01.y - p00.y) + t * (p11.y - p10.y)
    return dx_dt, dx_du, dy_dt, dy_du


def invert_corners(
    corners: CanonicalCorners,
    x: float,
    y: float,
    max_iter: int = NEWTON_MAX_ITER
) -> tuple[float, float]:
    """
    Newton iteration for F(t, u) = (x, y), starting from the quad centre.

    Each step solves J [dt, du]^T = -F_residual in closed form, then clamps
    (t, u) to the unit square. Iteration stops when both corrections drop below
    ``NEWTON_TOLERANCE`` or when the Jacobian becomes near-singular; in the
    latter case the last (t, u) is kept.

    Returns:
        (t, u) in [0, 1] x [0, 1].
    """
    t, u = 0.5, 0.5
    for _ in range(max_iter):
        fx, fy = bilinear_point(corners, t, u)
        rx, ry = fx - x, fy - y
        dx_dt, dx_du, dy_dt, dy_du = jacobian(corners, t, u)
        det = dx_dt * dy_du - dx_du * dy_dt
        if abs(det) < JACOBIAN_EPS:
            logger.debug(f"Near-singular Jacobian (det={det:.3e}) at t={t}, u={u}; stopping")
            break
        dt = (-rx * dy_du + dx_du * ry) / det
        du = (dy_dt * rx - dx_dt * ry) / det
        t = _clamp01(t + dt)
        u = _clamp01(u + du)
        if abs(dt) < NEWTON_TOLERANCE and abs(du) < NEWTON_TOLERANCE:
            break
    return t, u


def invert(quad: Quad, x: float, y: float, max_iter: int = NEWTON_MAX_ITER) -> tuple[float, float]:
    """Fractional position (t, u) of (x, y) inside `quad`, along A and B."""
    return invert_corners(quad.canonical(), x, y, max_iter)


def blend_emissions(corners: CanonicalCorners, t: float, u: float) -> tuple[float, float]:
    """Continuous (A, B) at fractional position (t, u) of the canonical corners."""
    a = (1 - t) * corners.p00.a + t * corners.p10.a
    b = (1 - u) * corners.p00.b + u * corners.p01.b
    return a, b
