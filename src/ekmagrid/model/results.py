"""
Typed results returned by the mapping operations.

Mapping queries never raise for an unmappable point: they return one of these
records with ``ok=False`` and a `FailureReason`, so a caller can keep its last
valid estimate instead of crashing.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Optional

from ekmagrid.model.quad import Quad
from ekmagrid.model.sample import Sample


class FailureReason(StrEnum):
    OUT_OF_RANGE = "out_of_range"      # emissions query outside the sampled box
    OUTSIDE_BOUNDS = "outside_bounds"  # response query outside the sampled box
    OUTSIDE = "outside"                # inside the box, but in an unsampled hole
    NO_NEAREST = "no_nearest"
    NOT_READY = "not_ready"


@dataclass(frozen=True)
class BracketCorners:
    """Axis values bracketing a forward query."""
    a0: float
    b0: float
    a1: float
    b1: float


@dataclass(frozen=True)
class ForwardResult:
    """Result of an emissions -> response query."""
    ok: bool
    x: Optional[float] = None
    y: Optional[float] = None
    reason: Optional[FailureReason] = None
    corners: Optional[BracketCorners] = None
    weights: Optional[tuple[float, float]] = None
    missing: tuple[tuple[float, float], ...] = ()

    @classmethod
    def failure(cls, reason: FailureReason, **kwargs: Any) -> ForwardResult:
        return cls(ok=False, reason=reason, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        if not self.ok:
            data: dict[str, Any] = {"ok": False, "reason": str(self.reason)}
            if self.missing:
                data["missing"] = [list(corner) for corner in self.missing]
            return data
        return {
            "ok": True,
            "x": self.x,
            "y": self.y,
            "corners": vars(self.corners) if self.corners else None,
            "weights": {"t": self.weights[0], "u": self.weights[1]} if self.weights else None,
        }


@dataclass(frozen=True)
class InverseResult:
    """
    Result of a response -> emissions query.

    `a`, `b` hold the continuous estimate, or the chosen corner's coordinates in
    corner-fallback mode (then `corner` is set and `uv` is None).
    """
    ok: bool
    a: Optional[float] = None
    b: Optional[float] = None
    reason: Optional[FailureReason] = None
    uv: Optional[tuple[float, float]] = None
    final_quad: Optional[Quad] = None
    corner: Optional[Sample] = None
    nearest: Optional[Sample] = None
    quads_checked: int = 0

    @classmethod
    def failure(cls, reason: FailureReason, **kwargs: Any) -> InverseResult:
        return cls(ok=False, reason=reason, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"ok": self.ok}
        if not self.ok:
            data["reason"] = str(self.reason)
            if self.nearest is not None:
                data["nearest"] = vars(self.nearest)
                data["quads_checked"] = self.quads_checked
            return data
        data.update({"a": self.a, "b": self.b})
        if self.uv is not None:
            data["uv"] = {"t": self.uv[0], "u": self.uv[1]}
        if self.corner is not None:
            data["corner"] = vars(self.corner)
        if self.final_quad is not None:
            data["final_quad"] = [list(p) for p in self.final_quad.response_polygon()]
        return data


@dataclass(frozen=True)
class ScenarioResult:
    """
    Result of an emission-control projection.

    On failure, `stage` names the step that failed ("inverse" or "forward") and
    the fields reached before it stay populated.
    """
    ok: bool
    base: tuple[float, float]
    factors: tuple[float, float]
    reason: Optional[FailureReason] = None
    stage: Optional[str] = None
    iso: Optional[tuple[float, float]] = None
    target: Optional[tuple[float, float]] = None
    predicted: Optional[tuple[float, float]] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "ok": self.ok,
            "base": list(self.base),
            "factors": list(self.factors),
        }
        if self.reason is not None:
            data["reason"] = str(self.reason)
            data["stage"] = self.stage
        for name in ("iso", "target", "predicted"):
            value = getattr(self, name)
            if value is not None:
                data[name] = list(value)
        return data
