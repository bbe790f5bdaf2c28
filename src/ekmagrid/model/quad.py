"""
Quad geometry: containment, subdivision and canonical corner ordering.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from ekmagrid.config import EDGE_TOLERANCE
from ekmagrid.model.sample import Sample


def point_on_segment(
    px: float,
    py: float,
    start: Sample,
    end: Sample,
    eps: float = EDGE_TOLERANCE
) -> bool:
    """
    Check whether (px, py) lies on the response-space segment start->end.

    The point is collinear when the cross product of (end - start) and
    (p - start) vanishes, and lies between the end points when the dot product
    of (p - start) and (p - end) is not positive.

    Args:
        px, py: Query point.
        start: Segment start.
        end: Segment end.
        eps: Tolerance for both the cross and the dot product checks.
    """
    cross = (end.x - start.x) * (py - start.y) - (end.y - start.y) * (px - start.x)
    if abs(cross) > eps:
        return False
    dot = (px - start.x) * (px - end.x) + (py - start.y) * (py - end.y)
    return dot <= eps


def point_in_polygon(
    polygon: Sequence[Sample],
    px: float,
    py: float,
    eps: float = EDGE_TOLERANCE
) -> bool:
    """
    Edge-inclusive point-in-polygon test in response space.

    Points on an edge or a vertex count as inside; everything else is decided by
    an even-odd ray cast.
    """
    n = len(polygon)
    for i in range(n):
        if point_on_segment(px, py, polygon[i], polygon[(i + 1) % n], eps):
            return True

    inside = False
    j = n - 1
    for i in range(n):
        xi, yi = polygon[i].x, polygon[i].y
        xj, yj = polygon[j].x, polygon[j].y
        if (yi > py) != (yj > py):
            x_cross = (xj - xi) * (py - yi) / (yj - yi) + xi
            if px < x_cross:
                inside = not inside
        j = i
    return inside


@dataclass(frozen=True)
class CanonicalCorners:
    """Quad corners keyed by their position in emissions space."""
    p00: Sample  # low A, low B
    p10: Sample  # high A, low B
    p01: Sample  # low A, high B
    p11: Sample  # high A, high B


@dataclass(frozen=True)
class Quad:
    """
    Four samples in cyclic order forming one grid cell.

    Coarse quads are built from original grid samples. Refined quads carry
    synthetic corners that blend those samples in both coordinate spaces.
    """
    corners: tuple[Sample, Sample, Sample, Sample]

    def __post_init__(self) -> None:
        if len(self.corners) != 4:
            raise ValueError(f"A quad needs exactly 4 corners, got {len(self.corners)}.")

    def __iter__(self):
        return iter(self.corners)

    def __getitem__(self, index: int) -> Sample:
        return self.corners[index]

    def contains(self, x: float, y: float, eps: float = EDGE_TOLERANCE) -> bool:
        return point_in_polygon(self.corners, x, y, eps)

    def centroid(self) -> Sample:
        """Arithmetic mean of all four corners, in both spaces."""
        c = self.corners
        return Sample(
            a=(c[0].a + c[1].a + c[2].a + c[3].a) / 4,
            b=(c[0].b + c[1].b + c[2].b + c[3].b) / 4,
            x=(c[0].x + c[1].x + c[2].x + c[3].x) / 4,
            y=(c[0].y + c[1].y + c[2].y + c[3].y) / 4,
        )

    def subdivide(self) -> list[Quad]:
        """
        Split the quad into four children through its edge midpoints and centroid.

        For corners A, B, C, D the children are
        [A, AB, M, DA], [AB, B, BC, M], [M, BC, C, CD], [DA, M, CD, D].
        """
        a, b, c, d = self.corners
        ab, bc, cd, da = a.midpoint(b), b.midpoint(c), c.midpoint(d), d.midpoint(a)
        m = self.centroid()
        return [
            Quad((a, ab, m, da)),
            Quad((ab, b, bc, m)),
            Quad((m, bc, c, cd)),
            Quad((da, m, cd, d)),
        ]

    def nearest_corner(self, x: float, y: float) -> Sample:
        """Corner closest to (x, y) in response space; first one wins ties."""
        best = self.corners[0]
        best_d2 = best.distance2_to(x, y)
        for corner in self.corners[1:]:
            d2 = corner.distance2_to(x, y)
            if d2 < best_d2:
                best, best_d2 = corner, d2
        return best

    def canonical(self) -> CanonicalCorners:
        """
        Order the corners as P00, P10, P01, P11 by their emissions coordinates.

        Corners are sorted by (A, B) and split at the median B value. If the
        split does not leave two corners on each side the first four sorted
        points are assigned positionally.
        """
        pts = sorted(self.corners, key=lambda p: (p.a, p.b))
        b_values = [p.b for p in pts]
        b_median = (min(b_values) + max(b_values)) / 2

        low = sorted((p for p in pts if p.b <= b_median), key=lambda p: p.a)
        high = sorted((p for p in pts if p.b > b_median), key=lambda p: p.a)

        if len(low) != 2 or len(high) != 2:
            return CanonicalCorners(p00=pts[0], p10=pts[1], p01=pts[2], p11=pts[3])
        return CanonicalCorners(p00=low[0], p10=low[1], p01=high[0], p11=high[1])

    def response_polygon(self) -> list[tuple[float, float]]:
        return [(p.x, p.y) for p in self.corners]
