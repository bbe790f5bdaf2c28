"""Tests for quad geometry primitives."""
import pytest

from ekmagrid.model.quad import Quad, point_in_polygon, point_on_segment
from ekmagrid.model.sample import Bounds, Sample


def square(a0=0.0, b0=0.0, size=1.0):
    """Identity-mapped square quad in cyclic order."""
    pts = [(a0, b0), (a0 + size, b0), (a0 + size, b0 + size), (a0, b0 + size)]
    return Quad(tuple(Sample(a, b, a, b) for a, b in pts))


class TestContainment:
    """Edge-inclusive point-in-quad test."""

    def test_interior_point(self):
        assert square().contains(0.3, 0.7)

    def test_exterior_point(self):
        assert not square().contains(1.2, 0.5)
        assert not square().contains(-0.1, -0.1)

    @pytest.mark.parametrize("x, y", [(0.5, 0.0), (1.0, 0.5), (0.5, 1.0), (0.0, 0.5)])
    def test_edge_points_are_inside(self, x, y):
        assert square().contains(x, y)

    @pytest.mark.parametrize("x, y", [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)])
    def test_vertices_are_inside(self, x, y):
        assert square().contains(x, y)

    def test_edge_tolerance(self):
        assert square().contains(1.0 + 1e-12, 0.5)
        assert not square().contains(1.0 + 1e-6, 0.5)

    def test_point_on_segment_excludes_extension(self):
        start, end = Sample(0, 0, 0.0, 0.0), Sample(0, 0, 1.0, 0.0)
        assert point_on_segment(0.5, 0.0, start, end)
        assert not point_on_segment(1.5, 0.0, start, end)

    def test_non_convex_polygon(self):
        # Arrow-head shape: the notch at (0.5, 0.5) is outside
        poly = [Sample(0, 0, x, y) for x, y in [(0, 0), (0.5, 0.8), (1, 0), (0.5, 1.5)]]
        assert not point_in_polygon(poly, 0.5, 0.5)
        assert point_in_polygon(poly, 0.5, 1.0)


class TestSubdivision:

    def test_centroid_averages_all_fields(self):
        quad = Quad((Sample(0, 0, 0, 0), Sample(2, 0, 4, 0), Sample(2, 2, 4, 6), Sample(0, 2, 0, 6)))
        assert quad.centroid() == Sample(1.0, 1.0, 2.0, 3.0)

    def test_children_tile_the_parent(self):
        children = square(size=2.0).subdivide()
        assert len(children) == 4
        assert children[0].corners == (
            Sample(0, 0, 0, 0), Sample(1, 0, 1, 0), Sample(1, 1, 1, 1), Sample(0, 1, 0, 1)
        )
        centroids = sorted((c.centroid().x, c.centroid().y) for c in children)
        assert centroids == [(0.5, 0.5), (0.5, 1.5), (1.5, 0.5), (1.5, 1.5)]

    def test_wrong_corner_count_rejected(self):
        with pytest.raises(ValueError):
            Quad((Sample(0, 0, 0, 0),) * 3)


class TestCanonicalOrder:

    def test_cyclic_order_is_canonicalised(self):
        c = square(a0=2.0, b0=5.0).canonical()
        assert (c.p00.a, c.p00.b) == (2.0, 5.0)
        assert (c.p10.a, c.p10.b) == (3.0, 5.0)
        assert (c.p01.a, c.p01.b) == (2.0, 6.0)
        assert (c.p11.a, c.p11.b) == (3.0, 6.0)

    def test_shuffled_corners(self):
        q = square()
        shuffled = Quad((q[2], q[0], q[3], q[1]))
        assert shuffled.canonical() == q.canonical()

    def test_degenerate_falls_back_to_sorted_positions(self):
        # All corners share one B value
        pts = tuple(Sample(float(a), 1.0, float(a), 0.0) for a in (3, 1, 2, 0))
        c = Quad(pts).canonical()
        assert [p.a for p in (c.p00, c.p10, c.p01, c.p11)] == [0.0, 1.0, 2.0, 3.0]

    def test_nearest_corner(self):
        q = square()
        assert q.nearest_corner(0.9, 0.2) == Sample(1.0, 0.0, 1.0, 0.0)
        # Equidistant: first corner wins
        assert q.nearest_corner(0.5, 0.5) == q[0]


class TestBounds:

    def test_contains_with_tolerance(self):
        b = Bounds(0.0, 1.0, 0.0, 2.0)
        assert b.contains(1.0, 2.0)
        assert not b.contains(1.0 + 1e-6, 1.0)
        assert b.contains(1.0 + 1e-10, 1.0, tol=1e-9)
        assert not b.contains(float("nan"), 1.0)
