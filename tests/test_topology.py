"""Tests for vertices, edges and edge loops."""

import math

import pytest

from brepcore.curves import Circle, Line
from brepcore.errors import PointNotOnLoopError, PreconditionError
from brepcore.geom import close, point, vclose
from brepcore.topology import (Direction, Edge, EdgeContains, EdgeLoop, Vertex,
                               arc_edge, circle_edge, line_edge, polygon_loop)
from brepcore.xform import Scale, Translation


def unit_square():
    """Clockwise unit square seen from +Z."""
    return polygon_loop([point(0, 0), point(0, 1), point(1, 1), point(1, 0)])


class TestVertex:
    """Test vertex equality."""

    def test_tolerant_equality(self):
        """Test vertex comparison within tolerance."""
        assert Vertex(point(0, 0, 0)) == Vertex(point(1e-10, 0, 0))
        assert Vertex(point(0, 0, 0)) != Vertex(point(1e-6, 0, 0))


class TestEdge:
    """Test edge construction, projection and splitting."""

    def test_line_edge(self):
        """Test straight edge construction."""
        e = line_edge(point(0, 0), point(2, 0))
        assert close(e.length, 2.0)
        assert vclose(e.midpoint, point(1, 0))
        assert vclose(e.tangent(point(1, 0)), point(1, 0, 0))

    def test_endpoint_not_on_curve(self):
        """Test that endpoints must lie on the curve."""
        with pytest.raises(PreconditionError):
            Edge(Vertex(point(0, 0)), Vertex(point(1, 1)), Line(point(0, 0), point(1, 0)))

    def test_zero_length(self):
        """Test that zero length edges are rejected."""
        with pytest.raises(PreconditionError):
            Edge(Vertex(point(0, 0)), Vertex(point(0, 0)), Line(point(0, 0), point(1, 0)))

    def test_direction_mismatch(self):
        """Test that a line edge must follow its direction."""
        line = Line(point(0, 0), point(1, 0))
        with pytest.raises(PreconditionError):
            Edge(Vertex(point(1, 0)), Vertex(point(0, 0)), line)
        e = Edge(Vertex(point(1, 0)), Vertex(point(0, 0)), line, Direction.DECREASING)
        assert vclose(e.tangent(point(0.5, 0)), point(-1, 0, 0))
        assert e == line_edge(point(1, 0), point(0, 0))

    def test_contains(self):
        """Test edge point containment."""
        e = line_edge(point(0, 0), point(2, 0))
        assert e.contains(point(1, 0)) is EdgeContains.INSIDE
        assert e.contains(point(2, 0)) is EdgeContains.ON_POINT
        assert e.contains(point(3, 0)) is EdgeContains.OUTSIDE
        assert e.project(point(3, 0)) is None
        assert close(e.project(point(0.5, 0)), 0.5)

    def test_neg(self):
        """Test edge reversal."""
        e = line_edge(point(0, 0), point(2, 0))
        r = e.neg()
        assert r.start == e.end and r.end == e.start
        assert r.curve is e.curve
        assert r.direction is Direction.DECREASING
        assert vclose(r.tangent(point(1, 0)), point(-1, 0, 0))

    def test_split(self):
        """Test splitting an edge."""
        e = line_edge(point(0, 0), point(4, 0))
        pieces = e.split([point(3, 0), point(1, 0), point(0, 0), point(9, 9), point(1, 0)])
        assert len(pieces) == 3
        assert vclose(pieces[0].end.point, point(1, 0))
        assert vclose(pieces[1].end.point, point(3, 0))
        assert close(sum(p.length for p in pieces), 4.0)
        assert e.split([point(4, 0)]) == [e]

    def test_full_circle(self):
        """Test full circle edges."""
        c = Circle(point(0, 0, 0), point(0, 0, 1), 1.0)
        e = circle_edge(c)
        assert e.is_closed
        assert close(e.span, 2 * math.pi)
        assert close(e.length, 2 * math.pi)
        assert vclose(e.midpoint, point(-1, 0, 0))
        pieces = e.split([point(0, 1, 0), point(0, -1, 0)])
        assert len(pieces) == 3
        assert close(sum(p.length for p in pieces), 2 * math.pi)

    def test_decreasing_arc(self):
        """Test arcs traversed against the circle."""
        c = Circle(point(0, 0, 0), point(0, 0, 1), 1.0)
        e = arc_edge(c, point(0, 1, 0), point(1, 0, 0), Direction.DECREASING)
        assert close(e.span, math.pi / 2)
        assert vclose(e.tangent(point(0, 1, 0)), point(1, 0, 0))
        assert e.project(point(-1, 0, 0)) is None
        r = e.neg()
        assert close(r.span, math.pi / 2)

    def test_rasterize(self):
        """Test edge sampling."""
        c = Circle(point(0, 0, 0), point(0, 0, 1), 1.0)
        pts = circle_edge(c).rasterize(4)
        assert len(pts) == 5
        assert vclose(pts[1], point(0, 1, 0))
        assert vclose(pts[0], pts[-1])

    def test_transform(self):
        """Test edge transformation."""
        e = line_edge(point(0, 0), point(1, 0))
        moved = e.transform(Translation(point(0, 0, 5)))
        assert vclose(moved.start.point, point(0, 0, 5))
        assert vclose(moved.end.point, point(1, 0, 5))


class TestEdgeLoop:
    """Test loop invariants and traversal."""

    def test_connectivity(self):
        """Test that loops must be connected."""
        with pytest.raises(PreconditionError):
            EdgeLoop([line_edge(point(0, 0), point(1, 0)),
                      line_edge(point(1, 1), point(0, 0))])
        with pytest.raises(PreconditionError):
            EdgeLoop([])

    def test_point_at_and_project(self):
        """Test loop evaluation and projection."""
        loop = unit_square()
        assert close(loop.length, 4.0)
        assert vclose(loop.point_at(0.0), point(0, 0))
        assert vclose(loop.point_at(1.5), point(0.5, 1))
        assert close(loop.project(point(1, 0.5)), 2.5)
        assert loop.project(point(0.5, 0.5)) is None

    def test_tangent(self):
        """Test loop tangents."""
        loop = unit_square()
        assert vclose(loop.tangent(point(0, 0.5)), point(0, 1, 0))
        assert vclose(loop.tangent(point(0, 1)), point(1, 0, 0))
        with pytest.raises(PointNotOnLoopError):
            loop.tangent(point(0.5, 0.5))

    def test_get_subcurve(self):
        """Test extracting a loop stretch."""
        loop = unit_square()
        sub = loop.get_subcurve(point(0, 0.5), point(1, 0.5))
        assert len(sub) == 3
        assert sub[1] is loop.edges[1]
        assert close(sum(e.length for e in sub), 2.0)
        wrap = loop.get_subcurve(point(1, 0.5), point(0, 0.5))
        assert close(sum(e.length for e in wrap), 2.0)
        inside = loop.get_subcurve(point(0, 0.25), point(0, 0.75))
        assert len(inside) == 1 and close(inside[0].length, 0.5)
        whole = loop.get_subcurve(point(0, 0.5), point(0, 0.5))
        assert close(sum(e.length for e in whole), 4.0)
        with pytest.raises(PointNotOnLoopError):
            loop.get_subcurve(point(0, 0.5), point(3, 3))

    def test_cutting_split(self):
        """Test cutting a loop into arcs."""
        loop = unit_square()
        arcs = loop.cutting_split([point(1, 0.5), point(0, 0.5)])
        assert len(arcs) == 2
        for arc in arcs:
            for a, b in zip(arc[:-1], arc[1:]):
                assert a.end == b.start
        assert close(sum(e.length for arc in arcs for e in arc), 4.0)
        assert vclose(arcs[0][0].start.point, point(0, 0.5))
        assert len(loop.cutting_split([])) == 1

    def test_neg(self):
        """Test loop reversal."""
        loop = unit_square()
        r = loop.neg()
        assert len(r) == 4
        assert vclose(r.tangent(point(0, 0.5)), point(0, -1, 0))
        assert not r.same_geometry(loop)
        assert r.neg() == loop

    def test_same_geometry_ignores_start(self):
        """Test loop comparison with different starts."""
        a = polygon_loop([point(0, 0), point(0, 1), point(1, 1), point(1, 0)])
        b = polygon_loop([point(1, 1), point(1, 0), point(0, 0), point(0, 1)])
        assert a == b

    def test_transform(self):
        """Test loop transformation."""
        loop = unit_square().transform(Scale(2.0))
        assert close(loop.length, 8.0)
