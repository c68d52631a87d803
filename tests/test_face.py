import math

import pytest

from brepcore.curves import Circle
from brepcore.errors import PointNotOnLoopError, PreconditionError, UnsupportedCaseError
from brepcore.face import Face
from brepcore.geom import close, point, vclose
from brepcore.surfaces import Plane, Sphere
from brepcore.topology import EdgeLoop, arc_edge, circle_edge, line_edge, polygon_loop
from brepcore.xform import Scale, Translation

## unit tests for faces

XY = Plane.from_normal(point(0, 0, 0), point(0, 0, 1))


def square(x0, y0, x1, y1, z=0):
    """Clockwise rectangle seen from +Z."""
    return polygon_loop([point(x0, y0, z), point(x0, y1, z),
                         point(x1, y1, z), point(x1, y0, z)])


def sphere_cap():
    sphere = Sphere(point(0, 0, 0), 1.0)
    rim = Circle(point(0, 0, 0.5), point(0, 0, -1), math.sqrt(0.75))
    return Face([EdgeLoop([circle_edge(rim)])], sphere)


class TestFaceConstruction:
    """face invariants"""

    def test_needs_boundary(self):
        """Test that a face needs a boundary."""
        with pytest.raises(PreconditionError):
            Face([], XY)

    def test_edges_on_surface(self):
        """Test that boundary edges must lie on the surface."""
        with pytest.raises(PreconditionError) as err:
            Face([square(0, 0, 1, 1, z=1)], XY)
        assert err.value.details['loop'] == 0

    def test_parts(self):
        """Test outer loop, holes and edge access."""
        outer = square(0, 0, 4, 4)
        hole = square(1, 1, 3, 3).neg()
        face = Face([outer, hole], XY)
        assert face.outer is outer
        assert face.holes == (hole,)
        assert len(face.edges()) == 8
        assert len(face.all_points()) == 8
        assert face.on_boundary(point(2, 1))
        assert not face.on_boundary(point(2, 2))


class TestFaceArea:
    """area of planar faces"""

    def test_square(self):
        """Test the area of a square."""
        assert close(Face([square(0, 0, 1, 1)], XY).area(), 1.0)

    def test_hole(self):
        """Test the area of a face with a hole."""
        face = Face([square(0, 0, 4, 4), square(1, 1, 3, 3).neg()], XY)
        assert close(face.area(), 12.0)

    def test_disk(self):
        """Test the area of a disk."""
        rim = Circle(point(0, 0, 0), point(0, 0, -1), 1.0)
        face = Face([EdgeLoop([circle_edge(rim)])], XY)
        assert close(face.area(), math.pi)

    def test_rounded_side(self):
        """Test the area of a face with an arc side."""
        bulge = Circle(point(2, 1, 0), point(0, 0, -1), 1.0)
        loop = EdgeLoop([line_edge(point(0, 0), point(0, 2)),
                         line_edge(point(0, 2), point(2, 2)),
                         arc_edge(bulge, point(2, 2), point(2, 0)),
                         line_edge(point(2, 0), point(0, 0))])
        assert close(Face([loop], XY).area(), 4.0 + math.pi / 2.0)

    def test_sphere_area_unsupported(self):
        """Test that spherical area is unsupported."""
        with pytest.raises(UnsupportedCaseError):
            sphere_cap().area()


class TestFaceOperations:
    """orientation, transforms and boundary queries"""

    def test_neg_and_flip(self):
        """Test face reversal and flipping."""
        face = Face([square(0, 0, 1, 1)], XY)
        n = face.neg()
        assert n.surface == XY
        assert vclose(n.boundary_tangent(point(0, 0.5)), point(0, -1, 0))
        f = face.flip()
        assert f.surface == XY.neg()
        assert f.outer == face.outer.neg()
        assert close(f.area(), 1.0)

    def test_boundary_tangent(self):
        """Test boundary tangents."""
        face = Face([square(0, 0, 1, 1)], XY)
        assert vclose(face.boundary_tangent(point(0, 0.5)), point(0, 1, 0))
        assert vclose(face.boundary_tangent(point(0.5, 1)), point(1, 0, 0))
        with pytest.raises(PointNotOnLoopError):
            face.boundary_tangent(point(0.5, 0.5))

    def test_edge_from_to(self):
        """Test geodesic edges across a face."""
        face = Face([square(0, 0, 1, 1)], XY)
        e = face.edge_from_to(point(0, 0), point(1, 1))
        assert close(e.length, math.sqrt(2.0))
        cap = sphere_cap()
        arc = cap.edge_from_to(point(1, 0, 0), point(0, 1, 0))
        assert close(arc.length, math.pi / 2.0)
        assert vclose(arc.midpoint, point(math.sqrt(0.5), math.sqrt(0.5), 0))

    def test_transform(self):
        """Test face transformation."""
        face = Face([square(0, 0, 1, 1)], XY).transform(Translation(point(0, 0, 5)))
        assert face.surface.on_surface(point(3, 3, 5))
        assert close(face.area(), 1.0)
        scaled = Face([square(0, 0, 1, 1)], XY).transform(Scale(3.0))
        assert close(scaled.area(), 9.0)

    def test_transform_sphere(self):
        """Test transformation of a spherical face."""
        cap = sphere_cap()
        moved = cap.transform(Scale(2.0))
        assert close(moved.surface.radius, 2.0)
        with pytest.raises(UnsupportedCaseError):
            cap.transform(Scale(1.0, 2.0, 1.0))

    def test_str(self):
        """Test the text form of a face."""
        text = str(Face([square(0, 0, 1, 1)], XY))
        assert text.startswith('Plane at basis')
        assert text.count('Contour:') == 1
        assert 'Sphere at' in str(sphere_cap())
