import math

import pytest

from brepcore.boolean import (OPERATIONS, SplitKind, boolean_faces, face_difference,
                              face_intersection, face_split, face_union, get_operation)
from brepcore.boolean.remesh import chain_loops, face_remesh, normalize_faces
from brepcore.contains import FacePointContains, point_in_face
from brepcore.curves import Circle
from brepcore.errors import PreconditionError, RemeshError
from brepcore.face import Face
from brepcore.geom import close, point, vclose
from brepcore.surfaces import Plane, Sphere
from brepcore.topology import EdgeLoop, circle_edge, line_edge, polygon_loop

## unit tests for splitting, remeshing and the face booleans

XY = Plane.from_normal(point(0, 0, 0), point(0, 0, 1))


def rect(x0, y0, x1, y1, surface=XY):
    """Clockwise rectangular face seen from +Z."""
    return Face([polygon_loop([point(x0, y0), point(x0, y1),
                               point(x1, y1), point(x1, y0)])], surface)


def total_area(faces):
    return sum(f.area() for f in faces)


def same_points(f, g):
    """Do two faces have the same boundary vertices, in any order?"""
    p = f.all_points()
    q = g.all_points()
    return (all(any(vclose(x, y) for y in q) for x in p)
            and all(any(vclose(x, y) for y in p) for x in q))


def disk(start=None):
    """Unit disk about the origin, clockwise seen from +Z."""
    rim = Circle(point(0, 0, 0), point(0, 0, -1), 1.0)
    return Face([EdgeLoop([circle_edge(rim, start)])], XY)


class TestFaceSplit:
    """fragment classification"""

    def test_crossing_squares(self):
        """Test fragment kinds for two crossing squares."""
        a = rect(0, 0, 2, 2)
        b = rect(1, 1, 3, 3)
        splits = face_split(a, b)
        kinds = [s.kind for s in splits]
        assert kinds.count(SplitKind.A_IN_B) == 2
        assert kinds.count(SplitKind.A_OUT_B) == 4
        assert kinds.count(SplitKind.B_IN_A) == 2
        assert kinds.count(SplitKind.B_OUT_A) == 4
        ## A's fragments come first
        assert all(s.from_a for s in splits[:6])
        assert not any(s.from_a for s in splits[6:])

    def test_partition(self):
        """Test that fragments cover both boundaries exactly once."""
        a = rect(0, 0, 1, 1)
        b = rect(0.5, 0, 1.5, 1)
        splits = face_split(a, b)
        assert close(sum(s.edge.length for s in splits if s.from_a), a.outer.length)
        assert close(sum(s.edge.length for s in splits if not s.from_a), b.outer.length)

    def test_partition_circular_edge(self):
        """Test fragment coverage when a circle starts on a crossing."""
        ## the circle starts on one of the two crossings
        a = disk(point(0, 1))
        b = rect(0, -2, 2, 2)
        splits = face_split(a, b)
        kinds = [s.kind for s in splits if s.from_a]
        assert kinds.count(SplitKind.A_IN_B) == 1
        assert kinds.count(SplitKind.A_OUT_B) == 1
        assert close(sum(s.edge.length for s in splits if s.from_a), 2.0 * math.pi)
        assert close(sum(s.edge.length for s in splits if not s.from_a), 16.0)

    def test_shared_edges(self):
        """Test classification of boundary stretches shared in the same sense."""
        splits = face_split(rect(0, 0, 1, 1), rect(0.5, 0, 1.5, 1))
        kinds = [s.kind for s in splits]
        assert kinds.count(SplitKind.A_ON_B_SAME_SIDE) == 2
        assert kinds.count(SplitKind.B_ON_A_SAME_SIDE) == 2
        assert SplitKind.A_ON_B_OP_SIDE not in kinds

    def test_opposite_edges(self):
        """Test classification of boundary stretches shared in opposite senses."""
        splits = face_split(rect(0, 0, 1, 1), rect(1, 0, 2, 1))
        kinds = [s.kind for s in splits]
        assert kinds.count(SplitKind.A_ON_B_OP_SIDE) == 1
        assert kinds.count(SplitKind.B_ON_A_OP_SIDE) == 1

    def test_different_surfaces(self):
        """Test that faces on different surfaces are rejected."""
        other = Plane.from_normal(point(0, 0, 1), point(0, 0, 1))
        with pytest.raises(PreconditionError):
            face_split(rect(0, 0, 1, 1), rect(0, 0, 1, 1, other))
        with pytest.raises(PreconditionError):
            face_union(rect(0, 0, 1, 1), rect(0, 0, 1, 1).flip())


class TestRemesh:
    """reassembly of fragments into loops and faces"""

    def test_loops_close(self):
        """Test that remeshed loops are closed."""
        splits = face_split(rect(0, 0, 2, 2), rect(1, 1, 3, 3))
        loops = face_remesh(splits)
        assert len(loops) == 2
        for loop in loops:
            assert loop.edges[-1].end == loop.edges[0].start

    def test_dead_end(self):
        """Test the error raised when a chain cannot be continued."""
        with pytest.raises(RemeshError) as err:
            chain_loops([[line_edge(point(0, 0), point(1, 0))]], [])
        assert err.value.details['chain_length'] == 1
        assert err.value.details['remaining_b'] == 0

    def test_prefers_other_pool(self):
        """Test that chaining switches pools at a shared vertex."""
        ## two triangles sharing the origin chain into one figure-eight
        a = [[line_edge(point(-1, 0), point(0, 0))],
             [line_edge(point(0, 0), point(-1, 1))],
             [line_edge(point(-1, 1), point(-1, 0))]]
        b = [[line_edge(point(0, 0), point(1, 0))],
             [line_edge(point(1, 0), point(1, 1))],
             [line_edge(point(1, 1), point(0, 0))]]
        loops = chain_loops(a, b)
        assert len(loops) == 1
        assert len(loops[0]) == 6

    def test_normalize_nesting(self):
        """Test grouping of nested loops into faces with holes."""
        outer = polygon_loop([point(0, 0), point(0, 4), point(4, 4), point(4, 0)])
        hole = polygon_loop([point(1, 1), point(3, 1), point(3, 3), point(1, 3)])
        island = polygon_loop([point(1.5, 1.5), point(1.5, 2.5), point(2.5, 2.5),
                               point(2.5, 1.5)])
        faces = normalize_faces([hole, island, outer], XY)
        assert len(faces) == 2
        assert faces[0].outer is island and faces[0].holes == ()
        assert faces[1].outer is outer and faces[1].holes == (hole,)
        assert close(total_area(faces), 13.0)


class TestFaceBooleans:
    """union, intersection and difference of planar faces"""

    def test_offset_squares(self):
        """Test booleans of squares sharing two edge stretches."""
        a = rect(0, 0, 1, 1)
        b = rect(0.5, 0, 1.5, 1)
        assert close(face_union(a, b).area(), 1.5)
        assert close(total_area(face_intersection(a, b)), 0.5)
        assert close(total_area(face_difference(a, b)), 0.5)
        assert close(total_area(face_difference(b, a)), 0.5)

    def test_crossing_squares(self):
        """Test booleans of two crossing squares."""
        a = rect(0, 0, 2, 2)
        b = rect(1, 1, 3, 3)
        union = face_union(a, b)
        assert close(union.area(), 7.0)
        assert close(union.outer.length, 12.0)
        inter = face_intersection(a, b)
        assert len(inter) == 1
        assert close(inter[0].area(), 1.0)
        assert close(total_area(face_difference(a, b)), 3.0)

    def test_result_orientation(self):
        """Test that results keep the boundary orientation convention."""
        inter = face_intersection(rect(0, 0, 2, 2), rect(1, 1, 3, 3))[0]
        assert point_in_face(inter, point(1.5, 1.5)) is FacePointContains.INSIDE
        assert inter.boundary_tangent(point(1, 1.5))[1] > 0

    def test_commutative(self):
        """Test that union and intersection ignore operand order."""
        a = rect(0, 0, 2, 2)
        b = rect(1, 1, 3, 3)
        ab = face_union(a, b)
        ba = face_union(b, a)
        assert ab.outer == ba.outer
        assert same_points(ab, ba)
        assert close(ab.area(), ba.area())
        ab = face_intersection(a, b)
        ba = face_intersection(b, a)
        assert len(ab) == len(ba) == 1
        assert ab[0].outer == ba[0].outer
        assert same_points(ab[0], ba[0])

    def test_commutative_disk(self):
        """Test operand order independence with a circular boundary."""
        a = disk()
        b = rect(0, -2, 2, 2)
        ab = face_union(a, b)
        ba = face_union(b, a)
        assert ab.outer == ba.outer
        assert same_points(ab, ba)
        assert close(ab.area(), ba.area())

    def test_idempotent(self):
        """Test combining a square with itself."""
        a = rect(0, 0, 1, 1)
        assert face_union(a, a).outer == a.outer
        assert same_points(face_union(a, a), a)
        assert face_intersection(a, a)[0].outer == a.outer
        assert face_difference(a, a) == []

    def test_idempotent_disk(self):
        """Test combining a disk with itself."""
        a = disk()
        union = face_union(a, a)
        assert union.outer == a.outer
        assert same_points(union, a)
        inter = face_intersection(a, a)
        assert len(inter) == 1 and inter[0].outer == a.outer
        assert face_difference(a, a) == []

    def test_disjoint(self):
        """Test booleans of faces that do not meet."""
        a = rect(0, 0, 1, 1)
        b = rect(2, 0, 3, 1)
        assert face_union(a, b) is None
        assert face_intersection(a, b) == []
        diff = face_difference(a, b)
        assert len(diff) == 1 and close(diff[0].area(), 1.0)

    def test_corner_touch(self):
        """Test union of squares meeting at one corner."""
        a = rect(0, 0, 1, 1)
        b = rect(1, 1, 2, 2)
        union = face_union(a, b)
        assert len(union.boundaries) == 1
        assert len(union.outer) == 8
        corner = [p for p in union.outer.all_points() if vclose(p, point(1, 1))]
        assert len(corner) == 2
        assert close(union.area(), 2.0)
        assert face_intersection(a, b) == []

    def test_adjacent(self):
        """Test booleans of squares sharing a whole edge."""
        a = rect(0, 0, 1, 1)
        b = rect(1, 0, 2, 1)
        assert close(face_union(a, b).area(), 2.0)
        assert face_intersection(a, b) == []
        assert close(total_area(face_difference(a, b)), 1.0)

    def test_hole(self):
        """Test difference that cuts a hole."""
        a = rect(0, 0, 4, 4)
        b = rect(1, 1, 3, 3)
        diff = face_difference(a, b)
        assert len(diff) == 1
        assert len(diff[0].holes) == 1
        assert close(diff[0].area(), 12.0)
        assert point_in_face(diff[0], point(2, 2)) is FacePointContains.OUTSIDE
        assert close(face_union(a, b).area(), 16.0)
        assert close(total_area(face_intersection(a, b)), 4.0)
        assert face_difference(b, a) == []

    def test_disks(self):
        """Test booleans of a disk and a square."""
        a = disk()
        square = rect(0, -2, 2, 2)
        assert close(total_area(face_intersection(a, square)), math.pi / 2.0)
        assert close(face_union(a, square).area(), 8.0 + math.pi / 2.0)
        assert close(total_area(face_difference(a, square)), math.pi / 2.0)

    def test_spherical_caps(self):
        """Test booleans of nested caps on a sphere."""
        sphere = Sphere(point(0, 0, 0), 1.0)
        upper = Face([EdgeLoop([circle_edge(Circle(point(0, 0, 0), point(0, 0, -1), 1.0))])],
                     sphere)
        cap = Face([EdgeLoop([circle_edge(Circle(point(0, 0, 0.5), point(0, 0, -1),
                                                 math.sqrt(0.75)))])], sphere)
        assert face_union(upper, cap).outer == upper.outer
        inter = face_intersection(upper, cap)
        assert len(inter) == 1 and inter[0].outer == cap.outer
        band = face_difference(upper, cap)
        assert len(band) == 1 and len(band[0].holes) == 1
        on_band = point(math.sqrt(0.96), 0, 0.2)
        assert point_in_face(band[0], on_band) is FacePointContains.INSIDE
        assert point_in_face(band[0], point(0, 0, 1)) is FacePointContains.OUTSIDE


class TestRegistry:
    """lookup of boolean operations by name"""

    def test_lookup(self):
        """Test operation lookup by name."""
        assert set(OPERATIONS) == {'union', 'intersection', 'difference'}
        assert get_operation('union') is face_union
        with pytest.raises(ValueError):
            get_operation('xor')

    def test_boolean_faces(self):
        """Test dispatch through the registry."""
        a = rect(0, 0, 2, 2)
        b = rect(1, 1, 3, 3)
        assert close(total_area(boolean_faces('intersection', a, b)), 1.0)
