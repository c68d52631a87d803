"""Face splitting: cut two same-surface faces at every boundary contact
and tag each fragment by where it lies relative to the other face."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List

from loguru import logger

from brepcore import geom
from brepcore.contains import FacePointContains, point_in_face
from brepcore.errors import PreconditionError
from brepcore.face import Face
from brepcore.intersections import edge_edge_intersection
from brepcore.topology import Edge, Vertex

Point = List[float]


class SplitKind(Enum):
    """Position of a boundary fragment of one face relative to the other."""

    A_IN_B = 'a_in_b'
    A_ON_B_SAME_SIDE = 'a_on_b_same_side'
    A_ON_B_OP_SIDE = 'a_on_b_op_side'
    A_OUT_B = 'a_out_b'
    B_IN_A = 'b_in_a'
    B_ON_A_SAME_SIDE = 'b_on_a_same_side'
    B_ON_A_OP_SIDE = 'b_on_a_op_side'
    B_OUT_A = 'b_out_a'

    @property
    def from_a(self) -> bool:
        return self.value.startswith('a_')


@dataclass(frozen=True)
class FaceSplit:
    """A tagged boundary fragment."""

    kind: SplitKind
    edge: Edge

    @property
    def from_a(self) -> bool:
        return self.kind.from_a


_KINDS = {
    True: (SplitKind.A_IN_B, SplitKind.A_ON_B_SAME_SIDE,
           SplitKind.A_ON_B_OP_SIDE, SplitKind.A_OUT_B),
    False: (SplitKind.B_IN_A, SplitKind.B_ON_A_SAME_SIDE,
            SplitKind.B_ON_A_OP_SIDE, SplitKind.B_OUT_A),
}


def contact_points(face_a: Face, face_b: Face) -> List[Point]:
    """Every point where the boundaries of the two faces meet, including
    the endpoints of coincident stretches."""
    points = []
    for ea in face_a.edges():
        for eb in face_b.edges():
            for record in edge_edge_intersection(ea, eb):
                if isinstance(record, Vertex):
                    points.append(record.point)
                else:
                    points.extend([record.start.point, record.end.point])
    return geom.dedupe(points)


def _classify(edge: Edge, other: Face, is_a: bool) -> FaceSplit:
    in_kind, same_kind, op_kind, out_kind = _KINDS[is_a]
    mid = edge.midpoint
    where = point_in_face(other, mid)
    if where is FacePointContains.INSIDE:
        return FaceSplit(in_kind, edge)
    if where is FacePointContains.OUTSIDE:
        return FaceSplit(out_kind, edge)
    if geom.dot(edge.tangent(mid), other.boundary_tangent(mid)) > 0:
        return FaceSplit(same_kind, edge)
    return FaceSplit(op_kind, edge)


def face_split(face_a: Face, face_b: Face) -> List[FaceSplit]:
    """Split both boundaries at every contact point and classify each
    fragment.  A's fragments come first, in boundary order, followed
    by B's.

    Raises :class:`~brepcore.errors.PreconditionError` if the faces do
    not share the same oriented surface.
    """
    if face_a.surface != face_b.surface:
        raise PreconditionError('faces must have the same surface',
                                details={'a': repr(face_a.surface),
                                         'b': repr(face_b.surface)})
    points = contact_points(face_a, face_b)
    logger.debug('face split: {} contact points', len(points))

    splits = []
    for face, other, is_a in ((face_a, face_b, True), (face_b, face_a, False)):
        for loop in face.boundaries:
            for edge in loop.split_edges(points):
                splits.append(_classify(edge, other, is_a))
    return splits


__all__ = ['SplitKind', 'FaceSplit', 'contact_points', 'face_split']
