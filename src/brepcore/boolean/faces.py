"""Boolean combinations of two faces on the same surface.

Each operation keeps a fixed set of fragment kinds from
:func:`~brepcore.boolean.split.face_split` and hands them to the
remesher:

============  ==========================================================
union         A outside B, B outside A, A on B with the same orientation
intersection  A inside B, B inside A, A on B with the same orientation
difference    A outside B, B inside A (reversed), A on B opposite
============  ==========================================================

Coincident boundary stretches are kept once, from A.
"""

from __future__ import annotations

from typing import List, Optional

from loguru import logger

from brepcore.face import Face

from .remesh import face_remesh, normalize_faces
from .split import FaceSplit, SplitKind, face_split

UNION_KINDS = frozenset({SplitKind.A_OUT_B, SplitKind.B_OUT_A,
                         SplitKind.A_ON_B_SAME_SIDE})
INTERSECTION_KINDS = frozenset({SplitKind.A_IN_B, SplitKind.B_IN_A,
                                SplitKind.A_ON_B_SAME_SIDE})
DIFFERENCE_KINDS = frozenset({SplitKind.A_OUT_B, SplitKind.B_IN_A,
                              SplitKind.A_ON_B_OP_SIDE})


def select(splits: List[FaceSplit], kinds, reverse=frozenset()) -> List[FaceSplit]:
    """Keep fragments whose kind is in ``kinds``; fragments whose kind
    is in ``reverse`` are kept with their edge reversed."""
    result = []
    for s in splits:
        if s.kind not in kinds:
            continue
        if s.kind in reverse:
            s = FaceSplit(s.kind, s.edge.neg())
        result.append(s)
    return result


def _combine(face_a: Face, face_b: Face, kinds, reverse=frozenset()) -> List[Face]:
    splits = select(face_split(face_a, face_b), kinds, reverse)
    loops = face_remesh(splits)
    return normalize_faces(loops, face_a.surface)


def face_union(face_a: Face, face_b: Face) -> Optional[Face]:
    """Union of two faces on the same surface.

    Returns None when the union is not a single face, which happens
    when the faces neither overlap nor touch along a boundary stretch.

    Faces that touch only at isolated boundary points are joined into
    one face: the remesher prefers to continue on the other face's
    boundary, so the result's outer loop passes through each touching
    point twice.  Two squares meeting at a corner give a single
    eight-edge loop through that corner.
    """
    faces = _combine(face_a, face_b, UNION_KINDS)
    if len(faces) != 1:
        logger.debug('union produced {} faces, reporting no single face', len(faces))
        return None
    return faces[0]


def face_intersection(face_a: Face, face_b: Face) -> List[Face]:
    """Overlap of two faces on the same surface; empty when disjoint."""
    return _combine(face_a, face_b, INTERSECTION_KINDS)


def face_difference(face_a: Face, face_b: Face) -> List[Face]:
    """Part of ``face_a`` not covered by ``face_b``."""
    return _combine(face_a, face_b, DIFFERENCE_KINDS, reverse={SplitKind.B_IN_A})


__all__ = ['UNION_KINDS', 'INTERSECTION_KINDS', 'DIFFERENCE_KINDS', 'select',
           'face_union', 'face_intersection', 'face_difference']
