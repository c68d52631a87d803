"""Reassembly of tagged boundary fragments into closed loops and faces.

Loops are built greedily.  A chain starts from the first unused piece
and grows by appending an unused piece whose start matches the chain's
open end, looking first in the pool opposite to the one the previous
piece came from and then in the same pool.  The chain is emitted as a
loop as soon as its end meets its start.  Every crossing vertex has an
even number of selected piece ends, so a consistent classification
always offers a continuation; running out of candidates means the
classification was wrong and raises :class:`RemeshError`.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from loguru import logger

from brepcore import geom
from brepcore.contains import FacePointContains, point_in_loop
from brepcore.errors import RemeshError
from brepcore.face import Face
from brepcore.surfaces import Plane, Surface
from brepcore.topology import Edge, EdgeLoop, Vertex

from .split import FaceSplit

Piece = List[Edge]


def _take(pool: List[Piece], vertex: Vertex) -> Optional[Piece]:
    for i, piece in enumerate(pool):
        if piece[0].start == vertex:
            return pool.pop(i)
    return None


def chain_loops(pieces_a: Sequence[Piece], pieces_b: Sequence[Piece]) -> List[EdgeLoop]:
    """Chain pieces from two pools into closed loops.

    A piece is a connected list of edges.  Pieces from ``pieces_a`` are
    consumed first.
    """
    pools = [list(pieces_a), list(pieces_b)]
    loops = []
    while pools[0] or pools[1]:
        side = 0 if pools[0] else 1
        chain = list(pools[side].pop(0))
        start = chain[0].start
        while chain[-1].end != start:
            end = chain[-1].end
            piece = _take(pools[1 - side], end)
            if piece is not None:
                side = 1 - side
            else:
                piece = _take(pools[side], end)
            if piece is None:
                details = {'open_end': geom.vstr(end.point),
                           'chain_start': geom.vstr(start.point),
                           'chain_length': len(chain),
                           'remaining_a': len(pools[0]),
                           'remaining_b': len(pools[1])}
                logger.error('no continuation for open chain: {}', details)
                raise RemeshError('no continuation segment for open loop', details=details)
            chain.extend(piece)
        logger.debug('closed loop of {} edges', len(chain))
        loops.append(EdgeLoop(chain))
    return loops


def face_remesh(splits: Sequence[FaceSplit]) -> List[EdgeLoop]:
    """Reassemble selected fragments into closed loops."""
    pieces_a = [[s.edge] for s in splits if s.from_a]
    pieces_b = [[s.edge] for s in splits if not s.from_a]
    return chain_loops(pieces_a, pieces_b)


def _probe(loop: EdgeLoop, others: Sequence[EdgeLoop]) -> List[float]:
    """A point of ``loop`` that lies on none of the ``others``."""
    candidates = [e.midpoint for e in loop]
    for p in candidates:
        if not any(other.contains(p) for other in others):
            return p
    return candidates[0]


def normalize_faces(loops: Sequence[EdgeLoop], surface: Surface) -> List[Face]:
    """Group loops into faces by nesting.

    A loop enclosed by an even number of other loops starts a face; a
    loop enclosed by an odd number is a hole of the innermost loop
    around it.  On planes the outer boundary of each face is the loop
    holding the lexicographically smallest vertex of the group.
    """
    loops = list(loops)
    containers = []
    for i, loop in enumerate(loops):
        others = [other for j, other in enumerate(loops) if j != i]
        probe = _probe(loop, others)
        containers.append([j for j, other in enumerate(loops) if j != i and
                           point_in_loop(other, probe, surface) is FacePointContains.INSIDE])

    depth = [len(c) for c in containers]
    groups = {i: [i] for i in range(len(loops)) if depth[i] % 2 == 0}
    for i in range(len(loops)):
        if depth[i] % 2 == 1:
            parent = max(containers[i], key=lambda j: depth[j])
            groups.setdefault(parent, [parent]).append(i)

    faces = []
    for root in sorted(groups):
        members = groups[root]
        if isinstance(surface, Plane):
            lowest = geom.lexmin([p for k in members for p in loops[k].all_points()])
            outer = next(k for k in members if loops[k].contains(lowest))
            members = [outer] + [k for k in members if k != outer]
        faces.append(Face([loops[k] for k in members], surface))
    logger.debug('normalized {} loops into {} faces', len(loops), len(faces))
    return faces


__all__ = ['chain_loops', 'face_remesh', 'normalize_faces']
