"""Union of two closed loops without a face or surface context.

Both loops are cut at every point where they meet.  The arcs of each
loop are classified against the other loop; a contact point is a
crossing only where the other loop's arcs pass from inside to outside
(stretches running along the first loop are skipped over).  Touching
at a point is therefore not a crossing.

When the loops cross, the arcs that lie outside the other loop, plus
A's arcs that run along B in the same direction, are chained with the
remesher's chain builder.  The loop holding the lexicographically
smallest vertex is the union boundary; other loops are interior
artifacts and are dropped.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from loguru import logger

from brepcore import geom
from brepcore.contains import FacePointContains, loop_plane, point_in_loop
from brepcore.errors import RemeshError
from brepcore.intersections import edge_edge_intersection
from brepcore.surfaces import Plane
from brepcore.topology import Edge, EdgeLoop, Vertex

from .remesh import chain_loops

Point = List[float]
Arc = List[Edge]


def loop_contacts(loop_a: EdgeLoop, loop_b: EdgeLoop) -> List[Point]:
    """Points where two loops meet, one per location."""
    points = []
    for ea in loop_a:
        for eb in loop_b:
            for record in edge_edge_intersection(ea, eb):
                if isinstance(record, Vertex):
                    points.append(record.point)
                else:
                    points.extend([record.start.point, record.end.point])
    return geom.dedupe(points)


def _classify(arc: Arc, other: EdgeLoop, plane: Plane) -> FacePointContains:
    return point_in_loop(other, arc[0].midpoint, plane)


def _same_direction(arc: Arc, other: EdgeLoop) -> bool:
    mid = arc[0].midpoint
    return geom.dot(arc[0].tangent(mid), other.tangent(mid)) > 0


def _classified_arcs(loop: EdgeLoop, other: EdgeLoop, cuts: Sequence[Point],
                     plane: Plane) -> List[Tuple[Arc, FacePointContains]]:
    return [(arc, _classify(arc, other, plane)) for arc in loop.cutting_split(cuts)]


def _aligned(loop_a: EdgeLoop, loop_b: EdgeLoop) -> Tuple[Plane, EdgeLoop]:
    """Plane of ``loop_a`` and ``loop_b`` turned to run the same way."""
    plane = loop_plane(loop_a)
    other = loop_plane(loop_b)
    if geom.dot(plane.normal_vector, other.normal_vector) < 0:
        loop_b = loop_b.neg()
    return plane, loop_b


def _crossings(arcs: Sequence[Tuple[Arc, FacePointContains]]) -> List[Point]:
    sides = [(arc[0].start.point, where) for arc, where in arcs
             if where is not FacePointContains.ON_BOUNDARY]
    points = []
    for k, (p, where) in enumerate(sides):
        if where is not sides[k - 1][1]:
            points.append(p)
    return points


def crossing_points(loop_a: EdgeLoop, loop_b: EdgeLoop) -> List[Point]:
    """Contact points where ``loop_b`` passes from one side of
    ``loop_a`` to the other."""
    cuts = loop_contacts(loop_a, loop_b)
    if not cuts:
        return []
    plane, loop_b = _aligned(loop_a, loop_b)
    return _crossings(_classified_arcs(loop_b, loop_a, cuts, plane))


def loop_union(loop_a: EdgeLoop, loop_b: EdgeLoop) -> Optional[EdgeLoop]:
    """Boundary of the union of two crossing loops.

    Returns None when the loops do not cross, except that two loops
    tracing the same curve return ``loop_a``.
    """
    cuts = loop_contacts(loop_a, loop_b)
    plane, loop_b = _aligned(loop_a, loop_b)
    arcs_b = _classified_arcs(loop_b, loop_a, cuts, plane) if cuts else []
    crossings = _crossings(arcs_b)
    logger.debug('loop union: {} contacts, {} crossings', len(cuts), len(crossings))
    if not crossings:
        return loop_a if loop_a.same_geometry(loop_b) else None
    if len(crossings) % 2:
        details = {'crossings': [geom.vstr(p) for p in crossings]}
        logger.error('odd number of loop crossings: {}', details)
        raise RemeshError('loops cross an odd number of times', details=details)

    arcs_a = _classified_arcs(loop_a, loop_b, cuts, plane)
    keep_a = [arc for arc, where in arcs_a
              if where is FacePointContains.OUTSIDE
              or (where is FacePointContains.ON_BOUNDARY and _same_direction(arc, loop_b))]
    keep_b = [arc for arc, where in arcs_b if where is FacePointContains.OUTSIDE]
    loops = chain_loops(keep_a, keep_b)

    lowest = geom.lexmin([p for loop in loops for p in loop.all_points()])
    return next(loop for loop in loops if loop.contains(lowest))


__all__ = ['loop_contacts', 'crossing_points', 'loop_union']
