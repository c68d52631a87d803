"""General intersection of two faces.

The result depends on how the carrier surfaces meet:

* surfaces do not meet - ``None``;
* surfaces cross along curves or touch at points - :class:`EdgesAndPoints`
  holding the pieces of those curves and the points that lie in both
  faces (``None`` if nothing survives);
* surfaces coincide - :class:`Faces` with the overlap regions.  When the
  overlap has no area the faces may still touch along boundary
  stretches or at points; that contact is reported as
  :class:`EdgesAndPoints`.  Coincident curved surfaces give
  :class:`~brepcore.errors.Unsupported`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple, Union

from loguru import logger

from brepcore import geom
from brepcore.contains import FacePointContains, point_in_face
from brepcore.curves import Curve, Line
from brepcore.errors import Unsupported
from brepcore.face import Face
from brepcore.intersections import (Coincident, CurvesAndPoints, curve_edge_intersection,
                                    edge_edge_intersection, surface_surface_intersection)
from brepcore.surfaces import Plane
from brepcore.topology import Edge, Vertex

from .faces import INTERSECTION_KINDS, select
from .remesh import face_remesh, normalize_faces
from .split import SplitKind, contact_points, face_split

Point = List[float]


@dataclass(frozen=True)
class EdgesAndPoints:
    """Lower-dimensional intersection: isolated points and edges."""

    points: List[Point] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)


@dataclass(frozen=True)
class Faces:
    """Two-dimensional overlap of faces on a common surface."""

    faces: List[Face] = field(default_factory=list)


FaceFaceIntersection = Union[None, EdgesAndPoints, Faces, Unsupported]


def _record_points(records) -> List[Point]:
    points = []
    for r in records:
        if isinstance(r, Vertex):
            points.append(r.point)
        else:
            points.extend([r.start.point, r.end.point])
    return points


def _outside(face: Face, p: Point) -> bool:
    return point_in_face(face, p) is FacePointContains.OUTSIDE


def _loose_points(points: List[Point], edges: List[Edge]) -> List[Point]:
    return [p for p in geom.dedupe(points) if not any(e.on_edge(p) for e in edges)]


def curve_face_intersection(curve: Curve, face: Face) -> Tuple[List[Edge], List[Point]]:
    """Pieces of an unbounded carrier curve lying in ``face``.

    ``curve`` must lie on the face's surface.  Returns the edges along
    ``curve`` (oriented with its parameter) that lie in the face, and
    the points where the curve only touches the face boundary.
    """
    cuts = []
    for edge in face.edges():
        cuts.extend(_record_points(curve_edge_intersection(curve, edge)))
    cuts = geom.dedupe(cuts)
    cuts.sort(key=curve.param)

    if isinstance(curve, Line):
        spans = list(zip(cuts[:-1], cuts[1:]))
    elif cuts:
        spans = list(zip(cuts, cuts[1:] + cuts[:1]))
    else:
        start = curve.point_at(0.0)
        spans = [(start, start)] if not _outside(face, start) else []
        cuts = []

    edges = []
    for p, q in spans:
        edge = Edge(Vertex(p), Vertex(q), curve)
        if not _outside(face, edge.midpoint):
            edges.append(edge)
    return edges, _loose_points(cuts, edges)


def face_edge_intersection(face: Face, edge: Edge) -> Tuple[List[Point], List[Edge]]:
    """Pieces of ``edge`` that lie in ``face``, plus the isolated points
    where it only touches the face boundary."""
    cuts = []
    for other in face.edges():
        cuts.extend(_record_points(edge_edge_intersection(edge, other)))
    cuts = geom.dedupe(cuts)
    edges = [piece for piece in edge.split(cuts) if not _outside(face, piece.midpoint)]
    return _loose_points(cuts, edges), edges


def _transverse(face_a: Face, face_b: Face, meet: CurvesAndPoints) -> FaceFaceIntersection:
    points = [p for p in meet.points
              if not _outside(face_a, p) and not _outside(face_b, p)]
    edges = []
    for curve in meet.curves:
        a_edges, a_points = curve_face_intersection(curve, face_a)
        for edge in a_edges:
            pts, es = face_edge_intersection(face_b, edge)
            points.extend(pts)
            edges.extend(es)
        points.extend(p for p in a_points if not _outside(face_b, p))
    points = _loose_points(points, edges)
    if not points and not edges:
        return None
    return EdgesAndPoints(points, edges)


def _coincident(face_a: Face, face_b: Face) -> FaceFaceIntersection:
    if not isinstance(face_a.surface, Plane):
        return Unsupported('curve extraction on coincident curved surfaces')
    if face_b.surface != face_a.surface:
        face_b = face_b.flip()
    splits = face_split(face_a, face_b)
    kept = select(splits, INTERSECTION_KINDS)
    if kept:
        faces = normalize_faces(face_remesh(kept), face_a.surface)
        if faces:
            return Faces(faces)

    edges = [s.edge for s in splits
             if s.kind in (SplitKind.A_ON_B_SAME_SIDE, SplitKind.A_ON_B_OP_SIDE)]
    points = _loose_points(contact_points(face_a, face_b), edges)
    logger.debug('coincident faces touch along {} edges and {} points',
                 len(edges), len(points))
    if not points and not edges:
        return None
    return EdgesAndPoints(points, edges)


def face_face_intersection(face_a: Face, face_b: Face) -> FaceFaceIntersection:
    """Intersect two faces."""
    meet = surface_surface_intersection(face_a.surface, face_b.surface)
    if meet is None:
        return None
    if isinstance(meet, Coincident):
        return _coincident(face_a, face_b)
    return _transverse(face_a, face_b, meet)


__all__ = ['EdgesAndPoints', 'Faces', 'FaceFaceIntersection', 'curve_face_intersection',
           'face_edge_intersection', 'face_face_intersection']
