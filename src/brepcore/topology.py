# -*- coding: utf-8 -*-
"""Boundary model: vertices, oriented edges and closed edge loops.

All three types are immutable.  Loops hold references to their edges,
and an edge that an operation leaves untouched is handed on to the
result by reference, so two loops may share the same ``Edge`` object.
Equality is geometric and uses :data:`brepcore.geom.EQ_THRESHOLD`.

Edge parametrisation
====================

Every edge has a local parameter ``t`` that runs from ``0`` at
``start`` to ``edge.span`` at ``end``.  For a line edge ``t`` is arc
length; for a circular edge it is the swept angle.  A circular edge
whose start and end coincide is a full circle with span ``2*pi``.

Loop parametrisation
====================

A loop is parametrised by arc length measured from the start of its
first edge, so ``loop.point_at(0)`` is ``loop.edges[0].start.point``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np
from loguru import logger

from brepcore import geom
from brepcore import xform
from brepcore.curves import Circle, Curve, Line
from brepcore.errors import (PointNotOnLoopError, PreconditionError, Unsupported,
                             UnsupportedCaseError)

Point = List[float]


class Direction(Enum):
    """Orientation of an edge relative to its curve's parameter."""

    INCREASING = 1
    DECREASING = -1

    def flip(self) -> 'Direction':
        return Direction.DECREASING if self is Direction.INCREASING else Direction.INCREASING


class EdgeContains(Enum):
    """Where a point sits relative to an edge."""

    INSIDE = 'inside'
    ON_POINT = 'on_point'
    OUTSIDE = 'outside'


@dataclass(frozen=True, eq=False)
class Vertex:
    """A boundary point, compared by position within tolerance."""

    point: Point

    def __post_init__(self) -> None:
        object.__setattr__(self, 'point', geom.point(self.point))

    def __eq__(self, other) -> bool:
        if isinstance(other, Vertex):
            return geom.vclose(self.point, other.point)
        return NotImplemented

    __hash__ = None

    def __repr__(self) -> str:
        return 'Vertex({})'.format(geom.vstr(self.point))


def _as_vertex(v) -> Vertex:
    return v if isinstance(v, Vertex) else Vertex(v)


@dataclass(frozen=True, eq=False)
class Edge:
    """Oriented segment of ``curve`` from ``start`` to ``end``."""

    start: Vertex
    end: Vertex
    curve: Curve
    direction: Direction = Direction.INCREASING

    def __post_init__(self) -> None:
        object.__setattr__(self, 'start', _as_vertex(self.start))
        object.__setattr__(self, 'end', _as_vertex(self.end))
        for v in (self.start, self.end):
            if not self.curve.on_curve(v.point):
                raise PreconditionError('edge endpoint is not on its curve',
                                        details={'point': geom.vstr(v.point),
                                                 'curve': repr(self.curve)})
        if isinstance(self.curve, Line):
            delta = self.curve.param(self.end.point) - self.curve.param(self.start.point)
            if abs(delta) < geom.EQ_THRESHOLD:
                raise PreconditionError('zero-length line edge',
                                        details={'point': geom.vstr(self.start.point)})
            if delta * self.direction.value < 0:
                raise PreconditionError('line edge runs against its direction flag',
                                        details={'start': geom.vstr(self.start.point),
                                                 'end': geom.vstr(self.end.point)})

    @property
    def sign(self) -> int:
        return self.direction.value

    @property
    def is_closed(self) -> bool:
        return self.start == self.end

    @property
    def span(self) -> float:
        """Local parameter range: length for lines, swept angle for circles."""
        if isinstance(self.curve, Line):
            return abs(self.curve.param(self.end.point) - self.curve.param(self.start.point))
        if self.is_closed:
            return geom.pi2
        return self._angle_from_start(self.end.point)

    def _angle_from_start(self, p: Point) -> float:
        a = (self.curve.param(p) - self.curve.param(self.start.point)) * self.sign
        return a % geom.pi2

    def local(self, p: Point) -> float:
        """Local parameter of a point on the carrier, without range checks."""
        if isinstance(self.curve, Line):
            return (self.curve.param(p) - self.curve.param(self.start.point)) * self.sign
        return self._angle_from_start(p)

    def point_at(self, t: float) -> Point:
        s0 = self.curve.param(self.start.point)
        return self.curve.point_at(s0 + self.sign * t)

    def project(self, p: Point) -> Optional[float]:
        """Local parameter of ``p`` if it lies on the edge, else None."""
        if geom.vclose(p, self.start.point):
            return 0.0
        if geom.vclose(p, self.end.point):
            return self.span
        if not self.curve.on_curve(p):
            return None
        t = self.local(p)
        slack = geom.EQ_THRESHOLD
        if isinstance(self.curve, Circle):
            slack /= self.curve.radius
        span = self.span
        if -slack <= t <= span + slack:
            return min(max(t, 0.0), span)
        return None

    def contains(self, p: Point) -> EdgeContains:
        if geom.vclose(p, self.start.point) or geom.vclose(p, self.end.point):
            return EdgeContains.ON_POINT
        if self.project(p) is None:
            return EdgeContains.OUTSIDE
        return EdgeContains.INSIDE

    def on_edge(self, p: Point) -> bool:
        return self.contains(p) is not EdgeContains.OUTSIDE

    def tangent(self, p: Point) -> Point:
        t = self.curve.tangent(p)
        return t if self.sign > 0 else geom.negate(t)

    @property
    def length(self) -> float:
        if isinstance(self.curve, Circle):
            return self.span * self.curve.radius
        return self.span

    @property
    def midpoint(self) -> Point:
        return self.point_at(self.span / 2.0)

    def neg(self) -> 'Edge':
        return Edge(self.end, self.start, self.curve, self.direction.flip())

    def subedge(self, p: Point, q: Point) -> 'Edge':
        return Edge(Vertex(p), Vertex(q), self.curve, self.direction)

    def split(self, points: Iterable[Point]) -> List['Edge']:
        """Split at every point strictly inside the edge.  Returns
        ``[self]`` when nothing cuts it."""
        span = self.span
        cuts = []
        for p in points:
            t = self.project(p)
            if t is None or t <= 0.0 or t >= span:
                continue
            if geom.vclose(p, self.start.point) or geom.vclose(p, self.end.point):
                continue
            if any(geom.vclose(p, c) for _, c in cuts):
                continue
            cuts.append((t, geom.point(p)))
        if not cuts:
            return [self]
        cuts.sort(key=lambda c: c[0])
        stops = [self.start.point] + [c[1] for c in cuts] + [self.end.point]
        return [self.subedge(a, b) for a, b in zip(stops[:-1], stops[1:])]

    def rasterize(self, segments: int = None) -> List[Point]:
        """Sample points from start to end inclusive."""
        if isinstance(self.curve, Line):
            return [self.start.point, self.end.point]
        span = self.span
        if segments is None:
            segments = max(2, int(np.ceil(span / geom.pi2 * geom.RASTER_SEGMENTS)))
        samples = [self.point_at(t) for t in np.linspace(0.0, span, segments + 1)]
        samples[0] = self.start.point
        samples[-1] = self.end.point
        return samples

    def transform(self, m: xform.Matrix) -> 'Edge':
        curve = self.curve.transform(m)
        if isinstance(curve, Unsupported):
            raise UnsupportedCaseError(curve.reason, details={'curve': repr(self.curve)})
        return Edge(xform.transform_point(m, self.start.point),
                    xform.transform_point(m, self.end.point),
                    curve, self.direction)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Edge):
            return NotImplemented
        if not (self.start == other.start and self.end == other.end):
            return False
        if not self.curve.same_carrier(other.curve):
            return False
        mid = self.midpoint
        return (other.on_edge(mid)
                and geom.vclose(self.tangent(mid), other.tangent(mid)))

    __hash__ = None

    def __repr__(self) -> str:
        return 'Edge({} -> {}, {})'.format(geom.vstr(self.start.point),
                                           geom.vstr(self.end.point),
                                           type(self.curve).__name__)


def line_edge(p: Point, q: Point) -> Edge:
    """Straight edge from ``p`` to ``q``."""
    return Edge(Vertex(p), Vertex(q), Line(p, geom.sub(q, p)))


def circle_edge(circle: Circle, start: Point = None,
                direction: Direction = Direction.INCREASING) -> Edge:
    """Full-circle edge beginning and ending at ``start`` (angle zero
    of the circle by default)."""
    if start is None:
        start = circle.point_at(0.0)
    return Edge(Vertex(start), Vertex(start), circle, direction)


def arc_edge(circle: Circle, start: Point, end: Point,
             direction: Direction = Direction.INCREASING) -> Edge:
    return Edge(Vertex(start), Vertex(end), circle, direction)


def polygon_loop(points: Sequence[Point]) -> 'EdgeLoop':
    """Closed loop of straight edges through ``points`` in order."""
    n = len(points)
    return EdgeLoop([line_edge(points[i], points[(i + 1) % n]) for i in range(n)])


@dataclass(frozen=True, eq=False)
class EdgeLoop:
    """Closed, connected cycle of edges."""

    edges: Tuple[Edge, ...]

    def __post_init__(self) -> None:
        edges = tuple(self.edges)
        if not edges:
            raise PreconditionError('edge loop needs at least one edge')
        n = len(edges)
        for i in range(n):
            if edges[i].end != edges[(i + 1) % n].start:
                raise PreconditionError(
                    'edge loop is not connected',
                    details={'index': i,
                             'end': geom.vstr(edges[i].end.point),
                             'next_start': geom.vstr(edges[(i + 1) % n].start.point)})
        object.__setattr__(self, 'edges', edges)

    def __len__(self) -> int:
        return len(self.edges)

    def __iter__(self):
        return iter(self.edges)

    @property
    def length(self) -> float:
        return sum(e.length for e in self.edges)

    def vertices(self) -> List[Vertex]:
        return [e.start for e in self.edges]

    def all_points(self) -> List[Point]:
        return [e.start.point for e in self.edges]

    def _locate(self, p: Point) -> Optional[Tuple[int, float]]:
        """``(edge index, local parameter)`` of ``p``; a point at the
        end of an edge is reported at the start of the next one."""
        n = len(self.edges)
        for i, e in enumerate(self.edges):
            if geom.vclose(p, e.start.point):
                return i, 0.0
        for i, e in enumerate(self.edges):
            t = e.project(p)
            if t is None:
                continue
            if geom.vclose(e.point_at(t), e.end.point):
                return (i + 1) % n, 0.0
            return i, t
        return None

    def contains(self, p: Point) -> bool:
        """Does ``p`` lie on the loop?"""
        return self._locate(p) is not None

    def project(self, p: Point) -> Optional[float]:
        """Arc-length parameter of ``p``, or None if it is off the loop."""
        loc = self._locate(p)
        if loc is None:
            return None
        i, t = loc
        along = sum(e.length for e in self.edges[:i])
        e = self.edges[i]
        if isinstance(e.curve, Circle):
            t *= e.curve.radius
        return along + t

    def point_at(self, u: float) -> Point:
        total = self.length
        u = u % total
        for e in self.edges:
            if u <= e.length:
                t = u / e.curve.radius if isinstance(e.curve, Circle) else u
                return e.point_at(t)
            u -= e.length
        return self.edges[-1].end.point

    def tangent(self, p: Point) -> Point:
        """Tangent of the edge running through ``p``; at a vertex the
        outgoing edge is used."""
        loc = self._locate(p)
        if loc is None:
            raise PointNotOnLoopError('point is not on loop',
                                      details={'point': geom.vstr(p)})
        return self.edges[loc[0]].tangent(p)

    def get_subcurve(self, start: Point, end: Point) -> List[Edge]:
        """Edges of the loop from ``start`` forward to ``end``.

        Whole edges are reused by reference.  When ``start`` and ``end``
        coincide the entire loop is returned, rotated to begin at
        ``start``.
        """
        a = self._locate(start)
        b = self._locate(end)
        if a is None or b is None:
            raise PointNotOnLoopError(
                'subcurve endpoint is not on loop',
                details={'start': geom.vstr(start), 'end': geom.vstr(end),
                         'start_found': a is not None, 'end_found': b is not None})
        n = len(self.edges)
        i, ti = a
        j, tj = b
        if i == j and tj > ti and not geom.vclose(start, end):
            return [self.edges[i].subedge(start, end)]

        ei = self.edges[i]
        result = [ei] if ti == 0.0 else [ei.subedge(start, ei.end.point)]
        k = (i + 1) % n
        while k != j:
            result.append(self.edges[k])
            k = (k + 1) % n
        if tj > 0.0:
            result.append(self.edges[j].subedge(self.edges[j].start.point, end))
        return result

    def cutting_split(self, points: Iterable[Point]) -> List[List[Edge]]:
        """Cut the loop at ``points`` into arcs, in loop order.  Each arc
        runs from one cut point to the next."""
        cuts = []
        for p in points:
            u = self.project(p)
            if u is None:
                raise PointNotOnLoopError('cut point is not on loop',
                                          details={'point': geom.vstr(p)})
            if any(geom.vclose(p, q) for _, q in cuts):
                continue
            cuts.append((u, p))
        if not cuts:
            return [list(self.edges)]
        cuts.sort(key=lambda c: c[0])
        pts = [c[1] for c in cuts]
        arcs = []
        for k in range(len(pts)):
            arcs.append(self.get_subcurve(pts[k], pts[(k + 1) % len(pts)]))
        logger.debug('cut loop of {} edges into {} arcs', len(self.edges), len(arcs))
        return arcs

    def split_edges(self, points: Iterable[Point]) -> List[Edge]:
        """The loop's edges with every edge split at the given points."""
        points = list(points)
        result = []
        for e in self.edges:
            result.extend(e.split(points))
        return result

    def neg(self) -> 'EdgeLoop':
        return EdgeLoop([e.neg() for e in reversed(self.edges)])

    def transform(self, m: xform.Matrix) -> 'EdgeLoop':
        return EdgeLoop([e.transform(m) for e in self.edges])

    def rasterize(self) -> List[Point]:
        """Polyline through the loop, without repeating the first point."""
        pts = []
        for e in self.edges:
            pts.extend(e.rasterize()[:-1])
        return pts

    def same_geometry(self, other: 'EdgeLoop') -> bool:
        """Do both loops trace the same oriented point set?"""
        if not geom.close(self.length, other.length):
            return False
        for a, b in ((self, other), (other, self)):
            for e in a.edges:
                mid = e.midpoint
                if not b.contains(mid):
                    return False
                if not geom.vclose(e.tangent(mid), b.tangent(mid)):
                    return False
        return True

    def union(self, other: 'EdgeLoop') -> Optional['EdgeLoop']:
        """Outer boundary of the union of two crossing loops, or None."""
        from brepcore.boolean.loops import loop_union
        return loop_union(self, other)

    def __eq__(self, other) -> bool:
        if not isinstance(other, EdgeLoop):
            return NotImplemented
        return self.same_geometry(other)

    __hash__ = None

    def __str__(self) -> str:
        return 'EdgeLoop[' + ', '.join(geom.vstr(p) for p in self.all_points()) + ']'


__all__ = ['Direction', 'EdgeContains', 'Vertex', 'Edge', 'EdgeLoop',
           'line_edge', 'circle_edge', 'arc_edge', 'polygon_loop']
