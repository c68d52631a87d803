# -*- coding: utf-8 -*-
"""Point containment for faces and loops.

Containment is decided by the winding number of the boundary around
the query point, computed in the surface chart centred on that point
(see :meth:`brepcore.surfaces.Plane.to_chart`).

On planes the winding is exact: line edges contribute the angle
between their endpoints and circular edges are handled piecewise with
a correction when the query point sits between an arc and its chord.
Any nonzero total counts as inside.

On spheres the boundary is sampled into a polyline of
``geom.RASTER_SEGMENTS`` points per full turn, so points closer to a
circular boundary than the sampling sagitta may be misclassified.  The
stereographic chart sends the antipode of the query point to infinity;
a face is considered to contain the query point when its boundary
winds negatively around it, which is wrong for faces that contain
both the point and its antipode.
"""

from __future__ import annotations

from enum import Enum
from math import ceil, pi
from typing import List, Optional

import numpy as np

from brepcore import geom
from brepcore.curves import Circle
from brepcore.face import Face
from brepcore.surfaces import Plane, Sphere, Surface
from brepcore.topology import EdgeLoop

Point = List[float]


class FacePointContains(Enum):
    """Position of a point relative to a face or loop."""

    INSIDE = 'inside'
    ON_BOUNDARY = 'on_boundary'
    OUTSIDE = 'outside'


def _wrap(a: float) -> float:
    return (a + pi) % (2.0 * pi) - pi


def _cross2(a, b) -> float:
    return float(a[0] * b[1] - a[1] * b[0])


def _sweep(a, b) -> float:
    return _wrap(float(np.arctan2(b[1], b[0]) - np.arctan2(a[1], a[0])))


def _arc_sweep(a, b, m, c, r) -> float:
    """Angle swept around the origin by a chart arc of at most a
    quarter turn from ``a`` to ``b`` through ``m`` with centre ``c``."""
    chord = b - a
    side = _cross2(chord, -a)
    if abs(side) <= geom.EQ_THRESHOLD * float(np.linalg.norm(chord)):
        return _sweep(a, m) + _sweep(m, b)
    delta = _sweep(a, b)
    if float(np.linalg.norm(c)) < r and side * _cross2(chord, c - a) < 0:
        delta -= 2.0 * pi * np.sign(delta)
    return delta


def _planar_winding(loop: EdgeLoop, p: Point, plane: Plane) -> int:
    total = 0.0
    for e in loop:
        if isinstance(e.curve, Circle):
            pieces = max(1, int(ceil(e.span / (pi / 2.0))))
            step = e.span / pieces
            ts = [k * step for k in range(pieces + 1)]
            mids = [(k + 0.5) * step for k in range(pieces)]
            pts = [e.start.point] + [e.point_at(t) for t in ts[1:-1]] + [e.end.point]
            chart = plane.to_chart(pts + [e.point_at(t) for t in mids] + [e.curve.basis], p)
            c = chart[-1]
            for k in range(pieces):
                total += _arc_sweep(chart[k], chart[k + 1], chart[pieces + 1 + k],
                                    c, e.curve.radius)
        else:
            chart = plane.to_chart([e.start.point, e.end.point], p)
            total += _sweep(chart[0], chart[1])
    return int(round(total / (2.0 * pi)))


def _sampled_winding(loop: EdgeLoop, p: Point, surface: Surface) -> int:
    chart = surface.to_chart(loop.rasterize(), p)
    nxt = np.roll(chart, -1, axis=0)
    angles = np.arctan2(nxt[:, 1], nxt[:, 0]) - np.arctan2(chart[:, 1], chart[:, 0])
    angles = (angles + np.pi) % (2.0 * np.pi) - np.pi
    return int(round(float(np.sum(angles)) / (2.0 * np.pi)))


def loop_winding(loop: EdgeLoop, p: Point, surface: Surface) -> int:
    """Winding number of ``loop`` around ``p`` in the chart of ``surface``."""
    if isinstance(surface, Plane):
        return _planar_winding(loop, p, surface)
    return _sampled_winding(loop, p, surface)


def loop_plane(loop: EdgeLoop) -> Plane:
    """Plane through a loop, oriented by Newell's method so that the loop
    runs counter-clockwise when viewed with the normal at the viewer."""
    pts = np.array([q[:3] for q in loop.rasterize()], dtype=float)
    if len(pts) < 3:
        pts = np.array([q[:3] for e in loop for q in e.rasterize(8)[:-1]], dtype=float)
    nxt = np.roll(pts, -1, axis=0)
    n = np.array([np.sum((pts[:, 1] - nxt[:, 1]) * (pts[:, 2] + nxt[:, 2])),
                  np.sum((pts[:, 2] - nxt[:, 2]) * (pts[:, 0] + nxt[:, 0])),
                  np.sum((pts[:, 0] - nxt[:, 0]) * (pts[:, 1] + nxt[:, 1]))])
    return Plane.from_normal(loop.all_points()[0], [float(x) for x in n])


def point_in_loop(loop: EdgeLoop, p: Point,
                  surface: Optional[Surface] = None) -> FacePointContains:
    """Classify ``p`` against the region a single loop encloses,
    irrespective of the loop's orientation."""
    if loop.contains(p):
        return FacePointContains.ON_BOUNDARY
    if surface is None:
        surface = loop_plane(loop)
    if not surface.on_surface(p):
        return FacePointContains.OUTSIDE
    if loop_winding(loop, p, surface) != 0:
        return FacePointContains.INSIDE
    return FacePointContains.OUTSIDE


def point_in_face(face: Face, p: Point) -> FacePointContains:
    """Classify ``p`` as inside, on the boundary of, or outside ``face``."""
    if not face.surface.on_surface(p):
        return FacePointContains.OUTSIDE
    if face.on_boundary(p):
        return FacePointContains.ON_BOUNDARY
    winding = sum(loop_winding(loop, p, face.surface) for loop in face.boundaries)
    if isinstance(face.surface, Sphere):
        inside = winding < 0
    else:
        inside = winding != 0
    return FacePointContains.INSIDE if inside else FacePointContains.OUTSIDE


__all__ = ['FacePointContains', 'loop_winding', 'loop_plane', 'point_in_loop',
           'point_in_face']
