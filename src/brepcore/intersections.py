# -*- coding: utf-8 -*-
"""Intersection oracles for curves, edges and surfaces.

The functions here are stateless and only know about single pairs of
geometric objects:

* :func:`curve_on_surface` - does a curve lie entirely on a surface?
* :func:`surface_surface_intersection` - ``None``, a
  :class:`CurvesAndPoints` result, or :class:`Coincident` when the two
  surfaces are the same point set.
* :func:`edge_edge_intersection` - shared points (:class:`Vertex`) and
  coincident overlaps (:class:`Edge`, oriented like the first edge) of
  two bounded edges.  Also available as ``curve_curve_intersection``.
* :func:`curve_edge_intersection` - the same for an unbounded carrier
  curve against a bounded edge.

Quadratic solves use mpmath so that near-tangent configurations do not
lose the discriminant to cancellation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple, Union

import mpmath as mpm

from brepcore import geom
from brepcore.curves import Circle, Curve, Line
from brepcore.surfaces import Plane, Sphere, Surface
from brepcore.topology import Edge, Vertex

Point = List[float]


## curve on surface
## ----------------

def curve_on_surface(curve: Curve, surface: Surface) -> bool:
    """Does ``curve`` lie entirely on ``surface``?"""
    if isinstance(surface, Plane):
        n = surface.normal_vector
        if isinstance(curve, Line):
            return (surface.on_surface(curve.basis)
                    and geom.close(geom.dot(curve.direction, n), 0.0))
        if isinstance(curve, Circle):
            return (surface.on_surface(curve.basis)
                    and geom.close(abs(geom.dot(curve.normal, n)), 1.0))
    elif isinstance(surface, Sphere):
        if isinstance(curve, Circle):
            v = geom.sub(curve.basis, surface.basis)
            h = geom.dot(v, curve.normal)
            off_axis = geom.sub(v, geom.scale3(curve.normal, h))
            if geom.mag(off_axis) > geom.EQ_THRESHOLD:
                return False
            return geom.close((curve.radius**2 + h*h) ** 0.5, surface.radius)
        return False
    return False


## surface / surface
## -----------------

@dataclass(frozen=True)
class CurvesAndPoints:
    """Transverse surface intersection: carrier curves and isolated points."""

    curves: List[Curve] = field(default_factory=list)
    points: List[Point] = field(default_factory=list)


@dataclass(frozen=True)
class Coincident:
    """The two surfaces are the same point set."""

    surface: Surface


SurfaceIntersection = Union[None, CurvesAndPoints, Coincident]


def _plane_plane(a: Plane, b: Plane) -> SurfaceIntersection:
    n1 = a.normal_vector
    n2 = b.normal_vector
    d = geom.cross(n1, n2)
    dd = geom.dot(d, d)
    if dd < geom.EQ_THRESHOLD**2:
        if a.on_surface(b.basis):
            return Coincident(a)
        return None
    d1 = geom.dot(n1, a.basis)
    d2 = geom.dot(n2, b.basis)
    p = geom.scale3(geom.add(geom.scale3(geom.cross(n2, d), d1),
                             geom.scale3(geom.cross(d, n1), d2)), 1.0/dd)
    return CurvesAndPoints([Line(p, d)], [])


def _plane_sphere(plane: Plane, sphere: Sphere) -> SurfaceIntersection:
    n = plane.normal_vector
    h = plane.signed_distance(sphere.basis)
    foot = geom.sub(sphere.basis, geom.scale3(n, h))
    if geom.close(abs(h), sphere.radius):
        return CurvesAndPoints([], [foot])
    if abs(h) > sphere.radius:
        return None
    r = float(mpm.sqrt(mpm.mpf(sphere.radius)**2 - mpm.mpf(h)**2))
    return CurvesAndPoints([Circle(foot, n, r)], [])


def _sphere_sphere(a: Sphere, b: Sphere) -> SurfaceIntersection:
    delta = geom.sub(b.basis, a.basis)
    d = geom.mag(delta)
    if d < geom.EQ_THRESHOLD:
        if geom.close(a.radius, b.radius):
            return Coincident(a)
        return None
    if d > a.radius + b.radius + geom.EQ_THRESHOLD:
        return None
    if d < abs(a.radius - b.radius) - geom.EQ_THRESHOLD:
        return None
    u = geom.scale3(delta, 1.0/d)
    mpd = mpm.mpf(d)
    ra = mpm.mpf(a.radius)
    rb = mpm.mpf(b.radius)
    along = (mpd*mpd + ra*ra - rb*rb)/(2*mpd)
    center = geom.add(a.basis, geom.scale3(u, float(along)))
    if (geom.close(d, a.radius + b.radius)
            or geom.close(d, abs(a.radius - b.radius))):
        return CurvesAndPoints([], [center])
    r = float(mpm.sqrt(mpm.fabs(ra*ra - along*along)))
    return CurvesAndPoints([Circle(center, u, r)], [])


def surface_surface_intersection(a: Surface, b: Surface) -> SurfaceIntersection:
    """Intersect two surfaces."""
    if isinstance(a, Plane) and isinstance(b, Plane):
        return _plane_plane(a, b)
    if isinstance(a, Plane) and isinstance(b, Sphere):
        return _plane_sphere(a, b)
    if isinstance(a, Sphere) and isinstance(b, Plane):
        return _plane_sphere(b, a)
    if isinstance(a, Sphere) and isinstance(b, Sphere):
        return _sphere_sphere(a, b)
    raise TypeError('unsupported surface pair: {} and {}'.format(
        type(a).__name__, type(b).__name__))


## curve / curve on full carriers
## ------------------------------

def _line_line(a: Line, b: Line) -> List[Point]:
    w0 = geom.sub(a.basis, b.basis)
    bb = geom.dot(a.direction, b.direction)
    denom = 1.0 - bb*bb
    if abs(denom) < geom.EQ_THRESHOLD:
        return []
    d = geom.dot(a.direction, w0)
    e = geom.dot(b.direction, w0)
    s = (bb*e - d)/denom
    t = (e - bb*d)/denom
    pa = a.point_at(s)
    pb = b.point_at(t)
    if geom.vclose(pa, pb):
        return [pa]
    return []


def _coplanar_line_circle(line: Line, circle: Circle) -> List[Point]:
    ## solve |basis + u*dir - center| = r for u; dir is unit length
    ## so the quadratic is u^2 + 2*b*u + cc = 0
    f = geom.sub(line.basis, circle.basis)
    b = mpm.mpf(geom.dot(f, line.direction))
    ff = mpm.mpf(geom.dot(f, f))
    r = mpm.mpf(circle.radius)
    h = mpm.sqrt(mpm.fabs(ff - b*b))
    if mpm.fabs(h - r) < geom.EQ_THRESHOLD:
        return [line.point_at(float(-b))]
    if h > r:
        return []
    root = mpm.sqrt(r*r - h*h)
    return [line.point_at(float(-b + root)), line.point_at(float(-b - root))]


def _line_circle(line: Line, circle: Circle) -> List[Point]:
    n = circle.normal
    dn = geom.dot(line.direction, n)
    offset = geom.dot(geom.sub(circle.basis, line.basis), n)
    if geom.close(dn, 0.0):
        if not geom.close(offset, 0.0):
            return []
        return _coplanar_line_circle(line, circle)
    p = line.point_at(offset/dn)
    if circle.on_curve(p):
        return [p]
    return []


def _circle_circle(a: Circle, b: Circle) -> List[Point]:
    n = a.normal
    parallel = geom.close(abs(geom.dot(n, b.normal)), 1.0)
    coplanar = parallel and geom.close(geom.dot(geom.sub(b.basis, a.basis), n), 0.0)
    if parallel and not coplanar:
        return []
    if not coplanar:
        pa = Plane.from_normal(a.basis, a.normal)
        pb = Plane.from_normal(b.basis, b.normal)
        meet = _plane_plane(pa, pb)
        line = meet.curves[0]
        return [p for p in _coplanar_line_circle(line, a) if b.on_curve(p)]

    delta = geom.sub(b.basis, a.basis)
    d = geom.mag(delta)
    if d < geom.EQ_THRESHOLD:
        return []
    if d > a.radius + b.radius + geom.EQ_THRESHOLD:
        return []
    if d < abs(a.radius - b.radius) - geom.EQ_THRESHOLD:
        return []
    u = geom.scale3(delta, 1.0/d)
    mpd = mpm.mpf(d)
    ra = mpm.mpf(a.radius)
    rb = mpm.mpf(b.radius)
    along = (mpd*mpd + ra*ra - rb*rb)/(2*mpd)
    base = geom.add(a.basis, geom.scale3(u, float(along)))
    if (geom.close(d, a.radius + b.radius)
            or geom.close(d, abs(a.radius - b.radius))):
        return [base]
    h = float(mpm.sqrt(mpm.fabs(ra*ra - along*along)))
    w = geom.cross(n, u)
    return [geom.add(base, geom.scale3(w, h)), geom.sub(base, geom.scale3(w, h))]


def curve_curve_points(a: Curve, b: Curve) -> Tuple[bool, List[Point]]:
    """Intersect two full carrier curves.

    Returns ``(coincident, points)``; when the carriers coincide the
    point list is empty.
    """
    if a.same_carrier(b):
        return True, []
    if isinstance(a, Line) and isinstance(b, Line):
        return False, _line_line(a, b)
    if isinstance(a, Line) and isinstance(b, Circle):
        return False, _line_circle(a, b)
    if isinstance(a, Circle) and isinstance(b, Line):
        return False, _line_circle(b, a)
    if isinstance(a, Circle) and isinstance(b, Circle):
        return False, _circle_circle(a, b)
    raise TypeError('unsupported curve pair: {} and {}'.format(
        type(a).__name__, type(b).__name__))


## edge / edge
## -----------

def _snap(p: Point, edges) -> Point:
    """Replace ``p`` by an edge endpoint it coincides with."""
    for e in edges:
        for v in (e.start, e.end):
            if geom.vclose(p, v.point):
                return v.point
    return p


def _line_overlap(a: Edge, b: Edge) -> List[Union[Vertex, Edge]]:
    line = a.curve
    ta = sorted([line.param(a.start.point), line.param(a.end.point)])
    tb = sorted([line.param(b.start.point), line.param(b.end.point)])
    lo = max(ta[0], tb[0])
    hi = min(ta[1], tb[1])
    if hi < lo - geom.EQ_THRESHOLD:
        return []
    plo = _snap(line.point_at(lo), (a, b))
    phi = _snap(line.point_at(hi), (a, b))
    if geom.vclose(plo, phi):
        return [Vertex(plo)]
    if a.sign > 0:
        return [a.subedge(plo, phi)]
    return [a.subedge(phi, plo)]


def _circle_overlap(a: Edge, b: Edge) -> List[Union[Vertex, Edge]]:
    ## work in a's local angle; b's interval starts at whichever of its
    ## endpoints comes first when walking in a's sense
    same_sense = geom.dot(a.tangent(b.midpoint), b.tangent(b.midpoint)) > 0
    first = b.start.point if same_sense else b.end.point
    l1 = a.span
    l2 = b.span
    slack = geom.EQ_THRESHOLD / a.curve.radius
    d = a.local(first)
    if d > geom.pi2 - slack:
        d = 0.0
    result = []
    for lo, hi in ((max(0.0, d), min(l1, d + l2)),
                   (max(0.0, d - geom.pi2), min(l1, d + l2 - geom.pi2))):
        if hi < lo - slack:
            continue
        plo = _snap(a.point_at(lo), (a, b))
        phi = _snap(a.point_at(hi), (a, b))
        if hi - lo <= slack:
            result.append(Vertex(plo))
        else:
            result.append(a.subedge(plo, phi))
    return result


def edge_edge_intersection(a: Edge, b: Edge) -> List[Union[Vertex, Edge]]:
    """Shared points and coincident overlaps of two edges.

    Overlap edges are oriented like ``a``.  A point that is also the
    endpoint of a reported overlap is not reported separately, and
    each point is reported once.
    """
    coincident, points = curve_curve_points(a.curve, b.curve)
    if coincident:
        if isinstance(a.curve, Line):
            records = _line_overlap(a, b)
        else:
            records = _circle_overlap(a, b)
    else:
        records = [Vertex(_snap(p, (a, b))) for p in points
                   if a.project(p) is not None and b.project(p) is not None]

    overlaps = [r for r in records if isinstance(r, Edge)]
    result = list(overlaps)
    for r in records:
        if not isinstance(r, Vertex):
            continue
        if any(r == o.start or r == o.end for o in overlaps):
            continue
        if any(r == v for v in result if isinstance(v, Vertex)):
            continue
        result.append(r)
    return result


curve_curve_intersection = edge_edge_intersection


def curve_edge_intersection(curve: Curve, edge: Edge) -> List[Union[Vertex, Edge]]:
    """Intersect an unbounded carrier curve with an edge.  An edge that
    lies on ``curve`` is returned whole."""
    coincident, points = curve_curve_points(curve, edge.curve)
    if coincident:
        return [edge]
    result = []
    for p in points:
        if edge.project(p) is None:
            continue
        v = Vertex(_snap(p, (edge,)))
        if not any(v == r for r in result):
            result.append(v)
    return result


__all__ = [
    'CurvesAndPoints',
    'Coincident',
    'curve_on_surface',
    'surface_surface_intersection',
    'curve_curve_points',
    'edge_edge_intersection',
    'curve_curve_intersection',
    'curve_edge_intersection',
]
