# -*- coding: utf-8 -*-
"""Analytic carrier surfaces for faces.

``Plane`` and ``Sphere`` are immutable value types.  Besides the usual
evaluation, projection and normal queries each surface provides

* ``geodesic(p, q)`` - the carrier curve of the shortest path between
  two surface points (a :class:`~brepcore.curves.Line` on a plane, a
  great :class:`~brepcore.curves.Circle` on a sphere);
* ``to_chart(points, center)`` - a 2D coordinate chart centred on a
  surface point, used by the containment tests.  Charts preserve
  orientation: a loop that runs clockwise when viewed with the surface
  normal pointing at the viewer runs clockwise in the chart as well.
* ``transform(m)`` - the transformed surface, or an
  :class:`~brepcore.errors.Unsupported` value when the image is not a
  supported surface type (a sphere under non-uniform scale).
"""

from __future__ import annotations

from dataclasses import dataclass
from math import acos
from typing import Iterable, List, Tuple, Union

import numpy as np

from brepcore import geom
from brepcore import xform
from brepcore.curves import Circle, Line
from brepcore.errors import PreconditionError, Unsupported

Point = List[float]


@dataclass(frozen=True, eq=False)
class Plane:
    """Oriented plane through ``basis`` spanned by ``u_slope`` and
    ``v_slope``.  The slopes are orthonormalised on construction; the
    normal is ``cross(u_slope, v_slope)``."""

    basis: Point
    u_slope: Point
    v_slope: Point

    def __post_init__(self) -> None:
        u = geom.unit(self.u_slope)
        v = geom.sub(self.v_slope, geom.scale3(u, geom.dot(self.v_slope, u)))
        try:
            v = geom.unit(v)
        except ValueError:
            raise ValueError('plane slopes are parallel: {} {}'.format(
                geom.vstr(self.u_slope), geom.vstr(self.v_slope)))
        object.__setattr__(self, 'basis', geom.point(self.basis))
        object.__setattr__(self, 'u_slope', u)
        object.__setattr__(self, 'v_slope', v)

    @classmethod
    def from_normal(cls, basis: Point, normal: Point) -> 'Plane':
        u, v = geom.orthobasis(geom.unit(normal))
        return cls(basis, u, v)

    @property
    def normal_vector(self) -> Point:
        return geom.cross(self.u_slope, self.v_slope)

    def normal(self, p: Point = None) -> Point:
        return self.normal_vector

    def point_at(self, u: float, v: float) -> Point:
        return geom.add(self.basis, geom.add(geom.scale3(self.u_slope, u),
                                             geom.scale3(self.v_slope, v)))

    def project(self, p: Point) -> Tuple[float, float]:
        d = geom.sub(p, self.basis)
        return geom.dot(d, self.u_slope), geom.dot(d, self.v_slope)

    def signed_distance(self, p: Point) -> float:
        return geom.dot(geom.sub(p, self.basis), self.normal_vector)

    def on_surface(self, p: Point) -> bool:
        return abs(self.signed_distance(p)) < geom.EQ_THRESHOLD

    def neg(self) -> 'Plane':
        return Plane(self.basis, self.v_slope, self.u_slope)

    def geodesic(self, p: Point, q: Point) -> Line:
        if geom.vclose(p, q):
            raise PreconditionError('geodesic between coincident points',
                                    details={'point': geom.vstr(p)})
        return Line(p, geom.sub(q, p))

    def distance(self, p: Point, q: Point) -> float:
        return geom.dist(p, q)

    def to_chart(self, points: Iterable[Point], center: Point) -> np.ndarray:
        pts = np.array([p[:3] for p in points], dtype=float).reshape(-1, 3)
        frame = np.array([self.u_slope[:3], self.v_slope[:3]], dtype=float)
        return (pts - np.array(center[:3], dtype=float)) @ frame.T

    def same_carrier(self, other) -> bool:
        """Same point set, in either orientation."""
        if not isinstance(other, Plane):
            return False
        return (geom.close(abs(geom.dot(self.normal_vector, other.normal_vector)), 1.0)
                and self.on_surface(other.basis))

    def transform(self, m: xform.Matrix) -> 'Plane':
        return Plane(xform.transform_point(m, self.basis),
                     xform.transform_vector(m, self.u_slope),
                     xform.transform_vector(m, self.v_slope))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Plane):
            return NotImplemented
        return (geom.vclose(self.normal_vector, other.normal_vector)
                and self.on_surface(other.basis))

    __hash__ = None

    def __repr__(self) -> str:
        return 'Plane({}, {}, {})'.format(geom.vstr(self.basis), geom.vstr(self.u_slope),
                                          geom.vstr(self.v_slope))


@dataclass(frozen=True, eq=False)
class Sphere:
    """Sphere of ``radius`` around ``basis``.  ``normal_outwards``
    selects which side the surface normal points to."""

    basis: Point
    radius: float
    normal_outwards: bool = True

    def __post_init__(self) -> None:
        if not geom.isgoodnum(self.radius) or self.radius < geom.EQ_THRESHOLD:
            raise ValueError('bad sphere radius: {}'.format(self.radius))
        object.__setattr__(self, 'basis', geom.point(self.basis))
        object.__setattr__(self, 'radius', float(self.radius))

    def normal(self, p: Point) -> Point:
        n = geom.unit(geom.sub(p, self.basis))
        return n if self.normal_outwards else geom.negate(n)

    def on_surface(self, p: Point) -> bool:
        return abs(geom.dist(p, self.basis) - self.radius) < geom.EQ_THRESHOLD

    def project(self, p: Point) -> Point:
        """Closest point of the sphere to ``p``."""
        d = geom.unit(geom.sub(p, self.basis))
        return geom.add(self.basis, geom.scale3(d, self.radius))

    def neg(self) -> 'Sphere':
        return Sphere(self.basis, self.radius, not self.normal_outwards)

    def geodesic(self, p: Point, q: Point) -> Circle:
        """Great circle through ``p`` and ``q``, oriented from ``p``
        towards ``q`` along the shorter arc."""
        n = geom.cross(geom.sub(p, self.basis), geom.sub(q, self.basis))
        if geom.mag(n) < geom.EQ_THRESHOLD:
            raise PreconditionError('geodesic is undefined for coincident or antipodal points',
                                    details={'p': geom.vstr(p), 'q': geom.vstr(q)})
        return Circle(self.basis, n, self.radius)

    def distance(self, p: Point, q: Point) -> float:
        a = geom.unit(geom.sub(p, self.basis))
        b = geom.unit(geom.sub(q, self.basis))
        c = max(-1.0, min(1.0, geom.dot(a, b)))
        return self.radius * acos(c)

    def to_chart(self, points: Iterable[Point], center: Point) -> np.ndarray:
        """Stereographic projection from the antipode of ``center`` onto
        the tangent plane at ``center``.  Points near the antipode land
        far from the origin."""
        c = geom.unit(geom.sub(center, self.basis))
        e1, e2 = geom.orthobasis(c)
        if not self.normal_outwards:
            e2 = geom.negate(e2)
        pts = np.array([p[:3] for p in points], dtype=float).reshape(-1, 3)
        d = pts - np.array(self.basis[:3], dtype=float)
        d = d / np.linalg.norm(d, axis=1)[:, None]
        denom = np.maximum(1.0 + d @ np.array(c[:3]), 1e-12)
        frame = np.array([e1[:3], e2[:3]], dtype=float)
        return 2.0 * self.radius * (d @ frame.T) / denom[:, None]

    def transform(self, m: xform.Matrix) -> Union['Sphere', Unsupported]:
        s = xform.uniform_scale(m)
        if s is None:
            return Unsupported('sphere maps to an ellipsoid under this transform')
        return Sphere(xform.transform_point(m, self.basis), self.radius*s,
                      self.normal_outwards)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Sphere):
            return NotImplemented
        return (geom.vclose(self.basis, other.basis)
                and geom.close(self.radius, other.radius)
                and self.normal_outwards == other.normal_outwards)

    __hash__ = None

    def __repr__(self) -> str:
        return 'Sphere({}, {}, outwards={})'.format(geom.vstr(self.basis), self.radius,
                                                    self.normal_outwards)


Surface = Union[Plane, Sphere]


__all__ = ['Plane', 'Sphere', 'Surface']
