# -*- coding: utf-8 -*-
"""Analytic carrier curves for boundary edges.

Two curve types are supported, both immutable:

* :class:`Line` - an infinite line through ``basis`` along a unit
  ``direction``; parameter ``u`` is signed distance from ``basis``.
* :class:`Circle` - a full circle of ``radius`` around ``basis`` in the
  plane perpendicular to the unit ``normal``; parameter is the angle in
  radians, increasing counter-clockwise when viewed with ``normal``
  pointing at the viewer.

Points and vectors use the homogeneous list representation from
:mod:`brepcore.geom`.  Equality between curves is geometric and
tolerant: two lines are equal when they describe the same oriented
line, regardless of which point was chosen as ``basis``.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import atan2, cos, sin
from typing import List, Tuple, Union

from brepcore import geom
from brepcore import xform
from brepcore.errors import Unsupported

Point = List[float]


@dataclass(frozen=True, eq=False)
class Line:
    """Infinite oriented line."""

    basis: Point
    direction: Point

    def __post_init__(self) -> None:
        object.__setattr__(self, 'basis', geom.point(self.basis))
        object.__setattr__(self, 'direction', geom.unit(self.direction))

    def point_at(self, u: float) -> Point:
        return geom.add(self.basis, geom.scale3(self.direction, u))

    def param(self, p: Point) -> float:
        return geom.dot(geom.sub(p, self.basis), self.direction)

    def project(self, p: Point) -> Tuple[float, float]:
        """Return ``(u, distance)``: the parameter of the foot point and
        the perpendicular distance of ``p`` from the line."""
        u = self.param(p)
        return u, geom.dist(p, self.point_at(u))

    def distance(self, p: Point) -> float:
        return self.project(p)[1]

    def on_curve(self, p: Point) -> bool:
        return self.distance(p) < geom.EQ_THRESHOLD

    def tangent(self, p: Point) -> Point:
        return list(self.direction)

    def neg(self) -> 'Line':
        return Line(self.basis, geom.negate(self.direction))

    def same_carrier(self, other) -> bool:
        """Same infinite line, in either orientation."""
        if not isinstance(other, Line):
            return False
        return (geom.close(abs(geom.dot(self.direction, other.direction)), 1.0)
                and self.on_curve(other.basis))

    def transform(self, m: xform.Matrix) -> 'Line':
        return Line(xform.transform_point(m, self.basis),
                    xform.transform_vector(m, self.direction))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Line):
            return NotImplemented
        return (geom.vclose(self.direction, other.direction)
                and self.on_curve(other.basis))

    __hash__ = None

    def __repr__(self) -> str:
        return 'Line({}, {})'.format(geom.vstr(self.basis), geom.vstr(self.direction))


@dataclass(frozen=True, eq=False)
class Circle:
    """Full circle, oriented counter-clockwise about ``normal``."""

    basis: Point
    normal: Point
    radius: float

    def __post_init__(self) -> None:
        if not geom.isgoodnum(self.radius) or self.radius < geom.EQ_THRESHOLD:
            raise ValueError('bad circle radius: {}'.format(self.radius))
        object.__setattr__(self, 'basis', geom.point(self.basis))
        object.__setattr__(self, 'normal', geom.unit(self.normal))
        object.__setattr__(self, 'radius', float(self.radius))

    @property
    def frame(self) -> Tuple[Point, Point]:
        """In-plane axes ``(u, v)`` with ``cross(u, v) == normal``.
        Angle zero lies along ``u``."""
        return geom.orthobasis(self.normal)

    def point_at(self, angle: float) -> Point:
        u, v = self.frame
        return geom.add(self.basis,
                        geom.add(geom.scale3(u, self.radius*cos(angle)),
                                 geom.scale3(v, self.radius*sin(angle))))

    def param(self, p: Point) -> float:
        """Angle of ``p`` about the centre, in ``[0, 2*pi)``."""
        u, v = self.frame
        d = geom.sub(p, self.basis)
        a = atan2(geom.dot(d, v), geom.dot(d, u))
        if a < 0.0:
            a += geom.pi2
        return a

    def project(self, p: Point) -> Tuple[float, float]:
        """Return ``(angle, distance)`` of the closest circle point."""
        a = self.param(p)
        return a, geom.dist(p, self.point_at(a))

    def distance(self, p: Point) -> float:
        d = geom.sub(p, self.basis)
        h = geom.dot(d, self.normal)
        inplane = geom.mag(geom.sub(d, geom.scale3(self.normal, h)))
        return (h*h + (inplane - self.radius)**2) ** 0.5

    def on_curve(self, p: Point) -> bool:
        return self.distance(p) < geom.EQ_THRESHOLD

    def tangent(self, p: Point) -> Point:
        return geom.unit(geom.cross(self.normal, geom.sub(p, self.basis)))

    def neg(self) -> 'Circle':
        return Circle(self.basis, geom.negate(self.normal), self.radius)

    def same_carrier(self, other) -> bool:
        """Same circle, in either orientation."""
        if not isinstance(other, Circle):
            return False
        return (geom.vclose(self.basis, other.basis)
                and geom.close(self.radius, other.radius)
                and geom.close(abs(geom.dot(self.normal, other.normal)), 1.0))

    def transform(self, m: xform.Matrix) -> Union['Circle', Unsupported]:
        u, v = self.frame
        tu = xform.transform_vector(m, u)
        tv = xform.transform_vector(m, v)
        s = geom.mag(tu)
        if not geom.close(geom.mag(tv), s) or not geom.close(geom.dot(tu, tv), 0.0):
            return Unsupported('circle maps to an ellipse under this transform')
        return Circle(xform.transform_point(m, self.basis),
                      geom.cross(tu, tv), self.radius*s)

    def __eq__(self, other) -> bool:
        if not isinstance(other, Circle):
            return NotImplemented
        return (geom.vclose(self.basis, other.basis)
                and geom.close(self.radius, other.radius)
                and geom.vclose(self.normal, other.normal))

    __hash__ = None

    def __repr__(self) -> str:
        return 'Circle({}, {}, {})'.format(geom.vstr(self.basis),
                                           geom.vstr(self.normal), self.radius)


Curve = Union[Line, Circle]


__all__ = ['Line', 'Circle', 'Curve', 'Point']
