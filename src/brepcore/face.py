# -*- coding: utf-8 -*-
"""Faces: a carrier surface bounded by closed edge loops.

Orientation convention
======================

The first boundary loop is the outer boundary and runs clockwise when
the face is viewed with the surface normal pointing at the viewer.
Every further loop is a hole and runs counter-clockwise.  Put
differently, the face always lies to the right of its boundary.
Loops may touch each other at isolated points but must not cross.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import sin
from typing import List, Tuple

import numpy as np

from brepcore import geom
from brepcore import xform
from brepcore.curves import Circle
from brepcore.errors import (PointNotOnLoopError, PreconditionError, Unsupported,
                             UnsupportedCaseError)
from brepcore.intersections import curve_on_surface
from brepcore.surfaces import Plane, Surface
from brepcore.topology import Edge, EdgeLoop, Vertex

Point = List[float]


@dataclass(frozen=True, eq=False)
class Face:
    """Region of ``surface`` bounded by ``boundaries``."""

    boundaries: Tuple[EdgeLoop, ...]
    surface: Surface

    def __post_init__(self) -> None:
        boundaries = tuple(self.boundaries)
        if not boundaries:
            raise PreconditionError('face must have at least one boundary')
        for i, loop in enumerate(boundaries):
            for edge in loop:
                if not curve_on_surface(edge.curve, self.surface):
                    raise PreconditionError(
                        'boundary edge does not lie on the face surface',
                        details={'loop': i, 'edge': repr(edge),
                                 'surface': repr(self.surface)})
        object.__setattr__(self, 'boundaries', boundaries)

    @property
    def outer(self) -> EdgeLoop:
        return self.boundaries[0]

    @property
    def holes(self) -> Tuple[EdgeLoop, ...]:
        return self.boundaries[1:]

    def edges(self) -> List[Edge]:
        return [e for loop in self.boundaries for e in loop]

    def all_points(self) -> List[Point]:
        points = []
        for loop in self.boundaries:
            points.extend(loop.all_points())
        return points

    def edge_from_to(self, p: Point, q: Point) -> Edge:
        """Edge along the surface geodesic from ``p`` to ``q``."""
        return Edge(Vertex(p), Vertex(q), self.surface.geodesic(p, q))

    def on_boundary(self, p: Point) -> bool:
        return any(loop.contains(p) for loop in self.boundaries)

    def boundary_tangent(self, p: Point) -> Point:
        for loop in self.boundaries:
            if loop.contains(p):
                return loop.tangent(p)
        raise PointNotOnLoopError('point is not on face boundary',
                                  details={'point': geom.vstr(p)})

    def neg(self) -> 'Face':
        """Same surface, every loop reversed."""
        return Face([loop.neg() for loop in self.boundaries], self.surface)

    def flip(self) -> 'Face':
        """Same region seen from the other side of the surface."""
        return Face([loop.neg() for loop in self.boundaries], self.surface.neg())

    def transform(self, m: xform.Matrix) -> 'Face':
        surface = self.surface.transform(m)
        if isinstance(surface, Unsupported):
            raise UnsupportedCaseError(surface.reason,
                                       details={'surface': repr(self.surface)})
        return Face([loop.transform(m) for loop in self.boundaries], surface)

    def area(self) -> float:
        """Enclosed area of a planar face: outer area minus holes."""
        if not isinstance(self.surface, Plane):
            raise UnsupportedCaseError('area is only implemented for planar faces',
                                       details={'surface': repr(self.surface)})
        n = self.surface.normal_vector
        total = 0.0
        for loop in self.boundaries:
            total += _signed_area(loop, self.surface, n)
        return abs(total)

    def __str__(self) -> str:
        lines = []
        if isinstance(self.surface, Plane):
            lines.append('Plane at basis = {} with normal = {}'.format(
                geom.vstr(self.surface.basis), geom.vstr(self.surface.normal_vector)))
        else:
            lines.append('Sphere at {} with radius = {}'.format(
                geom.vstr(self.surface.basis), self.surface.radius))
        for loop in self.boundaries:
            lines.append('Contour:')
            for edge in loop:
                lines.append('  {}'.format(edge))
        return '\n'.join(lines)


def _signed_area(loop: EdgeLoop, plane: Plane, n: Point) -> float:
    """Shoelace area over the loop's vertices, plus the circular
    segment between chord and arc for every circular edge.  Positive
    for counter-clockwise loops viewed along ``-n``."""
    pts = plane.to_chart(loop.all_points(), plane.basis)
    x = pts[:, 0]
    y = pts[:, 1]
    area = 0.5 * float(np.sum(x * np.roll(y, -1) - np.roll(x, -1) * y))
    for e in loop:
        if isinstance(e.curve, Circle):
            theta = e.span
            sense = e.sign * (1.0 if geom.dot(e.curve.normal, n) > 0 else -1.0)
            area += sense * 0.5 * e.curve.radius**2 * (theta - sin(theta))
    return area


__all__ = ['Face']
