"""CRS dispatch: pick the algorithm family matching the operands' CRS.

Each calculator receives the CRS -> family table at construction and never
mutates it, so one set of calculators can be shared between threads.
"""

from __future__ import annotations

from typing import Mapping

from spatial_algo.algo.base import AlgorithmFamily, AnyPolygon, Geometry, HullInput
from spatial_algo.errors import DimensionMismatch, IncompatibleCRS, InvalidGeometry
from spatial_algo.models.crs import CRS
from spatial_algo.models.geometry import LineSegment, Point, Polyline, assert_same_crs
from spatial_algo.models.polygon import MultiPolygon, SimplePolygon


def check_crs(a: Geometry, b: Geometry | None = None) -> CRS:
    """Return the CRS shared by the operands, or raise IncompatibleCRS."""
    if b is not None and a.crs != b.crs:
        raise IncompatibleCRS(a.crs, b.crs)
    return a.crs


def check_dimension(a: Geometry, b: Geometry) -> None:
    if a.dimension != b.dimension:
        raise DimensionMismatch(a.dimension, b.dimension, what="Operand")


class _Calculator:
    def __init__(self, families: Mapping[CRS, AlgorithmFamily]) -> None:
        self._families = families

    def family(self, a: Geometry, b: Geometry | None = None) -> AlgorithmFamily:
        return self._families[check_crs(a, b)]


class CCWCalculator(_Calculator):
    def is_ccw(self, polygon: SimplePolygon) -> bool:
        if not isinstance(polygon, SimplePolygon):
            raise InvalidGeometry(
                f"Orientation is defined for a single ring, not a {type(polygon).__name__}"
            )
        return self.family(polygon).is_ccw(polygon)


class WithinCalculator(_Calculator):
    def within(self, polygon: AnyPolygon, point: Point, touching: bool = False) -> bool:
        family = self.family(polygon, point)
        check_dimension(polygon, point)
        return family.within(polygon, point, touching)


class DistanceCalculator(_Calculator):
    def distance(self, a: Geometry, b: Geometry) -> float:
        family = self.family(a, b)
        check_dimension(a, b)
        return family.distance(a, b)


class AreaCalculator(_Calculator):
    def area(self, polygon: AnyPolygon) -> float:
        return self.family(polygon).area(polygon)


class LinearReferenceCalculator(_Calculator):
    def reference(
        self,
        geometry: LineSegment | Polyline | SimplePolygon,
        d: float,
        start: Point | None = None,
        towards: Point | None = None,
    ) -> Point | None:
        family = self.family(geometry)
        for vertex in (start, towards):
            if vertex is not None:
                check_crs(geometry, vertex)
        return family.reference(geometry, d, start, towards)


class ConvexHullCalculator(_Calculator):
    def convex_hull(self, geometry: HullInput) -> SimplePolygon:
        if isinstance(geometry, (Polyline, SimplePolygon, MultiPolygon)):
            return self.family(geometry).convex_hull(geometry)
        points = tuple(geometry)
        if not points:
            raise InvalidGeometry("Convex hull needs at least 3 distinct points")
        assert_same_crs(points)
        return self.family(points[0]).convex_hull(points)
