"""Single entry point over both algorithm families.

The CRS -> family table is built once, in the constructor, and exposed
read-only. An engine therefore holds no mutable state after __init__ and
may be called from any number of threads.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Mapping

from spatial_algo.algo.base import AlgorithmFamily, AnyPolygon, Geometry, HullInput
from spatial_algo.algo.cartesian import CartesianAlgorithms
from spatial_algo.algo.dispatch import (
    AreaCalculator,
    CCWCalculator,
    ConvexHullCalculator,
    DistanceCalculator,
    LinearReferenceCalculator,
    WithinCalculator,
)
from spatial_algo.algo.partition import partition, partition_polyline
from spatial_algo.algo.wgs84 import WGS84Algorithms
from spatial_algo.config import EngineConfig
from spatial_algo.models.chain import MonotoneChain
from spatial_algo.models.crs import CRS
from spatial_algo.models.geometry import LineSegment, Point, Polyline
from spatial_algo.models.polygon import SimplePolygon

logger = logging.getLogger(__name__)


class SpatialEngine:
    """Dispatches geometry operations to the family matching their CRS.

    Usage:
        engine = SpatialEngine()
        square = SimplePolygon.of(*(Point.cartesian(x, y) for x, y in corners))
        engine.within(square, Point.cartesian(0, 0))
    """

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = config or EngineConfig()
        self.families: Mapping[CRS, AlgorithmFamily] = MappingProxyType({
            CRS.CARTESIAN: CartesianAlgorithms(self.config),
            CRS.WGS84: WGS84Algorithms(self.config),
        })
        self._ccw = CCWCalculator(self.families)
        self._within = WithinCalculator(self.families)
        self._distance = DistanceCalculator(self.families)
        self._area = AreaCalculator(self.families)
        self._reference = LinearReferenceCalculator(self.families)
        self._hull = ConvexHullCalculator(self.families)
        logger.debug(
            "SpatialEngine ready for %s (epsilon=%g)",
            ", ".join(crs.value for crs in self.families),
            self.config.epsilon,
        )

    def family(self, crs: CRS) -> AlgorithmFamily:
        return self.families[crs]

    def is_ccw(self, polygon: SimplePolygon) -> bool:
        return self._ccw.is_ccw(polygon)

    def within(self, polygon: AnyPolygon, point: Point, touching: bool = False) -> bool:
        return self._within.within(polygon, point, touching)

    def distance(self, a: Geometry, b: Geometry) -> float:
        return self._distance.distance(a, b)

    def area(self, polygon: AnyPolygon) -> float:
        return self._area.area(polygon)

    def linear_reference(
        self,
        geometry: LineSegment | Polyline | SimplePolygon,
        d: float,
        start: Point | None = None,
        towards: Point | None = None,
    ) -> Point | None:
        return self._reference.reference(geometry, d, start, towards)

    def partition(
        self, geometry: SimplePolygon | Polyline, axis: int = 0
    ) -> list[MonotoneChain]:
        if isinstance(geometry, Polyline):
            return partition_polyline(geometry, axis)
        return partition(geometry, axis)

    def convex_hull(self, geometry: HullInput) -> SimplePolygon:
        return self._hull.convex_hull(geometry)

    def bounding_box(self, polygon: AnyPolygon) -> tuple[Point, Point]:
        return polygon.bounding_box()
