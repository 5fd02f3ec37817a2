"""Algorithm families and the CRS dispatch layer."""

from spatial_algo.algo.base import AlgorithmFamily
from spatial_algo.algo.cartesian import CartesianAlgorithms
from spatial_algo.algo.dispatch import (
    AreaCalculator,
    CCWCalculator,
    ConvexHullCalculator,
    DistanceCalculator,
    LinearReferenceCalculator,
    WithinCalculator,
    check_crs,
)
from spatial_algo.algo.partition import partition, partition_polyline
from spatial_algo.algo.wgs84 import WGS84Algorithms, course_delta

__all__ = [
    "AlgorithmFamily",
    "CartesianAlgorithms",
    "WGS84Algorithms",
    "AreaCalculator",
    "CCWCalculator",
    "ConvexHullCalculator",
    "DistanceCalculator",
    "LinearReferenceCalculator",
    "WithinCalculator",
    "check_crs",
    "course_delta",
    "partition",
    "partition_polyline",
]
