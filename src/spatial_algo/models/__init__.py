"""Geometry data models."""

from spatial_algo.models.crs import CRS
from spatial_algo.models.geometry import (
    LineSegment,
    Ordering,
    Point,
    Polyline,
    Vector,
    ternary_compare,
)
from spatial_algo.models.polygon import (
    MultiPolygon,
    Polygon,
    SimplePolygon,
    all_holes,
    all_shells,
    close_ring,
    open_ring,
)
from spatial_algo.models.chain import MonotoneChain
from spatial_algo.models.document import GeometryDocument

__all__ = [
    "CRS",
    "LineSegment",
    "Ordering",
    "Point",
    "Polyline",
    "Vector",
    "ternary_compare",
    "MultiPolygon",
    "Polygon",
    "SimplePolygon",
    "all_holes",
    "all_shells",
    "close_ring",
    "open_ring",
    "MonotoneChain",
    "GeometryDocument",
]
