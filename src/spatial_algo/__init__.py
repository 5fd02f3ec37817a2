"""Cartesian and WGS84 computational geometry."""

from spatial_algo.config import EngineConfig
from spatial_algo.engine import SpatialEngine
from spatial_algo.errors import (
    DimensionMismatch,
    GeometryError,
    IncompatibleCRS,
    InvalidGeometry,
    PoleEnclosure,
)
from spatial_algo.models import (
    CRS,
    LineSegment,
    MonotoneChain,
    MultiPolygon,
    Point,
    Polyline,
    SimplePolygon,
)

__version__ = "0.3.0"

__all__ = [
    "CRS",
    "DimensionMismatch",
    "EngineConfig",
    "GeometryError",
    "IncompatibleCRS",
    "InvalidGeometry",
    "LineSegment",
    "MonotoneChain",
    "MultiPolygon",
    "Point",
    "Polyline",
    "PoleEnclosure",
    "SimplePolygon",
    "SpatialEngine",
]
