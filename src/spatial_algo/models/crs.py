"""Coordinate reference systems."""

from enum import Enum


class CRS(str, Enum):
    """Coordinate reference system tag carried by every point.

    CARTESIAN: flat Euclidean plane (or n-dimensional space)
    WGS84: longitude/latitude in degrees on a sphere
    """

    CARTESIAN = "cartesian"
    WGS84 = "wgs84"
