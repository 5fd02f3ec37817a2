"""Geometric primitives: points, unit-sphere vectors, segments and polylines."""

from __future__ import annotations

import math
from enum import Enum
from typing import Iterable, Sequence

import numpy as np
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from spatial_algo.config import DEFAULT_EPSILON
from spatial_algo.errors import DimensionMismatch, IncompatibleCRS, InvalidGeometry
from spatial_algo.models.crs import CRS


class Ordering(Enum):
    """Result of a ternary point comparison.

    INCOMPARABLE means the coordinates disagree in sign across dimensions
    (or the dimensions differ); callers skip the edge rather than fail.
    """

    LESS = -1
    EQUAL = 0
    GREATER = 1
    INCOMPARABLE = None

    @property
    def comparable(self) -> bool:
        return self is not Ordering.INCOMPARABLE


def ternary_compare(
    c1: Sequence[float], c2: Sequence[float], ignore_dim: int | None = None
) -> Ordering:
    """Compare two coordinate tuples dimension by dimension.

    Dimensions where the coordinates are equal never decide the result;
    a GREATER in one dimension and a LESS in another makes the pair
    INCOMPARABLE.
    """
    if len(c1) != len(c2):
        return Ordering.INCOMPARABLE
    result: int | None = None
    for i, (a, b) in enumerate(zip(c1, c2)):
        if i == ignore_dim:
            continue
        diff = a - b
        ans = 1 if diff > 0 else (-1 if diff < 0 else 0)
        if result is None or result == 0:
            result = ans
        elif ans != 0 and ans != result:
            return Ordering.INCOMPARABLE
    if result is None:
        return Ordering.INCOMPARABLE
    return Ordering(result)


class Point(BaseModel):
    """Immutable n-dimensional point tagged with its CRS.

    WGS84 points are (longitude, latitude) in degrees.
    """

    model_config = ConfigDict(frozen=True)

    crs: CRS = CRS.CARTESIAN
    coordinate: tuple[float, ...]

    @field_validator("coordinate")
    @classmethod
    def at_least_one_dimension(cls, v: tuple[float, ...]) -> tuple[float, ...]:
        if len(v) < 1:
            raise InvalidGeometry("Cannot create point with zero dimensions")
        return v

    @classmethod
    def cartesian(cls, *coordinate: float) -> Point:
        return cls(crs=CRS.CARTESIAN, coordinate=coordinate)

    @classmethod
    def wgs84(cls, longitude: float, latitude: float) -> Point:
        return cls(crs=CRS.WGS84, coordinate=(longitude, latitude))

    @property
    def dimension(self) -> int:
        return len(self.coordinate)

    @property
    def x(self) -> float:
        return self.coordinate[0]

    @property
    def y(self) -> float:
        return self.coordinate[1]

    def ternary_compare(self, other: Point) -> Ordering:
        """Ternary comparison against another point (see ternary_compare)."""
        return ternary_compare(self.coordinate, other.coordinate)

    def _derive(self, coordinate: Iterable[float]) -> Point:
        return Point(crs=self.crs, coordinate=tuple(coordinate))

    def add(self, *shifts: float) -> Point:
        return self._derive(c + s for c, s in zip(self.coordinate, shifts))

    def subtract(self, *shifts: float) -> Point:
        return self._derive(c - s for c, s in zip(self.coordinate, shifts))

    def multiply(self, factor: float) -> Point:
        return self._derive(c * factor for c in self.coordinate)

    def divide(self, divisor: float) -> Point:
        return self._derive(c / divisor for c in self.coordinate)

    def rotate(self, angle: float) -> Point:
        """Rotate the first two coordinates about the origin (radians)."""
        x, y = self.coordinate[0], self.coordinate[1]
        cos_a, sin_a = math.cos(angle), math.sin(angle)
        rotated = (x * cos_a - y * sin_a, y * cos_a + x * sin_a)
        return self._derive(rotated + self.coordinate[2:])

    def to_wkt(self) -> str:
        return f"POINT({self.coordinate[0]} {self.coordinate[1]})"

    def to_lat_lon(self) -> str:
        return f"{self.coordinate[1]} {self.coordinate[0]}"

    def almost_equals(self, other: Point, epsilon: float = DEFAULT_EPSILON) -> bool:
        """Component-wise equality within an absolute tolerance."""
        if self.crs != other.crs or self.dimension != other.dimension:
            return False
        return all(
            math.isclose(a, b, rel_tol=0.0, abs_tol=epsilon)
            for a, b in zip(self.coordinate, other.coordinate)
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Point):
            return NotImplemented
        return self.crs == other.crs and self.coordinate == other.coordinate

    def __hash__(self) -> int:
        return hash((self.crs, self.coordinate))

    def __repr__(self) -> str:
        return f"Point({self.crs.value}, {list(self.coordinate)})"


class Vector:
    """3-D vector on (or near) the unit sphere, used for spherical math."""

    __slots__ = ("_v",)

    def __init__(self, x: float, y: float, z: float) -> None:
        self._v = np.array([x, y, z], dtype=float)

    @classmethod
    def _of(cls, array: np.ndarray) -> Vector:
        return cls(float(array[0]), float(array[1]), float(array[2]))

    @classmethod
    def from_point(cls, point: Point) -> Vector:
        """Convert a (longitude, latitude) point in degrees to an n-vector."""
        lon, lat = np.radians(point.coordinate[:2])
        return cls(
            math.cos(lat) * math.cos(lon),
            math.cos(lat) * math.sin(lon),
            math.sin(lat),
        )

    @property
    def coordinates(self) -> tuple[float, float, float]:
        return (float(self._v[0]), float(self._v[1]), float(self._v[2]))

    def add(self, other: Vector) -> Vector:
        return Vector._of(self._v + other._v)

    def subtract(self, other: Vector) -> Vector:
        return Vector._of(self._v - other._v)

    def multiply(self, scalar: float) -> Vector:
        return Vector._of(self._v * scalar)

    def dot(self, other: Vector) -> float:
        return float(np.dot(self._v, other._v))

    def cross(self, other: Vector) -> Vector:
        return Vector._of(np.cross(self._v, other._v))

    def magnitude(self) -> float:
        return float(np.linalg.norm(self._v))

    def normalize(self) -> Vector:
        magnitude = self.magnitude()
        if magnitude == 0 or magnitude == 1:
            return self
        return Vector._of(self._v / magnitude)

    def to_point(self) -> Point:
        x, y, z = self.coordinates
        lon = math.degrees(math.atan2(y, x))
        lat = math.degrees(math.atan2(z, math.hypot(x, y)))
        return Point.wgs84(lon, lat)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vector):
            return NotImplemented
        return bool(np.array_equal(self._v, other._v))

    def __hash__(self) -> int:
        return hash(self.coordinates)

    def __repr__(self) -> str:
        x, y, z = self.coordinates
        return f"Vector({x}, {y}, {z})"


def assert_same_dimension(items: Sequence, what: str) -> None:
    """Raise DimensionMismatch naming the first item that differs from items[0]."""
    for i, item in enumerate(items[1:], start=1):
        if item.dimension != items[0].dimension:
            raise DimensionMismatch(
                items[0].dimension, item.dimension, what=f"{what}[{i}]"
            )


def assert_same_crs(items: Sequence) -> None:
    for item in items[1:]:
        if item.crs != items[0].crs:
            raise IncompatibleCRS(items[0].crs, item.crs)


class LineSegment(BaseModel):
    """Ordered pair of same-CRS, same-dimension points."""

    model_config = ConfigDict(frozen=True)

    start: Point
    end: Point

    @model_validator(mode="after")
    def endpoints_compatible(self) -> LineSegment:
        assert_same_dimension([self.start, self.end], "LineSegment point")
        assert_same_crs([self.start, self.end])
        return self

    @classmethod
    def of(cls, start: Point, end: Point) -> LineSegment:
        return cls(start=start, end=end)

    @property
    def points(self) -> tuple[Point, Point]:
        return (self.start, self.end)

    @property
    def crs(self) -> CRS:
        return self.start.crs

    @property
    def dimension(self) -> int:
        return self.start.dimension

    @property
    def dx(self) -> float:
        """Difference between the x-values of the end and start points."""
        return self.end.coordinate[0] - self.start.coordinate[0]

    def shared_point(self, other: LineSegment, epsilon: float = 0.0) -> Point | None:
        """The endpoint both segments share, if any."""
        for a in self.points:
            for b in other.points:
                if a.almost_equals(b, epsilon):
                    return a
        return None

    def to_wkt(self) -> str:
        inner = ",".join(f"{p.coordinate[0]} {p.coordinate[1]}" for p in self.points)
        return f"LINESTRING({inner})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LineSegment):
            return NotImplemented
        return (self.start == other.start and self.end == other.end) or (
            self.start == other.end and self.end == other.start
        )

    def __hash__(self) -> int:
        return hash(frozenset((self.start, self.end)))


class Polyline(BaseModel):
    """Open ordered sequence of at least two points."""

    model_config = ConfigDict(frozen=True)

    points: tuple[Point, ...]

    @field_validator("points")
    @classmethod
    def at_least_2_points(cls, v: tuple[Point, ...]) -> tuple[Point, ...]:
        if len(v) < 2:
            raise InvalidGeometry("Polyline cannot have less than 2 points")
        assert_same_dimension(v, "Point")
        assert_same_crs(v)
        return v

    @classmethod
    def of(cls, *points: Point) -> Polyline:
        return cls(points=points)

    @property
    def crs(self) -> CRS:
        return self.points[0].crs

    @property
    def dimension(self) -> int:
        return self.points[0].dimension

    def line_segments(self) -> list[LineSegment]:
        return [
            LineSegment(start=a, end=b) for a, b in zip(self.points, self.points[1:])
        ]

    def to_wkt(self) -> str:
        inner = ",".join(f"{p.coordinate[0]} {p.coordinate[1]}" for p in self.points)
        return f"LINESTRING({inner})"
