"""Operations shared by every algorithm family.

A family implements the CRS-specific primitives (point distance, segment
reference, ring containment, ring area). Everything expressed in terms of
those primitives lives here: distances between composite geometries,
multi-polygon area, and walking a boundary for linear referencing.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence, Union

from spatial_algo.config import EngineConfig
from spatial_algo.errors import DimensionMismatch, InvalidGeometry
from spatial_algo.models.crs import CRS
from spatial_algo.models.geometry import (
    LineSegment,
    Point,
    Polyline,
    assert_same_crs,
    assert_same_dimension,
)
from spatial_algo.models.polygon import MultiPolygon, SimplePolygon, close_ring

AnyPolygon = Union[SimplePolygon, MultiPolygon]
Geometry = Union[Point, LineSegment, Polyline, SimplePolygon, MultiPolygon]
HullInput = Union[Polyline, SimplePolygon, MultiPolygon, Sequence[Point]]


class AlgorithmFamily(ABC):
    """CRS-specific geometry algorithms."""

    crs: CRS

    def __init__(self, config: EngineConfig | None = None) -> None:
        self.config = config or EngineConfig()

    @property
    def epsilon(self) -> float:
        return self.config.epsilon

    # ── Primitives ────────────────────────────────────────────────────

    @abstractmethod
    def point_distance(self, a: Point, b: Point) -> float:
        """Distance between two points."""

    @abstractmethod
    def segment_point_distance(self, segment: LineSegment, point: Point) -> float:
        """Minimum distance between a line segment and a point."""

    @abstractmethod
    def segments_intersect(self, a: LineSegment, b: LineSegment) -> bool:
        """True if the two segments touch or cross."""

    @abstractmethod
    def reference_segment(self, start: Point, end: Point, d: float) -> Point | None:
        """Point at distance d from start towards end, or None if out of range."""

    @abstractmethod
    def is_ccw(self, ring: SimplePolygon | Sequence[Point]) -> bool:
        """True iff the ring is traversed counterclockwise."""

    @abstractmethod
    def within_ring(
        self, ring: SimplePolygon, point: Point, touching: bool = False
    ) -> bool:
        """Point-in-ring test."""

    @abstractmethod
    def within(self, polygon: AnyPolygon, point: Point, touching: bool = False) -> bool:
        """Point-in-polygon test, honoring shells and holes."""

    @abstractmethod
    def ring_area(self, ring: SimplePolygon) -> float:
        """Unsigned area enclosed by a single ring."""

    @abstractmethod
    def hull_indices(self, points: Sequence[Point]) -> list[int]:
        """Indices of the hull vertices of distinct points, counterclockwise."""

    # ── Convex hull ───────────────────────────────────────────────────

    def convex_hull(self, geometry: HullInput) -> SimplePolygon:
        """Smallest convex ring containing every point of the input.

        Polygons contribute their shell vertices only. The ring is
        counterclockwise and has no collinear vertices.
        """
        points = hull_input(geometry)
        indices = self.hull_indices(points)
        if len(indices) < 3:
            raise InvalidGeometry("Points are collinear; their hull has no area")
        return SimplePolygon(points=tuple(points[i] for i in indices))

    # ── Area ──────────────────────────────────────────────────────────

    def area(self, polygon: AnyPolygon) -> float:
        """Area of the shells minus the area of the holes."""
        shells = sum(self.ring_area(shell) for shell in polygon.shells)
        holes = sum(self.ring_area(hole) for hole in polygon.holes)
        return shells - holes

    # ── Distance ──────────────────────────────────────────────────────

    def distance(self, a: Geometry, b: Geometry) -> float:
        """Minimum distance between two geometries.

        Returns 0 when one geometry touches or is (partially) inside a
        polygon operand.
        """
        if a.dimension != b.dimension:
            raise DimensionMismatch(a.dimension, b.dimension, what="Operand")
        if isinstance(b, (SimplePolygon, MultiPolygon)) and not isinstance(
            a, (SimplePolygon, MultiPolygon)
        ):
            a, b = b, a

        if isinstance(a, (SimplePolygon, MultiPolygon)):
            return self._polygon_distance(a, b)
        if isinstance(a, Point) and isinstance(b, Point):
            return self.point_distance(a, b)
        if isinstance(b, Point):
            return min(self.segment_point_distance(s, b) for s in _segments(a))
        if isinstance(a, Point):
            return min(self.segment_point_distance(s, a) for s in _segments(b))
        return self._min_segment_distance(_segments(a), _segments(b))

    def segment_distance(self, a: LineSegment, b: LineSegment) -> float:
        if self.segments_intersect(a, b):
            return 0.0
        return min(
            [self.segment_point_distance(b, p) for p in a.points]
            + [self.segment_point_distance(a, p) for p in b.points]
        )

    def _min_segment_distance(
        self, a: list[LineSegment], b: list[LineSegment]
    ) -> float:
        return min(self.segment_distance(s, t) for s in a for t in b)

    def _polygon_distance(self, polygon: AnyPolygon, other: Geometry) -> float:
        edges = polygon.line_segments()
        if isinstance(other, Point):
            if self.within(polygon, other):
                return 0.0
            return min(self.segment_point_distance(s, other) for s in edges)
        if isinstance(other, (SimplePolygon, MultiPolygon)):
            if self.within(polygon, other.shells[0].points[0]) or self.within(
                other, polygon.shells[0].points[0]
            ):
                return 0.0
            return self._min_segment_distance(edges, other.line_segments())
        segments = _segments(other)
        if self.within(polygon, segments[0].start):
            return 0.0
        return self._min_segment_distance(edges, segments)

    # ── Linear referencing ────────────────────────────────────────────

    def reference(
        self,
        geometry: LineSegment | Polyline | SimplePolygon,
        d: float,
        start: Point | None = None,
        towards: Point | None = None,
    ) -> Point | None:
        """Point at distance d along a segment, polyline or ring boundary.

        For polylines and rings, ``start`` picks the vertex to start from and
        ``towards`` one of its neighbours, which fixes the traversal
        direction (forward or backward). Returns None when d is negative or
        longer than the path.
        """
        if isinstance(geometry, LineSegment):
            return self.reference_segment(geometry.start, geometry.end, d)
        if isinstance(geometry, SimplePolygon):
            path = _ring_path(geometry, start, towards, self.epsilon)
        elif isinstance(geometry, Polyline):
            path = _polyline_path(geometry, start, towards, self.epsilon)
        else:
            raise InvalidGeometry(
                f"Cannot linearly reference a {type(geometry).__name__}"
            )
        return self._reference_path(path, d)

    def _reference_path(self, path: list[Point], d: float) -> Point | None:
        if d < 0:
            return None
        for a, b in zip(path, path[1:]):
            length = self.point_distance(a, b)
            if d <= length:
                return self.reference_segment(a, b, d)
            d -= length
        if d <= self.epsilon:
            return path[-1]
        return None


def _segments(geometry: LineSegment | Polyline) -> list[LineSegment]:
    if isinstance(geometry, LineSegment):
        return [geometry]
    return geometry.line_segments()


def ring_points(ring: SimplePolygon | Sequence[Point]) -> tuple[Point, ...]:
    """Closed point sequence of a single ring."""
    if isinstance(ring, SimplePolygon):
        return ring.points
    if isinstance(ring, (MultiPolygon, Polyline, LineSegment)):
        raise InvalidGeometry(
            f"Expected a single ring, got a {type(ring).__name__}"
        )
    return close_ring(tuple(ring))


def hull_input(geometry: HullInput) -> tuple[Point, ...]:
    """Distinct points a convex hull is built from, in input order."""
    if isinstance(geometry, (SimplePolygon, MultiPolygon)):
        points = tuple(p for shell in geometry.shells for p in shell.open_ring())
    elif isinstance(geometry, Polyline):
        points = geometry.points
    elif isinstance(geometry, LineSegment):
        raise InvalidGeometry("Convex hull needs at least 3 distinct points")
    else:
        points = tuple(geometry)
        if points:
            assert_same_dimension(points, "Point")
            assert_same_crs(points)
    distinct = tuple(dict.fromkeys(points))
    if len(distinct) < 3:
        raise InvalidGeometry("Convex hull needs at least 3 distinct points")
    return distinct


def _index_of(points: Sequence[Point], point: Point, epsilon: float) -> int:
    for i, p in enumerate(points):
        if p.almost_equals(point, epsilon):
            return i
    raise InvalidGeometry(f"{point!r} is not a vertex of the geometry")


def _ring_path(
    ring: SimplePolygon, start: Point | None, towards: Point | None, epsilon: float
) -> list[Point]:
    """Ring vertices from start, once around, in the direction of towards."""
    points = ring.open_ring()
    n = len(points)
    i = 0 if start is None else _index_of(points, start, epsilon)
    step = 1
    if towards is not None:
        if towards.almost_equals(points[(i + 1) % n], epsilon):
            step = 1
        elif towards.almost_equals(points[(i - 1) % n], epsilon):
            step = -1
        else:
            raise InvalidGeometry(f"{towards!r} is not adjacent to {points[i]!r}")
    return [points[(i + k * step) % n] for k in range(n + 1)]


def _polyline_path(
    polyline: Polyline, start: Point | None, towards: Point | None, epsilon: float
) -> list[Point]:
    """Polyline vertices from start to the end reached in the direction of towards."""
    points = polyline.points
    i = 0 if start is None else _index_of(points, start, epsilon)
    if towards is None:
        step = 1 if i < len(points) - 1 else -1
    elif i + 1 < len(points) and towards.almost_equals(points[i + 1], epsilon):
        step = 1
    elif i > 0 and towards.almost_equals(points[i - 1], epsilon):
        step = -1
    else:
        raise InvalidGeometry(f"{towards!r} is not adjacent to {points[i]!r}")
    return list(points[i::step])
