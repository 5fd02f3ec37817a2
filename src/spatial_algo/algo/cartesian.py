"""Planar algorithms for Cartesian coordinates."""

from __future__ import annotations

import math
from typing import Sequence

from spatial_algo.algo.base import AlgorithmFamily, AnyPolygon, ring_points
from spatial_algo.algo.hull import graham_scan
from spatial_algo.errors import DimensionMismatch
from spatial_algo.models.crs import CRS
from spatial_algo.models.geometry import LineSegment, Ordering, Point, ternary_compare
from spatial_algo.models.polygon import SimplePolygon

FIXED_AXIS = 0
COMPARE_AXIS = 1


class CartesianAlgorithms(AlgorithmFamily):
    crs = CRS.CARTESIAN

    # ── Orientation ───────────────────────────────────────────────────

    def ccw(self, a: Point, b: Point, c: Point) -> int:
        """Sign of the z component of (b - a) x (c - a).

        +1 for a left turn, -1 for a right turn, 0 when collinear within
        epsilon.
        """
        z = (b.x - a.x) * (c.y - a.y) - (b.y - a.y) * (c.x - a.x)
        if abs(z) <= self.epsilon:
            return 0
        return 1 if z > 0 else -1

    def signed_area(self, points: Sequence[Point]) -> float:
        """Shoelace area of a closed ring; positive when counterclockwise."""
        total = 0.0
        for a, b in zip(points, points[1:]):
            total += a.x * b.y - b.x * a.y
        return total / 2

    def is_ccw(self, ring: SimplePolygon | Sequence[Point]) -> bool:
        points = ring_points(ring)
        return self.signed_area(points) > 0

    def ring_area(self, ring: SimplePolygon) -> float:
        return abs(self.signed_area(ring.points))

    # ── Containment ───────────────────────────────────────────────────

    def within_ring(
        self, ring: SimplePolygon, point: Point, touching: bool = False
    ) -> bool:
        """Even-odd ray casting along the positive fixed axis.

        An edge is kept when its endpoints lie on opposite sides of the
        point on the compare axis. An endpoint level with the point counts
        as above it, so a ray through a vertex is counted once.
        """
        if touching and self.on_boundary(ring, point):
            return True
        intersections = 0
        for a, b in zip(ring.points, ring.points[1:]):
            side_a = ternary_compare(a.coordinate, point.coordinate, ignore_dim=FIXED_AXIS)
            side_b = ternary_compare(b.coordinate, point.coordinate, ignore_dim=FIXED_AXIS)
            if not (side_a.comparable and side_b.comparable):
                continue
            if (side_a is Ordering.LESS) == (side_b is Ordering.LESS):
                continue
            order = ternary_compare(a.coordinate, b.coordinate, ignore_dim=FIXED_AXIS)
            lower, upper = (a, b) if order is Ordering.LESS else (b, a)
            if self._crossing_at(lower, upper, point) >= 0:
                intersections += 1
        return intersections % 2 == 1

    @staticmethod
    def _crossing_at(lower: Point, upper: Point, point: Point) -> float:
        """Signed offset along the fixed axis from the point to where the
        edge crosses the point's compare-axis level."""
        min_fixed, min_compare = lower.coordinate[FIXED_AXIS], lower.coordinate[COMPARE_AXIS]
        diff_fixed = upper.coordinate[FIXED_AXIS] - min_fixed
        diff_compare = upper.coordinate[COMPARE_AXIS] - min_compare
        if diff_compare == 0:
            return 0.0
        ratio = (point.coordinate[COMPARE_AXIS] - min_compare) / diff_compare
        return min_fixed + ratio * diff_fixed - point.coordinate[FIXED_AXIS]

    def on_boundary(self, ring: SimplePolygon, point: Point) -> bool:
        return any(
            self.segment_point_distance(edge, point) <= self.epsilon
            for edge in ring.line_segments()
        )

    def within(self, polygon: AnyPolygon, point: Point, touching: bool = False) -> bool:
        """Simple polygons use the ring test directly. A multi-polygon
        contains the point when every shell does and no hole does."""
        if isinstance(polygon, SimplePolygon):
            return self.within_ring(polygon, point, touching)
        if touching and any(self.on_boundary(h, point) for h in polygon.holes):
            return True
        if not all(self.within_ring(s, point, touching) for s in polygon.shells):
            return False
        return not any(self.within_ring(h, point) for h in polygon.holes)

    # ── Distance ──────────────────────────────────────────────────────

    def point_distance(self, a: Point, b: Point) -> float:
        if a.dimension != b.dimension:
            raise DimensionMismatch(a.dimension, b.dimension)
        return math.dist(a.coordinate, b.coordinate)

    def segment_point_distance(self, segment: LineSegment, point: Point) -> float:
        """Distance to the projection of the point, clamped onto the segment."""
        a, b = segment.start.coordinate, segment.end.coordinate
        p = point.coordinate
        ab = [bi - ai for ai, bi in zip(a, b)]
        length_sq = sum(c * c for c in ab)
        if length_sq == 0:
            return math.dist(a, p)
        t = sum((pi - ai) * c for ai, pi, c in zip(a, p, ab)) / length_sq
        t = max(0.0, min(1.0, t))
        projection = [ai + t * c for ai, c in zip(a, ab)]
        return math.dist(projection, p)

    def segments_intersect(self, a: LineSegment, b: LineSegment) -> bool:
        p1, p2 = a.start, a.end
        q1, q2 = b.start, b.end
        o1 = self.ccw(p1, p2, q1)
        o2 = self.ccw(p1, p2, q2)
        o3 = self.ccw(q1, q2, p1)
        o4 = self.ccw(q1, q2, p2)
        if o1 != o2 and o3 != o4:
            return True
        # collinear endpoints lying on the other segment
        return (
            (o1 == 0 and _in_extent(p1, p2, q1))
            or (o2 == 0 and _in_extent(p1, p2, q2))
            or (o3 == 0 and _in_extent(q1, q2, p1))
            or (o4 == 0 and _in_extent(q1, q2, p2))
        )

    # ── Linear referencing ────────────────────────────────────────────

    def reference_segment(self, start: Point, end: Point, d: float) -> Point | None:
        length = self.point_distance(start, end)
        if d < 0 or d - length > self.epsilon:
            return None
        if length == 0:
            return start
        fraction = min(d / length, 1.0)
        return Point(
            crs=start.crs,
            coordinate=tuple(
                s + fraction * (e - s) for s, e in zip(start.coordinate, end.coordinate)
            ),
        )

    # ── Convex hull ───────────────────────────────────────────────────

    def hull_indices(self, points: Sequence[Point]) -> list[int]:
        """Graham scan on the x/y plane."""
        if points[0].dimension != 2:
            raise DimensionMismatch(2, points[0].dimension, what="Convex hull point")
        return graham_scan([(p.x, p.y) for p in points], self.epsilon)


def _in_extent(a: Point, b: Point, p: Point) -> bool:
    """True if p lies inside the axis-aligned box spanned by a and b."""
    return (
        min(a.x, b.x) <= p.x <= max(a.x, b.x) and min(a.y, b.y) <= p.y <= max(a.y, b.y)
    )

