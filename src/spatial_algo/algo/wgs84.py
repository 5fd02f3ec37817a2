"""Spherical algorithms for WGS84 (longitude, latitude) coordinates.

Points are lifted onto the unit sphere as n-vectors; distances are great
circle arcs scaled by the configured earth radius.
"""

from __future__ import annotations

import logging
import math
from typing import Sequence

import numpy as np

from spatial_algo.algo.base import AlgorithmFamily, AnyPolygon, ring_points
from spatial_algo.algo.hull import graham_scan
from spatial_algo.errors import DimensionMismatch, InvalidGeometry, PoleEnclosure
from spatial_algo.models.crs import CRS
from spatial_algo.models.geometry import LineSegment, Point, Vector
from spatial_algo.models.polygon import SimplePolygon

logger = logging.getLogger(__name__)

NORTH_POLE = Vector(0.0, 0.0, 1.0)

# A ring that does not enclose a pole turns through ±360°; one that does
# turns through roughly 0°. Anything in between is treated as ambiguous.
COURSE_DELTA_THRESHOLD = 270.0


def angle_to(c1: Vector, point: Vector, c2: Vector) -> float:
    """Signed angle in radians from c1 to c2, with the sign taken from the
    side of the plane they span that ``point`` lies on."""
    cross = c1.cross(c2)
    sign = float(np.sign(cross.dot(point)))
    return math.atan2(cross.magnitude() * sign, c1.dot(c2))


def angle_delta(a: float, b: float) -> float:
    """Smallest signed turn in degrees from bearing a to bearing b."""
    if b < a:
        b += 360
    result = b - a
    if result > 180:
        result -= 360
    return result


def wrap_longitude(angle: float) -> float:
    """Reduce an angle in degrees to (-180, 180]."""
    angle = math.fmod(angle, 360.0)
    if angle > 180:
        angle -= 360
    elif angle <= -180:
        angle += 360
    return angle


def initial_bearing(a: Point, b: Point) -> float:
    """Compass bearing in degrees [0, 360) when leaving a towards b."""
    u, v = Vector.from_point(a), Vector.from_point(b)
    c1 = u.cross(v)
    c2 = u.cross(NORTH_POLE)
    return (math.degrees(angle_to(c1, u, c2)) + 360) % 360


def final_bearing(a: Point, b: Point) -> float:
    """Compass bearing in degrees on arrival at b coming from a."""
    return (initial_bearing(b, a) + 180) % 360


def course_delta(points: Sequence[Point]) -> float:
    """Total turning, in degrees, of a walk around a closed ring.

    Sums the turn along each great-circle edge plus the turn at each
    vertex. Compass bearings grow clockwise, so each turn is taken as the
    earlier bearing minus the later one: +360 for a counterclockwise ring,
    -360 for a clockwise one, about 0 around a pole.
    """
    total = 0.0
    previous_final: float | None = None
    for a, b in zip(points, points[1:]):
        initial = initial_bearing(a, b)
        final = final_bearing(a, b)
        if previous_final is not None:
            total += angle_delta(initial, previous_final)
        total += angle_delta(final, initial)
        previous_final = final
    return total + angle_delta(initial_bearing(points[0], points[1]), previous_final)


class WGS84Algorithms(AlgorithmFamily):
    crs = CRS.WGS84

    @property
    def radius(self) -> float:
        return self.config.earth_radius

    # ── Orientation ───────────────────────────────────────────────────

    def is_ccw(self, ring: SimplePolygon | Sequence[Point]) -> bool:
        points = ring_points(ring)
        return course_delta(points) > COURSE_DELTA_THRESHOLD

    # ── Containment ───────────────────────────────────────────────────

    def within_ring(
        self, ring: SimplePolygon, point: Point, touching: bool = False
    ) -> bool:
        """Crossing-parity test along the point's meridian, northwards.

        Longitudes are compared modulo 360 so rings that straddle the
        antimeridian work unchanged. Rings enclosing a pole are rejected.
        """
        delta = course_delta(ring.points)
        if abs(delta) <= COURSE_DELTA_THRESHOLD:
            logger.warning(
                "Ring with course delta %.3f encloses a pole; refusing within test",
                delta,
            )
            raise PoleEnclosure(delta)
        if touching and self.on_boundary(ring, point):
            return True

        lon_p, lat_p = point.coordinate[0], point.coordinate[1]
        inside = False
        for a, b in zip(ring.points, ring.points[1:]):
            lon_a, lat_a = a.coordinate[0], a.coordinate[1]
            lat_b = b.coordinate[1]
            dlon = wrap_longitude(b.coordinate[0] - lon_a)
            if dlon == 0:
                continue
            offset = wrap_longitude(lon_p - lon_a)
            if dlon > 0:
                hit = 0 <= offset < dlon
            else:
                hit = dlon < offset <= 0
            if not hit:
                continue
            lat = lat_a + (offset / dlon) * (lat_b - lat_a)
            if lat > lat_p:
                inside = not inside
        return inside

    def on_boundary(self, ring: SimplePolygon, point: Point) -> bool:
        tolerance = self.epsilon * self.radius
        return any(
            self.segment_point_distance(edge, point) <= tolerance
            for edge in ring.line_segments()
        )

    def within(self, polygon: AnyPolygon, point: Point, touching: bool = False) -> bool:
        """A point is within when it lies in more shells than holes."""
        if isinstance(polygon, SimplePolygon):
            return self.within_ring(polygon, point, touching)
        if touching and any(self.on_boundary(h, point) for h in polygon.holes):
            return True
        shells = sum(1 for s in polygon.shells if self.within_ring(s, point, touching))
        holes = sum(1 for h in polygon.holes if self.within_ring(h, point))
        return shells > holes

    # ── Distance ──────────────────────────────────────────────────────

    def vector_distance(self, u: Vector, v: Vector) -> float:
        return self.radius * math.atan2(u.cross(v).magnitude(), u.dot(v))

    def point_distance(self, a: Point, b: Point) -> float:
        if a.dimension != b.dimension:
            raise DimensionMismatch(a.dimension, b.dimension)
        return self.vector_distance(Vector.from_point(a), Vector.from_point(b))

    def segment_point_distance(self, segment: LineSegment, point: Point) -> float:
        """Cross-track distance when the point projects inside the arc,
        otherwise the distance to the nearer endpoint."""
        u1 = Vector.from_point(segment.start)
        u2 = Vector.from_point(segment.end)
        p = Vector.from_point(point)
        c1 = u1.cross(u2)
        if c1.magnitude() == 0:
            return self.vector_distance(u1, p)
        # p must be on the inner side of both arc endpoints
        extent1 = c1.cross(u1).dot(p)
        extent2 = u2.cross(c1).dot(p)
        if extent1 < 0 or extent2 < 0:
            return min(self.vector_distance(u1, p), self.vector_distance(u2, p))
        nearest = c1.cross(p.cross(c1))
        if nearest.magnitude() == 0:
            return min(self.vector_distance(u1, p), self.vector_distance(u2, p))
        return self.vector_distance(nearest.normalize(), p)

    def intersection(self, a: LineSegment, b: LineSegment) -> Point | None:
        """Point where two great-circle arcs cross, if they do."""
        u1, u2 = Vector.from_point(a.start), Vector.from_point(a.end)
        v1, v2 = Vector.from_point(b.start), Vector.from_point(b.end)
        gc1 = u1.cross(u2)
        gc2 = v1.cross(v2)
        i1 = gc1.cross(gc2)
        if i1.magnitude() == 0:
            # same great circle
            return a.shared_point(b, self.epsilon)
        i1 = i1.normalize()
        i2 = i1.multiply(-1)
        mid = u1.add(u2).add(v1).add(v2)
        candidate = i1 if mid.dot(i1) > 0 else i2

        tolerance = self.epsilon * self.radius
        on_a = (
            self.vector_distance(u1, candidate) <= self.vector_distance(u1, u2) + tolerance
            and self.vector_distance(u2, candidate)
            <= self.vector_distance(u1, u2) + tolerance
        )
        on_b = (
            self.vector_distance(v1, candidate) <= self.vector_distance(v1, v2) + tolerance
            and self.vector_distance(v2, candidate)
            <= self.vector_distance(v1, v2) + tolerance
        )
        if on_a and on_b:
            return candidate.to_point()
        return None

    def segments_intersect(self, a: LineSegment, b: LineSegment) -> bool:
        return self.intersection(a, b) is not None

    # ── Linear referencing ────────────────────────────────────────────

    def reference_segment(self, start: Point, end: Point, d: float) -> Point | None:
        """Spherical interpolation d metres along the arc from start to end."""
        length = self.point_distance(start, end)
        if d < 0 or d - length > self.epsilon * self.radius:
            return None
        if length == 0:
            return start
        u, v = Vector.from_point(start), Vector.from_point(end)
        normal = u.cross(v)
        if normal.magnitude() == 0:
            return start
        direction = normal.normalize().cross(u)
        delta = min(d, length) / self.radius
        return u.multiply(math.cos(delta)).add(direction.multiply(math.sin(delta))).to_point()

    # ── Area and centroid ─────────────────────────────────────────────

    def ring_area(self, ring: SimplePolygon) -> float:
        """Girard's theorem: spherical excess of the ring times R²."""
        vectors = [Vector.from_point(p) for p in ring.points]
        circles = [u.cross(v) for u, v in zip(vectors, vectors[1:])]
        circles.append(circles[0])
        n = len(circles) - 1
        turning = sum(
            angle_to(circles[i], vectors[i + 1], circles[i + 1]) for i in range(n)
        )
        interior = n * math.pi - abs(turning)
        excess = interior - (n - 2) * math.pi
        return excess * self.radius**2

    def mean(self, points: Sequence[Point]) -> Point:
        """Geographic mean: normalized sum of the points' n-vectors."""
        total = Vector(0.0, 0.0, 0.0)
        for p in points:
            total = total.add(Vector.from_point(p))
        return total.normalize().to_point()

    # ── Convex hull ───────────────────────────────────────────────────

    def hull_indices(self, points: Sequence[Point]) -> list[int]:
        """Graham scan in the gnomonic projection around the points' pole.

        The projection maps great circles to straight lines, so the planar
        hull of the projected points is the spherical hull.
        """
        vectors = np.array([Vector.from_point(p).coordinates for p in points])
        pole = hemisphere_pole(vectors, self.epsilon)
        if pole is None:
            raise InvalidGeometry("Points do not lie all on the same hemisphere")
        local = vectors @ hull_frame(pole).T
        if (local[:, 2] <= self.epsilon).any():
            raise InvalidGeometry("Points do not lie all on the same hemisphere")
        plane = local[:, :2] / local[:, 2:]
        return graham_scan([(float(x), float(y)) for x, y in plane], self.epsilon)


def hemisphere_pole(vectors: np.ndarray, epsilon: float) -> np.ndarray | None:
    """Centre of a hemisphere holding every vector, or None if none exists.

    Each great circle through two of the vectors that has all the others
    on one side contributes its normal on that side; the pole is their
    normalized sum.
    """
    normals = np.cross(vectors[:, None, :], vectors[None, :, :])
    lengths = np.linalg.norm(normals, axis=2)
    usable = lengths > epsilon
    normals[usable] /= lengths[usable][:, None]
    dots = normals @ vectors.T
    valid = usable & (dots >= -epsilon).all(axis=2)
    if not valid.any():
        return None
    center = normals[valid].sum(axis=0)
    magnitude = np.linalg.norm(center)
    if magnitude <= epsilon:
        return None
    return center / magnitude


def hull_frame(pole: np.ndarray) -> np.ndarray:
    """Rows are the x, y and z axes of a right-handed frame with z at pole."""
    north = np.array(NORTH_POLE.coordinates)
    x_axis = np.cross(pole, north)
    length = np.linalg.norm(x_axis)
    if length == 0:
        x_axis = np.array([1.0, 0.0, 0.0])
    else:
        x_axis = x_axis / length
    y_axis = np.cross(pole, x_axis)
    return np.array([x_axis, y_axis, pole])
