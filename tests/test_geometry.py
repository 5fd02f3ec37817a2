"""Tests for geometric primitives."""

import math

import pytest

from spatial_algo.errors import DimensionMismatch, IncompatibleCRS, InvalidGeometry
from spatial_algo.models import (
    CRS,
    LineSegment,
    Ordering,
    Point,
    Polyline,
    Vector,
    ternary_compare,
)


class TestPoint:
    def test_create(self):
        p = Point.cartesian(1.0, 2.0)
        assert p.x == 1.0
        assert p.y == 2.0
        assert p.crs is CRS.CARTESIAN
        assert p.dimension == 2

    def test_wgs84_is_lon_lat(self):
        p = Point.wgs84(12.5, 55.7)
        assert p.crs is CRS.WGS84
        assert p.coordinate == (12.5, 55.7)
        assert p.to_lat_lon() == "55.7 12.5"

    def test_zero_dimensions_rejected(self):
        with pytest.raises(InvalidGeometry, match="zero dimensions"):
            Point.cartesian()

    def test_equality(self):
        assert Point.cartesian(1.0, 2.0) == Point.cartesian(1.0, 2.0)

    def test_equality_is_exact(self):
        assert Point.cartesian(1.0, 2.0) != Point.cartesian(1.0 + 1e-13, 2.0)

    def test_almost_equals(self):
        p = Point.cartesian(1.0, 2.0)
        assert p.almost_equals(Point.cartesian(1.0 + 1e-13, 2.0))
        assert not p.almost_equals(Point.cartesian(1.0 + 1e-6, 2.0))
        assert p.almost_equals(Point.cartesian(1.0 + 1e-6, 2.0), epsilon=1e-5)
        assert not p.almost_equals(Point.wgs84(1.0, 2.0))

    def test_equal_points_hash_equal(self):
        a = Point.cartesian(1.0000000005)
        b = Point.cartesian(1.0000000005 - 1e-13)
        assert (a == b) == (hash(a) == hash(b))
        assert len({a, b}) == (1 if a == b else 2)
        assert len({a, Point.cartesian(1.0000000005)}) == 1

    def test_inequality(self):
        assert Point.cartesian(1.0, 2.0) != Point.cartesian(1.0, 2.001)

    def test_different_crs_not_equal(self):
        assert Point.cartesian(1.0, 2.0) != Point.wgs84(1.0, 2.0)

    def test_different_dimension_not_equal(self):
        assert Point.cartesian(1.0, 2.0) != Point.cartesian(1.0, 2.0, 0.0)

    def test_hash_equal_points(self):
        p1 = Point.cartesian(1.0, 2.0)
        p2 = Point.cartesian(1.0, 2.0)
        assert hash(p1) == hash(p2)
        assert len({p1, p2}) == 1

    def test_arithmetic(self):
        p = Point.cartesian(1.0, 2.0)
        assert p.add(1, 1) == Point.cartesian(2.0, 3.0)
        assert p.subtract(1, 2) == Point.cartesian(0.0, 0.0)
        assert p.multiply(3) == Point.cartesian(3.0, 6.0)
        assert p.divide(2) == Point.cartesian(0.5, 1.0)

    def test_arithmetic_keeps_crs(self):
        assert Point.wgs84(1.0, 2.0).add(1, 1).crs is CRS.WGS84

    def test_rotate(self):
        p = Point.cartesian(1.0, 0.0).rotate(math.pi / 2)
        assert math.isclose(p.x, 0.0, abs_tol=1e-12)
        assert math.isclose(p.y, 1.0)

    def test_frozen(self):
        p = Point.cartesian(1.0, 2.0)
        with pytest.raises(Exception):
            p.coordinate = (0.0, 0.0)

    def test_wkt(self):
        assert Point.cartesian(1.0, 2.0).to_wkt() == "POINT(1.0 2.0)"


class TestTernaryCompare:
    def test_less_greater_equal(self):
        assert ternary_compare((0, 0), (1, 1)) is Ordering.LESS
        assert ternary_compare((2, 2), (1, 1)) is Ordering.GREATER
        assert ternary_compare((1, 1), (1, 1)) is Ordering.EQUAL

    def test_equal_dimension_does_not_decide(self):
        assert ternary_compare((1, 0), (1, 1)) is Ordering.LESS
        assert ternary_compare((2, 1), (1, 1)) is Ordering.GREATER

    def test_disagreeing_signs_are_incomparable(self):
        assert ternary_compare((0, 2), (1, 1)) is Ordering.INCOMPARABLE
        assert not Ordering.INCOMPARABLE.comparable

    def test_ignored_dimension(self):
        assert ternary_compare((5, 0), (1, 1), ignore_dim=0) is Ordering.LESS
        assert ternary_compare((-5, 3), (1, 1), ignore_dim=0) is Ordering.GREATER

    def test_dimension_mismatch_is_incomparable(self):
        assert ternary_compare((0, 0), (0, 0, 0)) is Ordering.INCOMPARABLE

    def test_point_method(self):
        a, b = Point.cartesian(0, 0), Point.cartesian(1, 1)
        assert a.ternary_compare(b) is Ordering.LESS


class TestVector:
    def test_from_point_on_unit_sphere(self):
        v = Vector.from_point(Point.wgs84(37.0, -12.0))
        assert math.isclose(v.magnitude(), 1.0)

    def test_equator_prime_meridian(self):
        x, y, z = Vector.from_point(Point.wgs84(0.0, 0.0)).coordinates
        assert math.isclose(x, 1.0)
        assert math.isclose(y, 0.0, abs_tol=1e-12)
        assert math.isclose(z, 0.0, abs_tol=1e-12)

    def test_cross_and_dot(self):
        i, j = Vector(1, 0, 0), Vector(0, 1, 0)
        assert i.cross(j) == Vector(0, 0, 1)
        assert i.dot(j) == 0.0

    def test_normalize(self):
        v = Vector(3, 0, 4).normalize()
        assert math.isclose(v.magnitude(), 1.0)
        assert Vector(0, 0, 0).normalize() == Vector(0, 0, 0)

    def test_to_point_round_trip(self):
        p = Vector.from_point(Point.wgs84(-75.0, 40.0)).to_point()
        assert math.isclose(p.coordinate[0], -75.0)
        assert math.isclose(p.coordinate[1], 40.0)


class TestLineSegment:
    def test_create(self):
        s = LineSegment.of(Point.cartesian(0, 0), Point.cartesian(3, 4))
        assert s.dimension == 2
        assert s.dx == 3

    def test_equality_ignores_direction(self):
        a, b = Point.cartesian(0, 0), Point.cartesian(3, 4)
        assert LineSegment.of(a, b) == LineSegment.of(b, a)
        assert hash(LineSegment.of(a, b)) == hash(LineSegment.of(b, a))

    def test_shared_point(self):
        a, b, c = Point.cartesian(0, 0), Point.cartesian(1, 0), Point.cartesian(1, 1)
        assert LineSegment.of(a, b).shared_point(LineSegment.of(b, c)) == b
        assert LineSegment.of(a, b).shared_point(LineSegment.of(c, c.add(1, 1))) is None

    def test_shared_point_tolerance(self):
        a, b = Point.cartesian(0, 0), Point.cartesian(1, 0)
        near_b = Point.cartesian(1 + 1e-13, 0)
        other = LineSegment.of(near_b, Point.cartesian(2, 0))
        assert LineSegment.of(a, b).shared_point(other) is None
        assert LineSegment.of(a, b).shared_point(other, epsilon=1e-12) == b

    def test_segments_deduplicate_in_sets(self):
        a, b = Point.cartesian(0, 0), Point.cartesian(3, 4)
        assert len({LineSegment.of(a, b), LineSegment.of(b, a)}) == 1

    def test_dimension_mismatch(self):
        with pytest.raises(DimensionMismatch, match="expected 2, got 3"):
            LineSegment.of(Point.cartesian(0, 0), Point.cartesian(1, 1, 1))

    def test_crs_mismatch(self):
        with pytest.raises(IncompatibleCRS, match="cartesian != wgs84"):
            LineSegment.of(Point.cartesian(0, 0), Point.wgs84(1, 1))


class TestPolyline:
    def test_create(self):
        line = Polyline.of(Point.cartesian(0, 0), Point.cartesian(1, 0), Point.cartesian(1, 1))
        assert len(line.line_segments()) == 2
        assert line.to_wkt() == "LINESTRING(0.0 0.0,1.0 0.0,1.0 1.0)"

    def test_too_short(self):
        with pytest.raises(InvalidGeometry, match="less than 2 points"):
            Polyline.of(Point.cartesian(0, 0))
