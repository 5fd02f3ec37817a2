"""Tests for CRS dispatch and the SpatialEngine facade."""

import logging
import math
from concurrent.futures import ThreadPoolExecutor

import pytest
from pydantic import ValidationError

from spatial_algo import (
    CRS,
    DimensionMismatch,
    EngineConfig,
    IncompatibleCRS,
    InvalidGeometry,
    LineSegment,
    Point,
    Polyline,
    SimplePolygon,
    SpatialEngine,
)
from spatial_algo.algo import CartesianAlgorithms, WGS84Algorithms, check_crs


def square(size: float, crs: CRS = CRS.CARTESIAN) -> SimplePolygon:
    corners = [(-size, -size), (size, -size), (size, size), (-size, size)]
    return SimplePolygon(points=tuple(Point(crs=crs, coordinate=c) for c in corners))


@pytest.fixture(scope="module")
def engine() -> SpatialEngine:
    return SpatialEngine()


class TestCheckCRS:
    def test_single_operand(self):
        assert check_crs(Point.wgs84(0, 0)) is CRS.WGS84

    def test_matching(self):
        assert check_crs(square(1), Point.cartesian(0, 0)) is CRS.CARTESIAN

    def test_mismatch(self):
        with pytest.raises(IncompatibleCRS) as exc:
            check_crs(square(1), Point.wgs84(0, 0))
        assert exc.value.left is CRS.CARTESIAN
        assert exc.value.right is CRS.WGS84

    def test_polyline_operand(self):
        line = Polyline.of(Point.wgs84(0, 0), Point.wgs84(1, 1))
        assert check_crs(line, Point.wgs84(0, 0)) is CRS.WGS84


class TestEngineDispatch:
    def test_family_table(self, engine):
        assert isinstance(engine.family(CRS.CARTESIAN), CartesianAlgorithms)
        assert isinstance(engine.family(CRS.WGS84), WGS84Algorithms)

    def test_family_table_read_only(self, engine):
        with pytest.raises(TypeError):
            engine.families[CRS.WGS84] = CartesianAlgorithms()

    def test_within_by_crs(self, engine):
        assert engine.within(square(10), Point.cartesian(0, 0))
        assert not engine.within(square(10), Point.cartesian(-20, 0))
        assert engine.within(square(10, CRS.WGS84), Point.wgs84(0, 0))

    def test_area_by_crs(self, engine):
        assert math.isclose(engine.area(square(10)), 400.0)
        # 20° x 20° around the equator is far more than 400 m²
        assert engine.area(square(10, CRS.WGS84)) > 4e12

    def test_is_ccw_by_crs(self, engine):
        assert engine.is_ccw(square(10))
        assert engine.is_ccw(square(10, CRS.WGS84))

    def test_distance_same_point(self, engine):
        for p in (Point.cartesian(3, 4), Point.wgs84(3, 4)):
            assert engine.distance(p, p) == 0.0

    def test_linear_reference(self, engine):
        segment = LineSegment.of(Point.cartesian(0, 0), Point.cartesian(10, 10))
        assert engine.linear_reference(segment, 0) == Point.cartesian(0, 0)
        assert engine.linear_reference(segment, 100) is None

    def test_partition_polygon_and_polyline(self, engine):
        assert len(engine.partition(square(10))) == 2
        line = Polyline.of(Point.cartesian(0, 0), Point.cartesian(1, 1), Point.cartesian(2, 0))
        assert len(engine.partition(line, axis=1)) == 2

    def test_bounding_box(self, engine):
        lo, hi = engine.bounding_box(square(3).with_shell(square(5)))
        assert lo == Point.cartesian(-5, -5)
        assert hi == Point.cartesian(5, 5)


class TestEngineErrors:
    def test_within_mixed_crs(self, engine):
        with pytest.raises(IncompatibleCRS):
            engine.within(square(10, CRS.WGS84), Point.cartesian(0, 0))

    def test_distance_mixed_crs(self, engine):
        with pytest.raises(IncompatibleCRS):
            engine.distance(Point.cartesian(0, 0), Point.wgs84(0, 0))

    def test_within_dimension_mismatch(self, engine):
        with pytest.raises(DimensionMismatch):
            engine.within(square(10), Point.cartesian(0, 0, 0))

    def test_distance_dimension_mismatch(self, engine):
        with pytest.raises(DimensionMismatch, match="expected 2, got 3"):
            engine.distance(Point.cartesian(0, 0), Point.cartesian(0, 0, 0))

    def test_reference_start_in_other_crs(self, engine):
        with pytest.raises(IncompatibleCRS):
            engine.linear_reference(square(10), 5, start=Point.wgs84(-10, -10))

    def test_is_ccw_rejects_multipolygon(self, engine):
        for crs in CRS:
            multi = square(10, crs).with_shell(square(2, crs))
            with pytest.raises(InvalidGeometry, match="single ring"):
                engine.is_ccw(multi)

    def test_family_is_ccw_rejects_multipolygon(self):
        multi = square(10).with_hole(square(2))
        with pytest.raises(InvalidGeometry, match="single ring"):
            CartesianAlgorithms().is_ccw(multi)
        with pytest.raises(InvalidGeometry, match="single ring"):
            WGS84Algorithms().is_ccw(square(10, CRS.WGS84).with_hole(square(2, CRS.WGS84)))

    def test_partition_rejects_multipolygon(self, engine):
        with pytest.raises(InvalidGeometry, match="single ring"):
            engine.partition(square(10).with_hole(square(2)))

    def test_reference_start_must_be_a_vertex(self, engine):
        near_corner = Point.cartesian(-10 + 1e-9, -10)
        with pytest.raises(InvalidGeometry, match="not a vertex"):
            engine.linear_reference(square(10), 5, start=near_corner)


class TestEngineConfig:
    def test_defaults(self):
        config = EngineConfig()
        assert config.epsilon == 1e-12
        assert config.earth_radius == 6371e3

    def test_rejects_non_positive(self):
        with pytest.raises(ValidationError):
            EngineConfig(epsilon=0)
        with pytest.raises(ValidationError):
            EngineConfig(earth_radius=-1)

    def test_radius_reaches_wgs84(self):
        engine = SpatialEngine(EngineConfig(earth_radius=1.0))
        quarter = engine.distance(Point.wgs84(0, 0), Point.wgs84(90, 0))
        assert quarter == pytest.approx(math.pi / 2)

    def test_epsilon_reaches_vertex_lookup(self):
        loose = SpatialEngine(EngineConfig(epsilon=1e-6))
        near_corner = Point.cartesian(-10 + 1e-9, -10)
        point = loose.linear_reference(square(10), 5, start=near_corner)
        assert point == Point.cartesian(-5, -10)

    def test_construction_logged(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="spatial_algo.engine"):
            SpatialEngine()
        assert "SpatialEngine ready" in caplog.text


class TestConcurrency:
    def test_parallel_queries_match_sequential(self, engine):
        polygon = square(10)
        points = [Point.cartesian(x, y) for x in range(-15, 16, 3) for y in range(-15, 16, 3)]
        expected = [engine.within(polygon, p) for p in points]
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(lambda p: engine.within(polygon, p), points))
        assert results == expected

    def test_parallel_mixed_crs(self, engine):
        jobs = [square(10), square(10, CRS.WGS84)] * 20
        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(engine.is_ccw, jobs))
        assert all(results)
