"""Tests for PNG rendering."""

from spatial_algo import Point, SimplePolygon, SpatialEngine
from spatial_algo.export.render import render_geometry

PNG_MAGIC = b"\x89PNG"


def _zigzag() -> SimplePolygon:
    coords = [
        (-18, -12), (-3, -3), (10, -15), (18, 3), (-2, 14), (-11, 8), (0, 1),
        (-17, 2), (-21, 12), (-25, 4), (-29, -3), (-22, -9), (-17, -6), (-27, -14),
    ]
    return SimplePolygon(points=tuple(Point.cartesian(*c) for c in coords))


def _square(size: float) -> SimplePolygon:
    corners = [(-size, -size), (size, -size), (size, size), (-size, size)]
    return SimplePolygon(points=tuple(Point.cartesian(*c) for c in corners))


class TestRenderGeometry:
    def test_simple_polygon(self, tmp_path):
        out = render_geometry(_square(10), tmp_path / "square.png")
        assert out == tmp_path / "square.png"
        assert out.read_bytes()[:4] == PNG_MAGIC

    def test_with_chains_and_points(self, tmp_path):
        engine = SpatialEngine()
        polygon = _zigzag()
        queries = [Point.cartesian(0, 0), Point.cartesian(-5, 5), Point.cartesian(40, 0)]
        out = render_geometry(
            polygon,
            str(tmp_path / "zigzag.png"),
            chains=engine.partition(polygon),
            points=[(p, engine.within(polygon, p)) for p in queries],
            title="Monotone chains",
        )
        assert out.exists()
        assert out.read_bytes()[:4] == PNG_MAGIC

    def test_multipolygon_with_hole(self, tmp_path):
        polygon = _square(10).with_hole(_square(3))
        out = render_geometry(polygon, tmp_path / "donut.png", dpi=72)
        assert out.stat().st_size > 0
