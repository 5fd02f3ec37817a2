"""Island straddling the antimeridian: proof of concept.

One WGS84 ring from 175°E to 175°W and one non-convex Cartesian ring.
Queries both through a single engine, then renders the Cartesian one with
its x-monotone chains.

   lat
    5 +------------------+
      |   island         |
   -5 +------------------+
     175E      180      175W
"""

from pathlib import Path

from spatial_algo import Point, SimplePolygon, SpatialEngine
from spatial_algo.errors import PoleEnclosure
from spatial_algo.export.render import render_geometry

engine = SpatialEngine()

# --- WGS84 ---
island = SimplePolygon.of(
    Point.wgs84(175, -5),
    Point.wgs84(-175, -5),
    Point.wgs84(-175, 5),
    Point.wgs84(175, 5),
)
print(f"Island area: {engine.area(island) / 1e6:,.0f} km²")
print(f"Counterclockwise: {engine.is_ccw(island)}")
for lon, lat in [(179, 2), (-179, -2), (3, 2)]:
    print(f"  ({lon}, {lat}) inside: {engine.within(island, Point.wgs84(lon, lat))}")

arctic = SimplePolygon.of(*(Point.wgs84(lon, 85) for lon in (-135, -45, 45, 135)))
try:
    engine.within(arctic, Point.wgs84(0, 89))
except PoleEnclosure as e:
    print(f"Arctic ring rejected: {e}")

# --- Cartesian ---
shell = SimplePolygon.of(*(Point.cartesian(x, y) for x, y in
                           [(-18, -12), (-3, -3), (10, -15), (18, 3), (-2, 14),
                            (-11, 8), (0, 1), (-17, 2), (-21, 12), (-25, 4),
                            (-29, -3), (-22, -9), (-17, -6), (-27, -14)]))
chains = engine.partition(shell)
print(f"Cartesian area: {engine.area(shell):.1f}, {len(chains)} monotone chains")
hull = engine.convex_hull(shell)
print(f"Convex hull: {len(hull.open_ring())} vertices, area {engine.area(hull):.1f}")

output = Path(__file__).parent / "output"
output.mkdir(exist_ok=True)
queries = [Point.cartesian(x, y) for x, y in [(0, 0), (-10, 10), (5, -5), (-20, -5)]]
result = render_geometry(
    shell,
    output / "chains.png",
    chains=chains,
    points=[(q, engine.within(shell, q)) for q in queries],
)
print(f"Rendered to: {result}")
