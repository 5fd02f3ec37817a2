"""spatial-algo CLI.

Usage:
    python -m spatial_algo <command> <geometry.json> [options]

Every command reads a geometry document (see GeometryDocument) and prints
a JSON object to stdout. Failures print {"ok": false, "error": ...} and
exit with status 1.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

from spatial_algo.engine import SpatialEngine
from spatial_algo.errors import GeometryError
from spatial_algo.export.render import render_geometry
from spatial_algo.models.crs import CRS
from spatial_algo.models.document import GeometryDocument
from spatial_algo.models.geometry import Point
from spatial_algo.models.polygon import MultiPolygon, SimplePolygon

app = typer.Typer(
    name="spatial_algo",
    help="spatial-algo: containment, orientation, area and distance queries.",
    no_args_is_help=True,
)

engine = SpatialEngine()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _output(data: dict) -> None:
    """Print JSON output to stdout."""
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


def _fail(message: str) -> None:
    _output({"ok": False, "error": message})
    raise typer.Exit(1)


def _load_polygon(path: str) -> SimplePolygon | MultiPolygon:
    """Load a geometry document and build its polygon."""
    if not Path(path).exists():
        _fail(f"File not found: {path}")
    try:
        return GeometryDocument.load(path).to_polygon()
    except (GeometryError, ValidationError) as e:
        _fail(str(e))


def _load_simple(path: str) -> SimplePolygon:
    polygon = _load_polygon(path)
    if not isinstance(polygon, SimplePolygon):
        _fail("Command needs a single shell without holes")
    return polygon


def _point_json(point: Point | None) -> list[float] | None:
    return None if point is None else list(point.coordinate)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr"),
):
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

@app.command()
def area(path: str = typer.Argument(..., help="Geometry JSON file")):
    """Area of the shells minus the holes."""
    polygon = _load_polygon(path)
    try:
        value = engine.area(polygon)
    except GeometryError as e:
        _fail(str(e))
    _output({"ok": True, "crs": polygon.crs.value, "area": value})


@app.command()
def ccw(path: str = typer.Argument(..., help="Geometry JSON file")):
    """Whether the ring is counterclockwise."""
    polygon = _load_simple(path)
    _output({"ok": True, "crs": polygon.crs.value, "ccw": engine.is_ccw(polygon)})


@app.command()
def within(
    path: str = typer.Argument(..., help="Geometry JSON file"),
    x: float = typer.Argument(..., help="X (or longitude)"),
    y: float = typer.Argument(..., help="Y (or latitude)"),
    touching: bool = typer.Option(False, "--touching", help="Count boundary points as inside"),
):
    """Whether a point lies inside the polygon."""
    polygon = _load_polygon(path)
    point = Point(crs=polygon.crs, coordinate=(x, y))
    try:
        inside = engine.within(polygon, point, touching=touching)
    except GeometryError as e:
        _fail(str(e))
    _output({"ok": True, "point": [x, y], "within": inside})


@app.command()
def distance(
    x1: float = typer.Argument(...),
    y1: float = typer.Argument(...),
    x2: float = typer.Argument(...),
    y2: float = typer.Argument(...),
    crs: CRS = typer.Option(CRS.CARTESIAN, "--crs", help="Coordinate reference system"),
):
    """Distance between two points (metres for wgs84)."""
    a = Point(crs=crs, coordinate=(x1, y1))
    b = Point(crs=crs, coordinate=(x2, y2))
    _output({"ok": True, "crs": crs.value, "distance": engine.distance(a, b)})


@app.command()
def reference(
    path: str = typer.Argument(..., help="Geometry JSON file"),
    d: float = typer.Argument(..., help="Distance along the boundary"),
    start_index: int = typer.Option(0, "--start-index", help="Vertex to start from"),
    backward: bool = typer.Option(False, "--backward", help="Walk against ring order"),
):
    """Point at distance D along the ring boundary."""
    polygon = _load_simple(path)
    ring = polygon.open_ring()
    n = len(ring)
    start = ring[start_index % n]
    towards = ring[(start_index - 1) % n] if backward else ring[(start_index + 1) % n]
    try:
        point = engine.linear_reference(polygon, d, start=start, towards=towards)
    except GeometryError as e:
        _fail(str(e))
    _output({"ok": True, "distance": d, "point": _point_json(point)})


@app.command()
def partition(
    path: str = typer.Argument(..., help="Geometry JSON file"),
    axis: int = typer.Option(0, "--axis", help="Coordinate axis the chains are monotone on"),
):
    """Split the ring into monotone chains."""
    polygon = _load_simple(path)
    try:
        chains = engine.partition(polygon, axis=axis)
    except GeometryError as e:
        _fail(str(e))
    _output({
        "ok": True,
        "axis": axis,
        "chains": [
            {
                "direction": c.direction,
                "points": [_point_json(p) for p in c.points],
            }
            for c in chains
        ],
    })


@app.command()
def hull(path: str = typer.Argument(..., help="Geometry JSON file")):
    """Convex hull of the shell vertices, counterclockwise."""
    polygon = _load_polygon(path)
    try:
        ring = engine.convex_hull(polygon)
    except GeometryError as e:
        _fail(str(e))
    _output({
        "ok": True,
        "crs": polygon.crs.value,
        "hull": [_point_json(p) for p in ring.open_ring()],
    })


@app.command()
def bbox(path: str = typer.Argument(..., help="Geometry JSON file")):
    """Per-dimension min and max corners."""
    polygon = _load_polygon(path)
    lo, hi = engine.bounding_box(polygon)
    _output({"ok": True, "min": _point_json(lo), "max": _point_json(hi)})


@app.command()
def render(
    path: str = typer.Argument(..., help="Geometry JSON file"),
    output: str = typer.Argument(..., help="Output PNG path"),
    chains: bool = typer.Option(False, "--chains", help="Overlay monotone chains"),
    title: Optional[str] = typer.Option(None, "--title", "-t", help="Plot title"),
):
    """Render the polygon to PNG."""
    polygon = _load_polygon(path)
    overlay = None
    if chains:
        if not isinstance(polygon, SimplePolygon):
            _fail("--chains needs a single shell without holes")
        overlay = engine.partition(polygon)
    out = render_geometry(polygon, output, chains=overlay, title=title)
    _output({"ok": True, "path": str(out)})


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    app()
