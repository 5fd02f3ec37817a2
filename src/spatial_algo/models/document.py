"""JSON document format for feeding raw coordinates to the engine."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from spatial_algo.errors import InvalidGeometry
from spatial_algo.models.crs import CRS
from spatial_algo.models.geometry import Point
from spatial_algo.models.polygon import MultiPolygon, SimplePolygon


class GeometryDocument(BaseModel):
    """Rings as plain coordinate lists.

    Example:
        {"crs": "wgs84", "shells": [[[1, 0], [5, 2], [5, 6], [1, 4]]]}
    """

    crs: CRS = CRS.CARTESIAN
    shells: list[list[tuple[float, ...]]] = Field(default_factory=list)
    holes: list[list[tuple[float, ...]]] = Field(default_factory=list)

    @classmethod
    def load(cls, path: str | Path) -> GeometryDocument:
        """Load a document from a JSON file."""
        path = Path(path)
        return cls.model_validate_json(path.read_text())

    @classmethod
    def from_polygon(cls, polygon: SimplePolygon | MultiPolygon) -> GeometryDocument:
        def coords(ring: SimplePolygon) -> list[tuple[float, ...]]:
            return [p.coordinate for p in ring.open_ring()]

        return cls(
            crs=polygon.crs,
            shells=[coords(s) for s in polygon.shells],
            holes=[coords(h) for h in polygon.holes],
        )

    def save(self, path: str | Path) -> Path:
        """Save the document to a JSON file. Creates parent dirs if needed."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2))
        return path

    def _ring(self, coordinates: list[tuple[float, ...]]) -> SimplePolygon:
        return SimplePolygon(
            points=tuple(Point(crs=self.crs, coordinate=c) for c in coordinates)
        )

    def to_polygon(self) -> SimplePolygon | MultiPolygon:
        """A SimplePolygon for one shell without holes, else a MultiPolygon."""
        if not self.shells:
            raise InvalidGeometry("Document has no shells")
        shells = tuple(self._ring(c) for c in self.shells)
        holes = tuple(self._ring(c) for c in self.holes)
        if len(shells) == 1 and not holes:
            return shells[0]
        return MultiPolygon(shells=shells, holes=holes)
