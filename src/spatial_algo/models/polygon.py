"""Polygon variants: a single closed ring, or shells with holes.

Both variants carry a ``kind`` discriminator so a ``Polygon`` can be parsed
from JSON and dispatched with isinstance checks. Geometry is never mutated;
``with_shell``/``with_hole`` recompose into a new MultiPolygon.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from spatial_algo.errors import InvalidGeometry
from spatial_algo.models.crs import CRS
from spatial_algo.models.geometry import (
    LineSegment,
    Point,
    assert_same_crs,
    assert_same_dimension,
)


def close_ring(points: tuple[Point, ...]) -> tuple[Point, ...]:
    """Append a copy of the first point unless the ring is already closed."""
    if len(points) < 2:
        raise InvalidGeometry("Cannot close ring of less than 2 points")
    if points[0] == points[-1]:
        return points
    return points + (points[0],)


def open_ring(points: tuple[Point, ...]) -> tuple[Point, ...]:
    """Drop the closing point of a closed ring."""
    return points[:-1]


def _bounding_box(points: tuple[Point, ...]) -> tuple[Point, Point]:
    columns = list(zip(*(p.coordinate for p in points)))
    crs = points[0].crs
    return (
        Point(crs=crs, coordinate=tuple(min(c) for c in columns)),
        Point(crs=crs, coordinate=tuple(max(c) for c in columns)),
    )


def _box_contains(outer: tuple[Point, Point], inner: tuple[Point, Point]) -> bool:
    return all(
        lo <= i_lo and i_hi <= hi
        for lo, hi, i_lo, i_hi in zip(
            outer[0].coordinate, outer[1].coordinate, inner[0].coordinate, inner[1].coordinate
        )
    )


def _wkt_ring(points: tuple[Point, ...]) -> str:
    return "(" + ",".join(f"{p.coordinate[0]} {p.coordinate[1]}" for p in points) + ")"


class SimplePolygon(BaseModel):
    """Closed ring of at least 3 points. Auto-closes (no need to repeat first point)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["simple"] = "simple"
    points: tuple[Point, ...]

    @field_validator("points")
    @classmethod
    def closed_ring_of_3(cls, v: tuple[Point, ...]) -> tuple[Point, ...]:
        closed = close_ring(v)
        if len(closed) < 4:
            raise InvalidGeometry("Polygon cannot have less than 3 points")
        assert_same_dimension(closed, "Point")
        assert_same_crs(closed)
        return closed

    @classmethod
    def of(cls, *points: Point) -> SimplePolygon:
        return cls(points=points)

    @property
    def crs(self) -> CRS:
        return self.points[0].crs

    @property
    def dimension(self) -> int:
        return self.points[0].dimension

    @property
    def is_simple(self) -> bool:
        return True

    @property
    def shells(self) -> tuple[SimplePolygon, ...]:
        return (self,)

    @property
    def holes(self) -> tuple[SimplePolygon, ...]:
        return ()

    def open_ring(self) -> tuple[Point, ...]:
        return open_ring(self.points)

    def line_segments(self) -> list[LineSegment]:
        """Edges of the ring, in traversal order, ending with the closing edge."""
        return [
            LineSegment(start=a, end=b) for a, b in zip(self.points, self.points[1:])
        ]

    def with_shell(self, shell: Polygon) -> MultiPolygon:
        return MultiPolygon(shells=all_shells(self, shell))

    def with_hole(self, hole: Polygon) -> MultiPolygon:
        return MultiPolygon(shells=(self,), holes=all_shells(hole))

    def bounding_box(self) -> tuple[Point, Point]:
        """(min, max) corner points over every dimension."""
        return _bounding_box(self.points)

    def to_wkt(self) -> str:
        return f"POLYGON({_wkt_ring(self.points)})"

    def __eq__(self, other: object) -> bool:
        """Same points in the same cyclic order, from any starting vertex."""
        if not isinstance(other, SimplePolygon):
            return NotImplemented
        a, b = self.open_ring(), other.open_ring()
        if len(a) != len(b):
            return False
        offset = next((i for i, p in enumerate(b) if p == a[0]), None)
        if offset is None:
            return False
        return all(a[i] == b[(i + offset) % len(b)] for i in range(1, len(a)))

    def __hash__(self) -> int:
        return hash(frozenset(self.open_ring()))


class MultiPolygon(BaseModel):
    """One or more shells, each optionally cut by holes."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["multi"] = "multi"
    shells: tuple[SimplePolygon, ...]
    holes: tuple[SimplePolygon, ...] = ()

    @model_validator(mode="after")
    def consistent_rings(self) -> MultiPolygon:
        if not self.shells:
            raise InvalidGeometry("MultiPolygon needs at least one shell")
        assert_same_dimension(self.shells, "Shell")
        assert_same_dimension(self.holes, "Hole")
        if self.holes:
            assert_same_dimension([self.shells[0], self.holes[0]], "Hole")
        assert_same_crs(self.shells + self.holes)
        return self

    @property
    def crs(self) -> CRS:
        return self.shells[0].crs

    @property
    def dimension(self) -> int:
        return self.shells[0].dimension

    @property
    def is_simple(self) -> bool:
        return False

    @property
    def points(self) -> tuple[Point, ...]:
        """Every shell point followed by every hole point."""
        return tuple(p for ring in self.shells + self.holes for p in ring.points)

    def line_segments(self) -> list[LineSegment]:
        return [s for ring in self.shells + self.holes for s in ring.line_segments()]

    def with_shell(self, shell: Polygon) -> MultiPolygon:
        return MultiPolygon(shells=all_shells(self, shell), holes=self.holes)

    def with_hole(self, hole: Polygon) -> MultiPolygon:
        return MultiPolygon(shells=self.shells, holes=self.holes + all_shells(hole))

    def bounding_box(self) -> tuple[Point, Point]:
        return _bounding_box(self.points)

    def holes_of(self, shell: SimplePolygon) -> tuple[SimplePolygon, ...]:
        """Holes whose bounding box lies inside the shell's bounding box.

        A hole inside no shell's box is listed under the first shell.
        """
        def owner(hole: SimplePolygon) -> int:
            box = hole.bounding_box()
            return next(
                (i for i, s in enumerate(self.shells) if _box_contains(s.bounding_box(), box)),
                0,
            )

        index = self.shells.index(shell)
        return tuple(h for h in self.holes if owner(h) == index)

    def to_wkt(self) -> str:
        parts = []
        for shell in self.shells:
            rings = [_wkt_ring(r.points) for r in (shell,) + self.holes_of(shell)]
            parts.append(f"({','.join(rings)})")
        return f"MULTIPOLYGON({','.join(parts)})"


Polygon = Annotated[Union[SimplePolygon, MultiPolygon], Field(discriminator="kind")]


def all_shells(*polygons: SimplePolygon | MultiPolygon) -> tuple[SimplePolygon, ...]:
    """Shells of every polygon, in order. Holes are ignored."""
    return tuple(shell for polygon in polygons for shell in polygon.shells)


def all_holes(*polygons: SimplePolygon | MultiPolygon) -> tuple[SimplePolygon, ...]:
    return tuple(hole for polygon in polygons for hole in polygon.holes)
