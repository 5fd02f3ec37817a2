"""Monotone chains: boundary runs that never reverse along one axis."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from spatial_algo.errors import InvalidGeometry
from spatial_algo.models.geometry import LineSegment, Point


class MonotoneChain(BaseModel):
    """Ordered sub-sequence of boundary points, monotone along ``axis``.

    ``direction`` is +1 when the axis coordinate never decreases, -1 when it
    never increases, and 0 only when every edge has zero extent on the axis.
    Points stay in boundary traversal order; consecutive points are edges.
    """

    model_config = ConfigDict(frozen=True)

    points: tuple[Point, ...]
    axis: int = Field(default=0, ge=0)
    direction: int = Field(default=0, ge=-1, le=1)

    @field_validator("points")
    @classmethod
    def at_least_one_edge(cls, v: tuple[Point, ...]) -> tuple[Point, ...]:
        if len(v) < 2:
            raise InvalidGeometry("Monotone chain needs at least one edge")
        return v

    def line_segments(self) -> list[LineSegment]:
        return [
            LineSegment(start=a, end=b) for a, b in zip(self.points, self.points[1:])
        ]

    @property
    def min_value(self) -> float:
        """Smallest coordinate along the chain axis (always at an end)."""
        first = self.points[0].coordinate[self.axis]
        last = self.points[-1].coordinate[self.axis]
        return min(first, last)

    @property
    def max_value(self) -> float:
        first = self.points[0].coordinate[self.axis]
        last = self.points[-1].coordinate[self.axis]
        return max(first, last)

    def is_monotone(self) -> bool:
        values = [p.coordinate[self.axis] for p in self.points]
        steps = [b - a for a, b in zip(values, values[1:])]
        return all(s >= 0 for s in steps) or all(s <= 0 for s in steps)

    def to_wkt(self) -> str:
        inner = ",".join(f"{p.coordinate[0]} {p.coordinate[1]}" for p in self.points)
        return f"LINESTRING({inner})"
