"""Error types raised by geometry construction and algorithms.

All of them derive from GeometryError, a plain Exception rather than a
ValueError, so that pydantic validators let them through unwrapped.
"""

from __future__ import annotations


class GeometryError(Exception):
    """Base class for every geometric precondition violation."""


class DimensionMismatch(GeometryError):
    """Operands have different coordinate dimensionality."""

    def __init__(self, expected: int, actual: int, what: str = "Geometry") -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"{what} has different dimension: expected {expected}, got {actual}"
        )


class InvalidGeometry(GeometryError):
    """A ring or line is too short, or otherwise degenerate."""


class IncompatibleCRS(GeometryError):
    """Two operands are tagged with different coordinate reference systems."""

    def __init__(self, left, right) -> None:
        self.left = left
        self.right = right
        super().__init__(
            f"Incompatible Coordinate Reference Systems: {_name(left)} != {_name(right)}"
        )


class PoleEnclosure(GeometryError):
    """A WGS84 ring encloses a pole, which containment does not support."""

    def __init__(self, course_delta: float) -> None:
        self.course_delta = course_delta
        super().__init__(
            f"Polygon contains at least one pole (course delta {course_delta:.3f})"
        )


def _name(crs) -> str:
    return getattr(crs, "value", str(crs))
