"""Graham scan over planar (x, y) coordinates.

Works on indices so callers can map the hull back to their own points,
including points that were projected onto the plane first.
"""

from __future__ import annotations

import math
from typing import Sequence

Coordinate = tuple[float, float]


def turn(a: Coordinate, b: Coordinate, c: Coordinate, epsilon: float = 0.0) -> int:
    """+1 for a left turn a -> b -> c, -1 for a right turn, 0 when collinear."""
    z = (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])
    if abs(z) <= epsilon:
        return 0
    return 1 if z > 0 else -1


def lowest(coordinates: Sequence[Coordinate]) -> int:
    """Index of the lowest coordinate, the leftmost one on ties."""
    return min(range(len(coordinates)), key=lambda i: (coordinates[i][1], coordinates[i][0]))


def polar_order(
    coordinates: Sequence[Coordinate], reference: int, epsilon: float = 0.0
) -> list[int]:
    """Indices sorted by polar angle around the reference, nearest first.

    Of several points at the same angle only the farthest is kept. The
    reference itself comes first.
    """
    rx, ry = coordinates[reference]

    def angle(i: int) -> float:
        return math.atan2(coordinates[i][1] - ry, coordinates[i][0] - rx)

    def distance(i: int) -> float:
        return math.hypot(coordinates[i][0] - rx, coordinates[i][1] - ry)

    rest = sorted(
        (i for i in range(len(coordinates)) if i != reference),
        key=lambda i: (angle(i), distance(i)),
    )
    kept = [reference]
    for i, j in zip(rest, rest[1:]):
        if abs(angle(i) - angle(j)) > epsilon:
            kept.append(i)
    if rest:
        kept.append(rest[-1])
    return kept


def graham_scan(coordinates: Sequence[Coordinate], epsilon: float = 0.0) -> list[int]:
    """Indices of the convex hull vertices, counterclockwise from the lowest."""
    if not coordinates:
        return []
    stack: list[int] = []
    for i in polar_order(coordinates, lowest(coordinates), epsilon):
        # a right turn (or no turn) at the top makes it an inner point
        while len(stack) > 1 and turn(
            coordinates[stack[-2]], coordinates[stack[-1]], coordinates[i], epsilon
        ) <= 0:
            stack.pop()
        stack.append(i)
    return stack
