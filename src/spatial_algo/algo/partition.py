"""Monotone chain partitioning of polygon and polyline boundaries.

Walks the boundary edge by edge and starts a new chain whenever the
coordinate along ``axis`` reverses. Edges with zero extent on the axis
never force a split; they stay in the chain being built.
"""

from __future__ import annotations

import logging
from typing import Sequence

from spatial_algo.errors import InvalidGeometry
from spatial_algo.models.chain import MonotoneChain
from spatial_algo.models.geometry import Point, Polyline
from spatial_algo.models.polygon import SimplePolygon

logger = logging.getLogger(__name__)

_Run = tuple[list[Point], int]


def edge_direction(a: Point, b: Point, axis: int = 0) -> int:
    """+1, -1 or 0 for the sign of b - a along ``axis``."""
    delta = b.coordinate[axis] - a.coordinate[axis]
    if delta == 0:
        return 0
    return 1 if delta > 0 else -1


def _compatible(d1: int, d2: int) -> bool:
    return d1 == 0 or d2 == 0 or d1 == d2


def _split(points: Sequence[Point], axis: int) -> list[_Run]:
    current = [points[0], points[1]]
    direction = edge_direction(points[0], points[1], axis)
    runs: list[_Run] = []
    for a, b in zip(points[1:], points[2:]):
        step = edge_direction(a, b, axis)
        if _compatible(direction, step):
            current.append(b)
            direction = direction or step
        else:
            runs.append((current, direction))
            current = [a, b]
            direction = step
    runs.append((current, direction))
    return runs


def _check_axis(axis: int, dimension: int) -> None:
    if not 0 <= axis < dimension:
        raise InvalidGeometry(
            f"Axis {axis} out of range for {dimension}-dimensional geometry"
        )


def partition(polygon: SimplePolygon, axis: int = 0) -> list[MonotoneChain]:
    """Split a ring into the fewest chains monotone along ``axis``.

    Chains come out in boundary order. When the run that closes the ring
    can continue the first run, the two are merged into a single chain
    placed last, so the concatenated edges are a rotation of the ring.
    """
    if not isinstance(polygon, SimplePolygon):
        raise InvalidGeometry(
            f"Only a single ring can be partitioned, not a {type(polygon).__name__}"
        )
    _check_axis(axis, polygon.dimension)
    runs = _split(polygon.points, axis)
    if len(runs) > 1:
        (first, first_dir), (last, last_dir) = runs[0], runs[-1]
        if _compatible(first_dir, last_dir):
            merged = (last + first[1:], last_dir or first_dir)
            runs = runs[1:-1] + [merged]
    chains = [MonotoneChain(points=tuple(p), axis=axis, direction=d) for p, d in runs]
    logger.debug(
        "Partitioned %d-edge ring into %d chains on axis %d",
        len(polygon.points) - 1,
        len(chains),
        axis,
    )
    return chains


def partition_polyline(polyline: Polyline, axis: int = 0) -> list[MonotoneChain]:
    """Same as partition, but the ends of an open line are never joined."""
    _check_axis(axis, polyline.dimension)
    return [
        MonotoneChain(points=tuple(p), axis=axis, direction=d)
        for p, d in _split(polyline.points, axis)
    ]
