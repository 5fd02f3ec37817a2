"""2D rendering of polygons, monotone chains and query points with matplotlib.

Draws:
- Shells filled, holes cut out in the background color
- Monotone chains as colored polylines on top of the boundary
- Query points as markers, colored by whether they fall inside
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import matplotlib
matplotlib.use("Agg")  # headless rendering
import matplotlib.pyplot as plt
import numpy as np

from spatial_algo.models.chain import MonotoneChain
from spatial_algo.models.geometry import Point
from spatial_algo.models.polygon import MultiPolygon, SimplePolygon

_CHAIN_COLORS = [
    "#1E88E5",  # blue
    "#43A047",  # green
    "#FB8C00",  # orange
    "#8E24AA",  # purple
    "#E53935",  # red
    "#00ACC1",  # teal
]

_BACKGROUND = "#FAFAFA"


def _ring_xy(ring: SimplePolygon) -> np.ndarray:
    """(n, 2) array of the ring's first two coordinates, closing point included."""
    return np.array([p.coordinate[:2] for p in ring.points], dtype=float)


def render_geometry(
    polygon: SimplePolygon | MultiPolygon,
    output_path: str | Path,
    chains: Sequence[MonotoneChain] | None = None,
    points: Sequence[tuple[Point, bool]] | None = None,
    title: str | None = None,
    dpi: int = 150,
) -> Path:
    """Render a polygon to PNG.

    Args:
        polygon: Simple or multi polygon to draw.
        output_path: Output image path.
        chains: Optional monotone chains drawn over the boundary.
        points: Optional (point, inside) pairs drawn as markers.
        title: Plot title (defaults to the CRS name).
        dpi: Image resolution.

    Returns:
        Path to the output image.
    """
    output_path = Path(output_path)
    fig, ax = plt.subplots(1, 1, figsize=(10, 10))

    ax.set_aspect("equal")
    ax.set_facecolor(_BACKGROUND)
    fig.patch.set_facecolor("white")

    for shell in polygon.shells:
        xy = _ring_xy(shell)
        ax.fill(xy[:, 0], xy[:, 1], color="#BBDEFB", alpha=0.6, zorder=1)
        ax.plot(xy[:, 0], xy[:, 1], color="#424242", linewidth=1.5, zorder=2)

    for hole in polygon.holes:
        xy = _ring_xy(hole)
        ax.fill(xy[:, 0], xy[:, 1], color=_BACKGROUND, zorder=1.5)
        ax.plot(xy[:, 0], xy[:, 1], color="#424242", linewidth=1.0,
                linestyle="--", zorder=2)

    for i, chain in enumerate(chains or []):
        xy = np.array([p.coordinate[:2] for p in chain.points], dtype=float)
        ax.plot(xy[:, 0], xy[:, 1], color=_CHAIN_COLORS[i % len(_CHAIN_COLORS)],
                linewidth=3.0, alpha=0.8, zorder=3, label=f"chain {i}")

    for point, inside in points or []:
        ax.scatter([point.coordinate[0]], [point.coordinate[1]],
                   color="#2E7D32" if inside else "#C62828",
                   marker="o" if inside else "x", s=40, zorder=4)

    ax.set_title(title or f"{polygon.crs.value} polygon", fontsize=14,
                 fontweight="bold", pad=12)
    ax.grid(True, alpha=0.2, linestyle="--")
    if chains:
        ax.legend(loc="upper right", fontsize=8)

    # Auto-pad the view
    extent = np.array(
        [p.coordinate[:2] for p in polygon.bounding_box()]
        + [p.coordinate[:2] for p, _ in points or []],
        dtype=float,
    )
    lo, hi = extent.min(axis=0), extent.max(axis=0)
    margin = 0.05 * max(float((hi - lo).max()), 1.0)
    ax.set_xlim(lo[0] - margin, hi[0] + margin)
    ax.set_ylim(lo[1] - margin, hi[1] + margin)

    plt.tight_layout()
    fig.savefig(str(output_path), dpi=dpi, bbox_inches="tight")
    plt.close(fig)

    return output_path
