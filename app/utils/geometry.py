"""
Field boundary geometry.

Reduces a field polygon to the single coordinate used to key the weather
lookup.
"""
from typing import Optional, Sequence
import numpy as np
import logging

from app.domain.models import Coordinate

logger = logging.getLogger(__name__)

# Absolute signed area below which the polygon is treated as degenerate
AREA_EPSILON = 1e-12


def signed_area(vertices: Sequence[Coordinate]) -> float:
    """
    Signed area of the closed polygon, with x = latitude and y = longitude.

    Args:
        vertices: Ordered polygon vertices; the last one wraps to the first

    Returns:
        Signed area in squared degrees (sign gives the winding)
    """
    if not vertices:
        return 0.0
    xs, ys, xs_next, ys_next = _closed_loop(vertices)
    return float(0.5 * np.sum(xs * ys_next - xs_next * ys))


def compute_centroid(vertices: Sequence[Coordinate]) -> Optional[Coordinate]:
    """
    Compute the polygon centroid using the shoelace formula.

    Latitude is treated as x and longitude as y; the returned coordinate
    uses the same convention.

    Args:
        vertices: Ordered polygon vertices (a repeated closing vertex is harmless)

    Returns:
        Centroid coordinate, the first vertex if the polygon has no area,
        or None for an empty vertex list
    """
    if not vertices:
        return None

    area = signed_area(vertices)
    if abs(area) < AREA_EPSILON:
        logger.debug(f"Degenerate polygon ({len(vertices)} vertices), using first vertex")
        return vertices[0]

    xs, ys, xs_next, ys_next = _closed_loop(vertices)
    cross = xs * ys_next - xs_next * ys
    cx = np.sum((xs + xs_next) * cross) / (6.0 * area)
    cy = np.sum((ys + ys_next) * cross) / (6.0 * area)
    origin = vertices[0]
    return Coordinate(lat=float(cx) + origin.lat, lon=float(cy) + origin.lon)


def _closed_loop(vertices: Sequence[Coordinate]):
    # Relative to the first vertex so field-sized polygons far from (0, 0)
    # keep their precision in the cross products
    points = np.array([(v.lat, v.lon) for v in vertices], dtype=float)
    points = points - points[0]
    xs, ys = points[:, 0], points[:, 1]
    return xs, ys, np.roll(xs, -1), np.roll(ys, -1)
