"""Convex hull (boundary polygon) construction for point sets.

Implements the Graham scan over lat/lng coordinates treated as a plane
(lng as x, lat as y). The hull is returned counter-clockwise without a
repeated closing vertex. Inputs with fewer than three distinct points are
returned as-is, so callers must check ``len(hull) >= 3`` before treating
the result as a polygon.
"""

import logging
import math
from typing import List, Sequence

from shapely.geometry import LineString, Point, Polygon

logger = logging.getLogger(__name__)


def cross(o, a, b) -> float:
    """Z component of (o→a) × (o→b). Positive means a counter-clockwise turn."""
    return (a.lng - o.lng) * (b.lat - o.lat) - (a.lat - o.lat) * (b.lng - o.lng)


def _dedupe(points: Sequence) -> list:
    seen = set()
    unique = []
    for p in points:
        key = (p.lat, p.lng)
        if key in seen:
            continue
        seen.add(key)
        unique.append(p)
    return unique


def convex_hull(points: Sequence) -> list:
    """Compute the convex hull of a point set with a Graham scan.

    Args:
        points: Objects exposing ``lat`` and ``lng`` (GeoPoint, LatLng, ...).

    Returns:
        Hull vertices taken from the input, counter-clockwise, starting at
        the bottom-most (then left-most) point. Two or fewer distinct
        points are returned unchanged after deduplication.

    Example:
        >>> from geography.points import LatLng
        >>> square = [LatLng(0, 0), LatLng(0, 2), LatLng(2, 2), LatLng(2, 0), LatLng(1, 1)]
        >>> [(p.lat, p.lng) for p in convex_hull(square)]
        [(0, 0), (0, 2), (2, 2), (2, 0)]
    """
    unique = _dedupe(points)
    if len(unique) <= 2:
        return unique

    pivot = min(unique, key=lambda p: (p.lat, p.lng))
    rest = [p for p in unique if p is not pivot]

    def polar_key(p):
        dlat = p.lat - pivot.lat
        dlng = p.lng - pivot.lng
        return (math.atan2(dlat, dlng), dlat * dlat + dlng * dlng)

    rest.sort(key=polar_key)

    stack = [pivot]
    for p in rest:
        while len(stack) >= 2 and cross(stack[-2], stack[-1], p) <= 0:
            stack.pop()
        stack.append(p)

    if len(stack) < 3:
        logger.debug("Convex hull of %d collinear points has %d vertices", len(unique), len(stack))

    return stack


def hull_to_geometry(hull: Sequence):
    """Convert hull vertices to a shapely geometry in lng/lat (x/y) order.

    Returns a Polygon for three or more vertices, a LineString for two and
    a Point for one.

    Raises:
        ValueError: If ``hull`` is empty.
    """
    coords: List[tuple] = [(p.lng, p.lat) for p in hull]
    if not coords:
        raise ValueError("Cannot build a geometry from an empty hull")
    if len(coords) == 1:
        return Point(coords[0])
    if len(coords) == 2:
        return LineString(coords)
    return Polygon(coords)
