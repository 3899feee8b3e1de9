"""
Polygon area on a local tangent plane.

Projects lat/lng vertices to meters with an equirectangular approximation
around the first vertex and applies the Shoelace formula. Accurate for
field-sized polygons (up to tens of kilometers across); it is not a
geodesic area and ignores Earth curvature inside the polygon.
"""

from typing import Sequence, Tuple

import numpy as np

from fieldarea.geometry.base import METERS_PER_DEGREE_LAT, Point


def project_to_plane(
    points: Sequence[Point],
    origin: Point,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Project points to planar meters relative to ``origin``.

    Args:
        points: Coordinates to project.
        origin: Reference point; its latitude sets the longitude scale.

    Returns:
        (x, y) arrays in meters, x pointing east and y pointing north.
    """
    lats = np.fromiter((p.lat for p in points), dtype=np.float64, count=len(points))
    lngs = np.fromiter((p.lng for p in points), dtype=np.float64, count=len(points))

    meters_per_degree_lng = METERS_PER_DEGREE_LAT * np.cos(np.radians(origin.lat))
    x = (lngs - origin.lng) * meters_per_degree_lng
    y = (lats - origin.lat) * METERS_PER_DEGREE_LAT
    return x, y


def compute_polygon_area(points: Sequence[Point]) -> float:
    """
    Compute the area enclosed by a ring of coordinates.

    The ring is closed implicitly (last vertex connects to the first), so
    callers should not repeat the first point at the end.

    Args:
        points: Polygon vertices in order.

    Returns:
        Area in square meters, always >= 0. Fewer than 3 points gives 0.0.
    """
    if len(points) < 3:
        return 0.0

    x, y = project_to_plane(points, points[0])
    cross = x * np.roll(y, -1) - np.roll(x, -1) * y
    return float(abs(cross.sum()) / 2.0)
