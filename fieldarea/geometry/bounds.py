"""
Bounding box computations for recorded polygons.

Used by map and export consumers to frame a measurement: the metric
extent drives aspect-ratio decisions, and the expanded lat/lng box adds
padding around the polygon.
"""

import math
from typing import Optional, Sequence

from fieldarea.geometry.base import (
    METERS_PER_DEGREE_LAT,
    MIN_BOUNDS_DIMENSION_M,
    BoundsMetrics,
    LatLngBounds,
    Point,
)


def compute_bounds_meters(points: Sequence[Point]) -> Optional[BoundsMetrics]:
    """
    Compute the extent of a polygon in degrees and meters.

    Width is evaluated at the center latitude of the box. Both dimensions
    are clamped to MIN_BOUNDS_DIMENSION_M so that aspect ratios stay finite
    for degenerate (collinear or coincident) point sets.

    Args:
        points: Polygon vertices.

    Returns:
        BoundsMetrics, or None if fewer than 3 points are given.
    """
    if len(points) < 3:
        return None

    lats = [p.lat for p in points]
    lngs = [p.lng for p in points]
    min_lat, max_lat = min(lats), max(lats)
    min_lng, max_lng = min(lngs), max(lngs)

    center_lat = (min_lat + max_lat) / 2
    meters_per_degree_lng = METERS_PER_DEGREE_LAT * math.cos(math.radians(center_lat))

    width = max((max_lng - min_lng) * meters_per_degree_lng, MIN_BOUNDS_DIMENSION_M)
    height = max((max_lat - min_lat) * METERS_PER_DEGREE_LAT, MIN_BOUNDS_DIMENSION_M)

    return BoundsMetrics(
        width_meters=width,
        height_meters=height,
        aspect_ratio=width / height,
        min_lat=min_lat,
        max_lat=max_lat,
        min_lng=min_lng,
        max_lng=max_lng,
    )


def expand_bounds(metrics: BoundsMetrics, fraction: float) -> LatLngBounds:
    """
    Grow a bounding box symmetrically.

    Each edge moves outward by ``fraction`` of its axis' span, so 0.15
    widens the box by 30% in each direction overall.

    Args:
        metrics: Bounds to expand.
        fraction: Padding as a fraction of the span. Must be >= 0.

    Returns:
        The expanded LatLngBounds.

    Raises:
        ValueError: If fraction is negative.
    """
    if fraction < 0:
        raise ValueError(f"fraction must be >= 0, got {fraction}")

    lat_pad = (metrics.max_lat - metrics.min_lat) * fraction
    lng_pad = (metrics.max_lng - metrics.min_lng) * fraction
    return LatLngBounds(
        min_lat=metrics.min_lat - lat_pad,
        min_lng=metrics.min_lng - lng_pad,
        max_lat=metrics.max_lat + lat_pad,
        max_lng=metrics.max_lng + lng_pad,
    )
