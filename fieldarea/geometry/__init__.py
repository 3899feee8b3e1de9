"""
Geometry engine for field measurements.

Pure functions over coordinate sequences:
- compute_polygon_area: Shoelace area on an equirectangular projection
- compute_bounds_meters: Extent in degrees and meters
- expand_bounds: Symmetric padding of a lat/lng box
"""

from fieldarea.geometry.area import compute_polygon_area, project_to_plane
from fieldarea.geometry.base import (
    METERS_PER_DEGREE_LAT,
    MIN_BOUNDS_DIMENSION_M,
    BoundsMetrics,
    LatLngBounds,
    Point,
)
from fieldarea.geometry.bounds import compute_bounds_meters, expand_bounds

__all__ = [
    "METERS_PER_DEGREE_LAT",
    "MIN_BOUNDS_DIMENSION_M",
    "BoundsMetrics",
    "LatLngBounds",
    "Point",
    "compute_bounds_meters",
    "compute_polygon_area",
    "expand_bounds",
    "project_to_plane",
]
