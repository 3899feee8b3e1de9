"""
Base data structures for the geometry engine.

Defines the coordinate and bounds types shared by the area and bounds
computations. All coordinates are WGS 84 degrees.
"""

from dataclasses import dataclass
from typing import Any, Dict, Tuple


# Equirectangular scale: meters covered by one degree of latitude.
METERS_PER_DEGREE_LAT = 111320.0

# Floor applied to bounding box dimensions, in meters.
MIN_BOUNDS_DIMENSION_M = 10.0


@dataclass(frozen=True)
class Point:
    """
    A geographic coordinate.

    Range is not validated; values are assumed to come from a location
    source that already produces valid degrees.

    Attributes:
        lat: Latitude in decimal degrees.
        lng: Longitude in decimal degrees.
    """

    lat: float
    lng: float

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class BoundsMetrics:
    """
    Extent of a point set, in degrees and projected meters.

    Attributes:
        width_meters: East-west extent at the center latitude (>= 10 m).
        height_meters: North-south extent (>= 10 m).
        aspect_ratio: width_meters / height_meters.
        min_lat: Southern edge latitude.
        max_lat: Northern edge latitude.
        min_lng: Western edge longitude.
        max_lng: Eastern edge longitude.
    """

    width_meters: float
    height_meters: float
    aspect_ratio: float
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    @property
    def center(self) -> Point:
        """Midpoint of the lat/lng box."""
        return Point(
            lat=(self.min_lat + self.max_lat) / 2,
            lng=(self.min_lng + self.max_lng) / 2,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "widthMeters": self.width_meters,
            "heightMeters": self.height_meters,
            "aspectRatio": self.aspect_ratio,
            "minLat": self.min_lat,
            "maxLat": self.max_lat,
            "minLng": self.min_lng,
            "maxLng": self.max_lng,
        }


@dataclass(frozen=True)
class LatLngBounds:
    """
    A lat/lng bounding box.

    Attributes:
        min_lat: Southern edge latitude.
        min_lng: Western edge longitude.
        max_lat: Northern edge latitude.
        max_lng: Eastern edge longitude.
    """

    min_lat: float
    min_lng: float
    max_lat: float
    max_lng: float

    @property
    def south_west(self) -> Point:
        return Point(lat=self.min_lat, lng=self.min_lng)

    @property
    def north_east(self) -> Point:
        return Point(lat=self.max_lat, lng=self.max_lng)

    @property
    def bbox(self) -> Tuple[float, float, float, float]:
        """
        Return bounding box as (min_lng, min_lat, max_lng, max_lat).

        This is the GeoJSON ordering (west, south, east, north).
        """
        return (self.min_lng, self.min_lat, self.max_lng, self.max_lat)

    def to_dict(self) -> Dict[str, float]:
        return {
            "minLat": self.min_lat,
            "minLng": self.min_lng,
            "maxLat": self.max_lat,
            "maxLng": self.max_lng,
        }
