"""Geospatial helpers.

Plain haversine math so the matching engine and the item endpoints can work
with distances without a GIS dependency.
"""
from __future__ import annotations

from dataclasses import dataclass
from math import atan2, cos, radians, sin, sqrt
from typing import Any, Optional

EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class GeoPoint:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lon: float


def distance_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometers, rounded to one decimal place."""
    dlat = radians(lat2 - lat1)
    dlon = radians(lon2 - lon1)
    a = sin(dlat / 2) ** 2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(dlon / 2) ** 2
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return round(EARTH_RADIUS_KM * c, 1)


def distance_between(a: GeoPoint, b: GeoPoint) -> float:
    return distance_km(a.lat, a.lon, b.lat, b.lon)


def point_of(obj: Any) -> Optional[GeoPoint]:
    """Return the object's coordinates, or None when either one is missing."""
    lat = getattr(obj, "latitude", None)
    lon = getattr(obj, "longitude", None)
    if lat is None or lon is None:
        return None
    return GeoPoint(float(lat), float(lon))


def format_distance(km: float, unit: str = "km") -> str:
    if unit == "mi":
        miles = km * 0.621371
        return f"{round(miles, 1)} mi" if miles < 1 else f"{round(miles)} mi"
    return f"{km} km" if km < 1 else f"{round(km)} km"
