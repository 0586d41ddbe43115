"""OpenStreetMap Nominatim client.

Geocoding is a convenience for item locations, never a reason to fail a
request: forward lookups return None and reverse lookups return the raw
coordinates when the service is unreachable or answers with garbage.
"""
from __future__ import annotations

import logging
import os
from typing import Optional

import requests

from ...geo import GeoPoint

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://nominatim.openstreetmap.org"


def _settings(base_url: str | None, user_agent: str | None, timeout: float | None) -> tuple[str, dict, float]:
    base = (base_url or os.getenv("GEOCODER_BASE_URL") or DEFAULT_BASE_URL).rstrip("/")
    # Nominatim rejects requests without an identifying User-Agent
    headers = {"User-Agent": user_agent or os.getenv("GEOCODER_USER_AGENT") or "FyndApp/1.0"}
    return base, headers, float(timeout or os.getenv("GEOCODER_TIMEOUT") or 10)


def coordinate_label(lat: float, lon: float) -> str:
    return f"{lat}, {lon}"


def forward_geocode(
    text: str | None,
    *,
    base_url: str | None = None,
    user_agent: str | None = None,
    timeout: float | None = None,
) -> Optional[GeoPoint]:
    if not text or not text.strip():
        return None
    base, headers, timeout_s = _settings(base_url, user_agent, timeout)
    params = {"format": "json", "q": text.strip(), "limit": 1}
    try:
        resp = requests.get(f"{base}/search", params=params, headers=headers, timeout=timeout_s)
        resp.raise_for_status()
        data = resp.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning("Forward geocoding failed for %r: %s", text, e)
        return None
    if not data:
        return None
    try:
        return GeoPoint(float(data[0]["lat"]), float(data[0]["lon"]))
    except (KeyError, IndexError, TypeError, ValueError):
        logger.warning("Unexpected geocoder payload for %r", text)
        return None


def reverse_geocode(
    lat: float,
    lon: float,
    *,
    base_url: str | None = None,
    user_agent: str | None = None,
    timeout: float | None = None,
) -> str:
    base, headers, timeout_s = _settings(base_url, user_agent, timeout)
    params = {"format": "json", "lat": lat, "lon": lon, "zoom": 18, "addressdetails": 1}
    try:
        resp = requests.get(f"{base}/reverse", params=params, headers=headers, timeout=timeout_s)
        resp.raise_for_status()
        data = resp.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning("Reverse geocoding failed for (%s, %s): %s", lat, lon, e)
        return coordinate_label(lat, lon)
    if not isinstance(data, dict):
        return coordinate_label(lat, lon)

    addr = data.get("address")
    if isinstance(addr, dict):
        parts = []
        if addr.get("road"):
            parts.append(addr["road"])
        if addr.get("house_number"):
            parts.append(addr["house_number"])
        town = addr.get("city") or addr.get("town") or addr.get("village")
        if town:
            parts.append(town)
        if addr.get("country"):
            parts.append(addr["country"])
        if parts:
            return ", ".join(parts)
    return data.get("display_name") or coordinate_label(lat, lon)
