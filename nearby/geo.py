"""Geospatial helpers."""
from __future__ import annotations

import math
from typing import Optional, Tuple

from .models import RawRecord

EARTH_RADIUS_M = 6371000.0


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)

    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def resolve_coordinates(record: RawRecord) -> Optional[Tuple[float, float]]:
    """Direct lat/lon for points, the provider's center for areas."""
    if record.lat is not None and record.lon is not None:
        return record.lat, record.lon
    if record.center_lat is not None and record.center_lon is not None:
        return record.center_lat, record.center_lon
    return None


def within_radius(distance_m: float, radius_m: float, tolerance_m: float) -> bool:
    return distance_m <= radius_m + tolerance_m
