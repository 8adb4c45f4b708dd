"""
Great-circle helpers in nautical miles
"""
import math

from wakeadvisor.models.vessel import GeoPoint

# Mean Earth radius in nautical miles
EARTH_RADIUS_NM = 3440.065


def haversine_nm(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance between two points (haversine formula)"""
    lat1, lat2 = math.radians(a.latitude), math.radians(b.latitude)
    dlat = lat2 - lat1
    dlon = math.radians(b.longitude - a.longitude)

    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_NM * math.asin(math.sqrt(min(1.0, h)))


def normalize_bearing(degrees: float) -> float:
    bearing = degrees % 360.0
    # -1e-17 % 360 rounds to 360.0
    return 0.0 if bearing >= 360.0 else bearing


def points_south(bearing: float) -> bool:
    """True when the bearing has a southward component"""
    return math.cos(math.radians(bearing)) < 0
