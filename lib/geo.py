# =============================================================================
# lib/geo.py - Geographic Helpers
# =============================================================================
# Great-circle distance between two latitude/longitude points.
# =============================================================================

import math

# Mean radius of the Earth in kilometers
EARTH_RADIUS_KM = 6371.0


def calculate_geo_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Distance between two coordinates using the haversine formula.

    Args:
        lat1: Latitude of the first point in degrees
        lon1: Longitude of the first point in degrees
        lat2: Latitude of the second point in degrees
        lon2: Longitude of the second point in degrees

    Returns:
        Distance in kilometers

    Example:
        calculate_geo_distance(51.5074, -0.1278, 48.8566, 2.3522)  # ~343.5 (London -> Paris)
    """
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    rad_lat1 = math.radians(lat1)
    rad_lat2 = math.radians(lat2)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.sin(d_lon / 2) ** 2 * math.cos(rad_lat1) * math.cos(rad_lat2)
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c
