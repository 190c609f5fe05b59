"""Great-circle distance utilities for geographic coordinates.

Every distance used by the clustering strategies goes through the
haversine formula defined here, in kilometres on a spherical Earth.
"""

import math

import numpy as np

EARTH_RADIUS_KM = 6371.0


def haversine_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """
    Calculate the great circle distance between two points on Earth.

    Uses the Haversine formula to compute the shortest distance between
    two points on a sphere given their latitude and longitude. NaN inputs
    produce NaN rather than raising.

    Args:
        lat1 (float): Latitude of first point in decimal degrees
        lng1 (float): Longitude of first point in decimal degrees
        lat2 (float): Latitude of second point in decimal degrees
        lng2 (float): Longitude of second point in decimal degrees

    Returns:
        float: Distance in kilometres

    Example:
        >>> dist = haversine_distance(-1.2921, 36.8219, -1.2864, 36.8172)
        >>> 0.5 < dist < 1.5
        True

    Formula:
        a = sin²(Δφ/2) + cos φ1 ⋅ cos φ2 ⋅ sin²(Δλ/2)
        c = 2 ⋅ atan2( √a, √(1−a) )
        d = R ⋅ c

    Where:
        φ is latitude, λ is longitude, R is earth's radius (6371 km)
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)

    a = (math.sin(dlat / 2) ** 2 +
         math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(dlng / 2) ** 2)

    # Rounding can push a a hair above 1 for antipodal points
    a = min(a, 1.0)
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


def distance(a, b) -> float:
    """Haversine distance in km between two objects exposing .lat and .lng."""
    return haversine_distance(a.lat, a.lng, b.lat, b.lng)


def haversine_matrix(
    lats_a: np.ndarray,
    lngs_a: np.ndarray,
    lats_b: np.ndarray,
    lngs_b: np.ndarray,
) -> np.ndarray:
    """Pairwise haversine distances in km.

    Args:
        lats_a, lngs_a: Coordinates of the first set, shape (n,).
        lats_b, lngs_b: Coordinates of the second set, shape (m,).

    Returns:
        Array of shape (n, m) where entry [i, j] is the distance between
        point i of the first set and point j of the second.
    """
    lat_a = np.radians(np.asarray(lats_a, dtype=float))[:, np.newaxis]
    lng_a = np.radians(np.asarray(lngs_a, dtype=float))[:, np.newaxis]
    lat_b = np.radians(np.asarray(lats_b, dtype=float))[np.newaxis, :]
    lng_b = np.radians(np.asarray(lngs_b, dtype=float))[np.newaxis, :]

    dlat = lat_b - lat_a
    dlng = lng_b - lng_a

    a = np.sin(dlat / 2) ** 2 + np.cos(lat_a) * np.cos(lat_b) * np.sin(dlng / 2) ** 2
    a = np.minimum(a, 1.0)
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))

    return EARTH_RADIUS_KM * c
