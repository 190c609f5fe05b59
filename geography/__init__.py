"""Geography module for zone clustering.

This module contains the geometric primitives the clustering engine is
built on: coordinate value types, great-circle distance, and convex hull
construction for zone boundaries.

Modules:
    points: GeoPoint, LatLng and Cluster value types
    distance: Haversine distance functions (scalar and vectorised)
    hull: Graham scan convex hull and shapely conversion

Functions:
    distance: Great-circle distance in km between two points
    haversine_distance: Great-circle distance from raw coordinates
    haversine_matrix: Pairwise great-circle distances
    convex_hull: Counter-clockwise convex hull of a point set
    hull_to_geometry: Shapely geometry for a hull
"""

from .points import (
    GeoPoint,
    LatLng,
    Cluster,
    mean_centroid
)

from .distance import (
    EARTH_RADIUS_KM,
    distance,
    haversine_distance,
    haversine_matrix
)

from .hull import (
    convex_hull,
    hull_to_geometry
)

__all__ = [
    'GeoPoint',
    'LatLng',
    'Cluster',
    'mean_centroid',
    'EARTH_RADIUS_KM',
    'distance',
    'haversine_distance',
    'haversine_matrix',
    'convex_hull',
    'hull_to_geometry'
]
