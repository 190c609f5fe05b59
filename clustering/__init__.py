"""Unified clustering interface for geographic coordinates.

Provides the pure K-Means++ and DBSCAN partitioning functions, a
consistent estimator-style wrapper around both, and helpers for loading
points, hashing parameters and exporting zones.
"""

from clustering.base import Clusterer, HOTSPOT_MODES
from clustering.kmeans import KMeansClustering, kmeans
from clustering.dbscan import DBSCANClustering, dbscan, region_query
from clustering.utils import (
    make_rng,
    validate_coordinates,
    valid_coordinate_mask,
    points_from_df,
    labels_from_clusters,
    canonical_params_json,
    param_hash_from_json,
    HYPERPARAM_KEYS,
    load_points_df,
    zones_to_geojson,
)


def make_clusterer(name: str, **kwargs) -> Clusterer:
    """Factory function to create clusterer instances.

    Args:
        name: Algorithm name ("kmeans" or "dbscan").
        **kwargs: Algorithm-specific parameters.

    Returns:
        Clusterer instance.

    Raises:
        ValueError: If algorithm name is unknown.

    Examples:
        >>> clusterer = make_clusterer("kmeans", k=5, random_state=42)
        >>> clusterer = make_clusterer("dbscan", epsilon_km=1.5, min_points=3)
    """
    if name == "kmeans":
        return KMeansClustering(**kwargs)
    elif name == "dbscan":
        return DBSCANClustering(**kwargs)
    else:
        raise ValueError(f"Unknown algorithm: {name}. Must be one of: kmeans, dbscan")


__all__ = [
    "Clusterer",
    "HOTSPOT_MODES",
    "KMeansClustering",
    "DBSCANClustering",
    "kmeans",
    "dbscan",
    "region_query",
    "make_clusterer",
    "make_rng",
    "validate_coordinates",
    "valid_coordinate_mask",
    "points_from_df",
    "labels_from_clusters",
    "canonical_params_json",
    "param_hash_from_json",
    "HYPERPARAM_KEYS",
    "load_points_df",
    "zones_to_geojson",
]
