"""Clustering evaluation metrics and parameter selection helpers.

Provides evaluation metrics (silhouette score, Davies-Bouldin index,
inertia) and the k-distance curve used to choose a DBSCAN epsilon. All
distances are great-circle kilometres.
"""

from typing import Sequence, Tuple
import numpy as np
from sklearn.metrics import silhouette_score as sklearn_silhouette_score
from sklearn.metrics import davies_bouldin_score as sklearn_davies_bouldin_score
from sklearn.neighbors import NearestNeighbors

from geography.distance import EARTH_RADIUS_KM, haversine_matrix
from geography.points import Cluster


def _scorable(labels: np.ndarray) -> Tuple[np.ndarray, bool]:
    """Mask of labelled points and whether the label layout can be scored.

    sklearn needs between 2 and n_samples - 1 distinct labels.
    """
    mask = labels >= 0
    n_labels = len(np.unique(labels[mask]))
    return mask, 2 <= n_labels <= mask.sum() - 1


def silhouette_score(labels: np.ndarray, lats: np.ndarray, lngs: np.ndarray) -> float:
    """Compute silhouette score on great-circle distances.

    Args:
        labels: Cluster labels array (shape: (n_samples,)).
        lats: Latitudes in degrees (shape: (n_samples,)).
        lngs: Longitudes in degrees (shape: (n_samples,)).

    Returns:
        Silhouette score (higher is better, range: -1 to 1), or -1.0 when
        the labelling cannot be scored.

    Note:
        Points with negative labels are excluded.
    """
    labels = np.asarray(labels)
    mask, ok = _scorable(labels)
    if not ok:
        return -1.0

    lats = np.asarray(lats, dtype=float)[mask]
    lngs = np.asarray(lngs, dtype=float)[mask]
    D = haversine_matrix(lats, lngs, lats, lngs)
    np.fill_diagonal(D, 0.0)

    return float(sklearn_silhouette_score(D, labels[mask], metric="precomputed"))


def davies_bouldin_score(labels: np.ndarray, lats: np.ndarray, lngs: np.ndarray) -> float:
    """Compute Davies-Bouldin index on lat/lng coordinates.

    Returns:
        Davies-Bouldin index (lower is better, range: 0 to infinity), or
        inf when the labelling cannot be scored.
    """
    labels = np.asarray(labels)
    mask, ok = _scorable(labels)
    if not ok:
        return np.inf

    X = np.column_stack([np.asarray(lats, dtype=float), np.asarray(lngs, dtype=float)])[mask]
    return float(sklearn_davies_bouldin_score(X, labels[mask]))


def inertia_km2(clusters: Sequence[Cluster]) -> float:
    """Sum of squared great-circle distances (km²) from points to their centroid."""
    total = 0.0
    for cluster in clusters:
        lats = np.array([p.lat for p in cluster.points])
        lngs = np.array([p.lng for p in cluster.points])
        d = haversine_matrix(lats, lngs, [cluster.centroid.lat], [cluster.centroid.lng])[:, 0]
        total += float(np.sum(d ** 2))
    return total


def k_distance(
    lats: np.ndarray,
    lngs: np.ndarray,
    k: int = 4
) -> Tuple[np.ndarray, np.ndarray]:
    """Compute the k-distance curve for DBSCAN epsilon selection.

    Args:
        lats: Latitudes in degrees.
        lngs: Longitudes in degrees.
        k: Neighbour rank, usually the intended min_points (default: 4).

    Returns:
        Tuple of (sorted_distances_km, indices).
        - sorted_distances_km: Distance to each point's k-th nearest other
          point, ascending. With fewer than k + 1 points the farthest
          available neighbour is used.
        - indices: Point indices in the same order.
    """
    X = np.radians(np.column_stack([np.asarray(lats, dtype=float), np.asarray(lngs, dtype=float)]))
    n = len(X)
    if n < 2:
        return np.zeros(n), np.arange(n)

    n_neighbors = min(k + 1, n)  # +1 because each point is its own nearest neighbour
    nbrs = NearestNeighbors(n_neighbors=n_neighbors, metric="haversine").fit(X)
    distances, _ = nbrs.kneighbors(X)

    k_distances = distances[:, n_neighbors - 1] * EARTH_RADIUS_KM
    sorted_indices = np.argsort(k_distances)

    return k_distances[sorted_indices], sorted_indices
