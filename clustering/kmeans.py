"""K-Means++ clustering for geographic coordinates.

Provides Lloyd-style K-Means with K-Means++ seeding where every distance
is a haversine great-circle distance, plus a Clusterer wrapper with
zone export and prediction on new points.
"""

import logging
from typing import List, Sequence, Tuple

import numpy as np
import pandas as pd

from geography.distance import haversine_matrix
from geography.points import Cluster, GeoPoint, LatLng, mean_centroid
from clustering.base import Clusterer
from clustering.utils import RandomState, make_rng, valid_coordinate_mask

logger = logging.getLogger(__name__)


def _seed_centroids(
    lats: np.ndarray,
    lngs: np.ndarray,
    k: int,
    rng: np.random.Generator
) -> Tuple[np.ndarray, np.ndarray]:
    """Pick k initial centroids with K-Means++ seeding.

    The first seed is uniform; each further seed is drawn with probability
    proportional to its squared distance to the nearest seed so far.
    """
    n = len(lats)
    chosen = [int(rng.integers(n))]
    nearest_sq = haversine_matrix(lats, lngs, lats[chosen], lngs[chosen])[:, 0] ** 2

    while len(chosen) < k:
        weights = nearest_sq.copy()
        weights[chosen] = 0.0
        total = weights.sum()
        if total > 0 and np.isfinite(total):
            idx = int(rng.choice(n, p=weights / total))
        else:
            # Every unseeded point coincides with a seed
            remaining = np.setdiff1d(np.arange(n), chosen)
            idx = int(rng.choice(remaining))
        chosen.append(idx)
        d_sq = haversine_matrix(lats, lngs, lats[idx:idx + 1], lngs[idx:idx + 1])[:, 0] ** 2
        nearest_sq = np.minimum(nearest_sq, d_sq)

    return lats[chosen].copy(), lngs[chosen].copy()


def _assign_nearest(
    lats: np.ndarray,
    lngs: np.ndarray,
    centroid_lats: np.ndarray,
    centroid_lngs: np.ndarray
) -> np.ndarray:
    """Index of the nearest centroid for every point.

    argmin keeps the first minimum, so ties go to the lowest centroid index.
    """
    dists = haversine_matrix(lats, lngs, centroid_lats, centroid_lngs)
    return np.argmin(dists, axis=1)


def _update_centroids(
    lats: np.ndarray,
    lngs: np.ndarray,
    assignment: np.ndarray,
    centroid_lats: np.ndarray,
    centroid_lngs: np.ndarray
) -> Tuple[np.ndarray, np.ndarray]:
    k = len(centroid_lats)
    counts = np.bincount(assignment, minlength=k)
    sum_lats = np.bincount(assignment, weights=lats, minlength=k)
    sum_lngs = np.bincount(assignment, weights=lngs, minlength=k)

    # Centroids with no members keep their previous position
    new_lats = centroid_lats.copy()
    new_lngs = centroid_lngs.copy()
    filled = counts > 0
    new_lats[filled] = sum_lats[filled] / counts[filled]
    new_lngs[filled] = sum_lngs[filled] / counts[filled]
    return new_lats, new_lngs


def kmeans(
    points: Sequence[GeoPoint],
    k: int,
    max_iterations: int = 100,
    random_state: RandomState = None
) -> List[Cluster]:
    """Partition points into at most k clusters with K-Means++.

    Never raises. Degenerate inputs degrade gracefully: no points give no
    clusters, and ``k >= len(points)`` gives one singleton cluster per
    point. Centroids that end up without members are dropped, so the
    result may hold fewer than k clusters.

    Args:
        points: Input points; ids must be unique within the call.
        k: Requested number of clusters. Values below 1 are treated as 1.
        max_iterations: Upper bound on assignment passes (at least one
            pass always runs).
        random_state: None, an int seed or a numpy Generator used for
            seeding.

    Returns:
        Clusters numbered 0..m-1, each holding its points in input order
        and the mean of their coordinates as centroid.
    """
    points = list(points)
    n = len(points)
    if n == 0:
        return []

    k = max(int(k), 1)
    if k >= n:
        logger.debug("k=%d >= %d points, returning singleton clusters", k, n)
        return [
            Cluster(cluster_id=i, centroid=LatLng(p.lat, p.lng), points=[p])
            for i, p in enumerate(points)
        ]

    rng = make_rng(random_state)
    lats = np.array([p.lat for p in points], dtype=float)
    lngs = np.array([p.lng for p in points], dtype=float)

    centroid_lats, centroid_lngs = _seed_centroids(lats, lngs, k, rng)

    assignment = None
    passes = max(int(max_iterations), 1)
    for iteration in range(passes):
        new_assignment = _assign_nearest(lats, lngs, centroid_lats, centroid_lngs)
        if assignment is not None and np.array_equal(new_assignment, assignment):
            logger.debug("K-Means converged after %d passes", iteration + 1)
            break
        assignment = new_assignment
        centroid_lats, centroid_lngs = _update_centroids(
            lats, lngs, assignment, centroid_lats, centroid_lngs
        )
    else:
        logger.debug("K-Means stopped at max_iterations=%d", passes)

    clusters: List[Cluster] = []
    for c in range(k):
        members = [points[i] for i in np.flatnonzero(assignment == c)]
        if not members:
            continue
        clusters.append(Cluster(
            cluster_id=len(clusters),
            centroid=mean_centroid(members),
            points=members,
        ))

    if len(clusters) < k:
        logger.debug("Dropped %d empty centroids", k - len(clusters))

    return clusters


class KMeansClustering(Clusterer):
    """K-Means++ clustering for geographic coordinates.

    Args:
        k: Number of clusters (default: 5).
        max_iterations: Maximum assignment passes (default: 100).
        random_state: Seed or Generator for reproducibility (default: None).
        **kwargs: Additional arguments passed to Clusterer base class.
    """

    def __init__(
        self,
        k: int = 5,
        max_iterations: int = 100,
        random_state: RandomState = None,
        **kwargs
    ):
        super().__init__(**kwargs)
        self.k = k
        self.max_iterations = max_iterations
        self.random_state = random_state
        self.method = "kmeans"

        self.params.update({
            "k": k,
            "max_iterations": max_iterations,
            "random_state": random_state,
        })

    def cluster_points(self, points: List[GeoPoint]) -> List[Cluster]:
        return kmeans(points, self.k, self.max_iterations, self.random_state)

    def predict(
        self,
        df: pd.DataFrame,
        x_col: str = "lng",
        y_col: str = "lat"
    ) -> np.ndarray:
        """Assign new points to the nearest fitted centroid.

        Args:
            df: DataFrame with coordinate columns.
            x_col: Name of longitude column.
            y_col: Name of latitude column.

        Returns:
            Array of cluster ids aligned with the rows of ``df``. Rows with
            missing or out-of-range coordinates get -1.
        """
        self._check_fitted()

        labels = np.full(len(df), -1, dtype=int)
        valid = valid_coordinate_mask(df, x_col, y_col).to_numpy()
        if not self.clusters_ or not valid.any():
            return labels

        centroid_lats = np.array([c.centroid.lat for c in self.clusters_])
        centroid_lngs = np.array([c.centroid.lng for c in self.clusters_])
        nearest = _assign_nearest(
            df[y_col].to_numpy(dtype=float)[valid],
            df[x_col].to_numpy(dtype=float)[valid],
            centroid_lats,
            centroid_lngs,
        )
        ids = np.array([c.cluster_id for c in self.clusters_])
        labels[valid] = ids[nearest]
        return labels
