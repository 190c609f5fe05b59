"""DBSCAN clustering for geographic coordinates.

Density-based clustering over haversine distances. Unlike textbook
DBSCAN no point is left unlabelled: leftover noise joins the cluster with
the nearest centroid, and when no dense region exists at all every point
becomes its own cluster.
"""

import logging
from typing import List, Sequence

import numpy as np

from geography.distance import haversine_matrix
from geography.points import Cluster, GeoPoint, mean_centroid
from clustering.base import Clusterer

logger = logging.getLogger(__name__)

UNVISITED = -2
NOISE = -1


def region_query(
    lats: np.ndarray,
    lngs: np.ndarray,
    index: int,
    epsilon_km: float
) -> np.ndarray:
    """Indices of all other points within epsilon_km of point ``index``."""
    d = haversine_matrix(lats[index:index + 1], lngs[index:index + 1], lats, lngs)[0]
    within = d <= epsilon_km
    within[index] = False
    return np.flatnonzero(within)


def dbscan(
    points: Sequence[GeoPoint],
    epsilon_km: float,
    min_points: int = 3
) -> List[Cluster]:
    """Partition points with DBSCAN and reconcile noise.

    A point is core when at least ``min_points`` other points lie within
    ``epsilon_km`` of it. Clusters grow breadth-first from core points
    through an index work queue. Noise already in the seed set becomes a
    border member; core members extend the queue with unvisited neighbours
    only, so noise first reached from a later core point stays noise and
    is reconciled to the nearest centroid afterwards.

    Never raises. Every input point ends up in exactly one cluster.

    Args:
        points: Input points; ids must be unique within the call.
        epsilon_km: Neighbourhood radius in kilometres.
        min_points: Minimum neighbour count for a core point (default: 3).

    Returns:
        Clusters numbered in order of discovery, points in input order,
        centroid the mean of the final membership.
    """
    points = list(points)
    n = len(points)
    if n == 0:
        return []

    lats = np.array([p.lat for p in points], dtype=float)
    lngs = np.array([p.lng for p in points], dtype=float)

    state = np.full(n, UNVISITED, dtype=int)
    queued = np.zeros(n, dtype=bool)
    n_clusters = 0

    for i in range(n):
        if state[i] != UNVISITED:
            continue

        neighbors = region_query(lats, lngs, i, epsilon_km)
        if len(neighbors) < min_points:
            state[i] = NOISE
            continue

        cluster_id = n_clusters
        n_clusters += 1
        state[i] = cluster_id
        queued[i] = True

        queue = [int(j) for j in neighbors if not queued[j]]
        queued[queue] = True
        cursor = 0
        while cursor < len(queue):
            j = queue[cursor]
            cursor += 1

            if state[j] == NOISE:
                # Border point: already known not to be core
                state[j] = cluster_id
                continue
            if state[j] != UNVISITED:
                continue

            state[j] = cluster_id
            j_neighbors = region_query(lats, lngs, j, epsilon_km)
            if len(j_neighbors) >= min_points:
                for m in j_neighbors:
                    if not queued[m] and state[m] == UNVISITED:
                        queued[m] = True
                        queue.append(int(m))

    noise = np.flatnonzero(state == NOISE)

    if n_clusters == 0:
        logger.debug("No core points among %d points, returning singleton clusters", n)
        return [
            Cluster(cluster_id=i, centroid=mean_centroid([p]), points=[p])
            for i, p in enumerate(points)
        ]

    if len(noise):
        clustered = state >= 0
        counts = np.bincount(state[clustered], minlength=n_clusters)
        centroid_lats = np.bincount(state[clustered], weights=lats[clustered], minlength=n_clusters) / counts
        centroid_lngs = np.bincount(state[clustered], weights=lngs[clustered], minlength=n_clusters) / counts

        dists = haversine_matrix(lats[noise], lngs[noise], centroid_lats, centroid_lngs)
        state[noise] = np.argmin(dists, axis=1)
        logger.debug("Reassigned %d noise points to nearest clusters", len(noise))

    clusters: List[Cluster] = []
    for cluster_id in range(n_clusters):
        members = [points[i] for i in np.flatnonzero(state == cluster_id)]
        clusters.append(Cluster(
            cluster_id=cluster_id,
            centroid=mean_centroid(members),
            points=members,
        ))

    return clusters


class DBSCANClustering(Clusterer):
    """DBSCAN clustering for geographic coordinates.

    Args:
        epsilon_km: Neighbourhood radius in kilometres (default: 1.0).
        min_points: Minimum neighbours for a core point (default: 3).
        hotspot_mode: "centroid" or "hull" zone geometry (default: "hull").
        **kwargs: Additional arguments passed to Clusterer base class.
    """

    def __init__(
        self,
        epsilon_km: float = 1.0,
        min_points: int = 3,
        hotspot_mode: str = "hull",
        **kwargs
    ):
        super().__init__(hotspot_mode=hotspot_mode, **kwargs)
        self.epsilon_km = epsilon_km
        self.min_points = min_points
        self.method = "dbscan"

        self.params.update({
            "epsilon_km": epsilon_km,
            "min_points": min_points,
        })

    def cluster_points(self, points: List[GeoPoint]) -> List[Cluster]:
        return dbscan(points, self.epsilon_km, self.min_points)
