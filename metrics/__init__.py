"""Metrics package for zone clustering evaluation.

Provides evaluation metrics and parameter selection helpers for the
clustering strategies, plus run configuration loading.
"""

from metrics.clustering import (
    silhouette_score,
    davies_bouldin_score,
    inertia_km2,
    k_distance,
)
from metrics.config import load_config

__all__ = [
    "silhouette_score",
    "davies_bouldin_score",
    "inertia_km2",
    "k_distance",
    "load_config",
]
