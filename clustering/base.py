"""Base clustering interface for the zone clustering system.

Defines the abstract base class Clusterer that both partitioning
strategies implement, providing a consistent interface for fit, labels,
clusters and hotspots operations on top of the pure clustering functions.
"""

from abc import ABC, abstractmethod
from typing import Optional, Dict, Any, List, Tuple
from datetime import datetime
import numpy as np
import pandas as pd
import geopandas as gpd
from shapely.geometry import Point

from geography.hull import convex_hull, hull_to_geometry
from geography.points import Cluster, GeoPoint
from clustering.utils import (
    bounding_box,
    canonical_params_json,
    labels_from_clusters,
    param_hash_from_json,
    points_from_df,
    validate_coordinates,
    HYPERPARAM_KEYS,
)

HOTSPOT_MODES = ("centroid", "hull")


class Clusterer(ABC):
    """Abstract base class for clustering algorithms.

    Attributes:
        crs: CRS of inputs and exported geometries (always EPSG:4326).
        params: Dictionary of algorithm-specific parameters.
        hotspot_mode: "centroid" for Point zones, "hull" for boundary zones.
        points_: GeoPoints built from the fitted DataFrame.
        clusters_: Cluster list produced by fit().
        labels_: Optional array of cluster ids aligned with points_.
        n_samples: Number of samples after fitting.
        data_bbox: Bounding box of input data (minx, miny, maxx, maxy).
    """

    def __init__(self, hotspot_mode: str = "centroid", **params):
        if hotspot_mode not in HOTSPOT_MODES:
            raise ValueError(f"Unknown hotspot_mode: {hotspot_mode}. Must be one of: {', '.join(HOTSPOT_MODES)}")
        self.crs = "EPSG:4326"
        self.hotspot_mode = hotspot_mode
        self.params = params
        self.params["hotspot_mode"] = hotspot_mode
        self.points_: Optional[List[GeoPoint]] = None
        self.clusters_: Optional[List[Cluster]] = None
        self.labels_: Optional[np.ndarray] = None
        self.n_samples: Optional[int] = None
        self.data_bbox: Optional[Tuple[float, float, float, float]] = None

        # Store method name (set by subclasses)
        self.method: Optional[str] = None

    @abstractmethod
    def cluster_points(self, points: List[GeoPoint]) -> List[Cluster]:
        """Run the underlying algorithm on a point list."""

    def fit(
        self,
        df: pd.DataFrame,
        id_col: str = "id",
        x_col: str = "lng",
        y_col: str = "lat"
    ) -> "Clusterer":
        """Fit model to input data and populate clusters_ and labels_.

        Rows with missing or out-of-range coordinates are dropped first,
        so labels_ aligns with the cleaned frame, not the raw one.

        Args:
            df: DataFrame with coordinate columns.
            id_col: Name of identifier column (default: "id").
            x_col: Name of longitude column (default: "lng").
            y_col: Name of latitude column (default: "lat").

        Returns:
            self for method chaining.
        """
        df = validate_coordinates(df, x_col, y_col)
        points = points_from_df(df, id_col, x_col, y_col)

        self.points_ = points
        self.data_bbox = bounding_box(points)
        self.clusters_ = self.cluster_points(points)
        self.labels_ = labels_from_clusters(self.clusters_, points)
        self.n_samples = len(points)

        return self

    def _check_fitted(self) -> None:
        if self.clusters_ is None:
            raise RuntimeError("Model not fitted. Run .fit() first.")

    def labels(self) -> np.ndarray:
        """Return stored cluster labels.

        Raises:
            RuntimeError: If model has not been fitted.
        """
        self._check_fitted()
        return self.labels_

    def clusters(self) -> List[Cluster]:
        """Return the fitted clusters.

        Raises:
            RuntimeError: If model has not been fitted.
        """
        self._check_fitted()
        return self.clusters_

    def hotspots(
        self,
        top_n: Optional[int] = None,
        min_score: Optional[float] = None
    ) -> gpd.GeoDataFrame:
        """Export clusters as zone geometries.

        Args:
            top_n: Limit number of zones (optional).
            min_score: Filter by minimum score (optional).

        Returns:
            GeoDataFrame in EPSG:4326 with columns:
                - geometry: centroid Point, or hull Polygon/LineString/Point
                - cluster_id: Cluster id within this fit
                - size: Number of member points
                - score: size / n_samples
                - method: Algorithm name
                - params_hash: 10-character SHA-1 hash
                - params_json: Canonical JSON string
                - crs: CRS string
        """
        self._check_fitted()

        columns = ["cluster_id", "size", "score", "method", "params_hash", "params_json", "crs"]
        if not self.clusters_:
            return gpd.GeoDataFrame(columns=columns, geometry=[], crs=self.crs)

        geometries = []
        for cluster in self.clusters_:
            if self.hotspot_mode == "centroid":
                geometries.append(Point(cluster.centroid.lng, cluster.centroid.lat))
            else:
                geometries.append(hull_to_geometry(convex_hull(cluster.points)))

        sizes = np.array([c.size for c in self.clusters_])
        gdf = gpd.GeoDataFrame(
            {
                "cluster_id": [c.cluster_id for c in self.clusters_],
                "size": sizes,
                "score": sizes / self.n_samples,
                "method": self.method,
            },
            geometry=geometries,
            crs=self.crs
        )

        info = self.info()
        gdf["params_hash"] = info["params_hash"]
        gdf["params_json"] = info["params_json"]
        gdf["crs"] = self.crs

        if top_n is not None:
            gdf = gdf.nlargest(top_n, "score")
        elif min_score is not None:
            gdf = gdf[gdf["score"] >= min_score]

        return gdf.reset_index(drop=True)

    def predict(
        self,
        df: pd.DataFrame,
        x_col: str = "lng",
        y_col: str = "lat"
    ) -> np.ndarray:
        """Predict cluster labels for new points.

        Raises:
            NotImplementedError: If method doesn't support prediction.
        """
        raise NotImplementedError(f"predict() not implemented for {self.method}")

    def info(self) -> Dict[str, Any]:
        """Return clusterer information.

        Returns:
            Dictionary with method name, params, params_json, params_hash,
            crs, n_samples, n_clusters, data_bbox, timestamp.

        Note:
            Can be called before fitting, but n_samples, n_clusters, and data_bbox
            will be None if not yet fitted.
        """
        if self.method is None:
            raise RuntimeError("Method name not set. This should not happen.")

        include = HYPERPARAM_KEYS.get(self.method, set())
        params_json = canonical_params_json(self.method, self.params, include)
        params_hash = param_hash_from_json(params_json)

        n_clusters = len(self.clusters_) if self.clusters_ is not None else None

        return {
            "method": self.method,
            "params": self.params,
            "params_json": params_json,
            "params_hash": params_hash,
            "crs": self.crs,
            "n_samples": self.n_samples,
            "n_clusters": n_clusters,
            "data_bbox": self.data_bbox,
            "timestamp": datetime.now().isoformat(),
        }
