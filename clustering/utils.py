"""Utility functions for clustering operations.

Provides helper functions for coordinate validation, DataFrame to point
conversion, random generator handling, parameter hashing, point loading
and zone export.
"""

import json
import hashlib
import os
from typing import Any, Dict, List, Optional, Sequence, Set, Union

import numpy as np
import pandas as pd
import geopandas as gpd

from geography.points import Cluster, GeoPoint

RandomState = Union[None, int, np.random.Generator]


def make_rng(random_state: RandomState = None) -> np.random.Generator:
    """Return a numpy Generator for the given seed.

    Args:
        random_state: None for system entropy, an int seed, or an existing
            Generator which is returned as-is so callers can share a stream.

    Returns:
        numpy.random.Generator instance.
    """
    if isinstance(random_state, np.random.Generator):
        return random_state
    return np.random.default_rng(random_state)


def valid_coordinate_mask(
    df: pd.DataFrame,
    x_col: str = "lng",
    y_col: str = "lat"
) -> pd.Series:
    """Boolean mask of rows with present, in-range coordinates."""
    return (
        df[x_col].notna() & df[y_col].notna() &
        (df[x_col] >= -180) & (df[x_col] <= 180) &
        (df[y_col] >= -90) & (df[y_col] <= 90)
    )


def validate_coordinates(
    df: pd.DataFrame,
    x_col: str = "lng",
    y_col: str = "lat"
) -> pd.DataFrame:
    """Validate and clean coordinate data.

    Args:
        df: DataFrame with coordinate columns.
        x_col: Name of longitude column.
        y_col: Name of latitude column.

    Returns:
        Cleaned DataFrame with missing or out-of-range coordinates removed.
    """
    df = df.copy()
    df = df[valid_coordinate_mask(df, x_col, y_col)]

    return df.reset_index(drop=True)


def points_from_df(
    df: pd.DataFrame,
    id_col: str = "id",
    x_col: str = "lng",
    y_col: str = "lat"
) -> List[GeoPoint]:
    """Convert DataFrame rows to GeoPoints.

    Rows without an ``id_col`` value (or frames without the column) use
    the row position as identifier.

    Raises:
        ValueError: If a coordinate column is missing.
    """
    missing = {x_col, y_col} - set(df.columns)
    if missing:
        raise ValueError(f"Missing required columns: {sorted(missing)}. "
                         f"Available columns: {sorted(df.columns.tolist())}")

    if id_col in df.columns:
        ids = [str(v) if pd.notna(v) else str(i) for i, v in enumerate(df[id_col])]
    else:
        ids = [str(i) for i in range(len(df))]

    return [
        GeoPoint(id=pid, lat=float(lat), lng=float(lng))
        for pid, lat, lng in zip(ids, df[y_col], df[x_col])
    ]


def labels_from_clusters(clusters: Sequence[Cluster], points: Sequence[GeoPoint]) -> np.ndarray:
    """Per-point cluster ids aligned with ``points``.

    Points are matched by identity, so the clusters must come from a call
    made on this exact sequence. Points missing from every cluster get -1.
    """
    by_obj = {}
    for cluster in clusters:
        for p in cluster.points:
            by_obj[id(p)] = cluster.cluster_id
    return np.array([by_obj.get(id(p), -1) for p in points], dtype=int)


HYPERPARAM_KEYS: Dict[str, Set[str]] = {
    "kmeans": {"k", "max_iterations", "random_state", "hotspot_mode"},
    "dbscan": {"epsilon_km", "min_points", "hotspot_mode"},
}


def canonical_params_json(method: str, params: Dict[str, Any], include: Set[str]) -> str:
    """Create canonical JSON representation of hyperparameters.

    Args:
        method: Algorithm method name (e.g., "kmeans", "dbscan").
        params: Dictionary of all parameters.
        include: Set of parameter keys to include in hash.

    Returns:
        Canonical JSON string (sorted keys, compact separators).

    Note:
        Always includes __method__ for cross-method collision prevention.
        Values that are not JSON types (a shared Generator, for example)
        are serialised with str().
    """
    filtered = {k: params[k] for k in sorted(params.keys()) if k in include}
    filtered["__method__"] = method
    return json.dumps(filtered, sort_keys=True, separators=(",", ":"), default=str)


def param_hash_from_json(params_json: str) -> str:
    """Generate deterministic SHA-1 hash from parameter JSON.

    Returns:
        10-character hex digest of SHA-1 hash.
    """
    return hashlib.sha1(params_json.encode()).hexdigest()[:10]


def load_points_df(path: str, x_col: str = "lng", y_col: str = "lat") -> pd.DataFrame:
    """Load a point table from CSV, JSON array or JSONL with coordinate validation.

    Args:
        path: Path to input file (.csv, .json or .jsonl).
        x_col: Name of longitude column (default: "lng").
        y_col: Name of latitude column (default: "lat").

    Returns:
        DataFrame with in-range coordinates only.

    Raises:
        FileNotFoundError: If input file doesn't exist.
        ValueError: If required columns are missing or file format is unsupported.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"Input file not found: {path}")

    ext = os.path.splitext(path)[1].lower()
    if ext == ".csv":
        df = pd.read_csv(path)
    elif ext in (".json", ".jsonl"):
        with open(path, "r", encoding="utf-8") as f:
            content = f.read().strip()
        if content.startswith("["):
            records = json.loads(content)
        else:
            records = [json.loads(line) for line in content.splitlines() if line.strip()]
        if not records:
            raise ValueError(f"No valid JSON records found in {path}")
        df = pd.DataFrame(records)
    else:
        raise ValueError(f"Unsupported file format: {ext} (use .csv, .json, or .jsonl)")

    missing = {x_col, y_col} - set(df.columns)
    if missing:
        raise ValueError(f"Missing required columns: {sorted(missing)}. "
                         f"Available columns: {sorted(df.columns.tolist())}")

    return validate_coordinates(df, x_col, y_col)


def zones_to_geojson(gdf: gpd.GeoDataFrame, out_path: str) -> None:
    """Write a zones GeoDataFrame to a GeoJSON FeatureCollection.

    Args:
        gdf: GeoDataFrame from ``Clusterer.hotspots()``.
        out_path: Output file path; parent directories are created.
    """
    out_dir = os.path.dirname(out_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)

    with open(out_path, "w", encoding="utf-8") as f:
        f.write(gdf.to_json())


def bounding_box(points: Sequence[GeoPoint]) -> Optional[tuple]:
    """(min_lng, min_lat, max_lng, max_lat) of the points, or None when empty."""
    if not points:
        return None
    lats = [p.lat for p in points]
    lngs = [p.lng for p in points]
    return (min(lngs), min(lats), max(lngs), max(lats))
