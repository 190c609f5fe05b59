"""Configuration management for zone clustering runs.

Provides default algorithm parameters and paths, and loading utilities
that merge a user JSON file over them.
"""
from __future__ import annotations

import copy
import json
import pathlib

_DEFAULT = {
    "kmeans": {
        "k": 5,
        "max_iterations": 100,
        "random_state": None
    },
    "dbscan": {
        "epsilon_km": 1.0,
        "min_points": 3,
        "hotspot_mode": "hull"
    },
    "paths": {
        "points": "data/points.csv",
        "out_dir": "zones_out"
    }
}


def load_config(path: str | None = "metrics/zone_config.json") -> dict:
    """Load clustering configuration from JSON file.

    Loads user configuration file and merges with default configuration.
    Section dicts are updated key by key; other values override defaults.

    Args:
        path: Path to configuration JSON file. If None or file doesn't exist,
            returns default configuration.

    Returns:
        dict: Merged configuration dictionary (a fresh copy on every call).
    """
    merged = copy.deepcopy(_DEFAULT)
    p = pathlib.Path(path) if path else None
    if p and p.exists():
        with p.open("r", encoding="utf-8") as f:
            user = json.load(f)
        for k, v in user.items():
            if isinstance(v, dict) and isinstance(merged.get(k), dict):
                merged[k].update(v)
            else:
                merged[k] = v
    return merged
