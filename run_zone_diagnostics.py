#!/usr/bin/env python3
"""Zone clustering diagnostics runner.

Loads a point file, computes the k-distance curve, selects epsilon using
knee detection, runs K-Means++ and DBSCAN, and exports the resulting zones
(hull boundaries and centroids) as GeoJSON.

Usage:
    # Run with defaults from metrics/zone_config.json
    python run_zone_diagnostics.py

    # Or with custom arguments
    python run_zone_diagnostics.py --input facilities.csv --k 8 --min-points 4
"""

import argparse
import os
import sys
import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from kneed import KneeLocator

from clustering import make_clusterer, load_points_df, zones_to_geojson
from metrics import load_config, k_distance, silhouette_score, inertia_km2


def find_epsilon_knee(sorted_distances: np.ndarray) -> float:
    """Find epsilon (km) at the knee of a sorted k-distance curve.

    Falls back to the 95th percentile when no knee is found.
    """
    if len(sorted_distances) >= 3:
        kl = KneeLocator(
            np.arange(len(sorted_distances)),
            sorted_distances,
            curve="convex",
            direction="increasing",
            online=True
        )
        if kl.knee is not None:
            return float(sorted_distances[int(kl.knee)])

    print("[WARN] No knee found in k-distance curve. Using 95th percentile.")
    return float(np.percentile(sorted_distances, 95))


def main() -> None:
    """Run both clustering strategies on a point file and export zones.

    Raises:
        SystemExit: If data loading fails.
    """
    parser = argparse.ArgumentParser(
        description="Zone clustering diagnostics with k-distance plot"
    )
    parser.add_argument("--config", default="metrics/zone_config.json",
                        help="Path to config JSON (default: metrics/zone_config.json)")
    parser.add_argument("--input", default=None, help="Point file (.csv, .json, .jsonl) with id/lat/lng columns")
    parser.add_argument("--out", default=None, help="Output directory")
    parser.add_argument("--k", type=int, default=None, help="Number of K-Means clusters")
    parser.add_argument("--min-points", type=int, default=None, help="DBSCAN min_points")
    parser.add_argument("--epsilon-km", type=float, default=None,
                        help="DBSCAN epsilon in km (if not provided, auto-detect from k-distance curve)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for K-Means++ seeding")
    args = parser.parse_args()

    config = load_config(args.config)
    kmeans_params = dict(config["kmeans"])
    dbscan_params = dict(config["dbscan"])
    if args.k is not None:
        kmeans_params["k"] = args.k
    if args.seed is not None:
        kmeans_params["random_state"] = args.seed
    if args.min_points is not None:
        dbscan_params["min_points"] = args.min_points

    input_path = args.input or config["paths"]["points"]
    out_dir = args.out or config["paths"]["out_dir"]
    os.makedirs(os.path.join(out_dir, "plots"), exist_ok=True)

    print(f"[INFO] Loading points from {input_path}...")
    try:
        df = load_points_df(input_path)
        print(f"[INFO] Loaded {len(df)} points")
    except (FileNotFoundError, ValueError) as e:
        print(f"[ERROR] Failed to load data: {e}")
        sys.exit(1)

    min_points = dbscan_params["min_points"]
    print(f"[INFO] Computing {min_points}-distance curve...")
    sorted_distances, _ = k_distance(df["lat"].to_numpy(), df["lng"].to_numpy(), k=min_points)

    plt.figure(figsize=(10, 6))
    plt.plot(range(len(sorted_distances)), sorted_distances, linewidth=2)
    plt.xlabel("Point Index (sorted)", fontsize=12)
    plt.ylabel(f"{min_points}-NN Distance (km)", fontsize=12)
    plt.title(f"DBSCAN {min_points}-Distance Plot", fontsize=14, fontweight="bold")
    plt.grid(True, alpha=0.3)
    plt.tight_layout()
    kdist_path = os.path.join(out_dir, "plots", "dbscan_kdist.png")
    plt.savefig(kdist_path, dpi=200, bbox_inches="tight")
    plt.close()
    print(f"  Saved: {kdist_path}")

    if args.epsilon_km is not None:
        dbscan_params["epsilon_km"] = args.epsilon_km
        print(f"[INFO] Using provided epsilon: {args.epsilon_km:.3f} km")
    elif len(sorted_distances):
        dbscan_params["epsilon_km"] = find_epsilon_knee(sorted_distances)
        print(f"  Selected epsilon: {dbscan_params['epsilon_km']:.3f} km")

    for name, params in (("kmeans", kmeans_params), ("dbscan", dbscan_params)):
        print(f"[INFO] Fitting {name} with {params}...")
        model = make_clusterer(name, **params)
        model.fit(df)

        clusters = model.clusters()
        score = silhouette_score(model.labels(), df["lat"].to_numpy(), df["lng"].to_numpy())
        print(f"  {len(clusters)} clusters, silhouette={score:.3f}, inertia={inertia_km2(clusters):.1f} km²")

        zones = model.hotspots()
        small = [c.cluster_id for c in clusters if c.size < 3]
        if small and model.hotspot_mode == "hull":
            print(f"[WARN] {len(small)} clusters have fewer than 3 points and no polygon boundary")

        json_path = os.path.join(out_dir, f"{name}_zones.geojson")
        zones_to_geojson(zones, json_path)
        print(f"[OK] Exported {len(zones)} zones to {json_path}")


if __name__ == "__main__":
    main()
