"""Pytest fixtures for zone clustering unit tests.

This module provides shared point sets for testing the distance, hull
and clustering modules in isolation.
"""

import pytest
import numpy as np
import pandas as pd

from geography.points import GeoPoint, LatLng


@pytest.fixture
def nairobi_points():
    """Five facilities within about a kilometre of each other."""
    return [
        GeoPoint("f1", -1.2921, 36.8219),
        GeoPoint("f2", -1.2930, 36.8225),
        GeoPoint("f3", -1.2915, 36.8210),
        GeoPoint("f4", -1.2925, 36.8230),
        GeoPoint("f5", -1.2918, 36.8222),
    ]


@pytest.fixture
def dense_with_outlier(nairobi_points):
    """Dense group of five plus one facility roughly 100 km away."""
    return nairobi_points + [GeoPoint("far", -1.2921 + 0.9, 36.8219)]


@pytest.fixture
def two_group_points():
    """Two tight groups around (0, 0) and (10, 10).

    Returns:
        list[GeoPoint]: 20 points per group, offsets of at most 0.05 degrees.
    """
    rng = np.random.default_rng(7)
    points = []
    for g, (lat0, lng0) in enumerate([(0.0, 0.0), (10.0, 10.0)]):
        offsets = rng.uniform(-0.05, 0.05, size=(20, 2))
        for i, (dlat, dlng) in enumerate(offsets):
            points.append(GeoPoint(f"g{g}-{i}", lat0 + dlat, lng0 + dlng))
    return points


@pytest.fixture
def sparse_points():
    """Points hundreds of kilometres apart so no point has neighbours."""
    return [
        GeoPoint("a", 0.0, 0.0),
        GeoPoint("b", 5.0, 5.0),
        GeoPoint("c", -5.0, 10.0),
        GeoPoint("d", 20.0, -20.0),
    ]


@pytest.fixture
def square_with_center():
    """Corners of a square plus its centre point."""
    return [
        LatLng(0.0, 0.0),
        LatLng(0.0, 2.0),
        LatLng(2.0, 2.0),
        LatLng(2.0, 0.0),
        LatLng(1.0, 1.0),
    ]


@pytest.fixture
def facilities_df(two_group_points):
    """DataFrame form of two_group_points with id/lat/lng columns."""
    return pd.DataFrame({
        "id": [p.id for p in two_group_points],
        "lat": [p.lat for p in two_group_points],
        "lng": [p.lng for p in two_group_points],
    })
