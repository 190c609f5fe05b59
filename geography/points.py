"""Value types shared by the clustering and hull modules.

GeoPoint is the input unit supplied by callers (facility or stop records),
LatLng is a bare coordinate pair used for centroids, and Cluster is the
output unit produced by both partitioning strategies.
"""

from dataclasses import dataclass, field
from typing import List, Sequence


@dataclass(frozen=True)
class LatLng:
    """A latitude/longitude pair in decimal degrees."""

    lat: float
    lng: float


@dataclass(frozen=True)
class GeoPoint:
    """An identified input coordinate.

    Attributes:
        id: Identifier, unique within a single clustering call.
        lat: Latitude in decimal degrees, [-90, 90].
        lng: Longitude in decimal degrees, [-180, 180].
    """

    id: str
    lat: float
    lng: float


@dataclass
class Cluster:
    """A group of points produced by one clustering call.

    cluster_id is only unique within the result list it came from and is
    not stable across re-runs. points is never empty.
    """

    cluster_id: int
    centroid: LatLng
    points: List[GeoPoint] = field(default_factory=list)

    @property
    def size(self) -> int:
        return len(self.points)

    @property
    def ids(self) -> List[str]:
        return [p.id for p in self.points]


def mean_centroid(points: Sequence[GeoPoint]) -> LatLng:
    """Arithmetic mean of the coordinates of a non-empty point sequence."""
    n = len(points)
    return LatLng(
        lat=sum(p.lat for p in points) / n,
        lng=sum(p.lng for p in points) / n,
    )
