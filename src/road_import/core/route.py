"""Geodesic route metrics: segment distances, total length, longest jump."""
from __future__ import annotations

from math import atan2, cos, radians, sin, sqrt
from typing import Sequence

from road_import.contracts.route_contract import Coordinate, RouteMetrics

EARTH_RADIUS_M = 6_371_000.0
ANOMALY_THRESHOLD_M = 100.0


# ---------------------------------------------------------------------------
# Geo helpers
# ---------------------------------------------------------------------------

def haversine_m(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in metres between two WGS-84 points."""
    lat1r, lon1r, lat2r, lon2r = map(
        radians, [a.latitude, a.longitude, b.latitude, b.longitude]
    )
    dlat = lat2r - lat1r
    dlon = lon2r - lon1r
    h = sin(dlat / 2) ** 2 + cos(lat1r) * cos(lat2r) * sin(dlon / 2) ** 2
    return 2 * EARTH_RADIUS_M * atan2(sqrt(h), sqrt(1 - h))


def segment_distances_m(points: Sequence[Coordinate]) -> list[float]:
    """Distance of every consecutive pair, in route order."""
    return [haversine_m(points[i - 1], points[i]) for i in range(1, len(points))]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def route_metrics(
    points: Sequence[Coordinate],
    threshold_m: float = ANOMALY_THRESHOLD_M,
) -> RouteMetrics:
    """
    Summarise a stitched route.

    Parameters
    ----------
    points : sequence of Coordinate
        The assembled route, in traversal order.
    threshold_m : float
        A consecutive-pair distance strictly above this marks the route as
        needing review.  Compared against the unrounded distance.

    Returns
    -------
    RouteMetrics
    """
    segs = segment_distances_m(points)
    if not segs:
        return RouteMetrics(
            total_distance_m=0.0,
            max_segment_m=0.0,
            has_anomalous_segment=False,
        )

    longest = max(segs)
    return RouteMetrics(
        total_distance_m=sum(segs),
        max_segment_m=longest,
        has_anomalous_segment=longest > threshold_m,
    )
