from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Mapping, Optional, Set

from road_import.contracts.route_contract import ImportCandidate, StitchedRoute
from road_import.core.route import ANOMALY_THRESHOLD_M, route_metrics

MAX_RESULTS = 100
MIN_TOTAL_DISTANCE_M = 100.0

NO_DETAIL_TEXT = "No detail information"

# tag -> label, in output order
DESCRIPTION_LABELS = (
    ("surface", "Surface"),
    ("tracktype", "Track type"),
    ("width", "Width"),
)


def normalize_name(name: str) -> str:
    return name.strip().casefold()


def normalized_names(names: Iterable[Optional[str]]) -> Set[str]:
    return {normalize_name(n) for n in names if n}


def describe_tags(tags: Mapping[str, str]) -> str:
    """Default description text for a road, e.g. ``Surface: dirt, Width: 3``."""
    parts = [f"{label}: {tags[key]}" for key, label in DESCRIPTION_LABELS if tags.get(key)]
    return ", ".join(parts) or NO_DETAIL_TEXT


@dataclass(frozen=True)
class FilterStats:
    duplicates: int = 0
    too_short: int = 0
    truncated: int = 0


def _to_candidate(route: StitchedRoute, metrics) -> ImportCandidate:
    start = route.points[0]
    return ImportCandidate(
        display_name=route.name,
        description_text=describe_tags(route.merged_tags),
        anchor_latitude=start.latitude,
        anchor_longitude=start.longitude,
        route=route.points if len(route.points) > 1 else None,
        metrics=metrics,
        source_ids=route.source_ids,
        tags=dict(route.merged_tags),
    )


def filter_routes(
    routes: Iterable[StitchedRoute],
    existing_names: Set[str],
    max_results: int = MAX_RESULTS,
    min_total_distance_m: float = MIN_TOTAL_DISTANCE_M,
    anomaly_threshold_m: float = ANOMALY_THRESHOLD_M,
) -> tuple[List[ImportCandidate], FilterStats]:
    """
    Turn stitched routes into import candidates.

    *existing_names* must already be normalized (see :func:`normalized_names`).
    Order is the upstream encounter order; nothing is sorted.
    """
    duplicates = 0
    too_short = 0
    kept: List[ImportCandidate] = []

    for route in routes:
        if normalize_name(route.name) in existing_names:
            duplicates += 1
            continue
        if not route.points:
            too_short += 1
            continue

        metrics = route_metrics(route.points, threshold_m=anomaly_threshold_m)
        if metrics.total_distance_m <= min_total_distance_m:
            too_short += 1
            continue

        kept.append(_to_candidate(route, metrics))

    truncated = max(0, len(kept) - max_results)
    return kept[:max_results], FilterStats(
        duplicates=duplicates, too_short=too_short, truncated=truncated
    )
