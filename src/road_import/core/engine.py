from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from road_import.config import Settings, settings as default_settings
from road_import.contracts.route_contract import Fragment, ImportCandidate
from road_import.core.filtering import filter_routes, normalized_names
from road_import.core.grouping import fragments_from_elements, group_fragments
from road_import.core.stitch import stitch_group
from road_import.providers.base import RoadSource

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    candidates: List[ImportCandidate]
    fragments_in: int = 0
    groups: int = 0
    duplicates: int = 0
    too_short: int = 0
    truncated: int = 0
    dropped_fragment_ids: List[str] = field(default_factory=list)

    @property
    def review_required_count(self) -> int:
        return sum(1 for c in self.candidates if c.review_required)


def run_pipeline(
    fragments: Iterable[Fragment],
    existing_names: Iterable[Optional[str]],
    cfg: Optional[Settings] = None,
) -> PipelineResult:
    """Group, stitch, measure and filter.  Pure apart from logging."""
    cfg = cfg or default_settings
    fragments = list(fragments)

    groups = group_fragments(fragments, generic_label=cfg.generic_road_label)
    routes = [stitch_group(g) for g in groups]
    dropped = [sid for r in routes for sid in r.dropped_fragment_ids]

    candidates, stats = filter_routes(
        routes,
        normalized_names(existing_names),
        max_results=cfg.max_results,
        min_total_distance_m=cfg.min_total_distance_m,
        anomaly_threshold_m=cfg.anomaly_threshold_m,
    )

    result = PipelineResult(
        candidates=candidates,
        fragments_in=len(fragments),
        groups=len(groups),
        duplicates=stats.duplicates,
        too_short=stats.too_short,
        truncated=stats.truncated,
        dropped_fragment_ids=dropped,
    )
    log.info(
        "Pipeline: %d fragments -> %d groups -> %d candidates "
        "(%d existing, %d short, %d over cap, %d need review)",
        result.fragments_in, result.groups, len(candidates),
        result.duplicates, result.too_short, result.truncated,
        result.review_required_count,
    )
    return result


def run_import(
    source: RoadSource,
    prefecture: str,
    existing_names: Iterable[Optional[str]],
    city: Optional[str] = None,
    cfg: Optional[Settings] = None,
) -> PipelineResult:
    """Fetch raw ways for an area, then run the pipeline.

    Raises ``UpstreamUnavailable`` when the source fails; there is no
    partial result in that case.
    """
    elements = source.fetch_elements(prefecture, city=city)
    return run_pipeline(fragments_from_elements(elements), existing_names, cfg=cfg)
