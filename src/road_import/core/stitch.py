"""Route stitching: chain a road's way fragments into one traversal.

Greedy nearest-endpoint chaining, no backtracking.  The review flag on the
resulting metrics exists to catch the cases where the greedy pick is wrong,
so this is deliberately not an optimal path solver.
"""
from __future__ import annotations

import logging
from math import hypot, inf
from typing import Dict, List, Optional, Tuple

from road_import.contracts.route_contract import Coordinate, FragmentGroup, StitchedRoute

log = logging.getLogger(__name__)

Chain = Tuple[Coordinate, ...]

# (append?, reverse?) in tie-break order
_ATTACHMENTS = (
    (True, False),   # current end   -> candidate start
    (True, True),    # current end   -> candidate end
    (False, False),  # candidate end -> current start
    (False, True),   # candidate start -> current start
)


def _planar(a: Coordinate, b: Coordinate) -> float:
    # Relative proximity only; degrees, not metres.
    return hypot(a.latitude - b.latitude, a.longitude - b.longitude)


def _attachment_distances(route: List[Coordinate], chain: Chain) -> Tuple[float, ...]:
    start, end = route[0], route[-1]
    return (
        _planar(end, chain[0]),
        _planar(end, chain[-1]),
        _planar(start, chain[-1]),
        _planar(start, chain[0]),
    )


def merge_tags(group: FragmentGroup) -> Dict[str, str]:
    """Earliest fragment wins on conflicting keys."""
    merged: Dict[str, str] = {}
    for frag in group.fragments:
        for k, v in frag.tags.items():
            if k not in merged:
                merged[k] = v
    return merged


def connect_chains(chains: List[Chain]) -> Tuple[List[Coordinate], List[int]]:
    """Chain polylines greedily.  Returns ``(points, dropped_indexes)``."""
    if not chains:
        return [], []

    route: List[Coordinate] = list(chains[0])
    remaining: Dict[int, Chain] = {i: c for i, c in enumerate(chains) if i > 0}

    while remaining:
        best_idx: Optional[int] = None
        best_opt = 0
        best_dist = inf

        for idx, chain in remaining.items():
            for opt, d in enumerate(_attachment_distances(route, chain)):
                if d < best_dist:
                    best_dist = d
                    best_idx = idx
                    best_opt = opt

        if best_idx is None:
            break

        append, reverse = _ATTACHMENTS[best_opt]
        chain = remaining.pop(best_idx)
        piece = list(reversed(chain)) if reverse else list(chain)
        route = route + piece if append else piece + route

    return route, sorted(remaining)


def stitch_group(group: FragmentGroup) -> StitchedRoute:
    """Assemble one FragmentGroup into a StitchedRoute.  Never raises."""
    frags = [f for f in group.fragments if f.geometry]
    source_ids = tuple(f.source_id for f in group.fragments)

    if len(frags) == 1:
        points: List[Coordinate] = list(frags[0].geometry)
        dropped: Tuple[str, ...] = ()
    else:
        points, dropped_idx = connect_chains([f.geometry for f in frags])
        dropped = tuple(frags[i].source_id for i in dropped_idx)
        if dropped:
            log.warning(
                "Route %r: %d fragment(s) could not be connected: %s",
                group.key, len(dropped), ", ".join(dropped),
            )

    return StitchedRoute(
        name=group.key,
        points=tuple(points),
        merged_tags=merge_tags(group),
        source_ids=source_ids,
        dropped_fragment_ids=dropped,
    )
