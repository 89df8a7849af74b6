"""Group raw OSM way fragments by the road they belong to."""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional

from road_import.contracts.route_contract import Coordinate, Fragment, FragmentGroup

log = logging.getLogger(__name__)

GENERIC_ROAD_LABEL = "Forest road"


def _clean(value: Any) -> Optional[str]:
    if value is None:
        return None
    s = str(value)
    return s if s.strip() else None


def fragments_from_elements(elements: Iterable[Dict[str, Any]]) -> List[Fragment]:
    """Convert Overpass ``out geom`` elements into Fragments.

    Elements without a geometry list come back with zero points so the
    grouper can drop them along with nameless ones.  Entries that are not
    objects at all are skipped.
    """
    out: List[Fragment] = []
    for el in elements:
        if not isinstance(el, dict):
            continue
        geometry = el.get("geometry")
        if not isinstance(geometry, list):
            geometry = []
        raw_tags = el.get("tags")
        if not isinstance(raw_tags, dict):
            raw_tags = {}
        tags = {str(k): str(v) for k, v in raw_tags.items()}
        points = tuple(
            Coordinate(latitude=float(node["lat"]), longitude=float(node["lon"]))
            for node in geometry
            if isinstance(node, dict) and "lat" in node and "lon" in node
        )
        out.append(
            Fragment(
                source_id=str(el.get("id", "")),
                geometry=points,
                tags=tags,
                name=_clean(tags.get("name")),
                ref=_clean(tags.get("ref")),
            )
        )
    return out


def display_name(fragment: Fragment, generic_label: str = GENERIC_ROAD_LABEL) -> str:
    """``name``, else ``ref``, else a synthetic label carrying the source id."""
    if fragment.name:
        return fragment.name
    if fragment.ref:
        return fragment.ref
    return f"{generic_label} {fragment.source_id}"


def is_usable(fragment: Fragment) -> bool:
    return bool(fragment.geometry) and bool(fragment.name or fragment.ref)


def group_fragments(
    fragments: Iterable[Fragment],
    generic_label: str = GENERIC_ROAD_LABEL,
) -> List[FragmentGroup]:
    """One group per resolved display name, in first-seen order."""
    buckets: Dict[str, List[Fragment]] = {}
    skipped = 0
    for frag in fragments:
        if not is_usable(frag):
            skipped += 1
            continue
        buckets.setdefault(display_name(frag, generic_label), []).append(frag)

    if skipped:
        log.debug("Skipped %d fragments without geometry or name/ref", skipped)

    return [FragmentGroup(key=k, fragments=tuple(v)) for k, v in buckets.items()]
