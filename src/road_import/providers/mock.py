from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from road_import.providers.base import RoadSource
from road_import.providers.prefectures import prefecture_bbox


class StaticRoadSource(RoadSource):
    """
    Serves a fixed Overpass-shaped payload so the pipeline runs end-to-end
    without the network.  Accepts either the full ``{"elements": [...]}``
    document or the bare element list, in memory or from a JSON file.
    """

    def __init__(self, payload: Union[Dict[str, Any], List[Dict[str, Any]]]):
        if isinstance(payload, dict):
            payload = payload.get("elements", [])
        self._elements = list(payload)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> StaticRoadSource:
        return cls(json.loads(Path(path).read_text(encoding="utf-8")))

    def fetch_elements(self, prefecture: str, city: Optional[str] = None) -> List[Dict[str, Any]]:
        prefecture_bbox(prefecture)
        return list(self._elements)
