from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from road_import.cache import keys as cache_keys
from road_import.cache.redis_client import cache_get_json, cache_set_json
from road_import.config import settings
from road_import.errors import UpstreamUnavailable
from road_import.providers.base import RoadSource
from road_import.providers.http import HTTPClient
from road_import.providers.prefectures import prefecture_bbox

log = logging.getLogger(__name__)

# Municipality suffixes tried when the caller gives a bare city name
CITY_SUFFIXES = ("", "市", "町", "村")


def build_bbox_query(prefecture: str, timeout_s: int = 25) -> str:
    bbox = prefecture_bbox(prefecture).overpass()
    return (
        f"[out:json][timeout:{timeout_s}];\n"
        "(\n"
        f'  way["highway"="track"]({bbox});\n'
        f'  way["highway"="service"]["surface"="unpaved"]({bbox});\n'
        ");\n"
        "out geom;"
    )


def build_city_query(prefecture: str, city: str, timeout_s: int = 25) -> str:
    prefecture_bbox(prefecture)  # validates the prefecture name
    city = city.strip()
    areas = "\n".join(
        f'  area["name"="{city}{suffix}"](area.prefecture);' for suffix in CITY_SUFFIXES
    )
    return (
        f"[out:json][timeout:{timeout_s}];\n"
        f'area["name"="{prefecture}"]["admin_level"~"^(3|4)$"]->.prefecture;\n'
        f"(\n{areas}\n)->.city;\n"
        "(\n"
        '  way["highway"="track"](area.city);\n'
        '  way["highway"="service"]["surface"="unpaved"](area.city);\n'
        ");\n"
        "out geom;"
    )


def build_query(prefecture: str, city: Optional[str] = None) -> str:
    if city and city.strip():
        return build_city_query(prefecture, city)
    return build_bbox_query(prefecture)


class OverpassRoadSource(RoadSource):
    """
    Unpaved roads from the Overpass API:
      - ``highway=track`` (forest roads)
      - ``highway=service`` + ``surface=unpaved``

    Responses are cached in Redis when it is configured.  Any transport
    failure, non-2xx status or malformed payload raises UpstreamUnavailable.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        client: Optional[HTTPClient] = None,
        use_cache: bool = True,
    ):
        self.url = url or settings.overpass_url
        self.client = client or HTTPClient(
            user_agent=settings.overpass_user_agent,
            timeout_s=settings.overpass_timeout_s,
            tries=2,
        )
        self.use_cache = use_cache

    def _post(self, query: str) -> Dict[str, Any]:
        try:
            return self.client.post_form_json(self.url, data={"data": query})
        except (requests.RequestException, ValueError) as e:
            log.error("Overpass request failed: %s", e)
            raise UpstreamUnavailable(f"Overpass request failed: {e}") from e

    def fetch_elements(self, prefecture: str, city: Optional[str] = None) -> List[Dict[str, Any]]:
        query = build_query(prefecture, city)
        key = cache_keys.overpass_query(query)

        if self.use_cache:
            cached = cache_get_json(key)
            if cached is not None:
                log.info("Overpass cache hit for %s %s", prefecture, city or "")
                return cached

        payload = self._post(query)
        elements = payload.get("elements") if isinstance(payload, dict) else None
        if not isinstance(elements, list):
            raise UpstreamUnavailable("Overpass response has no 'elements' list")

        log.info("Overpass returned %d elements for %s %s", len(elements), prefecture, city or "")
        if self.use_cache:
            cache_set_json(key, elements, settings.ttl_overpass)
        return elements
