"""Centralized settings for the road-import backend."""
from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_prefix": "ROAD_IMPORT_"}

    # Redis — empty string means disabled (graceful fallback)
    redis_url: str = ""

    # Supabase — empty strings mean disabled (graceful fallback)
    supabase_url: str = ""
    supabase_service_key: str = ""
    supabase_jwt_secret: str = ""

    # The single account allowed to run imports
    admin_email: str = ""

    # Overpass
    overpass_url: str = "https://overpass-api.de/api/interpreter"
    overpass_timeout_s: int = 60
    overpass_user_agent: str = "RoadImport/0.1.0"
    ttl_overpass: int = 3600          # 1 h — raw way geometry for an area

    # Pipeline
    max_results: int = 100
    min_total_distance_m: float = 100.0
    anomaly_threshold_m: float = 100.0
    generic_road_label: str = "Forest road"


settings = Settings()
