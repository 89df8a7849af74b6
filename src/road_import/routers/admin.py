"""Admin import endpoints: fetch candidate roads from OSM, bulk insert."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from road_import.auth import require_admin
from road_import.config import settings
from road_import.core.engine import run_import
from road_import.core.models import RoadCandidateOut, RoadRecord
from road_import.core.review import gate_records
from road_import.db import bulk_insert_roads, fetch_existing_names, get_supabase
from road_import.errors import UnknownArea, UpstreamUnavailable
from road_import.providers.base import RoadSource
from road_import.providers.overpass import OverpassRoadSource
from road_import.providers.prefectures import prefecture_bbox

log = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])

_source: Optional[RoadSource] = None


def get_road_source() -> RoadSource:
    global _source
    if _source is None:
        _source = OverpassRoadSource()
    return _source


class FetchRoadsRequest(BaseModel):
    prefecture: str = Field(..., min_length=1)
    city: Optional[str] = None


class FetchRoadsResponse(BaseModel):
    roads: List[RoadCandidateOut]
    count: int
    review_required: int = 0
    dropped_fragment_ids: List[str] = []


class BulkImportRequest(BaseModel):
    roads: List[RoadRecord] = []


class BulkImportResponse(BaseModel):
    success: bool
    inserted: int
    errors: int
    details: List[Dict[str, Any]] = []


@router.post("/fetch-roads", response_model=FetchRoadsResponse)
def fetch_roads(
    body: FetchRoadsRequest,
    claims: Dict[str, Any] = Depends(require_admin),
    source: RoadSource = Depends(get_road_source),
):
    try:
        prefecture_bbox(body.prefecture)
    except UnknownArea as e:
        raise HTTPException(status_code=400, detail=str(e))

    sb = get_supabase()
    if sb is None:
        raise HTTPException(status_code=503, detail="Database unavailable")

    existing = fetch_existing_names(sb)
    try:
        result = run_import(source, body.prefecture, existing, city=body.city)
    except UpstreamUnavailable as e:
        raise HTTPException(status_code=502, detail=f"Failed to fetch data from OpenStreetMap: {e}")

    roads = [RoadCandidateOut.from_candidate(c) for c in result.candidates]
    return FetchRoadsResponse(
        roads=roads,
        count=len(roads),
        review_required=result.review_required_count,
        dropped_fragment_ids=result.dropped_fragment_ids,
    )


@router.post("/bulk-import", response_model=BulkImportResponse)
def bulk_import(body: BulkImportRequest, claims: Dict[str, Any] = Depends(require_admin)):
    if not body.roads:
        raise HTTPException(status_code=400, detail="No roads to import")

    sb = get_supabase()
    if sb is None:
        raise HTTPException(status_code=503, detail="Database unavailable")

    # Anomalous routes are only inserted when the reviewer confirmed them
    accepted, rejected = gate_records(body.roads, threshold_m=settings.anomaly_threshold_m)
    result = bulk_insert_roads(sb, accepted, user_id=claims.get("sub"))
    details = rejected + result.errors
    return BulkImportResponse(
        success=True,
        inserted=len(result.inserted),
        errors=len(details),
        details=details,
    )
