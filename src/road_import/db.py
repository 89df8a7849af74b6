"""Supabase client + the two queries the importer needs on ``roads``."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

from road_import.config import settings
from road_import.core.models import RoadRecord

log = logging.getLogger(__name__)

_client = None
_client_checked = False


def get_supabase():
    """Lazy singleton.  Returns ``supabase.Client`` or ``None`` if unconfigured."""
    global _client, _client_checked
    if _client_checked:
        return _client
    _client_checked = True
    if not settings.supabase_url or not settings.supabase_service_key:
        log.warning("Supabase not configured, database features disabled")
        return None
    try:
        from supabase import create_client

        _client = create_client(settings.supabase_url, settings.supabase_service_key)
    except Exception as exc:
        log.warning("Supabase unavailable (%s)", exc)
        _client = None
    return _client


def fetch_existing_names(sb) -> List[str]:
    """All road names already curated.  A failed lookup yields an empty list."""
    try:
        resp = sb.table("roads").select("name").execute()
    except Exception as exc:
        log.error("Error fetching existing roads: %s", exc)
        return []
    return [row["name"] for row in (resp.data or []) if row.get("name")]


@dataclass
class BulkInsertResult:
    inserted: List[Dict[str, Any]] = field(default_factory=list)
    errors: List[Dict[str, str]] = field(default_factory=list)


def bulk_insert_roads(
    sb, records: Iterable[RoadRecord], user_id: Optional[str] = None
) -> BulkInsertResult:
    """Insert one row per record; a failing row does not stop the rest."""
    result = BulkInsertResult()
    for rec in records:
        try:
            resp = sb.table("roads").insert(rec.to_row(user_id)).execute()
        except Exception as exc:
            log.error("Error inserting road %r: %s", rec.name, exc)
            result.errors.append({"road": rec.name, "error": str(exc)})
            continue
        if resp.data:
            result.inserted.append(resp.data[0])
        else:
            result.errors.append({"road": rec.name, "error": "no row returned"})
    log.info("Bulk import: %d inserted, %d failed", len(result.inserted), len(result.errors))
    return result
