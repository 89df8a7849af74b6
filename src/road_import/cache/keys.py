"""Redis key naming conventions for the road-import cache layer."""
from __future__ import annotations

import hashlib

_PREFIX = "ri"


# ── Overpass ─────────────────────────────────────────────────────────────

def overpass_query(query: str) -> str:
    """Key for a raw Overpass response (query-text based)."""
    h = hashlib.sha256(query.encode()).hexdigest()[:16]
    return f"{_PREFIX}:overpass:{h}"
