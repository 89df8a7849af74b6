"""FastAPI REST backend for the unpaved-road importer."""
from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from road_import.cache.redis_client import get_redis
from road_import.db import get_supabase
from road_import.routers import admin

log = logging.getLogger(__name__)

app = FastAPI(title="Road Import", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(admin.router)


@app.get("/health")
def health():
    redis_ok = False
    try:
        r = get_redis()
        if r is not None:
            r.ping()
            redis_ok = True
    except Exception as exc:
        log.warning("Redis ping failed: %s", exc)

    supabase_ok = get_supabase() is not None

    return {"status": "ok", "redis": redis_ok, "supabase": supabase_ok}
