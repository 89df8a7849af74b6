import time
from unittest.mock import MagicMock

import jwt
import pytest
from fastapi.testclient import TestClient

from road_import.api import app
from road_import.config import settings
from road_import.errors import UpstreamUnavailable
from road_import.providers.mock import StaticRoadSource
from road_import.routers import admin

SECRET = "test-secret-that-is-at-least-32-bytes-long"
ADMIN = "admin@example.com"

ELEMENTS = [
    {
        "id": 1,
        "geometry": [{"lat": 35.0, "lon": 139.0}, {"lat": 35.001, "lon": 139.001}],
        "tags": {"name": "Forest Road A", "surface": "dirt"},
    },
    {
        "id": 2,
        "geometry": [{"lat": 35.002, "lon": 139.002}, {"lat": 35.001, "lon": 139.001}],
        "tags": {"name": "Forest Road A"},
    },
    {
        "id": 3,
        "geometry": [{"lat": 36.0, "lon": 138.0}, {"lat": 36.01, "lon": 138.0}],
        "tags": {"name": "Already There"},
    },
]


def token(email=ADMIN, sub="user-1", exp_offset=3600):
    claims = {"sub": sub, "email": email, "aud": "authenticated", "exp": int(time.time()) + exp_offset}
    return jwt.encode(claims, SECRET, algorithm="HS256")


def auth(**kw):
    return {"Authorization": f"Bearer {token(**kw)}"}


@pytest.fixture
def sb():
    client = MagicMock()
    roads = client.table.return_value
    roads.select.return_value.execute.return_value.data = [{"name": "already there "}]
    roads.insert.return_value.execute.side_effect = lambda: MagicMock(data=[{"id": "new"}])
    return client


@pytest.fixture
def client(monkeypatch, sb):
    monkeypatch.setattr(settings, "supabase_jwt_secret", SECRET)
    monkeypatch.setattr(settings, "admin_email", ADMIN)
    monkeypatch.setattr(admin, "get_supabase", lambda: sb)
    app.dependency_overrides[admin.get_road_source] = lambda: StaticRoadSource(ELEMENTS)
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health():
    r = TestClient(app).get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_fetch_roads(client):
    r = client.post("/admin/fetch-roads", json={"prefecture": "長野県"}, headers=auth())
    assert r.status_code == 200
    body = r.json()
    assert body["count"] == 1
    road = body["roads"][0]
    assert road["id"] == "1-2"
    assert road["name"] == "Forest Road A"
    assert (road["latitude"], road["longitude"]) == (35.0, 139.0)
    assert road["description"] == "Surface: dirt"
    assert len(road["route"]) == 4
    assert road["has_long_segments"] is True
    assert road["review_required"] is True
    assert road["max_segment_distance"] == 144
    assert body["review_required"] == 1


def test_fetch_roads_requires_token(client):
    r = client.post("/admin/fetch-roads", json={"prefecture": "長野県"})
    assert r.status_code == 401


def test_fetch_roads_rejects_expired_token(client):
    r = client.post("/admin/fetch-roads", json={"prefecture": "長野県"}, headers=auth(exp_offset=-60))
    assert r.status_code == 401


def test_fetch_roads_requires_admin(client):
    r = client.post(
        "/admin/fetch-roads", json={"prefecture": "長野県"}, headers=auth(email="someone@example.com")
    )
    assert r.status_code == 403


def test_unknown_prefecture(client):
    r = client.post("/admin/fetch-roads", json={"prefecture": "Atlantis"}, headers=auth())
    assert r.status_code == 400


def test_upstream_failure(client):
    failing = MagicMock()
    failing.fetch_elements.side_effect = UpstreamUnavailable("timeout")
    app.dependency_overrides[admin.get_road_source] = lambda: failing
    r = client.post("/admin/fetch-roads", json={"prefecture": "長野県"}, headers=auth())
    assert r.status_code == 502


def test_database_unconfigured(client, monkeypatch):
    monkeypatch.setattr(admin, "get_supabase", lambda: None)
    r = client.post("/admin/fetch-roads", json={"prefecture": "長野県"}, headers=auth())
    assert r.status_code == 503


def test_bulk_import(client, sb):
    roads = [
        {
            "name": "Forest Road A",
            "description": "Surface: dirt",
            "latitude": 35.0,
            "longitude": 139.0,
            "route": [{"lat": 35.0, "lng": 139.0}, {"lat": 35.001, "lng": 139.001}],
            "confirmed": True,
        },
        {"name": "Point Road", "description": "", "latitude": 36.0, "longitude": 138.0},
    ]
    r = client.post("/admin/bulk-import", json={"roads": roads}, headers=auth())
    assert r.status_code == 200
    assert r.json() == {"success": True, "inserted": 2, "errors": 0, "details": []}

    rows = [c.args[0] for c in sb.table.return_value.insert.call_args_list]
    assert rows[0]["route"] == [{"lat": 35.0, "lng": 139.0}, {"lat": 35.001, "lng": 139.001}]
    assert rows[0]["user_id"] == "user-1"
    assert rows[1]["route"] is None


def test_bulk_import_collects_row_errors(client, sb):
    sb.table.return_value.insert.return_value.execute.side_effect = [
        MagicMock(data=[{"id": "ok"}]),
        RuntimeError("duplicate key"),
    ]
    roads = [
        {"name": "A", "latitude": 35.0, "longitude": 139.0},
        {"name": "B", "latitude": 35.1, "longitude": 139.1},
    ]
    r = client.post("/admin/bulk-import", json={"roads": roads}, headers=auth())
    body = r.json()
    assert body["inserted"] == 1
    assert body["errors"] == 1
    assert body["details"] == [{"road": "B", "error": "duplicate key"}]


def test_bulk_import_empty(client):
    r = client.post("/admin/bulk-import", json={"roads": []}, headers=auth())
    assert r.status_code == 400


def test_bulk_import_holds_back_unconfirmed_long_segment(client, sb):
    roads = [
        {
            "name": "Forest Road A",
            "latitude": 35.0,
            "longitude": 139.0,
            "route": [{"lat": 35.0, "lng": 139.0}, {"lat": 35.001, "lng": 139.001}],
        },
    ]
    r = client.post("/admin/bulk-import", json={"roads": roads}, headers=auth())
    assert r.status_code == 200
    body = r.json()
    assert body["inserted"] == 0
    assert body["errors"] == 1
    assert body["details"][0]["road"] == "Forest Road A"
    assert "confirm" in body["details"][0]["error"]
    sb.table.return_value.insert.assert_not_called()


def test_unknown_prefecture_checked_before_database(client, monkeypatch):
    monkeypatch.setattr(admin, "get_supabase", lambda: None)
    r = client.post("/admin/fetch-roads", json={"prefecture": "Atlantis"}, headers=auth())
    assert r.status_code == 400
