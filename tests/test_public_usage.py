import sqlite3
from datetime import datetime
from zoneinfo import ZoneInfo

import pytest
from fastapi.testclient import TestClient

from app.api.v1.routes import public
from app.api.v1.routes.public import resolve_time_range
from app.core.errors import BadRequestError, NotFoundError
from app.main import app
from app.models.usage import UsageStats
from app.repositories import api_key_repo
from app.services.api_key_service import hash_api_key, revoke_api_key

URL = "/api/v1/public/usage"
SHANGHAI = ZoneInfo("Asia/Shanghai")
FIXED_NOW = datetime(2024, 3, 15, 13, 45, 12, tzinfo=SHANGHAI)


@pytest.fixture
def captured(monkeypatch):
    """Freeze 'now' and capture what the aggregator is asked for."""
    calls = []

    def fake_stats(api_key_id, start, end):
        calls.append((api_key_id, start, end))
        return UsageStats()

    monkeypatch.setattr(public, "now_in_user_location", lambda tz: FIXED_NOW)
    monkeypatch.setattr(public, "get_detailed_stats_by_api_key", fake_stats)
    return calls


# ---------- time range ----------

def test_today_starts_at_local_midnight():
    start, end = resolve_time_range(FIXED_NOW, "Asia/Shanghai", "today", None, None)
    assert start == datetime(2024, 3, 15, tzinfo=SHANGHAI)
    assert end == FIXED_NOW


def test_default_period_is_today():
    assert resolve_time_range(FIXED_NOW, "Asia/Shanghai", None, None, None) == \
        resolve_time_range(FIXED_NOW, "Asia/Shanghai", "today", None, None)


def test_week_is_seven_days_back():
    start, end = resolve_time_range(FIXED_NOW, "Asia/Shanghai", "week", None, None)
    assert start == datetime(2024, 3, 8, 13, 45, 12, tzinfo=SHANGHAI)
    assert end == FIXED_NOW


def test_month_is_one_calendar_month_back():
    now = datetime(2024, 3, 15, 9, 0, tzinfo=SHANGHAI)
    start, end = resolve_time_range(now, "Asia/Shanghai", "month", None, None)
    assert start == datetime(2024, 2, 15, 9, 0, tzinfo=SHANGHAI)
    assert end == now


@pytest.mark.parametrize("now, expected", [
    # Feb 31 does not exist; the extra days roll into March
    (datetime(2024, 3, 31, 9, 0), datetime(2024, 3, 2, 9, 0)),
    (datetime(2023, 3, 31, 9, 0), datetime(2023, 3, 3, 9, 0)),
    (datetime(2024, 5, 31, 23, 59), datetime(2024, 5, 1, 23, 59)),
    (datetime(2024, 1, 31, 6, 30), datetime(2023, 12, 31, 6, 30)),
])
def test_month_overflow_rolls_forward(now, expected):
    now = now.replace(tzinfo=SHANGHAI)
    start, _ = resolve_time_range(now, "Asia/Shanghai", "month", None, None)
    assert start == expected.replace(tzinfo=SHANGHAI)


@pytest.mark.parametrize("period", ["bogus", "", "TODAY", "year"])
def test_unknown_period_behaves_like_today(period):
    assert resolve_time_range(FIXED_NOW, "Asia/Shanghai", period, None, None) == \
        resolve_time_range(FIXED_NOW, "Asia/Shanghai", "today", None, None)


def test_custom_range_covers_whole_end_day():
    start, end = resolve_time_range(FIXED_NOW, "Asia/Shanghai", None, "2024-01-01", "2024-01-31")
    assert start == datetime(2024, 1, 1, tzinfo=SHANGHAI)
    assert end == datetime(2024, 1, 31, 23, 59, 59, 999999, tzinfo=SHANGHAI)


def test_custom_range_overrides_period():
    start, _ = resolve_time_range(FIXED_NOW, "UTC", "week", "2024-01-01", "2024-01-31")
    assert start == datetime(2024, 1, 1, tzinfo=ZoneInfo("UTC"))


def test_single_date_falls_back_to_period():
    start, end = resolve_time_range(FIXED_NOW, "Asia/Shanghai", "today", "2024-01-01", None)
    assert start == datetime(2024, 3, 15, tzinfo=SHANGHAI)
    assert end == FIXED_NOW


def test_bad_start_date_cites_format():
    with pytest.raises(BadRequestError) as exc:
        resolve_time_range(FIXED_NOW, "UTC", None, "2024/01/01", "2024-01-31")
    assert "start_date" in exc.value.message
    assert "YYYY-MM-DD" in exc.value.message


def test_bad_end_date_cites_format():
    with pytest.raises(BadRequestError) as exc:
        resolve_time_range(FIXED_NOW, "UTC", None, "2024-01-01", "31-01-2024")
    assert "end_date" in exc.value.message


# ---------- endpoint ----------

def test_missing_key_is_bad_request(client):
    resp = client.get(URL)
    assert resp.status_code == 400
    assert resp.json() == {"code": 400, "message": "API key is required"}


def test_empty_key_is_bad_request(client):
    resp = client.get(URL, params={"key": ""})
    assert resp.status_code == 400


def test_unknown_key_is_not_found(client):
    resp = client.get(URL, params={"key": "sk-does-not-exist"})
    assert resp.status_code == 404
    assert resp.json()["message"] == "API key not found"


def test_revoked_key_is_bad_request(client, api_key):
    revoke_api_key(api_key["key_id"])
    resp = client.get(URL, params={"key": api_key["key"]})
    assert resp.status_code == 400
    assert resp.json()["message"] == "API key is not active"


def test_expired_key_is_bad_request(client):
    api_key_repo.create_api_key(hash_api_key("sk-expired"), "old", expires_at="2020-01-01T00:00:00+00:00")
    resp = client.get(URL, params={"key": "sk-expired"})
    assert resp.status_code == 400


def test_malformed_start_date_is_bad_request(client, api_key, captured):
    resp = client.get(URL, params={"key": api_key["key"], "start_date": "2024/01/01", "end_date": "2024-01-31"})
    assert resp.status_code == 400
    assert "YYYY-MM-DD" in resp.json()["message"]
    assert captured == []


def test_today_passes_midnight_and_now_to_aggregator(client, api_key, captured):
    resp = client.get(URL, params={"key": api_key["key"], "period": "today", "timezone": "Asia/Shanghai"})
    assert resp.status_code == 200
    key_id, start, end = captured[0]
    assert key_id == api_key["key_id"]
    assert start == datetime(2024, 3, 15, tzinfo=SHANGHAI)
    assert end == FIXED_NOW


def test_bogus_period_matches_today(client, api_key, captured):
    client.get(URL, params={"key": api_key["key"], "timezone": "Asia/Shanghai"})
    client.get(URL, params={"key": api_key["key"], "timezone": "Asia/Shanghai", "period": "bogus"})
    assert len(captured) == 2
    assert captured[0] == captured[1]


def test_date_range_end_is_inclusive(client, api_key, captured):
    resp = client.get(URL, params={
        "key": api_key["key"],
        "timezone": "Asia/Shanghai",
        "start_date": "2024-01-01",
        "end_date": "2024-01-31",
    })
    assert resp.status_code == 200
    _, start, end = captured[0]
    assert start == datetime(2024, 1, 1, tzinfo=SHANGHAI)
    assert end == datetime(2024, 1, 31, 23, 59, 59, 999999, tzinfo=SHANGHAI)


def test_success_maps_fields_one_to_one(client, api_key, monkeypatch):
    stats = UsageStats(
        total_requests=7,
        total_input_tokens=1200,
        total_output_tokens=340,
        total_cache_creation_tokens=50,
        total_cache_read_tokens=900,
        total_tokens=2490,
        total_cost=0.125,
        total_actual_cost=0.1,
        average_duration_ms=812.5,
    )
    monkeypatch.setattr(public, "get_detailed_stats_by_api_key", lambda *a: stats)

    resp = client.get(URL, params={"key": api_key["key"]})

    assert resp.status_code == 200
    body = resp.json()
    assert body["code"] == 0
    assert body["message"] == "success"
    assert body["data"] == stats.model_dump()


def test_aggregator_failure_is_internal_error(client, api_key, monkeypatch):
    def boom(*args):
        raise RuntimeError("database is locked")

    monkeypatch.setattr(public, "get_detailed_stats_by_api_key", boom)
    resp = client.get(URL, params={"key": api_key["key"]})
    assert resp.status_code == 500
    assert resp.json() == {"code": 500, "message": "internal error"}


def test_aggregator_app_error_keeps_its_status(client, api_key, monkeypatch):
    def missing(*args):
        raise NotFoundError("usage data not found")

    monkeypatch.setattr(public, "get_detailed_stats_by_api_key", missing)
    resp = client.get(URL, params={"key": api_key["key"]})
    assert resp.status_code == 404
    assert resp.json()["message"] == "usage data not found"


def test_end_to_end_with_recorded_usage(client, api_key):
    from app.services.usage_service import record_usage

    record_usage(api_key["key_id"], input_tokens=100, output_tokens=20, total_cost=0.5, actual_cost=0.4, duration_ms=300)
    record_usage(api_key["key_id"], input_tokens=10, output_tokens=5, cache_read_tokens=5,
                 total_cost=0.1, actual_cost=0.1, duration_ms=100)

    resp = client.get(URL, params={"key": api_key["key"], "period": "week"})

    data = resp.json()["data"]
    assert data["total_requests"] == 2
    assert data["total_input_tokens"] == 110
    assert data["total_output_tokens"] == 25
    assert data["total_cache_read_tokens"] == 5
    assert data["total_tokens"] == 140
    assert data["total_cost"] == pytest.approx(0.6)
    assert data["total_actual_cost"] == pytest.approx(0.5)
    assert data["average_duration_ms"] == pytest.approx(200.0)


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
    assert resp.json()["database"] is True
    assert resp.json()["scheduler_running"] is False


def test_unknown_route_uses_error_envelope(client):
    resp = client.get("/api/v1/public/nothing")
    assert resp.status_code == 404
    assert resp.json() == {"code": 404, "message": "Not Found"}


def test_key_lookup_failure_is_internal_error(client, monkeypatch):
    def locked(key):
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr(public, "get_by_key", locked)
    resp = client.get(URL, params={"key": "sk-x"})
    assert resp.status_code == 500
    assert resp.headers["content-type"].startswith("application/json")
    assert resp.json() == {"code": 500, "message": "internal error"}


def test_unexpected_error_anywhere_uses_error_envelope(api_key, monkeypatch):
    def broken(tz):
        raise RuntimeError("clock unavailable")

    monkeypatch.setattr(public, "now_in_user_location", broken)
    client = TestClient(app, raise_server_exceptions=False)
    resp = client.get(URL, params={"key": api_key["key"]})
    assert resp.status_code == 500
    assert resp.json() == {"code": 500, "message": "internal error"}
