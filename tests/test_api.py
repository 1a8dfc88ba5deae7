"""Tests for the REST API."""

import sqlite3
from datetime import date

import pytest
from fastapi.testclient import TestClient

import api.dependencies
from api.main import app
from core import config
from models.events import DateRange
from services.feed import FeedError, FeedResult

API_KEY = "test-key"
HEADERS = {"X-API-Key": API_KEY}


@pytest.fixture
def client(monkeypatch, temp_db):
    monkeypatch.setattr(config, "AVAILABILITY_API_KEY", API_KEY)
    return TestClient(app)


@pytest.fixture
def feed_ranges():
    return [
        DateRange(id="a", start=date(2025, 7, 10), end=date(2025, 7, 13), summary="A"),
        DateRange(id="b", start=date(2025, 7, 13), end=date(2025, 7, 15), summary="B"),
    ]


def logged_requests(db_path):
    conn = sqlite3.connect(db_path)
    try:
        return conn.execute(
            "SELECT endpoint, status_code, error_code, ranges_count FROM api_requests ORDER BY id"
        ).fetchall()
    finally:
        conn.close()


# =============================================================================
# HEALTH
# =============================================================================


def test_health_ok(client, monkeypatch):
    monkeypatch.setattr(config, "ICAL_URL", "https://calendars.example.com/42.ics")

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["feed_configured"] is True


def test_health_without_feed(client, monkeypatch):
    monkeypatch.setattr(config, "ICAL_URL", "")

    response = client.get("/health")

    assert response.status_code == 503
    assert response.json()["error"] == "Calendar feed URL not configured"


# =============================================================================
# AUTH
# =============================================================================


def test_wrong_api_key_is_rejected(client):
    response = client.post(
        "/v1/calendar/export", json={"ranges": []}, headers={"X-API-Key": "nope"}
    )

    assert response.status_code == 401
    assert response.json()["detail"]["code"] == "UNAUTHORIZED"


def test_unconfigured_api_key_is_server_error(client, monkeypatch):
    monkeypatch.setattr(config, "AVAILABILITY_API_KEY", "")

    response = client.post("/v1/calendar/export", json={"ranges": []}, headers=HEADERS)

    assert response.status_code == 500


# =============================================================================
# PARSE
# =============================================================================


def test_parse_upload(client, sample_feed, temp_db):
    response = client.post(
        "/v1/calendar/parse",
        files={"file": ("calendar.ics", sample_feed.encode("utf-8"), "text/calendar")},
        headers=HEADERS,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["count"] == 3
    assert body["ranges"][0] == {
        "id": "tokeet-1001@calendars.tokeet.com",
        "start": "2025-07-10",
        "end": "2025-07-13",
        "summary": "Airbnb: Jane Doe",
    }
    assert logged_requests(temp_db) == [("/v1/calendar/parse", 200, None, 3)]


def test_parse_rejects_other_file_types(client, temp_db):
    response = client.post(
        "/v1/calendar/parse",
        files={"file": ("calendar.csv", b"start,end", "text/csv")},
        headers=HEADERS,
    )

    assert response.status_code == 415
    assert response.json()["detail"]["code"] == "UNSUPPORTED_MEDIA_TYPE"
    assert logged_requests(temp_db) == [("/v1/calendar/parse", 415, "UNSUPPORTED_MEDIA_TYPE", None)]


def test_parse_rejects_large_files(client, monkeypatch):
    import api.routes.calendar

    monkeypatch.setattr(api.routes.calendar, "MAX_UPLOAD_SIZE_BYTES", 10)

    response = client.post(
        "/v1/calendar/parse",
        files={"file": ("calendar.ics", b"BEGIN:VCALENDAR\nEND:VCALENDAR", "text/calendar")},
        headers=HEADERS,
    )

    assert response.status_code == 413


# =============================================================================
# EXPORT
# =============================================================================


def test_export_returns_ics_attachment(client):
    response = client.post(
        "/v1/calendar/export",
        json={"ranges": [{"id": "x1", "start": "2025-07-10", "end": "2025-07-13", "summary": "Family"}]},
        headers=HEADERS,
    )

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/calendar")
    assert 'filename="calendar_backup.ics"' in response.headers["content-disposition"]

    lines = response.text.split("\n")
    assert "UID:x1" in lines
    assert "DTSTART;VALUE=DATE:20250710" in lines
    assert "DTEND;VALUE=DATE:20250714" in lines
    assert "SUMMARY:Family" in lines


def test_export_validation_errors(client, temp_db):
    response = client.post(
        "/v1/calendar/export",
        json={"ranges": [{"start": "2025-07-13", "end": "2025-07-10"}, {"start": "2025-07-01"}]},
        headers=HEADERS,
    )

    assert response.status_code == 422
    detail = response.json()["detail"]
    assert detail["code"] == "VALIDATION_ERROR"
    assert detail["details"] == [
        "Range 0: Start date 2025-07-13 is after end date 2025-07-10",
        "Range 1: Missing end date",
    ]
    assert logged_requests(temp_db) == [("/v1/calendar/export", 422, "VALIDATION_ERROR", None)]


# =============================================================================
# MONTH
# =============================================================================



@pytest.fixture
def serve_feed(monkeypatch):
    def install(ranges, from_cache=False):
        result = FeedResult(
            source_url="https://calendars.example.com/42.ics",
            ranges=ranges,
            from_cache=from_cache,
            cached_at="2025-07-01T08:00:00+00:00" if from_cache else None,
        )
        monkeypatch.setattr(api.dependencies, "load_ranges", lambda: result)

    return install


@pytest.fixture
def feed_down(monkeypatch):
    calls = []

    def unavailable():
        calls.append(1)
        raise FeedError("Unable to load calendar feed: direct: timeout")

    monkeypatch.setattr(api.dependencies, "load_ranges", unavailable)
    return calls


def test_month_grid(client, serve_feed, feed_ranges, temp_db):
    serve_feed(feed_ranges)

    response = client.get("/v1/calendar/2025/7", headers=HEADERS)

    assert response.status_code == 200
    body = response.json()
    assert body["month_name"] == "Juillet"
    assert body["from_cache"] is False
    assert len(body["cells"]) == 35

    by_date = {cell["date"]: cell for cell in body["cells"]}
    assert by_date["2025-07-09"]["status"] == "free"
    assert by_date["2025-07-10"]["status"] == "start"
    assert by_date["2025-07-11"]["status"] == "full"
    assert by_date["2025-07-13"]["status"] == "full"
    assert by_date["2025-07-13"]["range_ids"] == ["a", "b"]
    assert by_date["2025-07-15"]["status"] == "end"
    assert by_date["2025-06-29"]["in_current_period"] is False
    assert logged_requests(temp_db) == [("/v1/calendar/2025/7", 200, None, 2)]


def test_month_grid_from_cache(client, serve_feed, feed_ranges):
    serve_feed(feed_ranges, from_cache=True)

    response = client.get("/v1/calendar/2025/7", headers=HEADERS)

    assert response.status_code == 200
    assert response.json()["from_cache"] is True
    assert response.json()["cached_at"] == "2025-07-01T08:00:00+00:00"


def test_month_grid_invalid_month(client, serve_feed, feed_ranges):
    serve_feed(feed_ranges)

    response = client.get("/v1/calendar/2025/13", headers=HEADERS)

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "INVALID_REQUEST"


def test_month_grid_invalid_month_checked_before_feed(client, feed_down, temp_db):
    response = client.get("/v1/calendar/2025/13", headers=HEADERS)

    assert response.status_code == 400
    assert response.json()["detail"]["code"] == "INVALID_REQUEST"
    assert feed_down == []
    assert logged_requests(temp_db) == [("/v1/calendar/2025/13", 400, "INVALID_REQUEST", None)]


def test_month_grid_feed_unavailable_is_logged(client, feed_down, temp_db):
    response = client.get("/v1/calendar/2025/7", headers=HEADERS)

    assert response.status_code == 502
    assert response.json()["detail"]["code"] == "FEED_UNAVAILABLE"
    assert feed_down == [1]
    assert logged_requests(temp_db) == [("/v1/calendar/2025/7", 502, "FEED_UNAVAILABLE", None)]


def test_export_rejects_last_calendar_date(client, temp_db):
    response = client.post(
        "/v1/calendar/export",
        json={"ranges": [{"start": "9999-12-30", "end": "9999-12-31"}]},
        headers=HEADERS,
    )

    assert response.status_code == 422
    assert response.json()["detail"]["details"] == [
        "Range 0: End date 9999-12-31 is past the last exportable night"
    ]
