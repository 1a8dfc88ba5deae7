"""
Pytest configuration and shared fixtures.
"""

import itertools
import sys
from datetime import date
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from models.events import DateRange


SAMPLE_FEED = "\r\n".join(
    [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        "PRODID:-//Tokeet//Calendar//EN",
        "X-WR-CALNAME:Villa Les Oliviers",
        "BEGIN:VEVENT",
        "UID:tokeet-1001@calendars.tokeet.com",
        "DTSTAMP:20250601T120000Z",
        "DTSTART;VALUE=DATE:20250710",
        "DTEND;VALUE=DATE:20250714",
        "SUMMARY:Airbnb: Jane Doe",
        "END:VEVENT",
        "BEGIN:VEVENT",
        "UID:tokeet-1002@calendars.tokeet.com",
        "DTSTART;VALUE=DATE:20250714",
        "DTEND;VALUE=DATE:20250720",
        "SUMMARY:Booking.com: John Smith",
        "END:VEVENT",
        "BEGIN:VEVENT",
        "DTSTART;VALUE=DATE:20250801",
        "DTEND;VALUE=DATE:20250802",
        "END:VEVENT",
        "END:VCALENDAR",
    ]
)


@pytest.fixture
def sample_feed():
    """ICS feed with a turnover day (Jul 14) and an event without UID/SUMMARY."""
    return SAMPLE_FEED


@pytest.fixture
def id_factory():
    """Deterministic identifier generator: id-1, id-2, ..."""
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def sample_range():
    """Four-night stay, Jul 10 to Jul 13 inclusive (checkout Jul 14)."""
    return DateRange(
        id="stay-1",
        start=date(2025, 7, 10),
        end=date(2025, 7, 13),
        summary="Airbnb: Jane Doe",
    )


@pytest.fixture
def temp_db(tmp_path, monkeypatch):
    """Point every module that touches SQLite at an initialised temp database."""
    db_path = tmp_path / "db" / "availability.db"

    import api.logging
    import core.database
    from scripts.init_db import create_database

    monkeypatch.setattr(core.database, "DB_PATH", db_path)
    monkeypatch.setattr(api.logging, "DB_PATH", db_path)
    create_database(db_path)
    return db_path
