"""
ICS (iCalendar) import and export for reservation ranges.

Only VEVENT blocks and four properties are read: DTSTART, DTEND, SUMMARY
and UID. Feeds such as Tokeet or Airbnb use exclusive end dates for all-day
events (start 11th, end 14th -> nights of the 11th, 12th and 13th; the 14th
is the checkout day). Ranges are stored with an inclusive end, so parsing
subtracts one day from DTEND and exporting adds it back.
"""

import re
from collections.abc import Callable, Iterable
from datetime import date, datetime, timedelta, timezone
from pathlib import Path

from core.config import DEFAULT_SUMMARY, ICS_PRODID, ICS_VERSION
from models.events import DateRange, new_range_id

IdFactory = Callable[[], str]

LINE_BREAK = re.compile(r"\r\n|\n|\r")


def decode_date(value: str) -> date | None:
    """
    Decode an ICS date value.

    Accepts YYYYMMDD and date-time forms (YYYYMMDDTHHMMSS, with or without
    a trailing Z), keeping only the date. Returns None for anything else.
    """
    v = value.strip()
    if len(v) == 8 and v.isdigit():
        digits = v
    elif len(v) > 8 and "T" in v and v[:8].isdigit():
        digits = v[:8]
    else:
        return None

    try:
        return date(int(digits[:4]), int(digits[4:6]), int(digits[6:8]))
    except ValueError:
        return None


def encode_date(d: date) -> str:
    """Compact YYYYMMDD form, zero-padded for years before 1000."""
    return f"{d.year:04d}{d.month:02d}{d.day:02d}"


def parse_ics(ics_content: str, id_factory: IdFactory | None = None) -> list[DateRange]:
    """
    Parse ICS text into reservation ranges, in document order.

    Never raises: blocks without a usable DTSTART/DTEND are dropped.

    Args:
        ics_content: Raw calendar text
        id_factory: Produces ids for events without a UID (defaults to uuid4)
    """
    make_id = id_factory or new_range_id
    ranges: list[DateRange] = []

    in_event = False
    current: dict = {}

    # Split broadly to handle \r\n, \n and bare \r line endings
    for line in LINE_BREAK.split(ics_content):
        clean_line = line.strip()

        if clean_line.startswith("BEGIN:VEVENT"):
            in_event = True
            current = {"id": make_id(), "summary": DEFAULT_SUMMARY}
        elif clean_line.startswith("END:VEVENT"):
            if in_event and current.get("start") and current.get("end"):
                start = current["start"]
                end = current["end"]
                # Exclusive checkout day -> last occupied night
                if end > start:
                    end = end - timedelta(days=1)
                ranges.append(
                    DateRange(id=current["id"], start=start, end=end, summary=current["summary"])
                )
            in_event = False
            current = {}
        elif in_event:
            # Properties may carry parameters, e.g. DTSTART;VALUE=DATE:20270101
            name, sep, value = clean_line.partition(":")
            if not sep:
                continue
            if name.startswith("DTSTART"):
                current["start"] = decode_date(value.split(":")[0])
            elif name.startswith("DTEND"):
                current["end"] = decode_date(value.split(":")[0])
            elif name.startswith("SUMMARY"):
                current["summary"] = value
            elif name.startswith("UID"):
                current["id"] = value

    return ranges


def generate_ics(ranges: Iterable[DateRange], now: datetime | None = None) -> str:
    """
    Serialize ranges to ICS text, one VEVENT per range in input order.

    Args:
        ranges: Ranges with inclusive end dates
        now: DTSTAMP instant (defaults to the current UTC time)

    Raises:
        ValueError: if a range ends on date.max, whose checkout day has no
            representation
    """
    stamp_time = now or datetime.now(timezone.utc)
    if stamp_time.tzinfo is not None:
        stamp_time = stamp_time.astimezone(timezone.utc)
    dtstamp = f"{encode_date(stamp_time.date())}T{stamp_time:%H%M%S}Z"

    lines = [
        "BEGIN:VCALENDAR",
        f"VERSION:{ICS_VERSION}",
        f"PRODID:{ICS_PRODID}",
    ]

    for date_range in ranges:
        if date_range.end == date.max:
            raise ValueError(f"Range {date_range.id!r} ends on {date.max}, no checkout day to encode")
        checkout = date_range.end + timedelta(days=1)
        lines.extend(
            [
                "BEGIN:VEVENT",
                f"UID:{date_range.id}",
                f"DTSTAMP:{dtstamp}",
                f"DTSTART;VALUE=DATE:{encode_date(date_range.start)}",
                f"DTEND;VALUE=DATE:{encode_date(checkout)}",
                f"SUMMARY:{date_range.summary or DEFAULT_SUMMARY}",
                "END:VEVENT",
            ]
        )

    lines.append("END:VCALENDAR")
    return "\n".join(lines)


def write_ics(path: Path, content: str) -> Path:
    """Write exported ICS text to disk, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path
