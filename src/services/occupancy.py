"""
Per-day occupancy status from reservation ranges.
"""

from collections.abc import Iterable, Sequence
from datetime import date

from core.dates import format_iso, is_within_range
from models.events import DateRange, Status


def covering_ranges(day: date, ranges: Iterable[DateRange]) -> list[DateRange]:
    """Ranges whose inclusive [start, end] contains the day, in input order."""
    day_str = format_iso(day)
    return [r for r in ranges if is_within_range(day_str, r.start, r.end)]


def resolve_status(day: date, day_ranges: Sequence[DateRange]) -> Status:
    """
    Classify a day from the ranges covering it.

    Rules (first match wins):
    1. No range -> FREE
    2. Several ranges -> FULL (overlap is shown like a full day)
    3. One range: single-night stay -> FULL, first night -> ARRIVAL,
       last night -> DEPARTURE, anything in between -> FULL
    """
    if len(day_ranges) == 0:
        return Status.FREE
    if len(day_ranges) > 1:
        return Status.FULL

    date_range = day_ranges[0]
    is_start = date_range.start == day
    is_end = date_range.end == day

    if is_start and is_end:
        return Status.FULL
    if is_start:
        return Status.ARRIVAL
    if is_end:
        return Status.DEPARTURE
    return Status.FULL


def status_for_day(day: date, ranges: Iterable[DateRange]) -> Status:
    """Filter the full range set for the day, then classify it."""
    return resolve_status(day, covering_ranges(day, ranges))
