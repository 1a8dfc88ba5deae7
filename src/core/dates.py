"""
Calendar date arithmetic for the availability grid.

Months are addressed with a 0-based index (0 = January) throughout, weeks
start on Sunday.
"""

import calendar
import re
from datetime import date, timedelta

from models.events import GridCell

ISO_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def validate_period(year: int, month_index: int) -> None:
    """
    Check a (year, month_index) pair before building calendar data.

    Raises:
        ValueError: if the year is not an int in 1..9999 or month_index is
            outside 0..11
    """
    if isinstance(year, bool) or not isinstance(year, int):
        raise ValueError(f"Year must be an integer, got {year!r}")
    if not 1 <= year <= 9999:
        raise ValueError(f"Year out of range: {year}")
    if isinstance(month_index, bool) or not isinstance(month_index, int):
        raise ValueError(f"Month index must be an integer, got {month_index!r}")
    if not 0 <= month_index <= 11:
        raise ValueError(f"Month index must be between 0 and 11, got {month_index}")


def days_of_month(year: int, month_index: int) -> list[date]:
    """Every day of the month, ascending."""
    validate_period(year, month_index)
    month = month_index + 1
    num_days = calendar.monthrange(year, month)[1]
    return [date(year, month, day) for day in range(1, num_days + 1)]


def format_iso(d: date | str) -> str:
    """Format as zero-padded YYYY-MM-DD. ISO strings pass through unchanged."""
    if isinstance(d, str):
        return d
    return f"{d.year:04d}-{d.month:02d}-{d.day:02d}"


def parse_iso(value: str) -> date:
    """Parse a YYYY-MM-DD string (raises ValueError when malformed)."""
    if not ISO_DATE.fullmatch(value):
        raise ValueError(f"Expected YYYY-MM-DD, got {value!r}")
    return date.fromisoformat(value)


def is_within_range(day: date | str, start: date | str, end: date | str) -> bool:
    """True if start <= day <= end, comparing fixed-width ISO strings."""
    return format_iso(start) <= format_iso(day) <= format_iso(end)


def build_month_grid(year: int, month_index: int) -> list[GridCell]:
    """
    Build a Sunday-first grid for one month.

    Leading slots hold the tail of the previous month, trailing slots the
    head of the next one, so the grid length is always a multiple of 7.
    """
    days = days_of_month(year, month_index)
    first_day = days[0]

    # date.weekday() is Monday=0, shift so Sunday=0
    leading = (first_day.weekday() + 1) % 7
    total_slots = -(-(leading + len(days)) // 7) * 7

    grid: list[GridCell] = []

    try:
        # Previous month fill
        for offset in range(leading, 0, -1):
            grid.append({"date": first_day - timedelta(days=offset), "in_current_period": False})

        # Current month
        for day in days:
            grid.append({"date": day, "in_current_period": True})

        # Next month fill
        last_day = days[-1]
        for offset in range(1, total_slots - len(grid) + 1):
            grid.append({"date": last_day + timedelta(days=offset), "in_current_period": False})
    except OverflowError as e:
        # Only January of year 1 and December of year 9999 can get here
        raise ValueError(f"Grid for {year}-{month_index + 1:02d} exceeds the supported date range") from e

    return grid
