#!/usr/bin/env python3
"""
Print the availability calendar to the terminal.

Loads the configured iCal feed (or a local .ics file) and prints either a
single month or the whole year as Sunday-first grids.

Usage:
    uv run python src/scripts/show_availability.py --year 2026
    uv run python src/scripts/show_availability.py --year 2026 --month 7
    uv run python src/scripts/show_availability.py --file calendar_backup.ics
"""

import argparse
import sys
from datetime import date
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import MONTH_NAMES, WEEKDAY_NAMES
from models.events import DateRange, DayCell, Status, ViewMode
from services.calendar import ViewState, build_view
from services.feed import FeedError, load_ranges
from services.ical import parse_ics

STATUS_GLYPHS = {
    Status.FREE: ".",
    Status.ARRIVAL: "/",  # morning free, evening reserved
    Status.DEPARTURE: "\\",  # morning reserved, evening free
    Status.FULL: "#",
}

LEGEND = "Legend:  . free   / arrival   \\ departure   # reserved"


def render_month(cells: list[DayCell], year: int, month_index: int) -> str:
    """Render one month grid as text, marking today with brackets."""
    lines = [f"{MONTH_NAMES[month_index]} {year}".center(7 * 5)]
    lines.append("".join(f"{name:>4} " for name in WEEKDAY_NAMES))

    for week_start in range(0, len(cells), 7):
        row = []
        for cell in cells[week_start:week_start + 7]:
            if not cell["in_current_period"]:
                row.append("     ")
                continue
            glyph = STATUS_GLYPHS[cell["status"]]
            day = f"{cell['date'].day:>2}{glyph}"
            row.append(f"[{day}]" if cell["is_today"] else f" {day} ")
        lines.append("".join(row).rstrip())

    return "\n".join(lines)


def load_from_file(path: Path) -> list[DateRange]:
    """Parse a local ICS file."""
    return parse_ics(path.read_text(encoding="utf-8", errors="ignore"))


def main(year: int | None, month: int | None, ics_file: str | None) -> int:
    """Main entry point."""
    today = date.today()
    mode = ViewMode.YEAR if month is None else ViewMode.MONTH
    try:
        state = ViewState(
            year=today.year if year is None else year,
            month_index=(today.month if month is None else month) - 1,
            mode=mode,
        )
    except ValueError as e:
        print(f"Error: {e}")
        return 2

    if ics_file:
        try:
            ranges = load_from_file(Path(ics_file))
        except OSError as e:
            print(f"Error: cannot read {ics_file}: {e}")
            return 1
        print(f"Loaded {len(ranges)} range(s) from {ics_file}\n")
    else:
        try:
            result = load_ranges()
        except FeedError as e:
            print(f"Error: {e}")
            return 1
        ranges = result.ranges
        if result.from_cache:
            print(f"Feed unreachable, showing cached data from {result.cached_at}")
        print(f"Loaded {len(ranges)} range(s) from {result.source_url}\n")

    grids = build_view(state, ranges, today)
    month_indexes = [state.month_index] if state.mode == ViewMode.MONTH else range(12)

    for month_index, cells in zip(month_indexes, grids):
        print(render_month(cells, state.year, month_index))
        print()

    print(LEGEND)
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Show property availability")
    parser.add_argument("--year", type=int, help="Year to display. Defaults to the current year.")
    parser.add_argument(
        "--month",
        type=int,
        help="Month to display (1-12). Shows the whole year when omitted.",
    )
    parser.add_argument("--file", help="Read a local .ics file instead of the configured feed")
    args = parser.parse_args()

    sys.exit(main(args.year, args.month, args.file))
