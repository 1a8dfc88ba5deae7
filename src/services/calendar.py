"""
Month and year views of the availability calendar.

The displayed period lives in a ViewState owned by the caller (script,
API route) and is passed into the builders below.
"""

from dataclasses import dataclass, replace
from datetime import date

from core.dates import build_month_grid, validate_period
from models.events import DateRange, DayCell, ViewMode
from services.occupancy import covering_ranges, resolve_status


@dataclass(frozen=True)
class ViewState:
    """Currently displayed period and granularity."""

    year: int
    month_index: int = 0
    mode: ViewMode = ViewMode.YEAR

    def __post_init__(self):
        validate_period(self.year, self.month_index)

    @classmethod
    def today(cls, mode: ViewMode = ViewMode.YEAR) -> "ViewState":
        """View state centered on the current date."""
        now = date.today()
        return cls(year=now.year, month_index=now.month - 1, mode=mode)

    def shift(self, step: int) -> "ViewState":
        """
        Move forward (step > 0) or backward (step < 0).

        YEAR mode moves by whole years, MONTH mode by months, rolling over
        year boundaries.
        """
        if self.mode == ViewMode.YEAR:
            return replace(self, year=self.year + step)

        absolute_month = self.year * 12 + self.month_index + step
        year, month_index = divmod(absolute_month, 12)
        return replace(self, year=year, month_index=month_index)


def build_month_cells(
    year: int, month_index: int, ranges: list[DateRange], today: date | None = None
) -> list[DayCell]:
    """
    Build the rendered cells of one month grid.

    Each cell carries the ranges covering it and the derived status.
    """
    today = today or date.today()
    cells: list[DayCell] = []

    for slot in build_month_grid(year, month_index):
        day = slot["date"]
        day_ranges = covering_ranges(day, ranges)
        cells.append(
            {
                "date": day,
                "in_current_period": slot["in_current_period"],
                "is_today": day == today,
                "covering_ranges": day_ranges,
                "status": resolve_status(day, day_ranges),
            }
        )

    return cells


def build_year_cells(
    year: int, ranges: list[DateRange], today: date | None = None
) -> list[list[DayCell]]:
    """Twelve month grids, January first."""
    today = today or date.today()
    return [build_month_cells(year, month_index, ranges, today) for month_index in range(12)]


def build_view(
    state: ViewState, ranges: list[DateRange], today: date | None = None
) -> list[list[DayCell]]:
    """Month grids for the state's mode (one grid in MONTH mode, twelve in YEAR mode)."""
    if state.mode == ViewMode.MONTH:
        return [build_month_cells(state.year, state.month_index, ranges, today)]
    return build_year_cells(state.year, ranges, today)
