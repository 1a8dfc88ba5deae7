"""Tests for calendar date arithmetic."""

import calendar
from datetime import date

import pytest

from core.dates import (
    build_month_grid,
    days_of_month,
    format_iso,
    is_within_range,
    parse_iso,
    validate_period,
)


def test_days_of_month_covers_whole_month():
    days = days_of_month(2025, 6)  # July
    assert len(days) == 31
    assert days[0] == date(2025, 7, 1)
    assert days[-1] == date(2025, 7, 31)
    assert days == sorted(days)


def test_days_of_month_leap_february():
    assert len(days_of_month(2024, 1)) == 29
    assert len(days_of_month(2023, 1)) == 28
    assert len(days_of_month(1900, 1)) == 28
    assert len(days_of_month(2000, 1)) == 29


def test_format_iso_is_zero_padded():
    assert format_iso(date(2025, 3, 7)) == "2025-03-07"
    assert format_iso(date(987, 1, 2)) == "0987-01-02"
    assert format_iso("2025-03-07") == "2025-03-07"


def test_parse_iso_rejects_malformed_values():
    assert parse_iso("2025-07-10") == date(2025, 7, 10)
    for value in ["2025-7-10", "20250710", "2025-02-30", "", "2025-W01-1", "2025-07-10T00:00"]:
        with pytest.raises(ValueError):
            parse_iso(value)


def test_is_within_range_is_inclusive_on_both_ends():
    start, end = date(2025, 7, 10), date(2025, 7, 13)
    assert is_within_range(date(2025, 7, 10), start, end)
    assert is_within_range(date(2025, 7, 12), start, end)
    assert is_within_range(date(2025, 7, 13), start, end)
    assert not is_within_range(date(2025, 7, 9), start, end)
    assert not is_within_range(date(2025, 7, 14), start, end)


def test_is_within_range_accepts_iso_strings():
    assert is_within_range("2025-12-31", "2025-12-30", "2026-01-02")
    assert not is_within_range("2026-01-03", date(2025, 12, 30), "2026-01-02")


def test_is_within_range_with_inverted_range_is_always_false():
    assert not is_within_range(date(2025, 7, 11), date(2025, 7, 12), date(2025, 7, 10))


@pytest.mark.parametrize("year", [2023, 2024, 2025, 2026])
def test_build_month_grid_shape_for_every_month(year):
    for month_index in range(12):
        grid = build_month_grid(year, month_index)
        flags = [cell["in_current_period"] for cell in grid]

        assert len(grid) % 7 == 0
        assert len(grid) - 7 < flags.index(True) + flags.count(True) <= len(grid)

        # Current month forms one contiguous run
        first = flags.index(True)
        run = flags.count(True)
        assert all(flags[first:first + run])
        assert run == calendar.monthrange(year, month_index + 1)[1]

        # Grid starts on a Sunday and days are consecutive
        assert grid[0]["date"].weekday() == 6
        for previous, current in zip(grid, grid[1:]):
            assert (current["date"] - previous["date"]).days == 1


def test_build_month_grid_february_leap_year():
    grid = build_month_grid(2024, 1)
    current = [cell for cell in grid if cell["in_current_period"]]

    assert len(current) == 29
    # Feb 1, 2024 is a Thursday: Sun 28 Jan .. Wed 31 Jan lead in
    assert grid[0] == {"date": date(2024, 1, 28), "in_current_period": False}
    assert grid[4] == {"date": date(2024, 2, 1), "in_current_period": True}
    assert len(grid) == 35
    assert grid[-1] == {"date": date(2024, 3, 2), "in_current_period": False}


def test_build_month_grid_starting_on_sunday_has_no_lead_in():
    # June 1, 2025 is a Sunday
    grid = build_month_grid(2025, 5)
    assert grid[0] == {"date": date(2025, 6, 1), "in_current_period": True}
    assert len(grid) == 35


def test_build_month_grid_exact_four_weeks():
    # February 2015 starts on a Sunday and has 28 days
    grid = build_month_grid(2015, 1)
    assert len(grid) == 28
    assert all(cell["in_current_period"] for cell in grid)


def test_build_month_grid_six_weeks():
    # August 2025 starts on a Friday and has 31 days
    grid = build_month_grid(2025, 7)
    assert len(grid) == 42
    assert grid[0]["date"] == date(2025, 7, 27)


@pytest.mark.parametrize("month_index", [-1, 12, 13])
def test_invalid_month_index_is_rejected(month_index):
    with pytest.raises(ValueError):
        build_month_grid(2025, month_index)
    with pytest.raises(ValueError):
        days_of_month(2025, month_index)


@pytest.mark.parametrize("year", [0, 10000, "2025", 2025.0, True])
def test_invalid_year_is_rejected(year):
    with pytest.raises(ValueError):
        validate_period(year, 0)


def test_grid_outside_supported_dates_raises_value_error():
    with pytest.raises(ValueError):
        build_month_grid(1, 0)
