"""
Validation of reservation candidates coming from outside the ICS feed.

Producers such as the API export endpoint or an assistant that turns
free text into date ranges hand over plain dicts. Those must satisfy the
DateRange contract (ISO dates, start <= end) before reaching the codec.
"""

from collections.abc import Callable
from datetime import date

from core.config import DEFAULT_SUMMARY
from core.dates import parse_iso
from models.events import DateRange, new_range_id


def validate_range(candidate: dict) -> list[str]:
    """Return the problems found in one candidate (empty if valid)."""
    errors = []

    start = candidate.get("start")
    end = candidate.get("end")

    if not start:
        errors.append("Missing start date")
    if not end:
        errors.append("Missing end date")
    if errors:
        return errors

    try:
        start_date = parse_iso(str(start))
    except ValueError:
        errors.append(f"Invalid start date '{start}', expected YYYY-MM-DD")
        start_date = None
    try:
        end_date = parse_iso(str(end))
    except ValueError:
        errors.append(f"Invalid end date '{end}', expected YYYY-MM-DD")
        end_date = None

    if start_date and end_date and start_date > end_date:
        errors.append(f"Start date {start} is after end date {end}")
    if end_date == date.max:
        # DTEND would be the day after, which datetime cannot hold
        errors.append(f"End date {end} is past the last exportable night")

    return errors


def validate_ranges(
    candidates: list[dict], id_factory: Callable[[], str] | None = None
) -> tuple[list[DateRange], list[str]]:
    """
    Validate candidates and build DateRange records from the valid ones.

    Missing ids get a fresh identifier, missing or empty summaries the
    default label.

    Returns:
        Tuple of (valid ranges in input order, error messages prefixed by
        the candidate index)
    """
    make_id = id_factory or new_range_id
    ranges: list[DateRange] = []
    errors: list[str] = []

    for index, candidate in enumerate(candidates):
        problems = validate_range(candidate)
        if problems:
            errors.extend(f"Range {index}: {problem}" for problem in problems)
            continue

        ranges.append(
            DateRange(
                id=str(candidate.get("id") or make_id()),
                start=parse_iso(str(candidate["start"])),
                end=parse_iso(str(candidate["end"])),
                summary=str(candidate.get("summary") or DEFAULT_SUMMARY),
            )
        )

    return ranges, errors
