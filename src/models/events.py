"""
Data models for reservation ranges and calendar cells.

DateRange is a frozen dataclass since the codec and resolver only read
records and produce new collections. Grid cells stay TypedDicts, they are
rebuilt on every render.
"""

import uuid
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import TypedDict


def new_range_id() -> str:
    """Fresh identifier for ranges whose source has none."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class DateRange:
    """One reservation. `end` is the last occupied night (inclusive)."""

    id: str
    start: date
    end: date
    summary: str

    def to_dict(self) -> dict:
        """Serialize with ISO date strings (API and cache format)."""
        return {
            "id": self.id,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "summary": self.summary,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "DateRange":
        return cls(
            id=data["id"],
            start=date.fromisoformat(data["start"]),
            end=date.fromisoformat(data["end"]),
            summary=data["summary"],
        )


class Status(str, Enum):
    """Display status of a single day."""

    FREE = "free"
    ARRIVAL = "start"  # morning free, evening reserved
    DEPARTURE = "end"  # morning reserved, evening free
    FULL = "full"


class ViewMode(str, Enum):
    MONTH = "MONTH"
    YEAR = "YEAR"


class GridCell(TypedDict):
    """Month grid slot."""
    date: date
    in_current_period: bool


class DayCell(TypedDict):
    """Rendered day with its covering reservations."""
    date: date
    in_current_period: bool
    is_today: bool
    covering_ranges: list[DateRange]
    status: Status
