"""Pydantic request/response models for API endpoints."""

from pydantic import BaseModel

from models.events import DateRange, DayCell


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    feed_configured: bool
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class RangeModel(BaseModel):
    """Reservation range with ISO dates; `end` is the last occupied night."""

    id: str
    start: str
    end: str
    summary: str

    @classmethod
    def from_range(cls, date_range: DateRange) -> "RangeModel":
        return cls(**date_range.to_dict())


class RangeCandidate(BaseModel):
    """Range submitted for export. Checked by core.validation, not here."""

    id: str | None = None
    start: str | None = None
    end: str | None = None
    summary: str | None = None


class ExportRequest(BaseModel):
    ranges: list[RangeCandidate]


class ParseResponse(BaseModel):
    count: int
    ranges: list[RangeModel]


class DayCellModel(BaseModel):
    date: str
    in_current_period: bool
    is_today: bool
    status: str  # "free", "start", "end" or "full"
    range_ids: list[str]

    @classmethod
    def from_cell(cls, cell: DayCell) -> "DayCellModel":
        return cls(
            date=cell["date"].isoformat(),
            in_current_period=cell["in_current_period"],
            is_today=cell["is_today"],
            status=cell["status"].value,
            range_ids=[r.id for r in cell["covering_ranges"]],
        )


class MonthResponse(BaseModel):
    year: int
    month: int  # 1-12
    month_name: str
    from_cache: bool
    cached_at: str | None = None
    cells: list[DayCellModel]


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    UNSUPPORTED_MEDIA_TYPE = "UNSUPPORTED_MEDIA_TYPE"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    FEED_UNAVAILABLE = "FEED_UNAVAILABLE"
    INTERNAL_ERROR = "INTERNAL_ERROR"
