"""API Pydantic models."""

from .responses import (
    DayCellModel,
    ErrorCodes,
    ErrorResponse,
    ExportRequest,
    HealthResponse,
    MonthResponse,
    ParseResponse,
    RangeCandidate,
    RangeModel,
)

__all__ = [
    "HealthResponse",
    "ErrorResponse",
    "ErrorCodes",
    "RangeModel",
    "RangeCandidate",
    "ExportRequest",
    "ParseResponse",
    "DayCellModel",
    "MonthResponse",
]
