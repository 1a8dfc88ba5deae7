"""Calendar endpoints: ICS import, ICS export and month availability."""

import time
from typing import Annotated

from fastapi import (
    APIRouter,
    Depends,
    File,
    HTTPException,
    Request,
    UploadFile,
    status,
)
from fastapi.responses import Response

from api.dependencies import get_feed_ranges, verify_api_key
from api.logging import RequestLog, log_request
from api.models.responses import (
    DayCellModel,
    ErrorCodes,
    ExportRequest,
    MonthResponse,
    ParseResponse,
    RangeModel,
)
from core.config import EXPORT_FILENAME, MAX_UPLOAD_SIZE_BYTES, MONTH_NAMES
from core.dates import validate_period
from core.validation import validate_ranges
from services.calendar import build_month_cells
from services.ical import generate_ics, parse_ics

router = APIRouter(prefix="/v1/calendar")


def get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxies."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _elapsed_ms(start_time: float) -> int:
    return int((time.time() - start_time) * 1000)


def _record_http_error(request_log: RequestLog, e: HTTPException) -> None:
    """Copy an HTTPException's status and detail body into the request log."""
    request_log.status_code = e.status_code
    if isinstance(e.detail, dict):
        request_log.error_code = e.detail.get("code")
        request_log.error_message = e.detail.get("error")
        detail_type = "validation_error" if e.status_code == 422 else "warning"
        for detail in e.detail.get("details", []):
            request_log.details.append((detail_type, detail))
    else:
        request_log.error_message = str(e.detail)


def _invalid_period(e: ValueError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={
            "error": "Invalid calendar period",
            "code": ErrorCodes.INVALID_REQUEST,
            "details": [str(e)],
        },
    )


def _internal_error(request_log: RequestLog, e: Exception) -> HTTPException:
    request_log.status_code = 500
    request_log.error_code = ErrorCodes.INTERNAL_ERROR
    request_log.error_message = str(e)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "error": "Internal server error",
            "code": ErrorCodes.INTERNAL_ERROR,
            "details": [],
        },
    )


def _write_log(request_log: RequestLog, start_time: float) -> None:
    request_log.processing_time_ms = _elapsed_ms(start_time)
    try:
        log_request(request_log)
    except Exception as e:
        # Don't fail the request if logging fails
        print(f"Request log not written: {e}")


@router.post("/parse", response_model=ParseResponse)
async def parse_calendar_endpoint(
    request: Request,
    file: Annotated[UploadFile, File(description="iCalendar (.ics) file")],
    _api_key: str = Depends(verify_api_key),
):
    """
    Parse an uploaded ICS file into reservation ranges.

    Malformed events are skipped, never reported as errors.
    """
    start_time = time.time()

    request_log = RequestLog(
        endpoint="/v1/calendar/parse",
        method="POST",
        client_ip=get_client_ip(request),
        file_name=file.filename,
    )

    try:
        if not file.filename:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={
                    "error": "No file provided",
                    "code": ErrorCodes.INVALID_REQUEST,
                    "details": [],
                },
            )

        if not file.filename.lower().endswith(".ics"):
            raise HTTPException(
                status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
                detail={
                    "error": "File is not an iCalendar document",
                    "code": ErrorCodes.UNSUPPORTED_MEDIA_TYPE,
                    "details": [f"Received: {file.filename}"],
                },
            )

        file_content = await file.read()
        request_log.file_size_bytes = len(file_content)

        if len(file_content) > MAX_UPLOAD_SIZE_BYTES:
            max_mb = MAX_UPLOAD_SIZE_BYTES // (1024 * 1024)
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail={
                    "error": f"File exceeds maximum size of {max_mb} MB",
                    "code": ErrorCodes.FILE_TOO_LARGE,
                    "details": [f"File size: {len(file_content) / (1024*1024):.1f} MB"],
                },
            )

        ranges = parse_ics(file_content.decode("utf-8", errors="ignore"))

        request_log.status_code = 200
        request_log.ranges_count = len(ranges)

        return ParseResponse(
            count=len(ranges),
            ranges=[RangeModel.from_range(r) for r in ranges],
        )

    except HTTPException as e:
        _record_http_error(request_log, e)
        raise

    except Exception as e:
        raise _internal_error(request_log, e) from e

    finally:
        _write_log(request_log, start_time)


@router.post("/export")
async def export_calendar_endpoint(
    request: Request,
    body: ExportRequest,
    _api_key: str = Depends(verify_api_key),
):
    """
    Export reservation ranges as an ICS backup file.

    Ranges use inclusive end dates; DTEND is written as the checkout day.
    """
    start_time = time.time()

    request_log = RequestLog(
        endpoint="/v1/calendar/export",
        method="POST",
        client_ip=get_client_ip(request),
    )

    try:
        ranges, errors = validate_ranges([c.model_dump() for c in body.ranges])
        if errors:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail={
                    "error": "Range validation failed",
                    "code": ErrorCodes.VALIDATION_ERROR,
                    "details": errors,
                },
            )

        ics_content = generate_ics(ranges)

        request_log.status_code = 200
        request_log.ranges_count = len(ranges)

        return Response(
            content=ics_content,
            media_type="text/calendar; charset=utf-8",
            headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
        )

    except HTTPException as e:
        _record_http_error(request_log, e)
        raise

    except Exception as e:
        raise _internal_error(request_log, e) from e

    finally:
        _write_log(request_log, start_time)


@router.get("/{year}/{month}", response_model=MonthResponse)
async def month_availability_endpoint(
    request: Request,
    year: int,
    month: int,
    _api_key: str = Depends(verify_api_key),
):
    """
    Availability grid for one month (month is 1-12).

    Cells run Sunday to Saturday and include the neighbouring months'
    days needed to fill the first and last weeks. The period is checked
    before the feed is loaded.
    """
    start_time = time.time()

    request_log = RequestLog(
        endpoint=f"/v1/calendar/{year}/{month}",
        method="GET",
        client_ip=get_client_ip(request),
    )

    try:
        month_index = month - 1
        try:
            validate_period(year, month_index)
        except ValueError as e:
            raise _invalid_period(e) from e

        feed = await get_feed_ranges()
        request_log.from_cache = feed.from_cache

        try:
            cells = build_month_cells(year, month_index, feed.ranges)
        except ValueError as e:
            raise _invalid_period(e) from e

        request_log.status_code = 200
        request_log.ranges_count = len(feed.ranges)

        return MonthResponse(
            year=year,
            month=month,
            month_name=MONTH_NAMES[month_index],
            from_cache=feed.from_cache,
            cached_at=feed.cached_at,
            cells=[DayCellModel.from_cell(cell) for cell in cells],
        )

    except HTTPException as e:
        _record_http_error(request_log, e)
        raise

    except Exception as e:
        raise _internal_error(request_log, e) from e

    finally:
        _write_log(request_log, start_time)
