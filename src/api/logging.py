"""SQLite request logging for API."""

import logging
import sqlite3
import time
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from fastapi import HTTPException, Request, status

from api.models.responses import ErrorCodes
from core.errors import SchedulingError

logger = logging.getLogger(__name__)

# HTTP status for each domain error code
ERROR_STATUS = {
    ErrorCodes.MALFORMED_SCHEDULE: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ErrorCodes.UNKNOWN_SLOT: status.HTTP_404_NOT_FOUND,
    ErrorCodes.PROJECT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCodes.PROJECT_CANCELLED: status.HTTP_409_CONFLICT,
    ErrorCodes.PROJECT_COMPLETED: status.HTTP_409_CONFLICT,
    ErrorCodes.SIGNUPS_PAUSED: status.HTTP_409_CONFLICT,
    ErrorCodes.SLOT_ENDED: status.HTTP_409_CONFLICT,
    ErrorCodes.CAPACITY_EXCEEDED: status.HTTP_409_CONFLICT,
    ErrorCodes.DUPLICATE_SIGNUP: status.HTTP_409_CONFLICT,
    ErrorCodes.SIGNUP_REJECTED: status.HTTP_409_CONFLICT,
    ErrorCodes.PROJECT_DELETION_LOCKED: status.HTTP_409_CONFLICT,
}


@dataclass
class RequestLog:
    """Captured request/response data for logging."""

    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    endpoint: str = ""
    method: str = ""
    client_ip: str | None = None
    project_id: str | None = None
    schedule_id: str | None = None
    status_code: int = 0
    error_code: str | None = None
    error_message: str | None = None
    processing_time_ms: int = 0
    details: list[tuple[str, str]] = field(default_factory=list)  # (type, message)


def get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxies."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def to_http_exception(exc: SchedulingError) -> HTTPException:
    """Map a domain error to its HTTP response."""
    return HTTPException(
        status_code=ERROR_STATUS.get(exc.code, status.HTTP_400_BAD_REQUEST),
        detail={
            "error": exc.message,
            "code": exc.code,
            "details": list(exc.details),
        },
    )


def log_request(log: RequestLog, db_path: Path) -> None:
    """Write request log to SQLite database."""
    conn = sqlite3.connect(db_path)
    try:
        cursor = conn.cursor()

        # Insert main request record
        cursor.execute(
            """
            INSERT INTO api_requests (
                request_id, timestamp, endpoint, method, client_ip,
                project_id, schedule_id, status_code, error_code,
                error_message, processing_time_ms
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
            (
                log.request_id,
                log.timestamp,
                log.endpoint,
                log.method,
                log.client_ip,
                log.project_id,
                log.schedule_id,
                log.status_code,
                log.error_code,
                log.error_message,
                log.processing_time_ms,
            ),
        )

        # Insert detail records
        for detail_type, message in log.details:
            cursor.execute(
                """
                INSERT INTO api_request_details (request_id, detail_type, message)
                VALUES (?, ?, ?)
            """,
                (log.request_id, detail_type, message),
            )

        conn.commit()
    finally:
        conn.close()


@contextmanager
def logged_request(request_log: RequestLog, db_path: Path):
    """
    Time a request, translate errors to HTTP responses and log the outcome.

    Domain errors become their mapped HTTP error, ValueError becomes 422,
    anything else becomes 500. The log row is always written; a logging
    failure never fails the request.
    """
    start_time = time.time()
    try:
        yield request_log
        request_log.status_code = request_log.status_code or 200

    except HTTPException as e:
        request_log.status_code = e.status_code
        if isinstance(e.detail, dict):
            request_log.error_code = e.detail.get("code")
            request_log.error_message = e.detail.get("error")
            for detail in e.detail.get("details", []):
                request_log.details.append(("validation_error", detail))
        else:
            request_log.error_message = str(e.detail)
        raise

    except SchedulingError as e:
        # Expected outcome (full slot, cancelled project...), not a failure
        http_exc = to_http_exception(e)
        request_log.status_code = http_exc.status_code
        request_log.error_code = e.code
        request_log.error_message = e.message
        for detail in e.details:
            request_log.details.append(("admission", detail))
        logger.info(f"{request_log.method} {request_log.endpoint}: {e.code} {e.message}")
        raise http_exc

    except ValueError as e:
        error_msg = str(e)
        request_log.status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
        request_log.error_code = ErrorCodes.VALIDATION_ERROR
        request_log.error_message = error_msg
        request_log.details.append(("validation_error", error_msg))
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error": "Request validation failed",
                "code": ErrorCodes.VALIDATION_ERROR,
                "details": [error_msg],
            },
        )

    except Exception as e:
        logger.exception(f"Unexpected error in {request_log.method} {request_log.endpoint}")
        request_log.status_code = 500
        request_log.error_code = ErrorCodes.INTERNAL_ERROR
        request_log.error_message = str(e)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "Internal server error",
                "code": ErrorCodes.INTERNAL_ERROR,
                "details": [],
            },
        )

    finally:
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)
        # Always log the request
        try:
            log_request(request_log, db_path)
        except sqlite3.Error as e:
            logger.warning(f"Failed to write request log {request_log.request_id}: {e}")
