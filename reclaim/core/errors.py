"""
Custom exception hierarchy for Reclaim.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing English messages.
"""
from __future__ import annotations

import logging
from datetime import date
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

from reclaim.schemas.common import ErrorDetail

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class ReclaimException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class HabitNotFoundError(ReclaimException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "HABIT_NOT_FOUND"

    def __init__(self, habit_id: str):
        super().__init__(
            message=f"Habit {habit_id} not found.",
            details={"habit_id": habit_id},
        )


class HabitOwnershipError(ReclaimException):
    http_status = status.HTTP_403_FORBIDDEN
    code = "HABIT_FORBIDDEN"

    def __init__(self, habit_id: str):
        super().__init__(
            message=f"Habit {habit_id} belongs to another user.",
            details={"habit_id": habit_id},
        )


class DuplicateCompletionError(ReclaimException):
    http_status = status.HTTP_409_CONFLICT
    code = "DUPLICATE_COMPLETION"

    def __init__(self, habit_id: str, day: date):
        super().__init__(
            message="Habit already completed on this date.",
            details={"habit_id": habit_id, "date": str(day)},
        )


class CompletionNotFoundError(ReclaimException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "COMPLETION_NOT_FOUND"

    def __init__(self, habit_id: str, day: date):
        super().__init__(
            message=f"No completion for habit {habit_id} on {day}.",
            details={"habit_id": habit_id, "date": str(day)},
        )


class InvalidDateRangeError(ReclaimException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "INVALID_DATE_RANGE"

    def __init__(self, start: date, end: date, max_days: int):
        super().__init__(
            message=f"Date range exceeds the maximum of {max_days} days.",
            details={"start_date": str(start), "end_date": str(end), "max_days": max_days},
        )


class MissingUserError(ReclaimException):
    http_status = status.HTTP_401_UNAUTHORIZED
    code = "USER_REQUIRED"

    def __init__(self):
        super().__init__(message="X-User-Id header is required.")


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def reclaim_exception_handler(request: Request, exc: ReclaimException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = [
        ErrorDetail(
            field=".".join(str(loc) for loc in error["loc"] if loc != "body"),
            message=error["msg"],
            type=error["type"],
        ).model_dump()
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
        },
    )
