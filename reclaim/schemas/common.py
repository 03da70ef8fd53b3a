"""
Error envelope models, used for OpenAPI `responses=` declarations and by
the validation handler.
"""
from typing import Any, Optional
from pydantic import BaseModel


class ErrorDetail(BaseModel):
    """One field-level validation failure inside `details.errors`."""
    field: str
    message: str
    type: str


class ErrorResponse(BaseModel):
    """`{code, message, details}` body of every 4xx/5xx response."""
    code: str
    message: str
    details: Optional[dict[str, Any]] = None


_ERROR_DESCRIPTIONS = {
    401: "X-User-Id header missing (USER_REQUIRED).",
    403: "Habit belongs to another user (HABIT_FORBIDDEN).",
    404: "Habit or completion not found.",
    409: "Habit already completed on this date (DUPLICATE_COMPLETION).",
    422: "Validation failed or date range too large.",
}


def error_responses(*codes: int) -> dict[int, dict[str, Any]]:
    """`responses=` entries documenting the error envelope for `codes`."""
    return {
        code: {"model": ErrorResponse, "description": _ERROR_DESCRIPTIONS[code]}
        for code in codes
    }
