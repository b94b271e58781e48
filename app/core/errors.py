"""
Custom exception hierarchy for the Habit Tracker API.

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

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class HabitTrackerException(Exception):
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


class NotAuthenticatedError(HabitTrackerException):
    http_status = status.HTTP_401_UNAUTHORIZED
    code = "NOT_AUTHENTICATED"

    def __init__(self, reason: str = "Missing or unknown X-User-Id header."):
        super().__init__(message=reason)


class UserNotFoundError(HabitTrackerException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "USER_NOT_FOUND"

    def __init__(self, user_id: int):
        super().__init__(
            message=f"User {user_id} does not exist.",
            details={"user_id": user_id},
        )


class EmailAlreadyRegisteredError(HabitTrackerException):
    http_status = status.HTTP_409_CONFLICT
    code = "EMAIL_ALREADY_REGISTERED"

    def __init__(self, email: str):
        super().__init__(
            message=f"Email {email} is already registered.",
            details={"email": email},
        )


class HabitNotFoundError(HabitTrackerException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "HABIT_NOT_FOUND"

    def __init__(self, habit_id: int):
        super().__init__(
            message=f"Habit {habit_id} not found.",
            details={"habit_id": habit_id},
        )


class HabitArchivedError(HabitTrackerException):
    http_status = status.HTTP_409_CONFLICT
    code = "HABIT_ARCHIVED"

    def __init__(self, habit_id: int):
        super().__init__(
            message=f"Habit {habit_id} is archived and cannot be logged.",
            details={"habit_id": habit_id},
        )


class AchievementNotFoundError(HabitTrackerException):
    http_status = status.HTTP_404_NOT_FOUND
    code = "ACHIEVEMENT_NOT_FOUND"

    def __init__(self, achievement_id: int):
        super().__init__(
            message=f"Achievement {achievement_id} not found.",
            details={"achievement_id": achievement_id},
        )


class FutureLogDateError(HabitTrackerException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "FUTURE_LOG_DATE"

    def __init__(self, day: date, today: date):
        super().__init__(
            message=f"Cannot log {day}: it is after today ({today}).",
            details={"day": str(day), "today": str(today)},
        )


class InvalidDateRangeError(HabitTrackerException):
    http_status = status.HTTP_422_UNPROCESSABLE_ENTITY
    code = "INVALID_DATE_RANGE"

    def __init__(self, start: date, end: date):
        super().__init__(
            message=f"start_date {start} is after end_date {end}.",
            details={"start_date": str(start), "end_date": str(end)},
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def habit_tracker_exception_handler(
    request: Request, exc: HabitTrackerException
) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
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
