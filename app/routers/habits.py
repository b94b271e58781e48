"""
Habits router.

POST   /habits                 — create a habit
GET    /habits                 — list habits (newest first)
GET    /habits/{id}            — one habit
PATCH  /habits/{id}            — partial update
POST   /habits/{id}/archive    — hide a habit without losing its logs
DELETE /habits/{id}            — delete a habit and its logs
POST   /habits/{id}/logs       — log a day's progress (upsert) + check achievements
GET    /habits/{id}/logs       — log history, optionally bounded by date
GET    /habits/{id}/stats      — current/best streak and completion rate
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from app.core.clock import get_today
from app.core.session import UserSession, get_current_session
from app.db.base import get_db
from app.schemas.common import ErrorResponse
from app.schemas.habit import (
    HabitCreate,
    HabitLogResponse,
    HabitResponse,
    HabitStatsResponse,
    HabitUpdate,
    LogProgressRequest,
    LogProgressResponse,
    StreakResponse,
)
from app.services import habit_service
from app.services.habit_service import HabitStats, LogOutcome
from app.routers.achievements import unlocks_to_response

router = APIRouter(prefix="/habits", tags=["habits"])

_NOT_FOUND = {404: {"model": ErrorResponse, "description": "Habit not found for this user."}}


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _stats_to_response(stats: HabitStats) -> HabitStatsResponse:
    return HabitStatsResponse(
        habit_id=stats.habit_id,
        streak=StreakResponse(current=stats.streak.current, best=stats.streak.best),
        completion_rate=stats.completion_rate,
        window_days=stats.window_days,
        total_logs=stats.total_logs,
    )


def _outcome_to_response(db: Session, outcome: LogOutcome) -> LogProgressResponse:
    return LogProgressResponse(
        log=HabitLogResponse.model_validate(outcome.log),
        created=outcome.created,
        unlocked=unlocks_to_response(db, outcome.unlocked),
    )


# ---------------------------------------------------------------------------
# Habit CRUD
# ---------------------------------------------------------------------------

@router.post("", response_model=HabitResponse, status_code=201, summary="Create a habit")
def create_habit(
    payload: HabitCreate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return habit_service.create_habit(db, session, payload.model_dump())


@router.get("", response_model=list[HabitResponse], summary="List habits")
def list_habits(
    include_archived: bool = Query(default=False, description="Include archived habits."),
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return habit_service.list_habits(db, session, include_archived=include_archived)


@router.get("/{habit_id}", response_model=HabitResponse, summary="Get a habit", responses=_NOT_FOUND)
def get_habit(
    habit_id: int,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return habit_service.get_habit(db, session, habit_id)


@router.patch("/{habit_id}", response_model=HabitResponse, summary="Update a habit", responses=_NOT_FOUND)
def update_habit(
    habit_id: int,
    payload: HabitUpdate,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return habit_service.update_habit(
        db, session, habit_id, payload.model_dump(exclude_unset=True)
    )


@router.post(
    "/{habit_id}/archive",
    response_model=HabitResponse,
    summary="Archive a habit",
    responses=_NOT_FOUND,
)
def archive_habit(
    habit_id: int,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return habit_service.archive_habit(db, session, habit_id)


@router.delete("/{habit_id}", status_code=204, summary="Delete a habit", responses=_NOT_FOUND)
def delete_habit(
    habit_id: int,
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    habit_service.delete_habit(db, session, habit_id)
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Logs
# ---------------------------------------------------------------------------

@router.post(
    "/{habit_id}/logs",
    response_model=LogProgressResponse,
    summary="Log a day's progress",
    responses={
        **_NOT_FOUND,
        409: {"model": ErrorResponse, "description": "Habit is archived."},
        422: {"model": ErrorResponse, "description": "Day is after today."},
    },
)
def log_progress(
    habit_id: int,
    payload: LogProgressRequest,
    response: Response,
    today: date = Depends(get_today),
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """
    Record the value for a day (default today, UTC). The log is marked
    `completed` when the value reaches the habit's `target_value`.

    Logging the same day twice overwrites the earlier value (200); a new
    day returns 201. Past days can be back-filled; future days are
    rejected with 422 `FUTURE_LOG_DATE`. Achievements are re-evaluated
    after every log against the server's today.
    """
    outcome = habit_service.log_progress(
        db, session, habit_id,
        value=payload.value, notes=payload.notes, day=payload.day, today=today,
    )
    response.status_code = 201 if outcome.created else 200
    return _outcome_to_response(db, outcome)


@router.get(
    "/{habit_id}/logs",
    response_model=list[HabitLogResponse],
    summary="Log history (newest first)",
    responses={
        **_NOT_FOUND,
        422: {"model": ErrorResponse, "description": "start_date after end_date."},
    },
)
def list_logs(
    habit_id: int,
    start_date: Optional[date] = Query(default=None, description="Inclusive lower bound."),
    end_date: Optional[date] = Query(default=None, description="Inclusive upper bound."),
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return habit_service.get_habit_logs(
        db, session, habit_id, start_date=start_date, end_date=end_date
    )


@router.get(
    "/{habit_id}/stats",
    response_model=HabitStatsResponse,
    summary="Streak and completion rate",
    responses=_NOT_FOUND,
)
def habit_stats(
    habit_id: int,
    today: Optional[date] = Query(
        default=None,
        description="Reference day for the streak and window. Defaults to today (UTC).",
        examples=["2026-10-18"],
    ),
    window_days: Optional[int] = Query(
        default=None, ge=1, le=366,
        description="Completion-rate window. Defaults to COMPLETION_WINDOW_DAYS.",
    ),
    clock_today: date = Depends(get_today),
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """
    `current` is only non-zero while the streak is alive (a completed log
    today or yesterday). `best` is the longest run ever, so `best >= current`.

    The completion rate divides by the number of logs present in the
    window, not the window length.
    """
    stats = habit_service.get_habit_stats(
        db, session, habit_id, today=today or clock_today, window_days=window_days
    )
    return _stats_to_response(stats)
