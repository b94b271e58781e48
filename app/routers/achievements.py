"""
Achievements router.

GET  /achievements            — catalog (points ascending)
POST /achievements            — add a definition to the catalog
GET  /achievements/me         — achievements unlocked by the current user
POST /achievements/check      — re-evaluate unlock rules for the current user
GET  /achievements/{id}       — one catalog entry
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.clock import get_today
from app.core.session import UserSession, get_current_session
from app.db.base import get_db
from app.models.achievement import Achievement, UserAchievement
from app.schemas.achievement import (
    AchievementCreate,
    AchievementResponse,
    CheckAchievementsResponse,
    UserAchievementResponse,
)
from app.schemas.common import ErrorResponse
from app.services.achievement_engine import (
    check_and_unlock,
    create_achievement,
    get_achievement,
    get_user_achievements,
    list_catalog,
)

router = APIRouter(prefix="/achievements", tags=["achievements"])


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _unlock_to_response(ua: UserAchievement, achievement: Optional[Achievement]) -> UserAchievementResponse:
    return UserAchievementResponse(
        id=ua.id,
        user_id=ua.user_id,
        achievement_id=ua.achievement_id,
        progress=ua.progress,
        unlocked_at=ua.unlocked_at,
        achievement=AchievementResponse.model_validate(achievement) if achievement else None,
    )


def unlocks_to_response(db: Session, rows: list[UserAchievement]) -> list[UserAchievementResponse]:
    if not rows:
        return []
    ids = [r.achievement_id for r in rows]
    by_id = {
        a.id: a
        for a in db.query(Achievement).filter(Achievement.id.in_(ids)).all()
    }
    return [_unlock_to_response(r, by_id.get(r.achievement_id)) for r in rows]


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

@router.get("", response_model=list[AchievementResponse], summary="Achievement catalog")
def catalog(db: Session = Depends(get_db)):
    return list_catalog(db)


@router.post(
    "",
    response_model=AchievementResponse,
    status_code=201,
    summary="Add an achievement definition",
)
def add_achievement(payload: AchievementCreate, db: Session = Depends(get_db)):
    """
    ### Criteria types
    | Type | Unlocks when |
    |---|---|
    | `total_logs`  | completed logs across all habits ≥ `criteria_value` |
    | `streak`      | best *current* streak across habits ≥ `criteria_value` |
    | `consistency` | never (reserved) |
    | `milestone`   | never (reserved) |
    """
    return create_achievement(db, payload.model_dump())


# ---------------------------------------------------------------------------
# Per-user unlocks
# ---------------------------------------------------------------------------

@router.get(
    "/me",
    response_model=list[UserAchievementResponse],
    summary="Achievements unlocked by the current user (newest first)",
)
def my_achievements(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return [
        _unlock_to_response(ua, achievement)
        for ua, achievement in get_user_achievements(db, session.user_id)
    ]


@router.post(
    "/check",
    response_model=CheckAchievementsResponse,
    summary="Evaluate unlock rules now",
)
def check_achievements(
    today: date = Depends(get_today),
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """
    Streaks are measured against the server's today (UTC); the client
    cannot choose the reference date.

    Idempotent: achievements already unlocked are never proposed again, so
    calling this repeatedly returns an empty `unlocked` list after the first
    call that unlocked something.
    """
    rows = check_and_unlock(db, session.user_id, today)
    return CheckAchievementsResponse(
        reference_date=today,
        unlocked=unlocks_to_response(db, rows),
    )


@router.get(
    "/{achievement_id}",
    response_model=AchievementResponse,
    summary="One catalog entry",
    responses={404: {"model": ErrorResponse, "description": "Achievement not found."}},
)
def achievement_detail(achievement_id: int, db: Session = Depends(get_db)):
    return get_achievement(db, achievement_id)
