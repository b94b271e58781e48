"""
Habit service: habit CRUD, daily progress logging and per-habit stats.

Every query is scoped to the caller's `UserSession`; a habit owned by
someone else is reported as not found.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from sqlalchemy.orm import Session

from app.core.clock import get_today
from app.core.config import settings
from app.core.errors import (
    FutureLogDateError,
    HabitArchivedError,
    HabitNotFoundError,
    InvalidDateRangeError,
)
from app.core.session import UserSession
from app.models.achievement import UserAchievement
from app.models.habit import Habit
from app.models.habit_log import HabitLog
from app.services import achievement_engine
from app.services.streaks import StreakResult, compute_completion_rate, compute_streak

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass
class HabitStats:
    habit_id: int
    streak: StreakResult
    completion_rate: int     # 0–100 over the trailing window
    window_days: int
    total_logs: int


@dataclass
class LogOutcome:
    log: HabitLog
    created: bool            # False when an existing day was updated
    unlocked: list[UserAchievement]


@dataclass
class DashboardStats:
    day: date
    total_habits: int
    active_habits: int
    today_completed: int
    today_total: int
    today_completion: int    # 0–100
    total_achievements: int
    total_points: int
    wellness_score: int


# ---------------------------------------------------------------------------
# Habit CRUD
# ---------------------------------------------------------------------------

def create_habit(db: Session, session: UserSession, data: dict) -> Habit:
    habit = Habit(user_id=session.user_id, **data)
    db.add(habit)
    db.commit()
    db.refresh(habit)
    return habit


def list_habits(
    db: Session, session: UserSession, include_archived: bool = False
) -> list[Habit]:
    q = db.query(Habit).filter(Habit.user_id == session.user_id)
    if not include_archived:
        q = q.filter(Habit.is_archived == False)  # noqa: E712
    return q.order_by(Habit.created_at.desc(), Habit.id.desc()).all()


def get_habit(db: Session, session: UserSession, habit_id: int) -> Habit:
    habit = (
        db.query(Habit)
        .filter(Habit.id == habit_id, Habit.user_id == session.user_id)
        .first()
    )
    if habit is None:
        raise HabitNotFoundError(habit_id)
    return habit


_NON_NULLABLE = {"name", "habit_type", "target_value", "frequency", "reminder_enabled", "is_archived"}


def update_habit(db: Session, session: UserSession, habit_id: int, data: dict) -> Habit:
    habit = get_habit(db, session, habit_id)
    for key, value in data.items():
        if value is None and key in _NON_NULLABLE:
            continue
        setattr(habit, key, value)
    db.commit()
    db.refresh(habit)
    return habit


def archive_habit(db: Session, session: UserSession, habit_id: int) -> Habit:
    return update_habit(db, session, habit_id, {"is_archived": True})


def delete_habit(db: Session, session: UserSession, habit_id: int) -> None:
    """Delete a habit together with its logs."""
    habit = get_habit(db, session, habit_id)
    db.query(HabitLog).filter(HabitLog.habit_id == habit.id).delete(synchronize_session=False)
    db.delete(habit)
    db.commit()


# ---------------------------------------------------------------------------
# Logging progress
# ---------------------------------------------------------------------------

def log_progress(
    db: Session,
    session: UserSession,
    habit_id: int,
    value: Decimal,
    notes: Optional[str] = None,
    day: Optional[date] = None,
    today: Optional[date] = None,
) -> LogOutcome:
    """
    Record the value for `day` (default today). Logging the same day again
    overwrites the earlier value; days after `today` are rejected.
    Achievements are re-evaluated afterwards against `today`, never against
    a back-filled `day`.
    """
    today = today or get_today()
    target_day = day or today
    if target_day > today:
        raise FutureLogDateError(target_day, today)
    habit = get_habit(db, session, habit_id)
    if habit.is_archived:
        raise HabitArchivedError(habit_id)

    value = Decimal(str(value))
    completed = value >= Decimal(str(habit.target_value))

    log = (
        db.query(HabitLog)
        .filter(HabitLog.habit_id == habit.id, HabitLog.date == target_day)
        .first()
    )
    created = log is None
    if created:
        log = HabitLog(
            habit_id=habit.id,
            user_id=session.user_id,
            date=target_day,
        )
        db.add(log)
    log.value = value
    log.completed = completed
    log.notes = notes
    db.commit()
    db.refresh(log)
    logger.debug(
        "Habit %s logged for %s (value=%s, completed=%s, created=%s)",
        habit.id, target_day, value, completed, created,
    )

    unlocked = achievement_engine.check_and_unlock(db, session.user_id, today)
    return LogOutcome(log=log, created=created, unlocked=unlocked)


def get_habit_logs(
    db: Session,
    session: UserSession,
    habit_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> list[HabitLog]:
    """Logs for one habit, newest first, optionally bounded (inclusive)."""
    if start_date and end_date and start_date > end_date:
        raise InvalidDateRangeError(start_date, end_date)
    habit = get_habit(db, session, habit_id)
    q = db.query(HabitLog).filter(HabitLog.habit_id == habit.id)
    if start_date:
        q = q.filter(HabitLog.date >= start_date)
    if end_date:
        q = q.filter(HabitLog.date <= end_date)
    return q.order_by(HabitLog.date.desc()).all()


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------

def get_habit_stats(
    db: Session,
    session: UserSession,
    habit_id: int,
    today: Optional[date] = None,
    window_days: Optional[int] = None,
) -> HabitStats:
    today = today or get_today()
    window = window_days or settings.COMPLETION_WINDOW_DAYS
    logs = get_habit_logs(db, session, habit_id)
    return HabitStats(
        habit_id=habit_id,
        streak=compute_streak(logs, today),
        completion_rate=compute_completion_rate(logs, today, window),
        window_days=window,
        total_logs=len(logs),
    )


def get_dashboard_stats(
    db: Session, session: UserSession, today: Optional[date] = None
) -> DashboardStats:
    today = today or get_today()
    all_habits = list_habits(db, session, include_archived=True)
    active_ids = [h.id for h in all_habits if not h.is_archived]

    today_completed = 0
    if active_ids:
        today_completed = (
            db.query(HabitLog)
            .filter(
                HabitLog.habit_id.in_(active_ids),
                HabitLog.date == today,
                HabitLog.completed == True,  # noqa: E712
            )
            .count()
        )

    today_total = len(active_ids)
    completion = 0
    if today_total:
        completion = int(
            (Decimal(100 * today_completed) / Decimal(today_total))
            .quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        )

    unlocked = achievement_engine.get_user_achievements(db, session.user_id)
    return DashboardStats(
        day=today,
        total_habits=len(all_habits),
        active_habits=today_total,
        today_completed=today_completed,
        today_total=today_total,
        today_completion=completion,
        total_achievements=len(unlocked),
        total_points=sum(a.points for _, a in unlocked),
        wellness_score=completion,
    )
