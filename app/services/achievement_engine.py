"""
Achievement Engine — rule-based unlocks driven by a user's habit activity.

Rules (evaluated every time the user logs progress, or on demand via
POST /achievements/check)
--------------------------------------------------------------------------
  total_logs   : completed logs across all habits >= criteria_value
  streak       : max current streak across habits >= criteria_value
  consistency  : reserved, never unlocks
  milestone    : reserved, never unlocks
  anything else: never unlocks (new catalog types must not break the engine)

Idempotency
-----------
Each (user_id, achievement_id) pair is unique in `user_achievements`.
`evaluate_unlocks` skips ids already unlocked, and the DB constraint is the
final guard when two log actions race: the losing batch is rolled back and
re-evaluated once, so its other unlocks are not lost.

`evaluate_unlocks` is pure. `check_and_unlock` loads the snapshot,
aggregates it with the same `today` used for streaks, and commits once.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import AchievementNotFoundError
from app.models.achievement import Achievement, UserAchievement
from app.models.habit import Habit
from app.models.habit_log import HabitLog
from app.services.streaks import compute_streak

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Criteria type constants
# ---------------------------------------------------------------------------

class CriteriaType:
    STREAK      = "streak"
    TOTAL_LOGS  = "total_logs"
    CONSISTENCY = "consistency"
    MILESTONE   = "milestone"


UNLOCKED_PROGRESS = 100

# First pass plus one retry after losing a unique-constraint race
_MAX_ATTEMPTS = 2


# ---------------------------------------------------------------------------
# Result type
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class UnlockProposal:
    """A candidate unlock, pending persistence."""
    user_id: int | None
    achievement_id: int
    progress: int = UNLOCKED_PROGRESS


# ---------------------------------------------------------------------------
# Pure decision function
# ---------------------------------------------------------------------------

def _field(obj: Any, name: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(name)
    return getattr(obj, name, None)


def _rule_met(
    criteria_type: str | None,
    criteria_value: Any,
    total_completed_logs: int,
    max_streak_across_habits: int,
) -> bool:
    if criteria_value is None:
        return False
    if criteria_type == CriteriaType.TOTAL_LOGS:
        return total_completed_logs >= criteria_value
    if criteria_type == CriteriaType.STREAK:
        return max_streak_across_habits >= criteria_value
    # consistency, milestone and unknown types are not evaluated
    return False


def evaluate_unlocks(
    achievement_catalog: Iterable[Any],
    already_unlocked: set,
    total_completed_logs: int,
    max_streak_across_habits: int,
    user_id: int | None = None,
) -> list[UnlockProposal]:
    """
    Decide which catalog achievements should be newly unlocked.
    Result order follows catalog order; no id is proposed twice.
    """
    proposals: list[UnlockProposal] = []
    seen = set(already_unlocked)
    for achievement in achievement_catalog:
        achievement_id = _field(achievement, "id")
        if achievement_id in seen:
            continue
        if _rule_met(
            _field(achievement, "criteria_type"),
            _field(achievement, "criteria_value"),
            total_completed_logs,
            max_streak_across_habits,
        ):
            proposals.append(UnlockProposal(user_id=user_id, achievement_id=achievement_id))
            seen.add(achievement_id)
    return proposals


# ---------------------------------------------------------------------------
# Aggregation helpers (driving inputs for evaluate_unlocks)
# ---------------------------------------------------------------------------

def count_completed_logs(logs_by_habit: Mapping[Any, Iterable[Any]]) -> int:
    return sum(
        1
        for logs in logs_by_habit.values()
        for log in logs
        if _field(log, "completed")
    )


def max_current_streak(logs_by_habit: Mapping[Any, Iterable[Any]], today: date) -> int:
    return max(
        (compute_streak(logs, today).current for logs in logs_by_habit.values()),
        default=0,
    )


# ---------------------------------------------------------------------------
# Snapshot loading
# ---------------------------------------------------------------------------

def _unlocked_ids(db: Session, user_id: int) -> set[int]:
    rows = (
        db.query(UserAchievement.achievement_id)
        .filter(UserAchievement.user_id == user_id)
        .all()
    )
    return {row.achievement_id for row in rows}


def _logs_by_habit(db: Session, user_id: int) -> dict[int, list[HabitLog]]:
    habit_ids = [
        row.id
        for row in db.query(Habit.id)
        .filter(Habit.user_id == user_id, Habit.is_archived == False)  # noqa: E712
        .all()
    ]
    grouped: dict[int, list[HabitLog]] = {hid: [] for hid in habit_ids}
    if not habit_ids:
        return grouped
    logs = (
        db.query(HabitLog)
        .filter(HabitLog.habit_id.in_(habit_ids))
        .order_by(HabitLog.date.desc())
        .all()
    )
    for log in logs:
        grouped[log.habit_id].append(log)
    return grouped


def _insert_unlocks(db: Session, user_id: int, today: date) -> list[UserAchievement]:
    """One evaluate-and-insert pass. Raises IntegrityError on a duplicate pair."""
    catalog = db.query(Achievement).order_by(Achievement.id).all()
    if not catalog:
        return []

    logs_by_habit = _logs_by_habit(db, user_id)
    proposals = evaluate_unlocks(
        achievement_catalog=catalog,
        already_unlocked=_unlocked_ids(db, user_id),
        total_completed_logs=count_completed_logs(logs_by_habit),
        max_streak_across_habits=max_current_streak(logs_by_habit, today),
        user_id=user_id,
    )
    if not proposals:
        return []

    rows = [
        UserAchievement(
            user_id=user_id,
            achievement_id=p.achievement_id,
            progress=p.progress,
        )
        for p in proposals
    ]
    db.add_all(rows)
    db.commit()
    for row in rows:
        db.refresh(row)
    return rows


# ---------------------------------------------------------------------------
# Public — main entry point
# ---------------------------------------------------------------------------

def check_and_unlock(db: Session, user_id: int, today: date) -> list[UserAchievement]:
    """
    Evaluate the catalog for `user_id` and persist any new unlocks.
    Safe to call repeatedly: already-unlocked achievements are skipped.

    If a concurrent call inserts one of the same pairs first, the whole
    batch is rolled back and evaluated once more against a fresh snapshot,
    so the non-conflicting unlocks are still saved by this call.
    """
    for attempt in range(_MAX_ATTEMPTS):
        try:
            rows = _insert_unlocks(db, user_id, today)
        except IntegrityError:
            db.rollback()
            logger.warning(
                "Duplicate unlock for user %s (attempt %d); re-evaluating",
                user_id, attempt + 1,
            )
            continue
        if rows:
            logger.info(
                "User %s unlocked achievements %s",
                user_id, [r.achievement_id for r in rows],
            )
        return rows
    return []


# ---------------------------------------------------------------------------
# Public — catalog and query helpers
# ---------------------------------------------------------------------------

def list_catalog(db: Session) -> list[Achievement]:
    return (
        db.query(Achievement)
        .order_by(Achievement.points.asc(), Achievement.id.asc())
        .all()
    )


def create_achievement(db: Session, data: dict) -> Achievement:
    achievement = Achievement(**data)
    db.add(achievement)
    db.commit()
    db.refresh(achievement)
    return achievement


def get_achievement(db: Session, achievement_id: int) -> Achievement:
    achievement = db.get(Achievement, achievement_id)
    if achievement is None:
        raise AchievementNotFoundError(achievement_id)
    return achievement


def get_user_achievements(
    db: Session, user_id: int
) -> list[tuple[UserAchievement, Achievement]]:
    """Unlocked achievements joined with their catalog entry, newest first."""
    return (
        db.query(UserAchievement, Achievement)
        .join(Achievement, Achievement.id == UserAchievement.achievement_id)
        .filter(UserAchievement.user_id == user_id)
        .order_by(UserAchievement.unlocked_at.desc(), UserAchievement.id.desc())
        .all()
    )
