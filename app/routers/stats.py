"""
Stats router.

GET /stats/dashboard — today's progress across all active habits
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.clock import get_today
from app.core.session import UserSession, get_current_session
from app.db.base import get_db
from app.schemas.stats import DashboardResponse
from app.services.habit_service import get_dashboard_stats

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get("/dashboard", response_model=DashboardResponse, summary="Dashboard summary")
def dashboard(
    today: Optional[date] = Query(
        default=None,
        description="Day to summarise. Defaults to today (UTC).",
        examples=["2026-10-18"],
    ),
    clock_today: date = Depends(get_today),
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    """
    `today_completion` and `wellness_score` are the share of active habits
    with a completed log on `today`, rounded to a whole percentage.
    """
    stats = get_dashboard_stats(db, session, today=today or clock_today)
    return DashboardResponse(
        day=stats.day,
        total_habits=stats.total_habits,
        active_habits=stats.active_habits,
        today_completed=stats.today_completed,
        today_total=stats.today_total,
        today_completion=stats.today_completion,
        total_achievements=stats.total_achievements,
        total_points=stats.total_points,
        wellness_score=stats.wellness_score,
    )
