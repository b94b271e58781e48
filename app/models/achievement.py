"""
Achievement catalog and per-user unlocks.

criteria_type values (see app/services/achievement_engine.py):
  "total_logs"   — completed logs across all habits >= criteria_value
  "streak"       — best current streak across habits >= criteria_value
  "consistency"  — reserved, never unlocks
  "milestone"    — reserved, never unlocks

UserAchievement is unique per (user_id, achievement_id); the engine relies
on that constraint when two log actions race.
"""
from datetime import datetime
from sqlalchemy import Integer, String, Text, DateTime, func, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class Achievement(Base):
    __tablename__ = "achievements"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(
        String(32), nullable=False,
        comment='"consistency" | "milestone" | "challenge"',
    )
    icon: Mapped[str | None] = mapped_column(String(32), nullable=True)
    criteria_type: Mapped[str] = mapped_column(String(32), nullable=False, index=True)
    criteria_value: Mapped[int] = mapped_column(Integer, nullable=False)
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )


class UserAchievement(Base):
    __tablename__ = "user_achievements"
    __table_args__ = (
        UniqueConstraint("user_id", "achievement_id", name="uq_user_achievement"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    achievement_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    progress: Mapped[int] = mapped_column(Integer, nullable=False, default=100)
    unlocked_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
