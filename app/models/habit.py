from datetime import datetime
from decimal import Decimal
from sqlalchemy import Integer, String, Boolean, Numeric, DateTime, Enum, func
from sqlalchemy.orm import Mapped, mapped_column
import enum

from app.db.base import Base


class HabitType(str, enum.Enum):
    exercise = "exercise"
    water = "water"
    sleep = "sleep"
    mood = "mood"


class HabitFrequency(str, enum.Enum):
    daily = "daily"
    weekly = "weekly"
    custom = "custom"


class Habit(Base):
    """A user's habit definition. Archived habits are kept but hidden from lists."""

    __tablename__ = "habits"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(128), nullable=False)
    habit_type: Mapped[str] = mapped_column(
        Enum(HabitType, name="habit_type_enum"),
        nullable=False,
    )
    # A day's log is "completed" when its value reaches this target
    target_value: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=1)
    frequency: Mapped[str] = mapped_column(
        Enum(HabitFrequency, name="habit_frequency_enum"),
        nullable=False,
        default=HabitFrequency.daily,
    )
    icon: Mapped[str | None] = mapped_column(String(32), nullable=True)
    color: Mapped[str | None] = mapped_column(String(32), nullable=True)
    reminder_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    reminder_time: Mapped[str | None] = mapped_column(String(5), nullable=True, comment="HH:MM")
    is_archived: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
