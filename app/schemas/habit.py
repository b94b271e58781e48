"""
Habit and habit-log schemas.

POST  /habits                → HabitCreate → HabitResponse
PATCH /habits/{id}           → HabitUpdate → HabitResponse
POST  /habits/{id}/logs      → LogProgressRequest → LogProgressResponse
GET   /habits/{id}/logs      → list[HabitLogResponse]
GET   /habits/{id}/stats     → HabitStatsResponse
"""
from __future__ import annotations

import datetime as dt
from datetime import date, datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.habit import HabitFrequency, HabitType
from app.schemas.achievement import UserAchievementResponse

_REMINDER_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class HabitCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    name: Annotated[str, Field(min_length=1, max_length=128, examples=["Drink water"])]
    habit_type: HabitType = Field(examples=["water"])
    target_value: float = Field(
        default=1, gt=0,
        description="Value a day's log must reach to count as completed.",
        examples=[8],
    )
    frequency: HabitFrequency = HabitFrequency.daily
    icon: Optional[str] = Field(default=None, max_length=32)
    color: Optional[str] = Field(default=None, max_length=32)
    reminder_enabled: bool = False
    reminder_time: Optional[str] = Field(
        default=None, pattern=_REMINDER_PATTERN, examples=["08:30"],
    )

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class HabitUpdate(BaseModel):
    """Partial update; omitted fields are left unchanged."""
    model_config = ConfigDict(use_enum_values=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=128)
    habit_type: Optional[HabitType] = None
    target_value: Optional[float] = Field(default=None, gt=0)
    frequency: Optional[HabitFrequency] = None
    icon: Optional[str] = Field(default=None, max_length=32)
    color: Optional[str] = Field(default=None, max_length=32)
    reminder_enabled: Optional[bool] = None
    reminder_time: Optional[str] = Field(default=None, pattern=_REMINDER_PATTERN)


class HabitResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    name: str
    habit_type: str
    target_value: float
    frequency: str
    icon: Optional[str] = None
    color: Optional[str] = None
    reminder_enabled: bool
    reminder_time: Optional[str] = None
    is_archived: bool
    created_at: datetime
    updated_at: datetime


class LogProgressRequest(BaseModel):
    value: float = Field(ge=0, examples=[8])
    notes: Optional[str] = Field(default=None, max_length=2_000)
    day: Optional[date] = Field(
        default=None,
        description="Calendar day being logged. Defaults to today (UTC); future days are rejected.",
        examples=["2026-10-18"],
    )


class HabitLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    habit_id: int
    user_id: int
    date: dt.date
    value: float
    completed: bool
    notes: Optional[str] = None


class LogProgressResponse(BaseModel):
    log: HabitLogResponse
    created: bool = Field(description="False when an existing day was overwritten.")
    unlocked: list[UserAchievementResponse] = Field(
        description="Achievements unlocked by this log action."
    )


class StreakResponse(BaseModel):
    current: int = Field(ge=0)
    best: int = Field(ge=0)


class HabitStatsResponse(BaseModel):
    habit_id: int
    streak: StreakResponse
    completion_rate: int = Field(ge=0, le=100, description="Percentage over the trailing window.")
    window_days: int
    total_logs: int
