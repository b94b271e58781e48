"""
Achievement schemas.

GET  /achievements        → list[AchievementResponse]
POST /achievements        → AchievementCreate → AchievementResponse
GET  /achievements/me     → list[UserAchievementResponse]
POST /achievements/check  → CheckAchievementsResponse
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AchievementCreate(BaseModel):
    name: str = Field(min_length=1, max_length=128, examples=["First Week"])
    description: Optional[str] = None
    category: str = Field(
        pattern=r"^(consistency|milestone|challenge)$",
        examples=["consistency"],
    )
    icon: Optional[str] = Field(default=None, max_length=32)
    criteria_type: str = Field(
        min_length=1, max_length=32,
        description='"streak" | "total_logs" | "consistency" | "milestone". '
                    "Unknown types are stored but never unlock.",
        examples=["streak"],
    )
    criteria_value: int = Field(ge=0, examples=[7])
    points: int = Field(default=0, ge=0)


class AchievementResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    category: str
    icon: Optional[str] = None
    criteria_type: str
    criteria_value: int
    points: int


class UserAchievementResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    achievement_id: int
    progress: int
    unlocked_at: datetime
    achievement: Optional[AchievementResponse] = None


class CheckAchievementsResponse(BaseModel):
    reference_date: date
    unlocked: list[UserAchievementResponse]
