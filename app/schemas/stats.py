"""
Dashboard schema.

GET /stats/dashboard → DashboardResponse
"""
from datetime import date

from pydantic import BaseModel, Field


class DashboardResponse(BaseModel):
    day: date
    total_habits: int
    active_habits: int
    today_completed: int
    today_total: int = Field(description="Active habits; each can be completed once per day.")
    today_completion: int = Field(ge=0, le=100)
    total_achievements: int
    total_points: int
    wellness_score: int = Field(ge=0, le=100)
