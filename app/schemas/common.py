"""
Error envelope shared by every router's `responses=` documentation.
"""
from typing import Any, Optional
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error envelope returned for all 4xx/5xx responses."""

    code: str = Field(examples=["HABIT_NOT_FOUND"])
    message: str = Field(examples=["Habit 12 not found."])
    details: Optional[dict[str, Any]] = None
