"""
User schemas.

POST /users    → UserCreate → UserResponse
GET  /users/me → UserResponse
"""
from datetime import datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class UserCreate(BaseModel):
    email: Annotated[str, Field(
        min_length=3,
        max_length=256,
        examples=["ana@example.com"],
    )]
    full_name: Optional[str] = Field(default=None, max_length=256)

    @field_validator("email")
    @classmethod
    def must_look_like_email(cls, v: str) -> str:
        v = v.strip()
        if "@" not in v or v.startswith("@") or v.endswith("@"):
            raise ValueError("email must contain a local part and a domain")
        return v


class UserResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    full_name: Optional[str] = None
    role: str
    created_at: datetime
