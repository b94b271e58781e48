"""
Request-scoped user session.

The authenticated user is carried as an explicit `UserSession` value that
routers pass down to services, instead of ambient global state. Identity
comes from the `X-User-Id` header; credential checks happen upstream.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.core.errors import NotAuthenticatedError
from app.db.base import get_db
from app.models.user import User


@dataclass(frozen=True)
class UserSession:
    user_id: int
    email: str


def get_current_session(
    x_user_id: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
) -> UserSession:
    if not x_user_id:
        raise NotAuthenticatedError()
    try:
        user_id = int(x_user_id)
    except ValueError:
        raise NotAuthenticatedError("X-User-Id must be an integer.")
    user = db.get(User, user_id)
    if user is None:
        raise NotAuthenticatedError(f"Unknown user {user_id}.")
    return UserSession(user_id=user.id, email=user.email)
