"""
User registration and lookup.
"""
from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Session

from app.core.errors import EmailAlreadyRegisteredError, UserNotFoundError
from app.models.user import User


def create_user(db: Session, email: str, full_name: Optional[str] = None) -> User:
    email = email.strip().lower()
    if db.query(User.id).filter(User.email == email).first() is not None:
        raise EmailAlreadyRegisteredError(email)
    user = User(email=email, full_name=full_name)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise UserNotFoundError(user_id)
    return user
