"""
Users router.

POST /users     — register a user (no credentials; identity only)
GET  /users/me  — the user behind the X-User-Id header
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.session import UserSession, get_current_session
from app.db.base import get_db
from app.schemas.common import ErrorResponse
from app.schemas.user import UserCreate, UserResponse
from app.services.user_service import create_user, get_user

router = APIRouter(prefix="/users", tags=["users"])


@router.post(
    "",
    response_model=UserResponse,
    status_code=201,
    summary="Register a user",
    responses={409: {"model": ErrorResponse, "description": "Email already registered."}},
)
def register(payload: UserCreate, db: Session = Depends(get_db)):
    return create_user(db, email=payload.email, full_name=payload.full_name)


@router.get(
    "/me",
    response_model=UserResponse,
    summary="Current user",
    responses={401: {"model": ErrorResponse, "description": "Missing or unknown X-User-Id."}},
)
def me(
    session: UserSession = Depends(get_current_session),
    db: Session = Depends(get_db),
):
    return get_user(db, session.user_id)
