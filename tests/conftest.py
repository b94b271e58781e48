"""
Shared pytest fixtures.

Uses a file-backed SQLite database so no Postgres is required for tests.
Every test gets its own freshly registered user, so tests never see each
other's habits or unlocks even though they share one database.
"""
import uuid
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.core.clock import get_today
from app.db.base import Base, get_db
from app.main import app
from app.core.session import UserSession
from app.models.user import User

SQLITE_URL = "sqlite:///./test_habits.db"

engine = create_engine(SQLITE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Server "today" for every HTTP test; test modules use the same date.
FROZEN_TODAY = date(2026, 10, 18)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def create_tables():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(db):
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: FROZEN_TODAY
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def user(db) -> User:
    u = User(email=f"user-{uuid.uuid4().hex[:12]}@example.com", full_name="Test User")
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


@pytest.fixture()
def session(user) -> UserSession:
    return UserSession(user_id=user.id, email=user.email)


@pytest.fixture()
def headers(user) -> dict:
    return {"X-User-Id": str(user.id)}
