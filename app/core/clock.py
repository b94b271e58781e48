"""
Host clock as a FastAPI dependency.

Routers take "today" from `get_today` instead of the request, so streaks
and achievement unlocks are always evaluated against the server's UTC
date. Tests pin it with `app.dependency_overrides[get_today]`.
"""
from datetime import date, datetime, timezone


def get_today() -> date:
    return datetime.now(tz=timezone.utc).date()
