"""
Streak and completion-rate calculation over a habit's log history.

Definitions
-----------
Streak
  A run of consecutive calendar days each having a completed log.
  `current` is only non-zero while the run is still alive: the most recent
  completed day must be `today` or `today - 1`.
  `best` is the longest run anywhere in the history (always >= current).

Completion rate
  Completed logs / logs present in the trailing window, as an integer
  percentage. The denominator is the number of logs found in the window
  (capped at the window size), not the window length, so a habit with a
  sparse history is not diluted by days that were never logged.

Both functions are pure: no DB, no clock. `today` is always passed in by
the caller so repeated calls over the same snapshot give the same answer.

Public API
----------
compute_streak(logs, today)                       -> StreakResult
compute_completion_rate(logs, today, window_days) -> int (0–100)
day_difference(later, earlier)                    -> int
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Optional

DEFAULT_WINDOW_DAYS = 30


# ---------------------------------------------------------------------------
# Result type
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StreakResult:
    current: int = 0
    best: int = 0


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _field(log: Any, name: str) -> Any:
    """Read a field from an ORM row, a dataclass or a plain dict."""
    if isinstance(log, Mapping):
        return log.get(name)
    return getattr(log, name, None)


def _as_date(value: date | str) -> date:
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def day_difference(later: date | str, earlier: date | str) -> int:
    """Whole calendar days from `earlier` to `later`."""
    return (_as_date(later) - _as_date(earlier)).days


def _completed_dates_desc(logs: Iterable[Any]) -> list[date]:
    """Completed log dates, most recent first. Ties keep input order."""
    completed = [_as_date(_field(log, "date")) for log in logs if _field(log, "completed")]
    # sorted() is stable, so duplicate dates stay in input order
    return sorted(completed, reverse=True)


# ---------------------------------------------------------------------------
# Public — streaks
# ---------------------------------------------------------------------------

def compute_streak(logs: Optional[Iterable[Any]], today: date) -> StreakResult:
    """
    Compute the current and best streak for one habit's logs.

    A duplicate date (not expected, the DB forbids it) counts as a gap
    of zero days: it breaks the run instead of extending it.
    """
    if not logs:
        return StreakResult()

    dates = _completed_dates_desc(logs)
    if not dates:
        return StreakResult()

    current = 0
    if dates[0] in (today, today - timedelta(days=1)):
        current = 1
        for prev, curr in zip(dates, dates[1:]):
            if day_difference(prev, curr) != 1:
                break
            current += 1

    best = 1
    run = 1
    for prev, curr in zip(dates, dates[1:]):
        if day_difference(prev, curr) == 1:
            run += 1
            best = max(best, run)
        else:
            run = 1

    return StreakResult(current=current, best=max(best, current))


# ---------------------------------------------------------------------------
# Public — completion rate
# ---------------------------------------------------------------------------

def compute_completion_rate(
    logs: Optional[Iterable[Any]],
    today: date,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> int:
    """
    Percentage (0–100) of logs in the trailing window that were completed.
    Window lower bound is inclusive: date >= today - window_days.
    """
    if not logs:
        return 0

    cutoff = today - timedelta(days=window_days)
    in_window = [log for log in logs if _as_date(_field(log, "date")) >= cutoff]

    denominator = min(window_days, len(in_window))
    if denominator <= 0:
        return 0

    completed = sum(1 for log in in_window if _field(log, "completed"))
    rate = Decimal(100 * completed) / Decimal(denominator)
    rate = rate.quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return max(0, min(100, int(rate)))
