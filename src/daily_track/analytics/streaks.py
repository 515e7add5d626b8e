# src/daily_track/analytics/streaks.py

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, timedelta

from ..tracking.models import DayScore

DEFAULT_THRESHOLD = 0.7
_ONE_DAY = timedelta(days=1)


def current_streak(
    series: Iterable[DayScore],
    *,
    today: date,
    threshold: float = DEFAULT_THRESHOLD,
) -> int:
    """
    Consecutive qualifying days ending today.

    Walks backward from ``today``. Each row must be exactly the expected day and score
    at least ``threshold``; the first gap or sub-threshold day ends the walk. A today
    without a recorded score yields 0. Rows after ``today`` are ignored.
    """
    rows = sorted((s for s in series if s.date <= today), key=lambda s: s.date, reverse=True)

    streak = 0
    expected = today
    for row in rows:
        if row.date != expected or row.score < threshold:
            break
        streak += 1
        expected -= _ONE_DAY
    return streak


def best_streak(series: Iterable[DayScore], *, threshold: float = DEFAULT_THRESHOLD) -> int:
    """Longest run of calendar-adjacent qualifying days anywhere in the series."""
    best = 0
    run = 0
    prev: date | None = None

    for row in sorted(series, key=lambda s: s.date):
        qualifies = row.score >= threshold
        if qualifies and prev is not None and row.date - prev == _ONE_DAY:
            run += 1
        elif qualifies:
            run = 1
        else:
            run = 0
        best = max(best, run)
        prev = row.date
    return best
