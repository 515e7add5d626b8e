# src/daily_track/analytics/__init__.py

from .aggregation import (
    StreakSummary,
    TaskBreakdown,
    average_score,
    daily_score_series,
    score_series,
    streak_summary,
    task_breakdown,
)
from .scoring import cumulative_ratio, daily_score, display_ratio, task_ratio
from .streaks import DEFAULT_THRESHOLD, best_streak, current_streak

__all__ = [
    "DEFAULT_THRESHOLD",
    "StreakSummary",
    "TaskBreakdown",
    "average_score",
    "best_streak",
    "cumulative_ratio",
    "current_streak",
    "daily_score",
    "daily_score_series",
    "display_ratio",
    "score_series",
    "streak_summary",
    "task_breakdown",
    "task_ratio",
]
