# src/daily_track/analytics/aggregation.py

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from ..core.ports import TrackRepo
from ..tracking.models import DailyEntry, DayScore, TaskDefinition, coerce_day
from .scoring import counts_toward_score, daily_score, display_ratio
from .streaks import DEFAULT_THRESHOLD, best_streak, current_streak


@dataclass(frozen=True, slots=True)
class TaskBreakdown:
    task: TaskDefinition
    value: float
    ratio: float  # uncapped display ratio


@dataclass(frozen=True, slots=True)
class StreakSummary:
    current: int
    best: int
    threshold: float


def score_series(
    tasks: Iterable[TaskDefinition], entries: Iterable[DailyEntry]
) -> list[DayScore]:
    """
    Score every date that has at least one entry for an active non-cumulative task.

    Dates whose entries all belong to cumulative or inactive tasks are left out.
    """
    tasks = list(tasks)
    scored_ids = {t.id for t in tasks if counts_toward_score(t)}

    by_day: dict[date, list[DailyEntry]] = defaultdict(list)
    for e in entries:
        by_day[e.date].append(e)

    out: list[DayScore] = []
    for day in sorted(by_day):
        day_entries = by_day[day]
        if not any(e.task_id in scored_ids for e in day_entries):
            continue
        out.append(DayScore(date=day, score=daily_score(tasks, day_entries)))
    return out


def daily_score_series(
    store: TrackRepo,
    start: date | str | None = None,
    end: date | str | None = None,
) -> list[DayScore]:
    """Date-ordered scores for [start, end]; open bounds cover the whole history."""
    tasks = store.list_tasks(active_only=True)
    return score_series(tasks, store.entries_between(start, end))


def average_score(series: Iterable[DayScore]) -> float:
    scores = [s.score for s in series]
    if not scores:
        return 0.0
    return sum(scores) / len(scores)


def task_breakdown(store: TrackRepo, day: date | str) -> list[TaskBreakdown]:
    """Value and uncapped ratio for every task (active or not) on ``day``."""
    day = coerce_day(day)
    values = {e.task_id: e.value for e in store.entries_for_date(day)}
    out: list[TaskBreakdown] = []
    for task in store.list_tasks(active_only=False):
        value = values.get(task.id, 0.0)
        out.append(TaskBreakdown(task=task, value=value, ratio=display_ratio(task, value)))
    return out


def streak_summary(
    store: TrackRepo,
    *,
    today: date,
    threshold: float = DEFAULT_THRESHOLD,
) -> StreakSummary:
    series = daily_score_series(store)
    return StreakSummary(
        current=current_streak(series, today=today, threshold=threshold),
        best=best_streak(series, threshold=threshold),
        threshold=threshold,
    )
