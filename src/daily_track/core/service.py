# src/daily_track/core/service.py

"""
Command functions used by connectors (console today, anything else later).

Each command takes the AppState, performs its writes through the store, and returns a
fresh immutable snapshot. Callers re-render from the returned value; nothing here keeps
view state between calls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from enum import StrEnum
from pathlib import Path

from ..analytics.aggregation import (
    TaskBreakdown,
    average_score,
    daily_score_series,
    task_breakdown,
)
from ..analytics.scoring import cumulative_ratio, daily_score, task_ratio
from ..analytics.streaks import best_streak, current_streak
from ..tracking.models import DailyEntry, DayScore, TaskDefinition, coerce_day, format_day
from ..tracking.serialization import read_tasks_file, write_tasks_file
from .errors import ValidationError
from .state import AppState

logger = logging.getLogger(__name__)


class Period(StrEnum):
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"

    @property
    def days(self) -> int:
        return {"week": 7, "month": 30, "quarter": 90, "year": 365}[self.value]

    @classmethod
    def parse(cls, raw: str | None, default: Period | None = None) -> Period:
        if not raw:
            return default or cls.MONTH
        try:
            return cls(raw.strip().lower())
        except ValueError as exc:
            raise ValidationError("period", f"expected one of {[p.value for p in cls]}") from exc


@dataclass(frozen=True, slots=True)
class TaskProgress:
    """A task paired with its entry for one day (a zero entry when nothing was recorded)."""

    task: TaskDefinition
    entry: DailyEntry
    cumulative_total: float | None = None  # only set for cumulative tasks

    @property
    def daily_ratio(self) -> float:
        return self.entry.completion_ratio(self.task.benchmark)

    @property
    def capped_ratio(self) -> float:
        return task_ratio(self.task, self.entry.value)

    @property
    def cumulative_ratio(self) -> float | None:
        if not self.task.is_cumulative or self.cumulative_total is None:
            return None
        return cumulative_ratio(self.task, self.cumulative_total)

    @property
    def progress_text(self) -> str:
        if self.task.is_checkbox:
            return "Done" if self.entry.value > 0 else "Not done"
        text = f"{_fmt_number(self.entry.value)} / {_fmt_number(self.task.benchmark)}"
        return f"{text} {self.task.unit}".rstrip()


@dataclass(frozen=True, slots=True)
class DaySnapshot:
    date: date
    tasks: tuple[TaskProgress, ...]
    daily_score: float
    current_streak: int

    def progress_for(self, task_id: str) -> TaskProgress | None:
        for p in self.tasks:
            if p.task.id == task_id:
                return p
        return None


@dataclass(frozen=True, slots=True)
class HistorySnapshot:
    period: Period
    start: date
    end: date
    scores: tuple[DayScore, ...]
    current_streak: int
    best_streak: int
    average_score: float
    tasks: tuple[TaskDefinition, ...]
    task_history: dict[str, list[DailyEntry]] = field(default_factory=dict)

    @property
    def total_days_tracked(self) -> int:
        return len(self.scores)

    def heatmap(self) -> dict[str, float]:
        """Date key -> score, for calendar heatmaps."""
        return {format_day(s.date): s.score for s in self.scores}


def _fmt_number(n: float) -> str:
    if n == round(n):
        return str(int(n))
    return f"{n:.1f}"


def _today(today: date | None) -> date:
    return today if today is not None else date.today()


# ---- daily view ----


def load_day(state: AppState, day: date | str, *, today: date | None = None) -> DaySnapshot:
    day = coerce_day(day)
    store = state.store

    tasks = store.list_tasks(active_only=True)
    entries = store.entries_for_date(day)
    by_task = {e.task_id: e for e in entries}

    progress: list[TaskProgress] = []
    for task in tasks:
        entry = by_task.get(task.id) or DailyEntry(task_id=task.id, date=day)
        total = store.cumulative_total(task.id) if task.is_cumulative else None
        progress.append(TaskProgress(task=task, entry=entry, cumulative_total=total))

    series = daily_score_series(store)
    return DaySnapshot(
        date=day,
        tasks=tuple(progress),
        daily_score=daily_score(tasks, entries),
        current_streak=current_streak(
            series, today=_today(today), threshold=state.streak_threshold
        ),
    )


def update_value(
    state: AppState,
    day: date | str,
    task_id: str,
    value: float,
    *,
    notes: str | None = None,
    today: date | None = None,
) -> DaySnapshot:
    """Record ``value`` for the task on ``day``. Existing notes are kept unless replaced."""
    day = coerce_day(day)
    if notes is None:
        existing = next((e for e in state.store.entries_for_date(day) if e.task_id == task_id), None)
        notes = existing.notes if existing else None

    state.store.upsert_entry(DailyEntry(task_id=task_id, date=day, value=value, notes=notes))
    logger.info("Value recorded task=%s date=%s value=%s", task_id, format_day(day), value)
    return load_day(state, day, today=today)


def toggle_checkbox(
    state: AppState, day: date | str, task_id: str, *, today: date | None = None
) -> DaySnapshot:
    day = coerce_day(day)
    current = next((e for e in state.store.entries_for_date(day) if e.task_id == task_id), None)
    new_value = 0.0 if current is not None and current.value > 0 else 1.0
    return update_value(state, day, task_id, new_value, today=today)


# ---- task management ----


def list_all_tasks(state: AppState) -> list[TaskDefinition]:
    return state.store.list_tasks(active_only=False)


def add_task(state: AppState, task: TaskDefinition) -> list[TaskDefinition]:
    """Append a new task after the highest sort_order in use."""
    existing = list_all_tasks(state)
    next_order = max((t.sort_order for t in existing), default=-1) + 1
    task = replace(task, sort_order=next_order)
    state.store.upsert_task(task)
    logger.info("Task added id=%s name=%s", task.id, task.name)
    return list_all_tasks(state)


def update_task(state: AppState, task: TaskDefinition) -> bool:
    """Replace an existing task. Returns False when there is nothing to update."""
    return state.store.update_task(task)


def delete_task(state: AppState, task_id: str) -> list[TaskDefinition]:
    state.store.delete_task(task_id)
    logger.info("Task deleted id=%s", task_id)
    return list_all_tasks(state)


def move_task(state: AppState, from_index: int, to_index: int) -> list[TaskDefinition]:
    """Move one task in the full list and renumber sort_order 0..n-1 atomically."""
    tasks = list_all_tasks(state)
    if not 0 <= from_index < len(tasks):
        raise ValidationError("from_index", f"out of range 0..{len(tasks) - 1}")
    if not 0 <= to_index < len(tasks):
        raise ValidationError("to_index", f"out of range 0..{len(tasks) - 1}")

    moved = tasks.pop(from_index)
    tasks.insert(to_index, moved)
    state.store.upsert_tasks(replace(t, sort_order=i) for i, t in enumerate(tasks))
    return list_all_tasks(state)


def toggle_active(state: AppState, task_id: str) -> bool:
    task = state.store.get_task(task_id)
    if task is None:
        logger.info("toggle_active: no task id=%s", task_id)
        return False
    return state.store.set_task_active(task_id, not task.is_active)


# ---- history ----


def load_history(
    state: AppState, period: Period | str = Period.MONTH, *, today: date | None = None
) -> HistorySnapshot:
    period = period if isinstance(period, Period) else Period.parse(period)
    end = _today(today)
    start = end - timedelta(days=period.days)
    store = state.store
    threshold = state.streak_threshold

    scores = daily_score_series(store, start, end)
    # Streaks look at the whole history, not just the window.
    full = daily_score_series(store)

    tasks = store.list_tasks(active_only=True)
    return HistorySnapshot(
        period=period,
        start=start,
        end=end,
        scores=tuple(scores),
        current_streak=current_streak(full, today=end, threshold=threshold),
        best_streak=best_streak(full, threshold=threshold),
        average_score=average_score(scores),
        tasks=tuple(tasks),
        task_history={t.id: store.entries_for_task(t.id) for t in tasks},
    )


def task_scores(state: AppState, day: date | str) -> list[TaskBreakdown]:
    return task_breakdown(state.store, day)


# ---- tasks config file ----


def _config_path(state: AppState, path: str | Path | None) -> Path:
    if path is not None:
        return Path(path)
    return Path(getattr(state.settings, "tasks_config_path", "tasks_config.json"))


def save_tasks_config(state: AppState, path: str | Path | None = None) -> Path:
    target = _config_path(state, path)
    write_tasks_file(target, list_all_tasks(state))
    return target


def load_tasks_config(state: AppState, path: str | Path | None = None) -> list[TaskDefinition]:
    """Upsert every task from the config file (existing ids are replaced, entries kept)."""
    tasks = read_tasks_file(_config_path(state, path))
    state.store.upsert_tasks(tasks)
    return list_all_tasks(state)
