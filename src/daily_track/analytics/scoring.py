# src/daily_track/analytics/scoring.py

"""
Daily composite score.

Only active, non-cumulative tasks take part. Each task contributes a ratio in [0, 1]
weighted by its weight; missing entries count as value 0. Degenerate inputs
(no tasks, zero total weight, non-positive benchmark) resolve to 0 instead of raising.
"""

from __future__ import annotations

from collections.abc import Iterable

from ..tracking.models import DailyEntry, TaskDefinition


def counts_toward_score(task: TaskDefinition) -> bool:
    return task.is_active and not task.is_cumulative


def task_ratio(task: TaskDefinition, value: float) -> float:
    """Capped per-task ratio used for the composite score."""
    if task.is_checkbox:
        return 1.0 if value > 0 else 0.0
    if task.benchmark <= 0:
        return 0.0
    return min(value / task.benchmark, 1.0)


def display_ratio(task: TaskDefinition, value: float) -> float:
    """Uncapped ``value / benchmark`` for display; over-achievement shows as > 1."""
    if task.benchmark <= 0:
        return 0.0
    return value / task.benchmark


def cumulative_ratio(task: TaskDefinition, total: float) -> float | None:
    """All-time total against the benchmark, uncapped; None when benchmark <= 0."""
    if task.benchmark <= 0:
        return None
    return total / task.benchmark


def daily_score(tasks: Iterable[TaskDefinition], entries: Iterable[DailyEntry]) -> float:
    """Weighted mean of capped ratios for one day's entries."""
    values = {e.task_id: e.value for e in entries}

    weighted = 0.0
    total_weight = 0.0
    for task in tasks:
        if not counts_toward_score(task):
            continue
        ratio = task_ratio(task, values.get(task.id, 0.0))
        weighted += ratio * task.weight
        total_weight += task.weight

    if total_weight <= 0:
        return 0.0
    return weighted / total_weight
