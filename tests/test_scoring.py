# tests/test_scoring.py

from __future__ import annotations

import pytest

from daily_track.analytics.scoring import cumulative_ratio, daily_score, display_ratio, task_ratio
from daily_track.tracking.models import TaskDefinition

from .fakes import entry

DAY = "2026-01-05"


def test_weighted_mix_of_hours_and_checkbox() -> None:
    hours = TaskDefinition(name="Work", benchmark=4, weight=1)
    done = TaskDefinition(name="Gym", is_checkbox=True, weight=1)
    entries = [entry(hours, DAY, 2), entry(done, DAY, 1)]
    assert daily_score([hours, done], entries) == pytest.approx(0.75)


@pytest.mark.parametrize("value", [0.001, 1, 7, 1000])
def test_checkbox_counts_fully_regardless_of_magnitude(value: float) -> None:
    done = TaskDefinition(name="Gym", is_checkbox=True, benchmark=5, weight=3)
    other = TaskDefinition(name="Other", benchmark=1, weight=1)
    score = daily_score([done, other], [entry(done, DAY, value)])
    assert score == pytest.approx(3 / 4)
    assert task_ratio(done, value) == 1.0
    assert task_ratio(done, 0) == 0.0


def test_over_achievement_is_capped_in_score_but_not_display() -> None:
    hours = TaskDefinition(name="Work", benchmark=4)
    assert task_ratio(hours, 10) == 1.0
    assert display_ratio(hours, 10) == pytest.approx(2.5)
    assert daily_score([hours], [entry(hours, DAY, 10)]) == 1.0


def test_missing_entries_count_as_zero() -> None:
    a = TaskDefinition(name="A", benchmark=2)
    b = TaskDefinition(name="B", benchmark=2)
    assert daily_score([a, b], [entry(a, DAY, 2)]) == pytest.approx(0.5)


def test_cumulative_and_inactive_tasks_do_not_count() -> None:
    daily = TaskDefinition(name="Daily", benchmark=1)
    total = TaskDefinition(name="Total", benchmark=1, is_cumulative=True, weight=10)
    off = TaskDefinition(name="Off", benchmark=1, is_active=False, weight=10)
    entries = [entry(daily, DAY, 1), entry(total, DAY, 0), entry(off, DAY, 0)]
    assert daily_score([daily, total, off], entries) == 1.0


def test_degenerate_inputs_fall_back_to_zero() -> None:
    assert daily_score([], []) == 0.0
    weightless = TaskDefinition(name="W", benchmark=1, weight=0)
    assert daily_score([weightless], [entry(weightless, DAY, 1)]) == 0.0

    # rows written by older versions may carry a zero benchmark
    broken = TaskDefinition(name="B", benchmark=0)
    assert task_ratio(broken, 5) == 0.0
    assert display_ratio(broken, 5) == 0.0


def test_cumulative_ratio() -> None:
    study = TaskDefinition(name="Study", benchmark=10, is_cumulative=True)
    assert cumulative_ratio(study, 3.5) == pytest.approx(0.35)
    assert cumulative_ratio(study, 25) == pytest.approx(2.5)
    assert cumulative_ratio(TaskDefinition(name="x", benchmark=0, is_checkbox=True), 3) is None


def test_cumulative_checkbox_task() -> None:
    # Per-day view uses checkbox semantics; the cumulative view sums raw values.
    t = TaskDefinition(name="Clean", benchmark=4, is_checkbox=True, is_cumulative=True)
    assert task_ratio(t, 3) == 1.0
    assert cumulative_ratio(t, 3 + 2) == pytest.approx(1.25)
    # still excluded from the composite
    assert daily_score([t], [entry(t, DAY, 3)]) == 0.0
