# tests/test_aggregation.py

from __future__ import annotations

from datetime import date

import pytest

from daily_track.analytics.aggregation import (
    average_score,
    daily_score_series,
    streak_summary,
    task_breakdown,
)
from daily_track.tracking.models import DayScore, TaskDefinition

from .fakes import FakeTrackRepo, entry


@pytest.fixture()
def tasks() -> dict[str, TaskDefinition]:
    return {
        "work": TaskDefinition(name="Work", benchmark=4, sort_order=0),
        "gym": TaskDefinition(name="Gym", is_checkbox=True, sort_order=1),
        "study": TaskDefinition(name="Study", benchmark=100, is_cumulative=True, sort_order=2),
        "old": TaskDefinition(name="Old", benchmark=1, is_active=False, sort_order=3),
    }


def test_series_omits_days_without_scored_entries(tasks) -> None:
    repo = FakeTrackRepo(
        tasks.values(),
        [
            entry(tasks["work"], "2026-01-05", 4),
            entry(tasks["gym"], "2026-01-05", 1),
            # only cumulative/inactive activity on the 6th
            entry(tasks["study"], "2026-01-06", 3),
            entry(tasks["old"], "2026-01-06", 1),
            entry(tasks["work"], "2026-01-07", 2),
        ],
    )

    got = daily_score_series(repo, "2026-01-05", "2026-01-07")
    assert [s.date for s in got] == [date(2026, 1, 5), date(2026, 1, 7)]
    assert got[0].score == pytest.approx(1.0)
    # gym has no entry on the 7th and counts as zero
    assert got[1].score == pytest.approx(0.25)


def test_series_respects_range(tasks) -> None:
    repo = FakeTrackRepo(
        tasks.values(),
        [entry(tasks["work"], d, 4) for d in ("2026-01-04", "2026-01-05", "2026-01-09")],
    )
    got = daily_score_series(repo, date(2026, 1, 5), date(2026, 1, 8))
    assert [s.date for s in got] == [date(2026, 1, 5)]
    assert len(daily_score_series(repo)) == 3


def test_average_score() -> None:
    assert average_score([]) == 0.0
    s = [DayScore(date(2026, 1, 1), 0.5), DayScore(date(2026, 1, 2), 1.0)]
    assert average_score(s) == pytest.approx(0.75)


def test_breakdown_lists_every_task_with_uncapped_ratio(tasks) -> None:
    repo = FakeTrackRepo(tasks.values(), [entry(tasks["work"], "2026-01-05", 6)])
    rows = task_breakdown(repo, "2026-01-05")

    assert [r.task.name for r in rows] == ["Work", "Gym", "Study", "Old"]
    assert rows[0].value == 6
    assert rows[0].ratio == pytest.approx(1.5)
    assert all(r.value == 0 and r.ratio == 0 for r in rows[1:])


def test_streak_summary_over_store(tasks) -> None:
    work = tasks["work"]
    repo = FakeTrackRepo(
        tasks.values(),
        [
            entry(work, "2026-01-05", 4),
            entry(tasks["gym"], "2026-01-05", 1),
            entry(work, "2026-01-06", 4),
            entry(tasks["gym"], "2026-01-06", 1),
            entry(work, "2026-01-07", 0),
        ],
    )
    summary = streak_summary(repo, today=date(2026, 1, 6))
    assert (summary.current, summary.best) == (2, 2)
    assert streak_summary(repo, today=date(2026, 1, 7)).current == 0
