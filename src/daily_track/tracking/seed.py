# src/daily_track/tracking/seed.py

"""
First-run bootstrap: a starter task set plus a short history (2026-01-05 .. 2026-01-23).

Runs only against an empty task table, so calling it again is a no-op.
"""

from __future__ import annotations

import logging
from datetime import date

from ..core.ports import TrackRepo
from .models import DailyEntry, TaskDefinition, parse_day, utc_now_iso

logger = logging.getLogger(__name__)

_NAMES = (
    "Nebenprojekt",
    "Aktuarwissenschaft",
    "Putzen",
    "Bewerben",
    "Municipal Analytics",
    "Training",
    "Schach/Lesen",
)


def starter_tasks() -> list[TaskDefinition]:
    return [
        TaskDefinition(name="Nebenprojekt", benchmark=1.0, unit="hour", sort_order=0),
        TaskDefinition(
            name="Aktuarwissenschaft", benchmark=1.0, unit="hour", is_cumulative=True, sort_order=1
        ),
        TaskDefinition(name="Putzen", benchmark=1.0, unit="chore", is_checkbox=True, sort_order=2),
        TaskDefinition(name="Bewerben", benchmark=1.0, unit="application", sort_order=3),
        TaskDefinition(name="Municipal Analytics", benchmark=4.0, unit="hours", sort_order=4),
        TaskDefinition(name="Training", benchmark=1.0, unit="workout", is_checkbox=True, sort_order=5),
        TaskDefinition(name="Schach/Lesen", benchmark=1.0, unit="game/chapter", sort_order=6),
    ]


def _row(day: str, *values: float) -> tuple[str, tuple[float, ...]]:
    return day, values


# One row per day, values in _NAMES order.
_HISTORY = (
    _row("2026-01-05", 0, 0, 0, 0, 4.25, 0, 0),
    _row("2026-01-06", 0, 0, 1, 0, 6.25, 0, 1),
    _row("2026-01-07", 0, 0, 0, 0, 0, 0, 1),
    _row("2026-01-08", 0, 1, 1, 0, 5.75, 1, 1),
    _row("2026-01-09", 0, 0, 1, 2, 0.75, 0, 1),
    _row("2026-01-12", 0, 0, 1, 0, 0, 1, 1),
    _row("2026-01-13", 2, 0, 0, 1, 0, 0, 2),
    _row("2026-01-14", 0, 0, 1, 0, 0, 1, 1),
    _row("2026-01-15", 0, 0, 0, 0, 0.5, 0, 1),
    _row("2026-01-16", 1, 0, 2, 3, 1.5, 1, 1),
    _row("2026-01-19", 2, 0, 1, 0, 0, 0, 1),
    _row("2026-01-20", 0, 0, 1, 0, 0, 1, 1),
    _row("2026-01-21", 0, 0, 1, 1, 4.5, 1, 0),
    _row("2026-01-22", 0, 0, 0, 0, 3.25, 1, 1),
    _row("2026-01-23", 2, 0, 0, 2, 4.0, 0, 1),
)


def historical_triples() -> list[tuple[str, date, float]]:
    """(task_name, date, value) triples resolved to task ids at seed time."""
    out: list[tuple[str, date, float]] = []
    for day, values in _HISTORY:
        d = parse_day(day)
        out.extend((name, d, float(v)) for name, v in zip(_NAMES, values, strict=True))
    return out


def seed_if_needed(store: TrackRepo, *, with_history: bool = True) -> bool:
    """Seed an empty store. Returns True when anything was written."""
    if store.count_tasks() > 0:
        logger.debug("Seed skipped: task list is not empty")
        return False

    tasks = starter_tasks()
    store.upsert_tasks(tasks)

    n_entries = 0
    if with_history:
        by_name = {t.name: t.id for t in store.list_tasks(active_only=False)}
        entries: list[DailyEntry] = []
        for name, day, value in historical_triples():
            task_id = by_name.get(name)
            if task_id is None:
                logger.warning("Seed: no task named %r, skipping %s", name, day)
                continue
            entries.append(DailyEntry(task_id=task_id, date=day, value=value))
        n_entries = store.upsert_entries(entries)

    store.set_config("seeded_at", utc_now_iso())
    logger.info("Seeded %d tasks and %d entries", len(tasks), n_entries)
    return True
