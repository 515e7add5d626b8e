# tests/conftest.py

from __future__ import annotations

from datetime import date
from pathlib import Path
from types import SimpleNamespace

import pytest

from daily_track.core.state import AppState
from daily_track.tracking.models import TaskDefinition
from daily_track.tracking.store import TrackStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the command layer.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="dailytrack-test",
        data_dir=tmp_path,
        db_path=tmp_path / "dailytrack.sqlite3",
        tasks_config_path=tmp_path / "tasks_config.json",
        streak_threshold=0.7,
        history_period="month",
        seed_on_start=False,
        seed_history=False,
        console_enabled=False,
    )


@pytest.fixture()
def store(settings: SimpleNamespace) -> TrackStore:
    # Real SQLite: upsert/cascade semantics are part of what we test.
    return TrackStore(settings.db_path)


@pytest.fixture()
def state(settings: SimpleNamespace, store: TrackStore) -> AppState:
    return AppState(settings=settings, store=store)


@pytest.fixture()
def reading(store: TrackStore) -> TaskDefinition:
    task = TaskDefinition(name="Reading", benchmark=4.0, unit="h", sort_order=0)
    store.upsert_task(task)
    return task


@pytest.fixture()
def workout(store: TrackStore) -> TaskDefinition:
    task = TaskDefinition(name="Workout", is_checkbox=True, sort_order=1)
    store.upsert_task(task)
    return task

