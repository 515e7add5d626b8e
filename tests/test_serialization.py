# tests/test_serialization.py

from __future__ import annotations

import json
from pathlib import Path

import pytest

from daily_track.core.errors import ValidationError
from daily_track.tracking.models import TaskDefinition
from daily_track.tracking.serialization import (
    decode_tasks,
    encode_tasks,
    read_tasks_file,
    write_tasks_file,
)
from daily_track.tracking.store import TrackStore


def _sample() -> list[TaskDefinition]:
    return [
        TaskDefinition(name="Work", benchmark=4, unit="h", weight=2, sort_order=0),
        TaskDefinition(name="Gym", is_checkbox=True, sort_order=1, is_active=False),
        TaskDefinition(name="Study", benchmark=100, is_cumulative=True, sort_order=1),
    ]


def test_decode_encode_is_lossless() -> None:
    tasks = _sample()
    assert decode_tasks(encode_tasks(tasks)) == tasks


def test_record_uses_config_file_keys() -> None:
    record = json.loads(encode_tasks(_sample()[:1]))[0]
    assert set(record) == {
        "id",
        "name",
        "benchmark",
        "unit",
        "weight",
        "isCumulative",
        "isCheckbox",
        "sortOrder",
        "isActive",
        "createdAt",
    }


def test_restore_into_fresh_store_reproduces_listing(tmp_path: Path) -> None:
    src = TrackStore(tmp_path / "a.sqlite3")
    src.upsert_tasks(_sample())
    dumped = encode_tasks(src.list_tasks(active_only=False))

    dst = TrackStore(tmp_path / "b.sqlite3")
    dst.upsert_tasks(decode_tasks(dumped))
    assert dst.list_tasks(active_only=False) == src.list_tasks(active_only=False)


def test_file_roundtrip(tmp_path: Path) -> None:
    path = tmp_path / "cfg" / "tasks_config.json"
    tasks = _sample()
    assert write_tasks_file(path, tasks) == 3
    assert read_tasks_file(path) == tasks
    assert not path.with_suffix(".tmp").exists()


@pytest.mark.parametrize(
    "text",
    [
        "not json",
        '{"id": "x"}',
        '[{"name": "no id"}]',
        '[{"id": "x", "name": ""}]',
        '[{"id": "x", "name": "n", "isCheckbox": "yes"}]',
        '[{"id": "x", "name": "n", "benchmark": -2}]',
        "[1]",
        '[{"id": "x", "name": "n", "benchmark": "4"}]',
        '[{"id": "x", "name": "n", "weight": true}]',
        '[{"id": "x", "name": "n", "sortOrder": "2"}]',
    ],
)
def test_decode_rejects_malformed(text: str) -> None:
    with pytest.raises(ValidationError):
        decode_tasks(text)


def test_decode_fills_optional_fields() -> None:
    (task,) = decode_tasks('[{"id": "T1", "name": "Minimal"}]')
    assert task.id == "T1"
    assert task.benchmark == 1.0
    assert task.is_active is True


def test_decoded_numbers_are_floats() -> None:
    (task,) = decode_tasks('[{"id": "T1", "name": "Run", "benchmark": 4, "weight": 2}]')
    assert (task.benchmark, task.weight) == (4.0, 2.0)
    assert isinstance(task.benchmark, float) and isinstance(task.weight, float)
