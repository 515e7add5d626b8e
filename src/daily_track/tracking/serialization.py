# src/daily_track/tracking/serialization.py

"""
JSON backup/restore for task definitions.

Every TaskDefinition field round-trips, including id and created_at, using the
camelCase keys of the tasks_config.json format:
id, name, benchmark, unit, weight, isCumulative, isCheckbox, sortOrder, isActive, createdAt.
Entries are not part of the format.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from ..core.errors import ValidationError
from .models import TaskDefinition

logger = logging.getLogger(__name__)

_FIELDS = (
    ("id", "id"),
    ("name", "name"),
    ("benchmark", "benchmark"),
    ("unit", "unit"),
    ("weight", "weight"),
    ("is_cumulative", "isCumulative"),
    ("is_checkbox", "isCheckbox"),
    ("sort_order", "sortOrder"),
    ("is_active", "isActive"),
    ("created_at", "createdAt"),
)


def task_to_record(task: TaskDefinition) -> dict[str, Any]:
    return {key: getattr(task, attr) for attr, key in _FIELDS}


def record_to_task(record: Any) -> TaskDefinition:
    if not isinstance(record, dict):
        raise ValidationError("record", f"expected an object, got {type(record).__name__}")
    for required in ("id", "name"):
        if required not in record:
            raise ValidationError(required, "missing from record")

    kwargs: dict[str, Any] = {}
    for attr, key in _FIELDS:
        if key in record:
            kwargs[attr] = record[key]

    for flag in ("is_cumulative", "is_checkbox", "is_active"):
        if flag in kwargs and not isinstance(kwargs[flag], bool):
            raise ValidationError(flag, f"must be a boolean, got {kwargs[flag]!r}")
    for attr in ("id", "name", "unit", "created_at"):
        if attr in kwargs and not isinstance(kwargs[attr], str):
            raise ValidationError(attr, f"must be a string, got {kwargs[attr]!r}")

    return TaskDefinition(**kwargs).validate()


def encode_tasks(tasks: Iterable[TaskDefinition]) -> str:
    return json.dumps([task_to_record(t) for t in tasks], ensure_ascii=False, indent=2)


def decode_tasks(text: str) -> list[TaskDefinition]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValidationError("tasks", f"invalid JSON: {exc.msg}") from exc
    if not isinstance(data, list):
        raise ValidationError("tasks", "expected a JSON list of task records")
    return [record_to_task(r) for r in data]


def write_tasks_file(path: str | Path, tasks: Iterable[TaskDefinition]) -> int:
    """Atomically write the task list to ``path``; returns the number of tasks written."""
    items = list(tasks)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(".tmp")
    tmp.write_text(encode_tasks(items), "utf-8")
    try:
        os.replace(tmp, path)
    except OSError:
        with contextlib.suppress(OSError):
            tmp.unlink()
        raise
    with contextlib.suppress(OSError):
        os.chmod(path, 0o600)
    logger.info("Saved tasks config: %d tasks to %s", len(items), path)
    return len(items)


def read_tasks_file(path: str | Path) -> list[TaskDefinition]:
    path = Path(path)
    tasks = decode_tasks(path.read_text("utf-8"))
    logger.info("Loaded tasks config: %d tasks from %s", len(tasks), path)
    return tasks
