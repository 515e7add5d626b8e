# src/daily_track/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the analytics and command layers.

Callers receive a store handle explicitly instead of reaching for a process-wide one.
TrackStore satisfies TrackRepo; tests may pass in-memory fakes.
"""

from collections.abc import Iterable
from datetime import date
from typing import Protocol

from ..tracking.models import DailyEntry, TaskDefinition


class TrackRepo(Protocol):
    def close(self) -> None: ...

    # Tasks
    def count_tasks(self) -> int: ...
    def list_tasks(self, *, active_only: bool = True) -> list[TaskDefinition]: ...
    def get_task(self, task_id: str) -> TaskDefinition | None: ...
    def upsert_task(self, task: TaskDefinition) -> None: ...
    def upsert_tasks(self, tasks: Iterable[TaskDefinition]) -> int: ...
    def update_task(self, task: TaskDefinition) -> bool: ...
    def set_task_active(self, task_id: str, active: bool) -> bool: ...
    def delete_task(self, task_id: str) -> None: ...

    # Entries
    def entries_for_date(self, day: date | str) -> list[DailyEntry]: ...
    def entries_for_task(self, task_id: str) -> list[DailyEntry]: ...
    def entries_between(
            self,
            start: date | str | None = None,
            end: date | str | None = None,
    ) -> list[DailyEntry]: ...
    def upsert_entry(self, entry: DailyEntry) -> DailyEntry: ...
    def upsert_entries(self, entries: Iterable[DailyEntry]) -> int: ...

    # Analytics support
    def cumulative_total(self, task_id: str) -> float: ...
    def distinct_entry_dates(self) -> list[date]: ...

    # Key/value config
    def get_config(self, key: str) -> str | None: ...
    def set_config(self, key: str, value: str) -> None: ...
