# src/daily_track/tracking/models.py

from __future__ import annotations

import math
import re
import uuid
from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import Any

from ..core.errors import ValidationError

_DAY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def new_id() -> str:
    return str(uuid.uuid4()).upper()


def utc_now_iso() -> str:
    return datetime.now(UTC).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def parse_day(raw: str) -> date:
    """Parse a canonical ``YYYY-MM-DD`` key into a calendar date."""
    s = str(raw or "").strip()
    if not _DAY_RE.match(s):
        raise ValidationError("date", f"expected YYYY-MM-DD, got {raw!r}")
    try:
        return date.fromisoformat(s)
    except ValueError as exc:
        raise ValidationError("date", f"not a calendar date: {raw!r}") from exc


def format_day(day: date) -> str:
    return day.isoformat()


def coerce_day(value: date | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_day(value)


def _check_number(name: str, value: Any) -> float:
    # bool is an int subclass; numeric strings are not accepted either.
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ValidationError(name, f"not a number: {value!r}")
    f = float(value)
    if not math.isfinite(f):
        raise ValidationError(name, "must be finite")
    if f < 0:
        raise ValidationError(name, "must not be negative")
    return f


@dataclass(slots=True)
class TaskDefinition:
    """A recurring goal tracked per day (or as an all-time total when cumulative)."""

    name: str
    benchmark: float = 1.0
    unit: str = ""
    weight: float = 1.0
    is_cumulative: bool = False
    is_checkbox: bool = False
    sort_order: int = 0
    is_active: bool = True
    id: str = field(default_factory=new_id)
    created_at: str = field(default_factory=utc_now_iso)

    def validate(self) -> TaskDefinition:
        if not self.id or not str(self.id).strip():
            raise ValidationError("id", "is required")
        if not self.name or not self.name.strip():
            raise ValidationError("name", "must not be empty")
        self.benchmark = _check_number("benchmark", self.benchmark)
        # Checkbox tasks ignore the benchmark, so zero is tolerated there.
        if self.benchmark == 0 and not self.is_checkbox:
            raise ValidationError("benchmark", "must be positive")
        self.weight = _check_number("weight", self.weight)
        if isinstance(self.sort_order, bool) or not isinstance(self.sort_order, int):
            raise ValidationError("sort_order", f"must be an integer, got {self.sort_order!r}")
        return self


@dataclass(slots=True)
class DailyEntry:
    """One recorded value for one task on one calendar day."""

    task_id: str
    date: date
    value: float = 0.0
    notes: str | None = None
    id: str = field(default_factory=new_id)

    def validate(self) -> DailyEntry:
        if not self.task_id or not str(self.task_id).strip():
            raise ValidationError("task_id", "is required")
        self.date = coerce_day(self.date)
        self.value = _check_number("value", self.value)
        return self

    @property
    def day_key(self) -> str:
        return format_day(self.date)

    def completion_ratio(self, benchmark: float) -> float:
        """Uncapped ``value / benchmark``; 0 when the benchmark is not positive."""
        if benchmark <= 0:
            return 0.0
        return self.value / benchmark


@dataclass(frozen=True, slots=True)
class DayScore:
    date: date
    score: float
