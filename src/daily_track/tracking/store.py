# src/daily_track/tracking/store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import time
from collections.abc import Iterable, Iterator
from datetime import date
from pathlib import Path

from ..core.errors import StorageError, ValidationError
from .models import DailyEntry, TaskDefinition, coerce_day, format_day, parse_day, utc_now_iso

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "1"

_TASK_COLUMNS = (
    "id, name, benchmark, unit, weight, is_cumulative, is_checkbox, "
    "sort_order, is_active, created_at"
)
_ENTRY_COLUMNS = "id, task_id, date, value, notes"


class TrackStore:
    """
    SQLite store for task definitions and daily entries.

    Schema:
    - tasks(id TEXT PK, ...)
    - daily_entries(id TEXT PK, task_id FK ON DELETE CASCADE, UNIQUE(task_id, date))
    - config(key TEXT PK, value TEXT)

    Every public method opens its own connection and runs exactly one transaction,
    so a reader never sees a half-written row. Any sqlite3 failure surfaces as
    StorageError; an empty result is always an empty list, never an error.
    """

    def __init__(self, db_path: str | Path = "dailytrack.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_schema()
        try:
            total = self.count_tasks()
        except StorageError:
            total = -1
        logger.info("TrackStore ready db=%s tasks=%s", self._db_path, total)

    @property
    def db_path(self) -> Path:
        return self._db_path

    def close(self) -> None:
        """Compatibility hook for shutdown (no persistent connections to close)."""
        return

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        # Cascade on task delete depends on this pragma; it must not be skipped.
        conn.execute("PRAGMA foreign_keys=ON")
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    @contextlib.contextmanager
    def _tx(self, op: str) -> Iterator[sqlite3.Cursor]:
        """Run one operation as a single transaction; commit on success, roll back otherwise."""
        conn: sqlite3.Connection | None = None
        try:
            conn = self._get_conn()
            with conn:
                yield conn.cursor()
        except sqlite3.Error as exc:
            logger.exception("TrackStore %s failed db=%s", op, self._db_path)
            raise StorageError(f"{op} failed: {exc}") from exc
        finally:
            if conn is not None:
                conn.close()

    def _ensure_schema(self) -> None:
        with self._tx("ensure_schema") as cur:
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL,
                    benchmark REAL NOT NULL DEFAULT 1.0,
                    unit TEXT NOT NULL DEFAULT '',
                    weight REAL NOT NULL DEFAULT 1.0,
                    is_cumulative INTEGER NOT NULL DEFAULT 0,
                    is_checkbox INTEGER NOT NULL DEFAULT 0,
                    sort_order INTEGER NOT NULL DEFAULT 0,
                    is_active INTEGER NOT NULL DEFAULT 1,
                    created_at TEXT NOT NULL,
                    updated_at REAL NOT NULL
                )
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS daily_entries (
                    id TEXT PRIMARY KEY,
                    task_id TEXT NOT NULL,
                    date TEXT NOT NULL,
                    value REAL NOT NULL DEFAULT 0.0,
                    notes TEXT,
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL,
                    FOREIGN KEY (task_id) REFERENCES tasks(id) ON DELETE CASCADE,
                    UNIQUE (task_id, date)
                )
                """
            )
            cur.execute("CREATE INDEX IF NOT EXISTS idx_entries_date ON daily_entries(date)")
            cur.execute(
                "CREATE INDEX IF NOT EXISTS idx_entries_task_date ON daily_entries(task_id, date)"
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS config (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )
            cur.execute(
                "INSERT OR IGNORE INTO config(key, value) VALUES ('schema_version', ?)",
                (SCHEMA_VERSION,),
            )

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> TaskDefinition:
        return TaskDefinition(
            id=str(row["id"]),
            name=str(row["name"]),
            benchmark=float(row["benchmark"]),
            unit=str(row["unit"] or ""),
            weight=float(row["weight"]),
            is_cumulative=bool(row["is_cumulative"]),
            is_checkbox=bool(row["is_checkbox"]),
            sort_order=int(row["sort_order"]),
            is_active=bool(row["is_active"]),
            created_at=str(row["created_at"] or ""),
        )

    @staticmethod
    def _parse_stored_day(raw: str) -> date:
        try:
            return parse_day(raw)
        except ValidationError as exc:
            raise StorageError(f"corrupt date key in store: {raw!r}") from exc

    def _row_to_entry(self, row: sqlite3.Row) -> DailyEntry:
        return DailyEntry(
            id=str(row["id"]),
            task_id=str(row["task_id"]),
            date=self._parse_stored_day(row["date"]),
            value=float(row["value"] or 0.0),
            notes=row["notes"],
        )

    @staticmethod
    def _task_params(task: TaskDefinition, now: float) -> tuple:
        return (
            task.id,
            task.name.strip(),
            float(task.benchmark),
            task.unit or "",
            float(task.weight),
            int(bool(task.is_cumulative)),
            int(bool(task.is_checkbox)),
            int(task.sort_order),
            int(bool(task.is_active)),
            task.created_at or utc_now_iso(),
            now,
        )

    def _upsert_task_rows(self, cur: sqlite3.Cursor, tasks: Iterable[TaskDefinition]) -> int:
        # ON CONFLICT ... DO UPDATE keeps the row in place; INSERT OR REPLACE would delete it
        # first and cascade away the task's entries. created_at is immutable.
        now = time.time()
        n = 0
        for task in tasks:
            task.validate()
            cur.execute(
                f"""
                INSERT INTO tasks({_TASK_COLUMNS}, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    name = excluded.name,
                    benchmark = excluded.benchmark,
                    unit = excluded.unit,
                    weight = excluded.weight,
                    is_cumulative = excluded.is_cumulative,
                    is_checkbox = excluded.is_checkbox,
                    sort_order = excluded.sort_order,
                    is_active = excluded.is_active,
                    updated_at = excluded.updated_at
                """,
                self._task_params(task, now),
            )
            n += 1
        return n

    def _upsert_entry_row(self, cur: sqlite3.Cursor, entry: DailyEntry, now: float) -> str:
        cur.execute("SELECT 1 FROM tasks WHERE id = ?", (entry.task_id,))
        if cur.fetchone() is None:
            raise ValidationError("task_id", f"unknown task {entry.task_id!r}")
        cur.execute(
            f"""
            INSERT INTO daily_entries({_ENTRY_COLUMNS}, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT(task_id, date) DO UPDATE SET
                value = excluded.value,
                notes = excluded.notes,
                updated_at = excluded.updated_at
            """,
            (entry.id, entry.task_id, entry.day_key, float(entry.value), entry.notes, now, now),
        )
        cur.execute(
            "SELECT id FROM daily_entries WHERE task_id = ? AND date = ?",
            (entry.task_id, entry.day_key),
        )
        (stored_id,) = cur.fetchone()
        return str(stored_id)

    # ---- tasks ----

    def count_tasks(self) -> int:
        with self._tx("count_tasks") as cur:
            cur.execute("SELECT COUNT(*) FROM tasks")
            (n,) = cur.fetchone()
            return int(n)

    def list_tasks(self, *, active_only: bool = True) -> list[TaskDefinition]:
        """Tasks ordered by (sort_order, name)."""
        where = "WHERE is_active = 1" if active_only else ""
        with self._tx("list_tasks") as cur:
            cur.execute(f"SELECT {_TASK_COLUMNS} FROM tasks {where} ORDER BY sort_order, name")
            return [self._row_to_task(r) for r in cur.fetchall()]

    def get_task(self, task_id: str) -> TaskDefinition | None:
        with self._tx("get_task") as cur:
            cur.execute(f"SELECT {_TASK_COLUMNS} FROM tasks WHERE id = ?", (task_id,))
            row = cur.fetchone()
            return self._row_to_task(row) if row else None

    def upsert_task(self, task: TaskDefinition) -> None:
        """Insert the task, or replace every mutable field of the row with the same id."""
        task.validate()
        with self._tx("upsert_task") as cur:
            self._upsert_task_rows(cur, [task])
        logger.debug("Task upserted id=%s name=%s", task.id, task.name)

    def upsert_tasks(self, tasks: Iterable[TaskDefinition]) -> int:
        """Upsert many tasks atomically (reorder, import, seed)."""
        items = [t.validate() for t in tasks]
        with self._tx("upsert_tasks") as cur:
            n = self._upsert_task_rows(cur, items)
        logger.debug("Tasks upserted n=%s", n)
        return n

    def update_task(self, task: TaskDefinition) -> bool:
        """
        Replace an existing task's mutable fields.

        Returns False (and writes nothing) when no row has ``task.id``.
        """
        task.validate()
        with self._tx("update_task") as cur:
            cur.execute("SELECT 1 FROM tasks WHERE id = ?", (task.id,))
            if cur.fetchone() is None:
                logger.info("update_task: no task id=%s", task.id)
                return False
            self._upsert_task_rows(cur, [task])
            return True

    def set_task_active(self, task_id: str, active: bool) -> bool:
        with self._tx("set_task_active") as cur:
            cur.execute(
                "UPDATE tasks SET is_active = ?, updated_at = ? WHERE id = ?",
                (int(bool(active)), time.time(), task_id),
            )
            return cur.rowcount == 1

    def delete_task(self, task_id: str) -> None:
        """Delete the task and (via cascade) its entries. Unknown ids are a no-op."""
        with self._tx("delete_task") as cur:
            cur.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
            deleted = cur.rowcount
        logger.debug("Task delete id=%s deleted=%s", task_id, deleted)

    # ---- entries ----

    def entries_for_date(self, day: date | str) -> list[DailyEntry]:
        """All entries recorded on ``day``, in insertion order."""
        key = format_day(coerce_day(day))
        with self._tx("entries_for_date") as cur:
            cur.execute(
                f"""
                SELECT {_ENTRY_COLUMNS}
                FROM daily_entries
                WHERE date = ?
                ORDER BY created_at, rowid
                """,
                (key,),
            )
            return [self._row_to_entry(r) for r in cur.fetchall()]

    def entries_for_task(self, task_id: str) -> list[DailyEntry]:
        with self._tx("entries_for_task") as cur:
            cur.execute(
                f"SELECT {_ENTRY_COLUMNS} FROM daily_entries WHERE task_id = ? ORDER BY date",
                (task_id,),
            )
            return [self._row_to_entry(r) for r in cur.fetchall()]

    def entries_between(
        self, start: date | str | None = None, end: date | str | None = None
    ) -> list[DailyEntry]:
        """Entries with start <= date <= end (either bound optional), ordered by date."""
        clauses: list[str] = []
        params: list[str] = []
        if start is not None:
            clauses.append("date >= ?")
            params.append(format_day(coerce_day(start)))
        if end is not None:
            clauses.append("date <= ?")
            params.append(format_day(coerce_day(end)))
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with self._tx("entries_between") as cur:
            cur.execute(
                f"""
                SELECT {_ENTRY_COLUMNS}
                FROM daily_entries
                {where}
                ORDER BY date, created_at, rowid
                """,
                params,
            )
            return [self._row_to_entry(r) for r in cur.fetchall()]

    def upsert_entry(self, entry: DailyEntry) -> DailyEntry:
        """
        Insert the entry, or update value/notes of the existing (task_id, date) row.

        The stored id survives repeated upserts; the returned entry carries it.
        """
        entry.validate()
        with self._tx("upsert_entry") as cur:
            stored_id = self._upsert_entry_row(cur, entry, time.time())
        logger.debug(
            "Entry upserted id=%s task=%s date=%s value=%s",
            stored_id,
            entry.task_id,
            entry.day_key,
            entry.value,
        )
        return DailyEntry(
            id=stored_id,
            task_id=entry.task_id,
            date=entry.date,
            value=entry.value,
            notes=entry.notes,
        )

    def upsert_entries(self, entries: Iterable[DailyEntry]) -> int:
        items = [e.validate() for e in entries]
        now = time.time()
        with self._tx("upsert_entries") as cur:
            for e in items:
                self._upsert_entry_row(cur, e, now)
        logger.debug("Entries upserted n=%s", len(items))
        return len(items)

    # ---- analytics support ----

    def cumulative_total(self, task_id: str) -> float:
        """Sum of all values for the task, regardless of date or active state."""
        with self._tx("cumulative_total") as cur:
            cur.execute(
                "SELECT COALESCE(SUM(value), 0) FROM daily_entries WHERE task_id = ?",
                (task_id,),
            )
            (total,) = cur.fetchone()
            return float(total or 0.0)

    def distinct_entry_dates(self) -> list[date]:
        with self._tx("distinct_entry_dates") as cur:
            cur.execute("SELECT DISTINCT date FROM daily_entries ORDER BY date")
            return [self._parse_stored_day(r[0]) for r in cur.fetchall()]

    # ---- key/value config ----

    def get_config(self, key: str) -> str | None:
        with self._tx("get_config") as cur:
            cur.execute("SELECT value FROM config WHERE key = ?", (key,))
            row = cur.fetchone()
            return str(row[0]) if row else None

    def set_config(self, key: str, value: str) -> None:
        if not key:
            raise ValidationError("key", "is required")
        with self._tx("set_config") as cur:
            cur.execute(
                """
                INSERT INTO config(key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value
                """,
                (key, str(value)),
            )
