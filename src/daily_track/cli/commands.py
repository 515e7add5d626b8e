# src/daily_track/cli/commands.py

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import date, timedelta

from ..analytics.aggregation import streak_summary
from ..core import service
from ..core.errors import ValidationError
from ..core.state import AppState
from ..tracking.models import TaskDefinition, format_day, parse_day

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)

_NUMBER_RE = re.compile(r"^-?\d+(?:[.,]\d+)?$")


class CommandRegistry:
    """Simple slash-command registry used by connectors (/help, /today, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.

        Validation problems are turned into a reply; storage errors propagate.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            return handler(state, args)
        except ValidationError as exc:
            logger.info("Command /%s rejected: %s", name, exc)
            return f"Invalid input ({exc})"

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- argument helpers ----


def _parse_day_arg(raw: str, *, today: date | None = None) -> date:
    today = today or date.today()
    s = raw.strip().lower()
    if s == "today":
        return today
    if s == "yesterday":
        return today - timedelta(days=1)
    return parse_day(s)


def _looks_like_day(raw: str) -> bool:
    s = raw.strip().lower()
    return s in {"today", "yesterday"} or bool(re.match(r"^\d{4}-\d{2}-\d{2}$", s))


def _split_day(args: list[str]) -> tuple[list[str], date]:
    if args and _looks_like_day(args[-1]):
        return args[:-1], _parse_day_arg(args[-1])
    return args, date.today()


def _parse_number(raw: str, field: str) -> float:
    if not _NUMBER_RE.match(raw):
        raise ValidationError(field, f"not a number: {raw!r}")
    return float(raw.replace(",", "."))


def resolve_task(state: AppState, ref: str, *, active_only: bool = False) -> TaskDefinition:
    """
    Find a task by 1-based list position or by name (case-insensitive).

    With ``active_only`` positions follow the day view (/today), which lists active tasks
    only, and an inactive task is rejected by name as well. Otherwise positions follow /tasks.
    """
    tasks = service.list_all_tasks(state)
    scope = [t for t in tasks if t.is_active] if active_only else tasks
    ref = ref.strip()
    if ref.isdigit():
        idx = int(ref) - 1
        if 0 <= idx < len(scope):
            return scope[idx]
        raise ValidationError("task", f"no task at position {ref}")
    for t in tasks:
        if t.name.lower() == ref.lower():
            if active_only and not t.is_active:
                raise ValidationError("task", f"{t.name!r} is inactive")
            return t
    raise ValidationError("task", f"no task named {ref!r}")


# ---- formatting ----


def _pct(x: float) -> str:
    return f"{x * 100:.0f}%"


def format_day_snapshot(snap: service.DaySnapshot) -> str:
    lines = [f"{format_day(snap.date)}  score {_pct(snap.daily_score)}  streak {snap.current_streak}"]
    for i, p in enumerate(snap.tasks, start=1):
        line = f"  {i}. {p.task.name}: {p.progress_text}"
        if p.task.is_cumulative and p.cumulative_total is not None:
            ratio = p.cumulative_ratio
            total = f"total {p.cumulative_total:g}"
            line += f" ({total}, {_pct(ratio)})" if ratio is not None else f" ({total})"
        elif not p.task.is_checkbox:
            line += f" ({_pct(p.daily_ratio)})"
        lines.append(line)
    return "\n".join(lines)


def _format_task_line(i: int, t: TaskDefinition) -> str:
    flags = []
    if t.is_checkbox:
        flags.append("checkbox")
    if t.is_cumulative:
        flags.append("cumulative")
    if not t.is_active:
        flags.append("inactive")
    suffix = f" [{', '.join(flags)}]" if flags else ""
    unit = f" {t.unit}" if t.unit else ""
    return f"  {i}. {t.name}: {t.benchmark:g}{unit}, weight {t.weight:g}{suffix}"


def format_tasks(tasks: list[TaskDefinition]) -> str:
    if not tasks:
        return "No tasks."
    return "\n".join(["Tasks:", *(_format_task_line(i, t) for i, t in enumerate(tasks, 1))])


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_today(state: AppState, args: list[str]) -> str:
    day = _parse_day_arg(args[0]) if args else date.today()
    return format_day_snapshot(service.load_day(state, day))


def cmd_set(state: AppState, args: list[str]) -> str:
    """
    /set <task> <value> [date]
    """
    rest, day = _split_day(args)
    if len(rest) < 2:
        return "Usage: /set <task> <value> [date]"
    value = _parse_number(rest[-1], "value")
    task = resolve_task(state, " ".join(rest[:-1]), active_only=True)
    return format_day_snapshot(service.update_value(state, day, task.id, value))


def cmd_toggle(state: AppState, args: list[str]) -> str:
    rest, day = _split_day(args)
    if not rest:
        return "Usage: /toggle <task> [date]"
    task = resolve_task(state, " ".join(rest), active_only=True)
    return format_day_snapshot(service.toggle_checkbox(state, day, task.id))


def cmd_tasks(state: AppState, args: list[str]) -> str:
    return format_tasks(service.list_all_tasks(state))


def cmd_add(state: AppState, args: list[str]) -> str:
    """
    /add <name> <benchmark> [unit] [--checkbox] [--cumulative] [--weight=W]
    """
    flags = [a for a in args if a.startswith("--")]
    words = [a for a in args if not a.startswith("--")]

    idx = next((i for i, w in enumerate(words) if _NUMBER_RE.match(w)), None)
    if idx is None or idx == 0:
        return "Usage: /add <name> <benchmark> [unit] [--checkbox] [--cumulative] [--weight=W]"

    weight = 1.0
    for f in flags:
        if f.startswith("--weight="):
            weight = _parse_number(f.split("=", 1)[1], "weight")

    task = TaskDefinition(
        name=" ".join(words[:idx]),
        benchmark=_parse_number(words[idx], "benchmark"),
        unit=" ".join(words[idx + 1 :]),
        weight=weight,
        is_checkbox="--checkbox" in flags,
        is_cumulative="--cumulative" in flags,
    ).validate()
    return format_tasks(service.add_task(state, task))


def cmd_activate(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /activate <task>"
    task = resolve_task(state, " ".join(args))
    service.toggle_active(state, task.id)
    return f"{task.name} is now {'inactive' if task.is_active else 'active'}."


def cmd_delete(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /delete <task>"
    task = resolve_task(state, " ".join(args))
    return format_tasks(service.delete_task(state, task.id))


def cmd_move(state: AppState, args: list[str]) -> str:
    if len(args) != 2 or not all(a.isdigit() for a in args):
        return "Usage: /move <from> <to>  (1-based positions)"
    return format_tasks(service.move_task(state, int(args[0]) - 1, int(args[1]) - 1))


def cmd_history(state: AppState, args: list[str]) -> str:
    default = service.Period.parse(getattr(state.settings, "history_period", None))
    period = service.Period.parse(args[0] if args else None, default)
    snap = service.load_history(state, period)

    lines = [
        f"History ({snap.period.value}, {format_day(snap.start)} .. {format_day(snap.end)}):",
        f"  days tracked {snap.total_days_tracked}, average {_pct(snap.average_score)}",
        f"  current streak {snap.current_streak}, best streak {snap.best_streak}",
    ]
    for s in snap.scores:
        bar = "#" * round(s.score * 20)
        lines.append(f"  {format_day(s.date)} {_pct(s.score):>4} {bar}")
    return "\n".join(lines)


def cmd_breakdown(state: AppState, args: list[str]) -> str:
    day = _parse_day_arg(args[0]) if args else date.today()
    rows = service.task_scores(state, day)
    lines = [f"Breakdown {format_day(day)}:"]
    for r in rows:
        lines.append(f"  {r.task.name}: {r.value:g} ({_pct(r.ratio)})")
    return "\n".join(lines)


def cmd_streak(state: AppState, args: list[str]) -> str:
    summary = streak_summary(state.store, today=date.today(), threshold=state.streak_threshold)
    return (
        f"Current streak: {summary.current} day(s)\n"
        f"Best streak: {summary.best} day(s)\n"
        f"Threshold: {_pct(summary.threshold)}"
    )


def cmd_export(state: AppState, args: list[str]) -> str:
    try:
        path = service.save_tasks_config(state, args[0] if args else None)
    except OSError as exc:
        logger.warning("Tasks export failed: %s", exc)
        return f"Cannot write tasks config at {exc.filename}: {exc.strerror}"
    return f"Tasks exported to {path}"


def cmd_import(state: AppState, args: list[str]) -> str:
    try:
        tasks = service.load_tasks_config(state, args[0] if args else None)
    except FileNotFoundError as exc:
        return f"No tasks config at {exc.filename}"
    except OSError as exc:
        logger.warning("Tasks import failed: %s", exc)
        return f"Cannot read tasks config at {exc.filename}: {exc.strerror}"
    return format_tasks(tasks)


registry.register("help", cmd_help, "show this help", aliases=["h", "?"])
registry.register("today", cmd_today, "show a day: /today [date|yesterday]", aliases=["day"])
registry.register("set", cmd_set, "record a value: /set <task> <value> [date]")
registry.register("toggle", cmd_toggle, "flip a checkbox task: /toggle <task> [date]")
registry.register("tasks", cmd_tasks, "list all tasks")
registry.register(
    "add", cmd_add, "add a task: /add <name> <benchmark> [unit] [--checkbox] [--cumulative]"
)
registry.register("activate", cmd_activate, "toggle a task active/inactive: /activate <task>")
registry.register("delete", cmd_delete, "delete a task and its entries: /delete <task>")
registry.register("move", cmd_move, "reorder: /move <from> <to>")
registry.register("history", cmd_history, "scores for week|month|quarter|year")
registry.register("breakdown", cmd_breakdown, "per-task values and ratios: /breakdown [date]")
registry.register("streak", cmd_streak, "current and best streak")
registry.register("export", cmd_export, "write tasks config JSON: /export [path]")
registry.register("import", cmd_import, "load tasks config JSON: /import [path]")
