# tests/test_commands.py

from __future__ import annotations

from datetime import date

from daily_track.cli.bootstrap import create_initial_state
from daily_track.cli.commands import CommandRegistry, registry
from daily_track.connectors.console_connector import handle_line, run_console_loop
from daily_track.core.errors import ValidationError


def test_command_registry_routes_and_aliases(state) -> None:
    reg = CommandRegistry()
    seen: list[list[str]] = []

    def h(state, args):
        seen.append(args)
        return "ok"

    reg.register("Ping", h, "ping", aliases=["p"])

    assert reg.handle(state, "/ping a b") == "ok"
    assert reg.handle(state, "/P") == "ok"
    assert seen == [["a", "b"], []]
    assert "/ping - ping" in reg.build_help()


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_validation_error_becomes_reply(state) -> None:
    reg = CommandRegistry()

    def bad(state, args):
        raise ValidationError("value", "must be >= 0")

    reg.register("bad", bad, "bad")
    assert reg.handle(state, "/bad") == "Invalid input (value: must be >= 0)"


def test_set_by_name_and_position(state, store, reading, workout) -> None:
    out = registry.handle(state, "/set Reading 2 2026-01-05") or ""
    assert "1. Reading: 2 / 4 h (50%)" in out

    out = registry.handle(state, "/set 1 2,5 2026-01-05") or ""
    assert "2.5 / 4 h" in out
    assert store.entries_for_date("2026-01-05")[0].value == 2.5


def test_set_rejects_bad_input(state, reading) -> None:
    assert registry.handle(state, "/set Reading abc") == "Invalid input (value: not a number: 'abc')"
    assert "no task named 'Nobody'" in (registry.handle(state, "/set Nobody 1 2026-01-05") or "")
    assert (registry.handle(state, "/set Reading") or "").startswith("Usage:")


def test_toggle_checkbox_command(state, workout) -> None:
    out = registry.handle(state, "/toggle workout 2026-01-05") or ""
    assert "Workout: Done" in out


def test_add_and_list_tasks(state, reading) -> None:
    out = registry.handle(state, "/add Deep Work 3 hours --weight=2") or ""
    assert "2. Deep Work: 3 hours, weight 2" in out

    out = registry.handle(state, "/add Stretch 1 --checkbox") or ""
    assert "3. Stretch: 1, weight 1 [checkbox]" in out

    assert (registry.handle(state, "/add 3") or "").startswith("Usage:")


def test_activate_move_delete(state, reading, workout) -> None:
    assert registry.handle(state, "/activate Reading") == "Reading is now inactive."
    assert "[inactive]" in (registry.handle(state, "/tasks") or "")

    out = registry.handle(state, "/move 2 1") or ""
    assert out.index("Workout") < out.index("Reading")

    out = registry.handle(state, "/delete Reading") or ""
    assert "Reading" not in out


def test_history_breakdown_and_streak(state, reading) -> None:
    assert "History (week" in (registry.handle(state, "/history week") or "")
    assert "Invalid input (period:" in (registry.handle(state, "/history decade") or "")
    assert "Reading: 0 (0%)" in (registry.handle(state, "/breakdown 2026-01-05") or "")
    assert "Threshold: 70%" in (registry.handle(state, "/streak") or "")


def test_export_and_import(state, settings, tmp_path, reading) -> None:
    out = registry.handle(state, "/export") or ""
    assert str(settings.tasks_config_path) in out
    assert "1. Reading" in (registry.handle(state, "/import") or "")

    missing = tmp_path / "missing.json"
    assert registry.handle(state, f"/import {missing}") == f"No tasks config at {missing}"


def test_console_handle_line(state) -> None:
    assert handle_line(state, "   ") == ""
    assert handle_line(state, "/exit") is None
    assert handle_line(state, "/QUIT") is None
    assert "Commands start with '/'" in (handle_line(state, "hello") or "")
    assert "Available commands:" in (handle_line(state, "/help") or "")


def test_console_loop_runs_until_eof(state, reading, capsys) -> None:
    lines = iter(["/tasks", "hello"])

    def read(prompt: str) -> str:
        try:
            return next(lines)
        except StopIteration:
            raise EOFError from None

    run_console_loop(state, read=read)
    out = capsys.readouterr().out
    assert "Use /help for commands" in out
    assert date.today().isoformat() in out
    assert "1. Reading: 4 h, weight 1" in out


def test_bootstrap_seeds_fresh_database(settings) -> None:
    settings.seed_on_start = True
    settings.seed_history = True

    state = create_initial_state(settings=settings)
    assert state.store.count_tasks() == 7
    assert settings.db_path.exists()

    # a second start over the same file does not duplicate anything
    again = create_initial_state(settings=settings)
    assert again.store.count_tasks() == 7


def test_positions_for_value_writes_follow_day_view(state, store, reading, workout) -> None:
    registry.handle(state, "/activate Reading")
    assert "1. Workout: Not done" in (registry.handle(state, "/today 2026-01-05") or "")

    out = registry.handle(state, "/set 1 1 2026-01-05") or ""
    assert "1. Workout: Done" in out
    assert [e.task_id for e in store.entries_for_date("2026-01-05")] == [workout.id]

    assert "Workout: Not done" in (registry.handle(state, "/toggle 1 2026-01-05") or "")
    assert registry.handle(state, "/set 2 1 2026-01-05") == "Invalid input (task: no task at position 2)"
    assert registry.handle(state, "/set Reading 1 2026-01-05") == "Invalid input (task: 'Reading' is inactive)"
    assert store.entries_for_task(reading.id) == []

    # management commands keep using /tasks positions, inactive tasks included
    assert registry.handle(state, "/activate 1") == "Reading is now active."


def test_export_and_import_report_os_errors(state, tmp_path, reading) -> None:
    target = tmp_path / "cfg.json"
    target.mkdir()

    assert (registry.handle(state, f"/export {target}") or "").startswith("Cannot write tasks config")
    assert not (tmp_path / "cfg.tmp").exists()
    assert (registry.handle(state, f"/import {target}") or "").startswith("Cannot read tasks config")
