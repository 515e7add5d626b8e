# src/daily_track/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

_STORE_LOGGER = "daily_track.tracking.store"


class _ConsoleNoiseFilter(logging.Filter):
    """
    Decide what reaches the REPL's stderr.

    The console shares the terminal with command replies, so only records that matter to
    someone typing /set or /history get through:
    - daily_track.* at the handler level (service, seed, commands);
    - the SQLite store only from WARNING up, its per-row upserts stay in dailytrack.log;
    - everything else, captured warnings included, only from ERROR up.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name == _STORE_LOGGER or name.startswith(_STORE_LOGGER + "."):
            return record.levelno >= logging.WARNING
        if name.startswith("daily_track."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/dailytrack",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
) -> Path:
    """
    Send filtered records to stderr and everything at ``file_level`` to
    ``<log_dir>/dailytrack.log``.

    Called once from cli.main before the store is opened. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "dailytrack.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)

    # A second call (tests, re-entry) replaces the handlers instead of stacking them.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(fmt)
    console.addFilter(_ConsoleNoiseFilter())
    root.addHandler(console)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    # warnings.warn(...) arrives as 'py.warnings' and is filtered like third-party output.
    logging.captureWarnings(True)
    return log_file
