# src/daily_track/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing read from disk except the optional .env.
- Tests build their own settings object instead of importing this one.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "DAILYTRACK"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    db_path: Path
    tasks_config_path: Path

    # ---- Scoring ----
    streak_threshold: float
    history_period: str

    # ---- Startup ----
    seed_on_start: bool
    seed_history: bool
    console_enabled: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "dailytrack") or "dailytrack"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/dailytrack"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "dailytrack.sqlite3")
        tasks_config_path = _env_path(_k("TASKS_CONFIG_PATH"), data_dir / "tasks_config.json")

        threshold = _env_float(_k("STREAK_THRESHOLD"), 0.7)
        streak_threshold = float(max(0.0, min(1.0, threshold)))
        history_period = _env(_k("HISTORY_PERIOD"), "month").strip().lower() or "month"

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            db_path=db_path,
            tasks_config_path=tasks_config_path,
            streak_threshold=streak_threshold,
            history_period=history_period,
            seed_on_start=_env_bool(_k("SEED_ON_START"), True),
            seed_history=_env_bool(_k("SEED_HISTORY"), True),
            console_enabled=_env_bool(_k("CONSOLE_ENABLED"), True),
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
