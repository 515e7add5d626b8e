# src/daily_track/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the SQLite store into AppState,
- seeds a fresh database when configured to.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..tracking.seed import seed_if_needed
from ..tracking.store import TrackStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.tasks_config_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    state = AppState(settings=settings, store=TrackStore(settings.db_path))

    if getattr(settings, "seed_on_start", False):
        seeded = seed_if_needed(state.store, with_history=bool(getattr(settings, "seed_history", True)))
        if seeded:
            logger.info("Fresh database seeded at %s", settings.db_path)
    return state
