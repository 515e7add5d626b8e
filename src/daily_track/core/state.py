# src/daily_track/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from .ports import TrackRepo


@dataclass
class AppState:
    # Settings object (config.Settings in the app, SimpleNamespace in tests).
    settings: object

    store: TrackRepo

    @property
    def streak_threshold(self) -> float:
        return float(getattr(self.settings, "streak_threshold", 0.7))
