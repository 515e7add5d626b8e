# src/daily_track/__init__.py

"""DailyTrack: daily goal tracking with weighted scores and streaks."""

__version__ = "0.3.0"
