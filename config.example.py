# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file,
see src/daily_track/config.py). Local data lives under .local/ and should stay gitignored.

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "DAILYTRACK_APP_NAME": "App display name (default: dailytrack).",
    "DAILYTRACK_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Paths (gitignored)
    "DAILYTRACK_DATA_DIR": "Local data directory, also holds dailytrack.log (default: .local/dailytrack).",
    "DAILYTRACK_DB_PATH": "SQLite database path (default: <data_dir>/dailytrack.sqlite3).",
    "DAILYTRACK_TASKS_CONFIG_PATH": (
        "Task definitions JSON used by /export and /import (default: <data_dir>/tasks_config.json)."
    ),
    # Scoring
    "DAILYTRACK_STREAK_THRESHOLD": "Daily score a day needs to extend a streak, 0..1 (default: 0.7).",
    "DAILYTRACK_HISTORY_PERIOD": "Default /history window: week, month, quarter, year (default: month).",
    # Startup
    "DAILYTRACK_SEED_ON_START": "Seed starter tasks into an empty database (true/false, default: true).",
    "DAILYTRACK_SEED_HISTORY": "Include the sample January 2026 history when seeding (default: true).",
    "DAILYTRACK_CONSOLE_ENABLED": "Run the interactive console (true/false, default: true).",
}
