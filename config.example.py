# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "DAYBOOK_APP_NAME": "App display name (default: daybook).",
    "DAYBOOK_LOG_LEVEL": "Console logging level (default: INFO).",
    # Paths (gitignored)
    "DAYBOOK_DATA_DIR": "Local data directory, holds daybook.log (default: .local/daybook).",
    "DAYBOOK_TASKS_PATH": (
        "JSON export of today's tasks (default: <data_dir>/tasks_today.json)."
    ),
    # Reminders
    "DAYBOOK_REFRESH_INTERVAL_SECONDS": "Rebuild reminders every N seconds; 0 = once at startup (default: 300).",
    "DAYBOOK_NOTIFICATIONS_ENABLED": "Grant notification permission on the local platform (true/false).",
    # Connectors
    "DAYBOOK_CONSOLE_ENABLED": "Enable console connector (true/false).",
}
