# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
The login session is stored under VITA_DATA_DIR; never commit that directory.

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "VITA_APP_NAME": "App display name (default: VitaTasks).",
    "VITA_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    # Backend
    "VITA_API_BASE_URL": "Task/auth backend base URL (default: http://localhost:8080/api).",
    "VITA_HTTP_TIMEOUT_SECONDS": "Per-request timeout in seconds (default: 10).",
    # Reminders
    "VITA_REMINDERS_ENABLED": "Run the background reminder monitor (true/false, default: true).",
    "VITA_REMINDER_CHECK_INTERVAL_SECONDS": "Local due-state recompute interval (default: 10).",
    "VITA_TASK_REFRESH_INTERVAL_SECONDS": "Backend task refetch interval (default: 30).",
    # UI
    "VITA_THEME": "Theme used until one is chosen with /theme: dark | light (default: light).",
    # Paths (gitignored)
    "VITA_DATA_DIR": "Local data directory (default: .local/vitatasks).",
    "VITA_SESSION_PATH": "Saved login session JSON (default: <data_dir>/session.json).",
    "VITA_THEME_PATH": "Saved theme preference JSON (default: <data_dir>/theme.json).",
}
