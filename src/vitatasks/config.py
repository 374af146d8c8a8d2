# src/vitatasks/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time (the session token lives in the session file).
- Every path lives under a gitignored local data dir by default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "VITA"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


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


def _env_theme_is_dark(name: str, default: bool) -> bool:
    """VITA_THEME=dark|light stands in for the browser's prefers-color-scheme."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() == "dark"


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Backend ----
    api_base_url: str
    http_timeout_seconds: float

    # ---- Reminders ----
    reminders_enabled: bool
    reminder_check_interval_seconds: float
    task_refresh_interval_seconds: float

    # ---- UI ----
    default_dark_theme: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    session_path: Path
    theme_path: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "VitaTasks")
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        api_base_url = _env(_k("API_BASE_URL"), "http://localhost:8080/api").rstrip("/")
        http_timeout_seconds = _env_float(_k("HTTP_TIMEOUT_SECONDS"), 10.0)

        reminders_enabled = _env_bool(_k("REMINDERS_ENABLED"), True)
        reminder_check_interval_seconds = _env_float(_k("REMINDER_CHECK_INTERVAL_SECONDS"), 10.0)
        task_refresh_interval_seconds = _env_float(_k("TASK_REFRESH_INTERVAL_SECONDS"), 30.0)

        default_dark_theme = _env_theme_is_dark(_k("THEME"), False)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/vitatasks"))
        session_path = _env_path(_k("SESSION_PATH"), data_dir / "session.json")
        theme_path = _env_path(_k("THEME_PATH"), data_dir / "theme.json")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            api_base_url=api_base_url,
            http_timeout_seconds=http_timeout_seconds,
            reminders_enabled=reminders_enabled,
            reminder_check_interval_seconds=reminder_check_interval_seconds,
            task_refresh_interval_seconds=task_refresh_interval_seconds,
            default_dark_theme=default_dark_theme,
            data_dir=data_dir,
            session_path=session_path,
            theme_path=theme_path,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    """Return the process settings, read from the environment on first use."""
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
