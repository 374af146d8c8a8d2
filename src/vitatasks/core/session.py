# src/vitatasks/core/session.py

"""
Persisted client-side stores.

The auth session (token + username) is kept in a small JSON file under the
gitignored data dir so a restart does not require logging in again. The file
holds a bearer token and must never be committed.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def load_json_object(path: Path) -> dict[str, Any]:
    val = json.loads(path.read_text("utf-8"))
    if isinstance(val, dict):
        return val
    raise ValueError("Expected JSON object")


def atomic_write_json(path: Path, data: dict[str, Any], *, private: bool = False) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(".tmp")
    tmp.write_text(json.dumps(data, ensure_ascii=False), "utf-8")
    os.replace(tmp, path)
    if private:
        with contextlib.suppress(Exception):
            # Best-effort: not critical on Windows or restricted FS.
            os.chmod(path, 0o600)


class SessionStore:
    """Current auth token/username. hydrate() on startup, logout() on teardown."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._token: str | None = None
        self._username: str | None = None

    @property
    def token(self) -> str | None:
        return self._token

    @property
    def username(self) -> str | None:
        return self._username

    @property
    def is_authenticated(self) -> bool:
        return bool(self._token)

    def hydrate(self) -> None:
        """Load a persisted session. Missing or corrupt file -> logged out."""
        self._token = None
        self._username = None

        if not self._path.exists():
            return
        try:
            data = load_json_object(self._path)
        except Exception as e:
            logger.warning("Ignoring unreadable session file %s: %r", self._path, e)
            return

        token = data.get("token")
        username = data.get("username")
        if not isinstance(token, str) or not token:
            logger.warning("Session file %s has no token; starting logged out", self._path)
            return

        self._token = token
        self._username = username if isinstance(username, str) else None
        logger.info("Session restored for %s", self._username)

    def login(self, token: str, username: str) -> None:
        if not token:
            raise ValueError("token is required")
        self._token = token
        self._username = username
        try:
            atomic_write_json(self._path, {"token": token, "username": username}, private=True)
        except Exception:
            # The in-memory session still works for this run.
            logger.exception("Failed to persist session to %s", self._path)

    def logout(self) -> None:
        self._token = None
        self._username = None
        try:
            self._path.unlink(missing_ok=True)
        except Exception:
            logger.exception("Failed to remove session file %s", self._path)
