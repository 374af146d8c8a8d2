# src/vitatasks/logging_setup.py

from __future__ import annotations

import logging
import re
import sys
from pathlib import Path

_BEARER = re.compile(r"(Bearer\s+)[A-Za-z0-9._~+/=-]+")

# Loggers that run on the reminder thread and fire every few seconds.
_BACKGROUND_LOGGERS = ("vitatasks.tasks.task_scheduler", "vitatasks.connectors.reminder_runner")


class _ConsoleNoiseFilter(logging.Filter):
    """
    Keep the REPL readable: app logs pass, the reminder loop only at WARNING+,
    captured warnings and third-party loggers only at ERROR+.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        name = record.name
        if name.startswith("vitatasks."):
            if name.startswith(_BACKGROUND_LOGGERS):
                return record.levelno >= logging.WARNING
            return True
        return record.levelno >= logging.ERROR


class _RedactingFormatter(logging.Formatter):
    """Mask bearer tokens in the fully formatted line, traceback text included."""

    def format(self, record: logging.LogRecord) -> str:
        return _BEARER.sub(r"\1***", super().format(record))


def setup_logging(
    *,
    log_dir: str | Path = ".local/vitatasks",
    console_level: int = logging.INFO,
    file_level: int = logging.DEBUG,
    http_level: int = logging.WARNING,
) -> Path:
    """
    Console handler (filtered, no timestamps: the REPL prints its own) plus a
    full DEBUG log file under log_dir. Returns the log file path.

    Call once at startup; calling again replaces the handlers.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "vitatasks.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(console_level)
    ch.setFormatter(_RedactingFormatter("%(levelname)s %(name)s: %(message)s"))
    ch.addFilter(_ConsoleNoiseFilter())
    root.addHandler(ch)

    fh = logging.FileHandler(str(log_file), encoding="utf-8")
    fh.setLevel(file_level)
    fh.setFormatter(
        _RedactingFormatter(
            fmt="%(asctime)s.%(msecs)03d %(levelname)s [%(threadName)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root.addHandler(fh)

    logging.captureWarnings(True)

    for noisy in ("httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(http_level)

    return log_file
