# src/vitatasks/tasks/timestamps.py

"""
Timestamp helpers shared by the derived task views and the task form.

Wire format is ISO-8601 text. Two flavours arrive from the backend:
- absolute values with "Z" or a numeric offset (reminders sent by this client),
- offset-less values (server-assigned createdAt/updatedAt), which are local wall time.

Everything returned from here is timezone-aware so comparisons never mix naive and aware values.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta, tzinfo

# Backends may send nanosecond precision; datetime only keeps microseconds.
_EXCESS_FRACTION = re.compile(r"(\.\d{6})\d+")

_LOCAL_INPUT_FORMATS = ("%Y-%m-%dT%H:%M", "%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S")

# Instants closer than a day to datetime.min/max cannot be shifted into every
# UTC offset, so they are treated as unparseable.
_EARLIEST = datetime.min.replace(tzinfo=UTC) + timedelta(days=1)
_LATEST = datetime.max.replace(tzinfo=UTC) - timedelta(days=1)


def parse_timestamp(raw: str | None) -> datetime | None:
    """
    Parse a wire timestamp into an aware datetime.

    Returns None for missing, empty or unparseable input, and for instants too
    close to the ends of the datetime range to convert between timezones
    (never raises).
    """
    if raw is None or not isinstance(raw, str):
        return None
    s = raw.strip()
    if not s:
        return None

    s = _EXCESS_FRACTION.sub(r"\1", s)
    try:
        dt = datetime.fromisoformat(s)
    except ValueError:
        return None

    try:
        if dt.tzinfo is None:
            # Local wall time, like the browser's Date constructor.
            dt = dt.astimezone()
        instant = dt.astimezone(UTC)
    except (ValueError, OverflowError):
        return None
    if not _EARLIEST <= instant <= _LATEST:
        return None
    return dt


def ensure_aware(dt: datetime) -> datetime:
    return dt if dt.tzinfo is not None else dt.astimezone()


def now_local() -> datetime:
    return datetime.now().astimezone()


def _parse_local_input(value: str) -> datetime:
    s = (value or "").strip()
    for fmt in _LOCAL_INPUT_FORMATS:
        try:
            return datetime.strptime(s, fmt)
        except ValueError:
            continue
    raise ValueError(f"Invalid reminder time {value!r}; expected YYYY-MM-DDTHH:MM")


def to_utc_iso(dt: datetime) -> str:
    """Render like JavaScript's Date.toISOString(): UTC, milliseconds, trailing Z."""
    u = ensure_aware(dt).astimezone(UTC)
    return u.strftime("%Y-%m-%dT%H:%M:%S") + f".{u.microsecond // 1000:03d}Z"


def local_input_to_utc_iso(value: str, tz: tzinfo | None = None) -> str:
    """
    Convert a local date-time picker value into an absolute UTC timestamp for the wire.

    tz defaults to the system local timezone.
    """
    naive = _parse_local_input(value)
    local = naive.replace(tzinfo=tz) if tz is not None else naive.astimezone()
    return to_utc_iso(local)


def utc_iso_to_local_input(value: str | None, tz: tzinfo | None = None) -> str:
    """Inverse of local_input_to_utc_iso, used to pre-fill the edit form. "" if unparseable."""
    dt = parse_timestamp(value)
    if dt is None:
        return ""
    local = dt.astimezone(tz) if tz is not None else dt.astimezone()
    return local.strftime("%Y-%m-%dT%H:%M")


def format_calendar_date(dt: datetime) -> str:
    """'October 19, 2026' (no zero padding on the day)."""
    return f"{dt:%B} {dt.day}, {dt.year}"


def format_timestamp(raw: str | None) -> str:
    """Card footer form: 'Oct 19, 2026 • 2:05 PM'. Falls back to the raw text."""
    dt = parse_timestamp(raw)
    if dt is None:
        return raw or ""
    local = dt.astimezone()
    hour = local.hour % 12 or 12
    ampm = "AM" if local.hour < 12 else "PM"
    return f"{local:%b} {local.day}, {local.year} • {hour}:{local:%M} {ampm}"
