from __future__ import annotations

from datetime import date, datetime, time
from typing import Any, Optional

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: Any) -> time:
    """Parse "HH:MM" (or "HH:MM:SS") into a time."""

    if isinstance(value, time):
        return value
    if not isinstance(value, str):
        raise ValidationError(f"Giờ không hợp lệ: {value!r}")

    parts = value.strip().split(":")
    if len(parts) not in (2, 3):
        raise ValidationError(f"Giờ không hợp lệ: {value!r}")
    try:
        numbers = [int(p) for p in parts]
        return time(*numbers)
    except ValueError as exc:
        raise ValidationError(f"Giờ không hợp lệ: {value!r}") from exc


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Coerce an event timestamp into a naive local datetime.

    Accepts datetime objects and ISO-8601 strings (a trailing "Z" is allowed).
    Aware values are converted to local time so they compare with shift times,
    which are stored as local wall-clock times. Returns None when the value
    can't be understood.
    """

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def format_hhmm(value: Optional[datetime]) -> str:
    return value.strftime("%H:%M") if value else "-"


def minutes_of_day(value: time) -> float:
    return value.hour * 60 + value.minute + value.second / 60


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
