from __future__ import annotations

from enum import Enum
from typing import Optional


class PresenceStatus(str, Enum):
    """Trạng thái hiện diện của nhân viên trong ngày (chỉ dùng để hiển thị, không lưu CSDL)."""

    NOT_STARTED = "not_started"
    CLOCKED_IN = "clocked_in"
    ON_BREAK = "on_break"
    CLOCKED_OUT = "clocked_out"


class EventKind(str, Enum):
    """Loại sự kiện chấm công lưu trong event store."""

    CLOCK_IN = "CLOCK_IN"
    CLOCK_OUT = "CLOCK_OUT"
    BREAK_START = "BREAK_START"
    BREAK_END = "BREAK_END"

    @classmethod
    def parse(cls, value) -> Optional["EventKind"]:
        """Map a raw kind from the event store to an EventKind.

        Time clocks in the field report short forms ("in", "out") as well as
        the canonical upper-case names. Returns None for anything unknown.
        """

        if isinstance(value, EventKind):
            return value
        if not isinstance(value, str):
            return None
        return _KIND_ALIASES.get(value.strip().lower())


_KIND_ALIASES = {
    "clock_in": EventKind.CLOCK_IN,
    "in": EventKind.CLOCK_IN,
    "clock_out": EventKind.CLOCK_OUT,
    "out": EventKind.CLOCK_OUT,
    "break_start": EventKind.BREAK_START,
    "break_end": EventKind.BREAK_END,
}


class OverrideWarning(str, Enum):
    """Soft warnings returned with a successful override."""

    AMBIGUOUS_SHIFT = "AMBIGUOUS_SHIFT"
    REFRESH_FAILED = "REFRESH_FAILED"
