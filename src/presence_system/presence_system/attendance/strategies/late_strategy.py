from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...shifts.model import ScheduledShift
from .base import ArrivalDecision, AttendanceStrategy


class LateStrategy(AttendanceStrategy):
    """Late check-in."""

    def decide_checkin(self, *, clock_in: datetime, shift: Optional[ScheduledShift], grace_minutes: float) -> ArrivalDecision:
        minutes = (clock_in - shift.starts_at()).total_seconds() / 60 if shift else 0.0
        return ArrivalDecision(late=True, minutes_late=minutes)
