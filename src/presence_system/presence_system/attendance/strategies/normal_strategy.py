from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...shifts.model import ScheduledShift
from .base import ArrivalDecision, AttendanceStrategy


class NormalStrategy(AttendanceStrategy):
    """On-time check-in (or no shift to compare against)."""

    def decide_checkin(self, *, clock_in: datetime, shift: Optional[ScheduledShift], grace_minutes: float) -> ArrivalDecision:
        return ArrivalDecision(late=False)
