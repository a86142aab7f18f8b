from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..shifts.model import ScheduledShift
from .strategies.base import AttendanceStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules."""

    def for_checkin(self, *, clock_in: datetime, shift: Optional[ScheduledShift], grace_minutes: float) -> AttendanceStrategy:
        if not shift:
            return NormalStrategy()

        # Late only when the delay is strictly greater than the grace.
        if clock_in <= shift.starts_at() + timedelta(minutes=grace_minutes):
            return NormalStrategy()
        return LateStrategy()
