from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...shifts.model import ScheduledShift


@dataclass(frozen=True)
class ArrivalDecision:
    late: bool
    minutes_late: float = 0.0


class AttendanceStrategy(ABC):
    """Strategy Pattern: encapsulate how we decide whether a clock-in was late."""

    @abstractmethod
    def decide_checkin(self, *, clock_in: datetime, shift: Optional[ScheduledShift], grace_minutes: float) -> ArrivalDecision:
        raise NotImplementedError
