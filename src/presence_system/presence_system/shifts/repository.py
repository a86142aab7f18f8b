from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from .model import ScheduledShift


class ScheduleRepository(Protocol):
    def get_shifts_for_date(self, work_date: date) -> Sequence[ScheduledShift]:
        """Published shifts for one day, shared shifts included once."""

        raise NotImplementedError
