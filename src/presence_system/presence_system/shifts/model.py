from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Iterable, Optional, Union


@dataclass(frozen=True)
class ScheduledShift:
    """Thực thể miền (domain): Ca làm việc đã xếp lịch cho một ngày.

    Một ca có thể giao cho nhiều nhân viên (ca chung), nên staff_ids luôn là tuple.
    """

    shift_id: str
    staff_ids: tuple[str, ...]
    work_date: date
    start_time: time
    end_time: time
    role_label: Optional[str] = None

    @classmethod
    def for_staff(
        cls,
        *,
        shift_id: str,
        staff: Union[str, int, Iterable[str]],
        work_date: date,
        start_time: time,
        end_time: time,
        role_label: Optional[str] = None,
    ) -> "ScheduledShift":
        """Build a shift from either a single staff id or a list of them."""

        if isinstance(staff, str) or not isinstance(staff, Iterable):
            staff_ids: tuple[str, ...] = (str(staff),)
        else:
            staff_ids = tuple(str(s) for s in staff)
        return cls(
            shift_id=str(shift_id),
            staff_ids=staff_ids,
            work_date=work_date,
            start_time=start_time,
            end_time=end_time,
            role_label=role_label,
        )

    def starts_at(self) -> datetime:
        return datetime.combine(self.work_date, self.start_time)

    def covers(self, staff_id: str) -> bool:
        return str(staff_id) in {str(s) for s in self.staff_ids}
