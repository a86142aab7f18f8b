from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import EventKind, PresenceStatus


@dataclass(frozen=True)
class GeoLocation:
    latitude: float
    longitude: float
    accuracy: Optional[float] = None


@dataclass(frozen=True)
class OverrideInfo:
    """Metadata attached to a clock-in that a manager recorded on someone's behalf."""

    reason: str
    manager_id: str
    recorded_at: datetime


@dataclass(frozen=True)
class AttendanceEvent:
    """Thực thể miền (domain): Sự kiện chấm công (append-only).

    Events can reach the store out of order when time clocks sync after
    being offline, so nothing may assume they're sorted.
    """

    staff_id: str
    kind: EventKind
    timestamp: datetime
    location: Optional[GeoLocation] = None
    override: Optional[OverrideInfo] = None
    shift_id: Optional[str] = None
    event_id: Optional[str] = None

    @property
    def is_override(self) -> bool:
        return self.override is not None


@dataclass(frozen=True)
class StatusRecord:
    """Read-model: trạng thái hiện diện của một nhân viên, dựng lại mỗi lần đối soát."""

    staff_id: str
    full_name: str
    status: PresenceStatus = PresenceStatus.NOT_STARTED
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    late: bool = False


@dataclass(frozen=True)
class PresenceSummary:
    """Counts per status for the dashboard header."""

    clocked_in: int = 0
    on_break: int = 0
    clocked_out: int = 0
    not_started: int = 0
    late_staff_ids: tuple[str, ...] = field(default_factory=tuple)

    @property
    def total(self) -> int:
        return self.clocked_in + self.on_break + self.clocked_out + self.not_started


@dataclass(frozen=True)
class PresenceSnapshot:
    """Result of one fetch + reconcile cycle."""

    work_date: date
    records: tuple[StatusRecord, ...]
    summary: PresenceSummary
    generated_at: datetime
