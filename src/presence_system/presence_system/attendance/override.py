from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.logging import get_logger
from ..common.validators import require_non_empty
from ..core.enums import EventKind, OverrideWarning
from ..core.exceptions import OverrideFailed, ValidationError
from ..shifts.model import ScheduledShift
from .model import AttendanceEvent, OverrideInfo, PresenceSnapshot, StatusRecord
from .repository import EventRepository
from .service import PresenceService

logger = get_logger(__name__)


@dataclass(frozen=True)
class OverrideResult:
    """Outcome of a recorded override.

    `records` holds the re-reconciled presence, or None when the refresh
    after the write failed (see `warnings`).
    """

    event_id: str
    staff_id: str
    shift_id: Optional[str]
    warnings: tuple[OverrideWarning, ...] = ()
    records: Optional[tuple[StatusRecord, ...]] = None

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)


class OverrideCoordinator:
    """Use case: a manager clocks a staff member in on their behalf.

    Writes exactly one synthetic CLOCK_IN event and then re-reconciles. It does
    not refuse staff who are already clocked in; callers disable the action
    for them. Duplicate submissions are the caller's concern too.
    """

    def __init__(
        self,
        events: EventRepository,
        presence: PresenceService,
        *,
        refresh: Optional[Callable[[date], Optional[PresenceSnapshot]]] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._events = events
        self._presence = presence
        self._refresh = refresh or presence.load_snapshot
        self._clock = clock

    def submit_override_clock_in(
        self,
        staff_id: str,
        reason: str,
        shift_id: Optional[str] = None,
        *,
        manager_id: str,
        now: Optional[datetime] = None,
    ) -> OverrideResult:
        staff_id = require_non_empty(staff_id, "Nhân viên")
        reason = require_non_empty(reason, "Lý do")
        manager_id = require_non_empty(manager_id, "Quản lý")
        now = now or self._clock()

        try:
            todays_shifts = self._presence.shifts_for_staff(staff_id, now.date())
        except Exception as exc:
            logger.error("Override for %s failed: could not load schedule", staff_id, exc_info=True)
            raise OverrideFailed("Không tải được lịch làm việc, vui lòng thử lại") from exc

        warnings: list[OverrideWarning] = []
        linked_shift_id = self._resolve_shift(staff_id, shift_id, todays_shifts, warnings)

        event = AttendanceEvent(
            staff_id=staff_id,
            kind=EventKind.CLOCK_IN,
            timestamp=now,
            override=OverrideInfo(reason=reason, manager_id=manager_id, recorded_at=now),
            shift_id=linked_shift_id,
        )

        try:
            event_id = self._events.append_event(event)
        except Exception as exc:
            logger.error("Override for %s failed: could not append event", staff_id, exc_info=True)
            raise OverrideFailed("Ghi chấm công thất bại, vui lòng thử lại") from exc

        logger.info(
            "Override clock-in recorded: staff=%s manager=%s shift=%s event=%s",
            staff_id, manager_id, linked_shift_id, event_id,
        )

        records = None
        try:
            snapshot = self._refresh(now.date())
            if snapshot is not None:
                records = snapshot.records
        except Exception:
            # The event is stored; report the stale view instead of failing the override.
            logger.warning("Re-reconciliation after override failed", exc_info=True)
            warnings.append(OverrideWarning.REFRESH_FAILED)

        return OverrideResult(
            event_id=str(event_id),
            staff_id=staff_id,
            shift_id=linked_shift_id,
            warnings=tuple(warnings),
            records=records,
        )

    def _resolve_shift(
        self,
        staff_id: str,
        shift_id: Optional[str],
        todays_shifts: Sequence[ScheduledShift],
        warnings: list[OverrideWarning],
    ) -> Optional[str]:
        if shift_id is not None and str(shift_id).strip():
            shift_id = str(shift_id).strip()
            if not any(str(s.shift_id) == shift_id for s in todays_shifts):
                raise ValidationError("Ca làm việc không hợp lệ")
            return shift_id

        if len(todays_shifts) == 1:
            return str(todays_shifts[0].shift_id)

        if len(todays_shifts) > 1:
            # TODO: ask for the shift instead of recording without linkage once the
            # presentation layer has a shift picker in the override dialog.
            logger.warning(
                "Override for %s has %d shifts today and no shift id; recording without shift link",
                staff_id, len(todays_shifts),
            )
            warnings.append(OverrideWarning.AMBIGUOUS_SHIFT)
        return None
