from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from datetime import date, datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..common.logging import get_logger
from ..core.constants import DEFAULT_FETCH_WORKERS, DEFAULT_LATE_GRACE_MINUTES
from ..shifts.repository import ScheduleRepository
from ..users.repository import RosterRepository
from .factory import AttendanceStrategyFactory
from .model import PresenceSnapshot, StatusRecord
from .reconciler import reconcile, summarize
from .repository import EventRepository

logger = get_logger(__name__)


class PresenceService:
    """Use case: load today's roster, schedule and events, then reconcile them.

    The three fetches run concurrently but reconciliation only starts once all
    of them have returned. If any fetch fails the error propagates and no
    records are produced, so a half-loaded schedule never shows scheduled
    staff as absent.
    """

    def __init__(
        self,
        roster: RosterRepository,
        schedule: ScheduleRepository,
        events: EventRepository,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        grace_minutes: float = DEFAULT_LATE_GRACE_MINUTES,
        clock: Callable[[], datetime] = now_local,
        max_workers: int = DEFAULT_FETCH_WORKERS,
    ):
        self._roster = roster
        self._schedule = schedule
        self._events = events
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._grace_minutes = grace_minutes
        self._clock = clock
        self._max_workers = int(max_workers)

    @property
    def grace_minutes(self) -> float:
        return self._grace_minutes

    def today(self) -> date:
        return self._clock().date()

    def load_records(self, work_date: Optional[date] = None) -> list[StatusRecord]:
        work_date = work_date or self.today()

        with ThreadPoolExecutor(max_workers=self._max_workers, thread_name_prefix="presence-fetch") as pool:
            staff_future = pool.submit(self._roster.list_active_staff)
            shifts_future = pool.submit(self._schedule.get_shifts_for_date, work_date)
            events_future = pool.submit(self._events.list_events_for_date, work_date)

            # result() re-raises the accessor's exception in this thread.
            staff = staff_future.result()
            shifts = shifts_future.result()
            events = events_future.result()

        records = reconcile(
            staff,
            shifts,
            events,
            grace_minutes=self._grace_minutes,
            strategy_factory=self._factory,
        )
        logger.debug("Reconciled %d records for %s", len(records), work_date)
        return records

    def load_snapshot(self, work_date: Optional[date] = None) -> PresenceSnapshot:
        work_date = work_date or self.today()
        records = self.load_records(work_date)
        return PresenceSnapshot(
            work_date=work_date,
            records=tuple(records),
            summary=summarize(records),
            generated_at=self._clock(),
        )

    def shifts_for_staff(self, staff_id: str, work_date: Optional[date] = None):
        work_date = work_date or self.today()
        return [s for s in self._schedule.get_shifts_for_date(work_date) if s.covers(staff_id)]
