from __future__ import annotations

import threading
from datetime import date, datetime, time

import pytest

from src.presence_system.presence_system.attendance.model import AttendanceEvent
from src.presence_system.presence_system.attendance.service import PresenceService
from src.presence_system.presence_system.core.enums import EventKind, PresenceStatus
from src.presence_system.presence_system.shifts.model import ScheduledShift
from src.presence_system.presence_system.users.model import StaffMember


class StaticRoster:
    def __init__(self, staff):
        self.staff = staff

    def list_active_staff(self):
        return list(self.staff)


class StaticSchedule:
    def __init__(self, shifts):
        self.shifts = shifts
        self.requested = []

    def get_shifts_for_date(self, work_date: date):
        self.requested.append(work_date)
        return [s for s in self.shifts if s.work_date == work_date]


class StaticEvents:
    def __init__(self, rows):
        self.rows = rows
        self.requested = []

    def list_events_for_date(self, work_date: date):
        self.requested.append(work_date)
        return list(self.rows)

    def append_event(self, event):
        raise AssertionError("read-only")


class BrokenRoster:
    def list_active_staff(self):
        raise ConnectionError("roster service unavailable")


def _morning(today):
    roster = StaticRoster([StaffMember("A", "An"), StaffMember("B", "Bình"), StaffMember("C", "Chi")])
    schedule = StaticSchedule(
        [
            ScheduledShift.for_staff(shift_id="s1", staff="A", work_date=today, start_time=time(9), end_time=time(17)),
            ScheduledShift.for_staff(shift_id="s2", staff="B", work_date=today, start_time=time(9), end_time=time(17)),
        ]
    )
    events = StaticEvents([AttendanceEvent("A", EventKind.CLOCK_IN, datetime(2026, 2, 2, 9, 5))])
    return roster, schedule, events


def test_default_grace_keeps_five_minute_arrival_on_time(today, fixed_now):
    roster, schedule, events = _morning(today)
    svc = PresenceService(roster, schedule, events, clock=lambda: fixed_now)

    snapshot = svc.load_snapshot()

    records = {r.staff_id: r for r in snapshot.records}
    assert snapshot.work_date == today
    assert snapshot.generated_at == fixed_now
    assert records["A"].status == PresenceStatus.CLOCKED_IN
    assert records["A"].late is False
    assert records["B"].status == PresenceStatus.NOT_STARTED
    assert "C" not in records
    assert snapshot.summary.clocked_in == 1
    assert snapshot.summary.not_started == 1


def test_configured_grace_is_applied(today, fixed_now):
    roster, schedule, events = _morning(today)
    svc = PresenceService(roster, schedule, events, grace_minutes=0, clock=lambda: fixed_now)

    records = svc.load_records()

    assert records[0].late is True


def test_explicit_date_is_passed_to_accessors(fixed_now):
    roster, schedule, events = _morning(date(2026, 2, 2))
    svc = PresenceService(roster, schedule, events, clock=lambda: fixed_now)

    records = svc.load_records(date(2026, 2, 3))

    assert schedule.requested == [date(2026, 2, 3)]
    assert events.requested == [date(2026, 2, 3)]
    # The 2026-02-02 clock-in still qualifies A because the event store returned it.
    assert [r.staff_id for r in records] == ["A"]


def test_accessor_failure_propagates(today, fixed_now):
    _, schedule, events = _morning(today)
    svc = PresenceService(BrokenRoster(), schedule, events, clock=lambda: fixed_now)

    with pytest.raises(ConnectionError):
        svc.load_snapshot()


def test_fetches_run_concurrently_and_join(today, fixed_now):
    barrier = threading.Barrier(3, timeout=5)
    roster, schedule, events = _morning(today)

    class WaitingRoster(StaticRoster):
        def list_active_staff(self):
            barrier.wait()
            return super().list_active_staff()

    class WaitingSchedule(StaticSchedule):
        def get_shifts_for_date(self, work_date):
            barrier.wait()
            return super().get_shifts_for_date(work_date)

    class WaitingEvents(StaticEvents):
        def list_events_for_date(self, work_date):
            barrier.wait()
            return super().list_events_for_date(work_date)

    svc = PresenceService(
        WaitingRoster(roster.staff),
        WaitingSchedule(schedule.shifts),
        WaitingEvents(events.rows),
        clock=lambda: fixed_now,
    )

    records = svc.load_records()

    assert [r.staff_id for r in records] == ["A", "B"]


def test_shifts_for_staff_includes_shared_shifts(today, fixed_now):
    shared = ScheduledShift.for_staff(
        shift_id="s9", staff=["A", "B"], work_date=today, start_time=time(18), end_time=time(22)
    )
    roster, schedule, events = _morning(today)
    schedule.shifts.append(shared)
    svc = PresenceService(roster, schedule, events, clock=lambda: fixed_now)

    assert [s.shift_id for s in svc.shifts_for_staff("B")] == ["s2", "s9"]
