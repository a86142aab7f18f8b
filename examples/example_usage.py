"""Ví dụ: dùng service layer với repository trong bộ nhớ (không cần MySQL).

Minh hoạ: đối soát roster + lịch + sự kiện, rồi quản lý chấm công thay.
"""

from datetime import date, datetime, time

from src.presence_system.presence_system.attendance.model import AttendanceEvent
from src.presence_system.presence_system.attendance.override import OverrideCoordinator
from src.presence_system.presence_system.attendance.service import PresenceService
from src.presence_system.presence_system.common.timeline import timeline_position
from src.presence_system.presence_system.core.enums import EventKind
from src.presence_system.presence_system.main import render_snapshot
from src.presence_system.presence_system.shifts.model import ScheduledShift
from src.presence_system.presence_system.users.model import StaffMember

TODAY = date(2026, 2, 2)


class Roster:
    def list_active_staff(self):
        return [StaffMember("A", "An"), StaffMember("B", "Bình"), StaffMember("C", "Chi")]


class Schedule:
    def get_shifts_for_date(self, work_date):
        return [
            ScheduledShift.for_staff(shift_id="s1", staff="A", work_date=work_date, start_time=time(9), end_time=time(17)),
            ScheduledShift.for_staff(shift_id="s2", staff="B", work_date=work_date, start_time=time(9), end_time=time(17)),
        ]


class Events:
    def __init__(self):
        self.rows = [AttendanceEvent("A", EventKind.CLOCK_IN, datetime(2026, 2, 2, 9, 5))]

    def list_events_for_date(self, work_date):
        return list(self.rows)

    def append_event(self, event):
        self.rows.append(event)
        return str(len(self.rows))


def main():
    clock = lambda: datetime(2026, 2, 2, 9, 40)
    events = Events()
    presence = PresenceService(Roster(), Schedule(), events, clock=clock)
    print(render_snapshot(presence.load_snapshot(TODAY)))

    coordinator = OverrideCoordinator(events, presence, clock=clock)
    result = coordinator.submit_override_clock_in("B", "Quên mang thẻ", manager_id="M1")
    print(f"override event={result.event_id} shift={result.shift_id} warnings={list(result.warnings)}")
    print(render_snapshot(presence.load_snapshot(TODAY)))
    print(f"09:40 on timeline: {timeline_position('09:40'):.1f}%")


if __name__ == "__main__":
    main()
