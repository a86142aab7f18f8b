from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import Decimal

import pytest

from src.presence_system.presence_system.attendance.model import AttendanceEvent, GeoLocation, OverrideInfo
from src.presence_system.presence_system.attendance.mysql_event_repository import MySQLEventRepository
from src.presence_system.presence_system.attendance.reconciler import reconcile
from src.presence_system.presence_system.core.enums import EventKind, PresenceStatus
from src.presence_system.presence_system.database.bootstrap import iter_sql_statements
from src.presence_system.presence_system.database.mysql_base import as_bool, normalize_mysql_time
from src.presence_system.presence_system.shifts.mysql_shift_repository import MySQLShiftRepository
from src.presence_system.presence_system.users.mysql_staff_repository import MySQLStaffRepository
from src.presence_system.presence_system.users.model import StaffMember


class FakeCursor:
    def __init__(self, rows, lastrowid=None, error=None):
        self._rows = rows
        self.lastrowid = lastrowid
        self.error = error
        self.executed = []
        self.closed = False

    def execute(self, sql, params=None):
        self.executed.append((sql, params))
        if self.error:
            raise self.error

    def fetchall(self):
        return self._rows

    def fetchone(self):
        return self._rows[0] if self._rows else None

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=False):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeConnectionFactory:
    def __init__(self, rows=None, lastrowid=None, error=None):
        self.cursor = FakeCursor(rows or [], lastrowid=lastrowid, error=error)
        self.conn = FakeConnection(self.cursor)

    def connect(self):
        return self.conn


def test_staff_rows_become_staff_members():
    factory = FakeConnectionFactory(
        rows=[
            {"staff_id": "A", "full_name": "An", "role": "bếp", "is_active": 1},
            {"staff_id": 7, "full_name": "Bảy", "role": None, "is_active": b"1"},
        ]
    )

    staff = MySQLStaffRepository(factory).list_active_staff()

    assert [s.staff_id for s in staff] == ["A", "7"]
    assert staff[0].role == "bếp"
    assert all(s.is_active for s in staff)
    assert factory.conn.committed and factory.conn.closed


def test_shared_shift_rows_are_collapsed():
    day = date(2026, 2, 2)
    factory = FakeConnectionFactory(
        rows=[
            {"shift_id": "s1", "work_date": day, "start_time": timedelta(hours=9), "end_time": "17:00:00", "role_label": "Thu ngân", "staff_id": "A"},
            {"shift_id": "s1", "work_date": day, "start_time": timedelta(hours=9), "end_time": "17:00:00", "role_label": "Thu ngân", "staff_id": "B"},
            {"shift_id": "s2", "work_date": day, "start_time": time(14), "end_time": time(22), "role_label": None, "staff_id": "A"},
        ]
    )

    shifts = MySQLShiftRepository(factory).get_shifts_for_date(day)

    assert [s.shift_id for s in shifts] == ["s1", "s2"]
    assert shifts[0].staff_ids == ("A", "B")
    assert shifts[0].start_time == time(9)
    assert shifts[0].end_time == time(17)
    assert factory.cursor.executed[0][1] == (day,)


def test_event_rows_feed_the_reconciler():
    factory = FakeConnectionFactory(
        rows=[
            {
                "event_id": 2, "staff_id": "A", "event_type": "BREAK_START", "event_time": datetime(2026, 2, 2, 12),
                "shift_id": None, "latitude": None, "longitude": None, "accuracy": None,
                "is_override": 0, "override_reason": None, "override_manager_id": None,
            },
            {
                "event_id": 1, "staff_id": "A", "event_type": "CLOCK_IN", "event_time": datetime(2026, 2, 2, 9),
                "shift_id": "s1", "latitude": Decimal("10.776900"), "longitude": Decimal("106.700900"), "accuracy": 12.5,
                "is_override": 1, "override_reason": "Quên thẻ", "override_manager_id": "M1",
            },
            {
                "event_id": 3, "staff_id": "A", "event_type": "CLOCK_OUT", "event_time": None,
                "shift_id": None, "latitude": None, "longitude": None, "accuracy": None,
                "is_override": 0, "override_reason": None, "override_manager_id": None,
            },
        ]
    )

    rows = MySQLEventRepository(factory).list_events_for_date(date(2026, 2, 2))

    assert rows[1]["latitude"] == pytest.approx(10.7769)
    assert rows[1]["override"]["manager_id"] == "M1"
    assert "override" not in rows[0]

    records = reconcile([StaffMember("A", "An")], [], rows)
    assert records[0].status == PresenceStatus.ON_BREAK
    assert records[0].clock_in == datetime(2026, 2, 2, 9)


def test_append_event_writes_override_columns():
    factory = FakeConnectionFactory(lastrowid=41)
    now = datetime(2026, 2, 2, 9, 40)
    event = AttendanceEvent(
        staff_id="B",
        kind=EventKind.CLOCK_IN,
        timestamp=now,
        location=GeoLocation(10.0, 106.0, 5.0),
        override=OverrideInfo(reason="Quên thẻ", manager_id="M1", recorded_at=now),
        shift_id="pm",
    )

    event_id = MySQLEventRepository(factory).append_event(event)

    assert event_id == "41"
    _, params = factory.cursor.executed[0]
    assert params == ("B", "CLOCK_IN", now, now.date(), "pm", 10.0, 106.0, 5.0, 1, "Quên thẻ", "M1")
    assert factory.conn.committed


def test_append_failure_rolls_back_and_propagates():
    factory = FakeConnectionFactory(error=RuntimeError("lost connection"))
    event = AttendanceEvent(staff_id="B", kind=EventKind.CLOCK_IN, timestamp=datetime(2026, 2, 2, 9))

    with pytest.raises(RuntimeError):
        MySQLEventRepository(factory).append_event(event)

    assert factory.conn.rolled_back
    assert not factory.conn.committed
    assert factory.conn.closed


@pytest.mark.parametrize(
    "raw, expected",
    [
        (time(8, 30), time(8, 30)),
        (timedelta(hours=8, minutes=30), time(8, 30)),
        ("08:30:15", time(8, 30, 15)),
        (None, None),
    ],
)
def test_normalize_mysql_time(raw, expected):
    assert normalize_mysql_time(raw) == expected


def test_as_bool_handles_bytes():
    assert as_bool(b"1") is True
    assert as_bool(b"0") is False
    assert as_bool(0) is False


def test_iter_sql_statements_skips_comments_and_keeps_quoted_semicolons():
    sql = """
    -- staff table
    CREATE TABLE a (x VARCHAR(5) DEFAULT ';');
    INSERT INTO a VALUES ('it''s; fine');
    """

    statements = list(iter_sql_statements(sql))

    assert len(statements) == 2
    assert statements[0].startswith("CREATE TABLE a")
    assert "';'" in statements[0]
