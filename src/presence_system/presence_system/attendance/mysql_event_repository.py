from __future__ import annotations

from datetime import date
from typing import Any, Dict, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, as_optional_float, db_cursor, fetchall
from .model import AttendanceEvent
from .repository import EventRepository


class MySQLEventRepository(EventRepository):
    """Attendance events stored append-only in `attendance_events`.

    Rows are handed to the reconciler as mappings; a row with a bad
    event_type or a NULL event_time is skipped there, not here.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_events_for_date(self, work_date: date) -> Sequence[Dict[str, Any]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT event_id, staff_id, event_type, event_time, shift_id,
                       latitude, longitude, accuracy,
                       is_override, override_reason, override_manager_id
                FROM attendance_events
                WHERE work_date=%s
                ORDER BY event_id
                """,
                (work_date,),
            )
            return [row_to_event_mapping(r) for r in fetchall(cur)]

    def append_event(self, event: AttendanceEvent) -> str:
        location = event.location
        override = event.override
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_events(
                    staff_id, event_type, event_time, work_date, shift_id,
                    latitude, longitude, accuracy,
                    is_override, override_reason, override_manager_id
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    event.staff_id,
                    event.kind.value,
                    event.timestamp,
                    event.timestamp.date(),
                    event.shift_id,
                    location.latitude if location else None,
                    location.longitude if location else None,
                    location.accuracy if location else None,
                    1 if override else 0,
                    override.reason if override else None,
                    override.manager_id if override else None,
                ),
            )
            return str(cur.lastrowid)


def row_to_event_mapping(r: Dict[str, Any]) -> Dict[str, Any]:
    row: Dict[str, Any] = {
        "event_id": r.get("event_id"),
        "staff_id": r.get("staff_id"),
        "kind": r.get("event_type"),
        "timestamp": r.get("event_time"),
        "shift_id": r.get("shift_id"),
        "latitude": as_optional_float(r.get("latitude")),
        "longitude": as_optional_float(r.get("longitude")),
        "accuracy": as_optional_float(r.get("accuracy")),
    }
    if as_bool(r.get("is_override")):
        row["override"] = {
            "reason": r.get("override_reason"),
            "manager_id": r.get("override_manager_id"),
            "recorded_at": r.get("event_time"),
        }
    return row
