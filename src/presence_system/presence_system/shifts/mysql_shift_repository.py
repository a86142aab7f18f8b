from __future__ import annotations

from datetime import date
from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_time
from .model import ScheduledShift
from .repository import ScheduleRepository


class MySQLShiftRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_shifts_for_date(self, work_date: date) -> Sequence[ScheduledShift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT s.shift_id, s.work_date, s.start_time, s.end_time, s.role_label, a.staff_id
                FROM scheduled_shifts s
                JOIN shift_assignees a ON a.shift_id = s.shift_id
                WHERE s.work_date=%s
                ORDER BY s.start_time, s.shift_id, a.staff_id
                """,
                (work_date,),
            )
            return rows_to_shifts(fetchall(cur))


def rows_to_shifts(rows) -> list[ScheduledShift]:
    """Collapse one-row-per-assignee join rows into shared shifts."""

    heads: dict[str, dict] = {}
    assignees: dict[str, list[str]] = {}
    for r in rows:
        shift_id = str(r["shift_id"])
        if shift_id not in heads:
            heads[shift_id] = r
            assignees[shift_id] = []
        assignees[shift_id].append(str(r["staff_id"]))

    return [
        ScheduledShift(
            shift_id=shift_id,
            staff_ids=tuple(assignees[shift_id]),
            work_date=r["work_date"],
            start_time=normalize_mysql_time(r["start_time"]),
            end_time=normalize_mysql_time(r["end_time"]),
            role_label=r.get("role_label"),
        )
        for shift_id, r in heads.items()
    ]
