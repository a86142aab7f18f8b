from __future__ import annotations

from typing import Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall
from .model import StaffMember
from .repository import RosterRepository


class MySQLStaffRepository(RosterRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active_staff(self) -> Sequence[StaffMember]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT staff_id, full_name, role, is_active
                FROM staff
                WHERE is_active=1
                ORDER BY staff_id
                """
            )
            rows = fetchall(cur)
            return [
                StaffMember(
                    staff_id=str(r["staff_id"]),
                    full_name=r["full_name"],
                    role=r.get("role"),
                    is_active=as_bool(r.get("is_active", 1)),
                )
                for r in rows
            ]
