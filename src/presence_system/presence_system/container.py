from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_event_repository import MySQLEventRepository
from .attendance.override import OverrideCoordinator
from .attendance.poller import PresencePoller
from .attendance.service import PresenceService
from .core.constants import DEFAULT_LATE_GRACE_MINUTES, DEFAULT_REFRESH_INTERVAL_SECONDS
from .database.connection import DBConfig, DatabaseConnection
from .shifts.mysql_shift_repository import MySQLShiftRepository
from .users.mysql_staff_repository import MySQLStaffRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    staff_repo: MySQLStaffRepository
    shifts_repo: MySQLShiftRepository
    events_repo: MySQLEventRepository

    presence_service: PresenceService
    poller: PresencePoller
    override_coordinator: OverrideCoordinator


def build_container(
    *,
    db_config: Mapping[str, Any],
    grace_minutes: float = DEFAULT_LATE_GRACE_MINUTES,
    refresh_interval_seconds: float = DEFAULT_REFRESH_INTERVAL_SECONDS,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    staff_repo = MySQLStaffRepository(conn)
    shifts_repo = MySQLShiftRepository(conn)
    events_repo = MySQLEventRepository(conn)

    presence_service = PresenceService(
        staff_repo,
        shifts_repo,
        events_repo,
        strategy_factory=AttendanceStrategyFactory(),
        grace_minutes=grace_minutes,
    )
    poller = PresencePoller(presence_service, interval_seconds=refresh_interval_seconds)
    # Overrides refresh through the poller so the published snapshot picks them up.
    override_coordinator = OverrideCoordinator(events_repo, presence_service, refresh=poller.refresh_now)

    return Container(
        conn=conn,
        staff_repo=staff_repo,
        shifts_repo=shifts_repo,
        events_repo=events_repo,
        presence_service=presence_service,
        poller=poller,
        override_coordinator=override_coordinator,
    )
