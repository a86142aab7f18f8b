"""Fold roster, schedule and clock events into per-staff presence.

Everything here is pure: no I/O and no state kept between calls, so the
same three snapshots always produce the same records.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any, Optional, Sequence

from ..common.datetime_utils import parse_timestamp
from ..common.logging import get_logger
from ..common.validators import require_grace_minutes
from ..core.enums import EventKind, PresenceStatus
from ..core.exceptions import MalformedEventSkipped, ValidationError
from ..shifts.model import ScheduledShift
from ..users.model import StaffMember
from .factory import AttendanceStrategyFactory
from .model import AttendanceEvent, GeoLocation, OverrideInfo, PresenceSummary, StatusRecord

logger = get_logger(__name__)

# Same-timestamp events are ordered along the normal shift lifecycle.
_KIND_RANK = {
    EventKind.CLOCK_IN: 0,
    EventKind.BREAK_START: 1,
    EventKind.BREAK_END: 2,
    EventKind.CLOCK_OUT: 3,
}


def reconcile(
    staff: Iterable[StaffMember],
    shifts: Iterable[ScheduledShift],
    events: Iterable[Any],
    *,
    grace_minutes: float = 0,
    strategy_factory: Optional[AttendanceStrategyFactory] = None,
) -> list[StatusRecord]:
    """Build one StatusRecord per active staff member seen today.

    A staff member qualifies when they have a shift or an event today and are
    active in the roster. Records come back sorted by staff id.

    Malformed events are logged and skipped. Malformed arguments raise
    ValidationError before anything is folded.
    """

    roster = _require_items(staff, "staff", StaffMember)
    schedule = _require_items(shifts, "shifts", ScheduledShift)
    raw_events = _require_items(events, "events")
    grace = require_grace_minutes(grace_minutes)
    factory = strategy_factory or AttendanceStrategyFactory()

    active = {str(m.staff_id): m for m in roster if m.is_active}
    shifts_by_staff = _index_shifts(schedule)
    events_by_staff = _index_events(raw_events)

    qualifying = (set(shifts_by_staff) | set(events_by_staff)) & set(active)
    dropped = set(events_by_staff) - set(active)
    if dropped:
        logger.debug("Ignoring events for %d staff not active in roster", len(dropped))

    return [
        _fold(
            staff_id,
            active[staff_id],
            sorted(events_by_staff.get(staff_id, []), key=_event_sort_key),
            shifts_by_staff.get(staff_id, []),
            grace=grace,
            factory=factory,
        )
        for staff_id in sorted(qualifying)
    ]


def summarize(records: Iterable[StatusRecord]) -> PresenceSummary:
    counts = {status: 0 for status in PresenceStatus}
    late: list[str] = []
    for record in records:
        counts[record.status] += 1
        if record.late:
            late.append(record.staff_id)

    return PresenceSummary(
        clocked_in=counts[PresenceStatus.CLOCKED_IN],
        on_break=counts[PresenceStatus.ON_BREAK],
        clocked_out=counts[PresenceStatus.CLOCKED_OUT],
        not_started=counts[PresenceStatus.NOT_STARTED],
        late_staff_ids=tuple(late),
    )


def normalize_event(raw: Any) -> AttendanceEvent:
    """Turn an AttendanceEvent or a raw store row into a foldable event.

    Raises MalformedEventSkipped when the staff id, kind or timestamp is
    missing or unreadable.
    """

    if isinstance(raw, AttendanceEvent):
        staff_id, kind_value, ts_value = raw.staff_id, raw.kind, raw.timestamp
    elif isinstance(raw, Mapping):
        staff_id = raw.get("staff_id", raw.get("staff"))
        kind_value = raw.get("kind", raw.get("event_type"))
        ts_value = raw.get("timestamp")
    else:
        raise MalformedEventSkipped(f"unsupported event type {type(raw).__name__}", raw)

    if staff_id is None or str(staff_id).strip() == "":
        raise MalformedEventSkipped("missing staff id", raw)

    kind = EventKind.parse(kind_value)
    if kind is None:
        raise MalformedEventSkipped(f"unknown event kind {kind_value!r}", raw)

    timestamp = parse_timestamp(ts_value)
    if timestamp is None:
        raise MalformedEventSkipped(f"missing or unreadable timestamp {ts_value!r}", raw)

    if isinstance(raw, AttendanceEvent):
        return dataclasses.replace(raw, staff_id=str(staff_id), kind=kind, timestamp=timestamp)

    shift_id = raw.get("shift_id")
    event_id = raw.get("event_id", raw.get("id"))
    return AttendanceEvent(
        staff_id=str(staff_id),
        kind=kind,
        timestamp=timestamp,
        location=_location_from_row(raw),
        override=_override_from_row(raw),
        shift_id=str(shift_id) if shift_id is not None else None,
        event_id=str(event_id) if event_id is not None else None,
    )


def _require_items(values: Any, name: str, item_type: Optional[type] = None) -> list:
    if values is None or isinstance(values, (str, bytes, Mapping)) or not isinstance(values, Iterable):
        raise ValidationError(f"{name}: cần một danh sách, nhận {type(values).__name__}")

    items = list(values)
    if item_type is not None:
        for item in items:
            if not isinstance(item, item_type):
                raise ValidationError(f"{name}: phần tử không hợp lệ ({type(item).__name__})")
    return items


def _index_shifts(shifts: Sequence[ScheduledShift]) -> dict[str, list[ScheduledShift]]:
    by_staff: dict[str, list[ScheduledShift]] = {}
    for shift in shifts:
        for staff_id in shift.staff_ids:
            by_staff.setdefault(str(staff_id), []).append(shift)
    return by_staff


def _index_events(raw_events: Sequence[Any]) -> dict[str, list[AttendanceEvent]]:
    by_staff: dict[str, list[AttendanceEvent]] = {}
    for raw in raw_events:
        try:
            event = normalize_event(raw)
        except MalformedEventSkipped as exc:
            logger.warning("Skipping malformed attendance event: %s", exc)
            continue
        by_staff.setdefault(event.staff_id, []).append(event)
    return by_staff


def _event_sort_key(event: AttendanceEvent):
    # Stable sort: exact duplicates keep arrival order.
    return (event.timestamp, _KIND_RANK[event.kind], event.shift_id or "")


def _fold(
    staff_id: str,
    member: StaffMember,
    events: Sequence[AttendanceEvent],
    shifts: Sequence[ScheduledShift],
    *,
    grace: float,
    factory: AttendanceStrategyFactory,
) -> StatusRecord:
    status = PresenceStatus.NOT_STARTED
    clock_in: Optional[datetime] = None
    clock_out: Optional[datetime] = None
    linked_shift_id: Optional[str] = None

    for event in events:
        if event.kind is EventKind.CLOCK_IN:
            status = PresenceStatus.CLOCKED_IN
            if clock_in is None:
                clock_in = event.timestamp
                linked_shift_id = event.shift_id
        elif event.kind is EventKind.CLOCK_OUT:
            status = PresenceStatus.CLOCKED_OUT
            clock_out = event.timestamp
        elif event.kind is EventKind.BREAK_START:
            if status is PresenceStatus.CLOCKED_IN:
                status = PresenceStatus.ON_BREAK
        elif event.kind is EventKind.BREAK_END:
            if status is PresenceStatus.ON_BREAK:
                status = PresenceStatus.CLOCKED_IN

    late = False
    if clock_in is not None and shifts:
        shift = match_shift(clock_in, shifts, shift_id=linked_shift_id)
        strategy = factory.for_checkin(clock_in=clock_in, shift=shift, grace_minutes=grace)
        decision = strategy.decide_checkin(clock_in=clock_in, shift=shift, grace_minutes=grace)
        late = decision.late
        if late:
            logger.debug("Staff %s clocked in %.1f min late", staff_id, decision.minutes_late)

    return StatusRecord(
        staff_id=staff_id,
        full_name=member.full_name,
        status=status,
        clock_in=clock_in,
        clock_out=clock_out,
        late=late,
    )


def match_shift(
    clock_in: datetime,
    shifts: Sequence[ScheduledShift],
    *,
    shift_id: Optional[str] = None,
) -> Optional[ScheduledShift]:
    """Pick the shift a clock-in belongs to.

    An explicit shift link wins. Otherwise the shift starting closest to the
    clock-in, with the earlier start on ties.
    """

    if not shifts:
        return None
    if shift_id is not None:
        for shift in shifts:
            if str(shift.shift_id) == str(shift_id):
                return shift

    return min(
        shifts,
        key=lambda s: (abs((clock_in - s.starts_at()).total_seconds()), s.starts_at(), s.shift_id),
    )


def _location_from_row(row: Mapping[str, Any]) -> Optional[GeoLocation]:
    lat, lon = row.get("latitude"), row.get("longitude")
    if lat is None or lon is None:
        return None
    try:
        accuracy = row.get("accuracy")
        return GeoLocation(
            latitude=float(lat),
            longitude=float(lon),
            accuracy=float(accuracy) if accuracy is not None else None,
        )
    except (TypeError, ValueError):
        return None


def _override_from_row(row: Mapping[str, Any]) -> Optional[OverrideInfo]:
    override = row.get("override")
    if not isinstance(override, Mapping):
        return None

    recorded_at = parse_timestamp(override.get("recorded_at", row.get("timestamp")))
    if recorded_at is None or not override.get("reason") or override.get("manager_id") is None:
        return None
    return OverrideInfo(
        reason=str(override["reason"]),
        manager_id=str(override["manager_id"]),
        recorded_at=recorded_at,
    )
