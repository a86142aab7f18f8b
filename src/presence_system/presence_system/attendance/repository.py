from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Protocol, Sequence, Union

from .model import AttendanceEvent


class EventRepository(Protocol):
    def list_events_for_date(self, work_date: date) -> Sequence[Union[AttendanceEvent, Mapping[str, Any]]]:
        """Events recorded for one day, in whatever order the store returns them.

        Adapters may return raw rows (mappings) instead of AttendanceEvent;
        the reconciler normalises them and skips the ones it can't read.
        """

        raise NotImplementedError

    def append_event(self, event: AttendanceEvent) -> str:
        """Persist a new event. Returns its event id."""

        raise NotImplementedError
