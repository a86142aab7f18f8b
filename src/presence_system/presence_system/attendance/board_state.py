from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

from ..core.enums import PresenceStatus
from ..core.exceptions import ValidationError
from .model import StatusRecord
from .override import OverrideResult


def can_override(record: StatusRecord) -> bool:
    """Managers may only clock in staff who aren't already on the clock."""

    return record.status not in (PresenceStatus.CLOCKED_IN, PresenceStatus.ON_BREAK)


@dataclass(frozen=True)
class BoardState:
    """UI state of the presence board, passed around as a value.

    Each transition returns a new BoardState; nothing is mutated in place.
    """

    selected_staff_id: Optional[str] = None
    override_staff_id: Optional[str] = None
    override_in_flight: bool = False
    last_result: Optional[OverrideResult] = None
    last_error: Optional[str] = None

    @property
    def override_dialog_open(self) -> bool:
        return self.override_staff_id is not None

    def select(self, staff_id: str) -> "BoardState":
        return replace(self, selected_staff_id=staff_id)

    def clear_selection(self) -> "BoardState":
        return replace(self, selected_staff_id=None)

    def open_override(self, record: StatusRecord) -> "BoardState":
        if not can_override(record):
            raise ValidationError("Nhân viên đã chấm công vào ca")
        return replace(self, override_staff_id=record.staff_id, last_error=None)

    def close_override(self) -> "BoardState":
        if self.override_in_flight:
            return self
        return replace(self, override_staff_id=None, last_error=None)

    def begin_submit(self) -> "BoardState":
        if not self.override_dialog_open:
            raise ValidationError("Chưa chọn nhân viên để chấm công thay")
        if self.override_in_flight:
            raise ValidationError("Đang gửi yêu cầu, vui lòng chờ")
        return replace(self, override_in_flight=True, last_error=None)

    def finish_submit(self, result: OverrideResult) -> "BoardState":
        return replace(
            self,
            override_staff_id=None,
            override_in_flight=False,
            last_result=result,
            last_error=None,
        )

    def fail_submit(self, message: str) -> "BoardState":
        # Dialog stays open so the manager can retry.
        return replace(self, override_in_flight=False, last_error=message)
