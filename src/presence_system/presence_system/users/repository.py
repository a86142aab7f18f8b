from __future__ import annotations

from typing import Protocol, Sequence

from .model import StaffMember


class RosterRepository(Protocol):
    """Giao diện repository cho roster.

    Lưu ý (DIP): tầng service phụ thuộc vào interface này, không phụ thuộc trực tiếp DB cụ thể.
    """

    def list_active_staff(self) -> Sequence[StaffMember]:
        raise NotImplementedError
