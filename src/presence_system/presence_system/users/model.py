from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class StaffMember:
    """Thực thể miền (domain): nhân viên trong danh sách roster.

    Lưu ý: Đây là đối tượng dữ liệu thuần (không chứa code truy cập DB).
    """

    staff_id: str
    full_name: str
    role: Optional[str] = None
    is_active: bool = True
