from __future__ import annotations

import math
from typing import Any

from ..core.exceptions import ValidationError


def require_non_empty(value: Any, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} không hợp lệ")
    return str(value).strip()


def require_grace_minutes(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError("Số phút cho phép đi muộn không hợp lệ")
    if not math.isfinite(value):
        raise ValidationError("Số phút cho phép đi muộn phải là số hữu hạn")
    if value < 0:
        raise ValidationError("Số phút cho phép đi muộn không được âm")
    return float(value)
