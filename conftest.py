from __future__ import annotations

from datetime import date, datetime

import pytest


@pytest.fixture
def today() -> date:
    return date(2026, 2, 2)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 2, 9, 40, 0)
