from __future__ import annotations

from datetime import time
from typing import Union

from ..core.constants import TIMELINE_END, TIMELINE_START
from .datetime_utils import minutes_of_day, parse_hhmm


def timeline_position(hhmm: Union[str, time]) -> float:
    """Map a wall-clock time onto the 08:00-22:00 display window.

    Returns a percentage in [0, 100]. Times outside the window are clamped
    to its edges.
    """

    start = minutes_of_day(TIMELINE_START)
    span = minutes_of_day(TIMELINE_END) - start
    offset = minutes_of_day(parse_hhmm(hhmm)) - start

    percent = offset / span * 100
    return max(0.0, min(100.0, percent))
