"""Presence reconciliation package.

Organised by feature modules (users, shifts, attendance) with a pure
reconciliation core and SOLID service/repository layers around it.
BoardState and can_override are exported for the board UI that drives
selection and the override dialog.
"""

from .attendance.board_state import BoardState, can_override
from .attendance.reconciler import reconcile, summarize
from .common.timeline import timeline_position

__all__ = ["BoardState", "can_override", "reconcile", "summarize", "timeline_position"]
