"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

# Grace applied by the host when settings don't say otherwise.
DEFAULT_LATE_GRACE_MINUTES = 5
DEFAULT_REFRESH_INTERVAL_SECONDS = 30
DEFAULT_FETCH_WORKERS = 3

TIMELINE_START = time(8, 0)
TIMELINE_END = time(22, 0)
