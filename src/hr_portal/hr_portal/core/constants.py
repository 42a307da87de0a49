"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_LATE_CUTOFF = time(9, 0)
DEFAULT_ACTIVE_WINDOW_MINUTES = 5
DEFAULT_HISTORY_LIMIT = 30

DEFAULT_SICK_LEAVE = 7
DEFAULT_ANNUAL_LEAVE = 12
DEFAULT_EMERGENCY_LEAVE = 3

DEFAULT_PAGE_LIMIT = 50
MAX_PAGE_LIMIT = 100

DEFAULT_TOKEN_TTL_MINUTES = 60
DEFAULT_SESSION_TTL_HOURS = 24 * 5
DEFAULT_MANAGER_CACHE_TTL_SECONDS = 5 * 60

MIN_PASSWORD_LENGTH = 6
