"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

DEFAULT_SESSION_DAYS = 7
DEFAULT_STANDARD_CHECK_IN = time(9, 0)
DEFAULT_LATE_THRESHOLD_MINUTES = 15
MAX_LATE_THRESHOLD_MINUTES = 240
DEFAULT_MANUAL_WORK_HOURS = 8
DEFAULT_HISTORY_DAYS = 5
DEFAULT_DETAIL_DAYS = 30
MAX_LOOKBACK_DAYS = 366

MAX_HOLIDAY_NAME_LENGTH = 255
MAX_HOLIDAY_DESCRIPTION_LENGTH = 1000

ACTIVE_EMPLOYEE_STATUS = "Active"
# Branch filter value meaning "no branch filter"
ALL_BRANCHES = "All Branches"
