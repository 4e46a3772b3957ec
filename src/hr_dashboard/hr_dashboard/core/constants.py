"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import time

CLOCK_INTERVAL_SECONDS = 1.0
METRICS_INTERVAL_SECONDS = 30.0

DEFAULT_FULL_DAY_MIN_HOURS = 8.0
DEFAULT_WORK_START = time(8, 0)
DEFAULT_WORK_END = time(17, 0)
DEFAULT_BREAK_MINUTES = 60
DEFAULT_LATE_GRACE_MINUTES = 0

DEFAULT_WORKING_DAYS_PER_MONTH = 21
DEFAULT_DEDUCTION_RATE = "0.16"

CLOCK_FORMAT = "%B %d, %Y %I:%M:%S %p"
PERIOD_LABEL_FORMAT = "%b %Y"

REGULAR_STATUS = "regular"
PROBATIONARY_STATUS = "probationary"
