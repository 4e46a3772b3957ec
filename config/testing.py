SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

CLOCK_INTERVAL_SECONDS = 1.0
METRICS_INTERVAL_SECONDS = 30.0
# Tests drive refreshes by hand.
START_REFRESH_TASKS = False

WORK_START = "08:00"
WORK_END = "17:00"
BREAK_MINUTES = 60
LATE_GRACE_MINUTES = 0
FULL_DAY_MIN_HOURS = 8.0

WORKING_DAYS_PER_MONTH = 21
DEDUCTION_RATE = "0.16"

SEED_FILE = None

SESSION_TTL_SECONDS = 1800.0
