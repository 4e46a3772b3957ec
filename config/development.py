import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Refresh cadence of each dashboard session
CLOCK_INTERVAL_SECONDS = float(os.getenv("CLOCK_INTERVAL_SECONDS", "1"))
METRICS_INTERVAL_SECONDS = float(os.getenv("METRICS_INTERVAL_SECONDS", "30"))
START_REFRESH_TASKS = True

# Work schedule used to turn raw log in/out times into attendance entries
WORK_START = os.getenv("WORK_START", "08:00")
WORK_END = os.getenv("WORK_END", "17:00")
BREAK_MINUTES = int(os.getenv("BREAK_MINUTES", "60"))
LATE_GRACE_MINUTES = int(os.getenv("LATE_GRACE_MINUTES", "0"))
FULL_DAY_MIN_HOURS = float(os.getenv("FULL_DAY_MIN_HOURS", "8"))

WORKING_DAYS_PER_MONTH = int(os.getenv("WORKING_DAYS_PER_MONTH", "21"))
DEDUCTION_RATE = os.getenv("DEDUCTION_RATE", "0.16")

# Demo fixture for the in-memory directory/attendance collaborators
SEED_FILE = os.getenv("SEED_FILE", "data/seed.json")

# Idle dashboard sessions are closed after this many seconds
SESSION_TTL_SECONDS = float(os.getenv("SESSION_TTL_SECONDS", "1800"))
