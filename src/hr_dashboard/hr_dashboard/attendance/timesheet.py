from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional

from ..common.datetime_utils import minutes_between
from ..core.constants import (
    DEFAULT_BREAK_MINUTES,
    DEFAULT_FULL_DAY_MIN_HOURS,
    DEFAULT_LATE_GRACE_MINUTES,
    DEFAULT_WORK_END,
    DEFAULT_WORK_START,
)
from .model import AttendanceEntry


@dataclass(frozen=True)
class WorkSchedule:
    start_time: time = DEFAULT_WORK_START
    end_time: time = DEFAULT_WORK_END
    break_minutes: int = DEFAULT_BREAK_MINUTES
    grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES
    full_day_min_hours: float = DEFAULT_FULL_DAY_MIN_HOURS


def build_entry(
    work_date: date,
    log_in: Optional[datetime],
    log_out: Optional[datetime],
    schedule: Optional[WorkSchedule] = None,
) -> AttendanceEntry:
    """Compute work hours, lateness and undertime for one day.

    Standard rule: (out - in) - break_minutes, not below 0. Hours are 0 unless
    both timestamps are present.
    """
    schedule = schedule or WorkSchedule()

    late = 0
    if log_in is not None:
        shift_start = datetime.combine(work_date, schedule.start_time)
        if log_in > shift_start + timedelta(minutes=schedule.grace_minutes):
            late = minutes_between(shift_start, log_in)

    if log_in is None or log_out is None:
        return AttendanceEntry(work_date=work_date, log_in=log_in, log_out=log_out, late_minutes=late)

    shift_end = datetime.combine(work_date, schedule.end_time)
    undertime = max(minutes_between(log_out, shift_end), 0)

    minutes = minutes_between(log_in, log_out) - int(schedule.break_minutes or 0)
    hours = max(minutes, 0) / 60

    return AttendanceEntry(
        work_date=work_date,
        log_in=log_in,
        log_out=log_out,
        work_hours=hours,
        late_minutes=late,
        undertime_minutes=undertime,
        is_full_day=hours >= schedule.full_day_min_hours and late == 0 and undertime == 0,
    )
