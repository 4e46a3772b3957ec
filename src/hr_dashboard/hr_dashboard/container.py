from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from .attendance.source import AttendanceSource, InMemoryAttendanceSource
from .attendance.timesheet import WorkSchedule
from .employees.directory import EmployeeDirectory, InMemoryEmployeeDirectory
from .payroll.calculator.base import PayrollCalculator
from .payroll.calculator.standard_calculator import StandardPayrollCalculator
from .seed import load_seed_file
from .session.auth import DirectoryAuthenticationProvider
from .session.controller import RefreshIntervals
from .session.factory import Session, open_session
from .session.registry import SessionRegistry


@dataclass(frozen=True)
class Container:
    directory: EmployeeDirectory
    attendance: AttendanceSource
    calculator: PayrollCalculator
    intervals: RefreshIntervals
    sessions: SessionRegistry


def _parse_hhmm(value: str):
    return datetime.strptime(str(value), "%H:%M").time()


def schedule_from_settings(settings) -> WorkSchedule:
    return WorkSchedule(
        start_time=_parse_hhmm(getattr(settings, "WORK_START", "08:00")),
        end_time=_parse_hhmm(getattr(settings, "WORK_END", "17:00")),
        break_minutes=int(getattr(settings, "BREAK_MINUTES", 60)),
        grace_minutes=int(getattr(settings, "LATE_GRACE_MINUTES", 0)),
        full_day_min_hours=float(getattr(settings, "FULL_DAY_MIN_HOURS", 8.0)),
    )


def build_container(
    *,
    settings,
    directory: Optional[EmployeeDirectory] = None,
    attendance: Optional[AttendanceSource] = None,
    calculator: Optional[PayrollCalculator] = None,
) -> Container:
    schedule = schedule_from_settings(settings)

    if directory is None or attendance is None:
        seed_file = getattr(settings, "SEED_FILE", None)
        if seed_file and Path(seed_file).exists():
            seeded_directory, seeded_attendance = load_seed_file(Path(seed_file), schedule=schedule)
        else:
            seeded_directory, seeded_attendance = InMemoryEmployeeDirectory(), InMemoryAttendanceSource()
        directory = directory or seeded_directory
        attendance = attendance or seeded_attendance

    calculator = calculator or StandardPayrollCalculator(
        directory,
        attendance,
        working_days_per_month=int(getattr(settings, "WORKING_DAYS_PER_MONTH", 21)),
        deduction_rate=str(getattr(settings, "DEDUCTION_RATE", "0.16")),
    )
    intervals = RefreshIntervals(
        clock=float(getattr(settings, "CLOCK_INTERVAL_SECONDS", 1.0)),
        metrics=float(getattr(settings, "METRICS_INTERVAL_SECONDS", 30.0)),
    )
    autostart = bool(getattr(settings, "START_REFRESH_TASKS", True))
    ttl = getattr(settings, "SESSION_TTL_SECONDS", None)
    ttl = float(ttl) if ttl else None

    def opener(employee_id: int) -> Session:
        return open_session(
            DirectoryAuthenticationProvider(directory, employee_id),
            directory=directory,
            attendance=attendance,
            calculator=calculator,
            intervals=intervals,
            autostart=autostart,
        )

    return Container(
        directory=directory,
        attendance=attendance,
        calculator=calculator,
        intervals=intervals,
        sessions=SessionRegistry(opener, ttl_seconds=ttl),
    )
