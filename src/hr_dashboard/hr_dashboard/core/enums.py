from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Capability set of a session, derived once from the employee's position."""

    EMPLOYEE = "EMPLOYEE"
    HR_ASSISTANT = "HR_ASSISTANT"
    HR_SPECIALIST = "HR_SPECIALIST"
    HR_MANAGER = "HR_MANAGER"
    EXECUTIVE = "EXECUTIVE"


class AttendanceStatus(str, Enum):
    """Derived per-day status. Never stored."""

    NO_LOG_IN = "NO_LOG_IN"
    NO_LOG_OUT = "NO_LOG_OUT"
    LATE_AND_UNDERTIME = "LATE_AND_UNDERTIME"
    LATE = "LATE"
    UNDERTIME = "UNDERTIME"
    FULL_DAY = "FULL_DAY"
    PRESENT = "PRESENT"


class PayrollStatus(str, Enum):
    PENDING = "PENDING"
    CALCULATED = "CALCULATED"
    ERROR = "ERROR"


class ViewName(str, Enum):
    DASHBOARD = "Dashboard"
    DIRECTORY = "Directory"
    PAYROLL = "PayrollView"
    ATTENDANCE = "AttendanceView"
    LEAVE_MODAL = "LeaveModal"
    REPORTS_MODAL = "ReportsModal"
    LOGGED_OUT = "LoggedOut"
    ERROR = "Error"

    @property
    def is_modal(self) -> bool:
        return self in (ViewName.LEAVE_MODAL, ViewName.REPORTS_MODAL)


class ErrorExit(str, Enum):
    """The only ways out of the full-screen session error state."""

    RETRY = "RETRY"
    LOGOUT = "LOGOUT"
    EXIT = "EXIT"


class RefreshKind(str, Enum):
    CLOCK = "CLOCK"
    METRICS = "METRICS"


class RefreshScope(str, Enum):
    CLOCK = "CLOCK"
    METRICS = "METRICS"
    ATTENDANCE = "ATTENDANCE"
    PAYROLL = "PAYROLL"
    DIRECTORY = "DIRECTORY"
    CURRENT_VIEW = "CURRENT_VIEW"


class MetricName(str, Enum):
    TOTAL_EMPLOYEES = "TOTAL_EMPLOYEES"
    REGULAR_EMPLOYEES = "REGULAR_EMPLOYEES"
    PROBATIONARY_EMPLOYEES = "PROBATIONARY_EMPLOYEES"
    ATTENDANCE_RATE = "ATTENDANCE_RATE"
    MONTHLY_PAYROLL_COST = "MONTHLY_PAYROLL_COST"
    DAYS_PRESENT = "DAYS_PRESENT"
    AVERAGE_HOURS = "AVERAGE_HOURS"
    LATE_COUNT = "LATE_COUNT"
