from __future__ import annotations

from ..core.enums import MetricName, Role, ViewName

_EMPLOYEE_VIEWS = frozenset({ViewName.DASHBOARD, ViewName.ATTENDANCE, ViewName.PAYROLL, ViewName.LEAVE_MODAL})
_HR_ASSISTANT_VIEWS = frozenset({ViewName.DASHBOARD, ViewName.DIRECTORY, ViewName.ATTENDANCE, ViewName.LEAVE_MODAL})
_HR_SPECIALIST_VIEWS = _HR_ASSISTANT_VIEWS | {ViewName.PAYROLL}
_HR_MANAGER_VIEWS = _HR_SPECIALIST_VIEWS | {ViewName.REPORTS_MODAL}
_EXECUTIVE_VIEWS = frozenset(
    {ViewName.DASHBOARD, ViewName.DIRECTORY, ViewName.ATTENDANCE, ViewName.PAYROLL, ViewName.REPORTS_MODAL}
)

REACHABLE_VIEWS: dict[Role, frozenset[ViewName]] = {
    Role.EMPLOYEE: _EMPLOYEE_VIEWS,
    Role.HR_ASSISTANT: _HR_ASSISTANT_VIEWS,
    Role.HR_SPECIALIST: _HR_SPECIALIST_VIEWS,
    Role.HR_MANAGER: _HR_MANAGER_VIEWS,
    Role.EXECUTIVE: _EXECUTIVE_VIEWS,
}

_PERSONAL_METRICS = frozenset({MetricName.DAYS_PRESENT, MetricName.AVERAGE_HOURS, MetricName.LATE_COUNT})
_WORKFORCE_METRICS = frozenset(
    {
        MetricName.TOTAL_EMPLOYEES,
        MetricName.REGULAR_EMPLOYEES,
        MetricName.PROBATIONARY_EMPLOYEES,
        MetricName.ATTENDANCE_RATE,
    }
)
_HR_METRICS = _PERSONAL_METRICS | _WORKFORCE_METRICS

VISIBLE_METRICS: dict[Role, frozenset[MetricName]] = {
    Role.EMPLOYEE: _PERSONAL_METRICS,
    Role.HR_ASSISTANT: _HR_METRICS,
    Role.HR_SPECIALIST: _HR_METRICS,
    Role.HR_MANAGER: _HR_METRICS,
    Role.EXECUTIVE: frozenset(MetricName),
}


def reachable_views(role: Role) -> frozenset[ViewName]:
    return REACHABLE_VIEWS[role]


def visible_metrics(role: Role) -> frozenset[MetricName]:
    return VISIBLE_METRICS[role]


def needs_workforce_metrics(role: Role) -> bool:
    return bool(VISIBLE_METRICS[role] & _WORKFORCE_METRICS)
