from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Sequence, Union

from ..attendance.model import AttendanceSummary
from ..attendance.source import AttendanceSource
from ..core.enums import MetricName, Role
from ..employees.model import Employee
from ..navigation.permissions import visible_metrics

MetricValue = Union[int, float, Decimal]


@dataclass(frozen=True)
class MetricCard:
    name: MetricName
    value: MetricValue


@dataclass(frozen=True)
class MetricsSnapshot:
    cards: tuple[MetricCard, ...] = ()
    refreshed_at: Optional[datetime] = None
    error: Optional[str] = None

    def get(self, name: MetricName) -> Optional[MetricValue]:
        for card in self.cards:
            if card.name == name:
                return card.value
        return None

    def as_dict(self) -> dict[str, MetricValue]:
        return {card.name.value: card.value for card in self.cards}


def attendance_rate(employees: Sequence[Employee], attendance: AttendanceSource, on: date) -> float:
    """Percent of employees with a login on ``on``, rounded to one decimal."""
    if not employees:
        return 0.0

    present = 0
    for emp in employees:
        if any(e.work_date == on and e.log_in is not None for e in attendance.get_by_employee(emp.employee_id)):
            present += 1
    return round(present * 100 / len(employees), 1)


def workforce_values(
    employees: Sequence[Employee],
    attendance: AttendanceSource,
    on: date,
) -> dict[MetricName, MetricValue]:
    return {
        MetricName.TOTAL_EMPLOYEES: len(employees),
        MetricName.REGULAR_EMPLOYEES: sum(1 for e in employees if e.is_regular),
        MetricName.PROBATIONARY_EMPLOYEES: sum(1 for e in employees if e.is_probationary),
        MetricName.ATTENDANCE_RATE: attendance_rate(employees, attendance, on),
        MetricName.MONTHLY_PAYROLL_COST: sum((e.monthly_cost for e in employees), Decimal("0")),
    }


def personal_values(summary: AttendanceSummary) -> dict[MetricName, MetricValue]:
    return {
        MetricName.DAYS_PRESENT: summary.total_days,
        MetricName.AVERAGE_HOURS: round(summary.average_hours, 2),
        MetricName.LATE_COUNT: summary.late_count,
    }


def build_snapshot(
    role: Role,
    values: dict[MetricName, MetricValue],
    *,
    refreshed_at: datetime,
    error: Optional[str] = None,
) -> MetricsSnapshot:
    """Keep only the cards the role may see, in a stable order."""
    allowed = visible_metrics(role)
    cards = tuple(MetricCard(name, values[name]) for name in MetricName if name in allowed and name in values)
    return MetricsSnapshot(cards=cards, refreshed_at=refreshed_at, error=error)
