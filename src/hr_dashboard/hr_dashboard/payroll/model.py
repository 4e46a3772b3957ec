from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..common.datetime_utils import month_bounds
from ..core.constants import PERIOD_LABEL_FORMAT
from ..core.enums import PayrollStatus
from ..employees.model import Allowances


@dataclass(frozen=True, order=True)
class PayrollPeriod:
    """Inclusive date range, normally one calendar month."""

    start: date
    end: date

    def __post_init__(self):
        if self.end < self.start:
            raise ValueError("PayrollPeriod end must not be before start")

    @classmethod
    def for_month(cls, year: int, month: int) -> "PayrollPeriod":
        start, end = month_bounds(int(year), int(month))
        return cls(start=start, end=end)

    @classmethod
    def containing(cls, day: date) -> "PayrollPeriod":
        return cls.for_month(day.year, day.month)

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    @property
    def label(self) -> str:
        return self.start.strftime(PERIOD_LABEL_FORMAT)


@dataclass(frozen=True)
class PayrollKey:
    employee_id: int
    period: PayrollPeriod


@dataclass(frozen=True)
class PayrollRecord:
    employee_id: int
    period: PayrollPeriod
    status: PayrollStatus
    days_worked: int = 0
    gross_pay: Decimal = Decimal("0")
    allowances: Allowances = Allowances()
    total_deductions: Decimal = Decimal("0")
    net_pay: Decimal = Decimal("0")
    error_message: Optional[str] = None

    @classmethod
    def pending(cls, employee_id: int, period: PayrollPeriod) -> "PayrollRecord":
        return cls(employee_id=employee_id, period=period, status=PayrollStatus.PENDING)

    @classmethod
    def failed(cls, employee_id: int, period: PayrollPeriod, message: str) -> "PayrollRecord":
        return cls(employee_id=employee_id, period=period, status=PayrollStatus.ERROR, error_message=message)

    @classmethod
    def calculated(
        cls,
        employee_id: int,
        period: PayrollPeriod,
        *,
        days_worked: int,
        gross_pay: Decimal,
        total_deductions: Decimal,
        allowances: Allowances = Allowances(),
    ) -> "PayrollRecord":
        gross = Decimal(gross_pay)
        deductions = Decimal(total_deductions)
        return cls(
            employee_id=employee_id,
            period=period,
            status=PayrollStatus.CALCULATED,
            days_worked=int(days_worked),
            gross_pay=gross,
            allowances=allowances,
            total_deductions=deductions,
            net_pay=gross + allowances.total - deductions,
        )
