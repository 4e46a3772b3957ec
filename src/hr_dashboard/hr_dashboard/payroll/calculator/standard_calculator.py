from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from ...attendance.source import AttendanceSource
from ...core.constants import DEFAULT_DEDUCTION_RATE, DEFAULT_WORKING_DAYS_PER_MONTH
from ...core.exceptions import CalculationError, DataFetchError, NotFound
from ...employees.directory import EmployeeDirectory
from ..model import PayrollPeriod, PayrollRecord
from .base import PayrollCalculator

_CENTS = Decimal("0.01")
_HOURS_PER_DAY = Decimal("8")


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: worked hours in the period times the hourly rate.

    Hourly rate = basic salary / (working days per month * 8). Deductions are a
    flat share of gross pay; allowances are added on top.
    """

    def __init__(
        self,
        directory: EmployeeDirectory,
        attendance: AttendanceSource,
        *,
        working_days_per_month: int = DEFAULT_WORKING_DAYS_PER_MONTH,
        deduction_rate: Decimal | str = DEFAULT_DEDUCTION_RATE,
    ):
        self._directory = directory
        self._attendance = attendance
        self._working_days = int(working_days_per_month)
        self._deduction_rate = Decimal(deduction_rate)

    def hourly_rate(self, basic_salary: Decimal) -> Decimal:
        return Decimal(basic_salary) / (self._working_days * _HOURS_PER_DAY)

    def compute(self, employee_id: int, period: PayrollPeriod) -> PayrollRecord:
        try:
            employee = self._directory.get_by_id(employee_id)
            entries = self._attendance.get_by_employee(employee_id)
        except (NotFound, DataFetchError) as e:
            raise CalculationError(str(e)) from e

        worked = [e for e in entries if period.contains(e.work_date) and e.log_in is not None]
        hours = sum((Decimal(str(e.work_hours)) for e in worked), Decimal("0"))

        gross = (hours * self.hourly_rate(employee.basic_salary)).quantize(_CENTS, rounding=ROUND_HALF_UP)
        deductions = (gross * self._deduction_rate).quantize(_CENTS, rounding=ROUND_HALF_UP)

        return PayrollRecord.calculated(
            employee_id,
            period,
            days_worked=len(worked),
            gross_pay=gross,
            total_deductions=deductions,
            allowances=employee.allowances,
        )
