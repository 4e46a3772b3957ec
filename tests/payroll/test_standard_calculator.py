from datetime import date, datetime
from decimal import Decimal

import pytest

from hr_dashboard.attendance.source import InMemoryAttendanceSource
from hr_dashboard.attendance.timesheet import build_entry
from hr_dashboard.core.exceptions import CalculationError
from hr_dashboard.employees.directory import InMemoryEmployeeDirectory
from hr_dashboard.employees.model import Allowances, Employee
from hr_dashboard.payroll.calculator.standard_calculator import StandardPayrollCalculator
from hr_dashboard.payroll.model import PayrollPeriod


def _day(d: date):
    return build_entry(d, datetime(d.year, d.month, d.day, 8, 0), datetime(d.year, d.month, d.day, 17, 0))


@pytest.fixture
def calculator():
    employee = Employee(
        employee_id=1,
        full_name="A",
        position="Account Rank and File",
        status="Regular",
        basic_salary=Decimal("33600"),
        allowances=Allowances(rice=Decimal("1500")),
    )
    attendance = InMemoryAttendanceSource(
        {1: [_day(date(2024, 1, 2)), _day(date(2024, 1, 3)), _day(date(2024, 2, 1))]}
    )
    return StandardPayrollCalculator(InMemoryEmployeeDirectory([employee]), attendance, deduction_rate="0.16")


def test_hourly_rate_from_basic_salary(calculator):
    assert calculator.hourly_rate(Decimal("33600")) == Decimal("200")


def test_compute_only_counts_days_in_period(calculator):
    record = calculator.compute(1, PayrollPeriod.for_month(2024, 1))

    assert record.days_worked == 2
    assert record.gross_pay == Decimal("3200.00")
    assert record.total_deductions == Decimal("512.00")
    assert record.net_pay == Decimal("4188.00")


def test_unknown_employee_raises_calculation_error(calculator):
    with pytest.raises(CalculationError):
        calculator.compute(404, PayrollPeriod.for_month(2024, 1))
