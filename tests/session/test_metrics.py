from datetime import date, datetime
from decimal import Decimal

from hr_dashboard.attendance.model import AttendanceEntry, AttendanceSummary
from hr_dashboard.attendance.source import InMemoryAttendanceSource
from hr_dashboard.core.enums import MetricName, Role
from hr_dashboard.employees.model import Employee
from hr_dashboard.session.metrics import attendance_rate, build_snapshot, personal_values

DAY = date(2024, 3, 4)


def test_attendance_rate_counts_logins_on_the_day():
    employees = [Employee(i, f"E{i}", "Driver", "Regular", Decimal("1")) for i in (1, 2, 3, 4)]
    source = InMemoryAttendanceSource(
        {
            1: [AttendanceEntry(DAY, datetime(2024, 3, 4, 8, 0), None)],
            2: [AttendanceEntry(date(2024, 3, 3), datetime(2024, 3, 3, 8, 0), None)],
            3: [AttendanceEntry(DAY, None, None)],
        }
    )

    assert attendance_rate(employees, source, DAY) == 25.0
    assert attendance_rate([], source, DAY) == 0.0


def test_snapshot_hides_cards_the_role_cannot_see():
    values = personal_values(AttendanceSummary(total_days=3, total_hours=23.5, average_hours=23.5 / 3, late_count=1))
    values[MetricName.TOTAL_EMPLOYEES] = 10

    snapshot = build_snapshot(Role.EMPLOYEE, values, refreshed_at=datetime(2024, 3, 4, 9, 0))

    assert snapshot.as_dict() == {"DAYS_PRESENT": 3, "AVERAGE_HOURS": 7.83, "LATE_COUNT": 1}
