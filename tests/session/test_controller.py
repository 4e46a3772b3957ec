from __future__ import annotations

import threading
import time
from datetime import date, datetime
from decimal import Decimal

import pytest

from hr_dashboard.attendance.source import InMemoryAttendanceSource
from hr_dashboard.attendance.timesheet import build_entry
from hr_dashboard.core.enums import MetricName, PayrollStatus, RefreshScope, Role, ViewName
from hr_dashboard.core.exceptions import DataFetchError, ForbiddenView, SessionTerminated
from hr_dashboard.employees.directory import InMemoryEmployeeDirectory
from hr_dashboard.employees.model import Employee
from hr_dashboard.payroll.calculator.base import PayrollCalculator
from hr_dashboard.payroll.model import PayrollPeriod, PayrollRecord
from hr_dashboard.payroll.resolver import PayrollResolver
from hr_dashboard.session.context import SessionContext
from hr_dashboard.session.controller import RefreshIntervals, SessionController

NOW = datetime(2024, 1, 3, 9, 30, 15)

STAFF = Employee(1, "Jose Santos", "Account Rank and File", "Probationary", Decimal("24000"))
HR = Employee(2, "Alice Romualdez", "HR Rank and File", "Regular", Decimal("22500"))
CEO = Employee(3, "Manuel Garcia III", "Chief Executive Officer", "Regular", Decimal("90000"))


def _day(d: date, login=(8, 0), logout=(17, 0)):
    return build_entry(
        d,
        datetime(d.year, d.month, d.day, *login) if login else None,
        datetime(d.year, d.month, d.day, *logout) if logout else None,
    )


class FlakyAttendance(InMemoryAttendanceSource):
    def __init__(self, entries=None):
        super().__init__(entries)
        self.fail = False
        self.block = False
        self.entered = threading.Event()
        self.release = threading.Event()
        self.calls = 0

    def get_by_employee(self, employee_id):
        self.calls += 1
        if self.block:
            self.entered.set()
            self.release.wait(5)
        if self.fail:
            raise DataFetchError("attendance offline")
        return super().get_by_employee(employee_id)


class FlakyDirectory(InMemoryEmployeeDirectory):
    fail = False

    def get_all(self):
        if self.fail:
            raise DataFetchError("directory offline")
        return super().get_all()

    def search(self, term):
        if self.fail:
            raise DataFetchError("directory offline")
        return super().search(term)


class FixedCalculator(PayrollCalculator):
    def compute(self, employee_id, period):
        return PayrollRecord.calculated(
            employee_id, period, days_worked=2, gross_pay=Decimal("50000"), total_deductions=Decimal("8000")
        )


class RecordingAuth:
    def __init__(self):
        self.logouts = 0

    def notify_logout(self):
        self.logouts += 1


@pytest.fixture
def attendance():
    return FlakyAttendance(
        {
            STAFF.employee_id: [_day(date(2024, 1, 2)), _day(date(2024, 1, 3), login=(8, 20))],
            HR.employee_id: [_day(date(2024, 1, 3))],
        }
    )


@pytest.fixture
def directory():
    return FlakyDirectory([STAFF, HR, CEO])


def make_controller(employee, role, directory, attendance, **kwargs):
    kwargs.setdefault("autostart", False)
    return SessionController(
        SessionContext(employee=employee, role=role, started_at=NOW),
        directory=directory,
        attendance=attendance,
        resolver=PayrollResolver(FixedCalculator()),
        clock=lambda: NOW,
        **kwargs,
    )


def test_session_opens_with_fresh_dashboard(directory, attendance):
    c = make_controller(STAFF, Role.EMPLOYEE, directory, attendance)

    assert c.current_view_state().current_view == ViewName.DASHBOARD
    assert c.attendance_summary().total_days == 2
    assert c.attendance_summary().late_count == 1
    assert c.clock_text() == "January 03, 2024 09:30:15 AM"
    assert c.metrics_snapshot().get(MetricName.DAYS_PRESENT) == 2
    assert c.metrics_snapshot().get(MetricName.TOTAL_EMPLOYEES) is None


def test_leave_modal_round_trip(directory, attendance):
    c = make_controller(STAFF, Role.EMPLOYEE, directory, attendance)

    assert c.request_view("LeaveModal")
    assert c.close_modal()

    assert c.current_view_state().current_view == ViewName.DASHBOARD


def test_forbidden_view_is_denied_quietly(directory, attendance):
    c = make_controller(STAFF, Role.EMPLOYEE, directory, attendance)

    assert c.request_view(ViewName.DIRECTORY) is False
    assert c.close_modal() is False
    assert c.current_view_state().current_view == ViewName.DASHBOARD


def test_requesting_same_view_refreshes_its_data(directory, attendance):
    c = make_controller(STAFF, Role.EMPLOYEE, directory, attendance)
    c.request_view(ViewName.ATTENDANCE)
    attendance.add(STAFF.employee_id, _day(date(2024, 1, 4)))

    assert c.attendance_summary().total_days == 2
    assert c.request_view(ViewName.ATTENDANCE)
    assert c.attendance_summary().total_days == 3


def test_workforce_metrics_are_computed(directory, attendance):
    c = make_controller(HR, Role.HR_ASSISTANT, directory, attendance)
    m = c.metrics_snapshot()

    assert m.get(MetricName.TOTAL_EMPLOYEES) == 3
    assert m.get(MetricName.REGULAR_EMPLOYEES) == 2
    assert m.get(MetricName.PROBATIONARY_EMPLOYEES) == 1
    assert m.get(MetricName.ATTENDANCE_RATE) == pytest.approx(66.7)
    assert m.get(MetricName.MONTHLY_PAYROLL_COST) is None


def test_executive_sees_payroll_cost(directory, attendance):
    c = make_controller(CEO, Role.EXECUTIVE, directory, attendance)

    assert c.metrics_snapshot().get(MetricName.MONTHLY_PAYROLL_COST) == Decimal("136500")


def test_attendance_failure_is_isolated(directory, attendance):
    c = make_controller(STAFF, Role.EMPLOYEE, directory, attendance)
    before = c.attendance_summary()
    attendance.fail = True

    assert c.refresh_now(RefreshScope.ATTENDANCE)

    assert c.view_errors()[RefreshScope.ATTENDANCE] == "attendance offline"
    assert c.attendance_summary() == before
    assert c.request_view(ViewName.PAYROLL)

    attendance.fail = False
    c.refresh_now(RefreshScope.ATTENDANCE)
    assert RefreshScope.ATTENDANCE not in c.view_errors()


def test_directory_failure_keeps_last_metrics(directory, attendance):
    c = make_controller(HR, Role.HR_ASSISTANT, directory, attendance)
    directory.fail = True

    c.refresh_now(RefreshScope.METRICS)

    m = c.metrics_snapshot()
    assert m.error == "directory offline"
    assert m.get(MetricName.TOTAL_EMPLOYEES) == 3
    assert c.search_directory("alice") == ()
    assert c.view_errors()[RefreshScope.DIRECTORY] == "directory offline"


def test_directory_search(directory, attendance):
    c = make_controller(HR, Role.HR_ASSISTANT, directory, attendance)

    assert [e.employee_id for e in c.search_directory("chief")] == [CEO.employee_id]
    assert len(c.search_directory("")) == 3

    staff = make_controller(STAFF, Role.EMPLOYEE, directory, attendance)
    with pytest.raises(ForbiddenView):
        staff.search_directory("x")


def test_payroll_pending_then_calculated(directory, attendance):
    c = make_controller(STAFF, Role.EMPLOYEE, directory, attendance)
    jan = PayrollPeriod.for_month(2024, 1)

    assert c.payroll_record(jan).status == PayrollStatus.PENDING
    c.calculate_payroll(jan)

    record = c.payroll_record()
    assert record.status == PayrollStatus.CALCULATED
    assert record.net_pay == Decimal("42000")
    assert c.payroll_history() == [record]


def test_payroll_forbidden_for_hr_assistant(directory, attendance):
    c = make_controller(HR, Role.HR_ASSISTANT, directory, attendance)

    with pytest.raises(ForbiddenView):
        c.payroll_record()


def test_logout_notifies_once_and_disposes(directory, attendance):
    auth = RecordingAuth()
    c = make_controller(STAFF, Role.EMPLOYEE, directory, attendance, auth=auth)

    c.logout()
    c.logout()
    c.dispose()

    assert auth.logouts == 1
    assert c.is_disposed
    assert c.context is None
    assert c.current_view_state().current_view == ViewName.LOGGED_OUT
    assert c.request_view(ViewName.DASHBOARD) is False
    assert c.refresh_now(RefreshScope.METRICS) is False
    with pytest.raises(SessionTerminated):
        c.payroll_record()


def test_dispose_waits_for_running_tick_and_silences_scheduler(directory, attendance):
    c = make_controller(
        STAFF,
        Role.EMPLOYEE,
        directory,
        attendance,
        intervals=RefreshIntervals(clock=0.001, metrics=0.001),
        autostart=True,
    )
    attendance.block = True
    assert attendance.entered.wait(2)

    disposer = threading.Thread(target=c.dispose)
    disposer.start()
    disposer.join(0.1)
    assert disposer.is_alive()

    attendance.release.set()
    disposer.join(2)
    assert not disposer.is_alive()

    calls = attendance.calls
    time.sleep(0.1)
    assert attendance.calls == calls
    assert not c.scheduler.is_running


class OverlapCountingAttendance(InMemoryAttendanceSource):
    def __init__(self, entries=None):
        super().__init__(entries)
        self._guard = threading.Lock()
        self.active = 0
        self.overlaps = 0
        self.calls = 0

    def get_by_employee(self, employee_id):
        with self._guard:
            self.active += 1
            self.calls += 1
            if self.active > 1:
                self.overlaps += 1
        try:
            time.sleep(0.0005)
            return super().get_by_employee(employee_id)
        finally:
            with self._guard:
                self.active -= 1


def test_manual_refresh_never_interleaves_with_ticks(directory):
    attendance = OverlapCountingAttendance({STAFF.employee_id: [_day(date(2024, 1, 2))]})
    c = make_controller(
        STAFF,
        Role.EMPLOYEE,
        directory,
        attendance,
        intervals=RefreshIntervals(clock=0.001, metrics=0.001),
        autostart=True,
    )

    for _ in range(200):
        assert c.refresh_now(RefreshScope.ATTENDANCE)
    c.dispose()

    assert attendance.calls >= 200
    assert attendance.overlaps == 0


def test_directory_view_fills_listing(directory, attendance):
    c = make_controller(HR, Role.HR_ASSISTANT, directory, attendance)
    assert c.directory_listing() == ()

    assert c.request_view(ViewName.DIRECTORY)

    assert [e.employee_id for e in c.directory_listing()] == [1, 2, 3]

    staff = make_controller(STAFF, Role.EMPLOYEE, directory, attendance)
    with pytest.raises(ForbiddenView):
        staff.directory_listing()


def test_selected_payroll_period_becomes_default(directory, attendance):
    c = make_controller(STAFF, Role.EMPLOYEE, directory, attendance)
    jan = PayrollPeriod.for_month(2024, 1)
    feb = PayrollPeriod.for_month(2024, 2)
    c.calculate_payroll(jan)
    assert c.payroll_record().status == PayrollStatus.CALCULATED

    selected = c.select_payroll_period(feb)

    assert selected.period == feb
    assert selected.status == PayrollStatus.PENDING
    assert c.payroll_record() == selected

    hr = make_controller(HR, Role.HR_ASSISTANT, directory, attendance)
    with pytest.raises(ForbiddenView):
        hr.select_payroll_period(feb)
