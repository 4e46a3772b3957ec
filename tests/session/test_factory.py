from __future__ import annotations

from decimal import Decimal

import pytest

from hr_dashboard.attendance.source import InMemoryAttendanceSource
from hr_dashboard.core.enums import Role, ViewName
from hr_dashboard.core.exceptions import SessionTerminated
from hr_dashboard.employees.directory import InMemoryEmployeeDirectory
from hr_dashboard.employees.model import Employee
from hr_dashboard.payroll.calculator.standard_calculator import StandardPayrollCalculator
from hr_dashboard.session.auth import DirectoryAuthenticationProvider
from hr_dashboard.session.controller import SessionController
from hr_dashboard.session.factory import FailedSession, open_session

MANAGER = Employee(10006, "Andrea Mae Villanueva", "HR Manager", "Regular", Decimal("52670"))


@pytest.fixture
def collaborators():
    directory = InMemoryEmployeeDirectory([MANAGER])
    attendance = InMemoryAttendanceSource()
    return {
        "directory": directory,
        "attendance": attendance,
        "calculator": StandardPayrollCalculator(directory, attendance),
        "autostart": False,
    }


def test_open_session_derives_role_from_position(collaborators):
    session = open_session(DirectoryAuthenticationProvider(collaborators["directory"], 10006), **collaborators)

    assert isinstance(session, SessionController)
    assert session.context.role == Role.HR_MANAGER
    assert session.context.employee == MANAGER
    session.dispose()


def test_unknown_employee_lands_in_error_state(collaborators):
    session = open_session(DirectoryAuthenticationProvider(collaborators["directory"], 404), **collaborators)

    assert isinstance(session, FailedSession)
    assert session.current_view_state().current_view == ViewName.ERROR
    assert session.current_view_state().terminal
    assert "404" in session.error_message


def test_retry_builds_a_fresh_session_once_the_cause_is_fixed(collaborators):
    directory = collaborators["directory"]
    failed = open_session(DirectoryAuthenticationProvider(directory, 2), **collaborators)
    assert isinstance(failed, FailedSession)

    directory.add(Employee(2, "Late Hire", "Driver", "Probationary", Decimal("18000")))
    session = failed.retry()

    assert isinstance(session, SessionController)
    assert session.context.role == Role.EMPLOYEE
    assert failed.current_view_state().current_view == ViewName.LOGGED_OUT
    with pytest.raises(SessionTerminated):
        failed.exit()
    session.dispose()


def test_logout_from_error_state_notifies_provider(collaborators):
    auth = DirectoryAuthenticationProvider(collaborators["directory"], 404)
    failed = open_session(auth, **collaborators)

    failed.logout()

    assert auth.logged_out
    with pytest.raises(SessionTerminated):
        failed.retry()
