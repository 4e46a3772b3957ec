from __future__ import annotations

import logging
from typing import Protocol

from ..core.enums import Role
from ..employees.directory import EmployeeDirectory
from ..employees.model import Employee
from ..employees.roles import role_for_position

logger = logging.getLogger(__name__)


class AuthenticationProvider(Protocol):
    def current_identity(self) -> tuple[Employee, Role]:
        raise NotImplementedError

    def notify_logout(self) -> None:
        raise NotImplementedError


class DirectoryAuthenticationProvider:
    """Identity handoff for an already-authenticated employee id.

    Credential checks happen before this point; the provider only resolves the
    employee snapshot and derives the role from the position once.
    """

    def __init__(self, directory: EmployeeDirectory, employee_id: int):
        self._directory = directory
        self._employee_id = int(employee_id)
        self.logged_out = False

    def current_identity(self) -> tuple[Employee, Role]:
        employee = self._directory.get_by_id(self._employee_id)
        return employee, role_for_position(employee.position)

    def notify_logout(self) -> None:
        self.logged_out = True
        logger.info("Employee %s logged out", self._employee_id)
