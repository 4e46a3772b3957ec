from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import Role
from ..employees.model import Employee


@dataclass(frozen=True)
class SessionContext:
    """Who the session belongs to. Read-only after construction."""

    employee: Employee
    role: Role
    started_at: datetime

    @property
    def employee_id(self) -> int:
        return self.employee.employee_id
