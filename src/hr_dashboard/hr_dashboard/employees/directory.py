from __future__ import annotations

from typing import Iterable, Protocol, Sequence

from ..core.exceptions import NotFound
from .model import Employee


class EmployeeDirectory(Protocol):
    """Read-only directory of employees.

    Implementations raise DataFetchError when the backing store is unreachable.
    """

    def get_all(self) -> Sequence[Employee]:
        raise NotImplementedError

    def get_by_id(self, employee_id: int) -> Employee:
        """Raise NotFound when the id is unknown."""

        raise NotImplementedError

    def search(self, term: str) -> Sequence[Employee]:
        raise NotImplementedError


class InMemoryEmployeeDirectory:
    def __init__(self, employees: Iterable[Employee] = ()):
        self._by_id: dict[int, Employee] = {e.employee_id: e for e in employees}

    def add(self, employee: Employee) -> None:
        self._by_id[employee.employee_id] = employee

    def get_all(self) -> Sequence[Employee]:
        return sorted(self._by_id.values(), key=lambda e: e.employee_id)

    def get_by_id(self, employee_id: int) -> Employee:
        employee = self._by_id.get(int(employee_id))
        if employee is None:
            raise NotFound(f"Employee {employee_id} not found")
        return employee

    def search(self, term: str) -> Sequence[Employee]:
        needle = (term or "").strip().lower()
        if not needle:
            return self.get_all()
        return [
            e
            for e in self.get_all()
            if needle in e.full_name.lower() or needle in e.position.lower() or needle == str(e.employee_id)
        ]
