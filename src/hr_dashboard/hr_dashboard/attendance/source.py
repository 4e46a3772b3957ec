from __future__ import annotations

from typing import Iterable, Protocol, Sequence

from .model import AttendanceEntry


class AttendanceSource(Protocol):
    def get_by_employee(self, employee_id: int) -> Sequence[AttendanceEntry]:
        """Entries ordered by date ascending. Raise DataFetchError on failure."""

        raise NotImplementedError


class InMemoryAttendanceSource:
    def __init__(self, entries: dict[int, Iterable[AttendanceEntry]] | None = None):
        self._by_employee: dict[int, list[AttendanceEntry]] = {}
        for employee_id, items in (entries or {}).items():
            for entry in items:
                self.add(employee_id, entry)

    def add(self, employee_id: int, entry: AttendanceEntry) -> None:
        items = self._by_employee.setdefault(int(employee_id), [])
        items.append(entry)
        items.sort(key=lambda e: e.work_date)

    def get_by_employee(self, employee_id: int) -> Sequence[AttendanceEntry]:
        return list(self._by_employee.get(int(employee_id), []))
