"""Load the demo JSON fixture into the in-memory collaborators."""

from __future__ import annotations

import json
from datetime import datetime
from decimal import Decimal
from pathlib import Path
from typing import Optional

from .attendance.source import InMemoryAttendanceSource
from .attendance.timesheet import WorkSchedule, build_entry
from .common.datetime_utils import parse_iso_date
from .employees.directory import InMemoryEmployeeDirectory
from .employees.model import Allowances, Employee


def _combine(work_date, value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.combine(work_date, datetime.strptime(value, "%H:%M").time())


def employee_from_dict(raw: dict) -> Employee:
    return Employee(
        employee_id=int(raw["employee_id"]),
        full_name=str(raw["full_name"]),
        position=str(raw.get("position") or ""),
        status=str(raw.get("status") or ""),
        basic_salary=Decimal(str(raw.get("basic_salary", "0"))),
        allowances=Allowances(
            rice=Decimal(str(raw.get("rice", "0"))),
            phone=Decimal(str(raw.get("phone", "0"))),
            clothing=Decimal(str(raw.get("clothing", "0"))),
        ),
    )


def load_seed(
    data: dict,
    *,
    schedule: Optional[WorkSchedule] = None,
) -> tuple[InMemoryEmployeeDirectory, InMemoryAttendanceSource]:
    directory = InMemoryEmployeeDirectory(employee_from_dict(e) for e in data.get("employees", []))

    attendance = InMemoryAttendanceSource()
    for raw in data.get("attendance", []):
        work_date = parse_iso_date(raw["date"])
        entry = build_entry(
            work_date,
            _combine(work_date, raw.get("log_in")),
            _combine(work_date, raw.get("log_out")),
            schedule,
        )
        attendance.add(int(raw["employee_id"]), entry)

    return directory, attendance


def load_seed_file(
    path: Path,
    *,
    schedule: Optional[WorkSchedule] = None,
) -> tuple[InMemoryEmployeeDirectory, InMemoryAttendanceSource]:
    with open(path, encoding="utf-8") as f:
        return load_seed(json.load(f), schedule=schedule)
