from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceEntry:
    """Domain entity: one day of attendance as delivered by the attendance source."""

    work_date: date
    log_in: Optional[datetime]
    log_out: Optional[datetime]
    work_hours: float = 0.0
    late_minutes: int = 0
    undertime_minutes: int = 0
    is_full_day: bool = False

    @property
    def is_late(self) -> bool:
        return self.late_minutes > 0

    @property
    def has_undertime(self) -> bool:
        return self.undertime_minutes > 0


@dataclass(frozen=True)
class AttendanceSummary:
    total_days: int = 0
    total_hours: float = 0.0
    average_hours: float = 0.0
    late_count: int = 0


@dataclass(frozen=True)
class AttendanceRow:
    """Read-model for the attendance table: the entry plus its derived status."""

    entry: AttendanceEntry
    status: AttendanceStatus


@dataclass(frozen=True)
class AttendanceReport:
    rows: tuple[AttendanceRow, ...] = ()
    summary: AttendanceSummary = AttendanceSummary()
