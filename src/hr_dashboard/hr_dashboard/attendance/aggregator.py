from __future__ import annotations

from typing import Callable, Iterable, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceEntry, AttendanceReport, AttendanceRow, AttendanceSummary

# Precedence matters: the first rule whose predicate holds decides the status.
_STATUS_RULES: tuple[tuple[Callable[[AttendanceEntry], bool], AttendanceStatus], ...] = (
    (lambda e: e.log_in is None, AttendanceStatus.NO_LOG_IN),
    (lambda e: e.log_out is None, AttendanceStatus.NO_LOG_OUT),
    (lambda e: e.is_late and e.has_undertime, AttendanceStatus.LATE_AND_UNDERTIME),
    (lambda e: e.is_late, AttendanceStatus.LATE),
    (lambda e: e.has_undertime, AttendanceStatus.UNDERTIME),
    (lambda e: e.is_full_day, AttendanceStatus.FULL_DAY),
)


class AttendanceAggregator:
    """Derives statuses and one summary from a date-ordered entry sequence.

    Stateless: the same input always gives the same output.
    """

    def derive_status(self, entry: AttendanceEntry) -> AttendanceStatus:
        for predicate, status in _STATUS_RULES:
            if predicate(entry):
                return status
        return AttendanceStatus.PRESENT

    def summarize(self, entries: Iterable[AttendanceEntry]) -> AttendanceSummary:
        total_days = 0
        total_hours = 0.0
        late_count = 0

        for e in entries:
            if e.log_in is not None:
                total_days += 1
                total_hours += e.work_hours
            if e.is_late:
                late_count += 1

        average = total_hours / total_days if total_days > 0 else 0.0
        return AttendanceSummary(
            total_days=total_days,
            total_hours=total_hours,
            average_hours=average,
            late_count=late_count,
        )

    def aggregate(self, entries: Sequence[AttendanceEntry]) -> AttendanceReport:
        items = tuple(entries)
        rows = tuple(AttendanceRow(entry=e, status=self.derive_status(e)) for e in items)
        return AttendanceReport(rows=rows, summary=self.summarize(items))
