from __future__ import annotations

from decimal import Decimal

from ..attendance.model import AttendanceReport, AttendanceSummary
from ..employees.model import Employee
from ..navigation.router import ViewState
from ..payroll.model import PayrollRecord
from ..session.metrics import MetricsSnapshot


def _money(value: Decimal) -> str:
    return f"{value:.2f}"


def view_state_json(state: ViewState) -> dict:
    return {
        "current_view": state.current_view.value,
        "previous_view": state.previous_view.value if state.previous_view else None,
        "terminal": state.terminal,
    }


def summary_json(s: AttendanceSummary) -> dict:
    return {
        "total_days": s.total_days,
        "total_hours": round(s.total_hours, 2),
        "average_hours": round(s.average_hours, 2),
        "late_count": s.late_count,
    }


def attendance_json(report: AttendanceReport) -> dict:
    rows = []
    for r in report.rows:
        e = r.entry
        rows.append(
            {
                "date": e.work_date.strftime("%Y-%m-%d"),
                "log_in": e.log_in.strftime("%H:%M") if e.log_in else None,
                "log_out": e.log_out.strftime("%H:%M") if e.log_out else None,
                "work_hours": round(e.work_hours, 2),
                "status": r.status.value,
                "late_minutes": e.late_minutes,
                "undertime_minutes": e.undertime_minutes,
            }
        )
    return {"rows": rows, "summary": summary_json(report.summary)}


def payroll_json(r: PayrollRecord) -> dict:
    return {
        "employee_id": r.employee_id,
        "period": r.period.label,
        "start": r.period.start.isoformat(),
        "end": r.period.end.isoformat(),
        "status": r.status.value,
        "days_worked": r.days_worked,
        "gross_pay": _money(r.gross_pay),
        "allowances": {
            "rice": _money(r.allowances.rice),
            "phone": _money(r.allowances.phone),
            "clothing": _money(r.allowances.clothing),
            "total": _money(r.allowances.total),
        },
        "total_deductions": _money(r.total_deductions),
        "net_pay": _money(r.net_pay),
        "error": r.error_message,
    }


def metrics_json(m: MetricsSnapshot) -> dict:
    cards = {}
    for name, value in m.as_dict().items():
        cards[name] = _money(value) if isinstance(value, Decimal) else value
    return {
        "cards": cards,
        "refreshed_at": m.refreshed_at.isoformat() if m.refreshed_at else None,
        "error": m.error,
    }


def employee_json(e: Employee) -> dict:
    return {
        "employee_id": e.employee_id,
        "full_name": e.full_name,
        "position": e.position,
        "status": e.status,
        "basic_salary": _money(e.basic_salary),
    }
