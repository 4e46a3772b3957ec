"""Example: drive one dashboard session without Flask.

The controller is usable on its own; the web layer only forwards to it.
"""

import importlib

from config import get_settings_module

from hr_dashboard.container import build_container
from hr_dashboard.core.enums import ViewName
from hr_dashboard.payroll.model import PayrollPeriod


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(settings=settings)

    token, session = container.sessions.open(10025)
    try:
        session.request_view(ViewName.ATTENDANCE)
        print(session.attendance_summary())
        print(session.calculate_payroll(PayrollPeriod.for_month(2024, 1)))
        print(session.metrics_snapshot().as_dict())
    finally:
        container.sessions.close(token)


if __name__ == "__main__":
    main()
