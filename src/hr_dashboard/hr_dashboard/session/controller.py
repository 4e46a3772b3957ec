from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..attendance.aggregator import AttendanceAggregator
from ..attendance.model import AttendanceReport, AttendanceSummary
from ..attendance.source import AttendanceSource
from ..common.datetime_utils import now_local
from ..core.constants import CLOCK_FORMAT, CLOCK_INTERVAL_SECONDS, METRICS_INTERVAL_SECONDS
from ..core.enums import RefreshKind, RefreshScope, ViewName
from ..core.exceptions import DataFetchError, ForbiddenView, NoActiveModal, SessionTerminated
from ..employees.directory import EmployeeDirectory
from ..employees.model import Employee
from ..navigation.permissions import needs_workforce_metrics
from ..navigation.router import ViewRouter, ViewState
from ..payroll.model import PayrollPeriod, PayrollRecord
from ..payroll.resolver import PayrollResolver
from ..scheduling.scheduler import RefreshScheduler, Reporter
from .auth import AuthenticationProvider
from .context import SessionContext
from .metrics import MetricsSnapshot, build_snapshot, personal_values, workforce_values

logger = logging.getLogger(__name__)

_VIEW_SCOPES: dict[ViewName, tuple[RefreshScope, ...]] = {
    ViewName.DASHBOARD: (RefreshScope.METRICS,),
    ViewName.ATTENDANCE: (RefreshScope.ATTENDANCE,),
    ViewName.PAYROLL: (RefreshScope.PAYROLL,),
    ViewName.DIRECTORY: (RefreshScope.DIRECTORY,),
}


@dataclass(frozen=True)
class RefreshIntervals:
    clock: float = CLOCK_INTERVAL_SECONDS
    metrics: float = METRICS_INTERVAL_SECONDS


class SessionController:
    """Composition root for one logged-in user's dashboard.

    Owns the router, the refresh scheduler and the derived data. Scheduler
    ticks and manual refreshes both go through ``self._lock``, so every
    aggregate is replaced by one complete update at a time. Accessors hand
    out frozen snapshots.
    """

    def __init__(
        self,
        context: SessionContext,
        *,
        directory: EmployeeDirectory,
        attendance: AttendanceSource,
        resolver: PayrollResolver,
        auth: Optional[AuthenticationProvider] = None,
        aggregator: Optional[AttendanceAggregator] = None,
        intervals: RefreshIntervals = RefreshIntervals(),
        reporter: Optional[Reporter] = None,
        clock: Callable[[], datetime] = now_local,
        autostart: bool = True,
    ):
        self._lock = threading.RLock()
        self._context: Optional[SessionContext] = context
        self._directory = directory
        self._attendance_source = attendance
        self._resolver = resolver
        self._auth = auth
        self._aggregator = aggregator or AttendanceAggregator()
        self._clock = clock
        self._router = ViewRouter(context.role)
        self._scheduler = RefreshScheduler(serial_lock=self._lock, reporter=reporter, clock=clock)
        self._disposed = False
        self._logout_notified = False

        self._clock_text = ""
        self._attendance = AttendanceReport()
        self._metrics = MetricsSnapshot()
        self._directory_rows: tuple[Employee, ...] = ()
        self._errors: dict[RefreshScope, str] = {}
        self._payroll_period = PayrollPeriod.containing(clock().date())

        with self._lock:
            self._refresh(RefreshScope.CLOCK)
            self._refresh(RefreshScope.METRICS)

        self._scheduler.register(RefreshKind.CLOCK, intervals.clock, self._tick_clock)
        self._scheduler.register(RefreshKind.METRICS, intervals.metrics, self._tick_metrics)
        if autostart:
            self._scheduler.start()

        logger.info("Session opened for employee %s as %s", context.employee_id, context.role.value)

    # -- navigation -----------------------------------------------------------

    def request_view(self, name: ViewName | str) -> bool:
        """Switch views. Returns False when the request was denied."""
        with self._lock:
            try:
                state = self._router.request_view(name)
            except (ForbiddenView, SessionTerminated) as e:
                logger.warning("View request %s rejected: %s", name, e)
                return False

            for scope in _VIEW_SCOPES.get(state.current_view, ()):
                self._refresh(scope)
            return True

    def close_modal(self) -> bool:
        with self._lock:
            try:
                self._router.close_modal()
            except (NoActiveModal, SessionTerminated) as e:
                logger.warning("Close modal rejected: %s", e)
                return False
            return True

    def logout(self) -> None:
        """End the session and tell the auth provider. Safe to call repeatedly."""
        with self._lock:
            notify = self._auth is not None and not self._logout_notified
            self._logout_notified = True
        if notify:
            self._auth.notify_logout()
        self.dispose()

    def dispose(self) -> None:
        # Must not hold the lock here: stop() waits for a tick that may need it.
        self._scheduler.stop()

        with self._lock:
            if self._disposed:
                return
            self._disposed = True
            employee_id = self._context.employee_id if self._context else None
            self._context = None
            self._router.logout()
        logger.info("Session for employee %s disposed", employee_id)

    # -- refresh --------------------------------------------------------------

    def refresh_now(self, scope: RefreshScope | str = RefreshScope.CURRENT_VIEW) -> bool:
        scope = RefreshScope(scope)
        with self._lock:
            if self._context is None:
                logger.warning("Refresh %s ignored: session disposed", scope.value)
                return False
            self._refresh(scope)
            return True

    def _tick_clock(self) -> None:
        if self._context is not None:
            self._refresh(RefreshScope.CLOCK)

    def _tick_metrics(self) -> None:
        if self._context is not None:
            self._refresh(RefreshScope.METRICS)

    def _refresh(self, scope: RefreshScope) -> None:
        if scope == RefreshScope.CURRENT_VIEW:
            for s in _VIEW_SCOPES.get(self._router.current_view, ()):
                self._refresh(s)
        elif scope == RefreshScope.CLOCK:
            self._clock_text = self._clock().strftime(CLOCK_FORMAT)
        elif scope == RefreshScope.ATTENDANCE:
            self._refresh_attendance()
        elif scope == RefreshScope.METRICS:
            self._refresh_attendance()
            self._refresh_metrics()
        elif scope == RefreshScope.PAYROLL:
            if self._router.can_reach(ViewName.PAYROLL):
                self._resolver.resolve(self._context.employee_id, self._payroll_period)
        elif scope == RefreshScope.DIRECTORY:
            if self._router.can_reach(ViewName.DIRECTORY):
                self._refresh_directory()

    def _refresh_attendance(self) -> None:
        try:
            entries = self._attendance_source.get_by_employee(self._context.employee_id)
        except DataFetchError as e:
            logger.warning("Attendance fetch failed: %s", e)
            self._errors[RefreshScope.ATTENDANCE] = str(e)
            return
        self._attendance = self._aggregator.aggregate(entries)
        self._errors.pop(RefreshScope.ATTENDANCE, None)

    def _refresh_metrics(self) -> None:
        ctx = self._context
        now = self._clock()
        values = personal_values(self._attendance.summary)
        error = None

        if needs_workforce_metrics(ctx.role):
            try:
                employees = list(self._directory.get_all())
                values.update(workforce_values(employees, self._attendance_source, now.date()))
            except DataFetchError as e:
                logger.warning("Metrics refresh failed: %s", e)
                error = str(e)

        if error:
            self._errors[RefreshScope.METRICS] = error
            # Keep the last good workforce cards next to the error badge.
            for card in self._metrics.cards:
                values.setdefault(card.name, card.value)
        else:
            self._errors.pop(RefreshScope.METRICS, None)
        self._metrics = build_snapshot(ctx.role, values, refreshed_at=now, error=error)

    def _refresh_directory(self, term: str = "") -> None:
        try:
            rows = self._directory.search(term) if term else self._directory.get_all()
        except DataFetchError as e:
            logger.warning("Directory fetch failed: %s", e)
            self._errors[RefreshScope.DIRECTORY] = str(e)
            return
        self._directory_rows = tuple(rows)
        self._errors.pop(RefreshScope.DIRECTORY, None)

    # -- payroll --------------------------------------------------------------

    def select_payroll_period(self, period: PayrollPeriod) -> PayrollRecord:
        with self._lock:
            self._require_payroll_access()
            self._payroll_period = period
        return self.payroll_record(period)

    def payroll_record(self, period: Optional[PayrollPeriod] = None) -> PayrollRecord:
        ctx = self._require_payroll_access()
        return self._resolver.resolve(ctx.employee_id, period or self._payroll_period)

    def calculate_payroll(self, period: Optional[PayrollPeriod] = None) -> PayrollRecord:
        # Runs outside the session lock so ticks keep flowing while the calculator works.
        ctx = self._require_payroll_access()
        return self._resolver.calculate(ctx.employee_id, period or self._payroll_period)

    def recalculate_payroll(self, period: Optional[PayrollPeriod] = None) -> PayrollRecord:
        ctx = self._require_payroll_access()
        return self._resolver.recalculate(ctx.employee_id, period or self._payroll_period)

    def payroll_history(self) -> Sequence[PayrollRecord]:
        ctx = self._require_payroll_access()
        return self._resolver.records_for(ctx.employee_id)

    # -- directory ------------------------------------------------------------

    def directory_listing(self) -> tuple[Employee, ...]:
        """Rows from the last Directory refresh or search."""
        with self._lock:
            self._require_active()
            if not self._router.can_reach(ViewName.DIRECTORY):
                raise ForbiddenView("Directory is not available for this role")
            return self._directory_rows

    def search_directory(self, term: str) -> tuple[Employee, ...]:
        with self._lock:
            self._require_active()
            if not self._router.can_reach(ViewName.DIRECTORY):
                raise ForbiddenView("Directory is not available for this role")
            self._refresh_directory((term or "").strip())
            return self._directory_rows

    # -- snapshots ------------------------------------------------------------

    @property
    def context(self) -> Optional[SessionContext]:
        return self._context

    @property
    def scheduler(self) -> RefreshScheduler:
        return self._scheduler

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def current_view_state(self) -> ViewState:
        return self._router.state

    def attendance_summary(self) -> AttendanceSummary:
        with self._lock:
            return self._attendance.summary

    def attendance_report(self) -> AttendanceReport:
        with self._lock:
            return self._attendance

    def metrics_snapshot(self) -> MetricsSnapshot:
        with self._lock:
            return self._metrics

    def clock_text(self) -> str:
        with self._lock:
            return self._clock_text

    def view_errors(self) -> dict[RefreshScope, str]:
        with self._lock:
            return dict(self._errors)

    def _require_active(self) -> SessionContext:
        ctx = self._context
        if ctx is None:
            raise SessionTerminated("Session has been disposed")
        return ctx

    def _require_payroll_access(self) -> SessionContext:
        ctx = self._require_active()
        if not self._router.can_reach(ViewName.PAYROLL):
            raise ForbiddenView("Payroll is not available for this role")
        return ctx
