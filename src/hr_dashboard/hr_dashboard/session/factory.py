from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Union

from ..attendance.source import AttendanceSource
from ..common.datetime_utils import now_local
from ..core.enums import ErrorExit, ViewName
from ..employees.directory import EmployeeDirectory
from ..navigation.router import ViewRouter, ViewState
from ..payroll.calculator.base import PayrollCalculator
from ..payroll.resolver import PayrollResolver
from ..scheduling.scheduler import Reporter
from .auth import AuthenticationProvider
from .context import SessionContext
from .controller import RefreshIntervals, SessionController

logger = logging.getLogger(__name__)


class FailedSession:
    """Full-screen error state left behind when a session cannot be built.

    The only ways out are retry, logout and exit; whichever is chosen first
    ends this object.
    """

    def __init__(self, error: str, *, auth: AuthenticationProvider, rebuild: Callable[[], "Session"]):
        self.error_message = error
        self._auth = auth
        self._rebuild = rebuild
        self._router = ViewRouter.failed()

    def current_view_state(self) -> ViewState:
        return self._router.state

    @property
    def is_open(self) -> bool:
        return self._router.current_view == ViewName.ERROR

    def retry(self) -> "Session":
        self._router.exit_error(ErrorExit.RETRY)
        return self._rebuild()

    def logout(self) -> None:
        self._router.exit_error(ErrorExit.LOGOUT)
        self._auth.notify_logout()

    def exit(self) -> None:
        self._router.exit_error(ErrorExit.EXIT)


Session = Union[SessionController, FailedSession]


def open_session(
    auth: AuthenticationProvider,
    *,
    directory: EmployeeDirectory,
    attendance: AttendanceSource,
    calculator: PayrollCalculator,
    intervals: RefreshIntervals = RefreshIntervals(),
    reporter: Optional[Reporter] = None,
    clock: Callable[[], datetime] = now_local,
    autostart: bool = True,
) -> Session:
    """Build a SessionController for whoever ``auth`` identifies.

    Any failure while building lands in a FailedSession instead of raising.
    """

    def rebuild() -> Session:
        return open_session(
            auth,
            directory=directory,
            attendance=attendance,
            calculator=calculator,
            intervals=intervals,
            reporter=reporter,
            clock=clock,
            autostart=autostart,
        )

    try:
        employee, role = auth.current_identity()
        context = SessionContext(employee=employee, role=role, started_at=clock())
        return SessionController(
            context,
            directory=directory,
            attendance=attendance,
            resolver=PayrollResolver(calculator),
            auth=auth,
            intervals=intervals,
            reporter=reporter,
            clock=clock,
            autostart=autostart,
        )
    except Exception as e:
        logger.exception("Could not open session")
        return FailedSession(str(e) or type(e).__name__, auth=auth, rebuild=rebuild)
