from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..core.enums import ErrorExit, Role, ViewName
from ..core.exceptions import ForbiddenView, NoActiveModal, SessionTerminated
from .permissions import reachable_views

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewState:
    current_view: ViewName
    previous_view: Optional[ViewName] = None
    terminal: bool = False


def _coerce(name: ViewName | str) -> ViewName:
    if isinstance(name, ViewName):
        return name
    try:
        return ViewName(name)
    except ValueError:
        raise ForbiddenView(f"Unknown view {name!r}") from None


class ViewRouter:
    """State machine over the views a role may reach.

    Exactly one view is current. A modal remembers the non-modal view it was
    opened from; opening another modal replaces it but keeps that origin, so
    nesting never goes deeper than one. LoggedOut and Error are terminal.
    """

    def __init__(self, role: Optional[Role]):
        self._role = role
        self._reachable = reachable_views(role) if role is not None else frozenset()
        self._state = ViewState(current_view=ViewName.DASHBOARD)

    @classmethod
    def failed(cls) -> "ViewRouter":
        """Router for a session whose construction failed."""
        router = cls(None)
        router.fail()
        return router

    @property
    def role(self) -> Optional[Role]:
        return self._role

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def current_view(self) -> ViewName:
        return self._state.current_view

    @property
    def is_terminal(self) -> bool:
        return self._state.terminal

    def can_reach(self, name: ViewName | str) -> bool:
        try:
            return _coerce(name) in self._reachable
        except ForbiddenView:
            return False

    def request_view(self, name: ViewName | str) -> ViewState:
        if self._state.terminal:
            raise SessionTerminated("Session has ended")

        view = _coerce(name)
        if view not in self._reachable:
            raise ForbiddenView(f"{view.value} is not available for this role")

        current = self._state
        if view.is_modal:
            origin = current.previous_view if current.current_view.is_modal else current.current_view
            self._state = ViewState(current_view=view, previous_view=origin)
        else:
            self._state = ViewState(current_view=view)
        return self._state

    def close_modal(self) -> ViewState:
        if self._state.terminal:
            raise SessionTerminated("Session has ended")
        if not self._state.current_view.is_modal:
            raise NoActiveModal("No modal view is open")

        self._state = ViewState(current_view=self._state.previous_view or ViewName.DASHBOARD)
        return self._state

    def logout(self) -> ViewState:
        if self._state.current_view != ViewName.LOGGED_OUT:
            self._state = ViewState(current_view=ViewName.LOGGED_OUT, terminal=True)
        return self._state

    def fail(self) -> ViewState:
        if self._state.current_view == ViewName.LOGGED_OUT:
            raise SessionTerminated("Session has ended")
        self._state = ViewState(current_view=ViewName.ERROR, terminal=True)
        return self._state

    def exit_error(self, choice: ErrorExit) -> ViewState:
        """Leave the error screen. Every exit ends this router."""
        if self._state.current_view != ViewName.ERROR:
            raise SessionTerminated("Session is not in the error state")
        logger.info("Leaving session error state via %s", choice.value)
        self._state = ViewState(current_view=ViewName.LOGGED_OUT, terminal=True)
        return self._state
