from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass
from typing import Callable, Optional

from .controller import SessionController
from .factory import FailedSession, Session

logger = logging.getLogger(__name__)


@dataclass
class _Entry:
    session: Session
    last_seen: float


class SessionRegistry:
    """Live sessions by opaque token, one per login.

    With ``ttl_seconds`` set, a token that has not been used for that long is
    closed the next time ``open`` or ``get`` runs.
    """

    def __init__(
        self,
        opener: Callable[[int], Session],
        *,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_seconds is not None and ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self._opener = opener
        self._ttl = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._sessions: dict[str, _Entry] = {}

    def open(self, employee_id: int) -> tuple[str, Session]:
        self.sweep()
        session = self._opener(int(employee_id))
        token = uuid.uuid4().hex
        with self._lock:
            self._sessions[token] = _Entry(session, self._clock())
        return token, session

    def get(self, token: Optional[str]) -> Optional[Session]:
        self.sweep()
        if not token:
            return None
        with self._lock:
            entry = self._sessions.get(token)
            if entry is None:
                return None
            entry.last_seen = self._clock()
            return entry.session

    def replace(self, token: str, session: Session) -> None:
        with self._lock:
            self._sessions[token] = _Entry(session, self._clock())

    def close(self, token: Optional[str]) -> None:
        with self._lock:
            entry = self._sessions.pop(token, None) if token else None
        if entry is not None:
            _end(entry.session)

    def sweep(self) -> int:
        """Close every session idle for longer than the TTL. Returns how many."""
        if self._ttl is None:
            return 0
        now = self._clock()
        with self._lock:
            expired = [t for t, e in self._sessions.items() if now - e.last_seen >= self._ttl]
            entries = [self._sessions.pop(t) for t in expired]
        for entry in entries:
            _end(entry.session)
        if entries:
            logger.info("Expired %d idle dashboard sessions", len(entries))
        return len(entries)

    def close_all(self) -> None:
        with self._lock:
            tokens = list(self._sessions)
        for token in tokens:
            self.close(token)
        if tokens:
            logger.info("Closed %d dashboard sessions", len(tokens))

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


def _end(session: Session) -> None:
    if isinstance(session, SessionController):
        session.logout()
    elif isinstance(session, FailedSession) and session.is_open:
        session.exit()
