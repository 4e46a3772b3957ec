from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, Optional

from ..common.datetime_utils import now_local
from ..core.enums import RefreshKind
from ..core.exceptions import DuplicateTask, SchedulerStopped

logger = logging.getLogger(__name__)

Reporter = Callable[[RefreshKind, BaseException], None]

_LOCK_POLL_SECONDS = 0.05


@dataclass(frozen=True)
class RefreshTask:
    """Snapshot of one periodic task. The scheduler hands out copies only."""

    kind: RefreshKind
    interval: float
    last_fire: Optional[datetime] = None
    enabled: bool = True
    last_failed: bool = False
    runs: int = 0
    failures: int = 0


class _Slot:
    def __init__(self, task: RefreshTask, callback: Callable[[], None]):
        self.task = task
        self.callback = callback
        self.thread: Optional[threading.Thread] = None


def _log_failure(kind: RefreshKind, error: BaseException) -> None:
    logger.error("Refresh task %s failed", kind.value, exc_info=(type(error), error, error.__traceback__))


class RefreshScheduler:
    """Periodic background work bound to one session's lifetime.

    Each task keeps its own timing loop, so a slow callback only pushes back
    that task's next firing. Callbacks run under ``serial_lock``, which the
    owner shares with its manual refresh path; two updates never interleave.
    Once ``stop()`` returns no callback runs again.
    """

    def __init__(
        self,
        *,
        serial_lock=None,
        reporter: Optional[Reporter] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._serial = serial_lock if serial_lock is not None else threading.RLock()
        self._reporter = reporter or _log_failure
        self._clock = clock
        self._state = threading.Lock()
        self._stopping = threading.Event()
        self._slots: dict[RefreshKind, _Slot] = {}
        self._started = False
        self._stopped = False

    @property
    def is_running(self) -> bool:
        return self._started and not self._stopped

    def register(self, kind: RefreshKind, interval: float, callback: Callable[[], None]) -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        with self._state:
            if self._stopped:
                raise SchedulerStopped("Scheduler already stopped")
            if kind in self._slots:
                raise DuplicateTask(f"Refresh task {kind.value} already registered")
            slot = _Slot(RefreshTask(kind=kind, interval=float(interval)), callback)
            self._slots[kind] = slot
            if self._started:
                self._spawn(slot)

    def start(self) -> None:
        with self._state:
            if self._stopped:
                raise SchedulerStopped("Scheduler already stopped")
            if self._started:
                return
            self._started = True
            for slot in self._slots.values():
                self._spawn(slot)
        logger.debug("Scheduler started with tasks %s", [k.value for k in self._slots])

    def stop(self) -> None:
        """Cancel every task and wait for an in-flight callback to return."""
        with self._state:
            self._stopping.set()
            self._stopped = True
            threads = [s.thread for s in self._slots.values() if s.thread is not None]

        current = threading.current_thread()
        for t in threads:
            if t is not current:
                t.join()

        with self._state:
            for slot in self._slots.values():
                slot.task = replace(slot.task, enabled=False)

    def task(self, kind: RefreshKind) -> RefreshTask:
        with self._state:
            return self._slots[kind].task

    def _spawn(self, slot: _Slot) -> None:
        slot.thread = threading.Thread(
            target=self._run,
            args=(slot,),
            name=f"refresh-{slot.task.kind.value.lower()}",
            daemon=True,
        )
        slot.thread.start()

    def _run(self, slot: _Slot) -> None:
        while not self._stopping.wait(slot.task.interval):
            if not self._acquire_serial():
                break
            try:
                if self._stopping.is_set():
                    break
                self._fire(slot)
            finally:
                self._serial.release()

    def _acquire_serial(self) -> bool:
        # Polling keeps stop() from deadlocking when it is called by the lock holder.
        while not self._serial.acquire(timeout=_LOCK_POLL_SECONDS):
            if self._stopping.is_set():
                return False
        return True

    def _fire(self, slot: _Slot) -> None:
        failed = False
        try:
            slot.callback()
        except Exception as e:
            failed = True
            try:
                self._reporter(slot.task.kind, e)
            except Exception:
                logger.exception("Refresh failure reporter raised")

        with self._state:
            t = slot.task
            slot.task = replace(
                t,
                last_fire=self._clock(),
                last_failed=failed,
                runs=t.runs + 1,
                failures=t.failures + (1 if failed else 0),
            )
