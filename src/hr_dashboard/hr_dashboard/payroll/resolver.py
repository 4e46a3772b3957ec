from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from dataclasses import replace
from typing import Sequence

from ..core.enums import PayrollStatus
from ..core.exceptions import CalculationError
from .calculator.base import PayrollCalculator
from .model import PayrollKey, PayrollPeriod, PayrollRecord

logger = logging.getLogger(__name__)


class PayrollResolver:
    """Cache-or-compute access to payroll records keyed by (employee, period).

    Per key: Uncomputed -> Pending -> Calculated | Error. Viewing never
    recomputes; only calculate/recalculate call the calculator, and at most one
    calculator call per key is in flight at a time.
    """

    def __init__(self, calculator: PayrollCalculator):
        self._calculator = calculator
        self._lock = threading.Lock()
        self._records: dict[PayrollKey, PayrollRecord] = {}
        self._in_flight: dict[PayrollKey, Future] = {}

    def resolve(self, employee_id: int, period: PayrollPeriod) -> PayrollRecord:
        key = PayrollKey(int(employee_id), period)
        with self._lock:
            record = self._records.get(key)
            if record is None:
                record = PayrollRecord.pending(key.employee_id, period)
                self._records[key] = record
            return record

    def calculate(self, employee_id: int, period: PayrollPeriod) -> PayrollRecord:
        key = PayrollKey(int(employee_id), period)
        with self._lock:
            waiting = self._in_flight.get(key)
            if waiting is None:
                future: Future = Future()
                self._in_flight[key] = future
                self._records.setdefault(key, PayrollRecord.pending(key.employee_id, period))

        if waiting is not None:
            logger.debug("Payroll %s already calculating; waiting for result", key)
            return waiting.result()

        try:
            record = self._compute(key)
            with self._lock:
                self._records[key] = record
            future.set_result(record)
            return record
        except BaseException as e:
            future.set_exception(e)
            raise
        finally:
            with self._lock:
                self._in_flight.pop(key, None)

    def recalculate(self, employee_id: int, period: PayrollPeriod) -> PayrollRecord:
        """Explicit retry: move the key back to Pending, then calculate again."""
        key = PayrollKey(int(employee_id), period)
        with self._lock:
            if key not in self._in_flight:
                self._records[key] = PayrollRecord.pending(key.employee_id, period)
        return self.calculate(employee_id, period)

    def records_for(self, employee_id: int) -> Sequence[PayrollRecord]:
        with self._lock:
            items = [r for k, r in self._records.items() if k.employee_id == int(employee_id)]
        return sorted(items, key=lambda r: r.period)

    def _compute(self, key: PayrollKey) -> PayrollRecord:
        try:
            result = self._calculator.compute(key.employee_id, key.period)
        except CalculationError as e:
            logger.warning("Payroll calculation failed for %s: %s", key, e)
            return PayrollRecord.failed(key.employee_id, key.period, str(e))
        except Exception as e:
            logger.exception("Payroll calculator crashed for %s", key)
            return PayrollRecord.failed(key.employee_id, key.period, str(e) or type(e).__name__)

        # The key belongs to the resolver, not to whatever the calculator echoed back.
        return replace(
            result,
            employee_id=key.employee_id,
            period=key.period,
            status=PayrollStatus.CALCULATED,
            error_message=None,
        )
