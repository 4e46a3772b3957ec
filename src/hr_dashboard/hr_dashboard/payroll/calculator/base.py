from __future__ import annotations

from abc import ABC, abstractmethod

from ..model import PayrollPeriod, PayrollRecord


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll).

    The money math (tax tables, contribution brackets) lives behind this seam.
    """

    @abstractmethod
    def compute(self, employee_id: int, period: PayrollPeriod) -> PayrollRecord:
        """Return the computed record or raise CalculationError."""

        raise NotImplementedError
