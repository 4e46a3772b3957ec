from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..core.constants import PROBATIONARY_STATUS, REGULAR_STATUS


@dataclass(frozen=True)
class Allowances:
    rice: Decimal = Decimal("0")
    phone: Decimal = Decimal("0")
    clothing: Decimal = Decimal("0")

    @property
    def total(self) -> Decimal:
        return self.rice + self.phone + self.clothing


@dataclass(frozen=True)
class Employee:
    """Domain entity: employee snapshot as handed out by the directory.

    Sessions keep one of these for their whole lifetime; it is never mutated.
    """

    employee_id: int
    full_name: str
    position: str
    status: str
    basic_salary: Decimal
    allowances: Allowances = Allowances()

    @property
    def is_regular(self) -> bool:
        return self.status.strip().lower() == REGULAR_STATUS

    @property
    def is_probationary(self) -> bool:
        return self.status.strip().lower() == PROBATIONARY_STATUS

    @property
    def monthly_cost(self) -> Decimal:
        return self.basic_salary + self.allowances.total
