"""Type definitions for the salary calculation."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from payroll_records.calculators.money import Money

DEFAULT_OVERTIME_RATE = Decimal("1.5")


@dataclass(frozen=True)
class SalaryInputs:
    """Raw payroll inputs for one pay period."""

    base_salary: Money
    overtime_hours: Decimal = Decimal("0")
    overtime_rate: Decimal = DEFAULT_OVERTIME_RATE
    bonus: Money = field(default_factory=Money.zero)
    allowances: Money = field(default_factory=Money.zero)
    tax_deduction: Money = field(default_factory=Money.zero)
    insurance_deduction: Money = field(default_factory=Money.zero)
    other_deductions: Money = field(default_factory=Money.zero)

    @classmethod
    def from_values(cls, **values: Any) -> SalaryInputs:
        """Build inputs from plain Decimal/int/str values, skipping None."""
        kwargs: dict[str, Any] = {}
        for name, value in values.items():
            if value is None:
                continue
            if name in ("overtime_hours", "overtime_rate"):
                kwargs[name] = Money(value).amount
            else:
                kwargs[name] = Money(value)
        return cls(**kwargs)

    def amounts(self) -> dict[str, Decimal]:
        """Every input as a plain Decimal, keyed by field name."""
        return {
            "base_salary": self.base_salary.amount,
            "overtime_hours": self.overtime_hours,
            "overtime_rate": self.overtime_rate,
            "bonus": self.bonus.amount,
            "allowances": self.allowances.amount,
            "tax_deduction": self.tax_deduction.amount,
            "insurance_deduction": self.insurance_deduction.amount,
            "other_deductions": self.other_deductions.amount,
        }


@dataclass(frozen=True)
class SalaryBreakdown:
    """Derived salary fields for one pay period."""

    overtime_pay: Money
    gross_salary: Money
    total_deductions: Money
    net_salary: Money

    @property
    def is_negative_net(self) -> bool:
        """Deductions exceed gross; surfaced for the caller to flag."""
        return self.net_salary.is_negative

    def rounded(self) -> dict[str, Decimal]:
        """Derived fields rounded to cents for display."""
        return {
            "overtime_pay": self.overtime_pay.rounded(),
            "gross_salary": self.gross_salary.rounded(),
            "total_deductions": self.total_deductions.rounded(),
            "net_salary": self.net_salary.rounded(),
        }
