"""Type definitions for the payroll calculation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Callable

from attendance_payroll.errors import InvalidAttendanceRecord, InvalidWageProfile

ZERO = Decimal("0")
CENTS = Decimal("0.01")

DEFAULT_OVERTIME_MULTIPLIER = Decimal("1.5")
DEFAULT_TAX_RATE = Decimal("0.20")


def to_decimal(value: Any) -> Decimal:
    """Coerce a numeric input to Decimal.

    Floats go through str() so 0.1 becomes Decimal("0.1") rather than its
    binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_to_cents(amount: Decimal) -> Decimal:
    """Round amount to 2 decimal places (cents)."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def canonical_decimal(value: Decimal) -> str:
    """Render value without trailing zeros or exponent (9.00 -> "9", 1E+1 -> "10")."""
    return format(value.normalize(), "f")


class PayFrequency(str, Enum):
    """Pay period frequencies."""

    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"

    @classmethod
    def parse(cls, value: PayFrequency | str) -> PayFrequency:
        """Parse a frequency name, accepting the 'bi-weekly' spelling."""
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower().replace("-", "")
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(f"Invalid pay frequency: {value!r}") from None


@dataclass(frozen=True)
class WageProfile:
    """Wage configuration for one employee."""

    employee_id: str
    hourly_rate: Decimal
    overtime_multiplier: Decimal = DEFAULT_OVERTIME_MULTIPLIER
    tax_rate: Decimal = DEFAULT_TAX_RATE

    def __post_init__(self) -> None:
        object.__setattr__(self, "hourly_rate", to_decimal(self.hourly_rate))
        object.__setattr__(self, "overtime_multiplier", to_decimal(self.overtime_multiplier))
        object.__setattr__(self, "tax_rate", to_decimal(self.tax_rate))

        if self.hourly_rate < 0:
            raise InvalidWageProfile(self.employee_id, f"hourly_rate {self.hourly_rate} is negative")
        if not (ZERO <= self.tax_rate < 1):
            raise InvalidWageProfile(self.employee_id, f"tax_rate {self.tax_rate} outside [0, 1)")
        if self.overtime_multiplier < 1:
            raise InvalidWageProfile(
                self.employee_id,
                f"overtime_multiplier {self.overtime_multiplier} is below 1.0",
            )


@dataclass(frozen=True)
class AttendanceRecord:
    """Hours worked by one employee on one calendar date."""

    employee_id: str
    work_date: date
    total_hours: Decimal
    overtime_hours: Decimal = ZERO

    def __post_init__(self) -> None:
        object.__setattr__(self, "total_hours", to_decimal(self.total_hours))
        object.__setattr__(self, "overtime_hours", to_decimal(self.overtime_hours))

        if self.total_hours < 0:
            raise InvalidAttendanceRecord(
                self.employee_id, self.work_date, f"total_hours {self.total_hours} is negative"
            )
        if self.overtime_hours < 0:
            raise InvalidAttendanceRecord(
                self.employee_id, self.work_date, f"overtime_hours {self.overtime_hours} is negative"
            )

    @property
    def regular_hours(self) -> Decimal:
        # Overtime above total comes from hand-edited rows; never go negative.
        return max(ZERO, self.total_hours - self.overtime_hours)


@dataclass(frozen=True)
class PayPeriod:
    """Inclusive date range for one payroll run."""

    start: date
    end: date
    frequency: PayFrequency | None = None

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"Pay period start {self.start} is after end {self.end}")

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1


@dataclass(frozen=True)
class HoursSummary:
    """Regular and overtime hours summed over a pay period."""

    regular_hours: Decimal = ZERO
    overtime_hours: Decimal = ZERO

    def __post_init__(self) -> None:
        object.__setattr__(self, "regular_hours", to_decimal(self.regular_hours))
        object.__setattr__(self, "overtime_hours", to_decimal(self.overtime_hours))

        if self.regular_hours < 0 or self.overtime_hours < 0:
            raise ValueError(
                f"Hours must not be negative: regular={self.regular_hours} "
                f"overtime={self.overtime_hours}"
            )

    @property
    def total_hours(self) -> Decimal:
        return self.regular_hours + self.overtime_hours


@dataclass(frozen=True)
class PayrollResult:
    """Pay breakdown for one employee over one pay period.

    Derived from the wage profile and attendance records; recomputed on
    demand and never treated as the source of truth. Amounts keep full
    precision until rounded() or to_display_dict() is called.
    """

    employee_id: str
    pay_period_start: date | None
    pay_period_end: date | None
    regular_hours: Decimal
    overtime_hours: Decimal
    hourly_rate: Decimal
    regular_pay: Decimal
    overtime_pay: Decimal
    gross_pay: Decimal
    taxes: Decimal
    net_pay: Decimal
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)

    def rounded(self) -> PayrollResult:
        """Return a copy with monetary fields rounded to cents."""
        return replace(
            self,
            regular_pay=round_to_cents(self.regular_pay),
            overtime_pay=round_to_cents(self.overtime_pay),
            gross_pay=round_to_cents(self.gross_pay),
            taxes=round_to_cents(self.taxes),
            net_pay=round_to_cents(self.net_pay),
        )

    def _as_dict(self, render: Callable[[Decimal], str]) -> dict[str, Any]:
        return {
            "employee_id": self.employee_id,
            "pay_period_start": self.pay_period_start.isoformat() if self.pay_period_start else None,
            "pay_period_end": self.pay_period_end.isoformat() if self.pay_period_end else None,
            "regular_hours": render(self.regular_hours),
            "overtime_hours": render(self.overtime_hours),
            "hourly_rate": render(self.hourly_rate),
            "regular_pay": render(self.regular_pay),
            "overtime_pay": render(self.overtime_pay),
            "gross_pay": render(self.gross_pay),
            "taxes": render(self.taxes),
            "net_pay": render(self.net_pay),
        }

    def to_canonical_dict(self) -> dict[str, Any]:
        """Return canonical dict for hashing (full precision, stable keys).

        Decimals are normalized, so 9.00 and 9 render the same.
        """
        return self._as_dict(canonical_decimal)

    def to_display_dict(self) -> dict[str, Any]:
        """Return cents-rounded values as strings for output."""
        data = self.rounded()._as_dict(str)
        data.update(self.metadata)
        return data
