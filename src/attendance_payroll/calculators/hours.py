"""Hours aggregation over attendance records."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from decimal import Decimal

from attendance_payroll.calculators.types import (
    ZERO,
    AttendanceRecord,
    HoursSummary,
    PayPeriod,
    to_decimal,
)
from attendance_payroll.errors import InvalidAttendanceRecord

DEFAULT_DAILY_OVERTIME_THRESHOLD = Decimal("8")


def aggregate_hours(
    records: Iterable[AttendanceRecord],
    period: PayPeriod,
) -> HoursSummary:
    """Sum regular and overtime hours for records dated inside period.

    Records outside the period are ignored. No records means zero hours.
    Each record contributes max(0, total - overtime) regular hours.
    """
    regular = ZERO
    overtime = ZERO

    for record in records:
        if not period.contains(record.work_date):
            continue
        regular += record.regular_hours
        overtime += record.overtime_hours

    return HoursSummary(regular_hours=regular, overtime_hours=overtime)


def split_daily_overtime(
    employee_id: str,
    work_date: date,
    hours_worked: Decimal | int | float | str,
    threshold: Decimal | int | float | str = DEFAULT_DAILY_OVERTIME_THRESHOLD,
) -> AttendanceRecord:
    """Build a record from raw hours, moving hours above threshold to overtime."""
    hours = to_decimal(hours_worked)
    limit = to_decimal(threshold)

    if hours < 0:
        raise InvalidAttendanceRecord(employee_id, work_date, f"hours_worked {hours} is negative")
    if limit < 0:
        raise ValueError(f"Daily overtime threshold must not be negative: {limit}")

    return AttendanceRecord(
        employee_id=employee_id,
        work_date=work_date,
        total_hours=hours,
        overtime_hours=max(ZERO, hours - limit),
    )
