#!/usr/bin/env python
"""Library usage example.

Shows the engine used directly, without a database:
1. Compute the pay period for a reference date
2. Build wage profiles and attendance records
3. Run a pay run and print the cents-rounded results

Usage:
    python main.py
    python main.py --date 2025-02-10 --frequency monthly
"""

from __future__ import annotations

import argparse
import sys
from datetime import date, timedelta
from decimal import Decimal

from attendance_payroll.calculators import (
    AttendanceRecord,
    EmployeePayInput,
    PayrollEngine,
    WageProfile,
    compute_pay_period_bounds,
    split_daily_overtime,
)
from attendance_payroll.config import get_settings


def build_inputs(start: date) -> list[EmployeePayInput]:
    """Two employees with a few days of attendance from start."""
    ana = WageProfile("EMP001", Decimal("20.00"))
    ben = WageProfile("EMP002", Decimal("18.50"), overtime_multiplier=Decimal("2.0"))

    ana_days = [
        split_daily_overtime("EMP001", start + timedelta(days=i), hours)
        for i, hours in enumerate([8, 9, 10, 8, 7.5], 1)
    ]
    ben_days = [
        AttendanceRecord("EMP002", start + timedelta(days=1), Decimal("8"), Decimal("0")),
        AttendanceRecord("EMP002", start + timedelta(days=2), Decimal("11"), Decimal("3")),
    ]

    return [
        EmployeePayInput(wage=ana, records=ana_days, display_name="Ana Reyes"),
        EmployeePayInput(wage=ben, records=ben_days, display_name="Ben Cruz"),
    ]


def main() -> int:
    parser = argparse.ArgumentParser(description="Attendance payroll library example")
    parser.add_argument("--date", type=date.fromisoformat, default=date(2025, 1, 15))
    parser.add_argument("--frequency", default="weekly")
    args = parser.parse_args()

    period = compute_pay_period_bounds(args.date, args.frequency)
    print(f"Pay period: {period.start} .. {period.end} ({period.frequency.value})")

    engine = PayrollEngine(get_settings())
    run = engine.calculate_pay_run(build_inputs(period.start), period)

    for employee_id, result in sorted(run.results.items()):
        shown = result.rounded()
        print(
            f"  {employee_id} {result.metadata.get('employee_name', '')}: "
            f"{shown.regular_hours}h + {shown.overtime_hours}h OT -> "
            f"gross {shown.gross_pay}, taxes {shown.taxes}, net {shown.net_pay}"
        )
    for employee_id, error in run.errors.items():
        print(f"  {employee_id}: ERROR {error}")

    summary = run.summary()
    print(f"Total gross {summary['total_gross']}, net {summary['total_net']}")
    return 0 if run.success else 1


if __name__ == "__main__":
    sys.exit(main())
