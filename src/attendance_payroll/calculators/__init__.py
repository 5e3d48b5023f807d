"""Payroll calculation engine."""

from attendance_payroll.calculators.engine import (
    EmployeePayInput,
    PayrollEngine,
    PayRunCalculationResult,
    calculate_pay,
)
from attendance_payroll.calculators.hours import aggregate_hours, split_daily_overtime
from attendance_payroll.calculators.periods import (
    compute_pay_period_bounds,
    next_pay_period,
    next_payday,
    pay_date_for_period,
    previous_pay_period,
)
from attendance_payroll.calculators.types import (
    AttendanceRecord,
    HoursSummary,
    PayFrequency,
    PayPeriod,
    PayrollResult,
    WageProfile,
)

__all__ = [
    "AttendanceRecord",
    "EmployeePayInput",
    "HoursSummary",
    "PayFrequency",
    "PayPeriod",
    "PayRunCalculationResult",
    "PayrollEngine",
    "PayrollResult",
    "WageProfile",
    "aggregate_hours",
    "calculate_pay",
    "compute_pay_period_bounds",
    "next_pay_period",
    "next_payday",
    "pay_date_for_period",
    "previous_pay_period",
    "split_daily_overtime",
]
