"""Pydantic schemas for payroll input documents and output."""

from __future__ import annotations

import datetime as dt
import logging
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from attendance_payroll.calculators.engine import EmployeePayInput, PayRunCalculationResult
from attendance_payroll.calculators.hours import split_daily_overtime
from attendance_payroll.calculators.types import AttendanceRecord, WageProfile
from attendance_payroll.errors import PayrollError

logger = logging.getLogger(__name__)


# ============================================================================
# Input schemas
# ============================================================================


class WageProfileIn(BaseModel):
    """Wage configuration for one employee.

    Omitted multiplier or tax rate fall back to the configured defaults.
    """

    model_config = ConfigDict(extra="forbid")

    employee_id: str = Field(min_length=1)
    name: str | None = None
    hourly_rate: Decimal
    overtime_multiplier: Decimal | None = None
    tax_rate: Decimal | None = None


class AttendanceIn(BaseModel):
    """One day of attendance.

    When overtime_hours is omitted, hours above the daily overtime
    threshold are counted as overtime.
    """

    model_config = ConfigDict(extra="forbid")

    employee_id: str = Field(min_length=1)
    date: dt.date
    total_hours: Decimal
    overtime_hours: Decimal | None = None


class PayrollInput(BaseModel):
    """Document accepted by the `calculate` command."""

    model_config = ConfigDict(extra="forbid")

    employees: list[WageProfileIn]
    attendance: list[AttendanceIn] = Field(default_factory=list)

    def to_pay_inputs(
        self,
        *,
        default_overtime_multiplier: Decimal,
        default_tax_rate: Decimal,
        daily_overtime_threshold: Decimal,
    ) -> tuple[list[EmployeePayInput], dict[str, str]]:
        """Build engine inputs, one employee at a time.

        Returns (entries, errors). An employee whose wage or attendance is
        invalid is left out of entries and reported in errors, keyed by
        employee id. Attendance for an id not listed under employees is
        reported the same way.
        """
        errors: dict[str, str] = {}
        records: dict[str, list[AttendanceRecord]] = {}
        for row in self.attendance:
            if row.employee_id in errors:
                continue
            try:
                if row.overtime_hours is None:
                    record = split_daily_overtime(
                        row.employee_id, row.date, row.total_hours, daily_overtime_threshold
                    )
                else:
                    record = AttendanceRecord(
                        employee_id=row.employee_id,
                        work_date=row.date,
                        total_hours=row.total_hours,
                        overtime_hours=row.overtime_hours,
                    )
            except PayrollError as e:
                logger.warning("Skipping employee %s: %s", row.employee_id, e)
                errors[row.employee_id] = str(e)
                continue
            records.setdefault(row.employee_id, []).append(record)

        listed = {emp.employee_id for emp in self.employees}
        for employee_id in sorted(set(records) - listed):
            logger.warning("Attendance for unlisted employee %s", employee_id)
            errors[employee_id] = f"Attendance for employee {employee_id} who is not listed"

        entries = []
        for emp in self.employees:
            if emp.employee_id in errors:
                continue
            try:
                wage = WageProfile(
                    employee_id=emp.employee_id,
                    hourly_rate=emp.hourly_rate,
                    overtime_multiplier=(
                        emp.overtime_multiplier
                        if emp.overtime_multiplier is not None
                        else default_overtime_multiplier
                    ),
                    tax_rate=emp.tax_rate if emp.tax_rate is not None else default_tax_rate,
                )
            except PayrollError as e:
                logger.warning("Skipping employee %s: %s", emp.employee_id, e)
                errors[emp.employee_id] = str(e)
                continue
            entries.append(
                EmployeePayInput(
                    wage=wage,
                    records=records.get(emp.employee_id, []),
                    display_name=emp.name,
                )
            )
        # A later duplicate may have failed after an earlier one was accepted
        entries = [e for e in entries if e.wage.employee_id not in errors]
        return entries, errors


# ============================================================================
# Output
# ============================================================================


def pay_run_to_dict(run: PayRunCalculationResult) -> dict[str, Any]:
    """Render a pay run for JSON output (money as cents-rounded strings)."""
    return {
        "pay_period_start": run.period.start.isoformat(),
        "pay_period_end": run.period.end.isoformat(),
        "frequency": run.period.frequency.value if run.period.frequency else None,
        "results": [run.results[k].to_display_dict() for k in sorted(run.results)],
        "errors": [
            {"employee_id": k, "error": run.errors[k]} for k in sorted(run.errors)
        ],
        "summary": run.summary(),
    }
