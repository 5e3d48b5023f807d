"""Payroll calculation engine - main orchestrator."""

from __future__ import annotations

import hashlib
import json
import logging
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID

from attendance_payroll.calculators.hours import aggregate_hours
from attendance_payroll.calculators.types import (
    ZERO,
    AttendanceRecord,
    HoursSummary,
    PayPeriod,
    PayrollResult,
    WageProfile,
    round_to_cents,
)
from attendance_payroll.errors import InvalidAttendanceRecord, PayrollError

if TYPE_CHECKING:
    from attendance_payroll.config import Settings

logger = logging.getLogger(__name__)


def _zero_result(wage: WageProfile, period: PayPeriod | None) -> PayrollResult:
    return PayrollResult(
        employee_id=wage.employee_id,
        pay_period_start=period.start if period else None,
        pay_period_end=period.end if period else None,
        regular_hours=ZERO,
        overtime_hours=ZERO,
        hourly_rate=ZERO,
        regular_pay=ZERO,
        overtime_pay=ZERO,
        gross_pay=ZERO,
        taxes=ZERO,
        net_pay=ZERO,
    )


def calculate_pay(
    wage: WageProfile,
    hours: HoursSummary,
    period: PayPeriod | None = None,
) -> PayrollResult:
    """Compute the pay breakdown for aggregated hours.

    regular_pay  = regular_hours * rate
    overtime_pay = overtime_hours * rate * overtime_multiplier
    gross_pay    = regular_pay + overtime_pay
    taxes        = gross_pay * tax_rate
    net_pay      = gross_pay - taxes

    A zero hourly rate yields an all-zero result, hours included.
    Amounts are not rounded here; see PayrollResult.rounded().
    """
    if wage.hourly_rate == 0:
        return _zero_result(wage, period)

    regular_pay = hours.regular_hours * wage.hourly_rate
    overtime_pay = hours.overtime_hours * wage.hourly_rate * wage.overtime_multiplier
    gross_pay = regular_pay + overtime_pay
    taxes = gross_pay * wage.tax_rate
    net_pay = gross_pay - taxes

    return PayrollResult(
        employee_id=wage.employee_id,
        pay_period_start=period.start if period else None,
        pay_period_end=period.end if period else None,
        regular_hours=hours.regular_hours,
        overtime_hours=hours.overtime_hours,
        hourly_rate=wage.hourly_rate,
        regular_pay=regular_pay,
        overtime_pay=overtime_pay,
        gross_pay=gross_pay,
        taxes=taxes,
        net_pay=net_pay,
    )


@dataclass
class EmployeePayInput:
    """Everything needed to pay one employee for a period."""

    wage: WageProfile
    records: Sequence[AttendanceRecord] = ()
    display_name: str | None = None


@dataclass
class PayRunCalculationResult:
    """Result of calculating a pay period for many employees."""

    period: PayPeriod
    results: dict[str, PayrollResult] = field(default_factory=dict)  # employee_id -> result
    errors: dict[str, str] = field(default_factory=dict)  # employee_id -> message
    total_regular_hours: Decimal = ZERO
    total_overtime_hours: Decimal = ZERO
    total_gross: Decimal = ZERO
    total_taxes: Decimal = ZERO
    total_net: Decimal = ZERO

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def success(self) -> bool:
        return not self.errors

    def summary(self) -> dict[str, str | int]:
        """Totals for display, money rounded to cents."""
        return {
            "employee_count": len(self.results),
            "error_count": self.error_count,
            "total_regular_hours": str(self.total_regular_hours),
            "total_overtime_hours": str(self.total_overtime_hours),
            "total_gross": str(round_to_cents(self.total_gross)),
            "total_taxes": str(round_to_cents(self.total_taxes)),
            "total_net": str(round_to_cents(self.total_net)),
        }


class PayrollEngine:
    """Payroll calculation engine.

    Stateless apart from settings: every call computes a fresh result from
    its arguments, so employees may be calculated in any order or in
    parallel.

    Calculation pipeline per employee:
    1) Check records belong to the employee
    2) Short-circuit zero-rate wages
    3) Aggregate hours within the period
    4) Compute pay
    """

    def __init__(self, settings: Settings | None = None):
        if settings is None:
            from attendance_payroll.config import get_settings

            settings = get_settings()
        self.settings = settings

    def calculate_employee(
        self,
        wage: WageProfile,
        records: Iterable[AttendanceRecord],
        period: PayPeriod,
    ) -> PayrollResult:
        """Calculate pay for a single employee."""
        records = list(records)
        for record in records:
            if record.employee_id != wage.employee_id:
                raise InvalidAttendanceRecord(
                    record.employee_id,
                    record.work_date,
                    f"record does not belong to employee {wage.employee_id}",
                )

        if wage.hourly_rate == 0:
            return _zero_result(wage, period)

        hours = aggregate_hours(records, period)
        return calculate_pay(wage, hours, period)

    def calculate_pay_run(
        self,
        entries: Iterable[EmployeePayInput],
        period: PayPeriod,
    ) -> PayRunCalculationResult:
        """Calculate pay for every employee in entries.

        A failing employee is recorded in errors and excluded from totals;
        it does not stop the others. An employee id that appears more than
        once is reported as an error and none of its entries are paid.
        """
        entries = list(entries)
        run = PayRunCalculationResult(period=period)
        counts = Counter(entry.wage.employee_id for entry in entries)

        for entry in entries:
            employee_id = entry.wage.employee_id
            if counts[employee_id] > 1:
                if employee_id not in run.errors:
                    logger.warning(
                        "Employee %s appears %d times in pay run", employee_id, counts[employee_id]
                    )
                    run.errors[employee_id] = (
                        f"Employee {employee_id} appears {counts[employee_id]} times in the pay run"
                    )
                continue
            try:
                result = self.calculate_employee(entry.wage, entry.records, period)
            except PayrollError as e:
                logger.warning("Payroll calculation failed for employee %s: %s", employee_id, e)
                run.errors[employee_id] = str(e)
                continue

            metadata = {"calculation_id": str(self.calculation_id(result))}
            if entry.display_name:
                metadata["employee_name"] = entry.display_name
            result = replace(result, metadata=metadata)

            run.results[employee_id] = result
            run.total_regular_hours += result.regular_hours
            run.total_overtime_hours += result.overtime_hours
            run.total_gross += result.gross_pay
            run.total_taxes += result.taxes
            run.total_net += result.net_pay

        logger.info(
            "Calculated pay run %s..%s: %d employees, %d errors",
            period.start,
            period.end,
            len(run.results),
            run.error_count,
        )
        return run

    def calculation_id(self, result: PayrollResult) -> UUID:
        """Deterministic ID for a result under the current engine version."""
        data = result.to_canonical_dict()
        data["engine_version"] = self.settings.engine_version
        json_str = json.dumps(data, sort_keys=True)
        hash_bytes = hashlib.sha256(json_str.encode()).digest()
        return UUID(bytes=hash_bytes[:16])
