"""Payroll service - loads wages and attendance, runs the engine."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from attendance_payroll.calculators.engine import (
    EmployeePayInput,
    PayrollEngine,
    PayRunCalculationResult,
)
from attendance_payroll.calculators.periods import compute_pay_period_bounds
from attendance_payroll.calculators.types import (
    ZERO,
    AttendanceRecord,
    PayFrequency,
    PayPeriod,
    WageProfile,
)
from attendance_payroll.config import get_settings
from attendance_payroll.errors import AttendanceFetchError, PayrollError
from attendance_payroll.models import AttendanceRecordRow, Employee

if TYPE_CHECKING:
    from attendance_payroll.config import Settings

logger = logging.getLogger(__name__)


class PayrollService:
    """Service for previewing payroll from stored attendance.

    Operations:
    - load_employees: Active employees, optionally restricted to ids
    - load_attendance: Attendance rows in a period, grouped by employee
    - preview_pay_run: Bounds + load + calculate, nothing persisted

    Each instance is meant for one request: it holds no cached rows.
    """

    def __init__(self, session: AsyncSession, settings: Settings | None = None):
        self.session = session
        self.settings = settings or get_settings()
        self.engine = PayrollEngine(self.settings)

    async def load_employees(
        self,
        employee_ids: Sequence[str] | None = None,
    ) -> list[Employee]:
        """Load active employees ordered by employee_id."""
        query = select(Employee).where(Employee.status == "active")
        if employee_ids:
            query = query.where(Employee.employee_id.in_(list(employee_ids)))

        try:
            result = await self.session.execute(query.order_by(Employee.employee_id))
        except SQLAlchemyError as e:
            logger.exception("Failed to load employees")
            raise AttendanceFetchError(
                f"Could not load employees: {e}", list(employee_ids or [])
            ) from e
        return list(result.scalars().all())

    async def load_attendance(
        self,
        employee_ids: Sequence[str],
        period: PayPeriod,
    ) -> dict[str, list[AttendanceRecordRow]]:
        """Load attendance rows dated inside period.

        Employees without rows are absent from the mapping; callers treat
        that as zero hours. A query failure raises AttendanceFetchError.
        """
        if not employee_ids:
            return {}

        try:
            result = await self.session.execute(
                select(AttendanceRecordRow)
                .where(
                    AttendanceRecordRow.employee_id.in_(list(employee_ids)),
                    AttendanceRecordRow.work_date >= period.start,
                    AttendanceRecordRow.work_date <= period.end,
                )
                .order_by(AttendanceRecordRow.employee_id, AttendanceRecordRow.work_date)
            )
        except SQLAlchemyError as e:
            logger.exception(
                "Failed to load attendance for %s..%s", period.start, period.end
            )
            raise AttendanceFetchError(
                f"Could not load attendance for {period.start}..{period.end}: {e}",
                list(employee_ids),
            ) from e

        grouped: dict[str, list[AttendanceRecordRow]] = defaultdict(list)
        for row in result.scalars().all():
            grouped[row.employee_id].append(row)
        return dict(grouped)

    def wage_profile_for(self, employee: Employee) -> WageProfile:
        """Map an employee row to a WageProfile.

        A missing wage maps to a zero rate, which pays nothing.
        """
        return WageProfile(
            employee_id=employee.employee_id,
            hourly_rate=employee.wage if employee.wage is not None else ZERO,
            overtime_multiplier=(
                employee.overtime_rate
                if employee.overtime_rate is not None
                else self.settings.default_overtime_multiplier
            ),
            tax_rate=self.settings.default_tax_rate,
        )

    @staticmethod
    def attendance_record_for(row: AttendanceRecordRow) -> AttendanceRecord:
        return AttendanceRecord(
            employee_id=row.employee_id,
            work_date=row.work_date,
            total_hours=row.total_hours if row.total_hours is not None else ZERO,
            overtime_hours=row.overtime_hours if row.overtime_hours is not None else ZERO,
        )

    async def preview_pay_run(
        self,
        reference_date: date,
        frequency: PayFrequency | str | None = None,
        employee_ids: Sequence[str] | None = None,
    ) -> PayRunCalculationResult:
        """Calculate pay for the period containing reference_date.

        Employees whose stored data is invalid are reported in the result's
        errors. Requested ids that are not active employees are reported
        the same way. Database failures propagate as AttendanceFetchError.
        """
        period = compute_pay_period_bounds(
            reference_date,
            frequency or self.settings.pay_frequency,
            anchor=self.settings.biweekly_anchor_date,
        )

        employees = await self.load_employees(employee_ids)
        attendance = await self.load_attendance(
            [e.employee_id for e in employees], period
        )

        entries: list[EmployeePayInput] = []
        build_errors: dict[str, str] = {}

        for employee in employees:
            try:
                wage = self.wage_profile_for(employee)
                records = [
                    self.attendance_record_for(row)
                    for row in attendance.get(employee.employee_id, [])
                ]
            except PayrollError as e:
                logger.warning("Skipping employee %s: %s", employee.employee_id, e)
                build_errors[employee.employee_id] = str(e)
                continue
            entries.append(
                EmployeePayInput(wage=wage, records=records, display_name=employee.full_name)
            )

        found = {e.employee_id for e in employees}
        for employee_id in employee_ids or []:
            if employee_id not in found:
                build_errors[employee_id] = f"No active employee {employee_id}"

        run = self.engine.calculate_pay_run(entries, period)
        run.errors.update(build_errors)
        return run
