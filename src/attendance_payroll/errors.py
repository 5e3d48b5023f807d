"""Domain exceptions for payroll calculation."""

from __future__ import annotations

from typing import Any


class PayrollError(Exception):
    """Base class for payroll domain errors."""


class InvalidWageProfile(PayrollError):
    """Raised when a wage profile violates rate constraints."""

    def __init__(self, employee_id: str, reason: str):
        self.employee_id = employee_id
        self.reason = reason
        super().__init__(f"Invalid wage profile for employee {employee_id}: {reason}")


class InvalidAttendanceRecord(PayrollError):
    """Raised when an attendance record has impossible hours."""

    def __init__(self, employee_id: str, work_date: Any, reason: str):
        self.employee_id = employee_id
        self.work_date = work_date
        self.reason = reason
        super().__init__(
            f"Invalid attendance record for employee {employee_id} "
            f"on {work_date}: {reason}"
        )


class AttendanceFetchError(PayrollError):
    """Raised when wage or attendance data could not be loaded.

    Kept distinct from "no attendance rows", which legitimately means
    zero hours worked.
    """

    def __init__(self, message: str, employee_ids: list[str] | None = None):
        self.employee_ids = employee_ids or []
        super().__init__(message)
