"""ORM models for the tables payroll reads from."""

from attendance_payroll.models.attendance import AttendanceRecordRow
from attendance_payroll.models.base import Base, TimestampMixin
from attendance_payroll.models.employee import Employee

__all__ = [
    "AttendanceRecordRow",
    "Base",
    "Employee",
    "TimestampMixin",
]
