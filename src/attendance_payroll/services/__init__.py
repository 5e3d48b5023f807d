"""Service layer for payroll operations."""

from attendance_payroll.services.payroll_service import PayrollService

__all__ = ["PayrollService"]
