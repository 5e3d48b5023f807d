"""Attendance-driven payroll calculation."""

__version__ = "1.0.0"
