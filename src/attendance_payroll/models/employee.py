"""Employee model (wage source of truth)."""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import CheckConstraint, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from attendance_payroll.models.base import Base, TimestampMixin


class Employee(Base, TimestampMixin):
    """Employee record with hourly wage configuration."""

    __tablename__ = "employees"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    employee_id: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    # Hourly rate; NULL means no wage configured
    wage: Mapped[Decimal | None] = mapped_column(Numeric(10, 2), nullable=True)
    # Overtime multiplier; NULL falls back to the configured default
    overtime_rate: Mapped[Decimal | None] = mapped_column(Numeric(4, 2), nullable=True)

    __table_args__ = (
        CheckConstraint(
            "status IN ('active', 'inactive', 'terminated')",
            name="employees_status_check",
        ),
    )
