"""Pytest fixtures for attendance payroll tests."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from attendance_payroll.calculators.types import (
    AttendanceRecord,
    PayFrequency,
    PayPeriod,
    WageProfile,
)
from attendance_payroll.config import Settings
from attendance_payroll.models import AttendanceRecordRow, Base, Employee

# In-memory SQLite with async support
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def settings() -> Settings:
    """Settings matching the documented defaults."""
    return Settings(
        database_url=TEST_DATABASE_URL,
        engine_version="1.0.0",
        pay_frequency=PayFrequency.WEEKLY,
        default_overtime_multiplier=Decimal("1.5"),
        default_tax_rate=Decimal("0.20"),
        daily_overtime_threshold=Decimal("8"),
        biweekly_anchor_date=None,
        log_level="INFO",
    )


@pytest.fixture
def week_of_jan_12() -> PayPeriod:
    """Weekly period Sunday 2025-01-12 .. Saturday 2025-01-18."""
    return PayPeriod(date(2025, 1, 12), date(2025, 1, 18), PayFrequency.WEEKLY)


@pytest.fixture
def wage() -> WageProfile:
    return WageProfile(employee_id="EMP001", hourly_rate=Decimal("20"))


@pytest.fixture
def week_records() -> list[AttendanceRecord]:
    """Five 9-hour days, one hour of overtime each."""
    return [
        AttendanceRecord("EMP001", date(2025, 1, day), Decimal("9"), Decimal("1"))
        for day in range(13, 18)
    ]


@pytest_asyncio.fixture
async def db_engine():
    """Create test database engine with the payroll tables."""
    # StaticPool keeps one connection so every session sees the same memory db
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def seeded_session(session: AsyncSession) -> AsyncSession:
    """Session with three employees and a week of attendance.

    EMP001  $20/h, 5 x (9h total, 1h overtime) in week of 2025-01-12
    EMP002  no wage configured, 8h on 2025-01-13
    EMP003  $15/h, 2.0x overtime, no attendance
    EMP004  inactive
    """
    session.add_all([
        Employee(employee_id="EMP001", full_name="Ana Reyes", status="active", wage=Decimal("20.00")),
        Employee(employee_id="EMP002", full_name="Ben Cruz", status="active", wage=None),
        Employee(
            employee_id="EMP003",
            full_name="Cai Santos",
            status="active",
            wage=Decimal("15.00"),
            overtime_rate=Decimal("2.00"),
        ),
        Employee(employee_id="EMP004", full_name="Dee Lim", status="inactive", wage=Decimal("30.00")),
    ])
    for day in range(13, 18):
        session.add(
            AttendanceRecordRow(
                employee_id="EMP001",
                work_date=date(2025, 1, day),
                total_hours=Decimal("9.00"),
                overtime_hours=Decimal("1.00"),
            )
        )
    # Outside the week; must not be counted
    session.add(
        AttendanceRecordRow(
            employee_id="EMP001",
            work_date=date(2025, 1, 20),
            total_hours=Decimal("8.00"),
            overtime_hours=Decimal("0.00"),
        )
    )
    session.add(
        AttendanceRecordRow(
            employee_id="EMP002",
            work_date=date(2025, 1, 13),
            total_hours=Decimal("8.00"),
            overtime_hours=Decimal("0.00"),
        )
    )
    await session.flush()
    return session
