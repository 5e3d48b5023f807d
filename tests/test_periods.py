"""Unit tests for pay period and pay date arithmetic."""

import pytest
from datetime import date, timedelta

from attendance_payroll.calculators.periods import (
    compute_pay_period_bounds,
    days_until,
    next_pay_period,
    next_payday,
    pay_date_for_period,
    previous_pay_period,
)
from attendance_payroll.calculators.types import PayFrequency


class TestWeeklyBounds:
    """Weekly periods run Sunday through Saturday."""

    def test_midweek_reference(self):
        """Wednesday 2025-01-15 falls in Sun 01-12 .. Sat 01-18."""
        period = compute_pay_period_bounds(date(2025, 1, 15), "weekly")

        assert period.start == date(2025, 1, 12)
        assert period.end == date(2025, 1, 18)
        assert period.frequency is PayFrequency.WEEKLY

    def test_sunday_starts_its_own_period(self):
        """A Sunday reference is the first day, not the previous week."""
        period = compute_pay_period_bounds(date(2025, 1, 12), PayFrequency.WEEKLY)

        assert period.start == date(2025, 1, 12)

    def test_saturday_ends_period(self):
        period = compute_pay_period_bounds(date(2025, 1, 18), PayFrequency.WEEKLY)

        assert period.start == date(2025, 1, 12)
        assert period.end == date(2025, 1, 18)

    def test_crosses_year_boundary(self):
        """Week containing New Year's Day 2025 starts in December."""
        period = compute_pay_period_bounds(date(2025, 1, 1), PayFrequency.WEEKLY)

        assert period.start == date(2024, 12, 29)
        assert period.end == date(2025, 1, 4)


class TestBiweeklyBounds:
    """Biweekly periods sit on a fixed 14-day grid."""

    def test_epoch_is_a_block_start(self):
        period = compute_pay_period_bounds(date(1970, 1, 1), PayFrequency.BIWEEKLY)

        assert period.start == date(1970, 1, 1)
        assert period.end == date(1970, 1, 14)

    def test_grid_from_epoch(self):
        """2025-01-15 is day 20103 since epoch; block starts at day 20090."""
        period = compute_pay_period_bounds(date(2025, 1, 15), PayFrequency.BIWEEKLY)

        assert period.start == date(1970, 1, 1) + timedelta(days=20090)
        assert period.start == date(2025, 1, 2)
        assert period.end == date(2025, 1, 15)

    def test_every_day_in_block_maps_to_same_period(self):
        first = compute_pay_period_bounds(date(2025, 1, 2), PayFrequency.BIWEEKLY)

        for offset in range(14):
            day = first.start + timedelta(days=offset)
            assert compute_pay_period_bounds(day, PayFrequency.BIWEEKLY) == first

    def test_day_after_block_starts_next(self):
        period = compute_pay_period_bounds(date(2025, 1, 16), PayFrequency.BIWEEKLY)

        assert period.start == date(2025, 1, 16)
        assert period.end == date(2025, 1, 29)

    def test_custom_anchor(self):
        """An anchor payday moves the grid."""
        anchor = date(2025, 1, 5)  # a Sunday
        period = compute_pay_period_bounds(date(2025, 1, 15), "biweekly", anchor=anchor)

        assert period.start == date(2025, 1, 5)
        assert period.end == date(2025, 1, 18)

    def test_dates_before_anchor_stay_on_grid(self):
        anchor = date(2025, 1, 5)
        period = compute_pay_period_bounds(date(2025, 1, 4), "biweekly", anchor=anchor)

        assert period.start == date(2024, 12, 22)
        assert period.end == date(2025, 1, 4)

    def test_bi_weekly_spelling_accepted(self):
        assert compute_pay_period_bounds(date(2025, 1, 15), "bi-weekly").frequency is PayFrequency.BIWEEKLY


class TestMonthlyBounds:
    """Monthly periods cover the calendar month."""

    def test_february_non_leap(self):
        period = compute_pay_period_bounds(date(2025, 2, 10), PayFrequency.MONTHLY)

        assert period.start == date(2025, 2, 1)
        assert period.end == date(2025, 2, 28)

    def test_february_leap(self):
        period = compute_pay_period_bounds(date(2024, 2, 10), PayFrequency.MONTHLY)

        assert period.end == date(2024, 2, 29)

    def test_first_of_month_starts_period(self):
        period = compute_pay_period_bounds(date(2025, 3, 1), PayFrequency.MONTHLY)

        assert period.start == date(2025, 3, 1)
        assert period.end == date(2025, 3, 31)


class TestBoundsContract:
    """Properties shared by all frequencies."""

    @pytest.mark.parametrize("frequency", list(PayFrequency))
    def test_idempotent(self, frequency):
        reference = date(2025, 7, 4)

        assert compute_pay_period_bounds(reference, frequency) == compute_pay_period_bounds(
            reference, frequency
        )

    @pytest.mark.parametrize("frequency", list(PayFrequency))
    def test_reference_inside_period(self, frequency):
        reference = date(2025, 7, 4)

        assert compute_pay_period_bounds(reference, frequency).contains(reference)

    def test_unknown_frequency_rejected(self):
        with pytest.raises(ValueError):
            compute_pay_period_bounds(date(2025, 1, 1), "fortnightly")


class TestAdjacentPeriods:
    """previous_pay_period / next_pay_period."""

    def test_previous_week(self):
        period = compute_pay_period_bounds(date(2025, 1, 15), PayFrequency.WEEKLY)

        prev = previous_pay_period(period)

        assert prev.start == date(2025, 1, 5)
        assert prev.end == date(2025, 1, 11)

    def test_next_month(self):
        period = compute_pay_period_bounds(date(2025, 1, 15), PayFrequency.MONTHLY)

        nxt = next_pay_period(period)

        assert nxt.start == date(2025, 2, 1)
        assert nxt.end == date(2025, 2, 28)

    def test_previous_biweekly_is_contiguous(self):
        period = compute_pay_period_bounds(date(2025, 1, 15), PayFrequency.BIWEEKLY)

        prev = previous_pay_period(period)

        assert prev.end + timedelta(days=1) == period.start
        assert prev.days == 14


class TestPayDates:
    """Pay date offsets and payday cadence."""

    @pytest.mark.parametrize(
        "frequency,expected",
        [
            (PayFrequency.WEEKLY, date(2025, 1, 21)),
            (PayFrequency.BIWEEKLY, date(2025, 1, 23)),
            (PayFrequency.MONTHLY, date(2025, 1, 25)),
        ],
    )
    def test_pay_date_offsets(self, frequency, expected):
        assert pay_date_for_period(date(2025, 1, 18), frequency) == expected

    def test_next_payday_weekly_and_biweekly(self):
        assert next_payday(date(2025, 1, 10), "weekly") == date(2025, 1, 17)
        assert next_payday(date(2025, 1, 10), "biweekly") == date(2025, 1, 24)

    def test_next_payday_monthly_clamps_day(self):
        assert next_payday(date(2025, 1, 31), "monthly") == date(2025, 2, 28)
        assert next_payday(date(2024, 1, 31), "monthly") == date(2024, 2, 29)

    def test_next_payday_monthly_rolls_year(self):
        assert next_payday(date(2025, 12, 15), "monthly") == date(2026, 1, 15)

    def test_days_until(self):
        assert days_until(date(2025, 1, 25), date(2025, 1, 20)) == 5
        assert days_until(date(2025, 1, 20), date(2025, 1, 25)) == -5
