"""Pay period boundary and pay date arithmetic.

All functions are pure: the same inputs always give the same dates, so a
pay run can be recalculated for any reference date at any time.
"""

from __future__ import annotations

import calendar
from datetime import date, timedelta

from attendance_payroll.calculators.types import PayFrequency, PayPeriod

EPOCH = date(1970, 1, 1)
BIWEEKLY_DAYS = 14

# Days between period end and pay date
PAY_DATE_OFFSETS = {
    PayFrequency.WEEKLY: 3,
    PayFrequency.BIWEEKLY: 5,
    PayFrequency.MONTHLY: 7,
}


def _days_since_sunday(day: date) -> int:
    # date.weekday() is Monday=0; weeks here start on Sunday.
    return (day.weekday() + 1) % 7


def _last_day_of_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def _add_months(day: date, months: int) -> date:
    """Shift by whole months, clamping the day to the target month's end."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    return date(year, month, min(day.day, _last_day_of_month(year, month)))


def compute_pay_period_bounds(
    reference_date: date,
    frequency: PayFrequency | str,
    *,
    anchor: date | None = None,
) -> PayPeriod:
    """Compute the pay period containing reference_date.

    Args:
        reference_date: Any date inside the wanted period
        frequency: weekly, biweekly or monthly
        anchor: First day of some biweekly period. Defaults to the Unix
            epoch, which places every biweekly period on one fixed global
            14-day grid. Ignored for other frequencies.

    Returns:
        The inclusive PayPeriod
    """
    freq = PayFrequency.parse(frequency)

    if freq is PayFrequency.WEEKLY:
        start = reference_date - timedelta(days=_days_since_sunday(reference_date))
        end = start + timedelta(days=6)

    elif freq is PayFrequency.BIWEEKLY:
        origin = anchor or EPOCH
        # Floor division keeps dates before the anchor on the same grid.
        block = (reference_date - origin).days // BIWEEKLY_DAYS
        start = origin + timedelta(days=block * BIWEEKLY_DAYS)
        end = start + timedelta(days=BIWEEKLY_DAYS - 1)

    else:
        start = reference_date.replace(day=1)
        end = reference_date.replace(
            day=_last_day_of_month(reference_date.year, reference_date.month)
        )

    return PayPeriod(start=start, end=end, frequency=freq)


def previous_pay_period(
    period: PayPeriod,
    frequency: PayFrequency | str | None = None,
    *,
    anchor: date | None = None,
) -> PayPeriod:
    """Return the period immediately before the given one."""
    freq = PayFrequency.parse(frequency or period.frequency or PayFrequency.MONTHLY)
    return compute_pay_period_bounds(period.start - timedelta(days=1), freq, anchor=anchor)


def next_pay_period(
    period: PayPeriod,
    frequency: PayFrequency | str | None = None,
    *,
    anchor: date | None = None,
) -> PayPeriod:
    """Return the period immediately after the given one."""
    freq = PayFrequency.parse(frequency or period.frequency or PayFrequency.MONTHLY)
    return compute_pay_period_bounds(period.end + timedelta(days=1), freq, anchor=anchor)


def pay_date_for_period(period_end: date, frequency: PayFrequency | str) -> date:
    """Date employees are paid for a period ending on period_end."""
    freq = PayFrequency.parse(frequency)
    return period_end + timedelta(days=PAY_DATE_OFFSETS[freq])


def next_payday(last_payday: date, frequency: PayFrequency | str) -> date:
    """Payday following last_payday.

    Monthly paydays keep the same day of month, clamped to shorter months
    (Jan 31 -> Feb 28).
    """
    freq = PayFrequency.parse(frequency)
    if freq is PayFrequency.WEEKLY:
        return last_payday + timedelta(days=7)
    if freq is PayFrequency.BIWEEKLY:
        return last_payday + timedelta(days=BIWEEKLY_DAYS)
    return _add_months(last_payday, 1)


def days_until(target: date, today: date) -> int:
    """Whole days from today to target (negative once target has passed)."""
    return (target - today).days
