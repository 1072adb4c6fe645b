"""
Billing calendar.

All date arithmetic of the monthly dues cycle lives here so the rest of the
code never computes cycle boundaries by hand.

A billing cycle is one calendar month. It closes on ``BILLING_CYCLE_DAY``
(30 by default) of that month, clamped to the month's last day, so February
closes on the 28th or 29th. The first ``BILLING_GRACE_DAYS`` (5) days of a
month are a grace period before last month's debt is escalated.

Example:
    >>> end_of_billing_cycle(2024, 3)
    datetime.date(2024, 3, 30)
    >>> end_of_billing_cycle(2024, 2)
    datetime.date(2024, 2, 29)
    >>> next_period(2024, 12)
    (2025, 1)
"""

import calendar
from datetime import date
from typing import Tuple

from django.conf import settings


def cycle_day() -> int:
    return getattr(settings, 'BILLING_CYCLE_DAY', 30)


def grace_days() -> int:
    return getattr(settings, 'BILLING_GRACE_DAYS', 5)


def end_of_billing_cycle(year: int, month: int) -> date:
    """Closing date of the (year, month) cycle: day 30, or the month's last day if shorter."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(cycle_day(), last_day))


def next_period(year: int, month: int) -> Tuple[int, int]:
    """The month after (year, month); December wraps to January of year + 1."""
    if month == 12:
        return year + 1, 1
    return year, month + 1


def previous_period(year: int, month: int) -> Tuple[int, int]:
    if month == 1:
        return year - 1, 12
    return year, month - 1


def next_due_date(year: int, month: int) -> date:
    """Cycle end of the month following a paid (year, month) period."""
    return end_of_billing_cycle(*next_period(year, month))


def grace_deadline(today: date) -> date:
    """Last day of the grace period in ``today``'s month."""
    return date(today.year, today.month, grace_days())


def is_past_grace_period(today: date) -> bool:
    return today.day > grace_days()


def is_current_or_future(year: int, month: int, today: date) -> bool:
    """True if (year, month) is today's cycle or a later one."""
    return (year, month) >= (today.year, today.month)


def current_cycle_window(today: date) -> Tuple[date, date]:
    """First day and closing date of ``today``'s cycle."""
    return date(today.year, today.month, 1), end_of_billing_cycle(today.year, today.month)
