"""Date arithmetic for recurring patterns."""

import calendar
from datetime import date, timedelta
from typing import Any, Dict, Optional

from curio_finance.models.recurring import RecurringType


def to_pattern_weekday(value: date) -> int:
    """Weekday numbered 0 = Sunday ... 6 = Saturday."""
    return (value.weekday() + 1) % 7


def _add_months(value: date, months: int, day: Optional[int] = None) -> date:
    """Move by whole months, clamping the day to the target month's length."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    target_day = day if day is not None else value.day
    return date(year, month, min(target_day, calendar.monthrange(year, month)[1]))


def compute_next_occurrence(
    current: date,
    recurring_type: RecurringType,
    frequency: int,
    day_of_month: Optional[int] = None,
    day_of_week: Optional[int] = None,
    month_of_year: Optional[int] = None,
) -> date:
    """
    Calculate the occurrence that follows ``current`` for a pattern.

    WEEKLY with a ``day_of_week`` first walks forward to that weekday (staying
    put if ``current`` is already on it) and then skips ``frequency - 1``
    further weeks. MONTHLY and YEARLY clamp the anchor day to the length of the
    resulting month.
    """
    if frequency <= 0:
        raise ValueError(f"frequency must be positive, got {frequency}")

    recurring_type = RecurringType(recurring_type)

    if recurring_type == RecurringType.DAILY:
        return current + timedelta(days=frequency)

    if recurring_type == RecurringType.WEEKLY:
        if day_of_week is None:
            return current + timedelta(days=7 * frequency)
        next_date = current
        while to_pattern_weekday(next_date) != day_of_week:
            next_date += timedelta(days=1)
        return next_date + timedelta(days=7 * (frequency - 1))

    if recurring_type == RecurringType.MONTHLY:
        return _add_months(current, frequency, day_of_month)

    # YEARLY
    year = current.year + frequency
    if month_of_year is not None and day_of_month is not None:
        days_in_month = calendar.monthrange(year, month_of_year)[1]
        return date(year, month_of_year, min(day_of_month, days_in_month))
    days_in_month = calendar.monthrange(year, current.month)[1]
    return date(year, current.month, min(current.day, days_in_month))


def is_due(
    next_process_date: date,
    end_date: Optional[date] = None,
    today: Optional[date] = None,
) -> bool:
    """Whether a definition should be realized today. Compares calendar days only."""
    today = today or date.today()

    # Past the end date: never due again
    if end_date is not None and today > end_date:
        return False

    return next_process_date <= today


def pattern_anchors(start: date, recurring_type: RecurringType) -> Dict[str, Any]:
    """Derive the pattern anchor fields from the date a transaction was marked recurring."""
    recurring_type = RecurringType(recurring_type)
    return {
        "day_of_week": to_pattern_weekday(start) if recurring_type == RecurringType.WEEKLY else None,
        "day_of_month": start.day if recurring_type in (RecurringType.MONTHLY, RecurringType.YEARLY) else None,
        "month_of_year": start.month if recurring_type == RecurringType.YEARLY else None,
    }


def advance_process_date(
    current: date,
    recurring_type: RecurringType,
    frequency: int,
    day_of_month: Optional[int] = None,
    day_of_week: Optional[int] = None,
    month_of_year: Optional[int] = None,
) -> date:
    """
    Next process date strictly after ``current``.

    A weekly anchor equal to the weekday of ``current`` is already reached, so
    the schedule moves ``frequency`` whole weeks from ``current``.
    """
    if frequency <= 0:
        raise ValueError(f"frequency must be positive, got {frequency}")

    if RecurringType(recurring_type) == RecurringType.WEEKLY and day_of_week == to_pattern_weekday(current):
        return current + timedelta(days=7 * frequency)

    return compute_next_occurrence(
        current, recurring_type, frequency, day_of_month, day_of_week, month_of_year
    )
