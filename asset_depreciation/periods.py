"""Calendar-month arithmetic for depreciation periods.

Depreciation is computed at monthly granularity, so everything hinges on how
many *whole* months separate two dates. The rule used throughout the package:

    ``elapsed_months(start, end)`` is the largest ``n`` such that
    ``start + n calendar months <= end``.

Calendar addition clamps to the end of shorter months (Jan 31 + 1 month is
Feb 28/29), so a month counts once the purchase day-of-month is reached, or
once the last day of the target month is reached when that month is too short
to contain the purchase day. Spans where ``end < start`` count as zero months.
"""

from datetime import date, datetime
from typing import Union

from dateutil.relativedelta import relativedelta

MONTHS_PER_YEAR = 12


def as_date(value: Union[date, datetime]) -> date:
    """Normalize a datetime to its date; plain dates pass through.

    ``datetime`` is a ``date`` subclass but cannot be compared with plain
    dates, so every boundary of the package normalizes through here.
    """
    if isinstance(value, datetime):
        return value.date()
    return value


def add_months(start: date, months: int) -> date:
    """Add calendar months to a date, clamping to month end.

    Example:
        >>> add_months(date(2024, 1, 31), 1)
        datetime.date(2024, 2, 29)
    """
    return start + relativedelta(months=months)


def add_years(start: date, years: int) -> date:
    """Add calendar years to a date (Feb 29 clamps to Feb 28)."""
    return start + relativedelta(years=years)


def elapsed_months(start: date, end: date) -> int:
    """Count whole calendar months from ``start`` to ``end``.

    Args:
        start: First day of the span (typically the purchase date).
        end: Last day of the span (the as-of date).

    Returns:
        Number of complete months, never negative.

    Example:
        >>> elapsed_months(date(2024, 1, 15), date(2024, 3, 14))
        1
        >>> elapsed_months(date(2024, 1, 15), date(2024, 3, 15))
        2
        >>> elapsed_months(date(2024, 1, 31), date(2024, 2, 29))
        1
    """
    if end <= start:
        return 0
    months = (end.year - start.year) * MONTHS_PER_YEAR + (end.month - start.month)
    if add_months(start, months) > end:
        months -= 1
    return max(months, 0)
