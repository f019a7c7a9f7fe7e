"""Quarter period utilities.

Provides validation of reporting periods and the fixed periods
used by the rating and the previous-year summary.
"""
from datetime import date
from typing import Optional

from bizdir.core.exceptions import InvalidPeriodError
from bizdir.models.finance import Period


def ensure_valid_period(period: Period) -> Period:
    """Raise ``InvalidPeriodError`` unless ``period.is_valid()``.

    Returns the period unchanged so calls can be chained.
    """
    reason = period.invalid_reason()
    if reason is None:
        return period
    raise InvalidPeriodError(
        period.start_year,
        period.start_quarter,
        period.end_year,
        period.end_quarter,
        reason=reason,
    )


def previous_year_period(today: Optional[date] = None) -> Period:
    """All four quarters of the calendar year before ``today``."""
    today = today or date.today()
    return Period.full_year(today.year - 1)
