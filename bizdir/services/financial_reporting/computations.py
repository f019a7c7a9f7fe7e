"""Tax computation functions and constants.

Pure computation logic for the yearly profit tax and the tax load
of an aggregate. No collaborator access in this module.
"""
import logging
from decimal import Decimal
from typing import Iterable, Optional

from bizdir.core.config import settings
from bizdir.core.exceptions import InvalidStateError
from bizdir.models.finance import ZERO, YearWindow

logger = logging.getLogger(__name__)


# Yearly profit tax brackets
# The whole profit is taxed at the rate of the first bracket whose bound it is strictly below
TAX_BRACKETS = [
    (Decimal("10000000"), Decimal("0.04")),     # profit < 10M: 4%
    (Decimal("50000000"), Decimal("0.07")),     # profit < 50M: 7%
    (Decimal("150000000"), Decimal("0.13")),    # profit < 150M: 13%
    (Decimal("500000000"), Decimal("0.20")),    # profit < 500M: 20%
    (None, Decimal("0.30")),                    # 500M and above: 30%
]


def tax_rate_for_profit(profit: Decimal) -> Decimal:
    """Rate for a year's profit. Zero and negative profits fall in the lowest bracket."""
    for bound, rate in TAX_BRACKETS:
        if bound is None or profit < bound:
            return rate
    raise AssertionError("TAX_BRACKETS must end with an unbounded bracket")


def compute_year_tax(window: YearWindow) -> Decimal:
    """Tax a full-year window and record rate and amount on it.

    Args:
        window: A window holding all four quarters of one company-year

    Returns:
        Tax owed for the year (profit x rate; negative for a loss-making year)

    Raises:
        InvalidStateError: If the window is not a full year
    """
    if not window.is_full_year:
        raise InvalidStateError(
            "only complete years can be taxed",
            company_id=str(window.company_id),
            year=window.year,
            quarters=len(window.reports),
        )

    profit = window.profit()
    rate = tax_rate_for_profit(profit)
    window.tax_rate = rate
    window.taxes = profit * rate

    logger.debug(
        f"Year tax for company {window.company_id} ({window.year}): "
        f"Profit={profit}, Rate={rate}, Tax={window.taxes}"
    )
    return window.taxes


def tax_load_percent(taxes: Decimal, taxed_revenue: Decimal, epsilon: Optional[float] = None) -> Decimal:
    """Taxes as a percentage of the revenue of taxed years.

    Returns 0 when the taxed revenue is too small to divide by.
    """
    eps = Decimal(str(settings.TAX_LOAD_EPSILON if epsilon is None else epsilon))
    if abs(taxed_revenue) < eps:
        return ZERO
    return taxes / taxed_revenue * 100


class TaxAccumulator:
    """Running tax totals across years and companies of one aggregate."""

    def __init__(self, epsilon: Optional[float] = None):
        self.epsilon = epsilon
        self.taxes = ZERO
        self.taxed_revenue = ZERO
        self.windows: list[YearWindow] = []

    def add(self, window: YearWindow) -> Decimal:
        """Tax ``window`` and fold it into the totals."""
        tax = compute_year_tax(window)
        self.taxes += tax
        self.taxed_revenue += window.revenue()
        self.windows.append(window)
        return tax

    def merge(self, other: "TaxAccumulator") -> None:
        self.taxes += other.taxes
        self.taxed_revenue += other.taxed_revenue
        self.windows.extend(other.windows)

    def tax_load_percent(self) -> Decimal:
        return tax_load_percent(self.taxes, self.taxed_revenue, self.epsilon)


def calculate_taxes(windows: Iterable[YearWindow], epsilon: Optional[float] = None) -> TaxAccumulator:
    """Tax every full-year window in ``windows``; other windows are ignored."""
    accumulator = TaxAccumulator(epsilon)
    for window in windows:
        if window.is_full_year:
            accumulator.add(window)
    return accumulator
