"""Financial Reporting Module.

Reconciles owners' quarterly reports into calendar years, taxes complete
years and rates entrepreneurs.

Sub-modules:
- period_utils: Period validation and fixed periods
- reconciliation: Grouping of quarterly reports into year windows
- computations: Tax brackets, yearly tax and tax load
- reporting_service: FinancialReportingService (per-owner aggregation)
- rating_service: RatingService (entrepreneur rating)
"""
from .computations import (
    TAX_BRACKETS,
    TaxAccumulator,
    calculate_taxes,
    compute_year_tax,
    tax_load_percent,
    tax_rate_for_profit,
)
from .period_utils import ensure_valid_period, previous_year_period
from .reconciliation import full_year_windows, reconcile_year_windows
from .reporting_service import FinancialReportingService
from .rating_service import RatingService, calc_rating

__all__ = [
    # Constants
    "TAX_BRACKETS",
    # Computation functions
    "TaxAccumulator",
    "calculate_taxes",
    "compute_year_tax",
    "tax_load_percent",
    "tax_rate_for_profit",
    "calc_rating",
    # Utilities
    "ensure_valid_period",
    "previous_year_period",
    "reconcile_year_windows",
    "full_year_windows",
    # Service classes
    "FinancialReportingService",
    "RatingService",
]
