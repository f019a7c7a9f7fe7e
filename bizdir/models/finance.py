"""Financial domain models.

Read-only inputs (companies, activity fields, quarterly reports) are frozen
pydantic models validated on construction. Aggregation results (year windows,
report sets) are plain dataclasses built and filled in by the reporting
services and never persisted.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Iterable, Iterator, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

FIRST_QUARTER = 1
LAST_QUARTER = 4
QUARTERS_IN_YEAR = 4

ZERO = Decimal("0")


def _total(values: Iterable[Decimal]) -> Decimal:
    return sum(values, ZERO)


class Period(BaseModel):
    """Inclusive quarter range ``[start_year.start_quarter, end_year.end_quarter]``.

    Construction never fails on an inverted range; callers check ``is_valid()``
    (see ``period_utils.ensure_valid_period``).
    """

    model_config = ConfigDict(frozen=True)

    start_year: int
    start_quarter: int
    end_year: int
    end_quarter: int

    @classmethod
    def full_year(cls, year: int) -> Period:
        return cls(start_year=year, start_quarter=FIRST_QUARTER, end_year=year, end_quarter=LAST_QUARTER)

    def invalid_reason(self) -> Optional[str]:
        """Why the period is invalid, or None when it is valid."""
        for quarter in (self.start_quarter, self.end_quarter):
            if not FIRST_QUARTER <= quarter <= LAST_QUARTER:
                return f"Quarter must be between {FIRST_QUARTER} and {LAST_QUARTER}, got {quarter}"
        if (self.start_year, self.start_quarter) > (self.end_year, self.end_quarter):
            return "Period end must not precede period start"
        return None

    def is_valid(self) -> bool:
        return self.invalid_reason() is None

    def quarter_span(self, year: int) -> tuple[int, int]:
        """Quarter range covered in ``year``: 1..4, clamped at the period edges."""
        start_qtr = self.start_quarter if year == self.start_year else FIRST_QUARTER
        end_qtr = self.end_quarter if year == self.end_year else LAST_QUARTER
        return start_qtr, end_qtr

    def quarter_spans(self) -> Iterator[tuple[int, int, int]]:
        """Yield ``(year, start_qtr, end_qtr)`` for every year of the period."""
        for year in range(self.start_year, self.end_year + 1):
            start_qtr, end_qtr = self.quarter_span(year)
            yield year, start_qtr, end_qtr

    def quarters(self) -> Iterator[tuple[int, int]]:
        for year, start_qtr, end_qtr in self.quarter_spans():
            for quarter in range(start_qtr, end_qtr + 1):
                yield year, quarter

    def contains(self, year: int, quarter: int) -> bool:
        return (self.start_year, self.start_quarter) <= (year, quarter) <= (self.end_year, self.end_quarter)

    def __str__(self) -> str:
        return f"{self.start_year}Q{self.start_quarter}-{self.end_year}Q{self.end_quarter}"


class QuarterlyReport(BaseModel):
    """One company's revenue and costs for one (year, quarter)."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    company_id: UUID
    revenue: Decimal = Field(ge=0)
    costs: Decimal = Field(ge=0)
    year: int
    quarter: int = Field(ge=FIRST_QUARTER, le=LAST_QUARTER)

    @property
    def profit(self) -> Decimal:
        return self.revenue - self.costs


class Company(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    owner_id: UUID
    activity_field_id: UUID
    name: str = ""
    city: str = ""


class ActivityField(BaseModel):
    """Industry with its cost weight (attractiveness multiplier used by the rating)."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid4)
    name: str
    description: str = ""
    cost: float = Field(gt=0)


@dataclass
class YearWindow:
    """Reports believed to belong to one calendar year of one company."""

    company_id: UUID
    year: int
    start_quarter: int
    end_quarter: int
    reports: list[QuarterlyReport] = field(default_factory=list)
    tax_rate: Decimal | None = None
    taxes: Decimal = ZERO

    @property
    def expected_quarters(self) -> int:
        return self.end_quarter - self.start_quarter + 1

    @property
    def is_complete(self) -> bool:
        return len(self.reports) == self.expected_quarters

    @property
    def is_full_year(self) -> bool:
        """Complete and covering all four quarters; only these are taxed."""
        return self.expected_quarters == QUARTERS_IN_YEAR and self.is_complete

    def revenue(self) -> Decimal:
        return _total(r.revenue for r in self.reports)

    def costs(self) -> Decimal:
        return _total(r.costs for r in self.reports)

    def profit(self) -> Decimal:
        return self.revenue() - self.costs()


@dataclass(frozen=True)
class YearTax:
    company_id: UUID
    year: int
    revenue: Decimal
    profit: Decimal
    rate: Decimal
    taxes: Decimal


@dataclass
class FinancialReportByPeriod:
    """Reports over a period plus the taxes accrued on its complete years.

    ``revenue()``, ``costs()`` and ``profit()`` cover every report, taxed or
    not; ``taxes`` and ``tax_load`` only cover full-year windows.
    """

    period: Period
    reports: list[QuarterlyReport] = field(default_factory=list)
    taxes: Decimal = ZERO
    tax_load: Decimal = ZERO
    year_windows: list[YearWindow] = field(default_factory=list)

    def revenue(self) -> Decimal:
        return _total(r.revenue for r in self.reports)

    def costs(self) -> Decimal:
        return _total(r.costs for r in self.reports)

    def profit(self) -> Decimal:
        return self.revenue() - self.costs()

    def year_breakdown(self) -> list[YearTax]:
        return [
            YearTax(
                company_id=w.company_id,
                year=w.year,
                revenue=w.revenue(),
                profit=w.profit(),
                rate=w.tax_rate if w.tax_rate is not None else ZERO,
                taxes=w.taxes,
            )
            for w in self.year_windows
        ]
