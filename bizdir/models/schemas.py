"""Pydantic schemas handed to callers of the reporting engine."""
from __future__ import annotations

from uuid import UUID

from pydantic import BaseModel

from bizdir.models.finance import FinancialReportByPeriod, QuarterlyReport, YearTax


class PeriodOut(BaseModel):
    start_year: int
    start_quarter: int
    end_year: int
    end_quarter: int


class QuarterlyReportOut(BaseModel):
    id: UUID
    company_id: UUID
    revenue: float
    costs: float
    year: int
    quarter: int

    @classmethod
    def from_report(cls, report: QuarterlyReport) -> QuarterlyReportOut:
        return cls(
            id=report.id,
            company_id=report.company_id,
            revenue=float(report.revenue),
            costs=float(report.costs),
            year=report.year,
            quarter=report.quarter,
        )


class YearTaxOut(BaseModel):
    company_id: UUID
    year: int
    revenue: float
    profit: float
    rate_percent: float
    taxes: float

    @classmethod
    def from_year_tax(cls, entry: YearTax) -> YearTaxOut:
        return cls(
            company_id=entry.company_id,
            year=entry.year,
            revenue=float(entry.revenue),
            profit=float(entry.profit),
            rate_percent=float(entry.rate * 100),
            taxes=float(entry.taxes),
        )


class FinancialSummary(BaseModel):
    """Totals only, as shown on an entrepreneur's profile."""

    revenue: float
    costs: float
    profit: float
    taxes: float
    tax_load: float

    @classmethod
    def from_report(cls, report: FinancialReportByPeriod) -> FinancialSummary:
        return cls(
            revenue=float(report.revenue()),
            costs=float(report.costs()),
            profit=float(report.profit()),
            taxes=float(report.taxes),
            tax_load=float(report.tax_load),
        )


class FinancialReportOut(FinancialSummary):
    period: PeriodOut
    reports: list[QuarterlyReportOut]
    years: list[YearTaxOut]

    @classmethod
    def from_report(cls, report: FinancialReportByPeriod) -> FinancialReportOut:
        summary = FinancialSummary.from_report(report)
        return cls(
            **summary.model_dump(),
            period=PeriodOut(**report.period.model_dump()),
            reports=[QuarterlyReportOut.from_report(r) for r in report.reports],
            years=[YearTaxOut.from_year_tax(y) for y in report.year_breakdown()],
        )


class RatingOut(BaseModel):
    owner_id: UUID
    period: PeriodOut
    rating: float
