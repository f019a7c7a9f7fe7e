"""Financial Reporting Service.

Aggregates an owner's quarterly reports across all owned companies
into one report set, taxing every complete calendar year.
"""
from __future__ import annotations

import asyncio
import logging
import time
from datetime import date
from typing import Optional, Sequence
from uuid import UUID

from bizdir import metrics
from bizdir.core.config import BaseAppSettings, settings as default_settings
from bizdir.core.exceptions import UpstreamFailureError
from bizdir.models.finance import Company, FinancialReportByPeriod, Period, QuarterlyReport
from bizdir.models.schemas import FinancialSummary
from bizdir.services.directory import CompanyReader, FinancialReportReader

from .computations import TaxAccumulator, calculate_taxes
from .period_utils import ensure_valid_period, previous_year_period
from .reconciliation import reconcile_year_windows

logger = logging.getLogger(__name__)


class FinancialReportingService:
    """Builds per-company and per-owner financial reports over a period.

    Responsibilities:
    - Period validation before any collaborator call
    - Fetching each owned company's quarterly reports (bounded fan-out)
    - Year-window reconciliation and progressive taxation of full years
    - Merging into one report set, companies in their listing order
    """

    def __init__(
        self,
        companies: CompanyReader,
        reports: FinancialReportReader,
        app_settings: Optional[BaseAppSettings] = None,
    ):
        self.companies = companies
        self.reports = reports
        self.settings = app_settings or default_settings

    async def list_companies(self, owner_id: UUID) -> list[Company]:
        try:
            return list(await self.companies.list_by_owner(owner_id))
        except Exception as exc:
            logger.warning("Listing companies of owner %s failed: %s", owner_id, exc)
            metrics.upstream_failure("company_list")
            raise UpstreamFailureError("company_list", owner_id, exc) from exc

    async def fetch_reports(self, company_id: UUID, period: Period) -> list[QuarterlyReport]:
        try:
            return list(await self.reports.get_for_period(company_id, period))
        except Exception as exc:
            logger.warning("Fetching reports of company %s for %s failed: %s", company_id, period, exc)
            metrics.upstream_failure("financial_report")
            raise UpstreamFailureError("financial_report", company_id, exc) from exc

    async def get_company_report(self, company_id: UUID, period: Period) -> FinancialReportByPeriod:
        """One company's raw reports for ``period``; no taxes are computed."""
        ensure_valid_period(period)
        reports = await self.fetch_reports(company_id, period)
        return FinancialReportByPeriod(period=period, reports=reports)

    async def _fetch_all(self, companies: Sequence[Company], period: Period) -> list[list[QuarterlyReport]]:
        """Fetch every company's reports concurrently; results keep the companies' order.

        The first failure cancels the fetches still in flight and is re-raised.
        """
        semaphore = asyncio.Semaphore(self.settings.MAX_CONCURRENT_FETCHES)

        async def fetch(company: Company) -> list[QuarterlyReport]:
            async with semaphore:
                return await self.fetch_reports(company.id, period)

        tasks = [asyncio.ensure_future(fetch(company)) for company in companies]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

    async def get_user_financial_report(self, owner_id: UUID, period: Period) -> FinancialReportByPeriod:
        """Consolidated report of every company owned by ``owner_id``.

        Args:
            owner_id: Entrepreneur whose companies are aggregated
            period: Inclusive quarter range

        Returns:
            Report set whose ``reports`` hold every fetched report (grouped by
            company) and whose ``taxes``/``tax_load`` cover full years only

        Raises:
            InvalidPeriodError: If the period is inverted or malformed
            UpstreamFailureError: If any collaborator call fails
        """
        ensure_valid_period(period)
        started = time.perf_counter()

        companies = await self.list_companies(owner_id)
        per_company = await self._fetch_all(companies, period)

        report = FinancialReportByPeriod(period=period)
        taxes = TaxAccumulator(self.settings.TAX_LOAD_EPSILON)
        for company, reports in zip(companies, per_company):
            windows = reconcile_year_windows(
                company.id, reports, period, self.settings.RECONCILIATION_STRATEGY
            )
            taxes.merge(calculate_taxes(windows.values(), self.settings.TAX_LOAD_EPSILON))
            report.reports.extend(reports)

        report.taxes = taxes.taxes
        report.tax_load = taxes.tax_load_percent()
        report.year_windows = taxes.windows

        metrics.financial_report_generated(
            companies=len(companies),
            taxed_years=len(taxes.windows),
            latency_seconds=time.perf_counter() - started,
        )
        logger.info(
            f"Financial report for owner {owner_id} ({period}): "
            f"Companies={len(companies)}, Reports={len(report.reports)}, "
            f"Revenue={report.revenue()}, Taxes={report.taxes}, TaxLoad={report.tax_load}"
        )
        return report

    async def get_previous_year_summary(self, owner_id: UUID, today: Optional[date] = None) -> FinancialSummary:
        """Totals of the owner's previous calendar year."""
        report = await self.get_user_financial_report(owner_id, previous_year_period(today))
        return FinancialSummary.from_report(report)
