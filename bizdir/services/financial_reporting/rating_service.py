"""Entrepreneur rating.

The rating of an owner averages two ratios over the previous calendar year:
the industry weight of their most profitable company relative to the heaviest
industry, and the profit margin of all their companies together.
"""
from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Callable, Iterable, Optional
from uuid import UUID

from bizdir import metrics
from bizdir.core.config import BaseAppSettings
from bizdir.core.exceptions import InvalidStateError, UpstreamFailureError
from bizdir.models.finance import ZERO, Company, Period
from bizdir.models.schemas import PeriodOut, RatingOut
from bizdir.services.directory import ActivityFieldReader, CompanyReader, FinancialReportReader

from .period_utils import previous_year_period
from .reporting_service import FinancialReportingService

logger = logging.getLogger(__name__)


def calc_rating(profit: Decimal, revenue: Decimal, cost: float, max_cost: float) -> float:
    """``(cost / max_cost + profit / revenue) / 2``.

    Raises:
        InvalidStateError: If revenue is zero or max_cost is not positive
    """
    if max_cost <= 0:
        raise InvalidStateError("maximum activity field cost must be positive", max_cost=max_cost)
    if revenue == 0:
        raise InvalidStateError("aggregate revenue is zero, profit margin is undefined", profit=str(profit))
    return (cost / max_cost + float(profit / revenue)) / 2.0


class RatingService:
    def __init__(
        self,
        companies: CompanyReader,
        reports: FinancialReportReader,
        activity_fields: ActivityFieldReader,
        reporting: Optional[FinancialReportingService] = None,
        app_settings: Optional[BaseAppSettings] = None,
        clock: Optional[Callable[[], date]] = None,
    ):
        self.activity_fields = activity_fields
        self.reporting = reporting or FinancialReportingService(companies, reports, app_settings)
        self.clock = clock or date.today

    async def find_most_profitable_company(
        self,
        companies: Iterable[Company],
        period: Period,
    ) -> Optional[Company]:
        """Company with the strictly greatest positive profit over ``period``.

        Ties keep the company found first. Returns None when no company made a profit.
        """
        best: Optional[Company] = None
        max_profit = ZERO
        for company in companies:
            report = await self.reporting.get_company_report(company.id, period)
            profit = report.profit()
            if profit > max_profit:
                best, max_profit = company, profit
        return best

    async def _company_cost(self, company_id: UUID) -> float:
        try:
            return float(await self.activity_fields.get_cost_for_company(company_id))
        except Exception as exc:
            logger.warning("Fetching activity field cost of company %s failed: %s", company_id, exc)
            metrics.upstream_failure("activity_field_cost")
            raise UpstreamFailureError("activity_field_cost", company_id, exc) from exc

    async def _max_cost(self) -> float:
        try:
            return float(await self.activity_fields.get_max_cost())
        except Exception as exc:
            logger.warning("Fetching maximum activity field cost failed: %s", exc)
            metrics.upstream_failure("max_activity_field_cost")
            raise UpstreamFailureError("max_activity_field_cost", cause=exc) from exc

    async def calculate_user_rating(self, owner_id: UUID, today: Optional[date] = None) -> float:
        """Rating of ``owner_id`` for the calendar year before ``today``.

        Returns 0.0 when the owner has no company with a positive profit that year.

        Raises:
            UpstreamFailureError: If any collaborator call fails
            InvalidStateError: If the owner's aggregate revenue is zero
        """
        period = previous_year_period(today or self.clock())

        companies = await self.reporting.list_companies(owner_id)
        company = await self.find_most_profitable_company(companies, period)
        if company is None:
            logger.info("Owner %s has no profitable company in %s, rating is 0", owner_id, period)
            metrics.rating_calculated("no_company")
            return 0.0

        report = await self.reporting.get_user_financial_report(owner_id, period)
        cost = await self._company_cost(company.id)
        max_cost = await self._max_cost()

        rating = calc_rating(report.profit(), report.revenue(), cost, max_cost)
        metrics.rating_calculated("rated")
        logger.info(
            "Rating for owner %s (%s): company=%s cost=%s max_cost=%s rating=%.4f",
            owner_id, period, company.id, cost, max_cost, rating,
        )
        return rating

    async def get_rating(self, owner_id: UUID, today: Optional[date] = None) -> RatingOut:
        today = today or self.clock()
        rating = await self.calculate_user_rating(owner_id, today)
        period = previous_year_period(today)
        return RatingOut(owner_id=owner_id, period=PeriodOut(**period.model_dump()), rating=rating)
