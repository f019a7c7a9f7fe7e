"""Read interfaces the reporting engine depends on, plus an in-memory implementation.

The engine never talks to storage directly: company listings, quarterly
reports and activity field weights come from objects implementing the
protocols below. Failures of these calls are wrapped by the services as
``UpstreamFailureError``.
"""

from __future__ import annotations

import logging
from typing import Iterable, Protocol
from uuid import UUID

from bizdir.models.finance import ActivityField, Company, Period, QuarterlyReport

logger = logging.getLogger(__name__)


class CompanyReader(Protocol):
    """Lists companies owned by an entrepreneur."""

    async def list_by_owner(self, owner_id: UUID) -> list[Company]:  # pragma: no cover - protocol stub
        """Return the full (unpaginated) list of the owner's companies."""
        ...


class FinancialReportReader(Protocol):
    """Fetches one company's quarterly reports."""

    async def get_for_period(self, company_id: UUID, period: Period) -> list[QuarterlyReport]:  # pragma: no cover
        """Return reports inside ``period`` sorted by (year, quarter)."""
        ...


class ActivityFieldReader(Protocol):
    """Looks up industry cost weights."""

    async def get_cost_for_company(self, company_id: UUID) -> float:  # pragma: no cover - protocol stub
        ...

    async def get_max_cost(self) -> float:  # pragma: no cover - protocol stub
        ...


class InMemoryDirectory:
    """Dict-backed implementation of all three readers.

    Used by tests and for wiring the engine without a database.
    """

    def __init__(
        self,
        companies: Iterable[Company] = (),
        reports: Iterable[QuarterlyReport] = (),
        activity_fields: Iterable[ActivityField] = (),
    ) -> None:
        self._companies: dict[UUID, Company] = {}
        self._reports: dict[tuple[UUID, int, int], QuarterlyReport] = {}
        self._activity_fields: dict[UUID, ActivityField] = {}
        for company in companies:
            self.add_company(company)
        for report in reports:
            self.add_report(report)
        for activity_field in activity_fields:
            self.add_activity_field(activity_field)

    def add_company(self, company: Company) -> None:
        self._companies[company.id] = company

    def add_report(self, report: QuarterlyReport) -> None:
        """Store a report; a later report for the same quarter replaces the earlier one."""
        key = (report.company_id, report.year, report.quarter)
        if key in self._reports:
            logger.debug("Replacing report for company %s %sQ%s", *key)
        self._reports[key] = report

    def add_activity_field(self, activity_field: ActivityField) -> None:
        self._activity_fields[activity_field.id] = activity_field

    async def list_by_owner(self, owner_id: UUID) -> list[Company]:
        return [c for c in self._companies.values() if c.owner_id == owner_id]

    async def get_for_period(self, company_id: UUID, period: Period) -> list[QuarterlyReport]:
        # Walk the period quarter by quarter, skipping quarters with no report
        found = []
        for year, quarter in period.quarters():
            report = self._reports.get((company_id, year, quarter))
            if report is not None:
                found.append(report)
        return found

    async def get_cost_for_company(self, company_id: UUID) -> float:
        company = self._companies.get(company_id)
        if company is None:
            raise LookupError(f"Company {company_id} not found")
        activity_field = self._activity_fields.get(company.activity_field_id)
        if activity_field is None:
            raise LookupError(f"Activity field {company.activity_field_id} not found")
        return activity_field.cost

    async def get_max_cost(self) -> float:
        if not self._activity_fields:
            raise LookupError("No activity fields registered")
        return max(f.cost for f in self._activity_fields.values())
