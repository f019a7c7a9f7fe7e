from decimal import Decimal
from uuid import uuid4

import pytest

from bizdir.models.finance import Period, QuarterlyReport
from bizdir.services.directory import InMemoryDirectory


@pytest.mark.asyncio
async def test_reports_are_returned_in_quarter_order(directory, company_factory, add_reports):
    company = company_factory()
    add_reports(company, 2023, quarters=(4, 1, 3))
    add_reports(company, 2022, quarters=(4,))

    period = Period(start_year=2022, start_quarter=4, end_year=2023, end_quarter=3)
    reports = await directory.get_for_period(company.id, period)

    assert [(r.year, r.quarter) for r in reports] == [(2022, 4), (2023, 1), (2023, 3)]


@pytest.mark.asyncio
async def test_later_report_replaces_earlier_one():
    company_id = uuid4()
    directory = InMemoryDirectory()
    for revenue in ("1", "2"):
        directory.add_report(
            QuarterlyReport(company_id=company_id, revenue=Decimal(revenue), costs=Decimal("0"), year=2023, quarter=1)
        )

    reports = await directory.get_for_period(company_id, Period.full_year(2023))
    assert [r.revenue for r in reports] == [Decimal("2")]


@pytest.mark.asyncio
async def test_activity_field_costs(directory, company_factory, activity_fields):
    company = company_factory(activity_field=activity_fields.light)
    assert await directory.get_cost_for_company(company.id) == 0.5
    assert await directory.get_max_cost() == 2.0


@pytest.mark.asyncio
async def test_unknown_company_cost_raises():
    with pytest.raises(LookupError):
        await InMemoryDirectory().get_cost_for_company(uuid4())


@pytest.mark.asyncio
async def test_max_cost_without_fields_raises():
    with pytest.raises(LookupError):
        await InMemoryDirectory().get_max_cost()
