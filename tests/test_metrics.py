from datetime import date

import pytest
from prometheus_client import REGISTRY

from bizdir.models.finance import Period
from bizdir.services.financial_reporting import FinancialReportingService, RatingService


def _sample(name, **labels):
    return REGISTRY.get_sample_value(name, labels or None) or 0.0


@pytest.mark.asyncio
async def test_report_metrics_are_recorded(directory, test_settings, company_factory, add_reports, owner_id):
    company = company_factory()
    add_reports(company, 2023)
    service = FinancialReportingService(directory, directory, test_settings())

    generated = _sample("financial_reports_generated_total")
    taxed = _sample("financial_report_taxed_years_total")
    latency_count = _sample("aggregation_latency_seconds_count")

    await service.get_user_financial_report(owner_id, Period.full_year(2023))

    assert _sample("financial_reports_generated_total") == generated + 1
    assert _sample("financial_report_taxed_years_total") == taxed + 1
    assert _sample("aggregation_latency_seconds_count") == latency_count + 1


@pytest.mark.asyncio
async def test_rating_outcomes_are_counted(directory, test_settings, company_factory, add_reports, owner_id):
    service = RatingService(directory, directory, directory, app_settings=test_settings())
    today = date(2024, 1, 1)

    no_company = _sample("ratings_calculated_total", outcome="no_company")
    await service.calculate_user_rating(owner_id, today)
    assert _sample("ratings_calculated_total", outcome="no_company") == no_company + 1

    company = company_factory()
    add_reports(company, 2023)
    rated = _sample("ratings_calculated_total", outcome="rated")
    await service.calculate_user_rating(owner_id, today)
    assert _sample("ratings_calculated_total", outcome="rated") == rated + 1


@pytest.mark.asyncio
async def test_upstream_failures_are_counted(directory, test_settings, owner_id):
    from bizdir.core.exceptions import UpstreamFailureError

    service = FinancialReportingService(directory, directory, test_settings())
    directory.fail["list_by_owner"] = None
    before = _sample("upstream_failures_total", entity="company_list")

    with pytest.raises(UpstreamFailureError):
        await service.get_user_financial_report(owner_id, Period.full_year(2023))

    assert _sample("upstream_failures_total", entity="company_list") == before + 1
