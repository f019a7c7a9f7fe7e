"""Metrics facade.

Service code should ONLY call the semantic helpers here so the backend can change freely.

Metrics:
- financial_reports_generated_total   Owner-level aggregates produced
- financial_report_companies          Companies folded into one aggregate
- financial_report_taxed_years_total  Full-year windows that were taxed
- ratings_calculated_total            Ratings computed, by outcome (rated/no_company)
- upstream_failures_total             Collaborator failures, by entity
- aggregation_latency_seconds         Wall time of one owner-level aggregation
"""

from __future__ import annotations

import logging

from prometheus_client import Counter, Histogram

logger = logging.getLogger("metrics")

_REPORTS_GENERATED = Counter(
    "financial_reports_generated_total", "Owner-level financial aggregates produced"
)
_REPORT_COMPANIES = Histogram(
    "financial_report_companies",
    "Companies folded into one owner-level aggregate",
    buckets=(0, 1, 2, 3, 5, 10, 25, 50, 100),
)
_TAXED_YEARS = Counter(
    "financial_report_taxed_years_total", "Complete year windows that were taxed"
)
_RATINGS = Counter(
    "ratings_calculated_total", "Entrepreneur ratings computed", ["outcome"]
)
_UPSTREAM_FAILURES = Counter(
    "upstream_failures_total", "Read collaborator failures", ["entity"]
)
_AGGREGATION_LATENCY = Histogram(
    "aggregation_latency_seconds",
    "Latency of one owner-level aggregation",
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10),
)


def financial_report_generated(companies: int, taxed_years: int, latency_seconds: float | None = None):
    _REPORTS_GENERATED.inc()
    _REPORT_COMPANIES.observe(companies)
    if taxed_years:
        _TAXED_YEARS.inc(taxed_years)
    if latency_seconds is not None:
        _AGGREGATION_LATENCY.observe(latency_seconds)
    logger.debug("metric financial_reports_generated_total += 1 (companies=%s)", companies)


def rating_calculated(outcome: str):
    _RATINGS.labels(outcome=outcome).inc()


def upstream_failure(entity: str):
    _UPSTREAM_FAILURES.labels(entity=entity).inc()
