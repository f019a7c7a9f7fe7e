"""Year-window reconciliation.

Groups one company's quarterly reports over a period into calendar-year
windows. Only windows holding all four quarters of a year are taxed; the
rest still count toward the flat revenue/cost totals of the aggregate.

Two strategies are available:

- ``sequential``: a single forward cursor over the (sorted) reports. For each
  year of the period it consumes as many reports as the year's quarter span,
  without looking at the reports' own year/quarter. A quarter missing in the
  middle of the period shifts the following reports into the wrong year.
- ``keyed``: each report goes into the window of its own ``year``. Reports
  outside the period, for another company, or repeating a quarter are skipped.

Both agree on gapless sorted input.
"""
from __future__ import annotations

import logging
from typing import Optional, Sequence
from uuid import UUID

from bizdir.core.config import settings
from bizdir.models.finance import Period, QuarterlyReport, YearWindow

logger = logging.getLogger(__name__)


def _empty_windows(company_id: UUID, period: Period) -> dict[int, YearWindow]:
    return {
        year: YearWindow(company_id=company_id, year=year, start_quarter=start_qtr, end_quarter=end_qtr)
        for year, start_qtr, end_qtr in period.quarter_spans()
    }


def reconcile_sequential(
    company_id: UUID,
    reports: Sequence[QuarterlyReport],
    period: Period,
) -> dict[int, YearWindow]:
    windows = _empty_windows(company_id, period)
    cursor = 0
    for window in windows.values():
        for _ in range(window.start_quarter, window.end_quarter + 1):
            if cursor >= len(reports):
                break
            window.reports.append(reports[cursor])
            cursor += 1

    if cursor < len(reports):
        logger.warning(
            "Company %s: %d report(s) left over after reconciling %s",
            company_id, len(reports) - cursor, period,
        )
    return windows


def reconcile_keyed(
    company_id: UUID,
    reports: Sequence[QuarterlyReport],
    period: Period,
) -> dict[int, YearWindow]:
    windows = _empty_windows(company_id, period)
    seen: set[tuple[int, int]] = set()
    for report in reports:
        if report.company_id != company_id:
            logger.warning("Skipping report %s of company %s while reconciling company %s",
                           report.id, report.company_id, company_id)
            continue
        if not period.contains(report.year, report.quarter):
            logger.warning("Skipping report %s for %sQ%s outside %s",
                           report.id, report.year, report.quarter, period)
            continue
        key = (report.year, report.quarter)
        if key in seen:
            logger.warning("Skipping duplicate report %s for %sQ%s", report.id, *key)
            continue
        seen.add(key)
        windows[report.year].reports.append(report)

    for window in windows.values():
        window.reports.sort(key=lambda r: r.quarter)
    return windows


_STRATEGIES = {
    "sequential": reconcile_sequential,
    "keyed": reconcile_keyed,
}


def reconcile_year_windows(
    company_id: UUID,
    reports: Sequence[QuarterlyReport],
    period: Period,
    strategy: Optional[str] = None,
) -> dict[int, YearWindow]:
    """Build one window per year of ``period``, in ascending year order.

    Args:
        company_id: Company the reports belong to
        reports: The company's reports for ``period``, sorted by (year, quarter)
        period: A valid period
        strategy: 'keyed' or 'sequential'; defaults to settings.RECONCILIATION_STRATEGY

    Raises:
        ValueError: If the strategy is unknown
    """
    name = (strategy or settings.RECONCILIATION_STRATEGY).lower()
    try:
        reconcile = _STRATEGIES[name]
    except KeyError:
        raise ValueError(f"Invalid reconciliation strategy: {name}. Must be keyed/sequential") from None
    return reconcile(company_id, reports, period)


def full_year_windows(windows: dict[int, YearWindow]) -> list[YearWindow]:
    """Windows eligible for taxation: all four quarters of the year present."""
    return [w for w in windows.values() if w.is_full_year]
