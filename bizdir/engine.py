"""Engine wiring.

Builds the reporting and rating services on top of a set of read
collaborators, the way a caller (HTTP layer, worker) obtains them.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from bizdir.core.config import BaseAppSettings, settings
from bizdir.core.logger import init_logging
from bizdir.services.directory import ActivityFieldReader, CompanyReader, FinancialReportReader
from bizdir.services.financial_reporting import FinancialReportingService, RatingService

logger = logging.getLogger(__name__)


@dataclass
class Engine:
    reporting: FinancialReportingService
    rating: RatingService
    settings: BaseAppSettings


def create_engine(
    companies: CompanyReader,
    reports: FinancialReportReader,
    activity_fields: ActivityFieldReader,
    app_settings: Optional[BaseAppSettings] = None,
) -> Engine:
    app_settings = app_settings or settings
    init_logging(app_settings=app_settings)
    reporting = FinancialReportingService(companies, reports, app_settings)
    rating = RatingService(companies, reports, activity_fields, reporting=reporting, app_settings=app_settings)
    logger.info(
        "%s engine ready (env=%s, reconciliation=%s)",
        app_settings.APP_NAME, app_settings.ENV, app_settings.RECONCILIATION_STRATEGY,
    )
    return Engine(reporting=reporting, rating=rating, settings=app_settings)
