from __future__ import annotations

import asyncio
import os

os.environ.setdefault("APP_ENV", "test")

from decimal import Decimal  # noqa: E402
from types import SimpleNamespace  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402

from bizdir.core.config import TestSettings  # noqa: E402
from bizdir.models.finance import ActivityField, Company, QuarterlyReport  # noqa: E402
from bizdir.services.directory import InMemoryDirectory  # noqa: E402


def make_reports(company_id, year, quarters=(1, 2, 3, 4), revenue="1000000", costs="200000"):
    """Build one report per quarter of ``year`` with identical figures."""
    return [
        QuarterlyReport(
            company_id=company_id,
            revenue=Decimal(str(revenue)),
            costs=Decimal(str(costs)),
            year=year,
            quarter=quarter,
        )
        for quarter in quarters
    ]


class FlakyDirectory(InMemoryDirectory):
    """In-memory directory whose lookups can be made to fail.

    ``fail`` maps a lookup name ("list_by_owner", "get_for_period",
    "get_cost_for_company", "get_max_cost") to the id it should fail for,
    or to None to fail for every call.

    With ``stall_fetches`` set, report fetches that are not meant to fail
    block until cancelled; failing fetches yield once before raising so the
    others are already in flight. ``started`` and ``cancelled`` record the
    company ids of stalled fetches.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fail: dict[str, object] = {}
        self.calls: list[tuple[str, object]] = []
        self.stall_fetches = False
        self.started: list[object] = []
        self.cancelled: list[object] = []

    def _should_fail(self, name, key=None):
        return name in self.fail and self.fail[name] in (None, key)

    def _maybe_fail(self, name, key=None):
        self.calls.append((name, key))
        if self._should_fail(name, key):
            raise ConnectionError(f"{name} unavailable")

    async def list_by_owner(self, owner_id):
        self._maybe_fail("list_by_owner", owner_id)
        return await super().list_by_owner(owner_id)

    async def _stall(self, name, key):
        self.started.append(key)
        if self._should_fail(name, key):
            await asyncio.sleep(0)
            return
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            self.cancelled.append(key)
            raise

    async def get_for_period(self, company_id, period):
        if self.stall_fetches:
            await self._stall("get_for_period", company_id)
        self._maybe_fail("get_for_period", company_id)
        return await super().get_for_period(company_id, period)

    async def get_cost_for_company(self, company_id):
        self._maybe_fail("get_cost_for_company", company_id)
        return await super().get_cost_for_company(company_id)

    async def get_max_cost(self):
        self._maybe_fail("get_max_cost")
        return await super().get_max_cost()


@pytest.fixture
def test_settings():
    """Settings factory; keyword arguments override TestSettings fields."""
    def _create(**overrides):
        return TestSettings(**overrides)
    return _create


@pytest.fixture
def build_reports():
    return make_reports


@pytest.fixture
def directory():
    return FlakyDirectory()


@pytest.fixture
def owner_id():
    return uuid4()


@pytest.fixture
def activity_fields(directory):
    """Two industries: a heavy one (weight 2.0) and a light one (weight 0.5)."""
    heavy = ActivityField(name="Oil and gas", description="Extraction", cost=2.0)
    light = ActivityField(name="Retail", description="Shops", cost=0.5)
    directory.add_activity_field(heavy)
    directory.add_activity_field(light)
    return SimpleNamespace(heavy=heavy, light=light)


@pytest.fixture
def company_factory(directory, owner_id, activity_fields):
    """Register a company for ``owner_id`` (heavy industry by default)."""
    def _create(name="Acme", activity_field=None, owner=None):
        company = Company(
            owner_id=owner or owner_id,
            activity_field_id=(activity_field or activity_fields.heavy).id,
            name=name,
            city="Moscow",
        )
        directory.add_company(company)
        return company
    return _create


@pytest.fixture
def add_reports(directory):
    """Register reports built by ``make_reports`` and return them."""
    def _add(company, year, quarters=(1, 2, 3, 4), revenue="1000000", costs="200000"):
        reports = make_reports(company.id, year, quarters, revenue, costs)
        for report in reports:
            directory.add_report(report)
        return reports
    return _add
