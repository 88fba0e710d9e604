from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

import pytest

from budget_engine.db.memory import MemoryPlanStore
from budget_engine.models import Debt, Goal, IncomeSource, Money
from budget_engine.services.engine import BudgetEngine
from budget_engine.services.rates.cache_service import FxRateCache


class FakeRateSource:
    """Rate source answering from a dict; records every outbound lookup."""

    def __init__(self, rates: Optional[Dict[str, float]] = None, available: bool = True):
        self.rates = rates or {}
        self.available = available
        self.calls: List[Tuple[str, str]] = []

    def lookup_live_rate(self, from_currency: str, to_currency: str) -> Optional[float]:
        self.calls.append((from_currency, to_currency))
        if not self.available:
            return None
        return self.rates.get(f"{from_currency}_{to_currency}")


class FakeClock:
    def __init__(self, start: Optional[datetime] = None):
        self.now = start or datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def aed(amount: float) -> Money:
    return Money.in_base(amount, "AED")


def income(amount: float, id: str = "salary", active: bool = True) -> IncomeSource:
    return IncomeSource(id=id, name=id, money=aed(amount), is_active=active)


def debt(
    id: str,
    principal: float,
    rate: float,
    minimum: float,
    currency: str = "AED",
) -> Debt:
    return Debt(
        id=id,
        name=id,
        currency=currency,
        outstanding_principal=aed(principal),
        interest_rate_annual=rate,
        min_monthly_payment=aed(minimum),
    )


def goal(id: str, target: float, current: float, target_date) -> Goal:
    return Goal(
        id=id,
        name=id,
        target_amount=aed(target),
        current_amount=aed(current),
        target_date=target_date,
    )


@pytest.fixture
def rate_source() -> FakeRateSource:
    return FakeRateSource({"USD_AED": 3.6725, "AED_USD": 0.2723})


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def rate_cache(rate_source, clock) -> FxRateCache:
    return FxRateCache(rate_source, ttl_seconds=3600, clock=clock)


@pytest.fixture
def store() -> MemoryPlanStore:
    return MemoryPlanStore()


@pytest.fixture
def engine(store, rate_cache) -> BudgetEngine:
    return BudgetEngine(store, rate_cache)
