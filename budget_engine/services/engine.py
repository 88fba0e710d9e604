"""Budget engine entrypoints.

Wires the allocator, debt planner, goal projector, FX normalizer, transaction
applicator and insight generator around a PlanStore. Every mutation of one
(user_id, month) plan runs under that key's lock, so two transactions for the
same plan never lose each other's updates.

Validation happens before any state is touched; a rejected request writes
nothing.
"""

from __future__ import annotations

import logging
import re
import threading
import uuid
from datetime import date
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from budget_engine.core.config import Settings
from budget_engine.core.errors import BudgetValidationError
from budget_engine.db.dal import SqlitePlanStore
from budget_engine.db.memory import MemoryPlanStore
from budget_engine.db.store import PlanStore
from budget_engine.models.constants import BUCKET_TYPES, DEFAULT_CATEGORIES, MONTH_PATTERN
from budget_engine.models.inputs import Debt, Goal, IncomeSource
from budget_engine.models.money import Money
from budget_engine.models.plan import BudgetInsight, MonthlyBudgetPlan
from budget_engine.models.rates import FxRate
from budget_engine.models.rules import DEFAULT_BUDGET_RULES, BudgetRuleSet
from budget_engine.models.transaction import Transaction, TransactionResult
from budget_engine.services.allocation import (
    allocate_buckets,
    build_buckets,
    total_active_income,
)
from budget_engine.services.debt_planner import plan_debt_payments
from budget_engine.services.goals import project_goals
from budget_engine.services.insights import generate_insights
from budget_engine.services.rates.cache_service import FxRateCache
from budget_engine.services.rates.conversion import create_money
from budget_engine.services.rates.providers import make_rate_source
from budget_engine.services.transactions import apply_transaction, build_transaction

logger = logging.getLogger("budget_engine.engine")

_MONTH_RE = re.compile(MONTH_PATTERN)


def validate_month(month: str) -> str:
    if not isinstance(month, str) or not _MONTH_RE.match(month):
        raise BudgetValidationError("month must be in YYYY-MM format")
    if not 1 <= int(month[5:7]) <= 12:
        raise BudgetValidationError("month must be in YYYY-MM format")
    return month


def _require(value: Optional[str], name: str) -> str:
    if value is None or not str(value).strip():
        raise BudgetValidationError(f"{name} is required")
    return str(value).strip()


def _currency(value: Optional[str], name: str = "currency") -> str:
    return _require(value, name).upper()


class BudgetEngine:
    def __init__(
        self,
        store: PlanStore,
        rates: FxRateCache,
        categories: Mapping[str, Sequence[str]] = DEFAULT_CATEGORIES,
        default_rules: BudgetRuleSet = DEFAULT_BUDGET_RULES,
        default_base_currency: Optional[str] = None,
    ):
        self.store = store
        self.rates = rates
        self._categories = categories
        self._default_rules = default_rules
        self._default_base_currency = default_base_currency
        self._plan_locks: Dict[Tuple[str, str], threading.Lock] = {}
        self._guard = threading.Lock()

    # Internal --------------------------------------------------
    def _lock_for(self, user_id: str, month: str) -> threading.Lock:
        # One lock per (user_id, month) ever touched; entries are never evicted,
        # so memory grows with the number of distinct plans seen by this process.
        with self._guard:
            key = (user_id, month)
            lock = self._plan_locks.get(key)
            if lock is None:
                lock = self._plan_locks[key] = threading.Lock()
            return lock

    def _build_plan(
        self,
        user_id: str,
        month: str,
        base_currency: str,
        incomes: Sequence[IncomeSource],
        debts: Sequence[Debt],
        goals: Sequence[Goal],
        rules: BudgetRuleSet,
        today: Optional[date],
    ) -> MonthlyBudgetPlan:
        income = total_active_income(incomes)
        allocation = allocate_buckets(income, rules, debts)
        debt_snapshots = plan_debt_payments(
            debts, allocation.planned["DEBT"], rules.debt_strategy, base_currency
        )
        return MonthlyBudgetPlan(
            id=str(uuid.uuid4()),
            user_id=user_id,
            month=month,
            base_currency=base_currency,
            total_income=self.create_money(income, base_currency, base_currency),
            buckets=build_buckets(allocation.planned, base_currency, self._categories),
            debts_snapshot=debt_snapshots,
            goals_snapshot=project_goals(goals, base_currency, today),
            insights=allocation.insights,
            liability_origin_policy=rules.liability_origin_policy,
        )

    # Normalization ----------------------------------------------
    def create_money(self, amount: float, currency: str, base_currency: str) -> Money:
        return create_money(
            amount, _currency(currency), _currency(base_currency, "base_currency"), self.rates
        )

    def cached_rates(self) -> List[FxRate]:
        return self.rates.snapshot()

    # Planning ---------------------------------------------------
    def validate_plan_request(
        self, user_id: str, month: str, base_currency: str
    ) -> Tuple[str, str, str]:
        """Check plan identifiers before any input is normalized through the FX cache."""
        return (
            _require(user_id, "user_id"),
            validate_month(month),
            _currency(base_currency, "base_currency"),
        )

    def generate_plan(
        self,
        user_id: str,
        month: str,
        base_currency: str,
        incomes: Sequence[IncomeSource] = (),
        debts: Sequence[Debt] = (),
        goals: Sequence[Goal] = (),
        rules: Optional[BudgetRuleSet] = None,
        today: Optional[date] = None,
    ) -> MonthlyBudgetPlan:
        """Build and store the plan for (user_id, month), replacing any prior one."""
        user_id, month, base_currency = self.validate_plan_request(
            user_id, month, base_currency
        )
        rules = rules or self._default_rules

        with self._lock_for(user_id, month):
            plan = self._build_plan(
                user_id, month, base_currency, incomes, debts, goals, rules, today
            )
            self.store.save_plan(plan)
        logger.info(
            "plan generated",
            extra={"user_id": user_id, "month": month},
        )
        return plan

    # Transactions -----------------------------------------------
    def log_transaction(
        self,
        user_id: str,
        month: str,
        amount: float,
        currency: str,
        category: str,
        bucket: str,
        description: str = "",
        date: Optional[date] = None,
        tags: Optional[Sequence[str]] = None,
        base_currency: Optional[str] = None,
    ) -> TransactionResult:
        user_id = _require(user_id, "user_id")
        validate_month(month)
        currency = _currency(currency)
        category = _require(category, "category")
        if bucket not in BUCKET_TYPES:
            raise BudgetValidationError(
                f"bucket must be one of: {', '.join(BUCKET_TYPES)}"
            )
        when = date or _today()

        with self._lock_for(user_id, month):
            plan = self.store.get_plan(user_id, month)
            if plan is None:
                base = _currency(
                    base_currency or self._default_base_currency or currency,
                    "base_currency",
                )
                logger.info(
                    "no plan for month, synthesizing empty plan",
                    extra={"user_id": user_id, "month": month},
                )
                plan = self._build_plan(
                    user_id, month, base, (), (), (), self._default_rules, None
                )

            money = self.create_money(amount, currency, plan.base_currency)
            transaction = build_transaction(
                plan, money, category, bucket, description, when, tags or ()
            )
            new_insights = apply_transaction(plan, transaction)
            self.store.save_transaction(transaction)
            self.store.save_plan(plan)

        logger.debug(
            "transaction applied, %d new insights",
            len(new_insights),
            extra={"user_id": user_id, "month": month, "bucket": bucket},
        )
        return TransactionResult(
            transaction=transaction, updated_plan=plan, insights=new_insights
        )

    # Retrieval --------------------------------------------------
    def get_plan(self, user_id: str, month: str) -> Optional[MonthlyBudgetPlan]:
        return self.store.get_plan(_require(user_id, "user_id"), validate_month(month))

    def list_user_plans(self, user_id: str) -> List[MonthlyBudgetPlan]:
        return self.store.list_plans(_require(user_id, "user_id"))

    def get_insights(self, user_id: str, month: str) -> List[BudgetInsight]:
        plan = self.get_plan(user_id, month)
        return plan.insights if plan else []

    def list_transactions(self, user_id: str, month: str) -> List[Transaction]:
        plan = self.get_plan(user_id, month)
        return self.store.list_transactions(plan.id) if plan else []

    def regenerate_insights(
        self, user_id: str, month: str, today: Optional[date] = None
    ) -> Optional[List[BudgetInsight]]:
        """Fresh full-scan insights for display; the stored plan is untouched."""
        plan = self.get_plan(user_id, month)
        if plan is None:
            return None
        return generate_insights(plan, today)


def _today() -> date:
    return date.today()


def build_engine(settings: Settings) -> BudgetEngine:
    if settings.storage_backend == "sqlite":
        store: PlanStore = SqlitePlanStore(settings.db_path)  # type: ignore[arg-type]
    else:
        store = MemoryPlanStore()
    source = make_rate_source(settings.exchange_rate_provider, settings)
    rates = FxRateCache(source, ttl_seconds=settings.rates_cache_ttl_seconds)
    return BudgetEngine(
        store, rates, default_base_currency=settings.default_base_currency
    )
