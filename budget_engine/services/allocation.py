"""Bucket allocation.

Splits normalized monthly income into the NEEDS / WANTS / SAVINGS / DEBT
buckets under a rule set:

  1. planned_X = total_income * rules.buckets.X / 100
  2. floors: savings is raised to min_savings_percent of income, debt to the
     sum of minimum payments. Raising a floor does not shrink any other
     bucket; the shortfall is reported through the initial insights only.
  3. each bucket's planned amount is spread evenly over its category list.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Sequence

from budget_engine.models.constants import (
    BUCKET_TYPES,
    DEBT_INCOME_ALERT_RATIO,
    DEFAULT_CATEGORIES,
)
from budget_engine.models.inputs import Debt, IncomeSource
from budget_engine.models.money import Money
from budget_engine.models.plan import BudgetBucket, BudgetInsight, CategoryBudget
from budget_engine.models.rules import BudgetRuleSet
from budget_engine.services.insights import new_insight


@dataclass
class AllocationResult:
    total_income: float
    planned: Dict[str, float]
    savings_floor_met: bool
    debt_floor_raised: bool
    insights: List[BudgetInsight] = field(default_factory=list)


def total_active_income(incomes: Iterable[IncomeSource]) -> float:
    return sum(i.money.base_amount for i in incomes if i.is_active)


def allocate_buckets(
    total_income: float, rules: BudgetRuleSet, debts: Sequence[Debt] = ()
) -> AllocationResult:
    planned = {
        bucket: total_income * rules.buckets.for_bucket(bucket) / 100
        for bucket in BUCKET_TYPES
    }

    min_savings = total_income * rules.min_savings_percent / 100
    savings_floor_met = planned["SAVINGS"] >= min_savings
    if not savings_floor_met:
        planned["SAVINGS"] = min_savings

    min_debt = sum(d.min_monthly_payment.base_amount for d in debts)
    debt_floor_raised = planned["DEBT"] < min_debt
    if debt_floor_raised:
        planned["DEBT"] = min_debt

    insights: List[BudgetInsight] = []
    if not savings_floor_met:
        insights.append(
            new_insight(
                "warning",
                "Your savings allocation is below the recommended minimum of "
                f"{rules.min_savings_percent:g}%",
                bucket="SAVINGS",
            )
        )
    if planned["DEBT"] > total_income * DEBT_INCOME_ALERT_RATIO:
        insights.append(
            new_insight(
                "alert",
                "Debt payments exceed 40% of income. Consider debt consolidation.",
                bucket="DEBT",
            )
        )

    return AllocationResult(
        total_income=total_income,
        planned=planned,
        savings_floor_met=savings_floor_met,
        debt_floor_raised=debt_floor_raised,
        insights=insights,
    )


def build_bucket(
    bucket_type: str, planned: float, base_currency: str, category_names: Sequence[str]
) -> BudgetBucket:
    per_category = planned / len(category_names) if category_names else 0.0
    categories = {
        name: CategoryBudget(name=name, planned=per_category, remaining=per_category)
        for name in category_names
    }
    return BudgetBucket(
        type=bucket_type,
        planned=Money.in_base(planned, base_currency),
        spent=Money.in_base(0.0, base_currency),
        remaining=Money.in_base(planned, base_currency),
        categories=categories,
    )


def build_buckets(
    planned: Mapping[str, float],
    base_currency: str,
    categories: Mapping[str, Sequence[str]] = DEFAULT_CATEGORIES,
) -> Dict[str, BudgetBucket]:
    return {
        bucket: build_bucket(bucket, planned[bucket], base_currency, categories[bucket])
        for bucket in BUCKET_TYPES
    }
