"""Insight generation.

Two paths produce BudgetInsight records:

  - incremental: `transaction_insights` runs after a single transaction has
    been applied and looks only at the touched bucket/category. Its results
    are appended to the plan's stored insight log (append-only, no dedup).
  - full rescan: `generate_insights` re-derives every advisory from a whole
    plan for on-demand display. It never mutates the plan.

Insight schema (BudgetInsight):
  type: 'warning' | 'alert' | 'info' | 'success'
  bucket / category: optional scope
  message: human readable string
"""

from __future__ import annotations

import calendar
import uuid
from datetime import date
from typing import List, Optional

from budget_engine.models.plan import BudgetBucket, BudgetInsight, MonthlyBudgetPlan
from budget_engine.services.budget_utils import classify_status, percent_used
from budget_engine.services.money import round2, round_whole

SAVINGS_PACE_RATIO = 0.5
GOAL_REACHED_PERCENT = 100
GOAL_ALMOST_PERCENT = 75


def new_insight(
    kind: str,
    message: str,
    bucket: Optional[str] = None,
    category: Optional[str] = None,
) -> BudgetInsight:
    return BudgetInsight(
        id=str(uuid.uuid4()),
        type=kind,
        message=message,
        bucket=bucket,
        category=category,
    )


def transaction_insights(
    bucket: BudgetBucket, category: str, base_currency: str
) -> List[BudgetInsight]:
    insights: List[BudgetInsight] = []
    spent = bucket.spent.base_amount
    planned = bucket.planned.base_amount

    if bucket.status == "NEAR_LIMIT":
        insights.append(
            new_insight(
                "warning",
                f"You're approaching your {bucket.type} budget limit "
                f"({round_whole(percent_used(spent, planned))}% used)",
                bucket=bucket.type,
            )
        )
    elif bucket.status == "OVER":
        insights.append(
            new_insight(
                "alert",
                f"You've exceeded your {bucket.type} budget by "
                f"{round_whole(spent - planned)} {base_currency}",
                bucket=bucket.type,
            )
        )

    cat = bucket.categories.get(category)
    if cat is not None and cat.status == "OVER":
        insights.append(
            new_insight(
                "alert",
                f"Over budget in {category}",
                bucket=bucket.type,
                category=category,
            )
        )
    return insights


def _past_month_midpoint(month: str, today: date) -> bool:
    year, mon = (int(part) for part in month.split("-"))
    days_in_month = calendar.monthrange(year, mon)[1]
    return today.day > days_in_month / 2


def generate_insights(
    plan: MonthlyBudgetPlan, today: date | None = None
) -> List[BudgetInsight]:
    today = today or date.today()
    insights: List[BudgetInsight] = []

    for bucket_type, bucket in plan.buckets.items():
        spent = bucket.spent.base_amount
        planned = bucket.planned.base_amount
        pct = percent_used(spent, planned)
        status = classify_status(spent, planned)
        if status == "OVER":
            insights.append(
                new_insight(
                    "alert",
                    f"{bucket_type} budget exceeded by {pct - 100:.1f}%",
                    bucket=bucket_type,
                )
            )
        elif status == "NEAR_LIMIT":
            insights.append(
                new_insight(
                    "warning",
                    f"{bucket_type} budget is {pct:.1f}% used. Consider reducing spending.",
                    bucket=bucket_type,
                )
            )

        for name, cat in bucket.categories.items():
            if cat.status == "OVER":
                insights.append(
                    new_insight(
                        "alert",
                        f"Over budget in {name} by {round2(abs(cat.remaining)):.2f} {plan.base_currency}",
                        bucket=bucket_type,
                        category=name,
                    )
                )

    # Savings pace: still under half the savings target past mid-month
    savings = plan.buckets["SAVINGS"]
    if savings.spent.base_amount < savings.planned.base_amount * SAVINGS_PACE_RATIO:
        if _past_month_midpoint(plan.month, today):
            insights.append(
                new_insight(
                    "info",
                    "You're on track with savings. Keep it up!",
                    bucket="SAVINGS",
                )
            )

    for goal in plan.goals_snapshot:
        if goal.progress_percent >= GOAL_REACHED_PERCENT:
            insights.append(
                new_insight("success", f"You've reached your goal: {goal.name}!")
            )
        elif goal.progress_percent >= GOAL_ALMOST_PERCENT:
            insights.append(
                new_insight(
                    "info",
                    f"Almost there! {goal.name} is {goal.progress_percent:.1f}% complete.",
                )
            )

    return insights


__all__ = ["new_insight", "transaction_insights", "generate_insights"]
