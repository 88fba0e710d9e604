from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from typing import List, Sequence

from budget_engine.models.money import Money
from budget_engine.models.plan import BudgetInsight, CategoryBudget, MonthlyBudgetPlan
from budget_engine.models.transaction import Transaction
from budget_engine.services.budget_utils import record_bucket_spend, record_category_spend
from budget_engine.services.insights import transaction_insights

"""Apply one normalized transaction to a plan.

The plan is mutated in place: bucket and category spent/remaining/status are
updated, new insights are appended to the plan's log and updated_at is bumped.
Persisting the plan and the transaction is the caller's job.
"""


def infer_transaction_type(amount: float) -> str:
    return "income" if amount < 0 else "expense"


def build_transaction(
    plan: MonthlyBudgetPlan,
    money: Money,
    category: str,
    bucket: str,
    description: str,
    when: date,
    tags: Sequence[str],
) -> Transaction:
    now = datetime.now(timezone.utc)
    return Transaction(
        id=str(uuid.uuid4()),
        user_id=plan.user_id,
        budget_plan_id=plan.id,
        type=infer_transaction_type(money.amount),
        money=money,
        category=category,
        bucket=bucket,
        description=description,
        date=when,
        tags=list(tags),
        created_at=now,
        updated_at=now,
    )


def apply_transaction(
    plan: MonthlyBudgetPlan, transaction: Transaction
) -> List[BudgetInsight]:
    """Return only the insights triggered by this transaction."""
    amount = transaction.money.base_amount
    bucket = plan.buckets[transaction.bucket]
    record_bucket_spend(bucket, amount)

    category = bucket.categories.get(transaction.category)
    if category is None:
        # Unplanned category: starts at zero and is OVER once spent into
        category = bucket.categories[transaction.category] = CategoryBudget(
            name=transaction.category, planned=0.0, remaining=0.0
        )
    record_category_spend(category, amount)

    new_insights = transaction_insights(bucket, transaction.category, plan.base_currency)
    plan.insights.extend(new_insights)
    plan.updated_at = datetime.now(timezone.utc)
    return new_insights
