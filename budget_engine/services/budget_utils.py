"""Budget status helpers.

Shared spent-vs-planned classification for buckets and categories, plus the
percent-used figure insight messages quote.
"""

from __future__ import annotations

from budget_engine.models.constants import NEAR_LIMIT_RATIO
from budget_engine.models.money import Money
from budget_engine.models.plan import BudgetBucket, CategoryBudget


def classify_status(spent: float, planned: float) -> str:
    # A zero budget is never "over": the ratio is undefined.
    if planned == 0:
        return "UNDER"
    ratio = spent / planned
    if ratio > 1:
        return "OVER"
    if ratio >= NEAR_LIMIT_RATIO:
        return "NEAR_LIMIT"
    return "UNDER"


def category_status(category: CategoryBudget) -> str:
    """Category rule: an unplanned category that has been spent into is OVER."""
    if category.planned == 0 and category.remaining < 0:
        return "OVER"
    return classify_status(category.spent, category.planned)


def percent_used(spent: float, planned: float) -> float:
    if planned <= 0:
        return 0.0
    return spent / planned * 100


def record_category_spend(category: CategoryBudget, amount: float) -> CategoryBudget:
    category.spent += amount
    category.remaining = category.planned - category.spent
    category.status = category_status(category)
    return category


def record_bucket_spend(bucket: BudgetBucket, amount: float) -> BudgetBucket:
    """Add a base-currency amount to the bucket totals and reclassify it."""
    currency = bucket.planned.currency
    spent = bucket.spent.base_amount + amount
    bucket.spent = Money.in_base(spent, currency)
    bucket.remaining = Money.in_base(bucket.planned.base_amount - spent, currency)
    bucket.status = classify_status(spent, bucket.planned.base_amount)
    return bucket
