from __future__ import annotations
from datetime import datetime, timezone
from typing import Dict, List, Optional
from pydantic import BaseModel, Field, computed_field
from .constants import BucketStatus, BucketType, InsightType
from .money import Money
from .rules import LiabilityOriginPolicy


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CategoryBudget(BaseModel):
    name: str
    planned: float
    spent: float = 0.0
    remaining: float
    status: BucketStatus = "UNDER"


class SavingsAllocation(BaseModel):
    local_emergency_fund: float
    home_country_investments: float
    global_investments: float


class DebtAllocation(BaseModel):
    base_currency_debt: float
    home_country_debt: float
    other_debt: float = 0.0


class BudgetBucket(BaseModel):
    type: BucketType
    planned: Money
    spent: Money
    remaining: Money
    status: BucketStatus = "UNDER"
    categories: Dict[str, CategoryBudget] = Field(default_factory=dict)


class BudgetInsight(BaseModel):
    id: str
    type: InsightType
    message: str
    bucket: Optional[BucketType] = None
    category: Optional[str] = None
    created_at: datetime = Field(default_factory=_utcnow)


class DebtSnapshot(BaseModel):
    debt_id: str
    name: str
    currency: str
    interest_rate_annual: float
    outstanding_principal: Money
    allocated_payment: Money
    is_minimum_payment: bool


class GoalSnapshot(BaseModel):
    goal_id: str
    name: str
    target_amount: Money
    current_amount: Money
    monthly_contribution: Money
    progress_percent: float


class MonthlyBudgetPlan(BaseModel):
    """Aggregate root: one plan per (user_id, month)."""

    id: str
    user_id: str
    month: str
    base_currency: str
    total_income: Money
    buckets: Dict[BucketType, BudgetBucket]
    debts_snapshot: List[DebtSnapshot] = Field(default_factory=list)
    goals_snapshot: List[GoalSnapshot] = Field(default_factory=list)
    insights: List[BudgetInsight] = Field(default_factory=list)
    liability_origin_policy: LiabilityOriginPolicy = Field(
        default_factory=LiabilityOriginPolicy
    )
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    # Sub-allocations are derived from the bucket totals and debt snapshots.
    @computed_field  # type: ignore[misc]
    @property
    def savings_allocation(self) -> SavingsAllocation:
        planned = self.buckets["SAVINGS"].planned.base_amount
        policy = self.liability_origin_policy
        return SavingsAllocation(
            local_emergency_fund=planned * policy.local,
            home_country_investments=planned * policy.home,
            global_investments=planned * policy.global_,
        )

    @computed_field  # type: ignore[misc]
    @property
    def debt_allocation(self) -> DebtAllocation:
        base_debt = 0.0
        home_debt = 0.0
        for snap in self.debts_snapshot:
            if snap.currency == self.base_currency:
                base_debt += snap.allocated_payment.base_amount
            else:
                home_debt += snap.allocated_payment.base_amount
        return DebtAllocation(base_currency_debt=base_debt, home_country_debt=home_debt)
