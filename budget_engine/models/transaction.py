from __future__ import annotations
import datetime as dt
from typing import List
from pydantic import BaseModel, ConfigDict, Field
from .constants import BucketType, TransactionType
from .money import Money
from .plan import BudgetInsight, MonthlyBudgetPlan


class Transaction(BaseModel):
    """A logged spend (or refund/income) against one plan. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str
    user_id: str
    budget_plan_id: str
    type: TransactionType
    money: Money
    category: str
    bucket: BucketType
    description: str = ""
    date: dt.date
    is_recurring: bool = False
    tags: List[str] = Field(default_factory=list)
    created_at: dt.datetime
    updated_at: dt.datetime


class TransactionResult(BaseModel):
    transaction: Transaction
    updated_plan: MonthlyBudgetPlan
    insights: List[BudgetInsight]
