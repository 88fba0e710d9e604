"""Per-request planning inputs: income sources, debts and goals.

These are supplied by the caller on every plan request and are not persisted
by the engine.
"""

from __future__ import annotations
from datetime import date
from typing import Optional
from pydantic import BaseModel, Field, field_validator
from .constants import GoalType, IncomeType, Recurrence
from .money import Money


class IncomeSource(BaseModel):
    id: str
    name: str = ""
    type: IncomeType = "salary"
    money: Money
    recurrence: Recurrence = "monthly"
    is_active: bool = True


class Debt(BaseModel):
    id: str
    name: str = ""
    currency: str
    outstanding_principal: Money
    interest_rate_annual: float = Field(..., ge=0)
    min_monthly_payment: Money
    country: str = ""
    priority: Optional[int] = None

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.strip().upper()


class Goal(BaseModel):
    id: str
    name: str = ""
    type: GoalType = "other"
    target_amount: Money
    current_amount: Money
    target_date: date
    country: str = ""
