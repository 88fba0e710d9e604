from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field
from .constants import DebtStrategy, StrategyType


class BucketPercentages(BaseModel):
    """Share of total income per bucket, in percent (0-100).

    The four values conventionally sum to 100 but are not validated to.
    """

    needs: float = Field(50, ge=0, le=100)
    wants: float = Field(20, ge=0, le=100)
    savings: float = Field(15, ge=0, le=100)
    debt: float = Field(15, ge=0, le=100)

    def for_bucket(self, bucket: str) -> float:
        return getattr(self, bucket.lower())

    @property
    def total(self) -> float:
        return self.needs + self.wants + self.savings + self.debt


class LiabilityOriginPolicy(BaseModel):
    """Weights (fractions) splitting savings by where the money is meant to live."""

    model_config = ConfigDict(populate_by_name=True)

    home: float = Field(0.5, ge=0)
    local: float = Field(0.4, ge=0)
    global_: float = Field(0.1, ge=0, alias="global")


class BudgetRuleSet(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = "default"
    user_id: str | None = None
    strategy_type: StrategyType = "percentage"
    buckets: BucketPercentages = Field(default_factory=BucketPercentages)
    min_savings_percent: float = Field(10, ge=0, le=100)
    # Carried for rule-set parity; the debt floor is the sum of minimum payments.
    min_debt_percent: float = Field(5, ge=0, le=100)
    liability_origin_policy: LiabilityOriginPolicy = Field(
        default_factory=LiabilityOriginPolicy
    )
    emergency_fund_policy: int = Field(6, ge=0, description="Months of expenses")
    debt_strategy: DebtStrategy = "avalanche"


DEFAULT_BUDGET_RULES = BudgetRuleSet()
