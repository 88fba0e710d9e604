"""Pydantic domain models for the Budget Engine."""

from .constants import (
    BUCKET_TYPES,
    DEFAULT_CATEGORIES,
)  # re-export
from .money import Money
from .rates import FxRate
from .rules import (
    BucketPercentages,
    BudgetRuleSet,
    DEFAULT_BUDGET_RULES,
    LiabilityOriginPolicy,
)
from .inputs import Debt, Goal, IncomeSource
from .plan import (
    BudgetBucket,
    BudgetInsight,
    CategoryBudget,
    DebtAllocation,
    DebtSnapshot,
    GoalSnapshot,
    MonthlyBudgetPlan,
    SavingsAllocation,
)
from .transaction import Transaction, TransactionResult

__all__ = [
    "BUCKET_TYPES",
    "DEFAULT_CATEGORIES",
    "Money",
    "FxRate",
    "BucketPercentages",
    "BudgetRuleSet",
    "DEFAULT_BUDGET_RULES",
    "LiabilityOriginPolicy",
    "Debt",
    "Goal",
    "IncomeSource",
    "BudgetBucket",
    "BudgetInsight",
    "CategoryBudget",
    "DebtAllocation",
    "DebtSnapshot",
    "GoalSnapshot",
    "MonthlyBudgetPlan",
    "SavingsAllocation",
    "Transaction",
    "TransactionResult",
]
