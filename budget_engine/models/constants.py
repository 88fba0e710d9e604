"""Domain constants and enumerations for validation.

Literal aliases are used by the pydantic models; the tuples/dicts serve the
engine's runtime checks and category configuration.
"""

from typing import Dict, List, Literal, Tuple

BucketType = Literal["NEEDS", "WANTS", "SAVINGS", "DEBT"]
BucketStatus = Literal["UNDER", "NEAR_LIMIT", "OVER"]
InsightType = Literal["warning", "alert", "info", "success"]
TransactionType = Literal["expense", "income", "transfer"]
DebtStrategy = Literal["snowball", "avalanche"]
StrategyType = Literal["percentage", "zero-based", "custom"]
IncomeType = Literal["salary", "freelance", "passive"]
Recurrence = Literal["monthly", "weekly", "one-time"]
GoalType = Literal[
    "emergency", "marriage", "retirement", "education", "large_purchase", "other"
]

BUCKET_TYPES: Tuple[str, ...] = ("NEEDS", "WANTS", "SAVINGS", "DEBT")

# Status thresholds (fraction of planned)
NEAR_LIMIT_RATIO = 0.8
DEBT_INCOME_ALERT_RATIO = 0.4

# Fixed category lists per bucket; planned amounts are split evenly across them.
DEFAULT_CATEGORIES: Dict[str, List[str]] = {
    "NEEDS": ["rent", "utilities", "groceries", "transport", "insurance", "healthcare"],
    "WANTS": [
        "dining_out",
        "entertainment",
        "shopping",
        "subscriptions",
        "hobbies",
        "travel",
    ],
    "SAVINGS": ["emergency_fund", "investments", "retirement", "goals"],
    "DEBT": ["credit_card", "home_loan", "personal_loan", "car_loan", "other_debt"],
}

MONTH_PATTERN = r"^\d{4}-\d{2}$"
