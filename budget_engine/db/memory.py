from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from budget_engine.models.plan import MonthlyBudgetPlan
from budget_engine.models.transaction import Transaction
from .store import PlanStore


class MemoryPlanStore(PlanStore):
    """In-process store; state is lost when the process exits."""

    def __init__(self) -> None:
        self._plans: Dict[Tuple[str, str], MonthlyBudgetPlan] = {}
        self._transactions: Dict[str, Transaction] = {}

    def get_plan(self, user_id: str, month: str) -> Optional[MonthlyBudgetPlan]:
        plan = self._plans.get((user_id, month))
        return plan.model_copy(deep=True) if plan else None

    def save_plan(self, plan: MonthlyBudgetPlan) -> None:
        self._plans[(plan.user_id, plan.month)] = plan.model_copy(deep=True)

    def list_plans(self, user_id: str) -> List[MonthlyBudgetPlan]:
        return [
            plan.model_copy(deep=True)
            for (uid, _), plan in sorted(self._plans.items())
            if uid == user_id
        ]

    def save_transaction(self, transaction: Transaction) -> None:
        self._transactions[transaction.id] = transaction

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        return self._transactions.get(transaction_id)

    def list_transactions(self, budget_plan_id: str) -> List[Transaction]:
        return [
            t for t in self._transactions.values() if t.budget_plan_id == budget_plan_id
        ]
