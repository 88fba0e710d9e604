from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Optional

from budget_engine.models.plan import MonthlyBudgetPlan
from budget_engine.models.transaction import Transaction


class PlanStore(ABC):
    """Keyed persistence for plans (by user + month) and transactions (by id).

    Saving a plan for an existing (user_id, month) replaces it. Implementations
    hand out copies: mutating a returned plan has no effect until it is saved.
    """

    # Plans -------------------------------------------------------------

    @abstractmethod
    def get_plan(self, user_id: str, month: str) -> Optional[MonthlyBudgetPlan]:
        ...

    @abstractmethod
    def save_plan(self, plan: MonthlyBudgetPlan) -> None:
        ...

    @abstractmethod
    def list_plans(self, user_id: str) -> List[MonthlyBudgetPlan]:
        ...

    # Transactions ------------------------------------------------------

    @abstractmethod
    def save_transaction(self, transaction: Transaction) -> None:
        ...

    @abstractmethod
    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        ...

    @abstractmethod
    def list_transactions(self, budget_plan_id: str) -> List[Transaction]:
        ...
