from __future__ import annotations

from typing import List, Sequence

from budget_engine.models.inputs import Debt
from budget_engine.models.money import Money
from budget_engine.models.plan import DebtSnapshot

"""Debt payoff ordering and payment assignment.

snowball  -> smallest outstanding principal first
avalanche -> highest annual interest rate first

Every debt is assigned its minimum payment. Only the first debt in priority
order can receive more: min(remaining budget, its outstanding principal), and
only when the remaining budget exceeds its minimum. At most one snapshot per
plan therefore has is_minimum_payment == False.
"""


def order_debts(debts: Sequence[Debt], strategy: str) -> List[Debt]:
    if strategy == "snowball":
        return sorted(debts, key=lambda d: d.outstanding_principal.base_amount)
    if strategy == "avalanche":
        return sorted(debts, key=lambda d: d.interest_rate_annual, reverse=True)
    raise ValueError(f"Unknown debt strategy '{strategy}'")


def plan_debt_payments(
    debts: Sequence[Debt], debt_budget: float, strategy: str, base_currency: str
) -> List[DebtSnapshot]:
    remaining = debt_budget
    snapshots: List[DebtSnapshot] = []

    for debt in order_debts(debts, strategy):
        min_payment = debt.min_monthly_payment.base_amount
        allocated = min_payment
        is_minimum = True

        if not snapshots and remaining > min_payment:
            allocated = min(remaining, debt.outstanding_principal.base_amount)
            is_minimum = False

        remaining -= allocated
        snapshots.append(
            DebtSnapshot(
                debt_id=debt.id,
                name=debt.name,
                currency=debt.currency,
                interest_rate_annual=debt.interest_rate_annual,
                outstanding_principal=debt.outstanding_principal,
                allocated_payment=Money.in_base(allocated, base_currency),
                is_minimum_payment=is_minimum,
            )
        )

    return snapshots
