from __future__ import annotations

from datetime import date
from typing import List, Sequence

from budget_engine.models.inputs import Goal
from budget_engine.models.money import Money
from budget_engine.models.plan import GoalSnapshot


def months_remaining(target: date, today: date) -> int:
    months = (target.year - today.year) * 12 + (target.month - today.month)
    return max(0, months)


def project_goal(goal: Goal, base_currency: str, today: date) -> GoalSnapshot:
    """Monthly contribution needed to hit the target date, and progress so far.

    Goals due this month or overdue get a zero contribution.
    """
    target = goal.target_amount.base_amount
    current = goal.current_amount.base_amount
    months = months_remaining(goal.target_date, today)
    contribution = (target - current) / months if months > 0 else 0.0
    progress = current / target * 100 if target > 0 else 0.0
    return GoalSnapshot(
        goal_id=goal.id,
        name=goal.name,
        target_amount=goal.target_amount,
        current_amount=goal.current_amount,
        monthly_contribution=Money.in_base(contribution, base_currency),
        progress_percent=progress,
    )


def project_goals(
    goals: Sequence[Goal], base_currency: str, today: date | None = None
) -> List[GoalSnapshot]:
    today = today or date.today()
    return [project_goal(g, base_currency, today) for g in goals]
