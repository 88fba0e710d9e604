from datetime import date

import pytest

from budget_engine.services.goals import months_remaining, project_goal, project_goals

from conftest import goal, income

TODAY = date(2026, 1, 15)


def test_months_remaining_counts_calendar_months():
    assert months_remaining(date(2026, 7, 1), TODAY) == 6
    assert months_remaining(date(2027, 1, 31), TODAY) == 12


def test_contribution_spreads_gap_over_remaining_months():
    snap = project_goal(goal("house", 12000, 3000, date(2026, 7, 1)), "AED", TODAY)
    assert snap.monthly_contribution.base_amount == pytest.approx(1500)
    assert snap.monthly_contribution.currency == "AED"
    assert snap.progress_percent == pytest.approx(25)


@pytest.mark.parametrize("target_date", [date(2026, 1, 31), date(2025, 6, 1)])
def test_due_or_overdue_goal_gets_no_contribution(target_date):
    snap = project_goal(goal("late", 5000, 1000, target_date), "AED", TODAY)
    assert snap.monthly_contribution.base_amount == 0


def test_zero_target_reports_zero_progress():
    snap = project_goal(goal("empty", 0, 0, date(2026, 12, 1)), "AED", TODAY)
    assert snap.progress_percent == 0


def test_progress_can_exceed_one_hundred_percent():
    snap = project_goal(goal("done", 1000, 1200, date(2026, 12, 1)), "AED", TODAY)
    assert snap.progress_percent == pytest.approx(120)


def test_project_goals_keeps_input_order():
    goals = [
        goal("b", 100, 10, date(2026, 3, 1)),
        goal("a", 100, 90, date(2026, 3, 1)),
    ]
    assert [s.goal_id for s in project_goals(goals, "AED", TODAY)] == ["b", "a"]


def test_plan_carries_goal_snapshots(engine):
    plan = engine.generate_plan(
        "u1",
        "2026-01",
        "AED",
        [income(10000)],
        goals=[goal("house", 12000, 3000, date(2026, 7, 1))],
        today=TODAY,
    )
    assert len(plan.goals_snapshot) == 1
    assert plan.goals_snapshot[0].monthly_contribution.base_amount == pytest.approx(1500)
