"""Tests for debt ordering and payment assignment."""

import pytest

from budget_engine.services.debt_planner import order_debts, plan_debt_payments

from conftest import debt, income


@pytest.fixture
def debts():
    return [
        debt("A", 10000, 20, 100),
        debt("B", 5000, 12, 200),
        debt("C", 800, 5, 300),
    ]


def _by_id(snapshots):
    return {s.debt_id: s for s in snapshots}


class TestOrdering:
    def test_avalanche_orders_by_rate_descending(self, debts):
        assert [d.id for d in order_debts(debts, "avalanche")] == ["A", "B", "C"]

    def test_snowball_orders_by_principal_ascending(self, debts):
        assert [d.id for d in order_debts(debts, "snowball")] == ["C", "B", "A"]

    def test_unknown_strategy_rejected(self, debts):
        with pytest.raises(ValueError):
            order_debts(debts, "lottery")


class TestPayments:
    def test_avalanche_surplus_goes_to_first_debt_only(self, debts):
        snaps = _by_id(plan_debt_payments(debts, 1500, "avalanche", "AED"))
        assert snaps["A"].allocated_payment.base_amount == 1500
        assert not snaps["A"].is_minimum_payment
        assert snaps["B"].allocated_payment.base_amount == 200
        assert snaps["B"].is_minimum_payment
        assert snaps["C"].allocated_payment.base_amount == 300
        assert snaps["C"].is_minimum_payment

    def test_snowball_first_payment_capped_at_principal(self, debts):
        snapshots = plan_debt_payments(debts, 1500, "snowball", "AED")
        assert [s.debt_id for s in snapshots] == ["C", "B", "A"]
        snaps = _by_id(snapshots)
        assert snaps["C"].allocated_payment.base_amount == 800
        assert snaps["B"].allocated_payment.base_amount == 200
        assert snaps["A"].allocated_payment.base_amount == 100

    @pytest.mark.parametrize("strategy", ["snowball", "avalanche"])
    @pytest.mark.parametrize("budget", [0, 250, 600, 1500, 50000])
    def test_at_most_one_payment_above_minimum(self, debts, strategy, budget):
        snapshots = plan_debt_payments(debts, budget, strategy, "AED")
        assert len(snapshots) == 3
        assert sum(not s.is_minimum_payment for s in snapshots) <= 1
        for snap in snapshots:
            assert snap.allocated_payment.base_amount >= 0
            assert snap.allocated_payment.currency == "AED"

    def test_budget_equal_to_minimum_keeps_minimum(self):
        snapshots = plan_debt_payments([debt("only", 9000, 10, 2000)], 2000, "avalanche", "AED")
        assert snapshots[0].allocated_payment.base_amount == 2000
        assert snapshots[0].is_minimum_payment

    def test_no_debts(self):
        assert plan_debt_payments([], 1500, "avalanche", "AED") == []


class TestPlanDebts:
    def test_plan_uses_rule_strategy_and_debt_bucket(self, engine, debts):
        plan = engine.generate_plan("u1", "2026-03", "AED", [income(10000)], debts)
        assert plan.buckets["DEBT"].planned.base_amount == 1500
        first = plan.debts_snapshot[0]
        assert first.debt_id == "A"
        assert first.allocated_payment.base_amount == 1500

    def test_minimum_payments_raise_debt_bucket(self, engine):
        plan = engine.generate_plan(
            "u1", "2026-03", "AED", [income(10000)], [debt("card", 20000, 25, 2000)]
        )
        assert plan.buckets["DEBT"].planned.base_amount == 2000
        snap = plan.debts_snapshot[0]
        assert snap.allocated_payment.base_amount == 2000
        assert snap.is_minimum_payment

    def test_debt_allocation_splits_by_currency(self, engine):
        debts = [debt("card", 5000, 20, 300), debt("home", 90000, 8, 400, currency="INR")]
        plan = engine.generate_plan("u1", "2026-03", "AED", [income(10000)], debts)
        alloc = plan.debt_allocation
        assert alloc.base_currency_debt == pytest.approx(1500)
        assert alloc.home_country_debt == pytest.approx(400)
        assert alloc.other_debt == 0
