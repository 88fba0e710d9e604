import pytest

from budget_engine.models import CategoryBudget
from budget_engine.services.budget_utils import (
    category_status,
    classify_status,
    percent_used,
    record_category_spend,
)
from budget_engine.services.money import round2, round_whole


@pytest.mark.parametrize(
    "spent, planned, expected",
    [
        (0, 100, "UNDER"),
        (79.99, 100, "UNDER"),
        (80, 100, "NEAR_LIMIT"),
        (100, 100, "NEAR_LIMIT"),
        (100.01, 100, "OVER"),
        (50, 0, "UNDER"),
        (-20, 100, "UNDER"),
    ],
)
def test_classify_status(spent, planned, expected):
    assert classify_status(spent, planned) == expected


def test_unplanned_category_goes_over_once_spent():
    cat = CategoryBudget(name="pets", planned=0, remaining=0)
    assert category_status(cat) == "UNDER"
    record_category_spend(cat, 10)
    assert cat.status == "OVER"


def test_refund_only_category_stays_under():
    cat = CategoryBudget(name="pets", planned=0, remaining=0)
    record_category_spend(cat, -10)
    assert cat.remaining == 10
    assert cat.status == "UNDER"


def test_percent_used_handles_zero_budget():
    assert percent_used(50, 200) == 25
    assert percent_used(50, 0) == 0


@pytest.mark.parametrize("value, expected", [(84.5, 85), (85.49, 85), (-0.5, -1), (2.5, 3)])
def test_round_whole_is_half_up(value, expected):
    assert round_whole(value) == expected


def test_round2():
    assert round2(2.675) == 2.68
