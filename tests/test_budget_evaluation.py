from __future__ import annotations

import pytest

from familybudget.services import evaluate_limit


def test_fixed_amount_under_limit():
    util = evaluate_limit(4000, limit_amount=5000)
    assert util.percentage == 80
    assert util.is_over_limit is False
    assert util.is_near_limit is True
    assert util.effective_limit == 5000


def test_fixed_amount_over_limit_keeps_raw_percentage():
    util = evaluate_limit(6000, limit_amount=5000)
    assert util.percentage == 120
    assert util.display_percentage == 100
    assert util.is_over_limit is True
    assert util.is_near_limit is False


def test_exactly_at_limit_is_over():
    assert evaluate_limit(5000, limit_amount=5000).is_over_limit is True


def test_percentage_of_income():
    # 10% of 50000 income -> 5000 ceiling
    util = evaluate_limit(2500, limit_percentage=10, period_income=50000)
    assert util.effective_limit == 5000
    assert util.percentage == 50
    assert util.is_near_limit is False


def test_custom_warning_threshold():
    assert evaluate_limit(600, limit_amount=1000, warning_threshold=50).is_near_limit is True
    assert evaluate_limit(600, limit_amount=1000, warning_threshold=70).is_near_limit is False


def test_zero_income_percentage_limit():
    assert evaluate_limit(0, limit_percentage=20, period_income=0).percentage == 0
    util = evaluate_limit(10, limit_percentage=20, period_income=0)
    assert util.percentage == 100
    assert util.is_over_limit is True


def test_negative_spending_is_treated_as_magnitude():
    assert evaluate_limit(-4000, limit_amount=5000).percentage == 80


@pytest.mark.parametrize(
    "kwargs",
    [
        {},
        {"limit_amount": 100, "limit_percentage": 10},
    ],
)
def test_requires_exactly_one_limit_kind(kwargs):
    with pytest.raises(ValueError):
        evaluate_limit(10, **kwargs)


def test_spending_just_under_limit_is_not_over():
    util = evaluate_limit(9999.99, limit_amount=10000)
    assert util.is_over_limit is False
    assert util.is_near_limit is True
    assert util.display_percentage <= 100


def test_percentage_ceiling_is_not_rounded_before_comparing():
    # 10% of 33.35 is 3.335; rounding the ceiling to cents would flag 3.33 as over
    util = evaluate_limit(3.33, limit_percentage=10, period_income=33.35)
    assert util.is_over_limit is False
    assert util.percentage == pytest.approx(99.85)
    assert util.is_near_limit is True
