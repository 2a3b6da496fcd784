from decimal import Decimal

import pytest

from app.core.exceptions import InvalidCoachClass
from app.domain.fares import COACH_CLASSES, COACH_ORDER, compute_fare, get_coach_class, quote_fare


def test_economy_adult_fare():
    assert compute_fare(1400, "ECONOMY", 30) == Decimal("2800.00")


def test_business_senior_fare_gets_twenty_percent_off():
    assert compute_fare(575, "BUSINESS", 65) == Decimal("2300.00")


@pytest.mark.parametrize(
    ("coach", "expected"),
    [
        ("BUSINESS", "500.00"),
        ("FIRST_CLASS", "350.00"),
        ("ECONOMY", "200.00"),
        ("SECOND_CLASS", "150.00"),
        ("NON_AC", "100.00"),
    ],
)
def test_rate_per_coach_class(coach, expected):
    assert compute_fare(100, coach, 30) == Decimal(expected)


def test_discount_starts_at_sixty():
    assert compute_fare(100, "ECONOMY", 59) == Decimal("200.00")
    assert compute_fare(100, "ECONOMY", 60) == Decimal("160.00")


def test_fare_rounds_half_up_to_cents():
    # 7 km x 1.5 x 0.8 = 8.4; 33 km x 3.5 x 0.8 = 92.4; 1 km x 1.5 = 1.5
    assert compute_fare(7, "SECOND_CLASS", 70) == Decimal("8.40")
    assert compute_fare(33, "FIRST_CLASS", 61) == Decimal("92.40")
    assert compute_fare(Decimal("0.005"), "NON_AC", 30) == Decimal("0.01")


def test_fare_is_deterministic():
    assert compute_fare(1650, "FIRST_CLASS", 45) == compute_fare(1650, "FIRST_CLASS", 45)


def test_unknown_coach_class_rejected():
    with pytest.raises(InvalidCoachClass) as exc_info:
        compute_fare(100, "SLEEPER", 30)
    assert exc_info.value.status_code == 400
    assert "SLEEPER" in exc_info.value.detail


def test_quote_breakdown_matches_fare():
    quote = quote_fare(575, "BUSINESS", 65)

    assert quote.base_fare == Decimal("2875.00")
    assert quote.discount == Decimal("575.00")
    assert quote.total == compute_fare(575, "BUSINESS", 65)
    assert quote.senior_discount_applied
    assert quote.coach.name == "Business"


def test_quote_without_discount():
    quote = quote_fare(1400, "ECONOMY", 30)

    assert quote.discount == Decimal("0")
    assert not quote.senior_discount_applied


def test_coach_display_order_and_names():
    assert [COACH_CLASSES[key].name for key in COACH_ORDER] == [
        "Business",
        "1st Class",
        "Economy",
        "2nd Class",
        "Non A/C",
    ]
    assert get_coach_class("NON_AC").rate_per_km == Decimal("1.0")
