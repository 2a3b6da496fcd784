"""Coach classes and fare rules."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from app.core.exceptions import InvalidCoachClass

SENIOR_AGE = 60
SENIOR_DISCOUNT = Decimal("0.20")
CENTS = Decimal("0.01")


@dataclass(frozen=True)
class CoachClass:
    key: str
    name: str
    rate_per_km: Decimal


COACH_CLASSES: dict[str, CoachClass] = {
    "BUSINESS": CoachClass("BUSINESS", "Business", Decimal("5.0")),
    "FIRST_CLASS": CoachClass("FIRST_CLASS", "1st Class", Decimal("3.5")),
    "ECONOMY": CoachClass("ECONOMY", "Economy", Decimal("2.0")),
    "SECOND_CLASS": CoachClass("SECOND_CLASS", "2nd Class", Decimal("1.5")),
    "NON_AC": CoachClass("NON_AC", "Non A/C", Decimal("1.0")),
}

# Display order, most expensive first
COACH_ORDER = ("BUSINESS", "FIRST_CLASS", "ECONOMY", "SECOND_CLASS", "NON_AC")


@dataclass(frozen=True)
class FareQuote:
    coach: CoachClass
    distance_km: int
    base_fare: Decimal
    discount: Decimal
    total: Decimal

    @property
    def senior_discount_applied(self) -> bool:
        return self.discount > 0


def get_coach_class(coach_key: str) -> CoachClass:
    """Look up a coach class by key, raising InvalidCoachClass if unknown."""
    coach = COACH_CLASSES.get(coach_key)
    if coach is None:
        raise InvalidCoachClass(coach_key)
    return coach


def is_senior(passenger_age: int) -> bool:
    return passenger_age >= SENIOR_AGE


def quote_fare(distance_km: int | float | Decimal, coach_key: str, passenger_age: int) -> FareQuote:
    """Break a fare down into base fare, senior discount and total.

    The total is rounded half-up to two decimal places and is exactly what
    compute_fare returns for the same inputs.
    """
    coach = get_coach_class(coach_key)
    distance = Decimal(str(distance_km))
    base_fare = distance * coach.rate_per_km
    discount = base_fare * SENIOR_DISCOUNT if is_senior(passenger_age) else Decimal("0")
    total = max(base_fare - discount, Decimal("0")).quantize(CENTS, rounding=ROUND_HALF_UP)
    return FareQuote(
        coach=coach,
        distance_km=int(distance_km),
        base_fare=base_fare.quantize(CENTS, rounding=ROUND_HALF_UP),
        discount=discount.quantize(CENTS, rounding=ROUND_HALF_UP),
        total=total,
    )


def compute_fare(distance_km: int | float | Decimal, coach_key: str, passenger_age: int) -> Decimal:
    """Authoritative fare: distance x rate, less 20% for passengers aged 60+."""
    return quote_fare(distance_km, coach_key, passenger_age).total
