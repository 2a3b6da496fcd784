"""Booking state machine."""

from app.core.exceptions import ValidationError

CONFIRMED = "confirmed"
CANCELLED = "cancelled"

BOOKING_TRANSITIONS = {
    CONFIRMED: {CANCELLED},
    CANCELLED: set(),
}


def assert_booking_transition(current: str, target: str) -> None:
    allowed = BOOKING_TRANSITIONS.get(current, set())
    if target not in allowed:
        raise ValidationError(
            f"Invalid booking transition: {current} → {target}"
        )
