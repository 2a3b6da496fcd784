"""Seat grid and passenger eligibility rules."""

from app.core.exceptions import InvalidSeat, ValidationError

ROWS = 5
COLUMNS = 4

MIN_PASSENGER_AGE = 7
MAX_PASSENGER_AGE = 125


def is_valid_seat(row: int, column: int) -> bool:
    return 1 <= row <= ROWS and 1 <= column <= COLUMNS


def assert_valid_seat(row: int, column: int) -> None:
    if not is_valid_seat(row, column):
        raise InvalidSeat(
            f"Seat row must be between 1 and {ROWS} and column between 1 and {COLUMNS}"
        )


def assert_valid_passenger(passenger_name: str, passenger_age: int) -> None:
    """Passengers under 7 cannot travel unaccompanied and are rejected outright."""
    if passenger_age < MIN_PASSENGER_AGE:
        raise ValidationError(f"Passenger must be at least {MIN_PASSENGER_AGE} years old")
    if passenger_age > MAX_PASSENGER_AGE:
        raise ValidationError("Invalid age")
    if not passenger_name or not passenger_name.strip():
        raise ValidationError("Passenger name is required")


def seat_label(row: int, column: int) -> str:
    """Human-readable seat label: column letter followed by row, e.g. 'B3'."""
    return f"{chr(ord('A') + column - 1)}{row}"


def all_seats() -> list[tuple[int, int]]:
    return [(row, column) for row in range(1, ROWS + 1) for column in range(1, COLUMNS + 1)]
