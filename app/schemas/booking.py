"""Booking-related Pydantic schemas."""

from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.schemas.route import RouteResponse
from app.schemas.user import UserSummary


class BookingCreate(BaseModel):
    """Schema for creating a booking.

    Only shapes are checked here; range rules (age, seat grid, coach class)
    are enforced by the booking service in a fixed order. The fare is never
    accepted from the client.
    """

    route_id: UUID
    travel_date: date
    coach: str = Field(..., max_length=20)
    row: int
    column: int
    passenger_name: str = Field(..., max_length=200)
    passenger_age: int


class FareQuoteRequest(BaseModel):
    """Schema for estimating a fare before booking."""

    route_id: UUID
    coach: str = Field(..., max_length=20)
    passenger_age: int = Field(..., ge=0, le=125)


class FareQuoteResponse(BaseModel):
    """Fare breakdown for a route, coach class and passenger age."""

    route_id: UUID
    coach: str
    coach_name: str
    distance_km: int
    rate_per_km: Decimal
    base_fare: Decimal
    discount: Decimal
    senior_discount_applied: bool
    fare: Decimal


class SeatPosition(BaseModel):
    """A seat coordinate in the coach grid."""

    row: int
    column: int


class SeatStatus(SeatPosition):
    """A seat with its label and availability."""

    label: str
    available: bool


class SeatMapResponse(BaseModel):
    """Full seat grid for one departure."""

    route_id: UUID
    travel_date: date
    coach: str
    rows: int
    columns: int
    available_count: int
    seats: list[SeatStatus]


class BookingResponse(BaseModel):
    """Schema for booking response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    pnr: str
    user_id: UUID
    route_id: UUID
    travel_date: date
    coach: str
    row: int
    column: int
    passenger_name: str
    passenger_age: int
    fare: Decimal
    status: str
    created_at: datetime
    cancelled_at: datetime | None = None


class BookingDetails(BookingResponse):
    """Booking composed with its route and owner at read time."""

    route: RouteResponse
    user: UserSummary
    seat_label: str
    coach_name: str


class BookingCancelResponse(BaseModel):
    """Schema for cancellation result."""

    message: str
    booking: BookingResponse
