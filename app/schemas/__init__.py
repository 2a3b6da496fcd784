"""Pydantic schemas for API validation."""

from app.schemas.booking import (
    BookingCancelResponse,
    BookingCreate,
    BookingDetails,
    BookingResponse,
    FareQuoteRequest,
    FareQuoteResponse,
    SeatMapResponse,
    SeatPosition,
)
from app.schemas.route import CoachClassResponse, RouteResponse
from app.schemas.user import (
    RefreshTokenRequest,
    TokenResponse,
    UserCreate,
    UserLogin,
    UserResponse,
    UserSummary,
)

__all__ = [
    # User
    "UserCreate",
    "UserLogin",
    "UserResponse",
    "UserSummary",
    "TokenResponse",
    "RefreshTokenRequest",
    # Route
    "RouteResponse",
    "CoachClassResponse",
    # Booking
    "BookingCreate",
    "BookingResponse",
    "BookingDetails",
    "BookingCancelResponse",
    "FareQuoteRequest",
    "FareQuoteResponse",
    "SeatMapResponse",
    "SeatPosition",
]
