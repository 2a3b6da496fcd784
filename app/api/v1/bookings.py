"""Booking endpoints."""

from datetime import date
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.api.deps import CurrentUser, DbSession, get_booking_service, get_seat_service
from app.core.middleware import booking_limiter
from app.models.booking import Booking
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
from app.services.booking_service import BookingService
from app.services.seat_service import SeatService

router = APIRouter()

Bookings = Annotated[BookingService, Depends(get_booking_service)]
Seats = Annotated[SeatService, Depends(get_seat_service)]


@router.get("/seats", response_model=list[SeatPosition])
async def get_booked_seats(
    db: DbSession,
    seats: Seats,
    route_id: UUID = Query(..., alias="routeId"),
    travel_date: date = Query(..., alias="travelDate"),
    coach: str = Query(..., max_length=20),
) -> list[SeatPosition]:
    """Seats already taken by confirmed bookings on one departure."""
    occupied = await seats.get_occupied_seats(db, route_id, travel_date, coach)
    return [SeatPosition(row=row, column=column) for row, column in sorted(occupied)]


@router.get("/seat-map", response_model=SeatMapResponse)
async def get_seat_map(
    db: DbSession,
    seats: Seats,
    route_id: UUID = Query(..., alias="routeId"),
    travel_date: date = Query(..., alias="travelDate"),
    coach: str = Query(..., max_length=20),
) -> SeatMapResponse:
    """Full seat grid for one departure with availability flags."""
    return await seats.get_seat_map(db, route_id, travel_date, coach)


@router.post("/fare", response_model=FareQuoteResponse)
async def calculate_fare(
    request: FareQuoteRequest,
    db: DbSession,
    bookings: Bookings,
) -> FareQuoteResponse:
    """Calculate the fare without creating a booking."""
    return await bookings.quote(db, request.route_id, request.coach, request.passenger_age)


@router.post(
    "/",
    response_model=BookingResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(booking_limiter)],
)
async def create_booking(
    booking_data: BookingCreate,
    current_user: CurrentUser,
    db: DbSession,
    bookings: Bookings,
) -> Booking:
    """Create a new booking for the current user."""
    return await bookings.create_booking(db, current_user.id, **booking_data.model_dump())


@router.get("/", response_model=list[BookingDetails])
async def get_my_bookings(
    current_user: CurrentUser,
    db: DbSession,
    bookings: Bookings,
) -> list[BookingDetails]:
    """Get the current user's bookings, ordered by travel date."""
    return await bookings.list_user_bookings(db, current_user.id)


@router.get("/pnr/{pnr}", response_model=BookingDetails)
async def get_booking_by_pnr(
    pnr: str,
    current_user: CurrentUser,
    db: DbSession,
    bookings: Bookings,
) -> BookingDetails:
    """Look up one of the current user's bookings by PNR."""
    return await bookings.get_booking_by_pnr(db, pnr, current_user.id)


@router.post("/{booking_id}/cancel", response_model=BookingCancelResponse)
async def cancel_booking(
    booking_id: UUID,
    current_user: CurrentUser,
    db: DbSession,
    bookings: Bookings,
) -> BookingCancelResponse:
    """Cancel a booking. Cancelling an already cancelled booking succeeds."""
    booking = await bookings.cancel_booking(db, booking_id, current_user.id)
    return BookingCancelResponse(
        message="Booking cancelled successfully",
        booking=BookingResponse.model_validate(booking),
    )
