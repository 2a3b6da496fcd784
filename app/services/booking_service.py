"""Booking creation, lookup and cancellation."""

import logging
from datetime import date
from typing import Protocol
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.exceptions import (
    AppException,
    AuthenticationError,
    AuthorizationError,
    InvalidRoute,
    NotFoundError,
    SeatAlreadyBooked,
)
from app.domain.booking_state import CANCELLED, CONFIRMED, assert_booking_transition
from app.domain.fares import COACH_CLASSES, compute_fare, get_coach_class, quote_fare
from app.domain.seating import assert_valid_passenger, assert_valid_seat, seat_label
from app.models.booking import PNR_CONSTRAINT, SEAT_CONSTRAINT, Booking
from app.models.route import Route
from app.models.user import User
from app.schemas.booking import BookingDetails, BookingResponse, FareQuoteResponse
from app.schemas.route import RouteResponse
from app.schemas.user import UserSummary
from app.services.booking_repository import BookingRepository, booking_repository
from app.services.notification_service import notification_service
from app.services.seat_service import SeatService, seat_service
from app.utils.pnr import generate_unique_pnr

logger = logging.getLogger(__name__)


class BookingNotifier(Protocol):
    def notify_booking_confirmed(self, booking: BookingDetails) -> None: ...

    def notify_booking_cancelled(self, booking: BookingDetails) -> None: ...


def _violated_constraint(exc: IntegrityError) -> str | None:
    """Name the booking unique constraint behind an integrity error, if any.

    PostgreSQL reports the constraint name; SQLite reports the columns.
    """
    message = str(exc.orig)
    if SEAT_CONSTRAINT in message or "bookings.seat_row" in message:
        return SEAT_CONSTRAINT
    if PNR_CONSTRAINT in message or "bookings.pnr" in message:
        return PNR_CONSTRAINT
    return None


def compose_booking_details(booking: Booking, route: Route, user: User) -> BookingDetails:
    """Assemble the read-time view of a booking with its route and owner."""
    coach = COACH_CLASSES.get(booking.coach)
    return BookingDetails(
        **BookingResponse.model_validate(booking).model_dump(),
        route=RouteResponse.model_validate(route),
        user=UserSummary.model_validate(user),
        seat_label=seat_label(booking.row, booking.column),
        coach_name=coach.name if coach else booking.coach,
    )


class BookingService:
    """Service for the booking lifecycle: create, view, cancel."""

    def __init__(
        self,
        repository: BookingRepository | None = None,
        seats: SeatService | None = None,
        notifier: BookingNotifier | None = None,
        pnr_max_attempts: int | None = None,
    ) -> None:
        self.repository = repository or booking_repository
        self.seats = seats or seat_service
        self.notifier = notifier or notification_service
        self.pnr_max_attempts = pnr_max_attempts or settings.pnr_max_attempts

    async def quote(
        self,
        db: AsyncSession,
        route_id: UUID,
        coach: str,
        passenger_age: int,
    ) -> FareQuoteResponse:
        """Fare estimate shown before the passenger submits a booking."""
        route = await self.repository.find_route_by_id(db, route_id)
        if route is None:
            raise InvalidRoute()

        quote = quote_fare(route.distance_km, coach, passenger_age)
        return FareQuoteResponse(
            route_id=route.id,
            coach=quote.coach.key,
            coach_name=quote.coach.name,
            distance_km=quote.distance_km,
            rate_per_km=quote.coach.rate_per_km,
            base_fare=quote.base_fare,
            discount=quote.discount,
            senior_discount_applied=quote.senior_discount_applied,
            fare=quote.total,
        )

    async def create_booking(
        self,
        db: AsyncSession,
        user_id: UUID | None,
        route_id: UUID,
        travel_date: date,
        coach: str,
        row: int,
        column: int,
        passenger_name: str,
        passenger_age: int,
    ) -> Booking:
        """Validate, price and persist a booking, then submit its confirmation email.

        Checks run in a fixed order and the first failure is raised: route,
        coach class, passenger, seat range, seat occupancy.

        Raises:
            AuthenticationError: No authenticated user
            InvalidRoute: Unknown route
            InvalidCoachClass: Unknown coach class
            ValidationError: Passenger age or name rejected
            InvalidSeat: Seat outside the coach grid
            SeatAlreadyBooked: Seat held by a confirmed booking
        """
        if user_id is None:
            raise AuthenticationError()

        route = await self.repository.find_route_by_id(db, route_id)
        if route is None:
            raise InvalidRoute()

        get_coach_class(coach)
        assert_valid_passenger(passenger_name, passenger_age)
        assert_valid_seat(row, column)

        # Re-check at commit time; the client's seat snapshot may be stale
        occupied = await self.seats.get_occupied_seats(db, route_id, travel_date, coach)
        if (row, column) in occupied:
            logger.info(
                f"Seat ({row}, {column}) on {route_id}/{travel_date}/{coach} already booked"
            )
            raise SeatAlreadyBooked()

        fare = compute_fare(route.distance_km, coach, passenger_age)

        booking = await self._insert_with_unique_pnr(
            db,
            user_id=user_id,
            route_id=route_id,
            travel_date=travel_date,
            coach=coach,
            row=row,
            column=column,
            passenger_name=passenger_name.strip(),
            passenger_age=passenger_age,
            fare=fare,
        )
        await db.commit()
        logger.info(f"Booking {booking.pnr} confirmed for user {user_id}")

        await self._notify(db, booking, route, cancelled=False)
        return booking

    async def _insert_with_unique_pnr(self, db: AsyncSession, **values) -> Booking:
        for attempt in range(1, self.pnr_max_attempts + 1):
            pnr = await generate_unique_pnr(db)
            booking = Booking(pnr=pnr, status=CONFIRMED, **values)
            try:
                return await self.repository.insert_booking(db, booking)
            except IntegrityError as exc:
                constraint = _violated_constraint(exc)
                if constraint == SEAT_CONSTRAINT:
                    # Lost the race to a concurrent booking for the same seat
                    logger.info(f"Seat conflict on insert for PNR candidate {pnr}")
                    raise SeatAlreadyBooked() from exc
                if constraint != PNR_CONSTRAINT:
                    raise
                logger.warning(f"PNR collision on {pnr} (attempt {attempt}), regenerating")

        logger.error(f"Could not allocate a unique PNR after {self.pnr_max_attempts} attempts")
        raise AppException(detail="Could not allocate a booking reference, please retry")

    async def cancel_booking(
        self,
        db: AsyncSession,
        booking_id: UUID,
        requesting_user_id: UUID | None,
    ) -> Booking:
        """Cancel a booking owned by the requesting user, releasing its seat.

        Cancelling an already cancelled booking returns it unchanged.

        Raises:
            AuthenticationError: No authenticated user
            NotFoundError: No booking with this ID
            AuthorizationError: Booking belongs to another user
        """
        if requesting_user_id is None:
            raise AuthenticationError()

        booking = await self.repository.find_booking_by_id(db, booking_id, for_update=True)
        if booking is None:
            raise NotFoundError("Booking", str(booking_id))
        if booking.user_id != requesting_user_id:
            raise AuthorizationError("You can only cancel your own bookings")

        if booking.status == CANCELLED:
            logger.info(f"Booking {booking.pnr} already cancelled")
            return booking

        assert_booking_transition(booking.status, CANCELLED)
        await self.repository.update_booking_status(db, booking, CANCELLED)
        await db.commit()
        logger.info(f"Booking {booking.pnr} cancelled by user {requesting_user_id}")

        await self._notify(db, booking, None, cancelled=True)
        return booking

    async def get_booking_details(self, db: AsyncSession, booking: Booking) -> BookingDetails:
        route = await self.repository.find_route_by_id(db, booking.route_id)
        user = await self.repository.find_user_by_id(db, booking.user_id)
        if route is None or user is None:
            raise NotFoundError("Booking", str(booking.id))
        return compose_booking_details(booking, route, user)

    async def get_booking_by_pnr(
        self,
        db: AsyncSession,
        pnr: str,
        requesting_user_id: UUID,
    ) -> BookingDetails:
        """Fetch a booking by PNR. Other users' bookings read as not found."""
        booking = await self.repository.find_booking_by_pnr(db, pnr.strip().upper())
        if booking is None or booking.user_id != requesting_user_id:
            raise NotFoundError("Booking")
        return await self.get_booking_details(db, booking)

    async def list_user_bookings(self, db: AsyncSession, user_id: UUID) -> list[BookingDetails]:
        """All of a user's bookings, cancelled included, ordered by travel date."""
        bookings = await self.repository.list_bookings_for_user(db, user_id)
        if not bookings:
            return []

        user = await self.repository.find_user_by_id(db, user_id)
        routes = await self.repository.find_routes_by_ids(db, {b.route_id for b in bookings})
        return [compose_booking_details(b, routes[b.route_id], user) for b in bookings]

    async def _notify(
        self,
        db: AsyncSession,
        booking: Booking,
        route: Route | None,
        cancelled: bool,
    ) -> None:
        """Hand the committed booking to the notifier; failures are only logged."""
        try:
            if route is None:
                details = await self.get_booking_details(db, booking)
            else:
                user = await self.repository.find_user_by_id(db, booking.user_id)
                details = compose_booking_details(booking, route, user)

            if cancelled:
                self.notifier.notify_booking_cancelled(details)
            else:
                self.notifier.notify_booking_confirmed(details)
        except Exception:
            logger.exception(f"Notification for booking {booking.pnr} could not be submitted")


booking_service = BookingService()
