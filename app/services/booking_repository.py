"""Persistence operations for routes, bookings and booking owners."""

from datetime import UTC, date, datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.booking_state import CONFIRMED
from app.models.booking import Booking
from app.models.route import Route
from app.models.user import User


class BookingRepository:
    """Query and write helpers used by the booking service.

    Every method takes the caller's session so that reads and writes share
    the request's unit of work.
    """

    async def find_route_by_id(self, db: AsyncSession, route_id: UUID) -> Route | None:
        result = await db.execute(select(Route).where(Route.id == route_id))
        return result.scalar_one_or_none()

    async def list_routes(self, db: AsyncSession) -> list[Route]:
        result = await db.execute(select(Route).order_by(Route.name))
        return list(result.scalars().all())

    async def find_routes_by_ids(self, db: AsyncSession, route_ids: set[UUID]) -> dict[UUID, Route]:
        if not route_ids:
            return {}
        result = await db.execute(select(Route).where(Route.id.in_(route_ids)))
        return {route.id: route for route in result.scalars().all()}

    async def find_user_by_id(self, db: AsyncSession, user_id: UUID) -> User | None:
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def list_occupied_seats(
        self,
        db: AsyncSession,
        route_id: UUID,
        travel_date: date,
        coach: str,
    ) -> list[tuple[int, int]]:
        """Seats held by confirmed bookings on one departure."""
        result = await db.execute(
            select(Booking.row, Booking.column).where(
                Booking.route_id == route_id,
                Booking.travel_date == travel_date,
                Booking.coach == coach,
                Booking.status == CONFIRMED,
            )
        )
        return [(row, column) for row, column in result.all()]

    async def insert_booking(self, db: AsyncSession, booking: Booking) -> Booking:
        """Insert inside a savepoint so a constraint violation leaves the session usable.

        Raises:
            IntegrityError: If the seat or PNR unique constraint is violated
        """
        async with db.begin_nested():
            db.add(booking)
        await db.refresh(booking)
        return booking

    async def find_booking_by_id(
        self, db: AsyncSession, booking_id: UUID, for_update: bool = False
    ) -> Booking | None:
        query = select(Booking).where(Booking.id == booking_id)
        if for_update:
            query = query.with_for_update()
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def find_booking_by_pnr(self, db: AsyncSession, pnr: str) -> Booking | None:
        result = await db.execute(select(Booking).where(Booking.pnr == pnr))
        return result.scalar_one_or_none()

    async def update_booking_status(self, db: AsyncSession, booking: Booking, status: str) -> Booking:
        booking.status = status
        if status != CONFIRMED:
            booking.cancelled_at = datetime.now(UTC)
        await db.flush()
        return booking

    async def list_bookings_for_user(self, db: AsyncSession, user_id: UUID) -> list[Booking]:
        result = await db.execute(
            select(Booking)
            .where(Booking.user_id == user_id)
            .order_by(Booking.travel_date, Booking.created_at)
        )
        return list(result.scalars().all())


booking_repository = BookingRepository()
