"""Seat availability for a departure (route, travel date, coach)."""

from datetime import date
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.domain.seating import COLUMNS, ROWS, all_seats, seat_label
from app.schemas.booking import SeatMapResponse, SeatStatus
from app.services.booking_repository import BookingRepository, booking_repository


class SeatService:
    """Reads seat occupancy from confirmed bookings."""

    def __init__(self, repository: BookingRepository | None = None) -> None:
        self.repository = repository or booking_repository

    async def get_occupied_seats(
        self,
        db: AsyncSession,
        route_id: UUID,
        travel_date: date,
        coach: str,
    ) -> set[tuple[int, int]]:
        """Return the (row, column) pairs held by confirmed bookings.

        Cancelled bookings are excluded, so their seats read as free.
        """
        seats = await self.repository.list_occupied_seats(db, route_id, travel_date, coach)
        return set(seats)

    async def get_seat_map(
        self,
        db: AsyncSession,
        route_id: UUID,
        travel_date: date,
        coach: str,
    ) -> SeatMapResponse:
        """Return every seat in the grid with its availability."""
        occupied = await self.get_occupied_seats(db, route_id, travel_date, coach)
        seats = [
            SeatStatus(
                row=row,
                column=column,
                label=seat_label(row, column),
                available=(row, column) not in occupied,
            )
            for row, column in all_seats()
        ]
        return SeatMapResponse(
            route_id=route_id,
            travel_date=travel_date,
            coach=coach,
            rows=ROWS,
            columns=COLUMNS,
            available_count=sum(1 for seat in seats if seat.available),
            seats=seats,
        )


seat_service = SeatService()
