from datetime import date

from app.services.seat_service import SeatService

TRAVEL_DATE = date(2026, 12, 1)


async def test_empty_departure_has_no_occupied_seats(db, delhi_mumbai):
    occupied = await SeatService().get_occupied_seats(db, delhi_mumbai.id, TRAVEL_DATE, "ECONOMY")
    assert occupied == set()


async def test_occupied_seats_include_confirmed_and_exclude_cancelled(db, service, alice, delhi_mumbai):
    kept = await service.create_booking(
        db, alice.id, delhi_mumbai.id, TRAVEL_DATE, "ECONOMY", 1, 1, "Alice", 30
    )
    dropped = await service.create_booking(
        db, alice.id, delhi_mumbai.id, TRAVEL_DATE, "ECONOMY", 2, 3, "Alice", 30
    )
    await service.cancel_booking(db, dropped.id, alice.id)

    occupied = await SeatService().get_occupied_seats(db, delhi_mumbai.id, TRAVEL_DATE, "ECONOMY")

    assert occupied == {(kept.row, kept.column)}


async def test_occupancy_is_scoped_to_departure(db, service, alice, delhi_mumbai, bangalore_hyderabad):
    await service.create_booking(db, alice.id, delhi_mumbai.id, TRAVEL_DATE, "ECONOMY", 1, 1, "Alice", 30)
    seats = SeatService()

    assert await seats.get_occupied_seats(db, delhi_mumbai.id, TRAVEL_DATE, "BUSINESS") == set()
    assert await seats.get_occupied_seats(db, delhi_mumbai.id, date(2026, 12, 2), "ECONOMY") == set()
    assert await seats.get_occupied_seats(db, bangalore_hyderabad.id, TRAVEL_DATE, "ECONOMY") == set()


async def test_seat_map_marks_taken_seats(db, service, alice, delhi_mumbai):
    await service.create_booking(db, alice.id, delhi_mumbai.id, TRAVEL_DATE, "NON_AC", 3, 2, "Alice", 30)

    seat_map = await SeatService().get_seat_map(db, delhi_mumbai.id, TRAVEL_DATE, "NON_AC")

    assert seat_map.rows == 5
    assert seat_map.columns == 4
    assert len(seat_map.seats) == 20
    assert seat_map.available_count == 19
    taken = [seat for seat in seat_map.seats if not seat.available]
    assert [(seat.row, seat.column, seat.label) for seat in taken] == [(3, 2, "B3")]
