"""Booking database model."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from app.database import Base

SEAT_CONSTRAINT = "uq_bookings_confirmed_seat"
PNR_CONSTRAINT = "uq_bookings_pnr"

_confirmed_only = text("status = 'confirmed'")


class Booking(Base):
    """A single passenger's seat on one departure (route, travel date, coach)."""

    __tablename__ = "bookings"
    __table_args__ = (
        UniqueConstraint("pnr", name=PNR_CONSTRAINT),
        # One confirmed booking per seat per departure; cancelled rows release the seat
        Index(
            SEAT_CONSTRAINT,
            "route_id",
            "travel_date",
            "coach",
            "seat_row",
            "seat_column",
            unique=True,
            postgresql_where=_confirmed_only,
            sqlite_where=_confirmed_only,
        ),
        Index("ix_bookings_departure", "route_id", "travel_date", "coach", "status"),
        CheckConstraint("seat_row BETWEEN 1 AND 5", name="ck_bookings_seat_row"),
        CheckConstraint("seat_column BETWEEN 1 AND 4", name="ck_bookings_seat_column"),
        CheckConstraint("passenger_age BETWEEN 7 AND 125", name="ck_bookings_passenger_age"),
        CheckConstraint("fare >= 0", name="ck_bookings_fare_non_negative"),
        CheckConstraint("status IN ('confirmed', 'cancelled')", name="ck_bookings_status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    pnr: Mapped[str] = mapped_column(String(10), nullable=False)
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    route_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("routes.id", ondelete="CASCADE"), nullable=False
    )

    # Departure
    travel_date: Mapped[date] = mapped_column(Date, nullable=False)
    coach: Mapped[str] = mapped_column(String(20), nullable=False)  # key of COACH_CLASSES

    # Seat
    row: Mapped[int] = mapped_column("seat_row", Integer, nullable=False)
    column: Mapped[int] = mapped_column("seat_column", Integer, nullable=False)

    # Passenger
    passenger_name: Mapped[str] = mapped_column(String(200), nullable=False)
    passenger_age: Mapped[int] = mapped_column(Integer, nullable=False)

    fare: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)

    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="confirmed"
    )  # confirmed, cancelled

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
