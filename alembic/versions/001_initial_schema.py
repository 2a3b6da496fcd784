"""Initial database schema.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

Creates users, routes and bookings. The partial unique index on bookings
allows one confirmed booking per seat per departure.
"""

from typing import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create all database tables."""

    # ==================== USERS ====================
    op.create_table(
        "users",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("username", sa.String(50), unique=True, nullable=False, index=True),
        sa.Column("email", sa.String(255), unique=True, nullable=False, index=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("is_active", sa.Boolean, default=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # ==================== ROUTES ====================
    op.create_table(
        "routes",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("from_station", sa.String(100), nullable=False),
        sa.Column("to_station", sa.String(100), nullable=False),
        sa.Column("distance_km", sa.Integer, nullable=False),
        sa.CheckConstraint("distance_km > 0", name="ck_routes_distance_positive"),
    )

    # ==================== BOOKINGS ====================
    op.create_table(
        "bookings",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("pnr", sa.String(10), nullable=False),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True),
        sa.Column("route_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("routes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("travel_date", sa.Date, nullable=False),
        sa.Column("coach", sa.String(20), nullable=False),
        sa.Column("seat_row", sa.Integer, nullable=False),
        sa.Column("seat_column", sa.Integer, nullable=False),
        sa.Column("passenger_name", sa.String(200), nullable=False),
        sa.Column("passenger_age", sa.Integer, nullable=False),
        sa.Column("fare", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="confirmed"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("cancelled_at", sa.DateTime(timezone=True)),
        sa.UniqueConstraint("pnr", name="uq_bookings_pnr"),
        sa.CheckConstraint("seat_row BETWEEN 1 AND 5", name="ck_bookings_seat_row"),
        sa.CheckConstraint("seat_column BETWEEN 1 AND 4", name="ck_bookings_seat_column"),
        sa.CheckConstraint("passenger_age BETWEEN 7 AND 125", name="ck_bookings_passenger_age"),
        sa.CheckConstraint("fare >= 0", name="ck_bookings_fare_non_negative"),
        sa.CheckConstraint("status IN ('confirmed', 'cancelled')", name="ck_bookings_status"),
    )
    op.create_index(
        "uq_bookings_confirmed_seat",
        "bookings",
        ["route_id", "travel_date", "coach", "seat_row", "seat_column"],
        unique=True,
        postgresql_where=sa.text("status = 'confirmed'"),
    )
    op.create_index(
        "ix_bookings_departure",
        "bookings",
        ["route_id", "travel_date", "coach", "status"],
    )


def downgrade() -> None:
    """Drop all database tables in reverse order."""
    op.drop_index("ix_bookings_departure", table_name="bookings")
    op.drop_index("uq_bookings_confirmed_seat", table_name="bookings")
    op.drop_table("bookings")
    op.drop_table("routes")
    op.drop_table("users")
