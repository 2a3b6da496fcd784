"""Seed routes.

Revision ID: 002_seed_routes
Revises: 001_initial
Create Date: 2026-10-19

Seeds the routes table with the fixed set of journeys.
"""

import uuid
from typing import Sequence

from alembic import op
from sqlalchemy import Integer, String, column, table
from sqlalchemy.dialects.postgresql import UUID

from app.seed import DEFAULT_ROUTES

# revision identifiers
revision: str = "002_seed_routes"
down_revision: str = "001_initial"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Insert seed routes."""
    routes_table = table(
        "routes",
        column("id", UUID(as_uuid=True)),
        column("name", String),
        column("from_station", String),
        column("to_station", String),
        column("distance_km", Integer),
    )

    op.bulk_insert(
        routes_table,
        [{"id": uuid.uuid4(), **route} for route in DEFAULT_ROUTES],
    )


def downgrade() -> None:
    """Remove seed routes."""
    route_names = [r["name"] for r in DEFAULT_ROUTES]
    routes_table = table("routes", column("name", String))

    op.execute(routes_table.delete().where(routes_table.c.name.in_(route_names)))
