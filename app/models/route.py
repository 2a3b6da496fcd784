"""Train route model."""

from __future__ import annotations

import uuid

from sqlalchemy import CheckConstraint, Integer, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base


class Route(Base):
    """A fixed journey between two stations. Seeded reference data."""

    __tablename__ = "routes"
    __table_args__ = (
        CheckConstraint("distance_km > 0", name="ck_routes_distance_positive"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    from_station: Mapped[str] = mapped_column(String(100), nullable=False)
    to_station: Mapped[str] = mapped_column(String(100), nullable=False)
    distance_km: Mapped[int] = mapped_column(Integer, nullable=False)
