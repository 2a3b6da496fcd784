"""Route and coach class schemas."""

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class RouteResponse(BaseModel):
    """Schema for route response."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    from_station: str
    to_station: str
    distance_km: int


class CoachClassResponse(BaseModel):
    """A coach class fare tier."""

    model_config = ConfigDict(from_attributes=True)

    key: str
    name: str
    rate_per_km: Decimal
