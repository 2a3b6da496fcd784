"""Route and coach class endpoints."""

from uuid import UUID

from fastapi import APIRouter

from app.api.deps import DbSession
from app.core.exceptions import NotFoundError
from app.domain.fares import COACH_CLASSES, COACH_ORDER
from app.models.route import Route
from app.schemas.route import CoachClassResponse, RouteResponse
from app.services.booking_repository import booking_repository

router = APIRouter()


@router.get("/", response_model=list[RouteResponse])
async def list_routes(db: DbSession) -> list[Route]:
    """List all routes."""
    return await booking_repository.list_routes(db)


@router.get("/coaches", response_model=list[CoachClassResponse])
async def list_coach_classes() -> list[CoachClassResponse]:
    """List coach classes in display order with their per-km rates."""
    return [CoachClassResponse.model_validate(COACH_CLASSES[key]) for key in COACH_ORDER]


@router.get("/{route_id}", response_model=RouteResponse)
async def get_route(route_id: UUID, db: DbSession) -> Route:
    """Get a route by ID."""
    route = await booking_repository.find_route_by_id(db, route_id)
    if not route:
        raise NotFoundError("Route", str(route_id))
    return route
