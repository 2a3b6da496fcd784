"""Main API router that includes all endpoint routers."""

from fastapi import APIRouter

from app.api.v1 import auth, bookings, routes

api_router = APIRouter()

# Authentication
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])

# Routes
api_router.include_router(routes.router, prefix="/routes", tags=["Routes"])

# Bookings
api_router.include_router(bookings.router, prefix="/bookings", tags=["Bookings"])
