"""Database models."""

from app.models.booking import Booking
from app.models.route import Route
from app.models.user import User

__all__ = [
    "Booking",
    "Route",
    "User",
]
