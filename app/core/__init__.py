"""Core utilities and security modules."""

from app.core.exceptions import (
    AppException,
    AuthenticationError,
    AuthorizationError,
    InvalidCoachClass,
    InvalidRoute,
    InvalidSeat,
    NotFoundError,
    RateLimitExceeded,
    SeatAlreadyBooked,
    ValidationError,
)
from app.core.security import (
    create_access_token,
    create_refresh_token,
    create_tokens,
    get_password_hash,
    verify_password,
    verify_token,
)

__all__ = [
    "AppException",
    "AuthenticationError",
    "AuthorizationError",
    "InvalidCoachClass",
    "InvalidRoute",
    "InvalidSeat",
    "NotFoundError",
    "RateLimitExceeded",
    "SeatAlreadyBooked",
    "ValidationError",
    "create_access_token",
    "create_refresh_token",
    "create_tokens",
    "get_password_hash",
    "verify_password",
    "verify_token",
]
