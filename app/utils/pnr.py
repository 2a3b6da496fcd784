"""PNR (booking reference) generation."""

import secrets
import string

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

PNR_LENGTH = 10
PNR_ALPHABET = string.ascii_uppercase + string.digits


def generate_pnr() -> str:
    """Generate a random PNR such as 'K3V9QZ0B7A'.

    Returns:
        str: 10 uppercase alphanumeric characters
    """
    return "".join(secrets.choice(PNR_ALPHABET) for _ in range(PNR_LENGTH))


def is_valid_pnr(value: str) -> bool:
    """Check that a string has the PNR shape."""
    return len(value) == PNR_LENGTH and all(c in PNR_ALPHABET for c in value)


async def generate_unique_pnr(db: AsyncSession, max_checks: int = 5) -> str:
    """Generate a PNR not currently present in the bookings table.

    This is a best-effort pre-check; the unique constraint on the column is
    what guarantees uniqueness at insert time.

    Args:
        db: Database session for uniqueness check
        max_checks: How many candidates to try before returning the last one

    Returns:
        str: A PNR not seen in the table at check time
    """
    from app.models.booking import Booking

    pnr = generate_pnr()
    for _ in range(max_checks):
        result = await db.execute(select(Booking.id).where(Booking.pnr == pnr))
        if result.scalar_one_or_none() is None:
            return pnr
        pnr = generate_pnr()
    return pnr
