"""Reference data seeding."""

import asyncio
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.route import Route

logger = logging.getLogger(__name__)

DEFAULT_ROUTES = [
    {"name": "Delhi to Mumbai Express", "from_station": "Delhi", "to_station": "Mumbai", "distance_km": 1400},
    {"name": "Mumbai to Delhi Express", "from_station": "Mumbai", "to_station": "Delhi", "distance_km": 1400},
    {"name": "Chennai to Kolkata Mail", "from_station": "Chennai", "to_station": "Kolkata", "distance_km": 1650},
    {"name": "Kolkata to Chennai Mail", "from_station": "Kolkata", "to_station": "Chennai", "distance_km": 1650},
    {"name": "Bangalore to Hyderabad Express", "from_station": "Bangalore", "to_station": "Hyderabad", "distance_km": 575},
    {"name": "Hyderabad to Bangalore Express", "from_station": "Hyderabad", "to_station": "Bangalore", "distance_km": 575},
]


async def seed_routes(db: AsyncSession) -> int:
    """Insert the default routes if the table is empty.

    Returns:
        int: Number of routes inserted (0 when routes already exist)
    """
    existing = await db.scalar(select(func.count()).select_from(Route))
    if existing:
        logger.info(f"Database already contains {existing} routes. Skipping seed.")
        return 0

    db.add_all(Route(**route) for route in DEFAULT_ROUTES)
    await db.flush()
    logger.info(f"Seeded {len(DEFAULT_ROUTES)} routes")
    return len(DEFAULT_ROUTES)


async def _main() -> None:
    from app.database import close_db, get_db_context

    try:
        async with get_db_context() as db:
            await seed_routes(db)
    finally:
        await close_db()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(_main())
