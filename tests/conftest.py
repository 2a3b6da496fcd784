import os

os.environ.setdefault("DATABASE_URL_OVERRIDE", "sqlite+aiosqlite://")
os.environ.setdefault("SEED_ROUTES_ON_STARTUP", "false")

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import app.models  # noqa: F401
from app.api.deps import get_booking_service
from app.core.middleware import booking_limiter, login_limiter, register_limiter
from app.core.security import get_password_hash
from app.database import Base, get_db
from app.main import app as fastapi_app
from app.models.route import Route
from app.models.user import User
from app.schemas.booking import BookingDetails
from app.seed import seed_routes
from app.services.booking_service import BookingService
from app.services.seat_service import SeatService


class FakeNotifier:
    """Records notification calls instead of sending email."""

    def __init__(self) -> None:
        self.confirmed: list[BookingDetails] = []
        self.cancelled: list[BookingDetails] = []

    def notify_booking_confirmed(self, booking: BookingDetails) -> None:
        self.confirmed.append(booking)

    def notify_booking_cancelled(self, booking: BookingDetails) -> None:
        self.cancelled.append(booking)


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")

    # pysqlite's own transaction handling breaks SAVEPOINT; emit BEGIN ourselves
    @event.listens_for(engine.sync_engine, "connect")
    def _connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        # Readers must not block request sessions writing to the same file
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        await seed_routes(session)
        await session.commit()
        yield session


@pytest.fixture
async def routes(db) -> dict[str, Route]:
    result = await db.execute(select(Route))
    routes = {route.name: route for route in result.scalars().all()}
    await db.commit()
    return routes


@pytest.fixture
def delhi_mumbai(routes) -> Route:
    return routes["Delhi to Mumbai Express"]


@pytest.fixture
def bangalore_hyderabad(routes) -> Route:
    return routes["Bangalore to Hyderabad Express"]


async def make_user(db: AsyncSession, username: str) -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        password_hash=get_password_hash("secret123"),
    )
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
async def alice(db) -> User:
    return await make_user(db, "alice")


@pytest.fixture
async def bob(db) -> User:
    return await make_user(db, "bob")


@pytest.fixture
async def carol(db) -> User:
    return await make_user(db, "carol")


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def service(notifier) -> BookingService:
    return BookingService(seats=SeatService(), notifier=notifier)


@pytest.fixture
async def client(db, session_maker, service) -> AsyncGenerator[AsyncClient, None]:
    async def _get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    fastapi_app.dependency_overrides[get_db] = _get_db
    fastapi_app.dependency_overrides[get_booking_service] = lambda: service
    for limiter in (booking_limiter, login_limiter, register_limiter):
        fastapi_app.dependency_overrides[limiter] = lambda: None

    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    fastapi_app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client):
    """Register a user through the API and return bearer auth headers."""

    async def _register(username: str, password: str = "secret123") -> dict[str, str]:
        response = await client.post(
            "/api/v1/auth/register",
            json={"username": username, "email": f"{username}@example.com", "password": password},
        )
        assert response.status_code == 201, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _register
