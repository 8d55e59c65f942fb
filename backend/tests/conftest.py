"""Shared test configuration and fixtures.

Every test gets a fresh in-memory SQLite database (aiosqlite + StaticPool)
built from the model metadata, and a session wrapped in a transaction that
rolls back after the test.  No external database is required.
"""

import uuid
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import timedelta
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401  (populate Base.metadata)
from app.auth.jwt import create_token_pair
from app.auth.passwords import hash_password
from app.config import settings
from app.database import Base, get_db
from app.main import app
from app.models.booking import Booking, BookingStatus
from app.models.property import Property
from app.models.user import User
from app.services.booking_service import BookingService, calculate_total_price, utc_today
from app.services.notifications import NotificationEvent

# Minimum bcrypt cost keeps user fixtures fast
settings.bcrypt_rounds = 4

TEST_PASSWORD = "testpass123"


# ---------------------------------------------------------------------------
# Notification capture
# ---------------------------------------------------------------------------


class RecordingNotifier:
    """Notification sink that remembers what it was asked to send."""

    def __init__(self) -> None:
        self.events: list[tuple[NotificationEvent, uuid.UUID]] = []

    def notify(self, event: NotificationEvent, booking: Booking) -> None:
        self.events.append((event, booking.id))

    @property
    def kinds(self) -> list[NotificationEvent]:
        return [event for event, _ in self.events]


# ---------------------------------------------------------------------------
# Database: fresh in-memory SQLite per test, transactional rollback
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def db_connection(test_engine) -> AsyncGenerator[AsyncConnection, None]:
    async with test_engine.connect() as connection:
        transaction = await connection.begin()
        try:
            yield connection
        finally:
            await transaction.rollback()


@pytest_asyncio.fixture
async def db_session(db_connection: AsyncConnection) -> AsyncGenerator[AsyncSession, None]:
    """Yield an async session inside a transaction that always rolls back."""
    session = AsyncSession(bind=db_connection, expire_on_commit=False)
    try:
        yield session
    finally:
        await session.close()


@pytest.fixture
def session_factory(db_connection: AsyncConnection) -> async_sessionmaker[AsyncSession]:
    """Session factory sharing the test transaction (for the sweeper)."""
    return async_sessionmaker(bind=db_connection, expire_on_commit=False)


# ---------------------------------------------------------------------------
# Booking engine and HTTP client
# ---------------------------------------------------------------------------


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def booking_service(notifier: RecordingNotifier) -> BookingService:
    return BookingService(notifier)


@pytest_asyncio.fixture
async def client(db_session: AsyncSession, booking_service: BookingService) -> AsyncGenerator[AsyncClient, None]:
    """Provide an httpx AsyncClient wired to the test DB session and booking engine."""

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session
        await db_session.commit()

    app.dependency_overrides[get_db] = override_get_db
    previous_service = app.state.booking_service
    app.state.booking_service = booking_service

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac

    app.state.booking_service = previous_service
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


async def _create_user(db: AsyncSession, first_name: str, *, is_host: bool = False, is_active: bool = True) -> User:
    unique = uuid.uuid4().hex[:8]
    user = User(
        email=f"{first_name.lower()}-{unique}@test.com",
        hashed_password=hash_password(TEST_PASSWORD),
        first_name=first_name,
        last_name="Tester",
        is_host=is_host,
        is_active=is_active,
    )
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


def headers_for(user: User) -> dict[str, str]:
    tokens = create_token_pair(str(user.id), user.is_host)
    return {"Authorization": f"Bearer {tokens['access_token']}"}


@pytest_asyncio.fixture
async def host_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "Hannah", is_host=True)


@pytest_asyncio.fixture
async def guest_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "Gary")


@pytest_asyncio.fixture
async def other_user(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "Olive")


@pytest_asyncio.fixture
async def other_host(db_session: AsyncSession) -> User:
    return await _create_user(db_session, "Oscar", is_host=True)


@pytest.fixture
def host_headers(host_user: User) -> dict[str, str]:
    return headers_for(host_user)


@pytest.fixture
def guest_headers(guest_user: User) -> dict[str, str]:
    return headers_for(guest_user)


@pytest.fixture
def other_headers(other_user: User) -> dict[str, str]:
    return headers_for(other_user)


# ---------------------------------------------------------------------------
# Properties and bookings
# ---------------------------------------------------------------------------


async def create_property(db: AsyncSession, host: User, **overrides) -> Property:
    data = {
        "title": "Seaside Cottage",
        "description": "Two bedrooms a short walk from the beach.",
        "property_type": "House",
        "price_per_night": Decimal("200.00"),
        "cleaning_fee": Decimal("40.00"),
        "bedrooms": 2,
        "bathrooms": Decimal("1.5"),
        "max_guests": 4,
        "address": "1 Shore Road",
        "city": "Brighton",
        "country": "United Kingdom",
        "amenities": ["wifi", "kitchen"],
        "images": ["https://img.test/cottage.jpg"],
    }
    data.update(overrides)
    prop = Property(host_id=host.id, **data)
    db.add(prop)
    await db.flush()
    await db.refresh(prop)
    return prop


@pytest_asyncio.fixture
async def test_property(db_session: AsyncSession, host_user: User) -> Property:
    """pricePerNight=200, cleaningFee=40, maxGuests=4."""
    return await create_property(db_session, host_user)


MakeBooking = Callable[..., Awaitable[Booking]]


@pytest.fixture
def make_booking(db_session: AsyncSession, test_property: Property, guest_user: User) -> MakeBooking:
    """Insert a booking row directly, bypassing lifecycle checks.

    ``start`` is the check-in offset in days from today (UTC).
    """

    async def _make(
        *,
        start: int = 10,
        nights: int = 3,
        status: BookingStatus = BookingStatus.PENDING,
        prop: Property | None = None,
        guest: User | None = None,
        number_of_guests: int = 2,
    ) -> Booking:
        prop = prop or test_property
        check_in = utc_today() + timedelta(days=start)
        check_out = check_in + timedelta(days=nights)
        booking = Booking(
            property_id=prop.id,
            guest_id=(guest or guest_user).id,
            check_in=check_in,
            check_out=check_out,
            number_of_guests=number_of_guests,
            total_price=calculate_total_price(prop, check_in, check_out),
            status=status.value,
        )
        db_session.add(booking)
        await db_session.flush()
        await db_session.refresh(booking)
        return booking

    return _make


@pytest.fixture
def auth_headers_for() -> Callable[[User], dict[str, str]]:
    return headers_for


@pytest.fixture
def property_factory(db_session: AsyncSession) -> Callable[..., Awaitable[Property]]:
    async def _make(host: User, **overrides) -> Property:
        return await create_property(db_session, host, **overrides)

    return _make
