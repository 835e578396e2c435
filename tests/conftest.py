"""Pytest configuration and fixtures for testing."""

from typing import Any, Dict, List, Optional, Tuple

import pytest
from fakeredis import FakeServer, aioredis
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import sessionmaker

from travel_inbox.core.cache import RedisCache
from travel_inbox.core.database import Base, create_engine_for
from travel_inbox.models.user.user import User
from travel_inbox.schemas.items.saved_item import ManualSource, SavedItemCreate
from travel_inbox.schemas.trip.trip_schema import TripCreate
from travel_inbox.services.itineraries.itinerary_service import ItineraryService
from travel_inbox.services.items.item_service import ItemService
from travel_inbox.services.sharing.share_service import ShareService
from travel_inbox.services.trips.account_directory import AccountDirectory
from travel_inbox.services.trips.companion_service import CompanionService
from travel_inbox.services.trips.trip_service import TripService

import travel_inbox.models  # noqa: F401


class RecordingAnalytics:
    """Stands in for AnalyticsService; keeps events in memory."""

    def __init__(self):
        self.events: List[Tuple[str, Optional[int], Dict[str, Any]]] = []

    def track(self, event_name, user_id=None, properties=None):
        self.events.append((event_name, user_id, properties or {}))

    async def record(self, event_name, user_id=None, properties=None):
        self.track(event_name, user_id, properties)

    async def drain(self):
        return None

    def names(self) -> List[str]:
        return [name for name, _, _ in self.events]


class FakeMailer:
    """Records invitations instead of talking to SMTP."""

    def __init__(self, succeed: bool = True):
        self.succeed = succeed
        self.sent: List[Tuple[str, str, Optional[str]]] = []

    async def send_invite(self, invitee_email, redirect_to, trip_name=None):
        if not self.succeed:
            return False
        self.sent.append((invitee_email, redirect_to, trip_name))
        return True


@pytest.fixture(scope="function")
async def test_engine(tmp_path):
    """File-backed SQLite so separate sessions see the same data."""
    engine = create_engine_for(f"sqlite+aiosqlite:///{tmp_path / 'travel_inbox_test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture(scope="function")
def session_factory(test_engine):
    return sessionmaker(bind=test_engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture(scope="function")
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture(scope="function")
async def cache():
    client = aioredis.FakeRedis(server=FakeServer(), decode_responses=True)
    yield RedisCache(client)
    await client.flushall()


@pytest.fixture
def analytics():
    return RecordingAnalytics()


@pytest.fixture
def mailer():
    return FakeMailer()


async def make_user(db: AsyncSession, email: str, display_name: Optional[str] = None) -> User:
    user = User(email=email, display_name=display_name)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest.fixture
async def owner(db):
    return await make_user(db, "owner@example.com", "Olivia")


@pytest.fixture
async def friend(db):
    return await make_user(db, "friend@example.com", "Farid")


@pytest.fixture
async def stranger(db):
    return await make_user(db, "stranger@example.com")


@pytest.fixture
def item_service(cache, analytics):
    return ItemService(cache, analytics)


@pytest.fixture
def trip_service(cache, analytics):
    return TripService(cache, analytics)


@pytest.fixture
def itinerary_service(cache, analytics):
    return ItineraryService(cache, analytics)


@pytest.fixture
def share_service(cache, analytics):
    return ShareService(cache, analytics)


@pytest.fixture
def companion_service(session_factory, mailer, analytics):
    return CompanionService(AccountDirectory(session_factory), mailer, analytics)


@pytest.fixture
def new_item(db, item_service, owner):
    """Factory for manual saved items owned by `owner` unless told otherwise."""

    async def _create(title="Ichiran Ramen", user=None, **fields):
        payload = SavedItemCreate(source=ManualSource(), title=title, **fields)
        return await item_service.create_item(db, (user or owner).id, payload)

    return _create


@pytest.fixture
def new_trip(db, trip_service, owner):
    async def _create(title="Japan 2026", start_date=None, end_date=None, user=None):
        payload = TripCreate(title=title, start_date=start_date, end_date=end_date)
        return await trip_service.create_trip(db, payload, (user or owner).id)

    return _create


@pytest.fixture
def new_user(db):
    async def _create(email, display_name=None):
        return await make_user(db, email, display_name)

    return _create
