"""Fixtures for exercising the HTTP surface."""

import httpx
import pytest

from travel_inbox.core.database import get_db
from travel_inbox.core.redis_lifecycle import get_cache
from travel_inbox.core.security import create_access_token
from travel_inbox.main import app
from travel_inbox.routes.trip.companion_routes import get_companion_service
from travel_inbox.services.analytics.analytics_service import get_analytics
from travel_inbox.services.items.metadata_service import MetadataFetcher, get_metadata_fetcher

PREVIEW_PAGE = (
    "<html><head><meta property='og:title' content='Park Hyatt Tokyo'>"
    "<meta property='og:image' content='https://img.example.com/ph.jpg'></head></html>"
)


def _preview_handler(request: httpx.Request) -> httpx.Response:
    if request.url.host == "hotel.example.com":
        return httpx.Response(200, text=PREVIEW_PAGE)
    return httpx.Response(503)


@pytest.fixture
async def client(session_factory, cache, analytics, companion_service):
    """API client with the database, cache, analytics and mailer swapped out."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    preview_client = httpx.AsyncClient(transport=httpx.MockTransport(_preview_handler))

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cache] = lambda: cache
    app.dependency_overrides[get_analytics] = lambda: analytics
    app.dependency_overrides[get_companion_service] = lambda: companion_service
    app.dependency_overrides[get_metadata_fetcher] = lambda: MetadataFetcher(client=preview_client)

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as api:
        yield api

    await preview_client.aclose()
    app.dependency_overrides.clear()


def auth_headers(user) -> dict:
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def owner_headers(owner):
    return auth_headers(owner)


@pytest.fixture
def friend_headers(friend):
    return auth_headers(friend)


@pytest.fixture
def stranger_headers(stranger):
    return auth_headers(stranger)
