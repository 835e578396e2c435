"""Tests for share links, the privacy-tiered projection and adoption."""

from datetime import date

import pytest
from sqlalchemy import select

from travel_inbox.core.errors import ForbiddenError, NotFoundError
from travel_inbox.models.items.saved_item import ItemCategory, SavedItem
from travel_inbox.models.trips.companion import Companion
from travel_inbox.models.trips.trip_item import TripItem
from travel_inbox.models.trips.trip_model import SharePrivacy, TripStatus
from travel_inbox.schemas.items.saved_item import SavedItemUpdate


@pytest.fixture
def shared_trip(db, new_trip, new_item, itinerary_service, owner):
    """Three-day trip with one placed and one unassigned item."""

    async def _create(start_date=date(2026, 4, 1), end_date=date(2026, 4, 3)):
        trip = await new_trip(start_date=start_date, end_date=end_date)
        sushi = await new_item("Sushi Dai", category=ItemCategory.restaurant, city="Tokyo", notes="go at 5am")
        temple = await new_item("Kiyomizu-dera", category=ItemCategory.activity, city="Kyoto")
        placed, _ = await itinerary_service.attach_item(db, trip.id, sushi.id, owner.id)
        await itinerary_service.attach_item(db, trip.id, temple.id, owner.id)
        if trip.status == TripStatus.scheduled:
            await itinerary_service.assign_to_day(db, trip.id, placed.id, 2, owner.id)
        return trip

    return _create


class TestGenerateLink:

    @pytest.mark.asyncio
    async def test_token_is_reused_across_tiers(self, db, share_service, shared_trip, owner):
        trip = await shared_trip()
        first = await share_service.generate_link(db, trip.id, owner.id, SharePrivacy.full)
        second = await share_service.generate_link(db, trip.id, owner.id, SharePrivacy.city_only)

        assert first.share_token == second.share_token
        assert second.share_privacy == SharePrivacy.city_only
        assert second.share_url.endswith(f"/s/{first.share_token}")

    @pytest.mark.asyncio
    async def test_only_owner_can_share(self, db, share_service, shared_trip, friend, stranger):
        trip = await shared_trip()
        db.add(Companion(trip_id=trip.id, user_id=friend.id))
        await db.commit()

        with pytest.raises(ForbiddenError):
            await share_service.generate_link(db, trip.id, friend.id, SharePrivacy.full)
        with pytest.raises(NotFoundError):
            await share_service.generate_link(db, trip.id, stranger.id, SharePrivacy.full)


class TestResolve:

    @pytest.mark.asyncio
    async def test_unknown_token(self, db, share_service):
        with pytest.raises(NotFoundError):
            await share_service.resolve(db, "does-not-exist")

    @pytest.mark.asyncio
    async def test_city_only(self, db, share_service, shared_trip, owner):
        trip = await shared_trip()
        link = await share_service.generate_link(db, trip.id, owner.id, SharePrivacy.city_only)

        view = await share_service.resolve(db, link.share_token)
        assert view.title == "Japan 2026"
        assert view.cities == ["Tokyo", "Kyoto"]
        assert view.start_date is None and view.end_date is None
        assert view.days is None and view.unassigned is None

    @pytest.mark.asyncio
    async def test_city_dates(self, db, share_service, shared_trip, owner):
        trip = await shared_trip()
        link = await share_service.generate_link(db, trip.id, owner.id, SharePrivacy.city_dates)

        view = await share_service.resolve(db, link.share_token)
        assert (view.start_date, view.end_date) == (date(2026, 4, 1), date(2026, 4, 3))
        assert view.days is None
        assert "Sushi Dai" not in view.model_dump_json()

    @pytest.mark.asyncio
    async def test_full(self, db, share_service, shared_trip, owner):
        trip = await shared_trip()
        link = await share_service.generate_link(db, trip.id, owner.id, SharePrivacy.full)

        view = await share_service.resolve(db, link.share_token)
        assert [day.day_index for day in view.days] == [1, 2, 3]
        assert view.days[1].date == date(2026, 4, 2)
        assert [i.title for i in view.days[1].items] == ["Sushi Dai"]
        assert view.days[1].items[0].notes == "go at 5am"
        assert [i.title for i in view.unassigned.items] == ["Kiyomizu-dera"]

    @pytest.mark.asyncio
    async def test_full_draft_trip_has_no_dates(self, db, share_service, shared_trip, owner):
        trip = await shared_trip(start_date=None, end_date=None)
        link = await share_service.generate_link(db, trip.id, owner.id, SharePrivacy.full)

        view = await share_service.resolve(db, link.share_token)
        assert view.start_date is None
        assert view.days == []
        assert len(view.unassigned.items) == 2

    @pytest.mark.asyncio
    async def test_never_exposes_owner_or_collaborators(self, db, share_service, shared_trip, owner):
        trip = await shared_trip()
        link = await share_service.generate_link(db, trip.id, owner.id, SharePrivacy.full)

        payload = (await share_service.resolve(db, link.share_token)).model_dump_json()
        assert owner.email not in payload
        assert "owner_id" not in payload

    @pytest.mark.asyncio
    async def test_edits_invalidate_cached_view(self, db, share_service, item_service, shared_trip, owner):
        trip = await shared_trip()
        link = await share_service.generate_link(db, trip.id, owner.id, SharePrivacy.full)
        await share_service.resolve(db, link.share_token)

        sushi = await db.scalar(select(SavedItem).where(SavedItem.title == "Sushi Dai"))
        await item_service.update_item(db, owner.id, sushi.id, SavedItemUpdate(title="Sushi Dai (Toyosu)"))

        view = await share_service.resolve(db, link.share_token)
        assert [i.title for i in view.days[1].items] == ["Sushi Dai (Toyosu)"]

    @pytest.mark.asyncio
    async def test_tier_change_applies_immediately(self, db, share_service, shared_trip, owner):
        trip = await shared_trip()
        link = await share_service.generate_link(db, trip.id, owner.id, SharePrivacy.full)
        await share_service.resolve(db, link.share_token)

        await share_service.generate_link(db, trip.id, owner.id, SharePrivacy.city_only)
        view = await share_service.resolve(db, link.share_token)
        assert view.privacy == SharePrivacy.city_only
        assert view.days is None

    @pytest.mark.asyncio
    async def test_anonymous_open_is_tracked(self, db, share_service, shared_trip, owner, analytics):
        trip = await shared_trip()
        link = await share_service.generate_link(db, trip.id, owner.id, SharePrivacy.city_only)
        await share_service.resolve(db, link.share_token)

        name, user_id, properties = analytics.events[-1]
        assert name == "share_link_opened"
        assert user_id is None
        assert properties["trip_id"] == trip.id


class TestAdopt:

    @pytest.mark.asyncio
    async def test_full_copy(self, db, share_service, shared_trip, owner, friend):
        trip = await shared_trip()
        link = await share_service.generate_link(db, trip.id, owner.id, SharePrivacy.full)

        adopted = await share_service.adopt(db, link.share_token, friend.id)
        assert adopted.forked_from_trip_id == trip.id
        assert adopted.items_copied == 2

        copies = await db.execute(
            select(TripItem.day_index, SavedItem.title, SavedItem.user_id)
            .join(SavedItem, SavedItem.id == TripItem.item_id)
            .where(TripItem.trip_id == adopted.trip_id)
            .order_by(SavedItem.title)
        )
        assert copies.all() == [(None, "Kiyomizu-dera", friend.id), (2, "Sushi Dai", friend.id)]

        originals = await db.execute(select(TripItem).where(TripItem.trip_id == trip.id))
        assert len(originals.scalars().all()) == 2

    @pytest.mark.asyncio
    async def test_city_tiers_copy_no_items(self, db, share_service, shared_trip, owner, friend):
        trip = await shared_trip()
        link = await share_service.generate_link(db, trip.id, owner.id, SharePrivacy.city_dates)

        adopted = await share_service.adopt(db, link.share_token, friend.id)
        assert adopted.items_copied == 0
