"""Tests for saved item capture, editing and archiving."""

import pytest

from travel_inbox.core.errors import InvalidInputError, NotFoundError
from travel_inbox.models.items.saved_item import ItemCategory, SourceType
from travel_inbox.schemas.items.saved_item import (
    ManualSource, SavedItemCreate, SavedItemUpdate, ScreenshotSource, UrlSource
)


class TestCreateItem:

    @pytest.mark.asyncio
    async def test_url_item_is_normalized(self, db, item_service, owner, analytics):
        payload = SavedItemCreate(
            source=UrlSource(source_url="tabelog.com/tokyo/A1301", site_name="Tabelog"),
            title="  Sushi Saito ",
            category=ItemCategory.restaurant,
            city=" Tokyo ",
            tags=["sushi", " sushi", "", "omakase"],
        )
        item = await item_service.create_item(db, owner.id, payload)

        assert item.source_type == SourceType.url
        assert item.source_url == "https://tabelog.com/tokyo/A1301"
        assert item.title == "Sushi Saito"
        assert item.city == "Tokyo"
        assert item.tags == ["sushi", "omakase"]
        assert item.is_archived is False
        assert analytics.names() == ["save_created"]

    @pytest.mark.asyncio
    async def test_url_item_without_title_uses_url(self, db, item_service, owner):
        payload = SavedItemCreate(source=UrlSource(source_url="https://example.com/onsen"))
        item = await item_service.create_item(db, owner.id, payload)
        assert item.title == "https://example.com/onsen"

    @pytest.mark.asyncio
    async def test_untitled_placeholder(self, db, item_service, owner):
        manual = await item_service.create_item(db, owner.id, SavedItemCreate(source=ManualSource(), title="   "))
        shot = await item_service.create_item(
            db, owner.id, SavedItemCreate(source=ScreenshotSource(image_url="uploads/1.png"))
        )
        assert manual.title == "Untitled"
        assert shot.title == "Untitled"
        assert shot.image_url == "uploads/1.png"
        assert manual.category == ItemCategory.general

    @pytest.mark.asyncio
    async def test_bad_url_rejected(self, db, item_service, owner):
        with pytest.raises(InvalidInputError):
            await item_service.create_item(db, owner.id, SavedItemCreate(source=UrlSource(source_url="nope")))


class TestListAndEdit:

    @pytest.mark.asyncio
    async def test_list_hides_archived_and_other_users(self, db, item_service, new_item, owner, stranger):
        kept = await new_item("Kept")
        archived = await new_item("Archived")
        await new_item("Not mine", user=stranger)
        await item_service.archive_item(db, owner.id, archived.id)

        visible = await item_service.list_items(db, owner.id)
        everything = await item_service.list_items(db, owner.id, include_archived=True)

        assert [i.id for i in visible] == [kept.id]
        assert {i.id for i in everything} == {kept.id, archived.id}

    @pytest.mark.asyncio
    async def test_archive_is_idempotent(self, db, item_service, new_item, owner):
        item = await new_item()
        first = await item_service.archive_item(db, owner.id, item.id)
        second = await item_service.archive_item(db, owner.id, item.id)
        assert first.is_archived and second.is_archived

    @pytest.mark.asyncio
    async def test_update_fields(self, db, item_service, new_item, owner):
        item = await new_item()
        updated = await item_service.update_item(
            db, owner.id, item.id,
            SavedItemUpdate(category=ItemCategory.activity, city="Kyoto", notes="  ")
        )
        assert updated.category == ItemCategory.activity
        assert updated.city == "Kyoto"
        assert updated.notes is None
        assert updated.title == "Ichiran Ramen"

    @pytest.mark.asyncio
    async def test_other_users_item_is_not_found(self, db, item_service, new_item, stranger):
        item = await new_item()
        with pytest.raises(NotFoundError):
            await item_service.get_item(db, stranger.id, item.id)
        with pytest.raises(NotFoundError):
            await item_service.update_item(db, stranger.id, item.id, SavedItemUpdate(city="Nara"))
