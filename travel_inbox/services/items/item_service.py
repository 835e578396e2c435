from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from travel_inbox.core.cache import RedisCache
from travel_inbox.core.errors import NotFoundError
from travel_inbox.core.logger import logger
from travel_inbox.models.items.saved_item import SavedItem, SourceType
from travel_inbox.models.trips.trip_item import TripItem
from travel_inbox.schemas.items.saved_item import (
    SavedItemCreate, SavedItemUpdate, UrlSource, ScreenshotSource
)
from travel_inbox.services.analytics.analytics_service import AnalyticsService
from travel_inbox.services.items.metadata_service import normalize_url
from travel_inbox.services.trips.trip_cache import invalidate_trips

PLACEHOLDER_TITLE = "Untitled"


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _clean_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    if tags is None:
        return None
    seen = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in seen:
            seen.append(tag)
    return seen or None


class ItemService:
    def __init__(self, cache: RedisCache, analytics: AnalyticsService):
        self.cache = cache
        self.analytics = analytics

    async def create_item(self, db: AsyncSession, user_id: int, item_data: SavedItemCreate) -> SavedItem:
        source = item_data.source
        item = SavedItem(
            user_id=user_id,
            source_type=SourceType(source.source_type),
            category=item_data.category,
            city=_clean(item_data.city),
            notes=_clean(item_data.notes),
            tags=_clean_tags(item_data.tags),
            is_archived=False,
        )

        title = _clean(item_data.title)
        if isinstance(source, UrlSource):
            item.source_url = normalize_url(source.source_url)
            item.image_url = _clean(source.image_url)
            item.description = _clean(source.description)
            item.site_name = _clean(source.site_name)
            title = title or item.source_url
        elif isinstance(source, ScreenshotSource):
            item.image_url = source.image_url
        item.title = title or PLACEHOLDER_TITLE

        db.add(item)
        await db.commit()
        await db.refresh(item)

        logger.info(f"Saved item {item.id} ({item.source_type.value}) created by user {user_id}")
        self.analytics.track("save_created", user_id, {
            "item_id": item.id,
            "source_type": item.source_type.value,
            "category": item.category.value,
        })
        return item

    async def get_item(self, db: AsyncSession, user_id: int, item_id: int) -> SavedItem:
        result = await db.execute(
            select(SavedItem).where(SavedItem.id == item_id, SavedItem.user_id == user_id)
        )
        item = result.scalar_one_or_none()
        if not item:
            logger.warning(f"Saved item {item_id} not found for user {user_id}")
            raise NotFoundError("Item not found")
        return item

    async def list_items(self, db: AsyncSession, user_id: int, include_archived: bool = False) -> List[SavedItem]:
        query = select(SavedItem).where(SavedItem.user_id == user_id)
        if not include_archived:
            query = query.where(SavedItem.is_archived.is_(False))
        result = await db.execute(
            query.order_by(SavedItem.created_at.desc(), SavedItem.id.desc())
        )
        return list(result.scalars().all())

    async def update_item(self, db: AsyncSession, user_id: int, item_id: int, item_data: SavedItemUpdate) -> SavedItem:
        item = await self.get_item(db, user_id, item_id)

        update_data = item_data.model_dump(exclude_unset=True)
        if "title" in update_data:
            update_data["title"] = _clean(update_data["title"]) or PLACEHOLDER_TITLE
        for key in ("city", "notes"):
            if key in update_data:
                update_data[key] = _clean(update_data[key])
        if "tags" in update_data:
            update_data["tags"] = _clean_tags(update_data["tags"])
        if update_data.get("category") is None:
            update_data.pop("category", None)

        for key, value in update_data.items():
            setattr(item, key, value)

        await db.commit()
        await db.refresh(item)

        await self._invalidate_trips_containing(db, item.id)
        logger.info(f"Saved item {item_id} updated by user {user_id}")
        return item

    async def archive_item(self, db: AsyncSession, user_id: int, item_id: int) -> SavedItem:
        item = await self.get_item(db, user_id, item_id)
        if not item.is_archived:
            item.is_archived = True
            await db.commit()
            await db.refresh(item)
            logger.info(f"Saved item {item_id} archived by user {user_id}")
        return item

    async def _invalidate_trips_containing(self, db: AsyncSession, item_id: int) -> None:
        result = await db.execute(select(TripItem.trip_id).where(TripItem.item_id == item_id))
        trip_ids = list(result.scalars().all())
        if trip_ids:
            await invalidate_trips(self.cache, *trip_ids)
