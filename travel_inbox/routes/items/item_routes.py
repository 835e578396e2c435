from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from travel_inbox.core.database import get_db
from travel_inbox.core.redis_lifecycle import get_cache
from travel_inbox.dependencies.auth import get_current_user
from travel_inbox.models.user.user import User
from travel_inbox.schemas.items.saved_item import (
    SavedItemCreate, SavedItemUpdate, SavedItemResponse, LinkPreviewRequest, LinkPreview
)
from travel_inbox.services.analytics.analytics_service import get_analytics
from travel_inbox.services.items.item_service import ItemService
from travel_inbox.services.items.metadata_service import MetadataFetcher, get_metadata_fetcher, normalize_url

router = APIRouter(prefix="/items", tags=["Saved Items"])


async def get_item_service(
    cache=Depends(get_cache),
    analytics=Depends(get_analytics)
) -> ItemService:
    return ItemService(cache, analytics)


@router.post("/preview", response_model=LinkPreview)
async def preview_link(
    payload: LinkPreviewRequest,
    current_user: User = Depends(get_current_user),
    fetcher: MetadataFetcher = Depends(get_metadata_fetcher)
):
    return await fetcher.fetch_preview(normalize_url(payload.url))


@router.post("", response_model=SavedItemResponse, status_code=201)
async def create_item_route(
    item: SavedItemCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    item_service: ItemService = Depends(get_item_service)
):
    return await item_service.create_item(db, current_user.id, item)


@router.get("", response_model=list[SavedItemResponse])
async def list_items_route(
    include_archived: bool = False,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    item_service: ItemService = Depends(get_item_service)
):
    return await item_service.list_items(db, current_user.id, include_archived)


@router.get("/{item_id}", response_model=SavedItemResponse)
async def get_item_route(
    item_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    item_service: ItemService = Depends(get_item_service)
):
    return await item_service.get_item(db, current_user.id, item_id)


@router.patch("/{item_id}", response_model=SavedItemResponse)
async def update_item_route(
    item_id: int,
    item_update: SavedItemUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    item_service: ItemService = Depends(get_item_service)
):
    return await item_service.update_item(db, current_user.id, item_id, item_update)


@router.post("/{item_id}/archive", response_model=SavedItemResponse)
async def archive_item_route(
    item_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
    item_service: ItemService = Depends(get_item_service)
):
    return await item_service.archive_item(db, current_user.id, item_id)
