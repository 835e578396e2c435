# travel_inbox/routes/__init__.py
from fastapi import APIRouter
from travel_inbox.routes.items import item_routes
from travel_inbox.routes.trip import trip_routes, itinerary_routes, companion_routes, collaboration_routes
from travel_inbox.routes.sharing import share_routes

api_router = APIRouter()

# Saved item routes
api_router.include_router(item_routes.router)

# Trip routes
api_router.include_router(trip_routes.router)
api_router.include_router(itinerary_routes.router)
api_router.include_router(companion_routes.router)
api_router.include_router(collaboration_routes.router)

# Public share links
api_router.include_router(share_routes.router)
