from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from travel_inbox.core.config import settings
from travel_inbox.core.database import init_db
from travel_inbox.core.logger import logger
from travel_inbox.routes import api_router
from travel_inbox.core.redis_lifecycle import init_redis_client, close_redis
from travel_inbox.services.analytics.analytics_service import analytics

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    description=settings.PROJECT_DESCRIPTION,
    openapi_url=f"/openapi.json"
)

# Set all CORS enabled origins
app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=r"^(http:\/\/localhost(:\d{1,5})?|http:\/\/127\.0\.0\.1(:\d{1,5})?)$",
    allow_origins=[settings.FRONTEND_BASE_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Include all API routes
app.include_router(api_router)

@app.get("/")
async def root():
    return {"message": f"Welcome to {settings.APP_NAME} API"}

@app.get("/health")
async def health_check():
    return {"status": "healthy"}

@app.on_event("startup")
async def startup_event():
    await init_db()
    await init_redis_client()
    logger.info(f"{settings.APP_NAME} started")

@app.on_event("shutdown")
async def shutdown_event():
    await analytics.drain()
    await close_redis()
