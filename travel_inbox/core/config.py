from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./travel_inbox.db"
    JWT_SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 20

    SMTP_HOST: str = "localhost"
    SMTP_PORT: int = 465
    SMTP_USER: str = "noreply@travelinbox.app"
    SMTP_PASSWORD: str = ""
    SMTP_TIMEOUT_SECONDS: float = 8.0
    FRONTEND_BASE_URL: str = "http://localhost:5173"

    # Redis settings
    REDIS_URL: str = "redis://localhost:6379/0"
    SHARED_TRIP_CACHE_TTL_SECONDS: int = 900

    # Link previews
    METADATA_FETCH_TIMEOUT_SECONDS: float = 10.0
    METADATA_USER_AGENT: str = "Mozilla/5.0 (compatible; TravelInbox/1.0; +https://travelinbox.app)"

    SHARE_TOKEN_BYTES: int = 16

    PROJECT_NAME: str = "Travel Inbox API"
    PROJECT_VERSION: str = "1.0.0"
    PROJECT_DESCRIPTION: str = "Save travel inspiration, organize it into trips and share them"
    APP_NAME: str = "Travel Inbox"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
