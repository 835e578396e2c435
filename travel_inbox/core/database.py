from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from travel_inbox.core.config import settings

Base = declarative_base()


def create_engine_for(db_url: str, **kwargs):
    """Create an async engine. SQLite connections get PRAGMA foreign_keys=ON."""
    engine = create_async_engine(db_url, echo=False, **kwargs)

    if engine.dialect.name == "sqlite":
        @event.listens_for(engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


engine = create_engine_for(settings.DATABASE_URL)
SessionLocal = sessionmaker(
    bind=engine,
    expire_on_commit=False,
    class_=AsyncSession
)


async def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        await db.close()


async def init_db():
    import travel_inbox.models  # noqa: F401  register tables

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
