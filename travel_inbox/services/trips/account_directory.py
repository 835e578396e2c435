from typing import Optional
from sqlalchemy import func
from sqlalchemy.future import select
from travel_inbox.core.database import SessionLocal
from travel_inbox.models.user.user import User


class AccountDirectory:
    """Account lookup by email that is not scoped to the caller.

    Runs on its own session and only answers whether an account exists (id or
    None). Only CompanionService calls it.
    """

    def __init__(self, session_factory=SessionLocal):
        self._session_factory = session_factory

    async def find_by_email(self, email: str) -> Optional[int]:
        normalized = email.strip().lower()
        async with self._session_factory() as session:
            result = await session.execute(
                select(User.id).where(func.lower(User.email) == normalized).order_by(User.id)
            )
            return result.scalars().first()
