import asyncio
from typing import Any, Dict, Optional, Set
from travel_inbox.core.database import SessionLocal
from travel_inbox.core.logger import logger
from travel_inbox.models.analytics.analytics_event import AnalyticsEvent


class AnalyticsService:
    """Fire-and-forget product analytics. Nothing here ever raises into the
    caller; failed inserts are logged and dropped."""

    def __init__(self, session_factory=SessionLocal):
        self._session_factory = session_factory
        self._pending: Set[asyncio.Task] = set()

    async def record(self, event_name: str, user_id: Optional[int] = None,
                     properties: Optional[Dict[str, Any]] = None) -> None:
        try:
            async with self._session_factory() as session:
                session.add(AnalyticsEvent(
                    event_name=event_name,
                    user_id=user_id,
                    properties=properties or None,
                ))
                await session.commit()
        except Exception as e:
            logger.error(f"[analytics] {event_name} failed: {e}")

    def track(self, event_name: str, user_id: Optional[int] = None,
              properties: Optional[Dict[str, Any]] = None) -> None:
        """Schedule record() without waiting for it."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning(f"[analytics] no running loop, dropped {event_name}")
            return

        task = loop.create_task(self.record(event_name, user_id, properties))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def drain(self) -> None:
        """Wait for in-flight events; used on shutdown."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


analytics = AnalyticsService()


def get_analytics() -> AnalyticsService:
    return analytics
