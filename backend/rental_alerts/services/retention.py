"""Retention sweeper - purges expired alerts and long-resolved alerts."""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import async_sessionmaker

from ..models import Alert
from ..utils.timeutils import utcnow
from .alert_store import AlertStore, alert_store

logger = logging.getLogger(__name__)

RETENTION_WINDOW = timedelta(days=30)


@dataclass
class CleanupResult:
    expired_deleted: int = 0
    old_resolved_deleted: int = 0
    
    @property
    def total(self) -> int:
        return self.expired_deleted + self.old_resolved_deleted


class RetentionSweeper:
    """Deletes alerts past their explicit expiry or resolved for over 30 days.
    
    Unresolved alerts without an expiry are never deleted.
    """
    
    def __init__(
        self,
        session_factory: Optional[async_sessionmaker] = None,
        store: AlertStore = alert_store,
    ):
        if session_factory is None:
            from ..database import async_session
            session_factory = async_session
        self.session_factory = session_factory
        self.store = store
    
    async def _delete(self, label: str, *criteria) -> int:
        async with self.session_factory() as session:
            try:
                return await self.store.delete_where(session, *criteria)
            except SQLAlchemyError as e:
                # Retried on the next scheduled sweep
                logger.error(f"Failed to delete {label} alerts: {e}")
                await session.rollback()
                return 0
    
    async def cleanup(self, now: Optional[datetime] = None) -> CleanupResult:
        """Run both deletes independently and report what was removed."""
        now = now or utcnow()
        
        expired = await self._delete(
            "expired",
            Alert.expires_at.is_not(None),
            Alert.expires_at < now,
        )
        old_resolved = await self._delete(
            "old resolved",
            Alert.is_resolved.is_(True),
            Alert.resolved_at < now - RETENTION_WINDOW,
        )
        
        result = CleanupResult(expired_deleted=expired, old_resolved_deleted=old_resolved)
        logger.info(
            f"Alert cleanup complete: expired={result.expired_deleted} "
            f"old_resolved={result.old_resolved_deleted} total={result.total}"
        )
        return result


retention_sweeper = RetentionSweeper()
