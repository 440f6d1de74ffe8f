"""Deduplicator - batched suppression check against existing alerts.

A candidate is suppressed when an alert with the same
(alert_type, entity_type, entity_id) is still unresolved, or was created
within the last DEDUP_WINDOW whether resolved or not. Each rule invocation
issues exactly one lookup for all of its candidates.
"""
import logging
from datetime import datetime, timedelta
from typing import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from .alert_store import AlertStore, alert_store

logger = logging.getLogger(__name__)

DEDUP_WINDOW = timedelta(hours=24)


class Deduplicator:
    """Decides which candidate entities already have an equivalent alert."""
    
    def __init__(self, store: AlertStore = alert_store):
        self.store = store
    
    async def suppressed_ids(
        self,
        session: AsyncSession,
        alert_type: str,
        entity_type: str,
        entity_ids: Iterable[str],
        now: datetime,
    ) -> set[str]:
        """Return the subset of ``entity_ids`` that must not be alerted again.
        
        Errors propagate: a rule must never write without this check.
        """
        candidate_ids = {str(entity_id) for entity_id in entity_ids}
        if not candidate_ids:
            return set()
        
        suppressed = await self.store.existing_entity_ids(
            session,
            alert_type,
            entity_type,
            candidate_ids,
            created_since=now - DEDUP_WINDOW,
        )
        if suppressed:
            logger.debug(
                f"{len(suppressed)}/{len(candidate_ids)} {alert_type}/{entity_type} candidates suppressed"
            )
        return suppressed


deduplicator = Deduplicator()
