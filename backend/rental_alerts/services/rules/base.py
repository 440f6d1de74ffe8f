"""Shared shape of a detection rule: query, batch-dedup, render, write."""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..alert_writer import AlertWriter, alert_writer
from ..deduplicator import Deduplicator, deduplicator
from ...utils.timeutils import utcnow

logger = logging.getLogger(__name__)


@dataclass
class AlertDraft:
    """A rendered alert waiting to be written."""
    entity_id: str
    severity: str
    title: str
    message: str
    metadata: dict = field(default_factory=dict)
    # Business writes committed together with the alert
    statements: list = field(default_factory=list)


class DetectionRule:
    """Base class for the detection rules.
    
    Subclasses set ``name``, ``alert_type`` and ``entity_type`` and implement
    ``find_candidates`` and ``render``. ``run`` owns the session, captures
    ``now`` once, and guarantees the dedup lookup happens before any write.
    """
    
    name: str = ""
    alert_type: str = ""
    entity_type: str = ""
    
    def __init__(
        self,
        session_factory: Optional[async_sessionmaker] = None,
        dedup: Deduplicator = deduplicator,
        writer: AlertWriter = alert_writer,
    ):
        if session_factory is None:
            from ...database import async_session
            session_factory = async_session
        self.session_factory = session_factory
        self.dedup = dedup
        self.writer = writer
    
    async def find_candidates(self, session: AsyncSession, now: datetime) -> Sequence[Any]:
        raise NotImplementedError
    
    def entity_key(self, candidate: Any) -> str:
        return str(candidate.id)
    
    def render(self, candidate: Any, now: datetime) -> AlertDraft:
        raise NotImplementedError
    
    async def handle_suppressed(self, session: AsyncSession, candidates: Sequence[Any], now: datetime):
        """Hook for rules that act on candidates that already have an alert."""
    
    async def run(self, now: Optional[datetime] = None) -> int:
        """Scan current state once and return the number of alerts created.
        
        Read and dedup failures propagate so the caller can report the rule
        as failed. A failed insert only loses that one alert for this pass.
        """
        now = now or utcnow()
        
        async with self.session_factory() as session:
            candidates = await self.find_candidates(session, now)
            if not candidates:
                logger.debug(f"[{self.name}] no candidates")
                return 0
            
            suppressed = await self.dedup.suppressed_ids(
                session,
                self.alert_type,
                self.entity_type,
                [self.entity_key(c) for c in candidates],
                now,
            )
            
            # Render everything up front; a rollback after a failed insert
            # expires the loaded rows.
            drafts: List[AlertDraft] = [
                self.render(c, now) for c in candidates
                if self.entity_key(c) not in suppressed
            ]
            await self.handle_suppressed(
                session, [c for c in candidates if self.entity_key(c) in suppressed], now
            )
            
            created = 0
            for draft in drafts:
                if await self._write(session, draft):
                    created += 1
        
        logger.info(
            f"[{self.name}] {created} alert(s) created "
            f"({len(candidates)} candidate(s), {len(suppressed)} suppressed)"
        )
        return created
    
    async def _write(self, session: AsyncSession, draft: AlertDraft) -> bool:
        try:
            await self.writer.create(
                session,
                alert_type=self.alert_type,
                severity=draft.severity,
                title=draft.title,
                message=draft.message,
                entity_type=self.entity_type,
                entity_id=draft.entity_id,
                metadata=draft.metadata,
                statements=draft.statements,
            )
            return True
        except SQLAlchemyError as e:
            logger.error(f"[{self.name}] failed to write alert for {self.entity_type} {draft.entity_id}: {e}")
            await session.rollback()
            return False


def fmt_date(value: Optional[datetime]) -> str:
    return value.strftime("%Y-%m-%d") if value else "-"
