"""Alert store - the queries the engine and its consumers run on the alerts table."""
import json
import logging
from datetime import datetime
from typing import Iterable, Optional, Sequence

from sqlalchemy import select, delete, func, or_, and_, update, any_, bindparam, String
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.expression import Executable

from ..models import Alert, Severity
from ..utils.db_utils import retry_on_lock
from ..utils.timeutils import utcnow

logger = logging.getLogger(__name__)


def _entity_id_in(session: AsyncSession, entity_ids: list):
    """Membership test on Alert.entity_id bound as a single parameter.
    
    An expanded IN list binds one parameter per id and SQLite refuses
    statements with more than 32766 of them.
    """
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        return Alert.entity_id == any_(bindparam("entity_ids", entity_ids, type_=ARRAY(String)))
    if dialect == "sqlite":
        ids = func.json_each(bindparam("entity_ids", json.dumps(entity_ids))).table_valued("value")
        return Alert.entity_id.in_(select(ids.c.value))
    return Alert.entity_id.in_(entity_ids)


class AlertStore:
    """Insert, count, bulk lookup and bulk delete over Alert rows."""
    
    async def insert(
        self,
        session: AsyncSession,
        alert: Alert,
        statements: Sequence[Executable] = (),
    ) -> Alert:
        """Persist a single alert in its own commit.
        
        ``statements`` run in the same transaction, before the insert, so a
        failed insert also undoes them.
        """
        async def _commit():
            for statement in statements:
                await session.execute(statement)
            session.add(alert)
            await session.commit()
        
        await retry_on_lock(_commit, session=session)
        return alert
    
    async def count(self, session: AsyncSession, *criteria) -> int:
        """Count alerts matching the given SQLAlchemy criteria."""
        result = await session.execute(
            select(func.count(Alert.id)).where(*criteria)
        )
        return result.scalar_one()
    
    async def existing_entity_ids(
        self,
        session: AsyncSession,
        alert_type: str,
        entity_type: str,
        entity_ids: Iterable[str],
        created_since: datetime,
    ) -> set[str]:
        """Entity ids that already have an unresolved or recent alert.
        
        A single SELECT covers every id in ``entity_ids``.
        """
        result = await session.execute(
            select(Alert.entity_id)
            .where(
                and_(
                    Alert.alert_type == alert_type,
                    Alert.entity_type == entity_type,
                    _entity_id_in(session, list(entity_ids)),
                    or_(
                        Alert.is_resolved.is_(False),
                        Alert.created_at >= created_since,
                    ),
                )
            )
            .distinct()
        )
        return set(result.scalars().all())
    
    async def _execute_and_commit(self, session: AsyncSession, statement) -> int:
        async def _run():
            result = await session.execute(statement)
            await session.commit()
            return result.rowcount or 0
        
        return await retry_on_lock(_run, session=session)
    
    async def delete_where(self, session: AsyncSession, *criteria) -> int:
        """Bulk delete alerts matching the criteria and return the row count."""
        return await self._execute_and_commit(
            session,
            delete(Alert).where(*criteria).execution_options(synchronize_session=False),
        )
    
    async def mark_read(self, session: AsyncSession, alert_id: int, is_read: bool = True) -> bool:
        """Flag an alert read/unread on behalf of a consumer."""
        changed = await self._execute_and_commit(
            session,
            update(Alert).where(Alert.id == alert_id).values(is_read=is_read, updated_at=utcnow()),
        )
        return bool(changed)
    
    async def resolve(
        self,
        session: AsyncSession,
        alert_id: int,
        resolved_by: Optional[int] = None,
        resolved_at: Optional[datetime] = None,
    ) -> bool:
        """Resolve an alert on behalf of a consumer.
        
        Resolution is one-way: already resolved alerts keep their original
        resolved_at, which is what the retention sweep measures from.
        """
        resolved_at = resolved_at or utcnow()
        changed = await self._execute_and_commit(
            session,
            update(Alert)
            .where(Alert.id == alert_id, Alert.is_resolved.is_(False))
            .values(
                is_resolved=True,
                resolved_at=resolved_at,
                resolved_by=resolved_by,
                updated_at=resolved_at,
            ),
        )
        return bool(changed)
    
    async def unresolved_summary(self, session: AsyncSession) -> dict:
        """Unresolved and unread counts, broken down by severity."""
        result = await session.execute(
            select(Alert.severity, func.count(Alert.id))
            .where(Alert.is_resolved.is_(False))
            .group_by(Alert.severity)
        )
        by_severity = {severity.value: 0 for severity in Severity}
        for severity, count in result.all():
            by_severity[severity] = count
        
        unread = await self.count(session, Alert.is_read.is_(False), Alert.is_resolved.is_(False))
        return {
            "unresolved": sum(by_severity.values()),
            "unread": unread,
            "by_severity": by_severity,
        }


alert_store = AlertStore()
