"""Alert writer - persists rule output as new Alert rows."""
import json
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.expression import Executable

from ..models import Alert
from .alert_store import AlertStore, alert_store

logger = logging.getLogger(__name__)


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def serialize_metadata(metadata: Optional[Any]) -> Optional[str]:
    """Serialize structured metadata to JSON text; strings pass through."""
    if metadata is None:
        return None
    if isinstance(metadata, str):
        return metadata
    return json.dumps(metadata, default=_json_default)


class AlertWriter:
    """Creates alerts. Duplicate prevention happens upstream in the Deduplicator."""
    
    def __init__(self, store: AlertStore = alert_store):
        self.store = store
    
    async def create(
        self,
        session: AsyncSession,
        alert_type: str,
        severity: str,
        title: str,
        message: str,
        entity_type: Optional[str] = None,
        entity_id: Optional[str] = None,
        metadata: Optional[Any] = None,
        expires_at: Optional[datetime] = None,
        statements: Sequence[Executable] = (),
    ) -> Alert:
        """Insert one unread, unresolved alert and commit it.
        
        ``statements`` are business writes that must commit or fail together
        with this alert.
        """
        alert = Alert(
            alert_type=getattr(alert_type, "value", alert_type),
            severity=getattr(severity, "value", severity),
            title=title,
            message=message,
            entity_type=entity_type,
            entity_id=str(entity_id) if entity_id is not None else None,
            meta=serialize_metadata(metadata),
            expires_at=expires_at,
            is_read=False,
            is_resolved=False,
        )
        await self.store.insert(session, alert, statements)
        logger.debug(f"Alert created: {alert!r}")
        return alert


alert_writer = AlertWriter()
