"""Business actions the alert engine performs on quotes."""
import logging
from typing import Iterable, Sequence

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import Quote
from ..models.quote import OPEN_QUOTE_STATUSES
from ..utils.db_utils import retry_on_lock
from ..utils.timeutils import utcnow

logger = logging.getLogger(__name__)

EXPIRED_STATUS = "expired"


def expire_statement(quote_ids: Iterable[int]):
    """UPDATE moving the given draft/sent quotes to ``expired``.
    
    Quotes in any other status are left alone.
    """
    return (
        update(Quote)
        .where(Quote.id.in_(list(quote_ids)), Quote.status.in_(OPEN_QUOTE_STATUSES))
        .values(status=EXPIRED_STATUS, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )


async def expire_quotes(session: AsyncSession, quotes: Sequence[Quote]) -> int:
    """Move lapsed draft/sent quotes to ``expired`` and commit.
    
    Only touches quote rows. Returns how many quotes changed status.
    """
    ids = [quote.id for quote in quotes if quote.status != EXPIRED_STATUS]
    if not ids:
        return 0
    
    async def _commit():
        result = await session.execute(expire_statement(ids))
        await session.commit()
        return result.rowcount or 0
    
    changed = await retry_on_lock(_commit, session=session)
    logger.info(f"{changed} quote(s) marked as expired")
    return changed
