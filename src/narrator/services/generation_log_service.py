import logging

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from narrator.database import GenerationLog, new_id, utcnow
from narrator.errors import StoreError
from narrator.models import GenerationLogEntry, GenerationLogsResponse
from narrator.services.pagination import offset_window, page_meta

logger = logging.getLogger(__name__)


class GenerationLogService:
    """Append-only access to generation event logs.

    Performs no ownership check: callers must confirm the requester owns the
    generation before reading its logs.
    """

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session

    def append(self, generation_id: str, event: str) -> GenerationLog:
        """Stage a log entry for *generation_id*; the caller commits."""
        entry = GenerationLog(
            id=new_id(), generation_id=generation_id, event=event, occurred_at=utcnow()
        )
        self.db_session.add(entry)
        return entry

    async def get_logs_by_generation_id(
        self, generation_id: str, page: int, page_size: int
    ) -> GenerationLogsResponse:
        """Return one page of log entries, oldest first. No logs is not an error."""
        first, last = offset_window(page, page_size)
        query = select(GenerationLog).where(GenerationLog.generation_id == generation_id)

        try:
            total_result = await self.db_session.execute(
                select(func.count()).select_from(query.subquery())
            )
            total = total_result.scalar()

            result = await self.db_session.execute(
                query.order_by(GenerationLog.occurred_at.asc(), GenerationLog.id)
                .offset(first)
                .limit(last - first + 1)
            )
            logs = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch logs for generation {generation_id}: {e!s}", exc_info=True)
            raise StoreError("Failed to fetch generation logs") from e

        return GenerationLogsResponse(
            logs=[GenerationLogEntry(event=log.event, occurred_at=log.occurred_at) for log in logs],
            meta=page_meta(page, page_size, total),
        )
