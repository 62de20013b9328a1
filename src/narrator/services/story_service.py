"""Story library reads."""

import logging
from typing import Literal

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from narrator.database import Story
from narrator.errors import StoreError
from narrator.models import StoryDetail, StoryListResponse, StorySummary
from narrator.services.pagination import offset_window, page_meta

logger = logging.getLogger(__name__)


class StoryService:
    """Paginated story listing and slug lookup."""

    def __init__(self, db_session: AsyncSession):
        self.db_session = db_session

    async def list_stories(
        self, page: int, page_size: int, sort: Literal["asc", "desc"] = "asc"
    ) -> StoryListResponse:
        """Return one page of story summaries ordered by title."""
        first, last = offset_window(page, page_size)

        try:
            count_result = await self.db_session.execute(select(func.count()).select_from(Story))
            total = count_result.scalar()
        except SQLAlchemyError as e:
            logger.error(f"Failed to count stories: {e!s}", exc_info=True)
            raise StoreError("Failed to retrieve story count") from e

        title_order = Story.title.asc() if sort == "asc" else Story.title.desc()
        query = (
            select(Story.id, Story.title, Story.slug)
            .order_by(title_order, Story.id)
            .offset(first)
            .limit(last - first + 1)
        )
        try:
            result = await self.db_session.execute(query)
            rows = result.all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch stories: {e!s}", exc_info=True)
            raise StoreError("Failed to retrieve stories") from e

        return StoryListResponse(
            data=[StorySummary(id=row.id, title=row.title, slug=row.slug) for row in rows],
            meta=page_meta(page, page_size, total),
        )

    async def get_story_by_slug(self, slug: str) -> StoryDetail | None:
        """Return the story with *slug*, or ``None`` when no row matches."""
        try:
            result = await self.db_session.execute(select(Story).where(Story.slug == slug))
            story = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch story {slug!r}: {e!s}", exc_info=True)
            raise StoreError("Failed to retrieve story") from e

        if story is None:
            return None

        return StoryDetail(
            id=story.id,
            title=story.title,
            slug=story.slug,
            content=story.content,
            version=story.version,
            updated_at=story.updated_at,
        )
