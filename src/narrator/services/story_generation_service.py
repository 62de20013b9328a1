"""Story generation lifecycle: request, list, inspect and delete narration jobs."""

import logging

from sqlalchemy import and_, delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from narrator.database import Story, StoryGeneration, new_id
from narrator.errors import GenerationInProgress, GenerationNotFound, StoreError, StoryNotFound
from narrator.models import (
    CreateGenerationResponse,
    GenerationStatus,
    StoryGenerationListResponse,
    StoryGenerationResponse,
)
from narrator.services.generation_log_service import GenerationLogService
from narrator.services.pagination import offset_window, page_meta

logger = logging.getLogger(__name__)

GENERATION_REQUESTED_EVENT = "generation_requested"


class StoryGenerationService:
    """Owner-scoped operations on story generations.

    Status transitions past ``pending`` belong to the narration worker; this
    service only creates rows and guards deletion of running jobs.
    """

    def __init__(
        self,
        db_session: AsyncSession,
        log_service: GenerationLogService | None = None,
    ):
        self.db_session = db_session
        self.log_service = log_service or GenerationLogService(db_session)

    async def initiate(self, user_id: str, story_id: str) -> CreateGenerationResponse:
        """Record a pending generation of *story_id* for *user_id*.

        The inserted row is the work item; nothing is enqueued here.
        """
        try:
            result = await self.db_session.execute(select(Story.id).where(Story.id == story_id))
            story = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Failed to look up story {story_id}: {e!s}", exc_info=True)
            raise StoreError("Failed to create story generation") from e

        if story is None:
            raise StoryNotFound()

        generation = StoryGeneration(
            id=new_id(),
            story_id=story_id,
            user_id=user_id,
            status=GenerationStatus.PENDING,
            progress=0.0,
        )
        self.db_session.add(generation)
        self.log_service.append(generation.id, GENERATION_REQUESTED_EVENT)

        try:
            await self.db_session.commit()
        except SQLAlchemyError as e:
            await self.db_session.rollback()
            logger.error(f"Failed to create story generation: {e!s}", exc_info=True)
            raise StoreError("Failed to create story generation") from e

        logger.info(f"Generation {generation.id} requested by user {user_id} for story {story_id}")
        return CreateGenerationResponse(
            id=generation.id, status=generation.status, progress=generation.progress
        )

    async def list(
        self,
        user_id: str,
        page: int,
        page_size: int,
        status: GenerationStatus | None = None,
    ) -> StoryGenerationListResponse:
        """List the user's generations, newest first."""
        first, last = offset_window(page, page_size)

        query = select(StoryGeneration).where(StoryGeneration.user_id == user_id)
        if status:
            query = query.where(StoryGeneration.status == status)

        try:
            count_query = select(func.count()).select_from(query.subquery())
            total_result = await self.db_session.execute(count_query)
            total = total_result.scalar()

            query = (
                query.order_by(StoryGeneration.created_at.desc(), StoryGeneration.id)
                .offset(first)
                .limit(last - first + 1)
            )
            result = await self.db_session.execute(query)
            generations = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to list story generations: {e!s}", exc_info=True)
            raise StoreError("Failed to list story generations") from e

        return StoryGenerationListResponse(
            data=[_to_response(generation) for generation in generations],
            meta=page_meta(page, page_size, total),
        )

    async def get_by_id(self, user_id: str, generation_id: str) -> StoryGenerationResponse:
        """Return the generation if it exists and belongs to *user_id*."""
        generation = await self._get_user_generation(user_id, generation_id)
        return _to_response(generation)

    async def remove(self, user_id: str, generation_id: str) -> None:
        """Delete a generation unless the worker is processing it."""
        generation = await self._get_user_generation(user_id, generation_id)
        if generation.status == GenerationStatus.IN_PROGRESS:
            raise GenerationInProgress()

        # The status predicate makes the delete lose against a concurrent start.
        statement = (
            delete(StoryGeneration)
            .where(
                and_(
                    StoryGeneration.id == generation_id,
                    StoryGeneration.user_id == user_id,
                    StoryGeneration.status != GenerationStatus.IN_PROGRESS,
                )
            )
        )
        try:
            result = await self.db_session.execute(statement)
            deleted = result.rowcount
            if deleted:
                await self.db_session.commit()
            else:
                await self.db_session.rollback()
        except SQLAlchemyError as e:
            await self.db_session.rollback()
            logger.error(f"Failed to delete story generation {generation_id}: {e!s}", exc_info=True)
            raise StoreError("Failed to delete story generation") from e

        if not deleted:
            logger.info(f"Generation {generation_id} changed state before it could be deleted")
            # Raises GenerationNotFound if the row is gone altogether.
            await self._get_user_generation(user_id, generation_id)
            raise GenerationInProgress()

        logger.info(f"Generation {generation_id} deleted by user {user_id}")

    async def _get_user_generation(self, user_id: str, generation_id: str) -> StoryGeneration:
        try:
            result = await self.db_session.execute(
                select(StoryGeneration).where(
                    and_(
                        StoryGeneration.id == generation_id,
                        StoryGeneration.user_id == user_id,
                    )
                )
            )
            generation = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch story generation {generation_id}: {e!s}", exc_info=True)
            raise StoreError("Failed to fetch story generation") from e

        if not generation:
            logger.info("Generation %s not found or access denied for user %s", generation_id, user_id)
            raise GenerationNotFound()

        return generation


def _to_response(generation: StoryGeneration) -> StoryGenerationResponse:
    return StoryGenerationResponse(
        id=generation.id,
        story_id=generation.story_id,
        status=generation.status,
        progress=generation.progress,
        result_url=generation.result_url,
        created_at=generation.created_at,
        updated_at=generation.updated_at,
    )
