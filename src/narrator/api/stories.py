"""Public story library endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from narrator.database import get_db
from narrator.models import ErrorResponse, StoryDetail, StoryListResponse
from narrator.schemas import StoriesQuery, StorySlugParams
from narrator.services import StoryService

from .utils import parse_or_400, present_params

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/stories", tags=["Stories"])


def get_story_service(db: AsyncSession = Depends(get_db)) -> StoryService:
    return StoryService(db)


@router.get(
    "",
    response_model=StoryListResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def list_stories(
    page: str | None = Query(None, description="Page number (1-indexed)"),
    page_size: str | None = Query(None, alias="pageSize", description="Items per page (1-100)"),
    sort: str | None = Query(None, description="Title order: asc or desc"),
    service: StoryService = Depends(get_story_service),
) -> StoryListResponse:
    """Return a paginated list of story summaries."""
    query = parse_or_400(
        StoriesQuery,
        present_params(page=page, pageSize=page_size, sort=sort),
        "Invalid query parameters",
    )

    try:
        return await service.list_stories(query.page, query.page_size, query.sort)
    except Exception as e:
        logger.error(f"[GET /api/stories] Unhandled error: {e!s}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.get(
    "/{slug}",
    response_model=StoryDetail,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def get_story(
    slug: str, service: StoryService = Depends(get_story_service)
) -> StoryDetail:
    """Return full details of a story by slug."""
    params = parse_or_400(StorySlugParams, {"slug": slug}, "Invalid slug parameter")

    try:
        story = await service.get_story_by_slug(params.slug)
    except Exception as e:
        logger.error(f"[GET /api/stories/{slug}] Unhandled error: {e!s}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error") from e

    if story is None:
        raise HTTPException(status_code=404, detail="Story not found")

    return story
