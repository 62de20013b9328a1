"""Story generation endpoints: request narration jobs and follow their progress."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from narrator.api.auth import get_current_user_id
from narrator.database import get_db
from narrator.errors import GenerationInProgress, GenerationNotFound, StoryNotFound
from narrator.models import (
    CreateGenerationResponse,
    ErrorResponse,
    GenerationLogsResponse,
    StoryGenerationListResponse,
    StoryGenerationResponse,
)
from narrator.schemas import CreateGenerationRequest, GenerationIdParams, GenerationsQuery, LogsQuery
from narrator.services import GenerationLogService, StoryGenerationService

from .utils import parse_or_400, present_params, read_json_body

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/story-generations", tags=["Story Generations"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def get_generation_service(db: AsyncSession = Depends(get_db)) -> StoryGenerationService:
    return StoryGenerationService(db)


def get_log_service(db: AsyncSession = Depends(get_db)) -> GenerationLogService:
    return GenerationLogService(db)


@router.post(
    "",
    status_code=202,
    response_model=CreateGenerationResponse,
    responses=ERROR_RESPONSES,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {"schema": CreateGenerationRequest.model_json_schema()}
            },
        }
    },
)
async def create_generation(
    request: Request,
    user_id: str = Depends(get_current_user_id),
    service: StoryGenerationService = Depends(get_generation_service),
) -> CreateGenerationResponse:
    """Request a new narration of a story."""
    body = await read_json_body(request, "Invalid JSON in request body")
    payload = parse_or_400(CreateGenerationRequest, body, "Validation error")
    logger.info(f"Creating generation for user {user_id}: story {payload.story_id}")

    try:
        return await service.initiate(user_id, payload.story_id)
    except StoryNotFound as e:
        raise HTTPException(status_code=404, detail="Story not found") from e
    except Exception as e:
        logger.error(f"Error initiating story generation: {e!s}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.get("", response_model=StoryGenerationListResponse, responses=ERROR_RESPONSES)
async def list_generations(
    page: str | None = Query(None, description="Page number"),
    page_size: str | None = Query(None, alias="pageSize", description="Items per page"),
    status: str | None = Query(None, description="Filter by generation status"),
    user_id: str = Depends(get_current_user_id),
    service: StoryGenerationService = Depends(get_generation_service),
) -> StoryGenerationListResponse:
    """List the caller's generations with pagination and an optional status filter."""
    query = parse_or_400(
        GenerationsQuery,
        present_params(page=page, pageSize=page_size, status=status),
        "Validation error",
    )
    logger.info(f"Listing generations for user {user_id}")

    try:
        return await service.list(user_id, query.page, query.page_size, query.status)
    except Exception as e:
        logger.error(f"Error listing story generations: {e!s}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.get("/{generation_id}", response_model=StoryGenerationResponse, responses=ERROR_RESPONSES)
async def get_generation(
    generation_id: str,
    user_id: str = Depends(get_current_user_id),
    service: StoryGenerationService = Depends(get_generation_service),
) -> StoryGenerationResponse:
    """Return the status and result URL of one generation."""
    params = parse_or_400(GenerationIdParams, {"id": generation_id}, "Validation error")

    try:
        return await service.get_by_id(user_id, params.id)
    except GenerationNotFound as e:
        raise HTTPException(status_code=404, detail="Generation not found") from e
    except Exception as e:
        logger.error(f"Error retrieving story generation {generation_id}: {e!s}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error") from e


@router.delete(
    "/{generation_id}",
    status_code=204,
    response_class=Response,
    responses={**ERROR_RESPONSES, 409: {"model": ErrorResponse}},
)
async def delete_generation(
    generation_id: str,
    user_id: str = Depends(get_current_user_id),
    service: StoryGenerationService = Depends(get_generation_service),
) -> Response:
    """Delete a generation that is not currently being processed."""
    params = parse_or_400(GenerationIdParams, {"id": generation_id}, "Validation error")
    logger.info(f"Deleting generation {params.id} for user {user_id}")

    try:
        await service.remove(user_id, params.id)
    except GenerationNotFound as e:
        raise HTTPException(status_code=404, detail="Generation not found") from e
    except GenerationInProgress as e:
        raise HTTPException(status_code=409, detail="Cannot delete in-progress generation") from e
    except Exception as e:
        logger.error(f"Error deleting story generation {generation_id}: {e!s}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error") from e

    return Response(status_code=204)


@router.get(
    "/{generation_id}/logs", response_model=GenerationLogsResponse, responses=ERROR_RESPONSES
)
async def get_generation_logs(
    generation_id: str,
    page: str | None = Query(None, description="Page number, defaults to 1"),
    page_size: str | None = Query(
        None, alias="pageSize", description="Items per page, defaults to 50, max 100"
    ),
    user_id: str = Depends(get_current_user_id),
    generation_service: StoryGenerationService = Depends(get_generation_service),
    log_service: GenerationLogService = Depends(get_log_service),
) -> GenerationLogsResponse:
    """Return the event log of one of the caller's generations, oldest first."""
    params = parse_or_400(GenerationIdParams, {"id": generation_id}, "Invalid generation id")
    query = parse_or_400(
        LogsQuery, present_params(page=page, pageSize=page_size), "Invalid query parameters"
    )

    try:
        # The log service does not check ownership; the lookup below does.
        await generation_service.get_by_id(user_id, params.id)
        return await log_service.get_logs_by_generation_id(params.id, query.page, query.page_size)
    except GenerationNotFound as e:
        raise HTTPException(status_code=404, detail="Generation not found") from e
    except Exception as e:
        logger.error(f"Error fetching logs for generation {generation_id}: {e!s}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error") from e
