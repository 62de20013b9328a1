"""Voice sample endpoints: verification phrase, cloning and ownership verification."""

import logging
import random

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from narrator.api.auth import get_current_user_id, security
from narrator.api.settings import get_settings
from narrator.database import get_db
from narrator.errors import (
    InvalidAudioUrl,
    NotFoundError,
    VoiceSampleExists,
    VoiceServiceUnavailable,
)
from narrator.infrastructure.voice import ElevenLabsVoiceProvider, VoiceCloningProvider
from narrator.models import (
    MessageResponse,
    VerifyVoiceSampleResponse,
    VoiceSamplePhraseResponse,
    VoiceSampleResponse,
)
from narrator.schemas import CreateVoiceSampleRequest, VerifyVoiceSampleRequest, VoiceSampleIdParams
from narrator.services import VoiceSampleService, get_random_phrase, system_random

from .utils import parse_or_422, read_json_body

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/voice-sample", tags=["Voice Samples"])

INVALID_JSON = {"message": "Invalid JSON in request body"}


def get_phrase_random() -> random.Random:
    """Random source for phrase selection; overridden in tests for determinism."""
    return system_random


async def get_voice_sample_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> str:
    """Same check as ``get_current_user_id``; failures use the ``{"message"}`` body."""
    try:
        return await get_current_user_id(credentials)
    except HTTPException as e:
        raise HTTPException(
            status_code=e.status_code, detail={"message": e.detail}, headers=e.headers
        ) from e


def get_voice_provider() -> VoiceCloningProvider:
    settings = get_settings()
    return ElevenLabsVoiceProvider(
        api_key=settings.eleven_labs_api_key,
        timeout=settings.elevenlabs_timeout_seconds,
        max_audio_bytes=settings.audio_download_max_bytes,
    )


def get_voice_sample_service(
    db: AsyncSession = Depends(get_db),
    voice_provider: VoiceCloningProvider = Depends(get_voice_provider),
) -> VoiceSampleService:
    return VoiceSampleService(db, voice_provider)


@router.get(
    "/phrase",
    response_model=VoiceSamplePhraseResponse,
    responses={500: {"model": MessageResponse}},
)
async def get_phrase(rng: random.Random = Depends(get_phrase_random)) -> VoiceSamplePhraseResponse:
    """Return a random verification phrase to read aloud while recording."""
    try:
        return VoiceSamplePhraseResponse(phrase=get_random_phrase(rng))
    except Exception as e:
        logger.error(f"Error getting verification phrase: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=500, detail={"message": "Failed to retrieve verification phrase"}
        ) from e


@router.post(
    "",
    status_code=201,
    response_model=VoiceSampleResponse,
    responses={
        code: {"model": MessageResponse} for code in (400, 401, 409, 422, 500, 502)
    },
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {"schema": CreateVoiceSampleRequest.model_json_schema()}
            },
        }
    },
)
async def create_voice_sample(
    request: Request,
    user_id: str = Depends(get_voice_sample_user_id),
    service: VoiceSampleService = Depends(get_voice_sample_service),
) -> VoiceSampleResponse:
    """Register the caller's voice sample; each user may own one."""
    body = await read_json_body(request, INVALID_JSON)
    payload = parse_or_422(CreateVoiceSampleRequest, body)
    logger.info(f"Creating voice sample for user {user_id}")

    try:
        return await service.create_voice_sample(user_id, payload)
    except VoiceSampleExists as e:
        raise HTTPException(
            status_code=409, detail={"message": "Voice sample already exists for this user"}
        ) from e
    except InvalidAudioUrl as e:
        raise HTTPException(
            status_code=422,
            detail={
                "message": "Validation failed",
                "errors": [{"field": "audio_url", "message": e.message}],
            },
        ) from e
    except VoiceServiceUnavailable as e:
        raise HTTPException(status_code=502, detail={"message": "Voice service unavailable"}) from e
    except Exception as e:
        logger.error(f"Error creating voice sample: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=500, detail={"message": "Failed to create voice sample"}
        ) from e


@router.patch(
    "/{sample_id}/verify",
    response_model=VerifyVoiceSampleResponse,
    responses={code: {"model": MessageResponse} for code in (400, 401, 404, 422, 500)},
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {"schema": VerifyVoiceSampleRequest.model_json_schema()}
            },
        }
    },
)
async def verify_voice_sample(
    sample_id: str,
    request: Request,
    user_id: str = Depends(get_voice_sample_user_id),
    service: VoiceSampleService = Depends(get_voice_sample_service),
) -> VerifyVoiceSampleResponse:
    """Mark one of the caller's voice samples as verified (or not)."""
    params = parse_or_422(
        VoiceSampleIdParams, {"id": sample_id}, "Invalid voice sample ID format"
    )
    body = await read_json_body(request, INVALID_JSON)
    payload = parse_or_422(VerifyVoiceSampleRequest, body)

    try:
        return await service.verify_voice_sample(user_id, params.id, payload.verified)
    except NotFoundError as e:
        # Missing and foreign samples look the same from outside.
        raise HTTPException(status_code=404, detail={"message": "Voice sample not found"}) from e
    except Exception as e:
        logger.error(f"Error verifying voice sample {sample_id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=500, detail={"message": "Failed to verify voice sample"}
        ) from e
