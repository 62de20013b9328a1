from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# =============================================================================
# Story Generation Models
# =============================================================================


class GenerationStatus(str, Enum):
    """Story generation lifecycle: pending -> in_progress -> completed | failed."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


class PaginationMeta(BaseModel):
    """Pagination metadata shared by every list response."""

    model_config = ConfigDict(populate_by_name=True)

    page: int
    page_size: int = Field(..., alias="pageSize")
    total: int


# =============================================================================
# Story Models
# =============================================================================


class StorySummary(BaseModel):
    """Story entry as shown in the library listing."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    slug: str


class StoryDetail(StorySummary):
    """Full story returned by slug lookup."""

    content: str
    version: int
    updated_at: datetime | None = None


class StoryListResponse(BaseModel):
    data: list[StorySummary]
    meta: PaginationMeta


class CreateGenerationResponse(BaseModel):
    """Response for a freshly requested generation."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    status: GenerationStatus
    progress: float


class StoryGenerationResponse(BaseModel):
    """Generation status as exposed to its owner."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    story_id: str
    status: GenerationStatus
    progress: float
    result_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class StoryGenerationListResponse(BaseModel):
    data: list[StoryGenerationResponse]
    meta: PaginationMeta


class GenerationLogEntry(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    event: str
    occurred_at: datetime


class GenerationLogsResponse(BaseModel):
    logs: list[GenerationLogEntry]
    meta: PaginationMeta


# =============================================================================
# Voice Sample Models
# =============================================================================


class VoiceSampleResponse(BaseModel):
    """Voice sample as returned after creation (provider handle is not exposed)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    created_at: datetime
    verified: bool


class VerifyVoiceSampleResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    verified: bool


class VoiceSamplePhraseResponse(BaseModel):
    phrase: str


class ErrorResponse(BaseModel):
    """Error body used by the story and generation endpoints."""

    error: str
    details: list[dict[str, Any]] | None = None


class MessageResponse(BaseModel):
    """Error body used by the voice sample endpoints."""

    message: str
    errors: list[dict[str, Any]] | None = None
