"""Request schemas for every HTTP entry point.

Query strings arrive as text; the models coerce them into typed values and
reject anything malformed before a store query is issued.
"""

from __future__ import annotations

import re
from typing import Any, Literal

from pydantic import (
    AnyUrl,
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    TypeAdapter,
    ValidationError,
    field_validator,
)

from narrator.models import GenerationStatus

UUID_RE = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)
SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

STORIES_MAX_PAGE_SIZE = 100
# Generations cap at 20 although the error message below says 100. Kept as shipped.
GENERATIONS_MAX_PAGE_SIZE = 20
LOGS_MAX_PAGE_SIZE = 100
# Keeps the row offset within a signed 64-bit integer.
MAX_PAGE = 2**31 - 1

_url_adapter = TypeAdapter(AnyUrl)


def _require_uuid(value: str, message: str) -> str:
    if not UUID_RE.match(value):
        raise ValueError(message)
    return value


def _require_positive(value: int, message: str) -> int:
    if value < 1:
        raise ValueError(message)
    return value


def _require_page(value: int, message: str) -> int:
    _require_positive(value, message)
    if value > MAX_PAGE:
        raise ValueError(f"page cannot exceed {MAX_PAGE}")
    return value


class _RequestSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# =============================================================================
# Stories
# =============================================================================


class StoriesQuery(_RequestSchema):
    """GET /stories query parameters."""

    page: int = 1
    page_size: int = Field(10, alias="pageSize")
    sort: Literal["asc", "desc"] = "asc"

    @field_validator("page")
    @classmethod
    def check_page(cls, v: int) -> int:
        return _require_page(v, "page must be >= 1")

    @field_validator("page_size")
    @classmethod
    def check_page_size(cls, v: int) -> int:
        if not 1 <= v <= STORIES_MAX_PAGE_SIZE:
            raise ValueError(f"pageSize must be between 1 and {STORIES_MAX_PAGE_SIZE}")
        return v


class StorySlugParams(_RequestSchema):
    slug: str = Field(..., min_length=1)

    @field_validator("slug")
    @classmethod
    def check_slug(cls, v: str) -> str:
        if not SLUG_RE.match(v):
            raise ValueError("slug must be lowercase alphanumeric with hyphens")
        return v


# =============================================================================
# Story generations
# =============================================================================


class CreateGenerationRequest(_RequestSchema):
    story_id: str

    @field_validator("story_id")
    @classmethod
    def check_story_id(cls, v: str) -> str:
        return _require_uuid(v, "story_id must be a valid UUID")


class GenerationsQuery(_RequestSchema):
    """GET /story-generations query parameters."""

    page: int = 1
    page_size: int = Field(10, alias="pageSize")
    status: GenerationStatus | None = None

    @field_validator("page")
    @classmethod
    def check_page(cls, v: int) -> int:
        return _require_page(v, "page must be a positive integer")

    @field_validator("page_size")
    @classmethod
    def check_page_size(cls, v: int) -> int:
        _require_positive(v, "pageSize must be a positive integer")
        if v > GENERATIONS_MAX_PAGE_SIZE:
            raise ValueError("pageSize cannot exceed 100")
        return v


class GenerationIdParams(_RequestSchema):
    id: str

    @field_validator("id")
    @classmethod
    def check_id(cls, v: str) -> str:
        return _require_uuid(v, "id must be a valid UUID")


class LogsQuery(_RequestSchema):
    """GET /story-generations/{id}/logs query parameters."""

    page: int = 1
    page_size: int = Field(50, alias="pageSize")

    @field_validator("page")
    @classmethod
    def check_page(cls, v: int) -> int:
        return _require_page(v, "page must be a positive integer")

    @field_validator("page_size")
    @classmethod
    def check_page_size(cls, v: int) -> int:
        _require_positive(v, "pageSize must be a positive integer")
        if v > LOGS_MAX_PAGE_SIZE:
            raise ValueError(f"pageSize cannot exceed {LOGS_MAX_PAGE_SIZE}")
        return v


# =============================================================================
# Voice samples
# =============================================================================


class CreateVoiceSampleRequest(_RequestSchema):
    audio_url: str
    verification_phrase: str = Field(..., min_length=1, max_length=500)

    @field_validator("audio_url")
    @classmethod
    def check_audio_url(cls, v: str) -> str:
        # Validated as a URL but passed on exactly as submitted.
        try:
            _url_adapter.validate_python(v)
        except ValidationError as e:
            raise ValueError("audio_url must be a valid URL") from e
        return v


class VerifyVoiceSampleRequest(_RequestSchema):
    verified: StrictBool


class VoiceSampleIdParams(_RequestSchema):
    id: str

    @field_validator("id")
    @classmethod
    def check_id(cls, v: str) -> str:
        return _require_uuid(v, "Invalid voice sample ID format")


def validation_details(exc: ValidationError) -> list[dict[str, Any]]:
    """Flatten a pydantic error into ``[{"field": ..., "message": ...}]``."""
    details = []
    for err in exc.errors():
        if err["type"] == "value_error":
            message = str(err["ctx"]["error"])
        else:
            message = err["msg"]
        details.append({"field": ".".join(str(part) for part in err["loc"]), "message": message})
    return details
