"""Tests for request validation schemas."""

import pytest
from pydantic import ValidationError

from narrator.models import GenerationStatus
from narrator.schemas import (
    CreateGenerationRequest,
    CreateVoiceSampleRequest,
    GenerationIdParams,
    GenerationsQuery,
    LogsQuery,
    MAX_PAGE,
    StoriesQuery,
    StorySlugParams,
    VerifyVoiceSampleRequest,
    VoiceSampleIdParams,
    validation_details,
)

VALID_UUID = "123e4567-e89b-12d3-a456-426614174000"


def _details(schema, data):
    with pytest.raises(ValidationError) as exc_info:
        schema.model_validate(data)
    return validation_details(exc_info.value)


class TestStoriesQuery:
    def test_defaults(self):
        query = StoriesQuery.model_validate({})
        assert (query.page, query.page_size, query.sort) == (1, 10, "asc")

    def test_coerces_query_strings(self):
        query = StoriesQuery.model_validate({"page": "2", "pageSize": "1", "sort": "desc"})
        assert (query.page, query.page_size, query.sort) == (2, 1, "desc")

    @pytest.mark.parametrize("page_size", ["0", "101"])
    def test_page_size_out_of_range(self, page_size):
        details = _details(StoriesQuery, {"pageSize": page_size})
        assert details == [{"field": "pageSize", "message": "pageSize must be between 1 and 100"}]

    def test_page_size_upper_bound_accepted(self):
        assert StoriesQuery.model_validate({"pageSize": "100"}).page_size == 100

    def test_non_numeric_page_rejected(self):
        details = _details(StoriesQuery, {"page": "abc"})
        assert details[0]["field"] == "page"

    def test_zero_page_rejected(self):
        details = _details(StoriesQuery, {"page": "0"})
        assert details == [{"field": "page", "message": "page must be >= 1"}]

    def test_page_upper_bound(self):
        assert StoriesQuery.model_validate({"page": str(MAX_PAGE)}).page == MAX_PAGE
        details = _details(StoriesQuery, {"page": str(MAX_PAGE + 1)})
        assert details == [{"field": "page", "message": f"page cannot exceed {MAX_PAGE}"}]

    def test_unknown_sort_rejected(self):
        details = _details(StoriesQuery, {"sort": "sideways"})
        assert details[0]["field"] == "sort"


class TestStorySlugParams:
    @pytest.mark.parametrize("slug", ["kubus-puchatek", "a", "tale-2"])
    def test_valid_slugs(self, slug):
        assert StorySlugParams.model_validate({"slug": slug}).slug == slug

    @pytest.mark.parametrize("slug", ["Kubus", "two--hyphens", "-leading", "trailing-", "under_score"])
    def test_invalid_slugs(self, slug):
        details = _details(StorySlugParams, {"slug": slug})
        assert details == [
            {"field": "slug", "message": "slug must be lowercase alphanumeric with hyphens"}
        ]


class TestGenerationSchemas:
    def test_story_id_must_be_uuid(self):
        details = _details(CreateGenerationRequest, {"story_id": "not-a-uuid"})
        assert details == [{"field": "story_id", "message": "story_id must be a valid UUID"}]

    def test_story_id_missing(self):
        details = _details(CreateGenerationRequest, {})
        assert details[0]["field"] == "story_id"

    def test_generation_id_must_be_uuid(self):
        details = _details(GenerationIdParams, {"id": "123"})
        assert details == [{"field": "id", "message": "id must be a valid UUID"}]
        assert GenerationIdParams.model_validate({"id": VALID_UUID}).id == VALID_UUID

    def test_generations_query_defaults(self):
        query = GenerationsQuery.model_validate({})
        assert (query.page, query.page_size, query.status) == (1, 10, None)

    def test_generations_query_status(self):
        query = GenerationsQuery.model_validate({"status": "in_progress"})
        assert query.status is GenerationStatus.IN_PROGRESS

    def test_generations_query_unknown_status(self):
        details = _details(GenerationsQuery, {"status": "queued"})
        assert details[0]["field"] == "status"

    def test_generations_page_size_capped_at_twenty(self):
        assert GenerationsQuery.model_validate({"pageSize": "20"}).page_size == 20
        details = _details(GenerationsQuery, {"pageSize": "21"})
        assert details == [{"field": "pageSize", "message": "pageSize cannot exceed 100"}]

    def test_logs_query(self):
        query = LogsQuery.model_validate({})
        assert (query.page, query.page_size) == (1, 50)
        assert LogsQuery.model_validate({"pageSize": "100"}).page_size == 100
        details = _details(LogsQuery, {"pageSize": "101"})
        assert details == [{"field": "pageSize", "message": "pageSize cannot exceed 100"}]


class TestVoiceSampleSchemas:
    def test_create_request_keeps_url_verbatim(self):
        request = CreateVoiceSampleRequest.model_validate(
            {"audio_url": "https://cdn.example.com", "verification_phrase": "Hello"}
        )
        assert request.audio_url == "https://cdn.example.com"

    def test_create_request_rejects_bad_url_and_empty_phrase(self):
        details = _details(
            CreateVoiceSampleRequest, {"audio_url": "not a url", "verification_phrase": ""}
        )
        assert {d["field"] for d in details} == {"audio_url", "verification_phrase"}

    def test_phrase_length_limit(self):
        details = _details(
            CreateVoiceSampleRequest,
            {"audio_url": "https://cdn.example.com/a.mp3", "verification_phrase": "x" * 501},
        )
        assert details[0]["field"] == "verification_phrase"

    def test_verified_must_be_boolean(self):
        assert VerifyVoiceSampleRequest.model_validate({"verified": True}).verified is True
        details = _details(VerifyVoiceSampleRequest, {"verified": "yes"})
        assert details[0]["field"] == "verified"

    def test_sample_id_format(self):
        details = _details(VoiceSampleIdParams, {"id": "abc"})
        assert details == [{"field": "id", "message": "Invalid voice sample ID format"}]

    def test_audio_url_error_message(self):
        details = _details(
            CreateVoiceSampleRequest, {"audio_url": "not a url", "verification_phrase": "Hi"}
        )
        assert details == [{"field": "audio_url", "message": "audio_url must be a valid URL"}]
