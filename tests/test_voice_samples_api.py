"""Tests for the /api/voice-sample endpoints."""

import random

import pytest

from conftest import OTHER_USER_ID, USER_ID, add_voice_sample
from narrator.api.main import app
from narrator.api.voice_samples import get_voice_provider
from narrator.database import new_id
from narrator.errors import InvalidAudioUrl
from narrator.services import VERIFICATION_PHRASES

AUDIO_URL = "https://cdn.example.com/samples/me.mp3"
VALID_BODY = {"audio_url": AUDIO_URL, "verification_phrase": VERIFICATION_PHRASES[0]}


class TestPhrase:
    @pytest.mark.asyncio
    async def test_phrase_from_seeded_source(self, client):
        response = await client.get("/api/voice-sample/phrase")

        assert response.status_code == 200
        assert response.json() == {"phrase": random.Random(7).choice(VERIFICATION_PHRASES)}


class TestCreateVoiceSample:
    @pytest.mark.asyncio
    async def test_created(self, client, auth_headers, voice_provider):
        response = await client.post("/api/voice-sample", json=VALID_BODY, headers=auth_headers)

        assert response.status_code == 201
        body = response.json()
        assert body["user_id"] == USER_ID
        assert body["verified"] is False
        assert set(body) == {"id", "user_id", "created_at", "verified"}
        assert voice_provider.calls == [(AUDIO_URL, f"user_{USER_ID[:8]}")]

    @pytest.mark.asyncio
    async def test_requires_token(self, client):
        response = await client.post("/api/voice-sample", json=VALID_BODY)

        assert response.status_code == 401
        assert response.json() == {"message": "Unauthorized"}
        assert response.headers["www-authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_verify_with_bad_token(self, client):
        response = await client.patch(
            f"/api/voice-sample/{new_id()}/verify",
            json={"verified": True},
            headers={"Authorization": "Bearer not-a-jwt"},
        )

        assert response.status_code == 401
        assert response.json() == {"message": "Unauthorized"}

    @pytest.mark.asyncio
    async def test_duplicate(self, client, auth_headers, db_session):
        await add_voice_sample(db_session)

        response = await client.post("/api/voice-sample", json=VALID_BODY, headers=auth_headers)

        assert response.status_code == 409
        assert response.json() == {"message": "Voice sample already exists for this user"}

    @pytest.mark.asyncio
    async def test_validation_errors(self, client, auth_headers):
        response = await client.post(
            "/api/voice-sample",
            json={"audio_url": "nope", "verification_phrase": ""},
            headers=auth_headers,
        )

        assert response.status_code == 422
        body = response.json()
        assert body["message"] == "Validation failed"
        assert {e["field"] for e in body["errors"]} == {"audio_url", "verification_phrase"}

    @pytest.mark.asyncio
    async def test_malformed_json(self, client, auth_headers):
        response = await client.post(
            "/api/voice-sample",
            content=b"[",
            headers={**auth_headers, "Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid JSON in request body"}

    @pytest.mark.asyncio
    async def test_non_https_audio_url(self, client, auth_headers, voice_provider):
        voice_provider.error = InvalidAudioUrl("Only HTTPS URLs are allowed")

        response = await client.post(
            "/api/voice-sample",
            json={**VALID_BODY, "audio_url": "http://cdn.example.com/me.mp3"},
            headers=auth_headers,
        )

        assert response.status_code == 422
        assert response.json() == {
            "message": "Validation failed",
            "errors": [{"field": "audio_url", "message": "Only HTTPS URLs are allowed"}],
        }

    @pytest.mark.asyncio
    async def test_provider_unavailable(self, client, auth_headers, failing_voice_provider):
        app.dependency_overrides[get_voice_provider] = lambda: failing_voice_provider

        response = await client.post("/api/voice-sample", json=VALID_BODY, headers=auth_headers)

        assert response.status_code == 502
        assert response.json() == {"message": "Voice service unavailable"}


class TestVerifyVoiceSample:
    @pytest.mark.asyncio
    async def test_verify_own_sample(self, client, auth_headers, db_session):
        sample = await add_voice_sample(db_session)

        response = await client.patch(
            f"/api/voice-sample/{sample.id}/verify", json={"verified": True}, headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json() == {"id": sample.id, "verified": True}

    @pytest.mark.asyncio
    async def test_foreign_sample_looks_missing(self, client, auth_headers, db_session):
        sample = await add_voice_sample(db_session, user_id=OTHER_USER_ID)

        response = await client.patch(
            f"/api/voice-sample/{sample.id}/verify", json={"verified": True}, headers=auth_headers
        )

        assert response.status_code == 404
        assert response.json() == {"message": "Voice sample not found"}

    @pytest.mark.asyncio
    async def test_missing_sample(self, client, auth_headers):
        response = await client.patch(
            f"/api/voice-sample/{new_id()}/verify", json={"verified": False}, headers=auth_headers
        )

        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_invalid_sample_id(self, client, auth_headers):
        response = await client.patch(
            "/api/voice-sample/not-a-uuid/verify", json={"verified": True}, headers=auth_headers
        )

        assert response.status_code == 422
        assert response.json() == {
            "message": "Invalid voice sample ID format",
            "errors": [{"field": "id", "message": "Invalid voice sample ID format"}],
        }

    @pytest.mark.asyncio
    async def test_verified_must_be_boolean(self, client, auth_headers, db_session):
        sample = await add_voice_sample(db_session)

        response = await client.patch(
            f"/api/voice-sample/{sample.id}/verify", json={"verified": "yes"}, headers=auth_headers
        )

        assert response.status_code == 422
        assert response.json()["errors"][0]["field"] == "verified"
