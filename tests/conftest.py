"""Shared fixtures: in-memory database, fake voice provider and an API client."""

import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ELEVEN_LABS_API_KEY", "test-eleven-key")

import random
from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from narrator.api.auth import create_access_token
from narrator.api.main import app
from narrator.api.voice_samples import get_phrase_random, get_voice_provider
from narrator.database import Base, GenerationLog, Story, StoryGeneration, VoiceSample, get_db, new_id
from narrator.errors import ProviderCallFailed
from narrator.infrastructure.voice import VoiceCloningProvider
from narrator.models import GenerationStatus

USER_ID = "3f1c2a9e-5b7d-4e8f-9a10-1b2c3d4e5f60"
OTHER_USER_ID = "8d7e6f5a-4b3c-4d2e-8f10-a9b8c7d6e5f4"


class FakeVoiceProvider(VoiceCloningProvider):
    """Records calls and returns a fixed voice id, or raises ``error`` if set."""

    name = "fake"

    def __init__(self, voice_id: str = "voice-abc123", error: Exception | None = None):
        self.voice_id = voice_id
        self.error = error
        self.calls: list[tuple[str, str | None]] = []

    async def create_voice_model(self, audio_url: str, name: str | None = None) -> str:
        self.calls.append((audio_url, name))
        if self.error is not None:
            raise self.error
        return self.voice_id


@pytest.fixture
async def engine():
    """Fresh in-memory schema per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
def voice_provider() -> FakeVoiceProvider:
    return FakeVoiceProvider()


@pytest.fixture
def failing_voice_provider() -> FakeVoiceProvider:
    return FakeVoiceProvider(error=ProviderCallFailed())


@pytest.fixture
async def client(db_session, voice_provider) -> AsyncGenerator[httpx.AsyncClient, None]:
    """API client bound to the test session and the fake voice provider."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_voice_provider] = lambda: voice_provider
    app.dependency_overrides[get_phrase_random] = lambda: random.Random(7)

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(USER_ID)}"}


@pytest.fixture
def other_auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(OTHER_USER_ID)}"}


async def add_story(session: AsyncSession, title: str, slug: str, content: str = "Dawno, dawno temu...") -> Story:
    story = Story(id=new_id(), title=title, slug=slug, content=content, version=1)
    session.add(story)
    await session.commit()
    return story


async def add_generation(
    session: AsyncSession,
    story: Story,
    user_id: str = USER_ID,
    status: GenerationStatus = GenerationStatus.PENDING,
    created_at: datetime | None = None,
    progress: float = 0.0,
    result_url: str | None = None,
) -> StoryGeneration:
    generation = StoryGeneration(
        id=new_id(),
        story_id=story.id,
        user_id=user_id,
        status=status,
        progress=progress,
        result_url=result_url,
        created_at=created_at or datetime.now(UTC),
    )
    session.add(generation)
    await session.commit()
    return generation


async def add_log(
    session: AsyncSession, generation: StoryGeneration, event: str, occurred_at: datetime
) -> GenerationLog:
    entry = GenerationLog(
        id=new_id(), generation_id=generation.id, event=event, occurred_at=occurred_at
    )
    session.add(entry)
    await session.commit()
    return entry


async def add_voice_sample(
    session: AsyncSession, user_id: str = USER_ID, verified: bool = False
) -> VoiceSample:
    sample = VoiceSample(
        id=new_id(),
        user_id=user_id,
        elevenlabs_voice_id="voice-existing",
        verification_phrase="Jestem misiem o bardzo małym rozumku.",
        verified=verified,
        created_at=datetime.now(UTC),
    )
    session.add(sample)
    await session.commit()
    return sample


def minutes_ago(minutes: int) -> datetime:
    return datetime.now(UTC) - timedelta(minutes=minutes)
