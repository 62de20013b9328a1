import uuid
from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Mapped, declarative_base, mapped_column, relationship

from narrator.api.settings import get_settings
from narrator.models import GenerationStatus

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(UTC)


def new_id() -> str:
    return str(uuid.uuid4())


class Profile(Base):
    """Identity anchor for an authenticated user; owned by the identity provider."""

    __tablename__ = "profiles"

    user_id: Mapped[str] = mapped_column(String, primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)


class Story(Base):
    """A narratable story from the library. Read-only for this service."""

    __tablename__ = "stories"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String, nullable=False)
    slug: Mapped[str] = mapped_column(String, unique=True, nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    generations = relationship("StoryGeneration", back_populates="story")


class StoryGeneration(Base):
    """A story-to-audio narration job requested by a user."""

    __tablename__ = "story_generations"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=new_id)
    story_id: Mapped[str] = mapped_column(
        String, ForeignKey("stories.id"), nullable=False, index=True
    )
    user_id: Mapped[str] = mapped_column(String, nullable=False, index=True)

    # Processing state, advanced by the narration worker
    status: Mapped[GenerationStatus] = mapped_column(
        Enum(
            GenerationStatus,
            name="generation_status",
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        default=GenerationStatus.PENDING,
        index=True,
    )
    progress: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    result_url: Mapped[str | None] = mapped_column(String, nullable=True)

    # `metadata` is reserved on declarative classes
    generation_metadata: Mapped[dict[str, Any] | None] = mapped_column(
        "metadata", JSON, nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, index=True
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, onupdate=utcnow
    )

    story = relationship("Story", back_populates="generations")
    logs = relationship(
        "GenerationLog",
        back_populates="generation",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (Index("idx_generations_user_created", "user_id", "created_at"),)


class GenerationLog(Base):
    """Append-only event log of a generation."""

    __tablename__ = "generation_logs"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=new_id)
    generation_id: Mapped[str] = mapped_column(
        String, ForeignKey("story_generations.id", ondelete="CASCADE"), nullable=False
    )
    event: Mapped[str] = mapped_column(Text, nullable=False)
    occurred_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    generation = relationship("StoryGeneration", back_populates="logs")

    __table_args__ = (Index("idx_logs_generation_occurred", "generation_id", "occurred_at"),)


class VoiceSample(Base):
    """A user's cloned voice registered with the voice provider."""

    __tablename__ = "voice_samples"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=new_id)
    user_id: Mapped[str] = mapped_column(String, nullable=False)
    elevenlabs_voice_id: Mapped[str] = mapped_column(String, nullable=False)
    verification_phrase: Mapped[str] = mapped_column(Text, nullable=False)
    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow)

    # At most one sample per user
    __table_args__ = (UniqueConstraint("user_id", name="unique_voice_sample_user"),)


settings = get_settings()
engine = create_async_engine(settings.database_url, echo=settings.database_echo, future=True)
AsyncSessionLocal = async_sessionmaker(engine, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency to get database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()

