"""Voice sample registration and ownership verification."""

import logging
import random

from sqlalchemy import and_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from narrator.database import VoiceSample, new_id, utcnow
from narrator.errors import (
    StoreError,
    VoiceProviderError,
    VoiceSampleExists,
    VoiceSampleNotFound,
    VoiceSampleUnauthorized,
    VoiceServiceUnavailable,
)
from narrator.infrastructure.voice import VoiceCloningProvider
from narrator.models import VerifyVoiceSampleResponse, VoiceSampleResponse
from narrator.schemas import CreateVoiceSampleRequest

logger = logging.getLogger(__name__)

# Read aloud by the user while recording; chosen to cover a wide range of phonemes.
VERIFICATION_PHRASES = (
    "Jestem misiem o bardzo małym rozumku.",
    "Im bardziej Puchatek zaglądał do środka, tym bardziej Prosiaczka tam nie było.",
    "Czy mógłbyś podać mi trochę miodu?",
    "Dzień bez przyjaciela to jak garnek bez kropli miodu.",
    "Obietnice się nie liczą, jeśli ktoś nie zamierza ich dotrzymać.",
    "Najlepiej jest tam, gdzie nas nie ma.",
    "Prosiaczku, czy masz może coś do jedzenia?",
    "Zawsze warto poczekać na przyjaciela.",
)

system_random = random.SystemRandom()


def get_random_phrase(rng: random.Random | None = None) -> str:
    """Return a verification phrase drawn uniformly from ``VERIFICATION_PHRASES``."""
    return (rng or system_random).choice(VERIFICATION_PHRASES)


class VoiceSampleService:
    """Create a user's single voice sample and flip its verification flag."""

    def __init__(self, db_session: AsyncSession, voice_provider: VoiceCloningProvider):
        self.db_session = db_session
        self.voice_provider = voice_provider

    async def create_voice_sample(
        self, user_id: str, request: CreateVoiceSampleRequest
    ) -> VoiceSampleResponse:
        """Clone the recorded voice and store the sample, unverified."""
        try:
            result = await self.db_session.execute(
                select(VoiceSample.id).where(VoiceSample.user_id == user_id)
            )
            existing_sample = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error checking existing voice sample: {e!s}", exc_info=True)
            raise StoreError("Failed to check existing voice sample") from e

        if existing_sample:
            raise VoiceSampleExists()

        # InvalidAudioUrl is a caller error and propagates unchanged.
        try:
            voice_id = await self.voice_provider.create_voice_model(
                request.audio_url, name=f"user_{user_id[:8]}"
            )
        except VoiceProviderError as e:
            logger.error(f"{self.voice_provider.name} voice cloning failed: {e!s}")
            raise VoiceServiceUnavailable() from e

        sample = VoiceSample(
            id=new_id(),
            user_id=user_id,
            elevenlabs_voice_id=voice_id,
            verification_phrase=request.verification_phrase,
            verified=False,
            created_at=utcnow(),
        )
        self.db_session.add(sample)

        try:
            await self.db_session.commit()
        except IntegrityError as e:
            await self.db_session.rollback()
            logger.warning(
                f"Voice sample for user {user_id} created concurrently; provider voice {voice_id} is unused"
            )
            raise VoiceSampleExists() from e
        except SQLAlchemyError as e:
            await self.db_session.rollback()
            logger.error(f"Error inserting voice sample: {e!s}", exc_info=True)
            raise StoreError("Failed to create voice sample") from e

        logger.info(f"Voice sample {sample.id} created for user {user_id}")
        return VoiceSampleResponse(
            id=sample.id,
            user_id=sample.user_id,
            created_at=sample.created_at,
            verified=sample.verified,
        )

    async def verify_voice_sample(
        self, user_id: str, sample_id: str, verified: bool
    ) -> VerifyVoiceSampleResponse:
        """Set the verification flag on a sample owned by *user_id*."""
        try:
            result = await self.db_session.execute(
                select(VoiceSample).where(VoiceSample.id == sample_id)
            )
            sample = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"Error fetching voice sample {sample_id}: {e!s}", exc_info=True)
            raise StoreError("Failed to fetch voice sample") from e

        if sample is None:
            raise VoiceSampleNotFound()
        if sample.user_id != user_id:
            logger.info(f"User {user_id} attempted to verify voice sample {sample_id} of another user")
            raise VoiceSampleUnauthorized()

        statement = (
            update(VoiceSample)
            .where(and_(VoiceSample.id == sample_id, VoiceSample.user_id == user_id))
            .values(verified=verified)
        )
        try:
            result = await self.db_session.execute(statement)
            updated = result.rowcount
            if updated:
                await self.db_session.commit()
            else:
                await self.db_session.rollback()
        except SQLAlchemyError as e:
            await self.db_session.rollback()
            logger.error(f"Error updating voice sample {sample_id}: {e!s}", exc_info=True)
            raise StoreError("Failed to update voice sample") from e

        if not updated:
            raise VoiceSampleNotFound()

        return VerifyVoiceSampleResponse(id=sample_id, verified=verified)
