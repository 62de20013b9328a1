from __future__ import annotations

import logging
import time

import httpx
from elevenlabs import AsyncElevenLabs
from elevenlabs.core.api_error import ApiError

from narrator.errors import InvalidAudioUrl, ProviderCallFailed, ServiceNotConfigured
from narrator.infrastructure.voice.base import VoiceCloningProvider, validate_audio_url

logger = logging.getLogger(__name__)

VOICE_DESCRIPTION = "Voice sample for story narration"


class ElevenLabsVoiceProvider(VoiceCloningProvider):
    """Instant voice cloning through the ElevenLabs API."""

    name: str = "eleven"

    def __init__(
        self,
        api_key: str | None = None,
        *,
        timeout: float = 30.0,
        max_audio_bytes: int = 10 * 1024 * 1024,
        client: AsyncElevenLabs | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.timeout = timeout
        self.max_audio_bytes = max_audio_bytes
        self._client = client
        self._transport = transport

    @property
    def client(self) -> AsyncElevenLabs:
        if self._client is None:
            self._client = AsyncElevenLabs(api_key=self.api_key, timeout=self.timeout)
        return self._client

    async def create_voice_model(self, audio_url: str, name: str | None = None) -> str:
        """Download the sample at *audio_url* and register it as a cloned voice."""
        if not validate_audio_url(audio_url):
            logger.warning(f"Rejected non-HTTPS audio URL: {audio_url}")
            raise InvalidAudioUrl("Only HTTPS URLs are allowed")

        if not self.api_key:
            logger.error("ElevenLabs API key not configured")
            raise ServiceNotConfigured()

        voice_name = name or f"Voice_{int(time.time() * 1000)}"
        logger.info(f"Creating ElevenLabs voice {voice_name} from {audio_url}")

        try:
            audio, content_type = await self._download_audio(audio_url)
            filename = httpx.URL(audio_url).path.rsplit("/", 1)[-1] or "sample"
            response = await self.client.voices.ivc.create(
                name=voice_name,
                files=[(filename, audio, content_type)],
                description=VOICE_DESCRIPTION,
            )
        except ProviderCallFailed:
            raise
        except (httpx.HTTPError, ApiError) as e:
            logger.error(f"Error calling ElevenLabs API: {e!s}")
            raise ProviderCallFailed() from e
        except Exception as e:
            logger.error(f"Unexpected ElevenLabs failure: {e!s}", exc_info=True)
            raise ProviderCallFailed() from e

        voice_id = getattr(response, "voice_id", None)
        if not voice_id:
            raise ProviderCallFailed("ElevenLabs response did not include a voice_id")

        logger.info(f"ElevenLabs voice {voice_id} created")
        return voice_id

    async def _download_audio(self, audio_url: str) -> tuple[bytes, str]:
        """Fetch the recorded sample, refusing anything above ``max_audio_bytes``."""
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as http:
            async with http.stream("GET", audio_url) as response:
                response.raise_for_status()
                chunks: list[bytes] = []
                size = 0
                async for chunk in response.aiter_bytes():
                    size += len(chunk)
                    if size > self.max_audio_bytes:
                        raise ProviderCallFailed(
                            f"Voice sample exceeds {self.max_audio_bytes} bytes"
                        )
                    chunks.append(chunk)
                content_type = response.headers.get("content-type", "audio/mpeg")

        return b"".join(chunks), content_type
