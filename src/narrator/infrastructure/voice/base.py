from __future__ import annotations

from abc import ABC, abstractmethod

import httpx


def validate_audio_url(audio_url: str) -> bool:
    """Return True if *audio_url* is an absolute HTTPS URL. Never raises."""
    try:
        url = httpx.URL(audio_url)
    except (httpx.InvalidURL, TypeError, ValueError):
        return False
    return url.scheme == "https" and bool(url.host)


class VoiceCloningProvider(ABC):
    """Abstract base class for voice cloning providers."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the (unique) short-name for this provider (e.g. 'eleven')."""

    @abstractmethod
    async def create_voice_model(self, audio_url: str, name: str | None = None) -> str:
        """Register the voice recorded at *audio_url* and return the provider voice id.

        Raises ``InvalidAudioUrl`` before any network call when the URL is not
        HTTPS, ``ServiceNotConfigured`` without credentials and
        ``ProviderCallFailed`` on any transport or provider error.
        """
