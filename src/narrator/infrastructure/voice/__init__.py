"""Voice cloning provider implementations (ElevenLabs)."""

# Re-export for easier access, e.g. `from narrator.infrastructure.voice import ElevenLabsVoiceProvider`
from .base import VoiceCloningProvider, validate_audio_url
from .elevenlabs_provider import ElevenLabsVoiceProvider

__all__ = [
    "ElevenLabsVoiceProvider",
    "VoiceCloningProvider",
    "validate_audio_url",
]
