"""I/O boundary adapters (e.g. external voice APIs)."""

from .voice import ElevenLabsVoiceProvider, VoiceCloningProvider, validate_audio_url

__all__ = [
    "ElevenLabsVoiceProvider",
    "VoiceCloningProvider",
    "validate_audio_url",
]
