"""Domain error identities.

Services raise these; the HTTP layer owns the mapping to status codes:

* ``InvalidInputError``        -> 400 / 422
* ``NotFoundError``            -> 404
* ``ConflictError``            -> 409
* ``UpstreamUnavailableError`` -> 502
* ``InternalError``            -> 500
"""


class NarratorError(Exception):
    """Base class for every error raised by the narrator services."""

    code = "NARRATOR_ERROR"
    default_message = "Unexpected error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(NarratorError):
    code = "INVALID_INPUT"
    default_message = "Invalid input"


class NotFoundError(NarratorError):
    code = "NOT_FOUND"
    default_message = "Resource not found"


class ConflictError(NarratorError):
    code = "CONFLICT"
    default_message = "Conflicting state"


class UpstreamUnavailableError(NarratorError):
    code = "UPSTREAM_UNAVAILABLE"
    default_message = "Upstream service unavailable"


class InternalError(NarratorError):
    code = "INTERNAL_ERROR"
    default_message = "Internal server error"


# --- Store -------------------------------------------------------------------


class StoreError(InternalError):
    """A store round-trip failed for a reason other than "no rows"."""

    code = "STORE_ERROR"
    default_message = "Failed to access the data store"


# --- Stories and generations -------------------------------------------------


class StoryNotFound(NotFoundError):
    code = "STORY_NOT_FOUND"
    default_message = "Story not found"


class GenerationNotFound(NotFoundError):
    code = "GENERATION_NOT_FOUND"
    default_message = "Generation not found"


class GenerationInProgress(ConflictError):
    code = "GENERATION_IN_PROGRESS"
    default_message = "Cannot delete in-progress generation"


# --- Voice samples -----------------------------------------------------------


class VoiceSampleExists(ConflictError):
    code = "VOICE_SAMPLE_EXISTS"
    default_message = "Voice sample already exists for this user"


class VoiceSampleNotFound(NotFoundError):
    code = "VOICE_SAMPLE_NOT_FOUND"
    default_message = "Voice sample not found"


class VoiceSampleUnauthorized(NotFoundError):
    """The sample exists but belongs to another user; surfaced as not found."""

    code = "VOICE_SAMPLE_UNAUTHORIZED"
    default_message = "Voice sample not found"


class VoiceServiceUnavailable(UpstreamUnavailableError):
    code = "VOICE_SERVICE_UNAVAILABLE"
    default_message = "Voice service unavailable"


# --- Voice provider adapter --------------------------------------------------


class InvalidAudioUrl(InvalidInputError):
    code = "INVALID_AUDIO_URL"
    default_message = "Invalid audio URL format"


class VoiceProviderError(NarratorError):
    """Failure reported by the voice cloning adapter."""

    code = "VOICE_PROVIDER_ERROR"
    default_message = "Failed to create voice model"


class ServiceNotConfigured(VoiceProviderError):
    code = "SERVICE_NOT_CONFIGURED"
    default_message = "Voice service not configured"


class ProviderCallFailed(VoiceProviderError):
    code = "PROVIDER_CALL_FAILED"
    default_message = "Failed to create voice model"
