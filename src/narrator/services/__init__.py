"""Domain services: business rules on top of the relational store."""

from .generation_log_service import GenerationLogService
from .story_generation_service import StoryGenerationService
from .story_service import StoryService
from .voice_sample_service import (
    VERIFICATION_PHRASES,
    VoiceSampleService,
    get_random_phrase,
    system_random,
)

__all__ = [
    "VERIFICATION_PHRASES",
    "GenerationLogService",
    "StoryGenerationService",
    "StoryService",
    "VoiceSampleService",
    "get_random_phrase",
    "system_random",
]
