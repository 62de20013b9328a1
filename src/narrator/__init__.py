"""
Narrator – story narration backend.

Browse stories, request narration jobs, follow their progress and register a
cloned voice sample.
"""

from .models import (
    GenerationStatus,
    StoryDetail,
    StoryGenerationResponse,
    StorySummary,
)

__all__ = [
    "GenerationStatus",
    "StoryDetail",
    "StoryGenerationResponse",
    "StorySummary",
]
