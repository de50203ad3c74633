"""Shared enums for API models."""

from enum import Enum


class StoryStatus(str, Enum):
    """Progress of a story through the generation pipeline."""

    GENERATING = "generating"
    GENERATING_STORY = "generating_story"
    GENERATING_IMAGES = "generating_images"
    COMPLETE = "complete"
    FAILED = "failed"


class Visibility(str, Enum):
    """Whether a story appears in public listings."""

    PUBLIC = "public"
    UNLISTED = "unlisted"
