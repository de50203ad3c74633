"""Pydantic models for stories, API requests and responses."""

from .enums import StoryStatus, Visibility
from .requests import CreateStoryRequest
from .responses import CreateStoryResponse, StoryListResponse
from .story import (
    Story,
    StoryContent,
    StoryPage,
    StoryRecord,
    WIRE_FIELD_NAMES,
    record_to_dict,
)

__all__ = [
    "StoryStatus",
    "Visibility",
    "CreateStoryRequest",
    "CreateStoryResponse",
    "StoryListResponse",
    "Story",
    "StoryContent",
    "StoryPage",
    "StoryRecord",
    "WIRE_FIELD_NAMES",
    "record_to_dict",
]
