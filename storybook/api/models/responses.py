"""Pydantic models for API responses."""

from typing import Any

from pydantic import BaseModel, Field

from .enums import StoryStatus
from .story import WireModel


class StoryListResponse(BaseModel):
    """Stories returned by the listing endpoint.

    Each story is the wire-shaped record with the deletion token removed.
    Records that failed validation are passed through as stored.
    """

    stories: list[dict[str, Any]]
    count: int


class CreateStoryResponse(WireModel):
    """Response when creating a new story.

    This is the only response that carries the deletion token.
    """

    id: str
    status: StoryStatus
    deletion_token: str
    message: str = Field(
        default="Story created. Keep the deletion token to delete it later."
    )
