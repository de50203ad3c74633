"""Pydantic models for API requests."""

from typing import Optional

from pydantic import BaseModel, Field

from .enums import Visibility


class CreateStoryRequest(BaseModel):
    """Request body for creating a new story."""

    prompt: str = Field(
        ...,
        min_length=3,
        max_length=1000,
        description="What the story should be about",
        examples=["a shy bunny who learns to make friends"],
    )
    age: str = Field(
        ...,
        min_length=1,
        max_length=20,
        description="Age of the intended reader",
        examples=["3-5", "6"],
    )
    title: Optional[str] = Field(
        default=None,
        max_length=200,
        description="Working title; replaced when the story is generated",
    )
    visibility: Visibility = Field(
        default=Visibility.PUBLIC,
        description="Unlisted stories are only reachable by ID",
    )
