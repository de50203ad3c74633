"""Pydantic models for persisted stories.

Field names are snake_case in Python and camelCase on the wire; the hash
stored under ``story:<id>`` uses the camelCase names.
"""

import json
import uuid
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .enums import StoryStatus, Visibility


class WireModel(BaseModel):
    """Base model that reads and writes camelCase field names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StoryPage(WireModel):
    """A single page of a generated story."""

    text: str
    image_prompt: str


class StoryContent(WireModel):
    """Generated story text, persisted as a JSON string on the Story."""

    title: str
    pages: list[StoryPage]
    moral: Optional[str] = None


class Story(WireModel):
    """A story record as persisted in the KV store."""

    id: str
    title: str
    prompt: str
    age: str
    status: StoryStatus
    visibility: Visibility = Visibility.PUBLIC
    story_content: Optional[str] = None  # JSON string of StoryContent
    images: Optional[str] = None  # JSON string of an array
    created_at: str
    completed_at: Optional[str] = None
    deletion_token: str
    error: Optional[str] = None

    @field_validator("id")
    @classmethod
    def _validate_uuid(cls, v: str) -> str:
        uuid.UUID(v)
        return v

    def content(self) -> Optional[StoryContent]:
        """Decode storyContent, or None if it is absent.

        Raises ValidationError if the stored JSON is not a StoryContent,
        e.g. the "{}" placeholder written when serialization failed.
        """
        if self.story_content is None:
            return None
        return StoryContent.model_validate_json(self.story_content)

    def image_list(self) -> list[Any]:
        """Decode images, or an empty list if they are absent."""
        if self.images is None:
            return []
        return json.loads(self.images)


# A validated Story, or the wire-shaped dict returned for records that could
# not be validated even after repair.
StoryRecord = Union[Story, dict[str, Any]]

# Python attribute name -> wire name, e.g. "story_content" -> "storyContent"
WIRE_FIELD_NAMES: dict[str, str] = {
    name: field.alias or name for name, field in Story.model_fields.items()
}


def record_to_dict(record: StoryRecord) -> dict[str, Any]:
    """Return a wire-shaped dict for a Story or a degraded record."""
    if isinstance(record, Story):
        return record.model_dump(mode="json", by_alias=True, exclude_none=True)
    return dict(record)
