"""Story store: CRUD for story records kept as hashes in the hosted KV store.

Each story lives under ``story:<id>`` as a flat hash of string fields. The
nested ``storyContent`` and ``images`` values are always stored as JSON
strings; the store serializes them on write and repairs them on read when a
writer bypassed this module.
"""

import asyncio
import json
import uuid
from enum import Enum
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ValidationError

from ..config import DEFAULT_LIST_LIMIT, STORY_KEY_PREFIX
from ..logging import store_logger
from ..models.story import WIRE_FIELD_NAMES, Story, StoryRecord
from .kv_client import KVClient

# Nested fields stored as JSON strings, with the value used when one
# cannot be serialized
NESTED_FIELD_FALLBACKS = {
    "storyContent": "{}",
    "images": "[]",
}

StoryData = Union[Mapping[str, Any], BaseModel]


class MissingStoryIdError(ValueError):
    """Raised when a story is created without an id."""


def story_key(story_id: str) -> str:
    """Return the KV key for a story."""
    return f"{STORY_KEY_PREFIX}{story_id}"


def _json_default(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_none=True)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def serialize_nested_field(story_id: str, field: str, value: Any) -> str:
    """Return value as a JSON string, or the field's fallback if it can't be encoded."""
    if isinstance(value, str):
        return value
    try:
        # NaN and Infinity are not valid JSON
        return json.dumps(value, default=_json_default, allow_nan=False)
    except (TypeError, ValueError) as e:
        store_logger.serialization_failed(story_id, field, e)
        return NESTED_FIELD_FALLBACKS[field]


def normalize_nested_fields(story_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of data with every present nested field as a JSON string."""
    normalized = dict(data)
    for field in NESTED_FIELD_FALLBACKS:
        if normalized.get(field) is not None:
            normalized[field] = serialize_nested_field(story_id, field, normalized[field])
    return normalized


def to_wire(data: StoryData) -> dict[str, Any]:
    """Convert caller data to wire-shaped fields.

    Accepts a pydantic model or a mapping keyed by wire names or Python
    attribute names. None values are dropped since a hash has no null, and
    UUIDs (e.g. the id) are written as strings.
    """
    if isinstance(data, BaseModel):
        data = data.model_dump(by_alias=True, exclude_unset=True)

    wire: dict[str, Any] = {}
    for name, value in data.items():
        if value is None:
            continue
        if isinstance(value, Enum):
            value = value.value
        elif isinstance(value, uuid.UUID):
            value = str(value)
        wire[WIRE_FIELD_NAMES.get(name, name)] = value
    return wire


class StoryStore:
    """Data-access layer for story records.

    No locking or transactions: concurrent updates to the same story race per
    field, and storage errors propagate to the caller unchanged.
    """

    def __init__(self, client: KVClient):
        self.client = client

    async def create(self, data: StoryData) -> dict[str, Any]:
        """Write a new story and return the record as written.

        Raises:
            MissingStoryIdError: data has no id. Nothing is written.
        """
        record = to_wire(data)
        story_id = record.get("id")
        if not story_id:
            store_logger.missing_id()
            raise MissingStoryIdError("Story ID is required")

        record = normalize_nested_fields(story_id, record)
        await self.client.hset(story_key(story_id), record)
        return record

    async def get(self, story_id: str) -> Optional[StoryRecord]:
        """Get a story by ID, or None if it does not exist."""
        data = await self.client.hgetall(story_key(story_id))
        if not data:
            return None
        return self._decode(story_id, data)

    async def update(self, story_id: str, data: StoryData) -> Optional[StoryRecord]:
        """Merge the provided fields into an existing story.

        Returns the full updated story, or None if it does not exist (in which
        case nothing is written). The id itself cannot be changed.
        """
        key = story_key(story_id)
        if not await self.client.exists(key):
            return None

        fields = to_wire(data)
        fields.pop("id", None)
        fields = normalize_nested_fields(story_id, fields)
        if fields:
            await self.client.hset(key, fields)

        return await self.get(story_id)

    async def delete(self, story_id: str) -> bool:
        """Delete a story. True only if exactly one key was removed."""
        deleted = await self.client.delete(story_key(story_id))
        return deleted == 1

    async def list(self, limit: int = DEFAULT_LIST_LIMIT) -> list[StoryRecord]:
        """List up to `limit` stories.

        Scans every ``story:*`` key and fetches the first `limit` of them
        concurrently. Order is whatever the KV store returns.
        """
        if limit <= 0:
            return []

        keys = await self.client.keys(f"{STORY_KEY_PREFIX}*")
        if not keys:
            return []

        stories = await asyncio.gather(*(self._fetch(key) for key in keys[:limit]))
        return [story for story in stories if story]

    async def _fetch(self, key: str) -> Optional[StoryRecord]:
        data = await self.client.hgetall(key)
        if not data:
            # Deleted between the key scan and the fetch
            return None
        return self._decode(key[len(STORY_KEY_PREFIX):], data)

    def _decode(self, story_id: str, data: Mapping[str, Any]) -> StoryRecord:
        """Validate stored data, repairing nested fields if validation fails.

        Falls back to the repaired wire-shaped dict when the record is still
        invalid, so malformed stories are returned rather than raising.
        """
        try:
            return Story.model_validate(data)
        except ValidationError as e:
            store_logger.validation_failed(story_id, e)

        repaired = normalize_nested_fields(story_id, data)
        try:
            return Story.model_validate(repaired)
        except ValidationError as e:
            store_logger.record_unvalidated(story_id, e)
            return repaired
