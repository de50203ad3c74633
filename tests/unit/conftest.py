"""Pytest fixtures for story store and API tests."""

import fnmatch
import json
from typing import Any
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from storybook.api.database.story_store import StoryStore
from storybook.api.dependencies import get_story_store
from storybook.api.main import app

TEST_STORY_ID = "12345678-1234-5678-1234-567812345678"


class FakeKVClient:
    """In-memory stand-in for KVClient with the same hash semantics.

    Each command is an AsyncMock wrapping the fake implementation, so tests
    can assert on calls.
    """

    def __init__(self):
        self.data: dict[str, dict[str, Any]] = {}
        self.hset = AsyncMock(side_effect=self._hset)
        self.hgetall = AsyncMock(side_effect=self._hgetall)
        self.exists = AsyncMock(side_effect=self._exists)
        self.delete = AsyncMock(side_effect=self._delete)
        self.keys = AsyncMock(side_effect=self._keys)

    async def _hset(self, key: str, fields: dict[str, Any]) -> int:
        current = self.data.setdefault(key, {})
        added = len([f for f in fields if f not in current])
        for field, value in fields.items():
            current[field] = value if isinstance(value, str) else json.dumps(value)
        return added

    async def _hgetall(self, key: str):
        if key not in self.data:
            return None
        return dict(self.data[key])

    async def _exists(self, key: str) -> int:
        return 1 if key in self.data else 0

    async def _delete(self, key: str) -> int:
        return 1 if self.data.pop(key, None) is not None else 0

    async def _keys(self, pattern: str) -> list[str]:
        return [key for key in self.data if fnmatch.fnmatchcase(key, pattern)]


@pytest.fixture
def fake_kv():
    """Create an empty in-memory KV client."""
    return FakeKVClient()


@pytest.fixture
def store(fake_kv):
    """Create a StoryStore backed by the in-memory KV client."""
    return StoryStore(fake_kv)


@pytest.fixture
def story_data():
    """A complete, valid story in wire shape."""
    return {
        "id": TEST_STORY_ID,
        "title": "Brave Bunny",
        "prompt": "a shy bunny who learns to be brave",
        "age": "3-5",
        "status": "complete",
        "visibility": "public",
        "storyContent": {
            "title": "Brave Bunny",
            "pages": [{"text": "Once upon a time...", "imagePrompt": "a bunny"}],
            "moral": "Courage grows when you share it.",
        },
        "images": [{"page": 1, "url": "https://images.example.com/bunny-1.png"}],
        "createdAt": "2024-01-01T00:00:00Z",
        "deletionToken": "tok1",
    }


@pytest.fixture
def client_with_store(store, monkeypatch):
    """TestClient whose routes use the in-memory story store."""
    monkeypatch.delenv("KV_REQUIRE_CONFIG", raising=False)
    app.dependency_overrides[get_story_store] = lambda: store

    with TestClient(app) as client:
        yield client, store

    app.dependency_overrides.clear()
