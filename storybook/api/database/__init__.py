"""Database module for story persistence in the hosted KV store."""

from .kv_client import KVClient, KVCommandError
from .story_store import MissingStoryIdError, StoryStore, story_key

__all__ = [
    # KV client
    "KVClient",
    "KVCommandError",
    # Store
    "StoryStore",
    "MissingStoryIdError",
    "story_key",
]
