"""FastAPI dependency injection for the story store."""

from typing import Annotated

from dotenv import find_dotenv, load_dotenv
from fastapi import Depends, Request

# Load .env from project root (find_dotenv searches parent directories)
load_dotenv(find_dotenv())

from .database.story_store import StoryStore  # noqa: E402


def get_story_store(request: Request) -> StoryStore:
    """Get the StoryStore built at startup."""
    store = getattr(request.app.state, "story_store", None)
    if store is None:
        raise RuntimeError(
            "Story store not initialized. Ensure the API server is running."
        )
    return store


# Type alias for cleaner route signatures
Store = Annotated[StoryStore, Depends(get_story_store)]
