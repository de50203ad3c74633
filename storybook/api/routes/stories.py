"""Story CRUD endpoints."""

import hmac
import secrets
import uuid
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Header, HTTPException, Query, status

from ..config import DEFAULT_LIST_LIMIT
from ..dependencies import Store
from ..models.enums import StoryStatus, Visibility
from ..models.requests import CreateStoryRequest
from ..models.responses import CreateStoryResponse, StoryListResponse
from ..models.story import StoryRecord, record_to_dict

router = APIRouter()


def _public_view(record: StoryRecord) -> dict[str, Any]:
    """Wire-shaped story without its deletion token."""
    data = record_to_dict(record)
    data.pop("deletionToken", None)
    return data


@router.post(
    "/",
    response_model=CreateStoryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new story",
    description="Create a story record in the `generating` state. The deletion token is only returned here.",
)
async def create_story(request: CreateStoryRequest, store: Store):
    """Create a new story record."""
    story_id = str(uuid.uuid4())
    deletion_token = secrets.token_urlsafe(32)

    await store.create(
        {
            "id": story_id,
            "title": request.title or "",
            "prompt": request.prompt,
            "age": request.age,
            "status": StoryStatus.GENERATING,
            "visibility": request.visibility,
            "createdAt": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "deletionToken": deletion_token,
        }
    )

    return CreateStoryResponse(
        id=story_id,
        status=StoryStatus.GENERATING,
        deletion_token=deletion_token,
    )


@router.get(
    "/",
    response_model=StoryListResponse,
    summary="List public stories",
    description="List up to `limit` public stories. Order is not guaranteed.",
)
async def list_stories(
    store: Store,
    limit: int = Query(default=DEFAULT_LIST_LIMIT, ge=1, le=1000, description="Maximum number of stories to scan"),
):
    """List public stories."""
    records = await store.list(limit=limit)

    # Unlisted stories are only reachable by ID
    stories = []
    for record in records:
        story = _public_view(record)
        if story.get("visibility", Visibility.PUBLIC.value) == Visibility.PUBLIC.value:
            stories.append(story)

    return StoryListResponse(stories=stories, count=len(stories))


@router.get(
    "/{story_id}",
    summary="Get a story",
    description="Get a story by ID. Poll this endpoint to follow generation status.",
)
async def get_story(story_id: str, store: Store) -> dict[str, Any]:
    """Get a story by ID."""
    record = await store.get(story_id)

    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Story {story_id} not found",
        )

    return _public_view(record)


@router.delete(
    "/{story_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a story",
    description="Delete a story. Requires the deletion token issued when the story was created.",
)
async def delete_story(
    story_id: str,
    store: Store,
    x_deletion_token: str = Header(..., description="Deletion token returned on creation"),
):
    """Delete a story after checking its deletion token."""
    record = await store.get(story_id)

    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Story {story_id} not found",
        )

    stored_token = record_to_dict(record).get("deletionToken")
    if not isinstance(stored_token, str) or not hmac.compare_digest(
        stored_token.encode(), x_deletion_token.encode()
    ):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid deletion token",
        )

    if not await store.delete(story_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Story {story_id} not found",
        )
