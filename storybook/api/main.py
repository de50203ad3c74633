"""FastAPI application for the Storybook story API."""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import LOG_FORMAT_ENV, load_kv_config
from .database.kv_client import KVClient
from .database.story_store import StoryStore
from .logging import configure_logging
from .routes import stories

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    configure_logging(json_format=os.getenv(LOG_FORMAT_ENV, "json") != "text")

    # Startup: build the KV client once and share it for the process lifetime.
    # Missing credentials raise here only when KV_REQUIRE_CONFIG is set.
    kv_config = load_kv_config()
    kv_client = KVClient(kv_config)
    app.state.story_store = StoryStore(kv_client)
    if kv_config.is_placeholder:
        logger.warning("Story store started with placeholder KV credentials")
    else:
        logger.info("Story store initialized")

    yield

    # Shutdown: close the HTTP connection pool
    await kv_client.aclose()


app = FastAPI(
    title="Storybook API",
    description="""
Store and serve AI-generated illustrated children's stories.

## Workflow
1. POST `/stories` with a prompt and reader age to create a story record
2. The generation pipeline fills in the story text and images
3. Poll GET `/stories/{id}` until status is `complete` or `failed`
4. DELETE `/stories/{id}` with the `X-Deletion-Token` returned on creation
    """,
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware for web frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, specify exact origins
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(stories.router, prefix="/stories", tags=["Stories"])


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
