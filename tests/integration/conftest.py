"""Pytest configuration for KV integration tests."""

import os

import pytest
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


@pytest.fixture(scope="session")
def kv_available():
    """Check if KV credentials are configured."""
    return bool(os.getenv("KV_REST_API_URL") and os.getenv("KV_REST_API_TOKEN"))


@pytest.fixture(autouse=True)
def skip_if_no_kv(request, kv_available):
    """Skip tests marked with requires_kv if credentials are not set."""
    if request.node.get_closest_marker("requires_kv"):
        if not kv_available:
            pytest.skip("KV_REST_API_URL or KV_REST_API_TOKEN not set")
