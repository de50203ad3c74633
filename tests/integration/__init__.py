"""
Integration tests that talk to a real hosted KV store.

Run selectively:
    pytest tests/integration/ -v

Requires in .env:
    - KV_REST_API_URL
    - KV_REST_API_TOKEN
"""
