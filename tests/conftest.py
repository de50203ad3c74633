"""Root pytest configuration for shared markers."""


def pytest_configure(config):
    """Register custom markers used across test directories."""
    config.addinivalue_line(
        "markers", "requires_kv: mark test as requiring KV_REST_API_URL and KV_REST_API_TOKEN"
    )
