"""API configuration.

Single source of truth for the KV store settings used across the API layer.
The configuration is built once at startup and handed to the store; nothing
reads the environment after that.
"""

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Hosted KV store (Upstash / Vercel KV REST API)
KV_URL_ENV = "KV_REST_API_URL"
KV_TOKEN_ENV = "KV_REST_API_TOKEN"
KV_REQUIRE_CONFIG_ENV = "KV_REQUIRE_CONFIG"
KV_AUTOMATIC_DESERIALIZATION_ENV = "KV_AUTOMATIC_DESERIALIZATION"

# Placeholders used when the KV credentials are missing (preview deployments)
PLACEHOLDER_KV_URL = "https://fake-kv-url.vercel-storage.com"
PLACEHOLDER_KV_TOKEN = "fake_token_for_preview_only"

# Story store settings
STORY_KEY_PREFIX = "story:"
DEFAULT_LIST_LIMIT = 100

# Logging
LOG_FORMAT_ENV = "LOG_FORMAT"


class ConfigurationError(RuntimeError):
    """Raised at startup when required configuration is missing."""


@dataclass(frozen=True)
class KVConfig:
    """Connection settings for the hosted KV store."""

    url: str
    token: str
    automatic_deserialization: bool = False
    is_placeholder: bool = False


def env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean environment variable ("1", "true", "yes", "on")."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def load_kv_config(require: bool | None = None) -> KVConfig:
    """Build the KV configuration from the environment.

    Args:
        require: If True, missing credentials raise ConfigurationError.
            If False, placeholder values are used and a warning is logged.
            If None, the KV_REQUIRE_CONFIG environment flag decides.

    Returns:
        The KV configuration to pass to the store client.
    """
    if require is None:
        require = env_flag(KV_REQUIRE_CONFIG_ENV)

    url = os.getenv(KV_URL_ENV)
    token = os.getenv(KV_TOKEN_ENV)
    automatic_deserialization = env_flag(KV_AUTOMATIC_DESERIALIZATION_ENV)

    if url and token:
        return KVConfig(
            url=url,
            token=token,
            automatic_deserialization=automatic_deserialization,
        )

    missing = [name for name, value in ((KV_URL_ENV, url), (KV_TOKEN_ENV, token)) if not value]
    if require:
        raise ConfigurationError(
            f"KV store not configured. Set {' and '.join(missing)} "
            "to the hosted KV REST endpoint and token."
        )

    logger.warning(
        f"{' and '.join(missing)} not set - using placeholder KV credentials. "
        "Story store operations will not work.",
        extra={"operation": "config"},
    )
    return KVConfig(
        url=PLACEHOLDER_KV_URL,
        token=PLACEHOLDER_KV_TOKEN,
        automatic_deserialization=automatic_deserialization,
        is_placeholder=True,
    )
