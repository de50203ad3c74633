"""Structured logging infrastructure for the API layer.

Provides JSON-formatted logging for production and human-readable
logging for development, plus a StoreLogger helper for story store events.
"""

import json
import logging
import sys
from datetime import datetime, timezone


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging."""

    EXTRA_FIELDS = ("story_id", "field", "operation", "error_type")

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Add extra fields if present
        for name in self.EXTRA_FIELDS:
            if hasattr(record, name):
                log_data[name] = getattr(record, name)

        # Add exception info if present
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def configure_logging(json_format: bool = True, level: int = logging.INFO) -> None:
    """Configure structured logging for the application."""
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    if json_format:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )

    root_logger.addHandler(handler)


class StoreLogger:
    """Logger for story store events with structured fields."""

    def __init__(self):
        self.logger = logging.getLogger("story_store")

    def missing_id(self, operation: str = "create") -> None:
        self.logger.error(
            "Story ID is required",
            extra={"operation": operation},
        )

    def serialization_failed(self, story_id: str, field: str, error: Exception) -> None:
        self.logger.error(
            f"Error serializing {field}: {error}",
            extra={"story_id": story_id, "field": field, "error_type": type(error).__name__},
        )

    def validation_failed(self, story_id: str, error: Exception) -> None:
        self.logger.warning(
            f"Invalid story data, attempting repair: {error}",
            extra={"story_id": story_id, "operation": "decode", "error_type": type(error).__name__},
        )

    def record_unvalidated(self, story_id: str, error: Exception) -> None:
        self.logger.warning(
            "Story data still invalid after repair, returning unvalidated record",
            extra={"story_id": story_id, "operation": "decode", "error_type": type(error).__name__},
        )


# Global store logger instance
store_logger = StoreLogger()
