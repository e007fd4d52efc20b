"""Logging setup shared by the API process and the test suite."""

import logging

from atelier.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: int | str | None = None) -> None:
    """Install a single stream handler on the root logger."""

    desired_level = level or settings.LOG_LEVEL
    logging.root.handlers.clear()
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.basicConfig(level=desired_level, handlers=[handler])


def truncate_for_log(value: str, limit: int = 500) -> str:
    """Clip long payloads (data URLs mostly) before they reach the log."""

    if len(value) > limit:
        return value[:limit] + "..."
    return value
