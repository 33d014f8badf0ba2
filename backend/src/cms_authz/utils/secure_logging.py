"""Logging setup and sanitizing helpers."""

import logging
import re
from functools import lru_cache
from typing import Any

from cms_authz.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure root logging from settings.

    Args:
        level: Optional level name overriding ``Settings.log_level``
    """
    settings = get_settings()
    logging.basicConfig(level=level or settings.log_level, format=LOG_FORMAT)
    # SQL statements are only logged through the engine's echo flag
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


@lru_cache(maxsize=1)
def is_debug_mode() -> bool:
    """Check if application is running in debug mode."""
    return get_settings().debug


def sanitize_exception_message(error: Exception) -> str:
    """Strip connection strings and long tokens from an exception message.

    Args:
        error: The exception to sanitize

    Returns:
        Sanitized message suitable for production logs
    """
    error_msg = str(error)

    url_pattern = r"(postgresql|sqlite)(\+\w+)?://[^\s]+"
    error_msg = re.sub(url_pattern, "[URL]", error_msg)

    error_msg = re.sub(r"[a-zA-Z0-9_\-]{32,}", "[TOKEN]", error_msg)

    if len(error_msg) > 200:
        error_msg = error_msg[:197] + "..."

    return error_msg


def log_warning(
    logger: logging.Logger,
    message: str,
    error: Exception | None = None,
    **kwargs: Any,
) -> None:
    """Log a warning, with full exception detail only in debug mode.

    Args:
        logger: The logger instance to use
        message: The log message
        error: Optional exception to include
        **kwargs: Extra context, only attached in debug mode
    """
    if is_debug_mode():
        if error:
            logger.warning(f"{message}: {error}", extra=kwargs)
        else:
            logger.warning(message, extra=kwargs)
    elif error:
        logger.warning(f"{message}: {sanitize_exception_message(error)}")
    else:
        logger.warning(message)

