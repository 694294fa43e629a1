"""Logging configuration for jirakit.

Library modules log through ``logging.getLogger(__name__)`` and never
configure handlers themselves. The CLI calls setup_logging(), which is
controlled by environment variables.

Environment Variables:
    JIRAKIT_LOG: Set to "true" to enable logging (default: "false")
    JIRAKIT_LOG_FILE: Path to log file (default: ~/.jirakit.log)
    JIRAKIT_LOG_LEVEL: Log level name (default: "INFO")
"""

import logging
import os
from pathlib import Path

# Environment variable configuration
LOG_ENABLED = os.environ.get("JIRAKIT_LOG", "false").lower() == "true"
LOG_FILE = Path(os.environ.get("JIRAKIT_LOG_FILE", str(Path.home() / ".jirakit.log")))
LOG_LEVEL = os.environ.get("JIRAKIT_LOG_LEVEL", "INFO").upper()

# Module-level logger instance
_logger: logging.Logger | None = None


def setup_logging() -> logging.Logger:
    """Configure the ``jirakit`` logger based on environment variables.

    Creates a logger that writes to the configured log file when
    JIRAKIT_LOG is set to "true". Otherwise, uses a NullHandler
    to suppress all log output.

    Returns:
        Configured logger instance
    """
    global _logger

    if _logger is not None:
        return _logger

    logger = logging.getLogger("jirakit")

    # Clear any existing handlers
    logger.handlers.clear()

    if LOG_ENABLED:
        LOG_FILE.parent.mkdir(parents=True, exist_ok=True)

        handler = logging.FileHandler(LOG_FILE)
        handler.setFormatter(
            logging.Formatter(
                "[%(asctime)s] %(levelname)s %(name)s: %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        logger.addHandler(handler)
        logger.setLevel(getattr(logging, LOG_LEVEL, logging.INFO))
    else:
        logger.addHandler(logging.NullHandler())

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    """Get the configured logger instance, creating it if necessary."""
    global _logger
    if _logger is None:
        return setup_logging()
    return _logger


def log_message(message: str) -> None:
    """Log a message if logging is enabled.

    Messages are only written to the log file if JIRAKIT_LOG=true.

    Args:
        message: Message to log
    """
    logger = get_logger()
    logger.info(message)


__all__ = [
    "LOG_ENABLED",
    "LOG_FILE",
    "LOG_LEVEL",
    "setup_logging",
    "get_logger",
    "log_message",
]
