"""Utility modules for jirakit."""

from jirakit.utils.errors import (
    AuthenticationFailure,
    ConfigurationError,
    DecodeError,
    ExitCode,
    InvalidTimestamp,
    JirakitError,
    QueryError,
    TransportError,
)
from jirakit.utils.logging import get_logger, log_message, setup_logging

__all__ = [
    "AuthenticationFailure",
    "ConfigurationError",
    "DecodeError",
    "ExitCode",
    "InvalidTimestamp",
    "JirakitError",
    "QueryError",
    "TransportError",
    "get_logger",
    "log_message",
    "setup_logging",
]
