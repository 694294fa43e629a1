"""Custom exceptions and exit codes for jirakit.

This module defines the exception hierarchy used throughout the client.
Every public operation either returns a typed value or raises one of these:

- ConfigurationError: invalid base URL or credential source (construction time)
- TransportError: network failure or HTTP error status
    - AuthenticationFailure: the server rejected the credentials (401/403)
    - QueryError: the server rejected a JQL search (4xx)
- DecodeError: the response body did not match the expected shape
    - InvalidTimestamp: a timestamp did not match its wire format
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any, ClassVar

# Maximum length of a raw value echoed back in an error message
MAX_ERROR_VALUE_LENGTH = 200


class ExitCode(IntEnum):
    """Exit codes reported by the command-line interface.

    These codes are used for consistent error reporting and can be
    checked by calling scripts or CI systems.
    """

    SUCCESS = 0
    GENERAL_ERROR = 1
    CONFIGURATION_ERROR = 2
    TRANSPORT_ERROR = 3
    AUTHENTICATION_FAILED = 4
    DECODE_ERROR = 5


def _truncate(value: Any) -> str:
    text = repr(value)
    if len(text) <= MAX_ERROR_VALUE_LENGTH:
        return text
    return text[:MAX_ERROR_VALUE_LENGTH] + "... [truncated]"


class JirakitError(Exception):
    """Base exception for jirakit errors.

    All custom exceptions in this package inherit from this class.
    Each exception type has an associated exit code for the CLI.
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.GENERAL_ERROR

    def __init__(self, message: str, exit_code: ExitCode | None = None) -> None:
        """Initialize the exception."""
        super().__init__(message)
        self._exit_code = exit_code

    @property
    def exit_code(self) -> ExitCode:
        """Get the exit code for this exception."""
        if self._exit_code is not None:
            return self._exit_code
        return self.__class__._default_exit_code


class ConfigurationError(JirakitError):
    """The client cannot be built from the given configuration.

    Raised when:
    - The base URL is missing, relative, or has no host
    - The credential source is unknown
    - A required credential (e.g. an environment variable) is absent
    - A configuration value has the wrong type
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.CONFIGURATION_ERROR


class TransportError(JirakitError):
    """A request could not be completed.

    Covers network failures (``status_code`` is None) as well as HTTP error
    statuses. Retries, when allowed, have already been attempted.

    Attributes:
        status_code: HTTP status of the last response, if any
        url: The request URL
        attempts: Number of attempts made
        retries_exhausted: True when the failure survived every allowed retry
        body: Truncated response body, if any
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.TRANSPORT_ERROR

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str | None = None,
        attempts: int = 1,
        retries_exhausted: bool = False,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url
        self.attempts = attempts
        self.retries_exhausted = retries_exhausted
        self.body = body


class AuthenticationFailure(TransportError):
    """The server rejected the request credentials (401 or 403).

    An empty or stale credential from a best-effort backend ends up here.
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.AUTHENTICATION_FAILED


class QueryError(TransportError):
    """The server rejected a JQL search.

    Attributes:
        jql: The query string that failed
    """

    def __init__(self, message: str, *, jql: str, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.jql = jql


class DecodeError(JirakitError):
    """A response body did not match the expected shape.

    Decode errors are never retried.

    Attributes:
        path: Location of the offending value (e.g. ``$.fields.created``)
        raw_value: The offending value
    """

    _default_exit_code: ClassVar[ExitCode] = ExitCode.DECODE_ERROR

    def __init__(self, message: str, *, path: str = "$", raw_value: Any = None) -> None:
        self.path = path
        self.raw_value = raw_value
        self.reason = message
        super().__init__(f"{path}: {message}")

    def at(self, path: str) -> DecodeError:
        """Return a copy of this error relocated to ``path``."""
        return DecodeError(self.reason, path=path, raw_value=self.raw_value)


class InvalidTimestamp(DecodeError):
    """A timestamp string did not match its wire format.

    Attributes:
        raw: The offending raw value
        expected_pattern: Human-readable description of the expected format
    """

    def __init__(self, raw: Any, expected_pattern: str, *, path: str = "$") -> None:
        self.raw = raw
        self.expected_pattern = expected_pattern
        super().__init__(
            f"invalid timestamp {_truncate(raw)} (expected {expected_pattern})",
            path=path,
            raw_value=raw,
        )

    def at(self, path: str) -> InvalidTimestamp:
        return InvalidTimestamp(self.raw, self.expected_pattern, path=path)


__all__ = [
    "ExitCode",
    "JirakitError",
    "ConfigurationError",
    "TransportError",
    "AuthenticationFailure",
    "QueryError",
    "DecodeError",
    "InvalidTimestamp",
    "MAX_ERROR_VALUE_LENGTH",
]
