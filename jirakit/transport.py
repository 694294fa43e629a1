"""HTTP transport for the Jira REST API.

HttpTransport owns the shared httpx.AsyncClient and turns Request values
into HTTP calls. It is the only place that retries.

Retry Policy:
    - Retries on timeouts, network errors and server errors (5xx)
    - Retries on 429 Too Many Requests (respects Retry-After header)
    - Does NOT retry on other client errors (4xx); 401/403 raise
      AuthenticationFailure, the rest TransportError
    - Does NOT retry when the body cannot be decoded (DecodeError)

A request is attempted ``retry_count + 1`` times at most. Writes keep the
default retry count of 0.

Testability:
    Inject ``http_client`` (e.g. with an httpx.MockTransport), a no-op
    ``sleeper`` and a zero ``jitter_generator`` for deterministic tests.
"""

from __future__ import annotations

import asyncio
import json
import logging
import random
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, datetime
from email.utils import parsedate_to_datetime
from enum import Enum
from typing import Any, TypeVar
from urllib.parse import quote

import httpx

from jirakit.models.mapping import Decoder
from jirakit.utils.errors import AuthenticationFailure, DecodeError, TransportError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# HTTP status code for rate limiting
HTTP_TOO_MANY_REQUESTS = 429

# Statuses meaning the credentials were rejected
HTTP_AUTH_FAILURES = frozenset({401, 403})

# Maximum length for error response body in exception messages
MAX_ERROR_BODY_LENGTH = 200

# Maximum length for response bodies in DEBUG logs
MAX_DEBUG_LOG_LENGTH = 1000

# Upper bound for any single backoff or Retry-After delay
MAX_RETRY_DELAY_SECONDS = 60.0

JSON_CONTENT_TYPE = "application/json; charset=utf-8"

# Type alias for async sleep functions (for dependency injection in tests)
AsyncSleeper = Callable[[float], Awaitable[None]]

# Turns a successful response into the caller's result
ResponseDecoder = Callable[[httpx.Response], T]


def _default_jitter_generator(max_jitter: float) -> float:
    return random.uniform(0, max_jitter)


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + "... [truncated]"


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"


@dataclass
class Request:
    """A request under construction.

    Built by HttpTransport.new_request() and adjusted with the setters
    before being handed to perform_request().
    """

    path_segments: tuple[str, ...]
    params: list[tuple[str, str]] = field(default_factory=list)
    method: HttpMethod = HttpMethod.GET
    retry_count: int = 0
    body: bytes | None = None
    headers: dict[str, str] = field(default_factory=dict)

    def set_method(self, method: HttpMethod | str) -> None:
        self.method = HttpMethod(method)

    def set_retry_count(self, retry_count: int) -> None:
        if retry_count < 0:
            raise ValueError("retry_count must not be negative")
        self.retry_count = retry_count

    def set_json_body(self, payload: Any) -> None:
        """Serialize ``payload`` as the UTF-8 JSON body of this request."""
        self.body = json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
        self.add_header("Content-Type", JSON_CONTENT_TYPE)

    def add_header(self, name: str, value: str) -> None:
        self.headers[name] = value


def json_decoder(decode: Decoder[T]) -> ResponseDecoder[T]:
    """Response decoder that parses JSON and maps it with ``decode``."""

    def parse(response: httpx.Response) -> T:
        try:
            data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise DecodeError(
                "response body is not valid JSON",
                raw_value=_truncate(response.text, MAX_ERROR_BODY_LENGTH),
            ) from None
        return decode(data, "$")

    return parse


def parse_void(response: httpx.Response) -> None:
    """Response decoder for endpoints whose body is ignored."""
    return None


class HttpTransport:
    """Sends Requests against one REST root with bounded retries.

    The AsyncClient is created at construction (or injected) and shared by
    all requests, so concurrent calls reuse its connection pool. Use as an
    async context manager or call close() when done.

    Attributes:
        base_url: REST root, e.g. ``https://jira.example.com/rest``
    """

    def __init__(
        self,
        base_url: str,
        *,
        auth: httpx.Auth | None = None,
        timeout_seconds: float = 30.0,
        retry_delay_seconds: float = 1.0,
        http_client: httpx.AsyncClient | None = None,
        sleeper: AsyncSleeper | None = None,
        jitter_generator: Callable[[float], float] | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            base_url: REST root all path segments are appended to
            auth: Authentication applied to every request
            timeout_seconds: Per-request timeout
            retry_delay_seconds: Base delay for exponential backoff
            http_client: Optional externally owned AsyncClient
            sleeper: Optional async sleep callable for testing (defaults to asyncio.sleep)
            jitter_generator: Optional jitter generator for testing (defaults to random.uniform)
        """
        self.base_url = base_url.rstrip("/")
        self._auth = auth
        self._timeout_seconds = timeout_seconds
        self._retry_delay_seconds = retry_delay_seconds
        self._owns_client = http_client is None
        self._http_client = (
            http_client
            if http_client is not None
            else httpx.AsyncClient(timeout=httpx.Timeout(timeout_seconds))
        )
        self._sleeper: AsyncSleeper = sleeper if sleeper is not None else asyncio.sleep
        self._jitter_generator = (
            jitter_generator if jitter_generator is not None else _default_jitter_generator
        )

    async def __aenter__(self) -> HttpTransport:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the AsyncClient if this transport created it. Safe to call twice."""
        if self._owns_client:
            await self._http_client.aclose()

    # Request construction

    def new_request(self, path_segments: Sequence[str]) -> Request:
        return Request(path_segments=tuple(str(segment) for segment in path_segments))

    def new_request_with_params(
        self,
        path_segments: Sequence[str],
        params: Iterable[tuple[str, Any]],
    ) -> Request:
        request = self.new_request(path_segments)
        request.params = [(name, str(value)) for name, value in params]
        return request

    def url_for(self, request: Request) -> str:
        """Absolute URL of ``request``, each path segment percent-encoded."""
        path = "/".join(quote(segment, safe="") for segment in request.path_segments)
        return f"{self.base_url}/{path}"

    # Execution

    async def get(
        self,
        path_segments: Sequence[str],
        decoder: ResponseDecoder[T],
        *,
        retry_count: int = 0,
    ) -> T:
        request = self.new_request(path_segments)
        request.set_retry_count(retry_count)
        return await self.perform_request(request, decoder)

    async def get_with_params(
        self,
        path_segments: Sequence[str],
        params: Iterable[tuple[str, Any]],
        decoder: ResponseDecoder[T],
        *,
        retry_count: int = 0,
    ) -> T:
        request = self.new_request_with_params(path_segments, params)
        request.set_retry_count(retry_count)
        return await self.perform_request(request, decoder)

    async def perform_request(self, request: Request, decoder: ResponseDecoder[T]) -> T:
        """Send ``request`` and decode the successful response.

        Raises:
            AuthenticationFailure: On 401/403
            TransportError: On any other failure, after retries where allowed
            DecodeError: If the body does not match ``decoder``
        """
        url = self.url_for(request)
        max_attempts = request.retry_count + 1
        last_error: Exception | None = None
        last_status: int | None = None

        for attempt in range(max_attempts):
            logger.debug(
                "%s %s (attempt %d/%d)", request.method.value, url, attempt + 1, max_attempts
            )
            delay: float | None = None
            try:
                response = await self._send(request, url)
            except httpx.TimeoutException as e:
                last_error = e
                logger.warning(
                    "Timeout on %s %s (attempt %d/%d)",
                    request.method.value,
                    url,
                    attempt + 1,
                    max_attempts,
                )
            except httpx.HTTPError as e:
                last_error = e
                logger.warning(
                    "Network error on %s %s (attempt %d/%d): %s",
                    request.method.value,
                    url,
                    attempt + 1,
                    max_attempts,
                    type(e).__name__,
                )
            else:
                status_code = response.status_code
                if response.is_success:
                    return decoder(response)

                last_status = status_code
                last_error = None

                if status_code == HTTP_TOO_MANY_REQUESTS:
                    delay = self._get_retry_after_delay(response, attempt)
                    logger.warning(
                        "Rate limited (attempt %d/%d), waiting %.1fs",
                        attempt + 1,
                        max_attempts,
                        delay,
                    )
                elif status_code < 500:
                    # Redirects and client errors are not retried
                    raise self._client_error(request, url, response, attempt + 1)
                else:
                    logger.warning(
                        "Server error (attempt %d/%d): status=%d",
                        attempt + 1,
                        max_attempts,
                        status_code,
                    )

            if attempt < max_attempts - 1:
                if delay is None:
                    calculated_delay = self._retry_delay_seconds * (2**attempt)
                    capped_delay = min(calculated_delay, MAX_RETRY_DELAY_SECONDS)
                    delay = capped_delay + self._jitter_generator(capped_delay * 0.1)
                await self._sleeper(delay)

        if last_status is not None:
            message = f"{request.method.value} {url} failed with status {last_status}"
        else:
            message = f"{request.method.value} {url} failed: {type(last_error).__name__}"
        if max_attempts > 1:
            message += f" after {max_attempts} attempts"
        raise TransportError(
            message,
            status_code=last_status,
            url=url,
            attempts=max_attempts,
            retries_exhausted=max_attempts > 1,
        ) from last_error

    async def _send(self, request: Request, url: str) -> httpx.Response:
        headers = {"Accept": "application/json", **request.headers}
        kwargs: dict[str, Any] = {"headers": headers}
        if request.params:
            kwargs["params"] = request.params
        if request.body is not None:
            kwargs["content"] = request.body
        if self._auth is not None:
            kwargs["auth"] = self._auth
        if not self._owns_client:
            # Per-request timeout override for an injected client
            kwargs["timeout"] = httpx.Timeout(self._timeout_seconds)
        return await self._http_client.request(request.method.value, url, **kwargs)

    def _client_error(
        self,
        request: Request,
        url: str,
        response: httpx.Response,
        attempts: int,
    ) -> TransportError:
        status_code = response.status_code
        body = response.text
        logger.debug(
            "Error response for %s %s: %s",
            request.method.value,
            url,
            _truncate(body, MAX_DEBUG_LOG_LENGTH),
        )
        truncated = _truncate(body, MAX_ERROR_BODY_LENGTH)
        error_class = AuthenticationFailure if status_code in HTTP_AUTH_FAILURES else TransportError
        return error_class(
            f"{request.method.value} {url} failed with status {status_code}",
            status_code=status_code,
            url=url,
            attempts=attempts,
            body=truncated or None,
        )

    def _get_retry_after_delay(self, response: httpx.Response, attempt: int) -> float:
        """Extract Retry-After delay from response, or calculate default.

        Supports both RFC 7231 forms: delay-seconds ("120") and HTTP-date
        ("Sun, 26 Jan 2026 12:00:00 GMT"). Delays are capped at
        MAX_RETRY_DELAY_SECONDS.
        """
        retry_after = response.headers.get("Retry-After")
        if retry_after:
            try:
                return min(max(0.0, float(retry_after)), MAX_RETRY_DELAY_SECONDS)
            except ValueError:
                pass

            try:
                retry_date = parsedate_to_datetime(retry_after)
                http_date_delay = (retry_date - datetime.now(UTC)).total_seconds()
                return min(max(0.0, http_date_delay), MAX_RETRY_DELAY_SECONDS)
            except (ValueError, TypeError) as e:
                logger.warning(
                    "Failed to parse Retry-After header '%s': %s. "
                    "Falling back to exponential backoff.",
                    retry_after,
                    e,
                )

        default_delay: float = self._retry_delay_seconds * (2**attempt)
        return min(default_delay, MAX_RETRY_DELAY_SECONDS)


__all__ = [
    "HttpMethod",
    "HttpTransport",
    "MAX_ERROR_BODY_LENGTH",
    "MAX_RETRY_DELAY_SECONDS",
    "Request",
    "ResponseDecoder",
    "json_decoder",
    "parse_void",
]
