"""Tests for jirakit.transport module.

Tests cover:
- Request construction and mutators
- URL building with percent-encoded path segments
- Retry logic with exponential backoff
- Retry-After handling for 429
- Error mapping (auth failures, client errors, decode errors)
"""

import json

import httpx
import pytest

from jirakit.models.mapping import integer
from jirakit.transport import (
    MAX_RETRY_DELAY_SECONDS,
    HttpMethod,
    HttpTransport,
    json_decoder,
    parse_void,
)
from jirakit.utils.errors import AuthenticationFailure, DecodeError, TransportError

REST_ROOT = "https://jira.example.com/rest"


def _decode_value(value, path):
    return integer(value["value"], f"{path}.value")


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def make_transport(mock_http_client, sleeps):
    """Factory building an HttpTransport over a mock handler."""

    async def record_sleep(seconds: float) -> None:
        sleeps.append(seconds)

    def factory(handler, **kwargs):
        return HttpTransport(
            REST_ROOT,
            http_client=mock_http_client(handler),
            sleeper=record_sleep,
            jitter_generator=lambda _: 0.0,
            **kwargs,
        )

    return factory


def _sequence(*responses):
    """Handler returning the given responses (or raising exceptions) in order."""
    remaining = list(responses)

    def handler(request):
        item = remaining.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    return handler


class TestRequest:
    """Tests for Request construction."""

    def test_http_methods(self):
        """Only the verbs the client issues are offered."""
        assert [method.value for method in HttpMethod] == ["GET", "POST", "PUT"]

    def test_new_request_defaults(self, make_transport):
        """New requests are GETs without retries or body."""
        transport = make_transport(_sequence())

        request = transport.new_request(["api", "2", "myself"])

        assert request.method is HttpMethod.GET
        assert request.retry_count == 0
        assert request.body is None
        assert request.params == []

    def test_params_are_stringified(self, make_transport):
        """Parameter values are converted to strings in order."""
        transport = make_transport(_sequence())

        request = transport.new_request_with_params(["x"], [("startAt", 0), ("b", "c")])

        assert request.params == [("startAt", "0"), ("b", "c")]

    def test_set_json_body(self, make_transport):
        """JSON bodies are UTF-8 and set the content type."""
        request = make_transport(_sequence()).new_request(["x"])

        request.set_json_body({"summary": "Grüße"})

        assert json.loads(request.body.decode("utf-8")) == {"summary": "Grüße"}
        assert request.headers["Content-Type"] == "application/json; charset=utf-8"

    def test_set_method_accepts_strings(self, make_transport):
        """Methods may be given as strings."""
        request = make_transport(_sequence()).new_request(["x"])

        request.set_method("PUT")

        assert request.method is HttpMethod.PUT

    def test_negative_retry_count_rejected(self, make_transport):
        """Retry counts cannot be negative."""
        request = make_transport(_sequence()).new_request(["x"])

        with pytest.raises(ValueError):
            request.set_retry_count(-1)

    def test_url_segments_are_encoded(self, make_transport):
        """Each segment is percent-encoded on its own."""
        transport = make_transport(_sequence())

        url = transport.url_for(transport.new_request(["api", "2", "project", "A/B C"]))

        assert url == "https://jira.example.com/rest/api/2/project/A%2FB%20C"


class TestPerformRequest:
    """Tests for successful requests."""

    @pytest.mark.asyncio
    async def test_sends_accept_header_and_params(self, make_transport, recorded_requests):
        """Every request asks for JSON and carries its query parameters."""
        transport = make_transport(_sequence(httpx.Response(200, json={"value": 3})))

        result = await transport.get_with_params(
            ["api", "2", "thing"], [("a", "1"), ("b", "")], json_decoder(_decode_value)
        )

        assert result == 3
        sent = recorded_requests[0]
        assert sent.headers["Accept"] == "application/json"
        assert sent.url.path == "/rest/api/2/thing"
        assert sent.url.params.multi_items() == [("a", "1"), ("b", "")]

    @pytest.mark.asyncio
    async def test_put_sends_body(self, make_transport, recorded_requests):
        """Writes carry their JSON body and content type."""
        transport = make_transport(_sequence(httpx.Response(204)))
        request = transport.new_request(["api", "2", "issue", "PROJ-1"])
        request.set_method(HttpMethod.PUT)
        request.set_json_body({"fields": {}})

        assert await transport.perform_request(request, parse_void) is None

        sent = recorded_requests[0]
        assert sent.method == "PUT"
        assert sent.content == b'{"fields":{}}'
        assert sent.headers["Content-Type"] == "application/json; charset=utf-8"


class TestRetries:
    """Tests for retry behaviour."""

    @pytest.mark.asyncio
    async def test_retries_server_errors(self, make_transport, recorded_requests, sleeps):
        """5xx responses are retried with exponential backoff."""
        transport = make_transport(
            _sequence(
                httpx.Response(500),
                httpx.Response(502),
                httpx.Response(200, json={"value": 1}),
            ),
            retry_delay_seconds=1.0,
        )

        result = await transport.get(["x"], json_decoder(_decode_value), retry_count=3)

        assert result == 1
        assert len(recorded_requests) == 3
        assert sleeps == [1.0, 2.0]

    @pytest.mark.asyncio
    async def test_exhausted_retries(self, make_transport, recorded_requests):
        """After retry_count + 1 attempts the last status is reported."""
        transport = make_transport(_sequence(*[httpx.Response(503) for _ in range(4)]))

        with pytest.raises(TransportError) as exc_info:
            await transport.get(["x"], parse_void, retry_count=3)

        error = exc_info.value
        assert error.status_code == 503
        assert error.attempts == 4
        assert error.retries_exhausted is True
        assert len(recorded_requests) == 4

    @pytest.mark.asyncio
    async def test_no_retry_by_default(self, make_transport, recorded_requests):
        """Requests without a retry count are attempted once."""
        transport = make_transport(_sequence(httpx.Response(500)))

        with pytest.raises(TransportError) as exc_info:
            await transport.get(["x"], parse_void)

        assert exc_info.value.attempts == 1
        assert exc_info.value.retries_exhausted is False
        assert len(recorded_requests) == 1

    @pytest.mark.asyncio
    async def test_retries_timeouts(self, make_transport, recorded_requests):
        """Timeouts are retried."""
        transport = make_transport(
            _sequence(httpx.ReadTimeout("slow"), httpx.Response(200, json={"value": 7}))
        )

        assert await transport.get(["x"], json_decoder(_decode_value), retry_count=1) == 7
        assert len(recorded_requests) == 2

    @pytest.mark.asyncio
    async def test_network_error_has_no_status(self, make_transport):
        """Connection failures surface as TransportError without a status."""
        transport = make_transport(_sequence(httpx.ConnectError("refused")))

        with pytest.raises(TransportError) as exc_info:
            await transport.get(["x"], parse_void)

        assert exc_info.value.status_code is None
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_client_errors_not_retried(self, make_transport, recorded_requests):
        """4xx responses fail immediately with a truncated body."""
        transport = make_transport(_sequence(httpx.Response(404, text="x" * 500)))

        with pytest.raises(TransportError) as exc_info:
            await transport.get(["x"], parse_void, retry_count=3)

        error = exc_info.value
        assert error.status_code == 404
        assert not isinstance(error, AuthenticationFailure)
        assert len(recorded_requests) == 1
        assert error.body.endswith("... [truncated]")
        assert len(error.body) < 250

    @pytest.mark.asyncio
    async def test_redirects_not_retried(self, make_transport, recorded_requests, sleeps):
        """3xx responses are not followed and fail on the first attempt."""
        transport = make_transport(
            _sequence(httpx.Response(302, headers={"Location": "https://elsewhere/login"}))
        )

        with pytest.raises(TransportError) as exc_info:
            await transport.get(["x"], parse_void, retry_count=3)

        assert exc_info.value.status_code == 302
        assert exc_info.value.attempts == 1
        assert len(recorded_requests) == 1
        assert sleeps == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [401, 403])
    async def test_auth_failures(self, make_transport, recorded_requests, status):
        """401 and 403 raise AuthenticationFailure without retrying."""
        transport = make_transport(_sequence(httpx.Response(status)))

        with pytest.raises(AuthenticationFailure) as exc_info:
            await transport.get(["x"], parse_void, retry_count=3)

        assert exc_info.value.status_code == status
        assert len(recorded_requests) == 1

    @pytest.mark.asyncio
    async def test_rate_limit_honours_retry_after(self, make_transport, sleeps):
        """429 waits for Retry-After seconds before retrying."""
        transport = make_transport(
            _sequence(
                httpx.Response(429, headers={"Retry-After": "7"}),
                httpx.Response(200, json={"value": 1}),
            )
        )

        assert await transport.get(["x"], json_decoder(_decode_value), retry_count=1) == 1
        assert sleeps == [7.0]

    @pytest.mark.asyncio
    async def test_retry_after_is_capped(self, make_transport, sleeps):
        """Huge Retry-After values are capped."""
        transport = make_transport(
            _sequence(
                httpx.Response(429, headers={"Retry-After": "86400"}),
                httpx.Response(204),
            )
        )

        await transport.get(["x"], parse_void, retry_count=1)

        assert sleeps == [MAX_RETRY_DELAY_SECONDS]

    @pytest.mark.asyncio
    async def test_decode_errors_not_retried(self, make_transport, recorded_requests):
        """A body that does not decode fails on the first attempt."""
        transport = make_transport(
            _sequence(httpx.Response(200, json={"value": "three"}), httpx.Response(200))
        )

        with pytest.raises(DecodeError) as exc_info:
            await transport.get(["x"], json_decoder(_decode_value), retry_count=3)

        assert exc_info.value.path == "$.value"
        assert len(recorded_requests) == 1

    @pytest.mark.asyncio
    async def test_invalid_json_is_decode_error(self, make_transport):
        """Non-JSON bodies raise DecodeError, not TransportError."""
        transport = make_transport(_sequence(httpx.Response(200, text="<html>")))

        with pytest.raises(DecodeError, match="not valid JSON"):
            await transport.get(["x"], json_decoder(_decode_value))


class TestLifecycle:
    """Tests for client ownership."""

    @pytest.mark.asyncio
    async def test_injected_client_not_closed(self, mock_http_client):
        """An injected AsyncClient belongs to the caller."""
        client = mock_http_client(_sequence())

        async with HttpTransport(REST_ROOT, http_client=client):
            pass

        assert not client.is_closed

    @pytest.mark.asyncio
    async def test_owned_client_closed(self):
        """A transport closes the client it created."""
        transport = HttpTransport(REST_ROOT)

        await transport.close()

        assert transport._http_client.is_closed
