"""Shared pytest fixtures for jirakit tests."""

from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

from jirakit.auth import BearerToken, CredentialProvider
from jirakit.client import JiraClient

# Enable pytest-asyncio for async test support
pytest_plugins = ("pytest_asyncio",)

BASE_URL = "https://jira.example.com"


class StaticTokenProvider(CredentialProvider):
    """Provider returning a fixed bearer token."""

    def __init__(self, token: str = "test-token") -> None:
        self.token = token
        self.domains: list[str] = []

    @property
    def name(self) -> str:
        return "static"

    def credentials(self, domain: str) -> BearerToken:
        self.domains.append(domain)
        return BearerToken(self.token)


async def no_sleep(seconds: float) -> None:
    """No-op sleeper for retry tests."""


@pytest.fixture
def sleeper():
    """No-op async sleeper."""
    return no_sleep


@pytest.fixture
def token_provider() -> StaticTokenProvider:
    return StaticTokenProvider()


@pytest.fixture
def recorded_requests() -> list[httpx.Request]:
    """Requests seen by a mock transport built with ``mock_http_client``."""
    return []


@pytest.fixture
def mock_http_client(recorded_requests):
    """Factory building an AsyncClient backed by httpx.MockTransport.

    The handler receives each request (already authenticated) and returns
    the response. Every request is appended to ``recorded_requests``.
    """
    clients: list[httpx.AsyncClient] = []

    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        def record(request: httpx.Request) -> httpx.Response:
            recorded_requests.append(request)
            return handler(request)

        client = httpx.AsyncClient(transport=httpx.MockTransport(record))
        clients.append(client)
        return client

    return factory


@pytest.fixture
def make_client(mock_http_client, token_provider):
    """Factory building a JiraClient whose HTTP is served by ``handler``."""

    def factory(handler: Callable[[httpx.Request], httpx.Response], **kwargs) -> JiraClient:
        return JiraClient(
            BASE_URL,
            token_provider,
            http_client=mock_http_client(handler),
            sleeper=no_sleep,
            jitter_generator=lambda _: 0.0,
            **kwargs,
        )

    return factory


@pytest.fixture
def user_json() -> dict:
    return {
        "self": "https://jira.example.com/rest/api/2/user?username=chipp",
        "key": "chipp",
        "name": "chipp",
        "emailAddress": "chipp@example.com",
        "displayName": "Vladimir Burdukov",
        "active": True,
        "timeZone": "Europe/Moscow",
    }


@pytest.fixture
def issue_json(user_json) -> dict:
    return {
        "id": "10001",
        "key": "PROJ-1",
        "fields": {
            "summary": "Fix the flux capacitor",
            "created": "2020-03-10T10:20:50.730-04:00",
            "creator": user_json,
            "issuetype": {"name": "Bug"},
            "status": {"name": "Open"},
            "priority": {"name": "Major"},
        },
    }


@pytest.fixture
def temp_config_file(tmp_path: Path) -> Path:
    """Create a temporary config file with sample values."""
    config_file = tmp_path / ".jirakit-config"
    config_file.write_text(
        """# jirakit configuration
JIRA_BASE_URL="https://jira.example.com"
JIRA_CREDENTIAL_SOURCE=env
JIRA_TOKEN_ENV_VAR='MY_JIRA_TOKEN'
JIRA_TIMEOUT_SECONDS=12.5
"""
    )
    return config_file
