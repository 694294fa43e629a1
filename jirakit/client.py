"""Async client for the Jira REST API.

JiraClient exposes one coroutine per remote capability and returns typed
models from jirakit.models. Everything below it (URL building, auth,
retries) lives in HttpTransport.

Usage:

    async with JiraClient.from_settings(ConfigManager().load()) as jira:
        issue = await jira.get_issue("PROJ-42", fields=["assignee"])
        print(issue.fields.summary)

Resource Management:
    The client holds one shared httpx.AsyncClient. Use it as an async
    context manager or call aclose() when done. Concurrent calls on one
    client are independent.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from datetime import date
from typing import TYPE_CHECKING, Any, TypeVar
from urllib.parse import urlsplit

import httpx

from jirakit.auth import CredentialAuth, CredentialProvider, create_credential_provider
from jirakit.fields import build_field_request
from jirakit.models import (
    AgilePage,
    Board,
    DevStatus,
    Issue,
    IssuesPage,
    ModifyFields,
    Project,
    ShortIssue,
    Sprint,
    TempoLog,
    User,
    Worklogs,
)
from jirakit.models.mapping import decode_fields, list_of, model, required
from jirakit.transport import (
    AsyncSleeper,
    HttpMethod,
    HttpTransport,
    Request,
    json_decoder,
    parse_void,
)
from jirakit.utils.errors import AuthenticationFailure, ConfigurationError, QueryError, TransportError

if TYPE_CHECKING:
    from jirakit.config.settings import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Retries granted to idempotent reads
READ_RETRY_COUNT = 3

# Page size requested for issue worklogs
WORKLOG_PAGE_SIZE = 500

DEFAULT_SEARCH_PAGE_SIZE = 100

WORKLOG_JQL_TEMPLATE = (
    'project = {project} AND worklogAuthor in ({users}) '
    'AND worklogDate >= "{date_from}" AND worklogDate <= "{date_to}"'
)

_ALLOWED_SCHEMES = frozenset({"http", "https"})

_decode_issue = json_decoder(model(Issue))
_decode_issues_page = json_decoder(model(IssuesPage))
_decode_sprint_page = json_decoder(AgilePage.decoder(model(Sprint)))


def build_worklog_jql(
    project_key: str,
    usernames: Iterable[str],
    date_from: date,
    date_to: date,
) -> str:
    """JQL for issues in ``project_key`` with work logged by ``usernames``.

    Values are interpolated as-is; callers must pass trusted input.
    """
    return WORKLOG_JQL_TEMPLATE.format(
        project=project_key,
        users=",".join(usernames),
        date_from=date_from.isoformat(),
        date_to=date_to.isoformat(),
    )


def _rest_root(base_url: str) -> tuple[str, str]:
    """Validate ``base_url`` and return ``(rest root, host)``."""
    parts = urlsplit(base_url.strip())
    if parts.scheme.lower() not in _ALLOWED_SCHEMES or not parts.hostname:
        raise ConfigurationError(
            f"Jira base URL must be an absolute http(s) URL with a host, got {base_url!r}"
        )
    root = f"{parts.scheme}://{parts.netloc}{parts.path.rstrip('/')}/rest"
    return root, parts.hostname


class JiraClient:
    """Typed operations against one Jira server.

    Attributes:
        rest_url: REST root, ``<base_url>/rest``
        domain: Host name used to look up credentials
    """

    def __init__(
        self,
        base_url: str,
        credential_provider: CredentialProvider,
        *,
        timeout_seconds: float = 30.0,
        retry_delay_seconds: float = 1.0,
        http_client: httpx.AsyncClient | None = None,
        sleeper: AsyncSleeper | None = None,
        jitter_generator: Callable[[float], float] | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            base_url: Jira base URL, e.g. ``https://jira.example.com``
            credential_provider: Source of request credentials
            timeout_seconds: Per-request timeout
            retry_delay_seconds: Base delay for exponential retry backoff
            http_client: Optional externally owned AsyncClient
            sleeper: Optional async sleep callable for testing
            jitter_generator: Optional jitter generator for testing

        Raises:
            ConfigurationError: If ``base_url`` is not an absolute http(s) URL
        """
        self.rest_url, self.domain = _rest_root(base_url)
        self._credential_provider = credential_provider
        self._transport = HttpTransport(
            self.rest_url,
            auth=CredentialAuth(credential_provider, self.domain),
            timeout_seconds=timeout_seconds,
            retry_delay_seconds=retry_delay_seconds,
            http_client=http_client,
            sleeper=sleeper,
            jitter_generator=jitter_generator,
        )
        logger.debug(
            "Jira client for %s using %s credentials", self.rest_url, credential_provider.name
        )

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> JiraClient:
        """Build a client from loaded configuration.

        Raises:
            ConfigurationError: If the base URL or credential source is invalid
        """
        if not settings.base_url:
            raise ConfigurationError("JIRA_BASE_URL is not set")
        return cls(
            settings.base_url,
            create_credential_provider(settings),
            timeout_seconds=settings.timeout_seconds,
            retry_delay_seconds=settings.retry_delay_seconds,
            **kwargs,
        )

    async def __aenter__(self) -> JiraClient:
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._transport.close()

    async def _read(self, request: Request, decoder: Callable[[httpx.Response], T]) -> T:
        request.set_retry_count(READ_RETRY_COUNT)
        return await self._transport.perform_request(request, decoder)

    # Users

    async def myself(self) -> User:
        """The user the credentials belong to."""
        return await self._transport.get(
            ["api", "2", "myself"],
            json_decoder(model(User)),
            retry_count=READ_RETRY_COUNT,
        )

    async def get_user_by_username(self, username: str) -> User:
        """Look up a user by login name, including group membership."""
        logger.debug("Loading user information for %s", username)
        user = await self._transport.get_with_params(
            ["api", "2", "user"],
            [("username", username), ("expand", "groups")],
            json_decoder(model(User)),
            retry_count=READ_RETRY_COUNT,
        )
        logger.debug("Loaded user information for %s", username)
        return user

    async def get_user_by_key(self, key: str) -> User:
        request = self._transport.new_request_with_params(["api", "2", "user"], [("key", key)])
        return await self._read(request, json_decoder(model(User)))

    # Projects and boards

    async def get_project(self, key: str) -> Project:
        request = self._transport.new_request(["api", "2", "project", key])
        return await self._read(request, json_decoder(model(Project)))

    async def get_board(self, board_id: int) -> Board:
        request = self._transport.new_request(["agile", "1.0", "board", str(board_id)])
        return await self._read(request, json_decoder(model(Board)))

    async def get_sprints_for_board(self, board_id: int, start_at: int = 0) -> AgilePage[Sprint]:
        """One page of sprints for a board. Follow ``next_start_at`` for more."""
        request = self._transport.new_request_with_params(
            ["agile", "1.0", "board", str(board_id), "sprint"],
            [("startAt", start_at)],
        )
        return await self._read(request, _decode_sprint_page)

    # Issues

    async def get_issue(
        self,
        key: str,
        fields: Sequence[str] | None = None,
        expand: Sequence[str] | None = None,
    ) -> Issue:
        """Fetch one issue.

        Args:
            key: Issue key or id
            fields: Extra fields on top of the mandatory ones
            expand: Expand directives, e.g. ``["changelog"]``
        """
        selection = build_field_request(fields, expand)
        request = self._transport.new_request_with_params(
            ["api", "2", "issue", key],
            [("fields", selection.fields_param), ("expand", selection.expand_param)],
        )
        return await self._read(request, _decode_issue)

    async def get_subtasks_for_issue(self, issue_id: str) -> list[ShortIssue]:
        request = self._transport.new_request(["api", "2", "issue", issue_id, "subtask"])
        return await self._read(request, json_decoder(list_of(model(ShortIssue))))

    async def get_worklogs_for_issue(self, issue_id: str, start_at: int = 0) -> Worklogs:
        request = self._transport.new_request_with_params(
            ["api", "2", "issue", issue_id, "worklog"],
            [("startAt", start_at), ("maxResults", WORKLOG_PAGE_SIZE)],
        )
        return await self._read(request, json_decoder(model(Worklogs)))

    async def get_dev_status(
        self,
        issue_id: str,
        application_type: str = "stash",
    ) -> list[DevStatus]:
        """Pull requests linked to an issue, grouped per repository host.

        The response wraps the entries in a ``detail`` array.
        """
        request = self._transport.new_request_with_params(
            ["dev-status", "1.0", "issue", "detail"],
            [
                ("issueId", issue_id),
                ("applicationType", application_type),
                ("dataType", "pullrequest"),
            ],
        )
        return await self._read(request, json_decoder(_dev_status_details))

    # Search

    async def search_issues(
        self,
        jql: str,
        start_at: int = 0,
        max_results: int = DEFAULT_SEARCH_PAGE_SIZE,
        fields: Sequence[str] | None = None,
        expand: Sequence[str] | None = None,
    ) -> IssuesPage:
        """Run a JQL search and return one page of issues.

        Raises:
            QueryError: If the server rejects the query (4xx other than auth)
        """
        selection = build_field_request(fields, expand)
        body: dict[str, Any] = {
            "jql": jql,
            "startAt": start_at,
            "maxResults": max_results,
            "fields": list(selection.fields),
        }
        if selection.expand:
            body["expand"] = list(selection.expand)

        request = self._transport.new_request(["api", "2", "search"])
        request.set_method(HttpMethod.POST)
        request.set_json_body(body)

        try:
            return await self._read(request, _decode_issues_page)
        except AuthenticationFailure:
            raise
        except TransportError as e:
            if e.status_code is None or not 400 <= e.status_code < 500:
                raise
            raise QueryError(
                f"Jira rejected the search (status {e.status_code}): {jql}",
                jql=jql,
                status_code=e.status_code,
                url=e.url,
                attempts=e.attempts,
                body=e.body,
            ) from e

    async def search_worklogged_issues(
        self,
        project_key: str,
        usernames: Iterable[str],
        date_from: date,
        date_to: date,
        start_at: int = 0,
        max_results: int = DEFAULT_SEARCH_PAGE_SIZE,
        fields: Sequence[str] | None = None,
    ) -> IssuesPage:
        """Issues in a project with work logged by any of ``usernames`` in a date range."""
        jql = build_worklog_jql(project_key, usernames, date_from, date_to)
        return await self.search_issues(jql, start_at, max_results, fields=fields)

    # Tempo

    async def get_logs_for_user(
        self,
        username: str,
        date_from: date | str,
        date_to: date | str,
    ) -> list[TempoLog]:
        """Tempo worklogs of a user between two dates (inclusive)."""
        request = self._transport.new_request_with_params(
            ["tempo-timesheets", "3", "worklogs"],
            [
                ("dateFrom", _iso_date(date_from)),
                ("dateTo", _iso_date(date_to)),
                ("username", username),
            ],
        )
        return await self._read(request, json_decoder(list_of(model(TempoLog))))

    # Writes

    async def update_issue(self, key: str, modify: ModifyFields) -> None:
        """Apply ``modify`` to an issue. Not retried."""
        await self._write(key, {"fields": modify.to_wire()})

    async def update_issue_labels(self, key: str, labels: Sequence[str]) -> None:
        """Replace the labels of an issue. Not retried."""
        await self._write(key, {"fields": {"labels": list(labels)}})

    def _write(self, key: str, payload: dict[str, Any]) -> Awaitable[None]:
        request = self._transport.new_request(["api", "2", "issue", key])
        request.set_method(HttpMethod.PUT)
        request.set_json_body(payload)
        return self._transport.perform_request(request, parse_void)


def _iso_date(value: date | str) -> str:
    return value.isoformat() if isinstance(value, date) else value


_DEV_STATUS_ENVELOPE = (required("detail", list_of(model(DevStatus))),)


def _dev_status_details(value: Any, path: str) -> list[DevStatus]:
    envelope = decode_fields(dict, _DEV_STATUS_ENVELOPE, value, path)
    return envelope["detail"]


__all__ = [
    "READ_RETRY_COUNT",
    "WORKLOG_JQL_TEMPLATE",
    "JiraClient",
    "build_worklog_jql",
]
