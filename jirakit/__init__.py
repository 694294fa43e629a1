"""jirakit - Typed async client for the Jira REST API.

This package provides a Python client that turns high-level Jira operations
(fetch an issue, list sprints, search with JQL, log work) into authenticated
HTTP requests and decodes the responses into typed domain objects.
"""

__version__ = "0.4.0"
SCRIPT_NAME = "jirakit"

from jirakit.auth import (  # noqa: E402
    BasicCredential,
    BearerToken,
    CredentialProvider,
    EnvironmentVariableProvider,
    OsKeychainProvider,
    StaticBasicAuthProvider,
    create_credential_provider,
)
from jirakit.client import JiraClient  # noqa: E402
from jirakit.models import (  # noqa: E402
    CLEAR,
    AgilePage,
    Board,
    Changelog,
    DevStatus,
    Fields,
    Issue,
    IssuesPage,
    IssueStatus,
    IssueType,
    ModifyFields,
    Project,
    PullRequest,
    ShortIssue,
    Sprint,
    TempoLog,
    User,
    Worklog,
    Worklogs,
)
from jirakit.utils.errors import (  # noqa: E402
    AuthenticationFailure,
    ConfigurationError,
    DecodeError,
    InvalidTimestamp,
    JirakitError,
    QueryError,
    TransportError,
)

__all__ = [
    "__version__",
    "SCRIPT_NAME",
    "AgilePage",
    "AuthenticationFailure",
    "BasicCredential",
    "BearerToken",
    "Board",
    "CLEAR",
    "Changelog",
    "ConfigurationError",
    "CredentialProvider",
    "DecodeError",
    "DevStatus",
    "EnvironmentVariableProvider",
    "Fields",
    "InvalidTimestamp",
    "Issue",
    "IssueStatus",
    "IssueType",
    "IssuesPage",
    "JiraClient",
    "JirakitError",
    "ModifyFields",
    "OsKeychainProvider",
    "Project",
    "PullRequest",
    "QueryError",
    "ShortIssue",
    "Sprint",
    "StaticBasicAuthProvider",
    "TempoLog",
    "TransportError",
    "User",
    "Worklog",
    "Worklogs",
    "create_credential_provider",
]
