"""Typed domain models decoded from Jira REST responses."""

from jirakit.models.board import Board, Project
from jirakit.models.changelog import Changelog, History, Item
from jirakit.models.dev_status import Branch, DevStatus, PullRequest, Repo
from jirakit.models.issue import (
    CLEAR,
    SPRINTS_FIELD,
    STORY_POINTS_FIELD,
    Fields,
    Issue,
    IssueLink,
    IssueLinkType,
    IssueStatus,
    IssueType,
    ModifyFields,
    Priority,
    ShortIssue,
)
from jirakit.models.mapping import decode_model
from jirakit.models.pages import AgilePage, IssuesPage
from jirakit.models.sprint import Sprint
from jirakit.models.tempo_log import TempoLog
from jirakit.models.user import Group, Groups, User
from jirakit.models.worklog import Worklog, Worklogs

__all__ = [
    "CLEAR",
    "SPRINTS_FIELD",
    "STORY_POINTS_FIELD",
    "AgilePage",
    "Board",
    "Branch",
    "Changelog",
    "DevStatus",
    "Fields",
    "Group",
    "Groups",
    "History",
    "Issue",
    "IssueLink",
    "IssueLinkType",
    "IssueStatus",
    "IssueType",
    "IssuesPage",
    "Item",
    "ModifyFields",
    "Priority",
    "Project",
    "PullRequest",
    "Repo",
    "ShortIssue",
    "Sprint",
    "TempoLog",
    "User",
    "Worklog",
    "Worklogs",
    "decode_model",
]
