"""Issue models.

``Fields`` maps the subset of issue fields this client understands. Custom
field ids are instance specific; the two used here match the instance the
client was written against and are exposed as module constants.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, ClassVar

from jirakit.models.changelog import Changelog
from jirakit.models.mapping import (
    FieldSpec,
    decode_model,
    defaulted,
    identifier,
    list_of,
    model,
    number,
    optional,
    required,
    string,
    timestamp,
    unsigned,
)
from jirakit.models.user import User
from jirakit.models.worklog import Worklogs
from jirakit.timestamps import parse_timestamp_with_tz

STORY_POINTS_FIELD = "customfield_10182"
SPRINTS_FIELD = "customfield_10231"


@dataclass(frozen=True)
class IssueType:
    name: str

    WIRE_FIELDS: ClassVar[tuple[FieldSpec, ...]] = (required("name", string),)


@dataclass(frozen=True)
class IssueStatus:
    name: str

    WIRE_FIELDS: ClassVar[tuple[FieldSpec, ...]] = (required("name", string),)


@dataclass(frozen=True)
class Priority:
    name: str

    WIRE_FIELDS: ClassVar[tuple[FieldSpec, ...]] = (required("name", string),)


@dataclass(frozen=True)
class ShortIssue:
    """Identity-only issue reference (parents, subtasks, links)."""

    id: str
    key: str

    WIRE_FIELDS: ClassVar[tuple[FieldSpec, ...]] = (
        required("id", identifier),
        required("key", string),
    )

    @classmethod
    def from_wire(cls, raw: Any) -> ShortIssue:
        return decode_model(cls, raw)

    def __str__(self) -> str:
        return self.key


@dataclass(frozen=True)
class IssueLinkType:
    id: str
    name: str | None = None

    WIRE_FIELDS: ClassVar[tuple[FieldSpec, ...]] = (
        required("id", identifier),
        optional("name", string),
    )


@dataclass(frozen=True)
class IssueLink:
    id: str
    link_type: IssueLinkType
    inward_issue: ShortIssue | None = None
    outward_issue: ShortIssue | None = None

    WIRE_FIELDS: ClassVar[tuple[FieldSpec, ...]] = (
        required("id", identifier),
        required("link_type", model(IssueLinkType), wire="type"),
        optional("inward_issue", model(ShortIssue), wire="inwardIssue"),
        optional("outward_issue", model(ShortIssue), wire="outwardIssue"),
    )


@dataclass(frozen=True)
class Fields:
    """Decoded issue fields.

    ``created`` is always present. ``resolution_date`` stays None until the
    issue is resolved. Fields that were not requested decode to None (or an
    empty list for ``labels``).
    """

    summary: str
    created: datetime
    issue_type: IssueType
    status: IssueStatus
    description: str | None = None
    creator: User | None = None
    assignee: User | None = None
    resolution_date: datetime | None = None
    story_points: float | None = None
    sprints: list[str] | None = None
    work_logs: Worklogs | None = None
    priority: Priority | None = None
    parent: ShortIssue | None = None
    subtasks: list[ShortIssue] | None = None
    issue_links: list[IssueLink] | None = None
    time_original_estimate: int | None = None
    time_spent: int | None = None
    aggregate_time_spent: int | None = None
    labels: list[str] = field(default_factory=list)

    # List-valued, so not hashable
    __hash__ = None  # type: ignore[assignment]

    WIRE_FIELDS: ClassVar[tuple[FieldSpec, ...]] = (
        required("summary", string),
        required("created", timestamp(parse_timestamp_with_tz)),
        required("issue_type", model(IssueType), wire="issuetype"),
        required("status", model(IssueStatus)),
        optional("description", string),
        optional("creator", model(User)),
        optional("assignee", model(User)),
        optional("resolution_date", timestamp(parse_timestamp_with_tz), wire="resolutiondate"),
        optional("story_points", number, wire=STORY_POINTS_FIELD),
        optional("sprints", list_of(string), wire=SPRINTS_FIELD),
        optional("work_logs", model(Worklogs), wire="worklog"),
        optional("priority", model(Priority)),
        optional("parent", model(ShortIssue)),
        optional("subtasks", list_of(model(ShortIssue))),
        optional("issue_links", list_of(model(IssueLink)), wire="issuelinks"),
        optional("time_original_estimate", unsigned, wire="timeoriginalestimate"),
        optional("time_spent", unsigned, wire="timespent"),
        optional("aggregate_time_spent", unsigned, wire="aggregatetimespent"),
        defaulted("labels", list_of(string), list),
    )


@dataclass(frozen=True)
class Issue:
    """A Jira issue.

    ``key`` (e.g. ``PROJ-42``) is what people use; ``id`` is what
    sub-resource endpoints (worklogs, subtasks, dev status) expect.
    """

    id: str
    key: str
    fields: Fields
    changelog: Changelog | None = None

    # Fields is not hashable
    __hash__ = None  # type: ignore[assignment]

    WIRE_FIELDS: ClassVar[tuple[FieldSpec, ...]] = (
        required("id", identifier),
        required("key", string),
        required("fields", model(Fields)),
        optional("changelog", model(Changelog)),
    )

    @classmethod
    def from_wire(cls, raw: Any) -> Issue:
        return decode_model(cls, raw)

    def __str__(self) -> str:
        return self.key


class _Clear(Enum):
    """Marker type for an explicit ``null`` in an update payload."""

    CLEAR = "CLEAR"

    def __repr__(self) -> str:
        return "CLEAR"


CLEAR = _Clear.CLEAR


@dataclass
class ModifyFields:
    """Sparse set of field changes for ``JiraClient.update_issue``.

    Attributes left at None are not sent at all. To blank a field on the
    server, set it to ``CLEAR``, which is sent as an explicit JSON null.

        ModifyFields(summary="New title", assignee=CLEAR)
        -> {"summary": "New title", "assignee": null}
    """

    summary: str | None = None
    description: str | _Clear | None = None
    assignee: str | _Clear | None = None
    priority: str | _Clear | None = None
    labels: list[str] | None = None
    story_points: float | _Clear | None = None

    def to_wire(self) -> dict[str, Any]:
        """Build the ``fields`` object of an update request."""
        payload: dict[str, Any] = {}
        self._put(payload, "summary", self.summary)
        self._put(payload, "description", self.description)
        self._put(payload, "assignee", self.assignee, lambda name: {"name": name})
        self._put(payload, "priority", self.priority, lambda name: {"name": name})
        self._put(payload, "labels", self.labels, list)
        self._put(payload, STORY_POINTS_FIELD, self.story_points)
        return payload

    @staticmethod
    def _put(
        payload: dict[str, Any],
        wire: str,
        value: Any,
        encode: Any = None,
    ) -> None:
        if value is None:
            return
        if value is CLEAR:
            payload[wire] = None
        else:
            payload[wire] = encode(value) if encode is not None else value

    def is_empty(self) -> bool:
        return not self.to_wire()
