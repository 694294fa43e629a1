"""Issue worklog models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, ClassVar

from jirakit.models.mapping import (
    FieldSpec,
    decode_model,
    identifier,
    list_of,
    model,
    required,
    timestamp,
    unsigned,
)
from jirakit.models.user import User
from jirakit.timestamps import parse_worklog_timestamp


@dataclass(frozen=True, eq=False)
class Worklog:
    """A single worklog entry.

    Entries are identified by ``id`` alone, so the same entry fetched on two
    overlapping pages compares equal and de-duplicates in a set.
    """

    id: str
    author: User
    time_spent: int
    started: datetime

    WIRE_FIELDS: ClassVar[tuple[FieldSpec, ...]] = (
        required("id", identifier),
        required("author", model(User)),
        required("time_spent", unsigned, wire="timeSpentSeconds"),
        required("started", timestamp(parse_worklog_timestamp)),
    )

    @classmethod
    def from_wire(cls, raw: Any) -> Worklog:
        return decode_model(cls, raw)

    @property
    def date_started(self) -> date:
        """Calendar day the work started on, in the entry's own offset."""
        return self.started.date()

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Worklog):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


@dataclass(frozen=True)
class Worklogs:
    """One page of worklogs for an issue."""

    start_at: int
    max_results: int
    total: int
    worklogs: list[Worklog] = field(default_factory=list)

    # List-valued, so not hashable
    __hash__ = None  # type: ignore[assignment]

    WIRE_FIELDS: ClassVar[tuple[FieldSpec, ...]] = (
        required("start_at", unsigned, wire="startAt"),
        required("max_results", unsigned, wire="maxResults"),
        required("total", unsigned),
        required("worklogs", list_of(model(Worklog))),
    )

    @classmethod
    def from_wire(cls, raw: Any) -> Worklogs:
        return decode_model(cls, raw)

    @property
    def is_last(self) -> bool:
        return self.start_at + len(self.worklogs) >= self.total
