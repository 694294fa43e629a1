"""Issue changelog models (``expand=changelog``)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import ClassVar

from jirakit.models.mapping import (
    FieldSpec,
    defaulted,
    list_of,
    model,
    optional,
    required,
    string,
    timestamp,
)
from jirakit.models.user import User
from jirakit.timestamps import parse_timestamp_with_tz


@dataclass(frozen=True)
class Item:
    """A single field delta. Jira omits whichever side of the change is empty."""

    field: str
    from_value: str | None = None
    from_string: str | None = None
    to_value: str | None = None
    to_string: str | None = None

    WIRE_FIELDS: ClassVar[tuple[FieldSpec, ...]] = (
        required("field", string),
        optional("from_value", string, wire="from"),
        optional("from_string", string, wire="fromString"),
        optional("to_value", string, wire="to"),
        optional("to_string", string, wire="toString"),
    )


@dataclass(frozen=True)
class History:
    author: User
    items: list[Item] = field(default_factory=list)
    created: datetime | None = None

    # List-valued, so not hashable
    __hash__ = None  # type: ignore[assignment]

    WIRE_FIELDS: ClassVar[tuple[FieldSpec, ...]] = (
        required("author", model(User)),
        defaulted("items", list_of(model(Item)), list),
        optional("created", timestamp(parse_timestamp_with_tz)),
    )


@dataclass(frozen=True)
class Changelog:
    histories: list[History] = field(default_factory=list)

    # List-valued, so not hashable
    __hash__ = None  # type: ignore[assignment]

    WIRE_FIELDS: ClassVar[tuple[FieldSpec, ...]] = (
        required("histories", list_of(model(History))),
    )

    def items_for(self, field_name: str) -> list[tuple[History, Item]]:
        """Return every change to ``field_name`` in changelog order."""
        return [
            (history, item)
            for history in self.histories
            for item in history.items
            if item.field == field_name
        ]
