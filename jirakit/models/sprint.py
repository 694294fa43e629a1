"""Agile sprint model."""

from __future__ import annotations

from dataclasses import astuple, dataclass
from datetime import datetime
from typing import Any, ClassVar

from jirakit.models.mapping import (
    FieldSpec,
    decode_model,
    optional,
    required,
    string,
    timestamp,
    unsigned,
)
from jirakit.timestamps import parse_timestamp_utc


def _none_first(value: Any) -> tuple[bool, Any]:
    return (value is not None, value)


@dataclass(frozen=True)
class Sprint:
    """A sprint on an agile board.

    Sprint dates use the ``Z``-suffixed wire format and decode to UTC. All
    three dates are absent for sprints that have not started yet.

    Sprints order by every attribute in declaration order (id first), with
    missing dates sorting before present ones.
    """

    id: int
    name: str
    state: str
    origin_board_id: int
    start_date: datetime | None = None
    end_date: datetime | None = None
    complete_date: datetime | None = None

    WIRE_FIELDS: ClassVar[tuple[FieldSpec, ...]] = (
        required("id", unsigned),
        required("name", string),
        required("state", string),
        required("origin_board_id", unsigned, wire="originBoardId"),
        optional("start_date", timestamp(parse_timestamp_utc), wire="startDate"),
        optional("end_date", timestamp(parse_timestamp_utc), wire="endDate"),
        optional("complete_date", timestamp(parse_timestamp_utc), wire="completeDate"),
    )

    @classmethod
    def from_wire(cls, raw: Any) -> Sprint:
        return decode_model(cls, raw)

    def __str__(self) -> str:
        return self.name

    def _sort_key(self) -> tuple[tuple[bool, Any], ...]:
        return tuple(_none_first(value) for value in astuple(self))

    def __lt__(self, other: Sprint) -> bool:
        if not isinstance(other, Sprint):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __le__(self, other: Sprint) -> bool:
        if not isinstance(other, Sprint):
            return NotImplemented
        return self._sort_key() <= other._sort_key()

    def __gt__(self, other: Sprint) -> bool:
        if not isinstance(other, Sprint):
            return NotImplemented
        return self._sort_key() > other._sort_key()

    def __ge__(self, other: Sprint) -> bool:
        if not isinstance(other, Sprint):
            return NotImplemented
        return self._sort_key() >= other._sort_key()
