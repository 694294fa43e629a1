"""Page envelopes.

Agile endpoints wrap results as ``{isLast, maxResults, startAt, values}``;
issue search wraps them as ``{startAt, maxResults, total, issues}``. Only one
page is decoded at a time; following ``start_at`` is up to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Generic, TypeVar

from jirakit.models.issue import Issue
from jirakit.models.mapping import (
    Decoder,
    FieldSpec,
    boolean,
    decode_fields,
    decode_model,
    defaulted,
    list_of,
    model,
    required,
    unsigned,
)

T = TypeVar("T")


@dataclass(frozen=True)
class AgilePage(Generic[T]):
    is_last: bool
    max_results: int
    values: list[T] = field(default_factory=list)
    start_at: int = 0

    # List-valued, so not hashable
    __hash__ = None  # type: ignore[assignment]

    @classmethod
    def decoder(cls, item: Decoder[T]) -> Decoder[AgilePage[T]]:
        """Build a decoder for pages whose ``values`` decode with ``item``."""
        fields = (
            required("is_last", boolean, wire="isLast"),
            required("max_results", unsigned, wire="maxResults"),
            required("values", list_of(item)),
            defaulted("start_at", unsigned, int, wire="startAt"),
        )

        def decode(value: Any, path: str) -> AgilePage[T]:
            return decode_fields(cls, fields, value, path)

        return decode

    @property
    def next_start_at(self) -> int | None:
        """Offset of the following page, or None on the last page."""
        if self.is_last:
            return None
        return self.start_at + len(self.values)


@dataclass(frozen=True)
class IssuesPage:
    max_results: int
    total: int
    issues: list[Issue] = field(default_factory=list)
    start_at: int = 0

    # List-valued, so not hashable
    __hash__ = None  # type: ignore[assignment]

    WIRE_FIELDS: ClassVar[tuple[FieldSpec, ...]] = (
        required("max_results", unsigned, wire="maxResults"),
        required("total", unsigned),
        required("issues", list_of(model(Issue))),
        defaulted("start_at", unsigned, int, wire="startAt"),
    )

    @classmethod
    def from_wire(cls, raw: Any) -> IssuesPage:
        return decode_model(cls, raw)

    @property
    def next_start_at(self) -> int | None:
        """Offset of the following page, or None once ``total`` is reached."""
        following = self.start_at + len(self.issues)
        if not self.issues or following >= self.total:
            return None
        return following
