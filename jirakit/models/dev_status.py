"""Development status (linked pull requests) models.

The dev-status API is undocumented; only the attributes needed to find the
repositories a pull request targets are mapped.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar

from jirakit.models.mapping import (
    FieldSpec,
    decode_model,
    defaulted,
    identifier,
    list_of,
    model,
    required,
    string,
)


@dataclass(frozen=True)
class Repo:
    url: str

    WIRE_FIELDS: ClassVar[tuple[FieldSpec, ...]] = (required("url", string),)


@dataclass(frozen=True)
class Branch:
    repository: Repo

    WIRE_FIELDS: ClassVar[tuple[FieldSpec, ...]] = (required("repository", model(Repo)),)


@dataclass(frozen=True)
class PullRequest:
    id: str
    destination: Branch

    WIRE_FIELDS: ClassVar[tuple[FieldSpec, ...]] = (
        required("id", identifier),
        required("destination", model(Branch)),
    )


@dataclass(frozen=True)
class DevStatus:
    pull_requests: list[PullRequest] = field(default_factory=list)

    # List-valued, so not hashable
    __hash__ = None  # type: ignore[assignment]

    WIRE_FIELDS: ClassVar[tuple[FieldSpec, ...]] = (
        defaulted("pull_requests", list_of(model(PullRequest)), list, wire="pullRequests"),
    )

    @classmethod
    def from_wire(cls, raw: Any) -> DevStatus:
        return decode_model(cls, raw)
