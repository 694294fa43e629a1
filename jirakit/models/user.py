"""Jira user model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar

from jirakit.models.mapping import (
    FieldSpec,
    boolean,
    decode_model,
    defaulted,
    list_of,
    model,
    optional,
    required,
    string,
    unsigned,
)


@dataclass(frozen=True)
class Group:
    name: str

    WIRE_FIELDS: ClassVar[tuple[FieldSpec, ...]] = (required("name", string),)


@dataclass(frozen=True)
class Groups:
    """Group membership as returned with ``expand=groups``."""

    size: int = 0
    items: list[Group] = field(default_factory=list)

    # List-valued, so not hashable
    __hash__ = None  # type: ignore[assignment]

    WIRE_FIELDS: ClassVar[tuple[FieldSpec, ...]] = (
        defaulted("size", unsigned, int),
        defaulted("items", list_of(model(Group)), list),
    )

    @property
    def names(self) -> list[str]:
        return [group.name for group in self.items]


@dataclass(frozen=True, eq=False)
class User:
    """A Jira (Server/Data Center) user.

    Identity is the login ``name``: two users with the same name are equal
    and hash alike, whatever their other attributes. Sorting uses the
    display name, with users lacking one placed first.

    Attributes:
        key: Stable internal user key (e.g. ``JIRAUSER10100``)
        name: Login name
        display_name: Full name shown in the UI, if visible
        email_address: E-mail address, if visible
        active: Whether the account is active, if reported
        groups: Group membership (empty unless requested with expand=groups)
    """

    key: str
    name: str
    display_name: str | None = None
    email_address: str | None = None
    active: bool | None = None
    groups: Groups = field(default_factory=Groups)

    WIRE_FIELDS: ClassVar[tuple[FieldSpec, ...]] = (
        required("key", string),
        required("name", string),
        optional("display_name", string, wire="displayName"),
        optional("email_address", string, wire="emailAddress"),
        optional("active", boolean),
        defaulted("groups", model(Groups), Groups),
    )

    @classmethod
    def from_wire(cls, raw: Any) -> User:
        return decode_model(cls, raw)

    def __str__(self) -> str:
        return self.display_name or self.name

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def _sort_key(self) -> tuple[bool, str]:
        return (self.display_name is not None, self.display_name or "")

    def __lt__(self, other: User) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self._sort_key() < other._sort_key()

    def __le__(self, other: User) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self._sort_key() <= other._sort_key()

    def __gt__(self, other: User) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self._sort_key() > other._sort_key()

    def __ge__(self, other: User) -> bool:
        if not isinstance(other, User):
            return NotImplemented
        return self._sort_key() >= other._sort_key()
