"""Field-set normalization for issue reads and searches.

Every issue request asks for at least MANDATORY_ISSUE_FIELDS, since the
Issue model cannot be decoded without them. Caller-supplied fields are
merged in, duplicates collapse, and the result is sorted so two requests
for the same fields always produce the same query string.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

MANDATORY_ISSUE_FIELDS: frozenset[str] = frozenset(
    {"created", "creator", "issuetype", "priority", "status", "summary"}
)


def _clean(values: Iterable[str] | None) -> list[str]:
    if values is None:
        return []
    if isinstance(values, str):
        # A bare string would otherwise be iterated character by character
        values = [values]
    return [value.strip() for value in values if value and value.strip()]


def normalize_fields(requested: Iterable[str] | None = None) -> list[str]:
    """Merge ``requested`` with the mandatory fields.

    Args:
        requested: Extra field names, or None

    Returns:
        Sorted, de-duplicated field names, always including the mandatory set
    """
    return sorted(MANDATORY_ISSUE_FIELDS.union(_clean(requested)))


def normalize_expand(expand: Iterable[str] | None = None) -> list[str]:
    """De-duplicate expand directives, keeping the order they were given in."""
    return list(dict.fromkeys(_clean(expand)))


@dataclass(frozen=True)
class FieldRequest:
    """The normalized ``fields`` and ``expand`` selections of one request."""

    fields: tuple[str, ...]
    expand: tuple[str, ...] = ()

    @property
    def fields_param(self) -> str:
        return ",".join(self.fields)

    @property
    def expand_param(self) -> str:
        """Comma-joined expand directives; empty string when there are none."""
        return ",".join(self.expand)


def build_field_request(
    fields: Iterable[str] | None = None,
    expand: Iterable[str] | None = None,
) -> FieldRequest:
    return FieldRequest(
        fields=tuple(normalize_fields(fields)),
        expand=tuple(normalize_expand(expand)),
    )


__all__ = [
    "MANDATORY_ISSUE_FIELDS",
    "FieldRequest",
    "build_field_request",
    "normalize_expand",
    "normalize_fields",
]
