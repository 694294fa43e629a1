"""Agile board and project models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from jirakit.models.mapping import FieldSpec, decode_model, required, string, unsigned


@dataclass(frozen=True)
class Board:
    id: int
    name: str

    WIRE_FIELDS: ClassVar[tuple[FieldSpec, ...]] = (
        required("id", unsigned),
        required("name", string),
    )

    @classmethod
    def from_wire(cls, raw: Any) -> Board:
        return decode_model(cls, raw)


@dataclass(frozen=True)
class Project:
    key: str
    name: str

    WIRE_FIELDS: ClassVar[tuple[FieldSpec, ...]] = (
        required("key", string),
        required("name", string),
    )

    @classmethod
    def from_wire(cls, raw: Any) -> Project:
        return decode_model(cls, raw)

    def __str__(self) -> str:
        return self.key
