"""Declarative wire-to-model mapping.

Each model class lists its attributes in a ``WIRE_FIELDS`` table. An entry
names the domain attribute, the JSON key it comes from, the decoder applied
to the value, and a presence policy:

    required   key must be present and non-null
    optional   absent or null decodes to None
    defaulted  absent or null decodes to a fresh default value

decode_model() walks that table for any model. Decoders are plain callables
``(value, path) -> result`` so they compose (``list_of(model(User))``) and
every DecodeError carries the JSON path of the offending value. Keys not
listed in the table are ignored.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeVar

from jirakit.utils.errors import DecodeError

T = TypeVar("T")

Decoder = Callable[[Any, str], T]


class Presence(Enum):
    """How a missing or null wire value is treated."""

    REQUIRED = "required"
    OPTIONAL = "optional"
    DEFAULTED = "defaulted"


@dataclass(frozen=True)
class FieldSpec:
    """One row of a model's mapping table.

    Attributes:
        attr: Domain attribute name on the model
        wire: JSON key in the response body
        decoder: Callable turning the raw value into the domain value
        presence: Missing/null policy
        default_factory: Produces the value for DEFAULTED entries
    """

    attr: str
    wire: str
    decoder: Decoder[Any]
    presence: Presence = Presence.REQUIRED
    default_factory: Callable[[], Any] | None = None


def required(attr: str, decoder: Decoder[Any], wire: str | None = None) -> FieldSpec:
    return FieldSpec(attr, wire or attr, decoder, Presence.REQUIRED)


def optional(attr: str, decoder: Decoder[Any], wire: str | None = None) -> FieldSpec:
    return FieldSpec(attr, wire or attr, decoder, Presence.OPTIONAL)


def defaulted(
    attr: str,
    decoder: Decoder[Any],
    default_factory: Callable[[], Any],
    wire: str | None = None,
) -> FieldSpec:
    return FieldSpec(attr, wire or attr, decoder, Presence.DEFAULTED, default_factory)


M = TypeVar("M")


def decode_fields(
    cls: Callable[..., M],
    fields: tuple[FieldSpec, ...],
    raw: Any,
    path: str = "$",
) -> M:
    """Build ``cls`` from a JSON object using an explicit mapping table."""
    if not isinstance(raw, Mapping):
        raise DecodeError(f"expected an object, got {type(raw).__name__}", path=path, raw_value=raw)

    values: dict[str, Any] = {}
    for entry in fields:
        field_path = f"{path}.{entry.wire}"
        value = raw.get(entry.wire)
        if value is None:
            if entry.presence is Presence.REQUIRED:
                reason = "missing required field" if entry.wire not in raw else "null in required field"
                raise DecodeError(reason, path=field_path, raw_value=None)
            if entry.presence is Presence.DEFAULTED and entry.default_factory is not None:
                values[entry.attr] = entry.default_factory()
            else:
                values[entry.attr] = None
            continue
        values[entry.attr] = entry.decoder(value, field_path)

    return cls(**values)


def decode_model(cls: type[M], raw: Any, path: str = "$") -> M:
    """Build a model instance from its class-level ``WIRE_FIELDS`` table."""
    return decode_fields(cls, cls.WIRE_FIELDS, raw, path)  # type: ignore[attr-defined]


# Decoders


def model(cls: type[M]) -> Decoder[M]:
    """Decoder for a nested model."""

    def decode(value: Any, path: str) -> M:
        return decode_model(cls, value, path)

    return decode


def list_of(item: Decoder[T]) -> Decoder[list[T]]:
    """Decoder for a JSON array whose elements all use ``item``."""

    def decode(value: Any, path: str) -> list[T]:
        if not isinstance(value, list):
            raise DecodeError(
                f"expected an array, got {type(value).__name__}", path=path, raw_value=value
            )
        return [item(element, f"{path}[{index}]") for index, element in enumerate(value)]

    return decode


def string(value: Any, path: str) -> str:
    if not isinstance(value, str):
        raise DecodeError(f"expected a string, got {type(value).__name__}", path=path, raw_value=value)
    return value


def integer(value: Any, path: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(
            f"expected an integer, got {type(value).__name__}", path=path, raw_value=value
        )
    return value


def unsigned(value: Any, path: str) -> int:
    result = integer(value, path)
    if result < 0:
        raise DecodeError("expected a non-negative integer", path=path, raw_value=value)
    return result


def number(value: Any, path: str) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise DecodeError(f"expected a number, got {type(value).__name__}", path=path, raw_value=value)
    return float(value)


def boolean(value: Any, path: str) -> bool:
    if not isinstance(value, bool):
        raise DecodeError(f"expected a boolean, got {type(value).__name__}", path=path, raw_value=value)
    return value


def identifier(value: Any, path: str) -> str:
    """Jira ids are strings on most endpoints but bare numbers on a few."""
    if isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    raise DecodeError(
        f"expected a string or integer id, got {type(value).__name__}", path=path, raw_value=value
    )


def timestamp(parse: Callable[[Any], T]) -> Decoder[T]:
    """Wrap a jirakit.timestamps parser so its errors carry the field path."""

    def decode(value: Any, path: str) -> T:
        try:
            return parse(value)
        except DecodeError as e:
            raise e.at(path) from None

    return decode


__all__ = [
    "Decoder",
    "FieldSpec",
    "Presence",
    "boolean",
    "decode_fields",
    "decode_model",
    "defaulted",
    "identifier",
    "integer",
    "list_of",
    "model",
    "number",
    "optional",
    "required",
    "string",
    "timestamp",
    "unsigned",
]
