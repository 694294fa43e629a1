"""Tempo Timesheets worklog model."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, ClassVar

from jirakit.models.mapping import FieldSpec, decode_model, optional, required, timestamp, unsigned
from jirakit.timestamps import parse_tempo_date


@dataclass(frozen=True)
class TempoLog:
    """A Tempo worklog. Only the calendar day is kept from ``dateStarted``."""

    date_started: date
    time_spent: int | None = None

    WIRE_FIELDS: ClassVar[tuple[FieldSpec, ...]] = (
        required("date_started", timestamp(parse_tempo_date), wire="dateStarted"),
        optional("time_spent", unsigned, wire="timeSpentSeconds"),
    )

    @classmethod
    def from_wire(cls, raw: Any) -> TempoLog:
        return decode_model(cls, raw)
