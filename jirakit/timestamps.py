"""Timestamp wire formats used by the Jira REST APIs.

Jira does not use one ISO-8601 profile. Each endpoint family emits its own
literal pattern, and each gets its own decoder here:

Format A (issue and changelog timestamps)::

    2020-03-10T10:20:50.730-04:00

    Milliseconds are always three digits. The remote feed also emits the
    offset without a colon (``-0400``), which is accepted on decode. The
    decoded value keeps its offset; encoding always writes ``±HH:MM``.

Format B (agile sprint dates)::

    2020-03-10T10:20:50.730Z

    The trailing ``Z`` is read as UTC. No other offsets are accepted.

Format C (worklog ``started``)::

    2019-03-11T00:00:00.000-0500

    Same as Format A except that encoding writes ``±HHMM``.

Format D (Tempo ``dateStarted``)::

    2019-03-11T00:00:00.000

    No offset at all; read as UTC. Callers usually keep only the date.

Every decoder raises InvalidTimestamp (a DecodeError) for anything that does
not match its pattern, including non-string values. The ``optional`` variants
return None for None and still raise for malformed strings.
"""

from __future__ import annotations

import re
from datetime import UTC, date, datetime, timedelta, timezone
from typing import Any

from jirakit.utils.errors import InvalidTimestamp

# Human-readable patterns carried by InvalidTimestamp
PATTERN_WITH_TZ = "YYYY-MM-DDTHH:MM:SS.sss±HH:MM"
PATTERN_UTC = "YYYY-MM-DDTHH:MM:SS.sssZ"
PATTERN_WORKLOG = "YYYY-MM-DDTHH:MM:SS.sss±HHMM"
PATTERN_TEMPO = "YYYY-MM-DDTHH:MM:SS.sss"

_DATE_TIME = r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})\.(\d{3})"
_OFFSET = r"([+-])(\d{2}):?(\d{2})"

_WITH_TZ_RE = re.compile(rf"{_DATE_TIME}{_OFFSET}", re.ASCII)
_UTC_RE = re.compile(rf"{_DATE_TIME}Z", re.ASCII)
_TEMPO_RE = re.compile(rf"{_DATE_TIME}", re.ASCII)


def _build(match: re.Match[str], tzinfo: timezone, raw: str, pattern: str) -> datetime:
    year, month, day, hour, minute, second, millis = (int(g) for g in match.groups()[:7])
    try:
        return datetime(
            year, month, day, hour, minute, second, millis * 1000, tzinfo=tzinfo
        )
    except ValueError:
        # Shape matched but the calendar values are out of range (e.g. month 13)
        raise InvalidTimestamp(raw, pattern) from None


def _offset(sign: str, hours: str, minutes: str, raw: str, pattern: str) -> timezone:
    delta = timedelta(hours=int(hours), minutes=int(minutes))
    if delta >= timedelta(hours=24):
        raise InvalidTimestamp(raw, pattern)
    return timezone(-delta if sign == "-" else delta)


def _parse_offset_aware(value: Any, pattern: str) -> datetime:
    if not isinstance(value, str):
        raise InvalidTimestamp(value, pattern)
    match = _WITH_TZ_RE.fullmatch(value)
    if match is None:
        raise InvalidTimestamp(value, pattern)
    sign, hours, minutes = match.groups()[7:]
    return _build(match, _offset(sign, hours, minutes, value, pattern), value, pattern)


def _millis(value: datetime) -> str:
    return f"{value:%Y-%m-%dT%H:%M:%S}.{value.microsecond // 1000:03d}"


def _format_offset(value: datetime, separator: str) -> str:
    offset = value.utcoffset()
    if offset is None:
        raise ValueError("timestamp must be timezone-aware")
    sign = "-" if offset < timedelta(0) else "+"
    total_minutes = abs(int(offset.total_seconds())) // 60
    hours, minutes = divmod(total_minutes, 60)
    return f"{sign}{hours:02d}{separator}{minutes:02d}"


# Format A


def parse_timestamp_with_tz(value: Any) -> datetime:
    """Decode a Format A timestamp, keeping its UTC offset."""
    return _parse_offset_aware(value, PATTERN_WITH_TZ)


def parse_optional_timestamp_with_tz(value: Any) -> datetime | None:
    """Decode an optional Format A timestamp (None stays None)."""
    if value is None:
        return None
    return parse_timestamp_with_tz(value)


def format_timestamp_with_tz(value: datetime) -> str:
    """Encode an aware datetime as Format A (``±HH:MM`` offset).

    Raises:
        ValueError: If ``value`` is naive
    """
    return _millis(value) + _format_offset(value, ":")


# Format B


def parse_timestamp_utc(value: Any) -> datetime:
    """Decode a Format B (``Z``-suffixed) timestamp as UTC."""
    if not isinstance(value, str):
        raise InvalidTimestamp(value, PATTERN_UTC)
    match = _UTC_RE.fullmatch(value)
    if match is None:
        raise InvalidTimestamp(value, PATTERN_UTC)
    return _build(match, UTC, value, PATTERN_UTC)


def parse_optional_timestamp_utc(value: Any) -> datetime | None:
    """Decode an optional Format B timestamp (None stays None)."""
    if value is None:
        return None
    return parse_timestamp_utc(value)


def format_timestamp_utc(value: datetime) -> str:
    """Encode a datetime as Format B. Aware values are converted to UTC first."""
    if value.utcoffset() is not None:
        value = value.astimezone(UTC)
    return _millis(value) + "Z"


# Format C


def parse_worklog_timestamp(value: Any) -> datetime:
    """Decode a Format C (worklog ``started``) timestamp, keeping its offset."""
    return _parse_offset_aware(value, PATTERN_WORKLOG)


def format_worklog_timestamp(value: datetime) -> str:
    """Encode an aware datetime as Format C (``±HHMM`` offset)."""
    return _millis(value) + _format_offset(value, "")


# Format D


def parse_tempo_timestamp(value: Any) -> datetime:
    """Decode a Format D (Tempo) timestamp as UTC."""
    if not isinstance(value, str):
        raise InvalidTimestamp(value, PATTERN_TEMPO)
    match = _TEMPO_RE.fullmatch(value)
    if match is None:
        raise InvalidTimestamp(value, PATTERN_TEMPO)
    return _build(match, UTC, value, PATTERN_TEMPO)


def parse_tempo_date(value: Any) -> date:
    """Decode a Format D timestamp and keep only the calendar date."""
    return parse_tempo_timestamp(value).date()


__all__ = [
    "PATTERN_TEMPO",
    "PATTERN_UTC",
    "PATTERN_WITH_TZ",
    "PATTERN_WORKLOG",
    "format_timestamp_utc",
    "format_timestamp_with_tz",
    "format_worklog_timestamp",
    "parse_optional_timestamp_utc",
    "parse_optional_timestamp_with_tz",
    "parse_tempo_date",
    "parse_tempo_timestamp",
    "parse_timestamp_utc",
    "parse_timestamp_with_tz",
    "parse_worklog_timestamp",
]
