"""Wire codec helpers: write-time string truncation and datetime normalization.

Truncation counts extended grapheme clusters, so a character built from
several code points (flags, skin-tone modifiers, combining marks) is either
kept whole or dropped whole. Truncation is applied on serialization only;
inbound values are decoded as-is.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Annotated, Any

import regex
from pydantic import BeforeValidator, PlainSerializer

from .errors import DateDecodingError

_GRAPHEME = regex.compile(r"\X")
_WIRE_DATETIME = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})[Tt ](?P<time>\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<fraction>\d+))?"
    r"(?P<offset>[Zz]|[+-]\d{2}:?\d{2})$",
    re.ASCII,
)


def grapheme_length(value: str) -> int:
    return sum(1 for _ in _GRAPHEME.finditer(value))


def truncated_encode(value: str, limit: int) -> str:
    if limit <= 0:
        return ""

    # Any string with no more code points than the limit also fits in graphemes.
    if len(value) <= limit:
        return value

    count = 0
    for match in _GRAPHEME.finditer(value):
        count += 1
        if count == limit:
            return value[: match.end()]
    return value


def truncated_encode_if_present(value: str | None, limit: int) -> str | None:
    if value is None:
        return None
    return truncated_encode(value, limit)


def encode_datetime(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)

    base = value.strftime("%Y-%m-%dT%H:%M:%S")
    if value.microsecond % 1000 == 0:
        return f"{base}.{value.microsecond // 1000:03d}Z"
    return f"{base}.{value.microsecond:06d}Z"


def decode_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        raise DateDecodingError(value)

    match = _WIRE_DATETIME.match(value.strip())
    if match is None:
        raise DateDecodingError(value)

    fraction = (match.group("fraction") or "")[:6].ljust(6, "0")
    offset = match.group("offset")
    try:
        parsed = datetime.strptime(f"{match.group('date')}T{match.group('time')}", "%Y-%m-%dT%H:%M:%S")
        tz = timezone.utc if offset in ("Z", "z") else _parse_offset(offset)
    except ValueError as error:
        raise DateDecodingError(value) from error

    return parsed.replace(microsecond=int(fraction), tzinfo=tz)


def _parse_offset(offset: str) -> timezone:
    sign = -1 if offset[0] == "-" else 1
    digits = offset[1:].replace(":", "")
    hours, minutes = int(digits[:2]), int(digits[2:])
    if hours > 23 or minutes > 59:
        raise ValueError(f"invalid utc offset {offset!r}")
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def truncated(limit: int) -> PlainSerializer:
    """Serializer annotation truncating a string field to ``limit`` graphemes.

    Used as ``Annotated[str, truncated(128)]``. ``None`` is passed through so
    optional fields drop out under ``exclude_none``.
    """

    return PlainSerializer(lambda value: truncated_encode(value, limit), return_type=str, when_used="unless-none")


WireDatetime = Annotated[
    datetime,
    BeforeValidator(decode_datetime),
    PlainSerializer(encode_datetime, return_type=str, when_used="unless-none"),
]
