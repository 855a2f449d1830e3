# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Value codec: typed values to and from their wire text.

Dates use three fixed patterns chosen by the member's *declared* data type:

* ``DATE``: ``2024-03-01``
* ``DATE_TIME``: ``2024-03-01T13:45:00.250`` (millisecond precision, no offset)
* ``DATE_TIME_TZ``: ``2024-03-01T13:45:00.250+01:00``

Numbers are written locale-invariantly (``.`` separator, no grouping).
"""

from __future__ import annotations

import datetime as _dt
import math
import re
from decimal import Decimal
from typing import Any, Optional

from ..core.errors import MalformedDateError, UnsupportedValueTypeError
from ..core._error_codes import (
    CODEC_DATA_TYPE_MISMATCH,
    CODEC_NAIVE_DATETIME,
    CODEC_NON_FINITE,
    CODEC_UNSUPPORTED_TYPE,
    DATE_PATTERN_MISMATCH,
)
from ..models.schema import EntityDataType

_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_DATE_TIME_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}\.[0-9]{3}")
_DATE_TIME_TZ_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}\.[0-9]{3}[+-][0-9]{2}:[0-9]{2}")


def _format_date(value: _dt.date) -> str:
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def _format_date_time(value: _dt.datetime) -> str:
    return (
        f"{_format_date(value)}T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
        f".{value.microsecond // 1000:03d}"
    )


def _format_offset(offset: _dt.timedelta) -> str:
    minutes = int(offset.total_seconds()) // 60
    sign = "-" if minutes < 0 else "+"
    hours, minutes = divmod(abs(minutes), 60)
    return f"{sign}{hours:02d}:{minutes:02d}"


def _serialize_date(value: _dt.date, data_type: Optional[EntityDataType]) -> str:
    if data_type is EntityDataType.DATE:
        return _format_date(value)

    if data_type in (EntityDataType.DATE_TIME, EntityDataType.DATE_TIME_TZ):
        if not isinstance(value, _dt.datetime):
            raise UnsupportedValueTypeError(
                f"A date value cannot be written as {data_type.name}; pass a datetime.",
                subcode=CODEC_DATA_TYPE_MISMATCH,
            )
        if data_type is EntityDataType.DATE_TIME:
            return _format_date_time(value)
        offset = value.utcoffset()
        if offset is None:
            raise UnsupportedValueTypeError(
                "A naive datetime cannot be written as DATE_TIME_TZ; attach a tzinfo.",
                subcode=CODEC_NAIVE_DATETIME,
            )
        return _format_date_time(value) + _format_offset(offset)

    raise UnsupportedValueTypeError(
        f"A {type(value).__name__} value cannot be written for data type "
        f"{data_type.name if data_type else None}.",
        subcode=CODEC_DATA_TYPE_MISMATCH,
    )


def serialize(value: Any, data_type: Optional[EntityDataType]) -> str:
    """
    Convert ``value`` to its wire text.

    :param value: Value to serialize. ``None`` gives ``""``; ``str`` passes through unchanged.
    :param data_type: Declared data type of the member; selects the date pattern.
    :type data_type: ~Wastedge.Api.models.schema.EntityDataType | None
    :return: Wire text (not yet URL-escaped).
    :rtype: str
    :raises UnsupportedValueTypeError: For types without a wire form (including ``bool``),
        non-finite numbers, and date values whose declared type is not a date type.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, _dt.date):
        return _serialize_date(value, data_type)
    if isinstance(value, bool):
        raise UnsupportedValueTypeError(
            "Boolean values have no wire form; use the IS_TRUE/IS_FALSE filters.",
            subcode=CODEC_UNSUPPORTED_TYPE,
        )
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise UnsupportedValueTypeError(f"{value!r} has no wire form.", subcode=CODEC_NON_FINITE)
        return repr(value)
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise UnsupportedValueTypeError(f"{value!r} has no wire form.", subcode=CODEC_NON_FINITE)
        return format(value, "f")

    raise UnsupportedValueTypeError(
        f"Values of type {type(value).__name__} cannot be serialized.",
        subcode=CODEC_UNSUPPORTED_TYPE,
        details={"type": type(value).__name__},
    )


def _check(pattern: "re.Pattern[str]", value: Any, kind: str) -> str:
    if not isinstance(value, str) or not pattern.fullmatch(value):
        raise MalformedDateError(f"{value!r} is not a valid {kind}.", subcode=DATE_PATTERN_MISMATCH)
    return value


def parse_date(value: Optional[str]) -> Optional[_dt.date]:
    """
    Parse a ``YYYY-MM-DD`` string.

    :return: The date, or None when ``value`` is None.
    :raises MalformedDateError: If ``value`` does not match the pattern exactly.
    """
    if value is None:
        return None
    text = _check(_DATE_RE, value, "date")
    try:
        return _dt.datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError as e:
        raise MalformedDateError(f"{value!r} is not a valid date.", subcode=DATE_PATTERN_MISMATCH) from e


def parse_date_time(value: Optional[str]) -> Optional[_dt.datetime]:
    """
    Parse a ``YYYY-MM-DDTHH:MM:SS.fff`` string into a naive datetime.

    :return: The datetime, or None when ``value`` is None.
    :raises MalformedDateError: If ``value`` does not match the pattern exactly.
    """
    if value is None:
        return None
    text = _check(_DATE_TIME_RE, value, "date-time")
    try:
        return _dt.datetime.strptime(text, "%Y-%m-%dT%H:%M:%S.%f")
    except ValueError as e:
        raise MalformedDateError(f"{value!r} is not a valid date-time.", subcode=DATE_PATTERN_MISMATCH) from e


def parse_date_time_offset(value: Optional[str]) -> Optional[_dt.datetime]:
    """
    Parse a ``YYYY-MM-DDTHH:MM:SS.fff+HH:MM`` string into an aware datetime.

    :return: The datetime, or None when ``value`` is None.
    :raises MalformedDateError: If ``value`` does not match the pattern exactly.
    """
    if value is None:
        return None
    text = _check(_DATE_TIME_TZ_RE, value, "date-time with offset")
    try:
        return _dt.datetime.strptime(text, "%Y-%m-%dT%H:%M:%S.%f%z")
    except ValueError as e:
        raise MalformedDateError(
            f"{value!r} is not a valid date-time with offset.", subcode=DATE_PATTERN_MISMATCH
        ) from e


def parse(value: Optional[str], data_type: EntityDataType) -> Any:
    """Parse a date string according to a declared date data type."""
    if data_type is EntityDataType.DATE:
        return parse_date(value)
    if data_type is EntityDataType.DATE_TIME:
        return parse_date_time(value)
    if data_type is EntityDataType.DATE_TIME_TZ:
        return parse_date_time_offset(value)
    raise UnsupportedValueTypeError(
        f"Data type {data_type.name} has no date parser.", subcode=CODEC_DATA_TYPE_MISMATCH
    )
