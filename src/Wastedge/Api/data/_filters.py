# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Filter expression builder.

Turns a list of :class:`~Wastedge.Api.models.filter.Filter` terms into the
query-parameter string the service expects, for example::

    status=eq.open&amount=gte.100.50&region=in.north,south&$output=verbose&$offset=0&$count=50
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import quote

from ..common.constants import PARAM_COUNT, PARAM_OFFSET, PARAM_OUTPUT, PARAM_START
from ..core.errors import InvalidArgumentError
from ..core._error_codes import (
    VALIDATION_EMPTY_CURSOR,
    VALIDATION_EMPTY_LIST,
    VALIDATION_MISSING_ARGUMENT,
    VALIDATION_NEGATIVE_WINDOW,
)
from ..models.filter import Filter, FilterType, OutputFormat
from ._codec import serialize

# Operator tokens of the service's filter grammar
OPERATOR_CODES: Dict[FilterType, str] = {
    FilterType.IS_NULL: "is.null",
    FilterType.NOT_IS_NULL: "not.is.null",
    FilterType.IS_TRUE: "is.true",
    FilterType.NOT_IS_TRUE: "not.is.true",
    FilterType.IS_FALSE: "is.false",
    FilterType.NOT_IS_FALSE: "not.is.false",
    FilterType.IN: "in",
    FilterType.NOT_IN: "not.in",
    FilterType.LIKE: "like",
    FilterType.NOT_LIKE: "not.like",
    FilterType.EQUAL: "eq",
    FilterType.NOT_EQUAL: "ne",
    FilterType.GREATER_THAN: "gt",
    FilterType.GREATER_EQUAL: "gte",
    FilterType.LESS_THAN: "lt",
    FilterType.LESS_EQUAL: "lte",
}

OUTPUT_CODES: Dict[OutputFormat, str] = {
    OutputFormat.VERBOSE: "verbose",
    OutputFormat.COMPACT: "compact",
}


@dataclass(frozen=True)
class QueryParameters:
    """
    The two strings produced for a query.

    :param parameters: Full parameter string sent with the first request.
    :type parameters: str
    :param base_parameters: Filters and output format only; what a pager keeps.
    :type base_parameters: str
    """

    parameters: str
    base_parameters: str


def escape_data_string(value: str) -> str:
    """Percent-encode everything except the RFC 3986 unreserved characters."""
    return quote(value, safe="")


def _encode_value(value: Any, f: Filter) -> str:
    return escape_data_string(serialize(value, f.field.data_type))


def _encode_list(f: Filter) -> str:
    values = f.value
    if not values:
        raise InvalidArgumentError(
            f"{f.type.name} filter on '{f.field.name}' requires at least one value.",
            subcode=VALIDATION_EMPTY_LIST,
        )
    return ",".join(_encode_value(v, f) for v in values)


def _encode_term(f: Filter) -> str:
    code = OPERATOR_CODES[f.type]
    term = f"{escape_data_string(f.field.name)}={code}"
    if not f.type.takes_value:
        return term
    if f.type.takes_list:
        return f"{term}.{_encode_list(f)}"
    return f"{term}.{_encode_value(f.value, f)}"


def _check_window(name: str, value: Optional[int]) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidArgumentError(
            f"{name} must be a non-negative integer, got {value!r}.", subcode=VALIDATION_NEGATIVE_WINDOW
        )


def build_query_parameters(
    filters: Optional[Iterable[Filter]],
    offset: Optional[int] = None,
    count: Optional[int] = None,
    output_format: OutputFormat = OutputFormat.VERBOSE,
) -> QueryParameters:
    """
    Build the parameter strings for a query.

    Terms are joined with ``&`` in the order given, followed by the mandatory
    ``$output`` term. The base string is taken at that point; ``$offset`` and
    ``$count`` are only added to the full string.

    :param filters: Filter terms; None means no filters.
    :type filters: Iterable[~Wastedge.Api.models.filter.Filter] | None
    :param offset: Number of rows to skip.
    :type offset: int | None
    :param count: Page size.
    :type count: int | None
    :param output_format: Field naming of the output.
    :type output_format: ~Wastedge.Api.models.filter.OutputFormat
    :return: Full and base parameter strings.
    :rtype: QueryParameters
    :raises InvalidArgumentError: For non-Filter items, an empty ``IN`` list or a negative window.
    :raises UnsupportedValueTypeError: If a filter value cannot be serialized.

    Example::

        params = build_query_parameters([], 10, 20)
        # params.parameters == "$output=verbose&$offset=10&$count=20"
        # params.base_parameters == "$output=verbose"
    """
    if not isinstance(output_format, OutputFormat):
        raise InvalidArgumentError("output_format must be an OutputFormat.", subcode=VALIDATION_MISSING_ARGUMENT)
    _check_window("offset", offset)
    _check_window("count", count)

    parts: List[str] = []
    for f in filters or ():
        if not isinstance(f, Filter):
            raise InvalidArgumentError(
                f"filters must contain Filter instances, got {type(f).__name__}.",
                subcode=VALIDATION_MISSING_ARGUMENT,
            )
        parts.append(_encode_term(f))

    parts.append(f"{PARAM_OUTPUT}={OUTPUT_CODES[output_format]}")
    base_parameters = "&".join(parts)

    if offset is not None:
        parts.append(f"{PARAM_OFFSET}={offset}")
    if count is not None:
        parts.append(f"{PARAM_COUNT}={count}")

    return QueryParameters(parameters="&".join(parts), base_parameters=base_parameters)


def build_next_parameters(base_parameters: str, start: str, count: Optional[int] = None) -> str:
    """
    Build the parameter string for a follow-up page.

    :param base_parameters: Base string kept by the pager.
    :param start: Opaque cursor; escaped but otherwise passed through verbatim.
    :param count: Optional page size.
    :raises InvalidArgumentError: If ``start`` is empty or ``count`` negative.
    """
    if not isinstance(start, str) or not start:
        raise InvalidArgumentError("start cursor is required.", subcode=VALIDATION_EMPTY_CURSOR)
    _check_window("count", count)

    parts = [base_parameters] if base_parameters else []
    parts.append(f"{PARAM_START}={escape_data_string(start)}")
    if count is not None:
        parts.append(f"{PARAM_COUNT}={count}")
    return "&".join(parts)
