# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Request body builder for the ``<entity>/$report`` endpoint.
"""

from __future__ import annotations

import datetime as _dt
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..core.errors import InvalidArgumentError
from ..core._error_codes import VALIDATION_MISSING_ARGUMENT, VALIDATION_REPORT_LAYOUT
from ..models.filter import Filter
from ..models.report import ReportField
from ..models.schema import EntityDataType
from ._codec import serialize
from ._filters import OPERATOR_CODES


def _report_value(value: Any) -> Any:
    """Dates and decimals go out as their wire text; other JSON values as they are."""
    if isinstance(value, _dt.datetime):
        data_type = EntityDataType.DATE_TIME if value.utcoffset() is None else EntityDataType.DATE_TIME_TZ
        return serialize(value, data_type)
    if isinstance(value, _dt.date):
        return serialize(value, EntityDataType.DATE)
    if isinstance(value, Decimal):
        return serialize(value, EntityDataType.DECIMAL)
    if isinstance(value, tuple):
        return [_report_value(v) for v in value]
    return value


def _report_filter(f: Filter) -> Dict[str, Any]:
    if not isinstance(f, Filter):
        raise InvalidArgumentError(
            f"filters must contain Filter instances, got {type(f).__name__}.",
            subcode=VALIDATION_MISSING_ARGUMENT,
        )
    term: Dict[str, Any] = {"name": f.field.name, "op": OPERATOR_CODES[f.type]}
    if f.value is not None:
        term["value"] = _report_value(f.value)
    return term


def _field_names(kind: str, fields: Sequence[ReportField]) -> List[str]:
    for f in fields:
        if not isinstance(f, ReportField):
            raise InvalidArgumentError(
                f"{kind} must contain ReportField instances, got {type(f).__name__}.",
                subcode=VALIDATION_MISSING_ARGUMENT,
            )
    return [f.name for f in fields]


def build_report_request(
    filters: Optional[Iterable[Filter]],
    rows: Sequence[ReportField],
    columns: Sequence[ReportField],
    values: Sequence[ReportField] = (),
) -> Dict[str, Any]:
    """
    Build the JSON body of a report request.

    :param filters: Filter terms restricting the rows that are aggregated.
    :param rows: Fields grouped down the rows; at least one.
    :param columns: Fields grouped across the columns; at least one.
    :param values: Aggregated fields, each with its transform.
    :return: JSON-serializable request body.
    :rtype: dict[str, Any]
    :raises InvalidArgumentError: If ``rows`` or ``columns`` is empty.

    Example:
        Body shape::

            {
                "query": {"fields": [{"name": "status", "op": "eq", "value": "open"}]},
                "rows": ["customer.region"],
                "columns": ["status"],
                "values": [{"name": "amount", "transform": "sum"}],
            }
    """
    rows = list(rows or ())
    columns = list(columns or ())
    values = list(values or ())
    if not rows or not columns:
        raise InvalidArgumentError(
            "A report needs at least one row and one column.", subcode=VALIDATION_REPORT_LAYOUT
        )

    value_names = _field_names("values", values)
    return {
        "query": {"fields": [_report_filter(f) for f in filters or ()]},
        "rows": _field_names("rows", rows),
        "columns": _field_names("columns", columns),
        "values": [{"name": name, "transform": f.transform.value} for name, f in zip(value_names, values)],
    }
