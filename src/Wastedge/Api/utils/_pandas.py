# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Internal pandas helpers"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence

import pandas as pd

from ..data._codec import parse
from ..models.result_set import ResultSet
from ..models.schema import EntitySchema


def _column_order(entity: EntitySchema, rows: List[Dict[str, Any]]) -> List[str]:
    """Entity member order first, then any extra keys in first-seen order."""
    seen: Dict[str, None] = {}
    for row in rows:
        for key in row:
            seen.setdefault(key, None)
    ordered = [m.name for m in entity if m.name in seen]
    ordered.extend(k for k in seen if k not in entity)
    return ordered


def rows_to_dataframe(entity: EntitySchema, rows: List[Dict[str, Any]], parse_dates: bool = True) -> pd.DataFrame:
    """Convert decoded rows of ``entity`` to a DataFrame.

    :param entity: Entity the rows belong to; gives column order and date types.
    :param rows: Row dicts as returned by the service.
    :param parse_dates: When True (default), date, date-time and date-time-with-offset
        columns are decoded from their wire text into ``date``/``datetime`` objects.
    :raises MalformedDateError: If a date column holds text that does not match its pattern.
    """
    df = pd.DataFrame.from_records(rows, columns=_column_order(entity, rows))
    if not parse_dates:
        return df

    for member in entity:
        if member.name not in df.columns or member.data_type is None or not member.data_type.is_date:
            continue
        data_type = member.data_type
        parsed = [None if pd.isna(v) else parse(v, data_type) for v in df[member.name]]
        df[member.name] = pd.Series(parsed, index=df.index, dtype=object)
    return df


def result_sets_to_dataframe(pages: Sequence[ResultSet], parse_dates: bool = True) -> pd.DataFrame:
    """Concatenate the rows of one or more pages of the same query into a DataFrame."""
    if not pages:
        return pd.DataFrame()
    rows: List[Dict[str, Any]] = []
    for page in pages:
        rows.extend(page.rows)
    return rows_to_dataframe(pages[0].entity, rows, parse_dates=parse_dates)
