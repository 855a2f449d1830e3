# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""One page of query results."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from ..common.constants import NEXT_KEY, RESULT_KEY
from .schema import EntitySchema

if TYPE_CHECKING:
    from .pager import ApiPager, AsyncApiPager


@dataclass(frozen=True)
class ResultSet:
    """
    One page of rows returned by a query.

    :param entity: Entity the rows belong to.
    :type entity: ~Wastedge.Api.models.schema.EntitySchema
    :param payload: Decoded JSON response (``None`` for an empty body). Dates are
        unparsed strings and non-integral numbers are :class:`decimal.Decimal`.
    :type payload: dict[str, Any] | None
    :param pager: Pager bound to the originating query; use it to fetch further pages.
    :type pager: ApiPager | AsyncApiPager

    Example:
        Walk every page::

            rs = client.query(entity, filters, count=100)
            while True:
                handle(rs.rows)
                if rs.next_cursor is None:
                    break
                rs = rs.pager.next(rs.next_cursor, 100)
    """

    entity: EntitySchema
    payload: Optional[Dict[str, Any]]
    pager: "Union[ApiPager, AsyncApiPager]" = field(repr=False, compare=False)

    @property
    def rows(self) -> List[Dict[str, Any]]:
        """Rows of this page; empty when the payload carries none."""
        if not isinstance(self.payload, dict):
            return []
        rows = self.payload.get(RESULT_KEY)
        return [r for r in rows if isinstance(r, dict)] if isinstance(rows, list) else []

    @property
    def next_cursor(self) -> Optional[str]:
        """Continuation token for the next page, or None if the service sent none."""
        if not isinstance(self.payload, dict):
            return None
        cursor = self.payload.get(NEXT_KEY)
        return cursor if isinstance(cursor, str) and cursor else None


__all__ = ["ResultSet"]
