# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Cursor-based continuation of a query."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from .schema import EntitySchema

if TYPE_CHECKING:
    from ..client import ApiClient, AsyncApiClient
    from .result_set import ResultSet


class ApiPager:
    """
    Fetches further pages of one query.

    Created by :meth:`~Wastedge.Api.client.ApiClient.query`; not meant to be
    constructed directly. The base parameters (filters and output format) are
    fixed for the pager's lifetime; each :meth:`next` call only adds the start
    cursor and an optional page size.

    :param client: Client that issued the originating query.
    :param entity: Entity being queried.
    :param parameters: Base query-parameter string, without ``$offset``, ``$count`` or ``$start``.
    """

    def __init__(self, client: "ApiClient", entity: EntitySchema, parameters: str) -> None:
        self._client = client
        self._entity = entity
        self._parameters = parameters

    @property
    def entity(self) -> EntitySchema:
        return self._entity

    @property
    def parameters(self) -> str:
        return self._parameters

    def next(self, start: str, count: Optional[int] = None) -> "ResultSet":
        """
        Fetch the page that starts at ``start``.

        :param start: Opaque cursor taken from a previous page (``ResultSet.next_cursor``).
        :type start: str
        :param count: Optional page size.
        :type count: int | None
        :return: The page, bound to this same pager.
        :rtype: ~Wastedge.Api.models.result_set.ResultSet
        :raises InvalidArgumentError: If ``start`` is empty.
        """
        return self._client._query_next(self, start, count)

    def __repr__(self) -> str:
        return f"ApiPager(entity={self._entity.name!r}, parameters={self._parameters!r})"


class AsyncApiPager(ApiPager):
    """Async twin of :class:`ApiPager`, created by :meth:`~Wastedge.Api.client.AsyncApiClient.query`."""

    _client: "AsyncApiClient"

    async def next(self, start: str, count: Optional[int] = None) -> "ResultSet":  # type: ignore[override]
        """Fetch the page that starts at ``start``. See :meth:`ApiPager.next`."""
        return await self._client._query_next(self, start, count)

    def __repr__(self) -> str:
        return f"AsyncApiPager(entity={self._entity.name!r}, parameters={self._parameters!r})"


__all__ = ["ApiPager", "AsyncApiPager"]
