# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

from typing import Any, Iterable, List, Optional, Sequence

import httpx
import pandas as pd
import requests

from .core._auth import ApiCredentials, _AuthManager
from .core.config import ApiConfig
from .core.errors import InvalidArgumentError
from .core._error_codes import VALIDATION_MISSING_ARGUMENT
from .data._api import _ApiClient, _AsyncApiClient
from .data._schema_cache import SchemaCache
from .models.filter import Filter, OutputFormat
from .models.pager import ApiPager, AsyncApiPager
from .models.report import ReportField
from .models.result_set import ResultSet
from .models.schema import EntityForeign, EntityMember, EntitySchema, Schema
from .utils._pandas import result_sets_to_dataframe


def _require_entity(entity: Any) -> EntitySchema:
    if not isinstance(entity, EntitySchema):
        raise InvalidArgumentError("entity must be an EntitySchema.", subcode=VALIDATION_MISSING_ARGUMENT)
    return entity


def _require_foreign(member: Any) -> EntityForeign:
    if not isinstance(member, EntityForeign):
        raise InvalidArgumentError(
            "member must be an EntityForeign to resolve its linked entity.", subcode=VALIDATION_MISSING_ARGUMENT
        )
    return member


def _require_pager(pager: Any, cls: type) -> None:
    if not isinstance(pager, cls):
        raise InvalidArgumentError(f"pager must be an {cls.__name__}.", subcode=VALIDATION_MISSING_ARGUMENT)


class ApiClient:
    """
    Blocking client for the Wastedge ERP REST API.

    The client builds filter queries, caches schema metadata for its own
    lifetime and hands out pagers that continue a query page by page. It
    delegates HTTP work to an internal
    :class:`~Wastedge.Api.data._api._ApiClient` created on first use.

    **Context Manager Support (Recommended)**:
        Using the client as a context manager reuses one HTTP connection pool
        and closes it on exit::

            with ApiClient(credentials) as client:
                entity = client.get_entity_schema("customer")
                rs = client.query(entity, [Filter(entity.member("status"), FilterType.EQUAL, "open")])

    **Without Context Manager**:
        Call ``close()`` when done::

            client = ApiClient(credentials)
            try:
                schema = client.get_schema()
            finally:
                client.close()

    Schema metadata is fetched once per name and never refreshed. Construct a new
    client to pick up schema changes on the server.

    :param credentials: Connection credentials.
    :type credentials: ~Wastedge.Api.core._auth.ApiCredentials
    :param config: Optional configuration for timeouts, TLS and logging. If not
        provided, defaults are loaded from :meth:`~Wastedge.Api.core.config.ApiConfig.from_env`.
    :type config: ~Wastedge.Api.core.config.ApiConfig or None

    :raises InvalidArgumentError: If ``credentials`` is missing.
    """

    def __init__(self, credentials: ApiCredentials, config: Optional[ApiConfig] = None) -> None:
        self.auth = _AuthManager(credentials)
        self._config = config or ApiConfig.from_env()
        self._cache = SchemaCache()
        self._api: Optional[_ApiClient] = None
        self._session: Optional[requests.Session] = None
        self._owns_session: bool = False

    @property
    def credentials(self) -> ApiCredentials:
        return self.auth.credentials

    def __enter__(self) -> "ApiClient":
        """
        Enter the context manager.

        Creates an HTTP session for connection pooling. All operations within
        the context reuse this session.
        """
        if self._session is None:
            self._session = requests.Session()
            self._owns_session = True
            if self._api is not None:
                self._api._http._session = self._session
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """
        Close the client and release its HTTP resources.

        Safe to call multiple times. The schema cache survives, so a closed client
        that is used again keeps serving cached metadata.
        """
        if self._api is not None:
            self._api.close()
            self._api = None
        if self._session is not None and self._owns_session:
            self._session.close()
            self._session = None
            self._owns_session = False

    def _get_api(self) -> _ApiClient:
        """
        Get or create the internal low-level client.

        :return: The lazily-initialized low-level client used to perform HTTP requests.
        :rtype: ~Wastedge.Api.data._api._ApiClient
        """
        if self._api is None:
            self._api = _ApiClient(self.auth, self._config, self._cache, session=self._session)
        return self._api

    # ----------------------------- Schema -------------------------------
    def get_schema(self) -> Schema:
        """
        Return the service-wide schema, fetching it on the first call only.

        :rtype: ~Wastedge.Api.models.schema.Schema
        :raises TransportError: If the metadata request fails.
        :raises ProtocolError: If the metadata is not a JSON object.
        """
        return self._get_api()._get_schema()

    def get_entity_schema(self, name: str) -> EntitySchema:
        """
        Return the metadata of entity ``name``, fetching it on the first call for that name only.

        Repeated calls return the same object.

        :param name: Entity name, e.g. ``"customer"``.
        :type name: str
        :rtype: ~Wastedge.Api.models.schema.EntitySchema
        :raises InvalidArgumentError: If ``name`` is empty.
        :raises TransportError: If the metadata request fails.
        :raises ProtocolError: If the metadata is malformed; nothing is cached then.
        """
        return self._get_api()._get_entity_schema(name)

    def get_link_schema(self, member: EntityMember) -> EntitySchema:
        """
        Resolve the entity a foreign member points to, through the same cache.

        :param member: A foreign member.
        :type member: ~Wastedge.Api.models.schema.EntityForeign
        :raises InvalidArgumentError: If ``member`` is not an ``EntityForeign``.
        """
        return self.get_entity_schema(_require_foreign(member).link_table)

    # ----------------------------- Query --------------------------------
    def query(
        self,
        entity: EntitySchema,
        filters: Optional[Iterable[Filter]] = None,
        offset: Optional[int] = None,
        count: Optional[int] = None,
        output_format: OutputFormat = OutputFormat.VERBOSE,
    ) -> ResultSet:
        """
        Query rows of an entity.

        :param entity: Entity to query.
        :type entity: ~Wastedge.Api.models.schema.EntitySchema
        :param filters: Filter terms, combined with AND by the service.
        :type filters: Iterable[~Wastedge.Api.models.filter.Filter] | None
        :param offset: Rows to skip.
        :type offset: int | None
        :param count: Page size.
        :type count: int | None
        :param output_format: Field naming of the output (default verbose).
        :type output_format: ~Wastedge.Api.models.filter.OutputFormat
        :return: The first page, bound to a pager for the following pages.
        :rtype: ~Wastedge.Api.models.result_set.ResultSet

        Example::

            rs = client.query(entity, filters, count=100)
            if rs.next_cursor:
                rs = rs.pager.next(rs.next_cursor, 100)
        """
        entity = _require_entity(entity)
        payload, base_parameters = self._get_api()._query(entity.name, filters, offset, count, output_format)
        return ResultSet(entity, payload, ApiPager(self, entity, base_parameters))

    def _query_next(self, pager: ApiPager, start: str, count: Optional[int]) -> ResultSet:
        _require_pager(pager, ApiPager)
        payload = self._get_api()._query_next(pager.entity.name, pager.parameters, start, count)
        return ResultSet(pager.entity, payload, pager)

    def query_dataframe(
        self,
        entity: EntitySchema,
        filters: Optional[Iterable[Filter]] = None,
        count: Optional[int] = None,
        output_format: OutputFormat = OutputFormat.VERBOSE,
        parse_dates: bool = True,
        max_pages: Optional[int] = None,
    ) -> pd.DataFrame:
        """
        Query an entity and collect the rows of every page into a DataFrame.

        Pages are followed through ``ResultSet.next_cursor`` until the service
        sends no cursor or ``max_pages`` pages have been fetched.

        :param count: Page size for every request.
        :param parse_dates: Decode date columns (see :func:`~Wastedge.Api.utils._pandas.rows_to_dataframe`).
        :param max_pages: Upper bound on the number of requests; None for no bound.
        :rtype: pandas.DataFrame

        Example::

            df = client.query_dataframe(entity, filters, count=500)
            print(df.groupby("status")["amount"].sum())
        """
        rs = self.query(entity, filters, None, count, output_format)
        pages: List[ResultSet] = [rs]
        while rs.next_cursor is not None and (max_pages is None or len(pages) < max_pages):
            rs = rs.pager.next(rs.next_cursor, count)
            pages.append(rs)
        return result_sets_to_dataframe(pages, parse_dates=parse_dates)

    # ------------------------- Raw and reports --------------------------
    def execute(self, path: str, parameters: Optional[str] = None, method: str = "GET", body: Any = None) -> Any:
        """
        Send a request and decode the JSON response.

        :param path: Resource path passed in ``$uri``.
        :param parameters: Already encoded parameter string, appended after ``$uri``.
        :param method: HTTP method.
        :param body: JSON-serializable object, or a pre-serialized ``str``/``bytes``.
        :return: Decoded JSON, or None for an empty body.
        """
        return self._get_api()._execute_json(path, parameters, method, body)

    def execute_raw(
        self, path: str, parameters: Optional[str] = None, method: str = "GET", body: Any = None
    ) -> str:
        """Send a request and return the response text verbatim. See :meth:`execute`."""
        return self._get_api()._execute_raw(path, parameters, method, body)

    def report(
        self,
        entity: EntitySchema,
        filters: Optional[Iterable[Filter]],
        rows: Sequence[ReportField],
        columns: Sequence[ReportField],
        values: Sequence[ReportField] = (),
    ) -> Any:
        """
        Run an aggregate report over an entity.

        :param entity: Entity to report on.
        :param filters: Filter terms restricting the aggregated rows.
        :param rows: Row grouping fields (at least one).
        :param columns: Column grouping fields (at least one).
        :param values: Aggregated fields with their transforms.
        :return: Decoded JSON report.
        :raises InvalidArgumentError: If the layout has no rows or no columns.
        """
        entity = _require_entity(entity)
        return self._get_api()._report(entity.name, filters, rows, columns, values)


class AsyncApiClient:
    """
    Async client for the Wastedge ERP REST API.

    Mirrors :class:`ApiClient` method for method; every network operation is a
    coroutine. Cancellation is left to the caller (e.g. ``asyncio.wait_for``).

    Example::

        async with AsyncApiClient(credentials) as client:
            entity = await client.get_entity_schema("customer")
            rs = await client.query(entity, count=50)
            while rs.next_cursor:
                rs = await rs.pager.next(rs.next_cursor, 50)

    :param credentials: Connection credentials.
    :type credentials: ~Wastedge.Api.core._auth.ApiCredentials
    :param config: Optional configuration.
    :type config: ~Wastedge.Api.core.config.ApiConfig or None
    :param http_client: Optional ``httpx.AsyncClient`` to send requests with. The
        client does not close an ``http_client`` it was given.
    :type http_client: httpx.AsyncClient or None
    """

    def __init__(
        self,
        credentials: ApiCredentials,
        config: Optional[ApiConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.auth = _AuthManager(credentials)
        self._config = config or ApiConfig.from_env()
        self._cache = SchemaCache()
        self._api: Optional[_AsyncApiClient] = None
        self._http_client = http_client

    @property
    def credentials(self) -> ApiCredentials:
        return self.auth.credentials

    async def __aenter__(self) -> "AsyncApiClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the client's own HTTP resources. Safe to call multiple times."""
        if self._api is not None:
            if self._http_client is None:
                await self._api.aclose()
            self._api = None

    def _get_api(self) -> _AsyncApiClient:
        if self._api is None:
            self._api = _AsyncApiClient(self.auth, self._config, self._cache, http_client=self._http_client)
        return self._api

    async def get_schema(self) -> Schema:
        """See :meth:`ApiClient.get_schema`."""
        return await self._get_api()._get_schema()

    async def get_entity_schema(self, name: str) -> EntitySchema:
        """See :meth:`ApiClient.get_entity_schema`."""
        return await self._get_api()._get_entity_schema(name)

    async def get_link_schema(self, member: EntityMember) -> EntitySchema:
        """See :meth:`ApiClient.get_link_schema`."""
        return await self.get_entity_schema(_require_foreign(member).link_table)

    async def query(
        self,
        entity: EntitySchema,
        filters: Optional[Iterable[Filter]] = None,
        offset: Optional[int] = None,
        count: Optional[int] = None,
        output_format: OutputFormat = OutputFormat.VERBOSE,
    ) -> ResultSet:
        """See :meth:`ApiClient.query`. The result's pager is an :class:`AsyncApiPager`."""
        entity = _require_entity(entity)
        payload, base_parameters = await self._get_api()._query(entity.name, filters, offset, count, output_format)
        return ResultSet(entity, payload, AsyncApiPager(self, entity, base_parameters))

    async def _query_next(self, pager: AsyncApiPager, start: str, count: Optional[int]) -> ResultSet:
        _require_pager(pager, AsyncApiPager)
        payload = await self._get_api()._query_next(pager.entity.name, pager.parameters, start, count)
        return ResultSet(pager.entity, payload, pager)

    async def query_dataframe(
        self,
        entity: EntitySchema,
        filters: Optional[Iterable[Filter]] = None,
        count: Optional[int] = None,
        output_format: OutputFormat = OutputFormat.VERBOSE,
        parse_dates: bool = True,
        max_pages: Optional[int] = None,
    ) -> pd.DataFrame:
        """See :meth:`ApiClient.query_dataframe`."""
        rs = await self.query(entity, filters, None, count, output_format)
        pages: List[ResultSet] = [rs]
        while rs.next_cursor is not None and (max_pages is None or len(pages) < max_pages):
            rs = await rs.pager.next(rs.next_cursor, count)
            pages.append(rs)
        return result_sets_to_dataframe(pages, parse_dates=parse_dates)

    async def execute(self, path: str, parameters: Optional[str] = None, method: str = "GET", body: Any = None) -> Any:
        """See :meth:`ApiClient.execute`."""
        return await self._get_api()._execute_json(path, parameters, method, body)

    async def execute_raw(
        self, path: str, parameters: Optional[str] = None, method: str = "GET", body: Any = None
    ) -> str:
        """See :meth:`ApiClient.execute_raw`."""
        return await self._get_api()._execute_raw(path, parameters, method, body)

    async def report(
        self,
        entity: EntitySchema,
        filters: Optional[Iterable[Filter]],
        rows: Sequence[ReportField],
        columns: Sequence[ReportField],
        values: Sequence[ReportField] = (),
    ) -> Any:
        """See :meth:`ApiClient.report`."""
        entity = _require_entity(entity)
        return await self._get_api()._report(entity.name, filters, rows, columns, values)
