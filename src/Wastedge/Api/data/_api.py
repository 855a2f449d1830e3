# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Low-level Wastedge API clients.

:class:`_ApiClient` (blocking, requests) and :class:`_AsyncApiClient` (async,
httpx) share URL building, authentication, body encoding, status checking and
JSON decoding through :class:`_ApiRequestMixin`, so both forms send identical
requests and issue the same number of calls.
"""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

from ..common.constants import API_PATH, META_PARAMETERS, PARAM_URI, REPORT_SUFFIX
from ..core._auth import _AuthManager
from ..core.config import ApiConfig
from ..core.errors import HttpError, InvalidArgumentError, ProtocolError
from ..core._error_codes import (
    PROTOCOL_INVALID_JSON,
    PROTOCOL_UNEXPECTED_SHAPE,
    VALIDATION_MISSING_ARGUMENT,
    _http_subcode,
    _is_transient_status,
)
from ..core._http import _AsyncHttpClient, _HttpClient
from ..core._logging import _RequestLogger
from ..models.filter import Filter, OutputFormat
from ..models.report import ReportField
from ..models.schema import EntitySchema, Schema
from ._codec import serialize
from ._filters import build_next_parameters, build_query_parameters, escape_data_string
from ._report import build_report_request
from ._schema_cache import SchemaCache

_BODY_EXCERPT = 500


def _json_default(value: Any) -> Any:
    if isinstance(value, Decimal):
        return serialize(value, None)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _decode_json(text: str) -> Any:
    """
    Decode a response body.

    An empty body yields None. Date-like strings stay strings; non-integral
    numbers become :class:`decimal.Decimal`.

    :raises ProtocolError: If a non-empty body is not valid JSON.
    """
    if text == "":
        return None
    try:
        return json.loads(text, parse_float=Decimal)
    except ValueError as e:
        raise ProtocolError(
            f"Response is not valid JSON: {e}",
            subcode=PROTOCOL_INVALID_JSON,
            details={"body_excerpt": text[:_BODY_EXCERPT]},
        ) from e


def _expect_object(payload: Any, context: str, *, allow_empty: bool = False) -> Optional[Dict[str, Any]]:
    if payload is None and allow_empty:
        return None
    if not isinstance(payload, dict):
        raise ProtocolError(
            f"Expected a JSON object for {context}, got {type(payload).__name__}.",
            subcode=PROTOCOL_UNEXPECTED_SHAPE,
        )
    return payload


def _require_name(name: Any, what: str) -> str:
    if not isinstance(name, str) or not name:
        raise InvalidArgumentError(f"{what} is required.", subcode=VALIDATION_MISSING_ARGUMENT)
    return name


class _ApiRequestMixin:
    """
    Request building and response checking shared by both low-level clients.

    Depends on ``self.auth`` (an ``_AuthManager``), ``self._cache`` and ``self._log``.
    """

    auth: _AuthManager
    _cache: SchemaCache
    _log: _RequestLogger

    def _init_common(self, auth: _AuthManager, config: Optional[ApiConfig], cache: Optional[SchemaCache]) -> None:
        self.auth = auth
        self.config = config or ApiConfig.from_env()
        self._cache = cache if cache is not None else SchemaCache()
        self._log = _RequestLogger(self.config)
        base_url = auth.credentials.url
        self.api = base_url + ("" if base_url.endswith("/") else "/") + API_PATH

    def _build_url(self, path: str, parameters: Optional[str]) -> str:
        url = f"{self.api}?{PARAM_URI}={escape_data_string(path or '')}"
        if parameters:
            url += "&" + parameters
        return url

    def _headers(self, has_body: bool) -> Dict[str, str]:
        headers = {
            "Authorization": self.auth._authorization_header(),
            "Accept": "application/json",
        }
        if has_body:
            headers["Content-Type"] = "application/json"
        return headers

    @staticmethod
    def _encode_body(body: Any) -> Optional[bytes]:
        if body is None:
            return None
        if isinstance(body, bytes):
            return body
        if isinstance(body, str):
            return body.encode("utf-8")
        try:
            return json.dumps(body, default=_json_default).encode("utf-8")
        except TypeError as e:
            raise InvalidArgumentError(f"Request body is not JSON serializable: {e}") from e

    def _raise_for_status(self, method: str, path: str, url: str, response: Any) -> None:
        status = response.status_code
        if 200 <= status < 300:
            return
        text = response.text or ""
        retry_after = None
        header = response.headers.get("Retry-After") if response.headers else None
        if header is not None:
            try:
                retry_after = int(header)
            except (TypeError, ValueError):
                retry_after = None
        excerpt = text[:_BODY_EXCERPT] or None
        message = f"{method.upper()} $uri={path} failed with HTTP {status}"
        if excerpt:
            message += f": {excerpt}"
        raise HttpError(
            message,
            status_code=status,
            is_transient=_is_transient_status(status),
            subcode=_http_subcode(status),
            url=url,
            body_excerpt=excerpt,
            retry_after=retry_after,
        )

    def _cached_schema(self) -> Optional[Schema]:
        cached = self._cache.schema()
        if cached is not None:
            self._log.logger.debug("schema cache hit")
        return cached

    def _store_schema(self, payload: Any) -> Schema:
        schema = Schema.from_api_response(_expect_object(payload, "schema metadata"))
        return self._cache.store_schema(schema)

    def _cached_entity(self, name: str) -> Optional[EntitySchema]:
        cached = self._cache.entity(name)
        self._log.logger.debug("entity schema cache %s for %s", "hit" if cached is not None else "miss", name)
        return cached

    def _store_entity(self, name: str, payload: Any) -> EntitySchema:
        schema = EntitySchema.from_api_response(name, _expect_object(payload, f"'{name}' metadata"))
        return self._cache.store_entity(schema)


class _ApiClient(_ApiRequestMixin):
    """
    Blocking Wastedge API client.

    :param auth: Authentication manager holding the credentials.
    :type auth: ~Wastedge.Api.core._auth._AuthManager
    :param config: Client configuration; defaults to :meth:`ApiConfig.from_env`.
    :type config: ~Wastedge.Api.core.config.ApiConfig | None
    :param cache: Schema cache; owned by the high-level client so it outlives this object.
    :type cache: ~Wastedge.Api.data._schema_cache.SchemaCache | None
    :param session: Optional requests session for connection reuse.
    """

    def __init__(
        self,
        auth: _AuthManager,
        config: Optional[ApiConfig] = None,
        cache: Optional[SchemaCache] = None,
        session: Any = None,
    ) -> None:
        self._init_common(auth, config, cache)
        self._http = _HttpClient(
            timeout=self.config.http_timeout,
            verify=self.config.verify_ssl,
            session=session,
        )

    def _request(self, method: str, path: str, parameters: Optional[str] = None, body: Any = None) -> str:
        """Send one request and return the response text; non-2xx raises :class:`HttpError`."""
        url = self._build_url(path, parameters)
        data = self._encode_body(body)
        with self._log.trace_request(method, path) as ctx:
            r = self._http._request(method.upper(), url, headers=self._headers(data is not None), data=data)
            self._log.record_response(ctx, r.status_code)
            self._raise_for_status(method, path, url, r)
            return r.text or ""

    def _execute_json(self, path: str, parameters: Optional[str] = None, method: str = "GET", body: Any = None) -> Any:
        return _decode_json(self._request(method, path, parameters, body))

    def _execute_raw(self, path: str, parameters: Optional[str] = None, method: str = "GET", body: Any = None) -> str:
        return self._request(method, path, parameters, body)

    def _get_schema(self) -> Schema:
        cached = self._cached_schema()
        if cached is not None:
            return cached
        return self._store_schema(self._execute_json("", META_PARAMETERS))

    def _get_entity_schema(self, name: str) -> EntitySchema:
        name = _require_name(name, "name")
        cached = self._cached_entity(name)
        if cached is not None:
            return cached
        return self._store_entity(name, self._execute_json(name, META_PARAMETERS))

    def _query(
        self,
        entity: str,
        filters: Optional[Iterable[Filter]],
        offset: Optional[int],
        count: Optional[int],
        output_format: OutputFormat,
    ) -> Tuple[Optional[Dict[str, Any]], str]:
        """Run the first page of a query; returns the payload and the base parameters."""
        params = build_query_parameters(filters, offset, count, output_format)
        payload = self._execute_json(entity, params.parameters)
        return _expect_object(payload, f"'{entity}' query", allow_empty=True), params.base_parameters

    def _query_next(
        self, entity: str, base_parameters: str, start: str, count: Optional[int]
    ) -> Optional[Dict[str, Any]]:
        parameters = build_next_parameters(base_parameters, start, count)
        payload = self._execute_json(entity, parameters)
        return _expect_object(payload, f"'{entity}' query", allow_empty=True)

    def _report(
        self,
        entity: str,
        filters: Optional[Iterable[Filter]],
        rows: Sequence[ReportField],
        columns: Sequence[ReportField],
        values: Sequence[ReportField],
    ) -> Any:
        body = build_report_request(filters, rows, columns, values)
        return self._execute_json(entity + REPORT_SUFFIX, None, "POST", body)

    def close(self) -> None:
        self._http.close()


class _AsyncApiClient(_ApiRequestMixin):
    """
    Async Wastedge API client; behaviourally identical to :class:`_ApiClient`.

    :param http_client: Optional ``httpx.AsyncClient`` to send requests with.
    """

    def __init__(
        self,
        auth: _AuthManager,
        config: Optional[ApiConfig] = None,
        cache: Optional[SchemaCache] = None,
        http_client: Any = None,
    ) -> None:
        self._init_common(auth, config, cache)
        self._http = _AsyncHttpClient(
            timeout=self.config.http_timeout,
            verify=self.config.verify_ssl,
            client=http_client,
        )

    async def _request(self, method: str, path: str, parameters: Optional[str] = None, body: Any = None) -> str:
        url = self._build_url(path, parameters)
        data = self._encode_body(body)
        with self._log.trace_request(method, path) as ctx:
            r = await self._http._request(method.upper(), url, headers=self._headers(data is not None), content=data)
            self._log.record_response(ctx, r.status_code)
            self._raise_for_status(method, path, url, r)
            return r.text or ""

    async def _execute_json(
        self, path: str, parameters: Optional[str] = None, method: str = "GET", body: Any = None
    ) -> Any:
        return _decode_json(await self._request(method, path, parameters, body))

    async def _execute_raw(
        self, path: str, parameters: Optional[str] = None, method: str = "GET", body: Any = None
    ) -> str:
        return await self._request(method, path, parameters, body)

    async def _get_schema(self) -> Schema:
        cached = self._cached_schema()
        if cached is not None:
            return cached
        return self._store_schema(await self._execute_json("", META_PARAMETERS))

    async def _get_entity_schema(self, name: str) -> EntitySchema:
        name = _require_name(name, "name")
        cached = self._cached_entity(name)
        if cached is not None:
            return cached
        return self._store_entity(name, await self._execute_json(name, META_PARAMETERS))

    async def _query(
        self,
        entity: str,
        filters: Optional[Iterable[Filter]],
        offset: Optional[int],
        count: Optional[int],
        output_format: OutputFormat,
    ) -> Tuple[Optional[Dict[str, Any]], str]:
        params = build_query_parameters(filters, offset, count, output_format)
        payload = await self._execute_json(entity, params.parameters)
        return _expect_object(payload, f"'{entity}' query", allow_empty=True), params.base_parameters

    async def _query_next(
        self, entity: str, base_parameters: str, start: str, count: Optional[int]
    ) -> Optional[Dict[str, Any]]:
        parameters = build_next_parameters(base_parameters, start, count)
        payload = await self._execute_json(entity, parameters)
        return _expect_object(payload, f"'{entity}' query", allow_empty=True)

    async def _report(
        self,
        entity: str,
        filters: Optional[Iterable[Filter]],
        rows: Sequence[ReportField],
        columns: Sequence[ReportField],
        values: Sequence[ReportField],
    ) -> Any:
        body = build_report_request(filters, rows, columns, values)
        return await self._execute_json(entity + REPORT_SUFFIX, None, "POST", body)

    async def aclose(self) -> None:
        await self._http.aclose()
