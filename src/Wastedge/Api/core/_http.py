# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
HTTP transports for the Wastedge API client.

This module provides :class:`~Wastedge.Api.core._http._HttpClient`, a thin wrapper
around the requests library used by the blocking client, and
:class:`~Wastedge.Api.core._http._AsyncHttpClient`, its httpx-based counterpart
used by the async client. Both translate network failures into
:class:`~Wastedge.Api.core.errors.TransportError` and never retry: retry policy
belongs to the caller.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
import requests

from .errors import TransportError
from ._error_codes import TRANSPORT_CONNECTION, TRANSPORT_OTHER, TRANSPORT_TIMEOUT


class _HttpClient:
    """
    Blocking HTTP client with optional session support.

    :param timeout: Request timeout in seconds. If None, no timeout is passed and
        the requests default applies.
    :type timeout: :class:`float` | None
    :param verify: Whether TLS certificates are verified.
    :type verify: :class:`bool`
    :param session: Optional requests.Session for connection pooling. If provided,
        all requests use this session for efficient connection reuse.
    :type session: :class:`requests.Session` | None
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        verify: bool = True,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.default_timeout: Optional[float] = timeout
        self.verify = verify
        self._session = session

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        """
        Execute a single HTTP request.

        :param method: HTTP method (GET, POST, ...).
        :type method: :class:`str`
        :param url: Fully built request URL.
        :type url: :class:`str`
        :param kwargs: Additional arguments passed to ``requests.request()`` or
            ``session.request()``, including headers and data.
        :return: HTTP response object, whatever its status code.
        :rtype: :class:`requests.Response`
        :raises TransportError: On connection failure, timeout or any other
            requests-level error.
        """
        if "timeout" not in kwargs and self.default_timeout is not None:
            kwargs["timeout"] = self.default_timeout
        kwargs.setdefault("verify", self.verify)

        try:
            if self._session is not None:
                return self._session.request(method, url, **kwargs)
            return requests.request(method, url, **kwargs)
        except requests.exceptions.Timeout as e:
            raise TransportError(f"Request timed out: {e}", subcode=TRANSPORT_TIMEOUT, is_transient=True) from e
        except requests.exceptions.ConnectionError as e:
            raise TransportError(f"Connection failed: {e}", subcode=TRANSPORT_CONNECTION, is_transient=True) from e
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Request failed: {e}", subcode=TRANSPORT_OTHER) from e

    def close(self) -> None:
        """
        Close the HTTP client and release resources.

        If a session was provided, this method closes it. Safe to call multiple times.
        """
        if self._session is not None:
            self._session.close()
            self._session = None


class _AsyncHttpClient:
    """
    Async HTTP client backed by :class:`httpx.AsyncClient`.

    The underlying client is created lazily on first use unless one is supplied.

    :param timeout: Request timeout in seconds. If None, the httpx default applies.
    :type timeout: :class:`float` | None
    :param verify: Whether TLS certificates are verified.
    :type verify: :class:`bool`
    :param client: Optional pre-built ``httpx.AsyncClient`` (tests pass one with a mock transport).
    :type client: :class:`httpx.AsyncClient` | None
    """

    def __init__(
        self,
        timeout: Optional[float] = None,
        verify: bool = True,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.default_timeout: Optional[float] = timeout
        self.verify = verify
        self._client = client

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            kwargs: dict = {"verify": self.verify}
            if self.default_timeout is not None:
                kwargs["timeout"] = self.default_timeout
            self._client = httpx.AsyncClient(**kwargs)
        return self._client

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """
        Execute a single HTTP request.

        :return: HTTP response object, whatever its status code.
        :rtype: :class:`httpx.Response`
        :raises TransportError: On connection failure, timeout or any other
            httpx-level error.
        """
        try:
            return await self._get_client().request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            raise TransportError(f"Request timed out: {e}", subcode=TRANSPORT_TIMEOUT, is_transient=True) from e
        except httpx.NetworkError as e:
            raise TransportError(f"Connection failed: {e}", subcode=TRANSPORT_CONNECTION, is_transient=True) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Request failed: {e}", subcode=TRANSPORT_OTHER) from e

    async def aclose(self) -> None:
        """Close the underlying httpx client. Safe to call multiple times."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
