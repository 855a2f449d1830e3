# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Structured error types for the Wastedge API client.

Every error raised by the client derives from :class:`WastedgeError` and carries
a stable ``code`` plus an optional ``subcode`` (see
:mod:`~Wastedge.Api.core._error_codes`) so callers can branch on the failure
kind without parsing messages.
"""

from __future__ import annotations

import datetime as _dt
from typing import Any, Dict, Optional


class WastedgeError(Exception):
    """Base structured error for the Wastedge API client."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        subcode: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        source: Optional[str] = None,
        is_transient: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.subcode = subcode
        self.status_code = status_code
        self.details = details or {}
        self.source = source or "client"
        self.is_transient = is_transient
        self.timestamp = _dt.datetime.now(_dt.timezone.utc).isoformat()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code,
            "subcode": self.subcode,
            "status_code": self.status_code,
            "details": self.details,
            "source": self.source,
            "is_transient": self.is_transient,
            "timestamp": self.timestamp,
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"{self.__class__.__name__}(code={self.code!r}, subcode={self.subcode!r}, message={self.message!r})"


class InvalidArgumentError(WastedgeError):
    """A required argument is missing or has an invalid value."""

    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="invalid_argument", subcode=subcode, details=details, source="client")


class UnsupportedValueTypeError(WastedgeError):
    """A filter value cannot be serialized for the declared data type."""

    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="unsupported_value_type", subcode=subcode, details=details, source="client")


class MalformedDateError(WastedgeError):
    """A date string does not exactly match the expected wire pattern."""

    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="malformed_date", subcode=subcode, details=details, source="client")


class ProtocolError(WastedgeError):
    """The service answered with a body that is not valid JSON or has an unexpected shape."""

    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="protocol_error", subcode=subcode, details=details, source="server")


class TransportError(WastedgeError):
    """The request could not be completed (connection failure, timeout, non-2xx status)."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "transport_error",
        subcode: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        source: str = "client",
        is_transient: bool = False,
    ) -> None:
        super().__init__(
            message,
            code=code,
            subcode=subcode,
            status_code=status_code,
            details=details,
            source=source,
            is_transient=is_transient,
        )


class HttpError(TransportError):
    """The service answered with a non-2xx status code."""

    def __init__(
        self,
        message: str,
        status_code: int,
        is_transient: bool = False,
        subcode: Optional[str] = None,
        url: Optional[str] = None,
        body_excerpt: Optional[str] = None,
        retry_after: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        d = details or {}
        if url is not None:
            d["url"] = url
        if body_excerpt is not None:
            d["body_excerpt"] = body_excerpt
        if retry_after is not None:
            d["retry_after"] = retry_after
        super().__init__(
            message,
            code="http_error",
            subcode=subcode,
            status_code=status_code,
            details=d,
            source="server",
            is_transient=is_transient,
        )


__all__ = [
    "WastedgeError",
    "InvalidArgumentError",
    "UnsupportedValueTypeError",
    "MalformedDateError",
    "ProtocolError",
    "TransportError",
    "HttpError",
]
