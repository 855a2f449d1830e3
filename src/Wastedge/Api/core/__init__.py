# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Core infrastructure components for the Wastedge API client.

This module contains the foundational components including credentials,
configuration, HTTP transports, logging and error handling.
"""

from ._auth import ApiCredentials
from .config import ApiConfig
from .errors import (
    WastedgeError,
    InvalidArgumentError,
    UnsupportedValueTypeError,
    MalformedDateError,
    ProtocolError,
    TransportError,
    HttpError,
)

__all__ = [
    "ApiCredentials",
    "ApiConfig",
    "WastedgeError",
    "InvalidArgumentError",
    "UnsupportedValueTypeError",
    "MalformedDateError",
    "ProtocolError",
    "TransportError",
    "HttpError",
]
