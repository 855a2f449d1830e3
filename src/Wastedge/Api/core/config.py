# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass(frozen=True)
class ApiConfig:
    """
    Configuration settings for Wastedge API client operations.

    :param http_timeout: Request timeout in seconds. ``None`` (default) leaves the
        transport's own default in place; the client imposes no timeout of its own.
    :type http_timeout: float or None
    :param verify_ssl: Whether TLS certificates are verified (default: True).
    :type verify_ssl: bool
    :param log_level: Level applied to the client logger (default: ``"WARNING"``).
    :type log_level: str
    :param logger_name: Name of the :mod:`logging` logger used by the client.
    :type logger_name: str
    """

    http_timeout: Optional[float] = None
    verify_ssl: bool = True

    # Logging configuration
    log_level: str = "WARNING"
    logger_name: str = "Wastedge.Api"

    @classmethod
    def from_env(cls) -> "ApiConfig":
        """
        Create a configuration instance from ``WASTEDGE_*`` environment variables.

        Recognized variables: ``WASTEDGE_HTTP_TIMEOUT``, ``WASTEDGE_VERIFY_SSL`` and
        ``WASTEDGE_LOG_LEVEL``. Unset variables fall back to the dataclass defaults.

        :return: Configuration instance.
        :rtype: ~Wastedge.Api.core.config.ApiConfig
        """
        timeout = os.environ.get("WASTEDGE_HTTP_TIMEOUT")
        verify = os.environ.get("WASTEDGE_VERIFY_SSL")
        return cls(
            http_timeout=float(timeout) if timeout else None,
            verify_ssl=verify.strip().lower() not in _FALSE_VALUES if verify else True,
            log_level=os.environ.get("WASTEDGE_LOG_LEVEL", "WARNING"),
        )
