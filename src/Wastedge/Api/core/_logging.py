# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Request logging for the Wastedge API client.

Wraps a standard :mod:`logging` logger and records one line per request and
one per response. Credentials and the ``Authorization`` header never reach
the log.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Generator, Optional

from .config import ApiConfig


@dataclass
class RequestContext:
    """Per-request state shared between the request and response log lines."""

    method: str
    path: str
    start_time: float = field(default_factory=time.perf_counter)


class _RequestLogger:
    """
    Logs requests and responses for one client.

    :param config: Client configuration; ``logger_name`` and ``log_level`` are used.
    :type config: ~Wastedge.Api.core.config.ApiConfig
    """

    def __init__(self, config: Optional[ApiConfig] = None) -> None:
        config = config or ApiConfig()
        self._logger = logging.getLogger(config.logger_name)
        self._logger.setLevel(getattr(logging, config.log_level.upper(), logging.WARNING))

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    @contextmanager
    def trace_request(self, method: str, path: str) -> Generator[RequestContext, None, None]:
        """Create a logged request context.

        Usage:
            with log.trace_request("GET", "customer") as ctx:
                response = self._http._request(...)
                log.record_response(ctx, response.status_code)
        """
        ctx = RequestContext(method=method.upper(), path=path)
        self._logger.debug("%s $uri=%s", ctx.method, ctx.path)
        try:
            yield ctx
        except Exception as e:
            self._logger.warning("%s $uri=%s failed: %s", ctx.method, ctx.path, e)
            raise

    def record_response(self, ctx: RequestContext, status_code: int) -> None:
        duration_ms = (time.perf_counter() - ctx.start_time) * 1000
        level = logging.WARNING if status_code >= 400 else logging.DEBUG
        self._logger.log(level, "%s $uri=%s %d %.1fms", ctx.method, ctx.path, status_code, duration_ms)
