# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Shared test utilities for unit tests.

Provides fake HTTP transports for the blocking and async clients and sample
metadata payloads to reduce duplication across test files.
"""

import json
import types
from urllib.parse import unquote

import httpx

from Wastedge.Api.client import ApiClient, AsyncApiClient
from Wastedge.Api.core._auth import ApiCredentials
from Wastedge.Api.core.config import ApiConfig

BASE_URL = "https://erp.example.com"
API_URL = BASE_URL + "/scripts/cgiip.exe/WService=wsDEV/api.p"

SCHEMA_META = {"entities": ["orders", "customer"]}

ORDERS_META = {
    "members": [
        {"name": "id", "type": "id", "data_type": "long"},
        {"name": "status", "type": "field", "data_type": "string", "comments": "Order status"},
        {"name": "amount", "type": "field", "data_type": "decimal"},
        {"name": "lines", "type": "field", "data_type": "int"},
        {"name": "order_date", "type": "field", "data_type": "date"},
        {"name": "created", "type": "field", "data_type": "datetime"},
        {"name": "shipped", "type": "field", "data_type": "datetime-tz"},
        {"name": "paid", "type": "field", "data_type": "bool"},
        {"name": "total", "type": "calculated", "data_type": "decimal"},
        {"name": "customer", "type": "foreign", "data_type": "long", "link_table": "customer"},
    ]
}

CUSTOMER_META = {
    "members": [
        {"name": "id", "type": "id", "data_type": "long"},
        {"name": "name", "type": "field", "data_type": "string"},
        {"name": "region", "type": "field", "data_type": "string"},
    ]
}


def make_credentials():
    return ApiCredentials(BASE_URL, "ACME", "jdoe", "s3cret")


def make_config():
    return ApiConfig(http_timeout=5)


def body_text(body):
    """Render a fake response body: dicts/lists as JSON, None as empty."""
    if body is None:
        return ""
    if isinstance(body, (dict, list)):
        return json.dumps(body)
    return str(body)


def query_of(url):
    """Return the part of ``url`` after ``api.p?``."""
    return url.split("?", 1)[1]


def uri_of(url):
    """Return the decoded ``$uri`` value of a request URL."""
    first = query_of(url).split("&", 1)[0]
    assert first.startswith("$uri=")
    return unquote(first[len("$uri="):])


class DummyHTTPClient:
    """Fake blocking transport returning pre-configured responses.

    Args:
        responses: List of (status_code, headers, body) tuples to return in sequence.

    Attributes:
        calls: List of (method, url, kwargs) tuples recording all requests made.
    """

    def __init__(self, responses):
        self._responses = list(responses)
        self.calls = []

    def _request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if not self._responses:
            raise AssertionError("No more dummy responses configured")
        status, headers, body = self._responses.pop(0)
        return types.SimpleNamespace(status_code=status, headers=headers, text=body_text(body))

    def close(self):
        pass


def make_client(responses, config=None):
    """ApiClient whose low-level transport is a DummyHTTPClient."""
    client = ApiClient(make_credentials(), config or make_config())
    http = DummyHTTPClient(responses)
    client._get_api()._http = http
    return client, http


class MockTransportRecorder:
    """httpx mock transport handler returning pre-configured responses and recording requests."""

    def __init__(self, responses):
        self._responses = list(responses)
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        if not self._responses:
            raise AssertionError("No more dummy responses configured")
        status, headers, body = self._responses.pop(0)
        return httpx.Response(status, headers=headers, text=body_text(body))

    @property
    def urls(self):
        return [str(r.url) for r in self.requests]


def make_async_client(responses, config=None):
    """AsyncApiClient sending through an httpx.MockTransport."""
    recorder = MockTransportRecorder(responses)
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
    client = AsyncApiClient(make_credentials(), config or make_config(), http_client=http_client)
    return client, recorder
