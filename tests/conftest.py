# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Shared pytest fixtures and configuration for Wastedge API client tests.

This module provides common test fixtures and sample data that can be used
across all test modules.
"""

import pytest

from Wastedge.Api.core._auth import ApiCredentials
from Wastedge.Api.core.config import ApiConfig
from Wastedge.Api.models.schema import EntitySchema

from tests.unit.test_helpers import ORDERS_META


@pytest.fixture
def credentials():
    """Credentials for a fictional installation."""
    return ApiCredentials("https://erp.example.com", "ACME", "jdoe", "s3cret")


@pytest.fixture
def test_config():
    """Test configuration with safe defaults (no environment lookups)."""
    return ApiConfig(http_timeout=5, log_level="DEBUG")


@pytest.fixture
def orders_schema():
    """Entity schema parsed from the sample ``orders`` metadata."""
    return EntitySchema.from_api_response("orders", ORDERS_META)
