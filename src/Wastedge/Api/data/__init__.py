# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Data access layer for the Wastedge API client.

This module contains the wire protocol handling: value serialization, filter
query building, schema caching, report requests and the low-level clients.
"""

__all__ = []
