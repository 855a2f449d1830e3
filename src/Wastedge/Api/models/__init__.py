# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Data models and type definitions for the Wastedge API client.

This module provides strongly-typed dataclasses for API entities:

- :class:`~Wastedge.Api.models.schema.EntitySchema`: Entity metadata and its members.
- :class:`~Wastedge.Api.models.filter.Filter`: One filter term of a query.
- :class:`~Wastedge.Api.models.result_set.ResultSet`: One page of query results.
- :class:`~Wastedge.Api.models.pager.ApiPager`: Continuation of a query.
- :class:`~Wastedge.Api.models.report.ReportField`: Report layout field.

Note:
    This ``__init__.py`` does NOT import/export models. Import directly from the
    specific module files.
"""

__all__ = []
