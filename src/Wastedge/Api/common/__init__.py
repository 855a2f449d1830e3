# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Common utilities and constants for the Wastedge API client."""

__all__ = []
