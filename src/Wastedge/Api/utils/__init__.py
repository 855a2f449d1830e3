# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Utilities and adapters for the Wastedge API client.

This module contains helper functions and adapters (like Pandas integration).
"""

__all__ = []
