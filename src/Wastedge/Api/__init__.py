# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Python client for the Wastedge ERP REST API.

Import the clients from :mod:`Wastedge.Api.client` and the models from the
modules under :mod:`Wastedge.Api.models`.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
