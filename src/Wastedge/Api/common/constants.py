# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Constants for the Wastedge API wire protocol.

These values are part of the wire contract with the service and must not change.
"""

# Path appended to the installation's base URL; the resource path goes in $uri
API_PATH = "scripts/cgiip.exe/WService=wsDEV/api.p"

# Reserved query parameters
PARAM_URI = "$uri"
PARAM_OUTPUT = "$output"
PARAM_OFFSET = "$offset"
PARAM_COUNT = "$count"
PARAM_START = "$start"

# Parameter string requesting metadata for the root or an entity path
META_PARAMETERS = "$meta"

# Path suffix of the report endpoint, relative to an entity
REPORT_SUFFIX = "/$report"

# Keys of a query response payload
RESULT_KEY = "result"
NEXT_KEY = "next"
