# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Subcode constants attached to :class:`~Wastedge.Api.core.errors.WastedgeError` instances."""

# HTTP subcode constants
HTTP_400 = "http_400"
HTTP_401 = "http_401"
HTTP_403 = "http_403"
HTTP_404 = "http_404"
HTTP_405 = "http_405"
HTTP_409 = "http_409"
HTTP_415 = "http_415"
HTTP_429 = "http_429"
HTTP_500 = "http_500"
HTTP_502 = "http_502"
HTTP_503 = "http_503"
HTTP_504 = "http_504"

ALL_HTTP_SUBCODES = {
    HTTP_400,
    HTTP_401,
    HTTP_403,
    HTTP_404,
    HTTP_405,
    HTTP_409,
    HTTP_415,
    HTTP_429,
    HTTP_500,
    HTTP_502,
    HTTP_503,
    HTTP_504,
}

TRANSIENT_STATUS = {429, 502, 503, 504}

# Transport subcodes
TRANSPORT_CONNECTION = "transport_connection"
TRANSPORT_TIMEOUT = "transport_timeout"
TRANSPORT_OTHER = "transport_other"

# Protocol subcodes
PROTOCOL_INVALID_JSON = "protocol_invalid_json"
PROTOCOL_UNEXPECTED_SHAPE = "protocol_unexpected_shape"
PROTOCOL_UNKNOWN_DATA_TYPE = "protocol_unknown_data_type"

# Validation subcodes
VALIDATION_MISSING_ARGUMENT = "validation_missing_argument"
VALIDATION_FILTER_VALUE = "validation_filter_value"
VALIDATION_EMPTY_LIST = "validation_empty_list"
VALIDATION_NEGATIVE_WINDOW = "validation_negative_window"
VALIDATION_EMPTY_CURSOR = "validation_empty_cursor"
VALIDATION_REPORT_LAYOUT = "validation_report_layout"

# Codec subcodes
CODEC_UNSUPPORTED_TYPE = "codec_unsupported_type"
CODEC_DATA_TYPE_MISMATCH = "codec_data_type_mismatch"
CODEC_NAIVE_DATETIME = "codec_naive_datetime"
CODEC_NON_FINITE = "codec_non_finite"
DATE_PATTERN_MISMATCH = "date_pattern_mismatch"


def _http_subcode(status: int) -> str:
    return f"http_{status}"


def _is_transient_status(status: int) -> bool:
    return status in TRANSIENT_STATUS
