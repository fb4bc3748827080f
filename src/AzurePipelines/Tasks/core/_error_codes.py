# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

# HTTP subcode constants
HTTP_400 = "http_400"
HTTP_401 = "http_401"
HTTP_403 = "http_403"
HTTP_404 = "http_404"
HTTP_409 = "http_409"
HTTP_429 = "http_429"
HTTP_500 = "http_500"
HTTP_502 = "http_502"
HTTP_503 = "http_503"
HTTP_504 = "http_504"

_HTTP_STATUS_TO_SUBCODE = {
    400: HTTP_400,
    401: HTTP_401,
    403: HTTP_403,
    404: HTTP_404,
    409: HTTP_409,
    429: HTTP_429,
    500: HTTP_500,
    502: HTTP_502,
    503: HTTP_503,
    504: HTTP_504,
}

TRANSIENT_STATUS = {429, 502, 503, 504}

# Validation subcodes
VALIDATION_RESOURCE_GROUP_NULL = "validation_resource_group_null"
VALIDATION_RESOURCE_GROUP_TOO_LONG = "validation_resource_group_too_long"
VALIDATION_RESOURCE_GROUP_TOO_SHORT = "validation_resource_group_too_short"
VALIDATION_RESOURCE_GROUP_PATTERN = "validation_resource_group_pattern"
VALIDATION_DEPLOYMENT_NAME_NULL = "validation_deployment_name_null"
VALIDATION_PARAMETERS_NULL = "validation_parameters_null"
VALIDATION_PARAMETERS_INVALID = "validation_parameters_invalid"

# Long running operation subcodes
OPERATION_FAILED = "operation_failed"
OPERATION_CANCELED = "operation_canceled"
OPERATION_TIMED_OUT = "operation_timed_out"

# Transport subcodes
TRANSPORT_CONNECTION = "transport_connection"
TRANSPORT_TIMEOUT = "transport_timeout"
TRANSPORT_OTHER = "transport_other"


def _http_subcode(status: int) -> str:
    return _HTTP_STATUS_TO_SUBCODE.get(status, f"http_{status}")


def _is_transient_status(status: int) -> bool:
    return status in TRANSIENT_STATUS
