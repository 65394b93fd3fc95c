# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

# Authentication codes
INVALID_API_KEY = "INVALID_API_KEY"
INVALID_API_KEY_FORMAT = "INVALID_API_KEY_FORMAT"

# Transport codes
REQUEST_TIMEOUT = "REQUEST_TIMEOUT"
NETWORK_ERROR = "NETWORK_ERROR"
INTERCEPTOR_ERROR = "INTERCEPTOR_ERROR"
HTTP_ERROR = "HTTP_ERROR"
VALIDATION_ERROR = "VALIDATION_ERROR"

# HTTP subcode constants
HTTP_400 = "http_400"
HTTP_401 = "http_401"
HTTP_403 = "http_403"
HTTP_404 = "http_404"
HTTP_409 = "http_409"
HTTP_422 = "http_422"
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
    422: HTTP_422,
    429: HTTP_429,
    500: HTTP_500,
    502: HTTP_502,
    503: HTTP_503,
    504: HTTP_504,
}


def _http_subcode(status: int) -> str:
    return _HTTP_STATUS_TO_SUBCODE.get(status, f"http_{status}")


# Validation subcodes
VALIDATION_TABLE_NAME_REQUIRED = "validation_table_name_required"
VALIDATION_WHERE_REQUIRED = "validation_where_required"
VALIDATION_TABLE_NOT_FOUND = "validation_table_not_found"
VALIDATION_COLUMN_NOT_FOUND = "validation_column_not_found"
VALIDATION_COLUMN_IDENTIFIER_REQUIRED = "validation_column_identifier_required"
VALIDATION_COLUMN_EXISTS = "validation_column_exists"
VALIDATION_COLUMN_UPDATE = "validation_column_update"
VALIDATION_MISSING_PATH_PARAMETER = "validation_missing_path_parameter"
