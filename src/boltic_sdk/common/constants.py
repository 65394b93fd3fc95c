# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Constants for the Boltic Tables REST API.

These constants define header names and resource paths used on the wire.
"""

# Authentication headers
HEADER_BOLTIC_TOKEN = "x-boltic-token"
"""Header carrying the API key on every authenticated request."""

HEADER_BOLTIC_SERVICE = "x-boltic-service"
"""Optional header naming the Boltic service a request targets."""

HEADER_CONTENT_TYPE = "Content-Type"
HEADER_ACCEPT = "Accept"
CONTENT_TYPE_JSON = "application/json"

# Minimum accepted API key length
API_KEY_MIN_LENGTH = 10

# Resource paths
TABLES_BASE_PATH = "/v1/tables"
TABLE_PATH = "/v1/tables/{table_id}"
COLUMNS_BASE_PATH = "/v1/tables/{table_id}/fields"
COLUMN_PATH = "/v1/tables/{table_id}/fields/{field_id}"

# Query parameter carrying the selected database
DB_ID_PARAM = "db_id"

# Transient HTTP status codes that are retried
TRANSIENT_STATUS_CODES = frozenset({429, 502, 503, 504})
