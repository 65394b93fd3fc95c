# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import pytest

from boltic_sdk.core import _error_codes as ec
from boltic_sdk.core.errors import ValidationError
from boltic_sdk.operations._base import build_endpoint_path, build_query_params


class TestBuildEndpointPath:
    def test_substitutes_and_encodes(self):
        path = build_endpoint_path("/v1/tables/{table_id}/fields/{field_id}", table_id="a/b", field_id="c d")
        assert path == "/v1/tables/a%2Fb/fields/c%20d"

    def test_missing_parameter(self):
        with pytest.raises(ValidationError) as ei:
            build_endpoint_path("/v1/tables/{table_id}")
        assert ei.value.subcode == ec.VALIDATION_MISSING_PATH_PARAMETER
        assert ei.value.errors[0]["field"] == "table_id"


class TestBuildQueryParams:
    def test_empty(self):
        assert build_query_params() == {}
        assert build_query_params({}) == {}

    def test_sort_accepts_strings_and_mappings(self):
        params = build_query_params({"sort": ["created_at:desc", {"field": "name"}]})
        assert params["sort"] == "created_at:desc,name:asc"

    def test_where_encodes_nested_values(self):
        params = build_query_params({"where": {"price": {"$gt": 10}, "tags": ["a"], "name": "x", "skip": None}})
        assert params == {"where[price]": '{"$gt": 10}', "where[tags]": '["a"]', "where[name]": "x"}

    def test_zero_limit_and_offset_kept(self):
        assert build_query_params({"limit": 0, "offset": 0}) == {"limit": 0, "offset": 0}
