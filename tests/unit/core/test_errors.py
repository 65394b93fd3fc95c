# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import pytest

from boltic_sdk.core import _error_codes as ec
from boltic_sdk.core.errors import (
    AuthenticationError,
    BolticError,
    HttpError,
    InterceptorError,
    NetworkError,
    RequestTimeoutError,
    ValidationError,
    format_error,
)


class TestHttpError:
    @pytest.mark.parametrize(
        "status, flag",
        [
            (400, "is_client_error"),
            (401, "is_auth_error"),
            (403, "is_auth_error"),
            (404, "is_not_found_error"),
            (429, "is_rate_limit_error"),
            (500, "is_server_error"),
        ],
    )
    def test_classification_flags(self, status, flag):
        assert HttpError("x", status).context[flag] is True

    def test_subcode_fallback(self):
        assert HttpError("x", 418).subcode == "http_418"
        assert HttpError("x", 503).subcode == ec.HTTP_503

    def test_source_is_server(self):
        err = HttpError("x", 500, response={"message": "x"})
        assert err.source == "server"
        assert err.response == {"message": "x"}


def test_validation_error_errors():
    err = ValidationError("bad", errors=[{"field": "name", "message": "required"}])
    assert err.code == ec.VALIDATION_ERROR
    assert err.errors == [{"field": "name", "message": "required"}]


def test_timeout_error_is_builtin_timeout():
    err = RequestTimeoutError("slow", timeout=100)
    assert isinstance(err, TimeoutError)
    assert isinstance(err, BolticError)
    assert err.context["timeout"] == 100


def test_interceptor_error_context():
    err = InterceptorError("x", kind="response", interceptor_id=3)
    assert err.context == {"interceptor_kind": "response", "interceptor_id": 3}


def test_network_error_is_transient():
    assert NetworkError("offline").is_transient is True


def test_to_dict_includes_cause():
    try:
        try:
            raise OSError("socket closed")
        except OSError as exc:
            raise NetworkError("offline") from exc
    except NetworkError as err:
        data = err.to_dict()
    assert data["name"] == "NetworkError"
    assert data["code"] == ec.NETWORK_ERROR
    assert "socket closed" in data["cause"]
    assert data["timestamp"]


def test_format_error():
    assert format_error(HttpError("Not found", 404)) == "HttpError: Not found (HTTP 404)"
    assert format_error(AuthenticationError("bad key", code=ec.INVALID_API_KEY)) == "AuthenticationError: bad key"
    assert format_error(KeyError("k")) == "KeyError: 'k'"
