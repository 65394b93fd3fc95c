# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import logging
import time
from unittest.mock import AsyncMock, patch

import pytest

from boltic_sdk.core import _error_codes as ec
from boltic_sdk.core.errors import BolticError, HttpError, InterceptorError, NetworkError, RequestTimeoutError
from boltic_sdk.core.http import HttpClient
from boltic_sdk.core.transport import HttpResponse
from boltic_sdk.testing import MockTransport


def _client(config, auth, responses=None, **kwargs):
    transport = MockTransport(responses, **kwargs)
    return HttpClient(config, auth, transport=transport), transport


class TestRequestBuilding:
    @pytest.mark.asyncio
    async def test_url_headers_and_timeout(self, http_client, transport, test_config):
        response = await http_client.get("/v1/tables", params={"limit": 5})

        assert response.status == 200
        sent = transport.last_request
        assert sent.method == "GET"
        assert sent.url == "http://localhost:8000/v1/tables"
        assert sent.params == {"limit": 5}
        assert sent.headers["x-boltic-token"] == "test-api-key-12345"
        assert sent.headers["Content-Type"] == "application/json"
        assert sent.timeout == test_config.timeout

    @pytest.mark.asyncio
    async def test_path_without_leading_slash(self, http_client, transport):
        await http_client.get("v1/tables")
        assert transport.last_request.url == "http://localhost:8000/v1/tables"

    @pytest.mark.asyncio
    async def test_absolute_url_is_untouched(self, http_client, transport):
        await http_client.get("https://other.test/health")
        assert transport.last_request.url == "https://other.test/health"

    @pytest.mark.asyncio
    async def test_header_precedence(self, test_config, auth):
        config = test_config.merge(headers={"x-team": "data", "Accept": "text/plain"})
        client, transport = _client(config, auth)
        await client.post("/v1/tables", {"name": "t"}, headers={"x-team": "ops"})

        sent = transport.last_request
        assert sent.headers["x-team"] == "ops"
        assert sent.headers["Accept"] == "text/plain"
        assert sent.data == {"name": "t"}

    @pytest.mark.asyncio
    async def test_update_config_applies_to_later_requests(self, http_client, transport, test_config):
        http_client.update_config(test_config.merge(timeout=1234))
        await http_client.delete("/v1/tables/1", timeout=None)
        assert transport.last_request.timeout == 1234
        assert transport.last_request.method == "DELETE"

    @pytest.mark.asyncio
    async def test_per_call_timeout(self, http_client, transport):
        await http_client.put("/v1/tables/1", {"a": 1}, timeout=500)
        assert transport.last_request.timeout == 500


class TestRequestInterceptors:
    @pytest.mark.asyncio
    async def test_run_in_registration_order(self, http_client, transport):
        def first(request):
            request.headers["x-order"] = "1"
            return request

        async def second(request):
            request.headers["x-order"] += ",2"
            return request

        http_client.add_request_interceptor(first)
        http_client.add_request_interceptor(second)
        await http_client.get("/v1/tables")

        assert transport.last_request.headers["x-order"] == "1,2"

    @pytest.mark.asyncio
    async def test_removed_interceptor_is_not_called(self, http_client, transport):
        calls = []
        interceptor_id = http_client.add_request_interceptor(lambda r: calls.append(r) or r)
        http_client.remove_interceptor("request", interceptor_id)
        http_client.remove_interceptor("request", interceptor_id)

        await http_client.get("/v1/tables")
        assert calls == []

    @pytest.mark.asyncio
    async def test_failing_interceptor_prevents_transport_call(self, http_client, transport):
        def boom(request):
            raise RuntimeError("cannot sign")

        http_client.add_request_interceptor(boom)
        with pytest.raises(InterceptorError):
            await http_client.get("/v1/tables")
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_auth_header_cannot_be_removed(self, http_client, transport):
        def strip(request):
            request.headers.pop("x-boltic-token")
            return request

        http_client.add_request_interceptor(strip)
        await http_client.get("/v1/tables")
        assert transport.last_request.headers["x-boltic-token"] == "test-api-key-12345"

    @pytest.mark.asyncio
    async def test_auth_header_can_be_rewritten(self, http_client, transport):
        def rotate(request):
            request.headers["x-boltic-token"] = "rotated-key-000"
            return request

        http_client.add_request_interceptor(rotate)
        await http_client.get("/v1/tables")
        assert transport.last_request.headers["x-boltic-token"] == "rotated-key-000"

    @pytest.mark.asyncio
    async def test_auth_header_rewrite_is_case_insensitive(self, http_client, transport):
        def rotate(request):
            request.headers.pop("x-boltic-token")
            request.headers["X-Boltic-Token"] = "rotated-key-000"
            return request

        http_client.add_request_interceptor(rotate)
        await http_client.get("/v1/tables")
        sent = transport.last_request.headers
        assert sent["X-Boltic-Token"] == "rotated-key-000"
        assert "x-boltic-token" not in sent

    @pytest.mark.asyncio
    async def test_interceptor_returning_wrong_type_is_reported(self, http_client, transport):
        seen = []

        def as_dict(request):
            return {"method": request.method, "url": request.url, "headers": dict(request.headers)}

        http_client.add_request_interceptor(as_dict)
        http_client.add_response_interceptor(on_error=lambda e: seen.append(e))
        with pytest.raises(InterceptorError) as ei:
            await http_client.get("/v1/tables")
        assert seen == [ei.value]
        assert ei.value.context["interceptor_id"] == 1
        assert transport.requests == []


class TestErrors:
    @pytest.mark.asyncio
    async def test_non_2xx_raises_http_error(self, test_config, auth):
        client, _ = _client(test_config, auth, [HttpResponse(404, {"message": "Table missing"}, status_text="Not Found")])
        with pytest.raises(HttpError) as ei:
            await client.get("/v1/tables/x")

        err = ei.value
        assert err.status_code == 404
        assert err.subcode == ec.HTTP_404
        assert err.message == "Table missing"
        assert err.response == {"message": "Table missing"}
        assert err.context["is_not_found_error"] is True
        assert err.context["is_client_error"] is True
        assert err.context["method"] == "GET"
        assert err.context["url"].endswith("/v1/tables/x")
        assert err.is_transient is False

    @pytest.mark.asyncio
    async def test_nested_error_message(self, test_config, auth):
        client, _ = _client(test_config, auth, [HttpResponse(400, {"error": {"message": "bad where"}})])
        with pytest.raises(HttpError, match="bad where"):
            await client.get("/v1/tables")

    @pytest.mark.asyncio
    async def test_transport_exception_becomes_network_error(self, test_config, auth):
        client, _ = _client(test_config, auth, [ConnectionResetError("reset")])
        with pytest.raises(NetworkError) as ei:
            await client.get("/v1/tables")
        assert isinstance(ei.value.__cause__, ConnectionResetError)
        assert ei.value.is_transient is True

    @pytest.mark.asyncio
    async def test_timeout(self, test_config, auth):
        client, transport = _client(test_config, auth, hang=True)
        started = time.perf_counter()
        with pytest.raises(RequestTimeoutError) as ei:
            await client.get("/v1/tables", timeout=100)
        elapsed = time.perf_counter() - started

        assert elapsed < 0.15
        assert isinstance(ei.value, TimeoutError)
        assert ei.value.code == ec.REQUEST_TIMEOUT
        assert ei.value.context["timeout"] == 100
        assert len(transport.requests) == 1


class TestResponseInterceptors:
    @pytest.mark.asyncio
    async def test_success_hooks_transform_response(self, http_client, transport):
        def unwrap(response):
            response.data = {"wrapped": response.data}
            return response

        http_client.add_response_interceptor(on_success=unwrap)
        response = await http_client.get("/v1/tables")
        assert response.data == {"wrapped": {"data": None}}

    @pytest.mark.asyncio
    async def test_error_hook_recovers(self, test_config, auth):
        client, _ = _client(test_config, auth, [HttpResponse(500, {"message": "down"})])
        seen = []
        client.add_response_interceptor(on_error=lambda e: HttpResponse(200, {"data": "cached"}))
        client.add_response_interceptor(on_success=lambda r: seen.append(r.data) or r)

        response = await client.get("/v1/tables")
        assert response.data == {"data": "cached"}
        assert seen == [{"data": "cached"}]

    @pytest.mark.asyncio
    async def test_error_hook_sees_sdk_error(self, test_config, auth):
        client, _ = _client(test_config, auth, [HttpResponse(401, {"message": "no"})])
        seen = []
        client.add_response_interceptor(on_error=lambda e: seen.append(e))
        with pytest.raises(HttpError):
            await client.get("/v1/tables")
        assert len(seen) == 1
        assert seen[0].context["is_auth_error"] is True

    @pytest.mark.asyncio
    async def test_request_interceptor_failure_reaches_error_hooks(self, http_client):
        seen = []

        def boom(request):
            raise ValueError("nope")

        http_client.add_request_interceptor(boom)
        http_client.add_response_interceptor(on_error=lambda e: seen.append(type(e)))
        with pytest.raises(InterceptorError):
            await http_client.get("/v1/tables")
        assert seen == [InterceptorError]


class TestRetries:
    @pytest.mark.asyncio
    async def test_transient_status_is_retried_with_backoff(self, test_config, auth):
        config = test_config.merge(retry_attempts=2, retry_delay=10)
        client, transport = _client(
            config, auth, [HttpResponse(503), HttpResponse(502), HttpResponse(200, {"data": []})]
        )
        with patch("boltic_sdk.core.http.asyncio.sleep", new=AsyncMock()) as sleep:
            response = await client.get("/v1/tables")

        assert response.status == 200
        assert len(transport.requests) == 3
        delays = [c.args[0] for c in sleep.await_args_list]
        assert delays == [pytest.approx(0.01), pytest.approx(0.02)]

    @pytest.mark.asyncio
    async def test_retry_after_header_wins(self, test_config, auth):
        config = test_config.merge(retry_attempts=1)
        client, _ = _client(config, auth, [HttpResponse(429, headers={"Retry-After": "2"}), HttpResponse(200)])
        with patch("boltic_sdk.core.http.asyncio.sleep", new=AsyncMock()) as sleep:
            await client.get("/v1/tables")
        sleep.assert_awaited_once_with(2.0)

    @pytest.mark.asyncio
    async def test_gives_up_after_budget(self, test_config, auth):
        config = test_config.merge(retry_attempts=1)
        client, transport = _client(config, auth, [HttpResponse(503), HttpResponse(503), HttpResponse(200)])
        with patch("boltic_sdk.core.http.asyncio.sleep", new=AsyncMock()):
            with pytest.raises(HttpError) as ei:
                await client.get("/v1/tables")
        assert ei.value.status_code == 503
        assert len(transport.requests) == 2

    @pytest.mark.asyncio
    async def test_client_errors_are_not_retried(self, test_config, auth):
        config = test_config.merge(retry_attempts=3)
        client, transport = _client(config, auth, [HttpResponse(400), HttpResponse(200)])
        with patch("boltic_sdk.core.http.asyncio.sleep", new=AsyncMock()) as sleep:
            with pytest.raises(HttpError):
                await client.get("/v1/tables")
        assert len(transport.requests) == 1
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_timeouts_are_not_retried(self, test_config, auth):
        config = test_config.merge(retry_attempts=3)
        client, transport = _client(config, auth, hang=True)
        with pytest.raises(RequestTimeoutError):
            await client.get("/v1/tables", timeout=50)
        assert len(transport.requests) == 1

    @pytest.mark.asyncio
    async def test_network_errors_are_retried(self, test_config, auth):
        config = test_config.merge(retry_attempts=1)
        client, transport = _client(config, auth, [OSError("refused"), HttpResponse(200)])
        with patch("boltic_sdk.core.http.asyncio.sleep", new=AsyncMock()):
            response = await client.get("/v1/tables")
        assert response.status == 200
        assert len(transport.requests) == 2


class TestDebugLogging:
    @pytest.mark.asyncio
    async def test_debug_logs_redact_token(self, test_config, auth, caplog):
        client, _ = _client(test_config.merge(debug=True), auth)
        with caplog.at_level(logging.DEBUG, logger="boltic_sdk.core.http"):
            await client.get("/v1/tables")
        assert "HTTP request GET" in caplog.text
        assert "test-api-key-12345" not in caplog.text

    @pytest.mark.asyncio
    async def test_quiet_without_debug(self, http_client, caplog):
        with caplog.at_level(logging.DEBUG, logger="boltic_sdk.core.http"):
            await http_client.get("/v1/tables")
        assert "HTTP request" not in caplog.text


def test_close_does_not_close_injected_transport(test_config, auth):
    client, transport = _client(test_config, auth)
    client.close()
    assert transport.closed is False


def test_errors_are_sdk_errors():
    assert issubclass(RequestTimeoutError, BolticError)
    assert issubclass(HttpError, BolticError)


def test_update_config_merges_changes(http_client, test_config):
    updated = http_client.update_config(retry_attempts=2)
    assert updated.retry_attempts == 2
    assert http_client.get_config() is updated
    assert test_config.retry_attempts == 0
