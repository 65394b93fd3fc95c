# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import pytest

from boltic_sdk.core.errors import HttpError, InterceptorError, NetworkError
from boltic_sdk.core.interceptors import InterceptorChain, InterceptorManager


class TestInterceptorChain:
    def test_ids_start_at_one_and_increase(self):
        chain = InterceptorChain("request")
        assert [chain.use(object()) for _ in range(3)] == [1, 2, 3]

    def test_ids_are_not_reused(self):
        chain = InterceptorChain("request")
        first = chain.use("a")
        chain.eject(first)
        assert chain.use("b") == 2
        assert chain.ids() == [2]

    def test_eject_unknown_id_is_noop(self):
        chain = InterceptorChain("request")
        chain.use("a")
        chain.eject(99)
        assert len(chain) == 1

    def test_contains_and_clear(self):
        chain = InterceptorChain("response")
        interceptor_id = chain.use("a")
        assert interceptor_id in chain
        chain.clear()
        assert interceptor_id not in chain


class TestInterceptorManager:
    def test_chains_have_independent_ids(self):
        manager = InterceptorManager()
        assert manager.add_request_interceptor(lambda r: r) == 1
        assert manager.add_response_interceptor(on_success=lambda r: r) == 1

    def test_response_interceptor_requires_a_hook(self):
        with pytest.raises(TypeError):
            InterceptorManager().add_response_interceptor()

    def test_request_interceptor_must_be_callable(self):
        with pytest.raises(TypeError):
            InterceptorManager().add_request_interceptor("nope")

    def test_remove_unknown_kind(self):
        with pytest.raises(ValueError):
            InterceptorManager().remove_interceptor("bogus", 1)

    @pytest.mark.asyncio
    async def test_request_chain_runs_in_order_with_async_hooks(self):
        manager = InterceptorManager()
        manager.add_request_interceptor(lambda r: r + ["a"])

        async def second(r):
            return r + ["b"]

        manager.add_request_interceptor(second)
        manager.add_request_interceptor(lambda r: r + ["c"])
        assert await manager.run_request([]) == ["a", "b", "c"]

    @pytest.mark.asyncio
    async def test_request_hook_failure_is_wrapped_and_stops_chain(self):
        manager = InterceptorManager()
        calls = []

        def boom(r):
            raise ValueError("bad header")

        manager.add_request_interceptor(boom)
        manager.add_request_interceptor(lambda r: calls.append(r) or r)

        with pytest.raises(InterceptorError) as ei:
            await manager.run_request({})
        assert isinstance(ei.value.__cause__, ValueError)
        assert ei.value.context["interceptor_kind"] == "request"
        assert ei.value.context["interceptor_id"] == 1
        assert calls == []

    @pytest.mark.asyncio
    async def test_request_hook_sdk_error_passes_through(self):
        manager = InterceptorManager()
        original = NetworkError("offline")

        def boom(r):
            raise original

        manager.add_request_interceptor(boom)
        with pytest.raises(NetworkError) as ei:
            await manager.run_request({})
        assert ei.value is original

    @pytest.mark.asyncio
    async def test_request_hook_returning_none_fails(self):
        manager = InterceptorManager()
        manager.add_request_interceptor(lambda r: None)
        with pytest.raises(InterceptorError):
            await manager.run_request({})

    @pytest.mark.asyncio
    async def test_request_hook_result_must_pass_type_check(self):
        manager = InterceptorManager()
        manager.add_request_interceptor(lambda r: {"url": "https://example.test"})
        with pytest.raises(InterceptorError, match="returned dict"):
            await manager.run_request([], is_request=lambda value: isinstance(value, list))

    @pytest.mark.asyncio
    async def test_success_chain_maps_response(self):
        manager = InterceptorManager()
        manager.add_response_interceptor(on_success=lambda r: r * 2)
        manager.add_response_interceptor(on_error=lambda e: None)
        manager.add_response_interceptor(on_success=lambda r: r + 1)
        assert await manager.run_response(5) == 11

    @pytest.mark.asyncio
    async def test_on_error_observing_keeps_error(self):
        manager = InterceptorManager()
        seen = []
        manager.add_response_interceptor(on_error=lambda e: seen.append(e))
        error = HttpError("missing", 404)
        with pytest.raises(HttpError) as ei:
            await manager.run_response(error=error)
        assert ei.value is error
        assert seen == [error]

    @pytest.mark.asyncio
    async def test_on_error_can_transform(self):
        manager = InterceptorManager()
        manager.add_response_interceptor(on_error=lambda e: RuntimeError("translated"))
        with pytest.raises(RuntimeError, match="translated"):
            await manager.run_response(error=HttpError("boom", 500))

    @pytest.mark.asyncio
    async def test_on_error_raising_is_wrapped(self):
        manager = InterceptorManager()
        seen = []

        def reraise(e):
            raise KeyError("replaced")

        manager.add_response_interceptor(on_error=reraise)
        manager.add_response_interceptor(on_error=lambda e: seen.append(e))
        with pytest.raises(InterceptorError) as ei:
            await manager.run_response(error=HttpError("boom", 500))
        assert isinstance(ei.value.__cause__, KeyError)
        assert ei.value.context["interceptor_id"] == 1
        assert seen == [ei.value]

    @pytest.mark.asyncio
    async def test_on_error_raising_sdk_error_passes_through(self):
        manager = InterceptorManager()
        replacement = NetworkError("offline")

        def reraise(e):
            raise replacement

        manager.add_response_interceptor(on_error=reraise)
        with pytest.raises(NetworkError) as ei:
            await manager.run_response(error=HttpError("boom", 500))
        assert ei.value is replacement

    @pytest.mark.asyncio
    async def test_on_error_recovery_resumes_success_chain(self):
        manager = InterceptorManager()
        manager.add_response_interceptor(on_error=lambda e: "fallback")
        manager.add_response_interceptor(on_success=lambda r: r.upper())
        result = await manager.run_response(error=HttpError("boom", 500))
        assert result == "FALLBACK"

    @pytest.mark.asyncio
    async def test_success_hook_failure_switches_to_error_mode(self):
        manager = InterceptorManager()
        seen = []

        def boom(r):
            raise ValueError("bad body")

        manager.add_response_interceptor(on_success=boom)
        manager.add_response_interceptor(on_success=lambda r: pytest.fail("success hook after failure"))
        manager.add_response_interceptor(on_error=lambda e: seen.append(e))

        with pytest.raises(InterceptorError) as ei:
            await manager.run_response("payload")
        assert seen == [ei.value]
        assert isinstance(ei.value.__cause__, ValueError)
        assert ei.value.context["interceptor_kind"] == "response"
