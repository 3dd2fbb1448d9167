"""Tests for Router.allowed_methods(): OPTIONS, 405, and 501 answers."""

import pytest

from switchyard.errors import ConfigurationError, MethodNotAllowed, NotImplementedMethod
from switchyard.http.request import Request
from switchyard.http.response import Response
from switchyard.routing.pattern import pattern
from switchyard.routing.router import Router, allowed_methods_for

PASSED = Response("passed", status=599)


async def passed(request: Request) -> Response:
    return PASSED


def users_router() -> Router:
    router = Router()
    router.get(pattern("/users"), lambda request: "list")
    router.post(pattern("/users"), lambda request: "create")
    router.delete(pattern("/users/{id:int}"), lambda request: "remove")
    return router


async def resolve(router: Router, method: str, path: str) -> Response:
    return await router.allowed_methods()(Request(method, path), passed)


class TestOptions:
    @pytest.mark.asyncio
    async def test_lists_allowed_methods(self) -> None:
        response = await resolve(users_router(), "OPTIONS", "/users")
        assert response.status == 200
        assert response.get_header("Allow") == "GET, HEAD, POST"
        assert response.body == ""
        assert response.content_type == ""

    @pytest.mark.asyncio
    async def test_lists_only_methods_for_this_path(self) -> None:
        response = await resolve(users_router(), "OPTIONS", "/users/3")
        assert response.get_header("Allow") == "DELETE"

    @pytest.mark.asyncio
    async def test_unrouted_path_has_empty_allow(self) -> None:
        response = await resolve(users_router(), "OPTIONS", "/nowhere")
        assert response.status == 200
        assert response.get_header("Allow") == ""

    @pytest.mark.asyncio
    async def test_answer_is_stable(self) -> None:
        router = users_router()
        first = await resolve(router, "OPTIONS", "/users")
        second = await resolve(router, "OPTIONS", "/users")
        assert first == second


class TestMethodNotAllowed:
    @pytest.mark.asyncio
    async def test_unrouted_method_on_routed_path(self) -> None:
        with pytest.raises(MethodNotAllowed) as exc_info:
            await resolve(users_router(), "PUT", "/users")
        assert exc_info.value.status == 405
        assert exc_info.value.headers == (("Allow", "GET, HEAD, POST"),)

    @pytest.mark.asyncio
    async def test_allowed_method_passes(self) -> None:
        assert await resolve(users_router(), "POST", "/users") is PASSED

    @pytest.mark.asyncio
    async def test_head_allowed_with_get(self) -> None:
        assert await resolve(users_router(), "HEAD", "/users") is PASSED

    @pytest.mark.asyncio
    async def test_no_route_at_path_passes(self) -> None:
        assert await resolve(users_router(), "PUT", "/nowhere") is PASSED


class TestNotImplemented:
    @pytest.mark.asyncio
    async def test_unknown_method(self) -> None:
        with pytest.raises(NotImplementedMethod) as exc_info:
            await resolve(users_router(), "TRACE", "/users")
        assert exc_info.value.status == 501

    @pytest.mark.asyncio
    async def test_unknown_method_on_any_path(self) -> None:
        with pytest.raises(NotImplementedMethod):
            await resolve(users_router(), "BREW", "/nowhere")

    @pytest.mark.asyncio
    async def test_lower_case_method_is_unknown(self) -> None:
        with pytest.raises(NotImplementedMethod):
            await resolve(users_router(), "get", "/users")


class TestAcrossRouters:
    def routers(self) -> tuple[Router, Router]:
        reads = Router()
        reads.get(pattern("/items"), lambda request: "list")
        writes = Router()
        writes.put(pattern("/items"), lambda request: "replace")
        writes.post(pattern("/orders"), lambda request: "order")
        return reads, writes

    @pytest.mark.asyncio
    async def test_options_is_union_in_canonical_order(self) -> None:
        stage = allowed_methods_for(self.routers())
        response = await stage(Request("OPTIONS", "/items"), passed)
        assert response.get_header("Allow") == "GET, HEAD, PUT"

    @pytest.mark.asyncio
    async def test_method_from_any_router_passes(self) -> None:
        stage = allowed_methods_for(self.routers())
        assert await stage(Request("PUT", "/items"), passed) is PASSED

    @pytest.mark.asyncio
    async def test_405_lists_union(self) -> None:
        stage = allowed_methods_for(self.routers())
        with pytest.raises(MethodNotAllowed) as exc_info:
            await stage(Request("DELETE", "/items"), passed)
        assert exc_info.value.headers == (("Allow", "GET, HEAD, PUT"),)

    @pytest.mark.asyncio
    async def test_freezes_every_router(self) -> None:
        reads, writes = self.routers()
        await allowed_methods_for((reads, writes))(Request("GET", "/x"), passed)
        with pytest.raises(ConfigurationError):
            writes.get(pattern("/late"), lambda request: "late")
