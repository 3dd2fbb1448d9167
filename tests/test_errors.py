"""Tests for switchyard.errors and the server error pipeline."""

import pytest

from switchyard.errors import (
    ConfigurationError,
    HTTPError,
    MethodNotAllowed,
    NotFound,
    NotImplementedMethod,
    SwitchyardError,
)
from switchyard.http.request import Request
from switchyard.http.response import Response
from switchyard.server.errors import (
    call_error_handler,
    handle_http_error,
    handle_internal_error,
)


class TestHierarchy:
    def test_http_errors_are_switchyard_errors(self) -> None:
        assert issubclass(HTTPError, SwitchyardError)
        assert issubclass(ConfigurationError, SwitchyardError)

    def test_not_found(self) -> None:
        exc = NotFound()
        assert exc.status == 404
        assert exc.detail == "Not Found"

    def test_method_not_allowed_carries_allow(self) -> None:
        exc = MethodNotAllowed(["GET", "HEAD"])
        assert exc.status == 405
        assert exc.headers == (("Allow", "GET, HEAD"),)

    def test_method_not_allowed_empty(self) -> None:
        assert MethodNotAllowed([]).headers == (("Allow", ""),)

    def test_not_implemented(self) -> None:
        exc = NotImplementedMethod("TRACE")
        assert exc.status == 501
        assert "TRACE" in exc.detail

    def test_str(self) -> None:
        assert str(HTTPError(418, "teapot")) == "418: teapot"
        assert str(HTTPError(418)) == "418"

    def test_can_be_raised(self) -> None:
        with pytest.raises(HTTPError) as exc_info:
            raise NotFound("gone")
        assert exc_info.value.detail == "gone"


class TestCallErrorHandler:
    @pytest.mark.asyncio
    async def test_zero_args(self) -> None:
        response = await call_error_handler(lambda: "none", Request("GET", "/"), ValueError())
        assert response.text == "none"

    @pytest.mark.asyncio
    async def test_request_arg(self) -> None:
        response = await call_error_handler(
            lambda request: request.path, Request("GET", "/here"), ValueError()
        )
        assert response.text == "/here"

    @pytest.mark.asyncio
    async def test_request_and_exc(self) -> None:
        async def handler(request, exc):
            return str(exc)

        response = await call_error_handler(handler, Request("GET", "/"), ValueError("why"))
        assert response.text == "why"


class TestHandleHttpError:
    @pytest.mark.asyncio
    async def test_default_body(self) -> None:
        response = await handle_http_error(NotFound(), Request("GET", "/"), {}, debug=False)
        assert response.status == 404
        assert response.text == "Not Found"
        assert response.content_type == "text/plain; charset=utf-8"

    @pytest.mark.asyncio
    async def test_default_body_without_detail(self) -> None:
        response = await handle_http_error(HTTPError(409), Request("GET", "/"), {}, debug=False)
        assert response.text == "Error 409"

    @pytest.mark.asyncio
    async def test_debug_prefixes_status(self) -> None:
        response = await handle_http_error(NotFound("x"), Request("GET", "/"), {}, debug=True)
        assert response.text == "404: x"

    @pytest.mark.asyncio
    async def test_exception_headers_are_sent(self) -> None:
        response = await handle_http_error(
            MethodNotAllowed(["GET"]), Request("PUT", "/"), {}, debug=False
        )
        assert response.get_header("Allow") == "GET"

    @pytest.mark.asyncio
    async def test_handler_header_wins(self) -> None:
        def handler():
            return Response("custom", status=405).with_header("Allow", "POST")

        response = await handle_http_error(
            MethodNotAllowed(["GET"]), Request("PUT", "/"), {405: handler}, debug=False
        )
        assert response.headers == (("Allow", "POST"),)

    @pytest.mark.asyncio
    async def test_handler_keeps_exception_status(self) -> None:
        response = await handle_http_error(
            NotFound(), Request("GET", "/"), {404: lambda: "missing"}, debug=False
        )
        assert response.status == 404


class TestHandleInternalError:
    @pytest.mark.asyncio
    async def test_hides_detail(self) -> None:
        response = await handle_internal_error(
            RuntimeError("secret"), Request("GET", "/"), {}, debug=False
        )
        assert response.status == 500
        assert response.text == "Internal Server Error"

    @pytest.mark.asyncio
    async def test_logs_exception(self, caplog: pytest.LogCaptureFixture) -> None:
        try:
            raise RuntimeError("logged")
        except RuntimeError as exc:
            with caplog.at_level("ERROR", logger="switchyard.server"):
                await handle_internal_error(exc, Request("GET", "/x"), {}, debug=False)
        assert "500 GET /x" in caplog.text

    @pytest.mark.asyncio
    async def test_custom_500_handler(self) -> None:
        response = await handle_internal_error(
            RuntimeError(), Request("GET", "/"), {500: lambda: "oops"}, debug=False
        )
        assert response.status == 500
        assert response.text == "oops"
