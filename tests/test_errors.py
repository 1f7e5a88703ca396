"""Tests for xebec.errors and the error-to-response policy."""

import dataclasses

import pytest

from xebec.config import ServerOptions
from xebec.context import RequestContext
from xebec.errors import (
    ConfigurationError,
    HTTPError,
    MiddlewareError,
    NotFound,
    PayloadTooLarge,
    ValidationFailed,
    XebecError,
)
from xebec.http.request import Request
from xebec.http.response import Response
from xebec.server.errors import (
    call_error_handler,
    handle_fault,
    http_error_response,
    not_found_response,
)


def _ctx() -> RequestContext:
    return RequestContext(Request.build("GET", "/thing"))


class TestHierarchy:
    def test_http_error_is_xebec_error(self) -> None:
        assert issubclass(HTTPError, XebecError)

    def test_builtin_statuses(self) -> None:
        assert NotFound().status == 404
        assert PayloadTooLarge().status == 413
        assert ValidationFailed().status == 400

    def test_configuration_error_is_xebec_error(self) -> None:
        assert issubclass(ConfigurationError, XebecError)

    def test_middleware_error_is_runtime_error(self) -> None:
        assert issubclass(MiddlewareError, RuntimeError)
        assert issubclass(MiddlewareError, XebecError)


class TestHTTPError:
    def test_status_and_detail(self) -> None:
        err = HTTPError(status=400, detail="Bad request body")
        assert err.status == 400
        assert err.detail == "Bad request body"

    def test_str_with_detail(self) -> None:
        assert str(HTTPError(status=400, detail="Bad request body")) == "400: Bad request body"

    def test_str_without_detail(self) -> None:
        assert str(HTTPError(status=503)) == "503"

    def test_frozen(self) -> None:
        err = HTTPError(status=400)
        with pytest.raises(dataclasses.FrozenInstanceError):
            err.status = 500  # type: ignore[misc]

    def test_catchable(self) -> None:
        with pytest.raises(HTTPError) as info:
            raise NotFound()
        assert info.value.detail == "Not found"


class TestResponses:
    def test_not_found_body(self) -> None:
        response = not_found_response()
        assert response.status == 404
        assert response.json() == {"error": "Not found"}

    def test_http_error_without_detail(self) -> None:
        response = http_error_response(HTTPError(status=418))
        assert response.status == 418
        assert response.json() == {"error": "Error 418"}

    def test_http_error_headers(self) -> None:
        response = http_error_response(HTTPError(status=405, headers=(("Allow", "GET"),)))
        assert response.header("Allow") == "GET"


class TestHandleFault:
    async def test_generic_500(self) -> None:
        response = await handle_fault(RuntimeError("x"), _ctx(), ServerOptions())
        assert response.status == 500
        assert response.json() == {"error": "Internal Server Error"}

    async def test_debug_detail(self) -> None:
        response = await handle_fault(KeyError("k"), _ctx(), ServerOptions(debug=True))
        assert response.json()["detail"] == "KeyError: 'k'"

    async def test_http_error_status(self) -> None:
        response = await handle_fault(HTTPError(status=429), _ctx(), ServerOptions())
        assert response.status == 429

    async def test_error_handler_wins(self) -> None:
        options = ServerOptions(error_handler=lambda exc, ctx: Response("mine", status=500))
        response = await handle_fault(ValueError("x"), _ctx(), options)
        assert response.text == "mine"

    async def test_call_error_handler_negotiates(self) -> None:
        response = await call_error_handler(
            lambda exc, ctx: {"path": ctx.path, "error": str(exc)}, ValueError("v"), _ctx()
        )
        assert response.json() == {"path": "/thing", "error": "v"}
