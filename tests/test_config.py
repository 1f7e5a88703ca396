"""Tests for xebec.config — ServerOptions frozen dataclass."""

import dataclasses

import pytest

from xebec.config import DEFAULT_MAX_BODY_SIZE, ServerOptions
from xebec.errors import ConfigurationError


class TestServerOptions:
    def test_defaults(self) -> None:
        options = ServerOptions()
        assert options.debug is False
        assert options.max_body_size == DEFAULT_MAX_BODY_SIZE == 1024 * 1024
        assert dict(options.default_headers) == {}
        assert options.error_handler is None

    def test_override(self) -> None:
        def handler(exc, ctx):
            return "x"

        options = ServerOptions(debug=True, max_body_size=10, error_handler=handler)
        assert options.debug is True
        assert options.max_body_size == 10
        assert options.error_handler is handler

    def test_frozen(self) -> None:
        options = ServerOptions()
        with pytest.raises(dataclasses.FrozenInstanceError):
            options.debug = True  # type: ignore[misc]

    def test_default_headers_detached_and_read_only(self) -> None:
        source = {"X-A": "1"}
        options = ServerOptions(default_headers=source)
        source["X-B"] = "2"
        assert dict(options.default_headers) == {"X-A": "1"}
        with pytest.raises(TypeError):
            options.default_headers["X-C"] = "3"  # type: ignore[index]

    def test_zero_body_size_allowed(self) -> None:
        assert ServerOptions(max_body_size=0).max_body_size == 0

    def test_negative_body_size_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="max_body_size"):
            ServerOptions(max_body_size=-1)
