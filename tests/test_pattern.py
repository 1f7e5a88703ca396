"""Tests for xebec.routing.pattern — path template compilation."""

import pytest

from xebec.errors import ConfigurationError
from xebec.routing.pattern import WILDCARD, compile_pattern


class TestStaticPatterns:
    def test_exact_match(self) -> None:
        pattern = compile_pattern("/users")
        assert pattern.match("/users") == {}
        assert pattern.param_names == ()

    def test_whole_path_only(self) -> None:
        pattern = compile_pattern("/users")
        assert pattern.match("/users/42") is None
        assert pattern.match("/api/users") is None

    def test_trailing_slash_is_literal(self) -> None:
        pattern = compile_pattern("/foo")
        assert pattern.match("/foo/") is None
        assert compile_pattern("/foo/").match("/foo") is None

    def test_metacharacters_are_literal(self) -> None:
        pattern = compile_pattern("/v1.0/files+(all)")
        assert pattern.match("/v1.0/files+(all)") == {}
        assert pattern.match("/v1x0/files+(all)") is None
        assert pattern.match("/v1.0/filesss(all)") is None


class TestParameters:
    def test_single_param(self) -> None:
        pattern = compile_pattern("/user/:id")
        assert pattern.param_names == ("id",)
        assert pattern.match("/user/42") == {"id": "42"}

    def test_params_in_template_order(self) -> None:
        pattern = compile_pattern("/org/:org/repo/:repo")
        assert pattern.param_names == ("org", "repo")
        assert pattern.match("/org/acme/repo/widgets") == {"org": "acme", "repo": "widgets"}

    def test_param_does_not_cross_slash(self) -> None:
        pattern = compile_pattern("/user/:id")
        assert pattern.match("/user/42/posts") is None

    def test_param_requires_one_character(self) -> None:
        pattern = compile_pattern("/user/:id")
        assert pattern.match("/user/") is None

    def test_param_with_literal_suffix(self) -> None:
        pattern = compile_pattern("/files/:name.json")
        assert pattern.match("/files/report.json") == {"name": "report"}

    def test_values_are_not_decoded(self) -> None:
        pattern = compile_pattern("/tag/:name")
        assert pattern.match("/tag/a%20b") == {"name": "a%20b"}

    def test_param_names_are_ascii(self) -> None:
        pattern = compile_pattern("/u/:idé")
        assert pattern.param_names == ("id",)
        assert pattern.match("/u/7é") == {"id": "7"}

    def test_non_ascii_after_colon_is_literal(self) -> None:
        pattern = compile_pattern("/u/:été")
        assert pattern.param_names == ()
        assert pattern.match("/u/:été") == {}


class TestWildcard:
    def test_wildcard_matches_anything(self) -> None:
        pattern = compile_pattern(WILDCARD)
        assert pattern.is_wildcard
        assert pattern.match("/") == {}
        assert pattern.match("/any/thing/at/all") == {}

    def test_concrete_pattern_is_not_wildcard(self) -> None:
        assert not compile_pattern("/x").is_wildcard


class TestInvalidPatterns:
    def test_repeated_param_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="repeats parameter"):
            compile_pattern("/a/:id/b/:id")

    def test_embedded_wildcard_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="embeds"):
            compile_pattern("/static/*")

    def test_missing_leading_slash_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="must start with"):
            compile_pattern("users")

    def test_empty_pattern_rejected(self) -> None:
        with pytest.raises(ConfigurationError):
            compile_pattern("")
