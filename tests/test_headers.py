"""Tests for xebec.http.headers — immutable, case-insensitive Headers."""

import pytest

from xebec.http.headers import Headers


def _h(*pairs: tuple[str, str]) -> Headers:
    """Shorthand: build Headers from string pairs."""
    raw = tuple((k.encode("latin-1"), v.encode("latin-1")) for k, v in pairs)
    return Headers(raw)


class TestHeaders:
    def test_getitem(self) -> None:
        h = _h(("Content-Type", "text/html"))
        assert h["Content-Type"] == "text/html"

    def test_case_insensitive(self) -> None:
        h = _h(("Content-Type", "text/html"))
        assert h["content-type"] == "text/html"
        assert h["CONTENT-TYPE"] == "text/html"

    def test_missing_key_raises(self) -> None:
        h = _h(("Accept", "*/*"))
        with pytest.raises(KeyError):
            h["X-Missing"]

    def test_contains(self) -> None:
        h = _h(("Accept", "*/*"))
        assert "accept" in h
        assert "Accept" in h
        assert "x-missing" not in h

    def test_contains_rejects_non_str(self) -> None:
        h = _h(("Accept", "*/*"))
        assert 42 not in h  # type: ignore[operator]

    def test_len_deduplicates(self) -> None:
        h = _h(("X-Forwarded-For", "a"), ("X-Forwarded-For", "b"))
        assert len(h) == 1

    def test_iter_yields_unique_lowercase_keys(self) -> None:
        h = _h(("Accept", "*/*"), ("Content-Type", "text/html"), ("Accept", "text/xml"))
        assert list(h) == ["accept", "content-type"]

    def test_get_with_default(self) -> None:
        h = _h(("Accept", "*/*"))
        assert h.get("accept") == "*/*"
        assert h.get("x-missing") is None
        assert h.get("x-missing", "fallback") == "fallback"

    def test_get_list(self) -> None:
        h = _h(("Via", "a"), ("Via", "b"), ("Accept", "*/*"))
        assert h.get_list("via") == ["a", "b"]
        assert h.get_list("X-Missing") == []

    def test_raw_property(self) -> None:
        raw = ((b"a", b"1"), (b"b", b"2"))
        assert Headers(raw).raw is raw

    def test_repr(self) -> None:
        assert "accept" in repr(_h(("Accept", "*/*")))


class TestHeadersBuild:
    def test_from_mapping(self) -> None:
        h = Headers.build({"Content-Type": "application/json"})
        assert h.raw == ((b"content-type", b"application/json"),)

    def test_from_pairs_keeps_duplicates(self) -> None:
        h = Headers.build([("Via", "a"), ("Via", "b")])
        assert h.get_list("via") == ["a", "b"]

    def test_none_is_empty(self) -> None:
        assert len(Headers.build(None)) == 0
