"""URL 유틸 테스트"""
import pytest

from picsearch.utils.url import normalize_url, url_encode, with_query


class TestNormalizeUrl:
    """href 정규화"""

    def test_protocol_relative(self):
        assert normalize_url("//a.com/b") == "https://a.com/b"

    def test_absolute_passthrough(self):
        assert normalize_url("https://x.org/p") == "https://x.org/p"
        assert normalize_url("http://x.org/p") == "http://x.org/p"

    def test_root_relative_with_base(self):
        assert normalize_url("/img/1.png", base_url="https://iqdb.org") == "https://iqdb.org/img/1.png"
        assert normalize_url("/img/1.png", base_url="https://iqdb.org/") == "https://iqdb.org/img/1.png"

    def test_root_relative_without_base(self):
        assert normalize_url("/img/1.png") == "/img/1.png"

    def test_empty(self):
        assert normalize_url("") == ""
        assert normalize_url("   ") == ""

    @pytest.mark.parametrize(
        "href",
        ["//a.com/b", "https://x.org/p", "/rel", "data:image/png;base64,AAAA"],
    )
    def test_idempotent(self, href):
        once = normalize_url(href, base_url="https://base.net")
        assert normalize_url(once, base_url="https://base.net") == once


def test_url_encode_escapes_everything():
    assert url_encode("https://a.com/x?y=1&z=2") == "https%3A%2F%2Fa.com%2Fx%3Fy%3D1%26z%3D2"
    assert url_encode("a b") == "a%20b"


def test_with_query_separator():
    assert with_query("https://a.com/p", {"x": 1}) == "https://a.com/p?x=1"
    assert with_query("https://a.com/p?v=2", {"x": 1, "y": "b"}) == "https://a.com/p?v=2&x=1&y=b"
    assert with_query("https://a.com/p", {}) == "https://a.com/p"
