"""URL 유틸리티 테스트"""

import pytest

from webcalc.utils.url_utils import is_absolute_http_url, resolve_href, unwrap_redirect


class TestResolveHref:
    @pytest.mark.parametrize(
        "href,base,expected",
        [
            ("/l/?uddg=x", "https://html.duckduckgo.com/html/?q=a", "https://html.duckduckgo.com/l/?uddg=x"),
            ("//example.com/a", "https://html.duckduckgo.com/html/", "https://example.com/a"),
            ("page2", "https://example.com/dir/index.html", "https://example.com/dir/page2"),
            ("https://other.org/x", "https://example.com/", "https://other.org/x"),
        ],
    )
    def test_resolves(self, href, base, expected):
        assert resolve_href(href, base) == expected

    @pytest.mark.parametrize("href", ["", "   ", "#", "#frag", "javascript:void(0)", "mailto:a@b.c", "tel:123", "data:text/html,x", "ftp://files.example.com/a"])
    def test_rejects(self, href):
        assert resolve_href(href, "https://example.com/") is None

    def test_bad_port_is_rejected(self):
        assert resolve_href("http://example.com:99999999/", "https://example.com/") is None


class TestUnwrapRedirect:
    def test_ddg(self):
        url = "https://duckduckgo.com/l/?uddg=https%3A%2F%2Fexample.org%2Fpath%3Fa%3D1&rut=xyz"
        assert unwrap_redirect(url) == "https://example.org/path?a=1"

    def test_bing(self):
        url = "https://www.bing.com/ck/a?!&&p=abc&u=a1aHR0cHM6Ly9kb2NzLnB5dGhvbi5vcmcvMy9saWJyYXJ5L2FzeW5jaW8uaHRtbA&ntb=1"
        assert unwrap_redirect(url) == "https://docs.python.org/3/library/asyncio.html"

    @pytest.mark.parametrize(
        "url",
        [
            "https://example.org/l/?uddg=https%3A%2F%2Fx.org",
            "https://duckduckgo.com/l/?uddg=not-a-url",
            "https://www.bing.com/ck/a?u=zzz",
            "https://www.bing.com/ck/a?u=a1!!!",
            "https://example.org/plain",
        ],
    )
    def test_non_wrappers_are_returned_unchanged(self, url):
        assert unwrap_redirect(url) == url


def test_is_absolute_http_url():
    assert is_absolute_http_url("https://example.com/a")
    assert is_absolute_http_url("http://example.com")
    assert not is_absolute_http_url("/relative")
    assert not is_absolute_http_url("ftp://example.com")
    assert not is_absolute_http_url("")
