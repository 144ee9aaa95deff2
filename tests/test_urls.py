from __future__ import annotations

import pytest

from page_meta_core.errors import UnresolvableHrefError
from page_meta_core.urls import normalize_url, resolve_href

BASE = "https://example.com/page"


@pytest.mark.parametrize(
    ("href", "expected"),
    [
        ("favicon.ico", "https://example.com/favicon.ico"),
        ("/page", "https://example.com/page"),
        ("../img/a.png", "https://example.com/img/a.png"),
        ("//cdn.example.com/x.png", "https://cdn.example.com/x.png"),
        ("https://Other.EXAMPLE.org", "https://other.example.org/"),
        ("  a b.png\n", "https://example.com/a%20b.png"),
        ("?q=1", "https://example.com/page?q=1"),
        ("\\favicon.ico", "https://example.com/favicon.ico"),
        ("\\\\cdn.example.com\\a.png", "https://cdn.example.com/a.png"),
        ("/x?path=a\\b", "https://example.com/x?path=a\\b"),
        ("https://example.com:443/x", "https://example.com/x"),
        ("http://example.com:80/x", "http://example.com/x"),
        ("https://example.com:8443/x", "https://example.com:8443/x"),
    ],
)
def test_resolve_href(href: str, expected: str) -> None:
    assert resolve_href(href, BASE) == expected


def test_resolve_href_removes_dot_segments() -> None:
    assert resolve_href("./x/../y/./z.png", "https://example.com/a/b/c") == "https://example.com/a/b/y/z.png"


def test_resolve_href_keeps_non_http_schemes() -> None:
    assert resolve_href("data:image/png;base64,AAAA", BASE) == "data:image/png;base64,AAAA"


@pytest.mark.parametrize(
    "href",
    [
        "http://[::1",
        "https://exa mple.com/",
        "http://example.com:99999/",
        "http://",
    ],
)
def test_resolve_href_rejects_malformed(href: str) -> None:
    with pytest.raises(UnresolvableHrefError):
        resolve_href(href, BASE)


def test_normalize_url_adds_root_path() -> None:
    assert normalize_url("https://Example.com") == "https://example.com/"
