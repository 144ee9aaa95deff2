from __future__ import annotations

import re
from urllib.parse import SplitResult, quote, urljoin, urlsplit, urlunsplit

from page_meta_core.errors import UnresolvableHrefError

HTTP_SCHEMES = frozenset({"http", "https"})

# Tabs and newlines are dropped anywhere in a URL; other C0 controls and spaces only at the ends.
_TAB_NEWLINE_RE = re.compile(r"[\t\n\r]")
_EDGE_CHARS = "".join(chr(c) for c in range(0x21))
_BAD_HOST_CHARS = frozenset(" <>\\^|")

_DEFAULT_PORTS = {"http": 80, "https": 443}
_PORT_RE = re.compile(r":\d*$")
_SCHEME_RE = re.compile(r"^([a-zA-Z][a-zA-Z0-9+.-]*):")

_PATH_SAFE = "/%;:@&=+$,!~*'()"
_QUERY_SAFE = _PATH_SAFE + "?\\"


def _split(url: str) -> SplitResult:
    parts = urlsplit(url)
    # Accessing .port validates it.
    parts.port  # noqa: B018
    return parts


def _normalize(parts: SplitResult) -> str:
    scheme = parts.scheme.lower()
    netloc = parts.netloc
    path = parts.path
    if scheme in HTTP_SCHEMES:
        if "@" not in netloc:
            netloc = netloc.lower()
        if parts.port is None or parts.port == _DEFAULT_PORTS[scheme]:
            netloc = _PORT_RE.sub("", netloc)
        if not path:
            path = "/"
        path = quote(path, safe=_PATH_SAFE)
        query = quote(parts.query, safe=_QUERY_SAFE)
        fragment = quote(parts.fragment, safe=_QUERY_SAFE)
        return urlunsplit((scheme, netloc, path, query, fragment))
    return urlunsplit((scheme, netloc, path, parts.query, parts.fragment))


def clean_href(href: str) -> str:
    return _TAB_NEWLINE_RE.sub("", href.strip(_EDGE_CHARS))


def _backslashes_to_slashes(href: str, base: str) -> str:
    # For http(s), a backslash before the query or fragment is a path separator.
    m = _SCHEME_RE.match(href) or _SCHEME_RE.match(base)
    if not m or m.group(1).lower() not in HTTP_SCHEMES:
        return href
    cut = min((i for i in (href.find("?"), href.find("#")) if i >= 0), default=len(href))
    return href[:cut].replace("\\", "/") + href[cut:]


def is_valid_http_url(parts: SplitResult) -> bool:
    if parts.scheme.lower() not in HTTP_SCHEMES:
        return False
    host = parts.hostname or ""
    if not host:
        return False
    return not any(ch in _BAD_HOST_CHARS for ch in host)


def normalize_url(url: str) -> str:
    """
    Canonical string form of an absolute URL: lower-cased scheme and host, no default port,
    `/` for an empty http(s) path, and unsafe characters in path/query percent-encoded.

    Raises ValueError when the URL cannot be parsed.
    """
    return _normalize(_split(clean_href(url)))


def resolve_href(href: str, base: str) -> str:
    """
    Resolve a possibly-relative `href` against the absolute `base` URL.

    Handles scheme-relative (`//host/x`), root-relative (`/x`) and path-relative (`x`, `../x`)
    references with dot-segment removal. Raises UnresolvableHrefError when the result is not a
    usable absolute URL; callers treat that as "omit this entry".
    """
    cleaned = _backslashes_to_slashes(clean_href(href), base)
    try:
        parts = _split(urljoin(base, cleaned))
    except ValueError as exc:
        raise UnresolvableHrefError(href, base) from exc

    if not parts.scheme:
        raise UnresolvableHrefError(href, base)
    if parts.scheme.lower() in HTTP_SCHEMES and not is_valid_http_url(parts):
        raise UnresolvableHrefError(href, base)
    return _normalize(parts)
