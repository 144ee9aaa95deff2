"""
Request-boundary checks that run before the pipeline is allowed to fetch anything.
"""

from __future__ import annotations

from collections.abc import Mapping
from urllib.parse import urlsplit

from page_meta_core.config import Settings
from page_meta_core.errors import (
    InvalidUrlError,
    PageMetaError,
    RecursiveRequestError,
    UnsupportedProtocolError,
)
from page_meta_core.schema import ErrorResponse
from page_meta_core.urls import HTTP_SCHEMES, clean_href, is_valid_http_url, normalize_url


def validate_target_url(raw: str) -> str:
    """
    Accept only absolute http(s) URLs with a host. Returns the normalized form.
    """
    candidate = clean_href(raw or "")
    if not candidate:
        raise InvalidUrlError()
    try:
        parts = urlsplit(candidate)
    except ValueError as exc:
        raise InvalidUrlError() from exc

    scheme = parts.scheme.lower()
    if not scheme:
        raise InvalidUrlError()
    if scheme not in HTTP_SCHEMES:
        raise UnsupportedProtocolError()
    if not is_valid_http_url(parts):
        raise InvalidUrlError()
    try:
        return normalize_url(candidate)
    except ValueError as exc:
        raise InvalidUrlError() from exc


def outbound_headers(settings: Settings) -> dict[str, str]:
    return {
        settings.sentinel_header: settings.sentinel_value,
        "User-Agent": settings.user_agent,
        "Accept": "text/html,application/xhtml+xml",
    }


def is_recursive_request(headers: Mapping[str, str], settings: Settings) -> bool:
    wanted = settings.sentinel_header.lower()
    return any(k.lower() == wanted for k in headers)


def check_inbound_request(raw_url: str, headers: Mapping[str, str], settings: Settings) -> str:
    """
    Reject a request that came from this service itself, then validate its target URL.
    """
    if is_recursive_request(headers, settings):
        raise RecursiveRequestError()
    return validate_target_url(raw_url)


def error_record(exc: PageMetaError) -> ErrorResponse:
    return ErrorResponse(error=str(exc) or exc.error_message)
