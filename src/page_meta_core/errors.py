from __future__ import annotations


class PageMetaError(Exception):
    """Base exception for page metadata extraction failures."""

    error_message = "internal error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.error_message)


class PreconditionError(PageMetaError):
    """The request must be rejected before any fetch is issued."""


class InvalidUrlError(PreconditionError):
    error_message = "invalid url"


class UnsupportedProtocolError(PreconditionError):
    error_message = "unsupported protocol"


class RecursiveRequestError(PreconditionError):
    error_message = "recursive request"


class FetchError(PageMetaError):
    """Network, DNS or redirect failure while fetching the target page."""

    error_message = "fetch failed"

    def __init__(self, message: str | None = None, *, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class UnresolvableHrefError(PageMetaError):
    """An href could not be resolved to an absolute URL."""

    error_message = "unresolvable href"

    def __init__(self, href: str, base: str) -> None:
        super().__init__(f"cannot resolve {href!r} against {base!r}")
        self.href = href
        self.base = base
