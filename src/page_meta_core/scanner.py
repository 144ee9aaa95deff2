"""
Single-pass tag scanner for the `<head>` metadata surface.

The scanner is fed text incrementally and reports only four kinds of events, in document
order:

- `HtmlOpen`   every `<html>` start tag
- `TitleText`  text inside a `<title>` that is a direct child of `<head>`
- `MetaOpen`   every `<meta>` inside `<head>`
- `LinkOpen`   every `<link>` inside `<head>`

No tree is built. Only the stack of open elements inside `<head>` is tracked, which is
enough to tell `head > title` from a nested title and to know when `</head>` was seen.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from html.parser import HTMLParser
from types import MappingProxyType

logger = logging.getLogger(__name__)

_VOID_TAGS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)


def _attrs_view(attrs: list[tuple[str, str | None]]) -> Mapping[str, str]:
    # Duplicate attributes: the first one wins, as in browsers. Valueless attributes read as "".
    out: dict[str, str] = {}
    for k, v in attrs or []:
        key = k.lower()
        if key not in out:
            out[key] = v if v is not None else ""
    return MappingProxyType(out)


@dataclass(frozen=True)
class HtmlOpen:
    attrs: Mapping[str, str]


@dataclass(frozen=True)
class TitleText:
    text: str


@dataclass(frozen=True)
class MetaOpen:
    attrs: Mapping[str, str]


@dataclass(frozen=True)
class LinkOpen:
    attrs: Mapping[str, str]


ScanEvent = HtmlOpen | TitleText | MetaOpen | LinkOpen


class _SelectorParser(HTMLParser):
    def __init__(self) -> None:
        super().__init__(convert_charrefs=True)
        self.events: list[ScanEvent] = []
        self.head_stack: list[str] | None = None
        self.in_title = False
        self.head_closed = False

    @property
    def in_head(self) -> bool:
        return self.head_stack is not None

    def _leave_head(self) -> None:
        self.head_stack = None
        self.in_title = False
        self.head_closed = True

    def _title_markup(self, markup: str) -> None:
        # Title content is raw text: tags inside it are part of the title.
        self.events.append(TitleText(markup))

    def handle_starttag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if self.in_title:
            self._title_markup(self.get_starttag_text() or "")
            return
        tag = tag.lower()

        if tag == "html":
            self.events.append(HtmlOpen(_attrs_view(attrs)))
            return
        if tag == "head":
            if not self.in_head:
                self.head_stack = []
            return

        if self.head_stack is None:
            return

        if tag == "body":
            # Missing </head>.
            self._leave_head()
            return
        if tag == "meta":
            self.events.append(MetaOpen(_attrs_view(attrs)))
            return
        if tag == "link":
            self.events.append(LinkOpen(_attrs_view(attrs)))
            return
        if tag in _VOID_TAGS:
            return
        if tag == "title" and not self.head_stack:
            self.in_title = True
        self.head_stack.append(tag)

    def handle_startendtag(self, tag: str, attrs: list[tuple[str, str | None]]) -> None:
        if self.in_title:
            self._title_markup(self.get_starttag_text() or "")
            return
        self.handle_starttag(tag, attrs)
        self.handle_endtag(tag)

    def handle_endtag(self, tag: str) -> None:
        tag = tag.lower()
        if self.in_title and tag != "title":
            self._title_markup(f"</{tag}>")
            return
        if tag == "head":
            if self.in_head:
                self._leave_head()
            return
        if self.head_stack is None or tag not in self.head_stack:
            return
        while self.head_stack:
            popped = self.head_stack.pop()
            if popped == "title" and not self.head_stack:
                self.in_title = False
            if popped == tag:
                break

    def handle_data(self, data: str) -> None:
        if self.in_title and data:
            self.events.append(TitleText(data))


class TagScanner:
    """
    Incremental scanner. `feed()` returns the events completed by that chunk; `close()` flushes
    whatever the parser was still holding back.

    Malformed markup never aborts the scan: if the underlying parser gives up on a chunk, the
    unparsed remainder of that chunk is dropped and scanning continues with the next one.
    """

    def __init__(self) -> None:
        self._parser = _SelectorParser()
        self._closed = False

    @property
    def head_closed(self) -> bool:
        return self._parser.head_closed

    def _drain(self) -> list[ScanEvent]:
        events = self._parser.events
        self._parser.events = []
        return events

    def feed(self, text: str) -> list[ScanEvent]:
        if self._closed:
            raise RuntimeError("scanner is closed")
        if text:
            try:
                self._parser.feed(text)
            except (AssertionError, ValueError) as exc:
                logger.debug("Skipping malformed markup: %s", exc)
                HTMLParser.reset(self._parser)
        return self._drain()

    def close(self) -> list[ScanEvent]:
        if not self._closed:
            self._closed = True
            try:
                self._parser.close()
            except (AssertionError, ValueError) as exc:
                logger.debug("Skipping malformed trailing markup: %s", exc)
        return self._drain()


def scan_chunks(chunks: Iterable[str]) -> Iterator[ScanEvent]:
    """Lazily scan an iterable of text chunks, yielding events in document order."""
    scanner = TagScanner()
    for chunk in chunks:
        yield from scanner.feed(chunk)
    yield from scanner.close()
