from __future__ import annotations

import logging
from collections.abc import Callable, Mapping

from page_meta_core.errors import UnresolvableHrefError
from page_meta_core.models import AccumulatedState
from page_meta_core.scanner import HtmlOpen, LinkOpen, MetaOpen, ScanEvent, TitleText
from page_meta_core.schema import Alternate, Icon, LinkTag, MetaTag
from page_meta_core.urls import resolve_href

logger = logging.getLogger(__name__)

ICON_RELS = frozenset({"icon", "apple-touch-icon", "apple-touch-icon-precomposed", "shortcut"})

_OG_PREFIX = "og:"
_TWITTER_PREFIX = "twitter:"


def meta_tag_from_attrs(attrs: Mapping[str, str]) -> MetaTag:
    return MetaTag(
        name=attrs.get("name"),
        property=attrs.get("property"),
        http_equiv=attrs.get("http-equiv"),
        charset=attrs.get("charset"),
        content=attrs.get("content"),
    )


def link_tag_from_attrs(attrs: Mapping[str, str]) -> LinkTag | None:
    """Snapshot a `<link>`; returns None when `rel` is missing or has no tokens."""
    rels = tuple(r for r in (attrs.get("rel") or "").split() if r)
    if not rels:
        return None
    return LinkTag(
        rels=rels,
        href=attrs.get("href"),
        hreflang=attrs.get("hreflang"),
        type=attrs.get("type"),
        sizes=attrs.get("sizes"),
    )


class MetaAccumulator:
    """
    Folds scanner events into an AccumulatedState.

    Merge policy differs per field:
    - `lang`, `canonical`, `charset`: first non-empty value wins
    - `meta_by_name`, `meta_by_property`, `og`, `twitter`: last value wins

    Relative hrefs are resolved against `base_url`, which must be the post-redirect URL.
    """

    def __init__(self, base_url: str) -> None:
        self.base_url = base_url
        self.state = AccumulatedState()
        self._handlers: dict[type, Callable[[ScanEvent], None]] = {
            HtmlOpen: lambda e: self.on_html_open(e.attrs),
            TitleText: lambda e: self.on_title_text(e.text),
            MetaOpen: lambda e: self.on_meta(meta_tag_from_attrs(e.attrs)),
            LinkOpen: self._on_link_open,
        }

    def handle(self, event: ScanEvent) -> None:
        self._handlers[type(event)](event)

    def _on_link_open(self, event: LinkOpen) -> None:
        tag = link_tag_from_attrs(event.attrs)
        if tag is None:
            return
        self.on_link(tag, event.attrs.get("title"))

    def _resolve(self, href: str) -> str | None:
        try:
            return resolve_href(href, self.base_url)
        except UnresolvableHrefError as exc:
            logger.debug("Dropping unresolvable href: %s", exc)
            return None

    def on_html_open(self, attrs: Mapping[str, str]) -> None:
        lang = attrs.get("lang")
        if not lang:
            return
        if self.state.lang is None:
            self.state.lang = lang

    def on_title_text(self, chunk: str) -> None:
        if chunk:
            self.state.title_chunks.append(chunk)

    def on_meta(self, tag: MetaTag) -> None:
        st = self.state
        st.meta_tags.append(tag)

        if tag.charset and st.charset is None:
            st.charset = tag.charset

        content = tag.content or ""

        if tag.name:
            name_key = tag.name.lower()
            st.meta_by_name[name_key] = content
            if name_key.startswith(_TWITTER_PREFIX):
                suffix = name_key[len(_TWITTER_PREFIX) :]
                if suffix:
                    st.twitter[suffix] = content

        if tag.property:
            prop_key = tag.property.lower()
            st.meta_by_property[prop_key] = content
            if prop_key.startswith(_OG_PREFIX):
                suffix = prop_key[len(_OG_PREFIX) :]
                if suffix:
                    st.og[suffix] = content

    def _set_canonical(self, href: str) -> None:
        if self.state.canonical is not None:
            return
        resolved = self._resolve(href)
        if resolved:
            self.state.canonical = resolved

    def on_link(self, tag: LinkTag, title: str | None = None) -> None:
        st = self.state
        st.link_tags.append(tag)

        rel_set = {r.lower() for r in tag.rels}

        if "canonical" in rel_set and tag.href:
            self._set_canonical(tag.href)

        # Whichever icon rel comes first in the element's own rel order.
        matched_icon_rel = next((r for r in tag.rels if r.lower() in ICON_RELS), None)
        if matched_icon_rel and tag.href:
            resolved = self._resolve(tag.href)
            if resolved:
                st.icons.append(
                    Icon(href=resolved, rel=matched_icon_rel.lower(), type=tag.type, sizes=tag.sizes)
                )

        if "alternate" in rel_set and tag.href:
            resolved = self._resolve(tag.href)
            if resolved:
                st.alternates.append(
                    Alternate(href=resolved, hreflang=tag.hreflang, type=tag.type, title=title)
                )
