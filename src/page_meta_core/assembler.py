from __future__ import annotations

from page_meta_core.models import AccumulatedState, RequestFacts
from page_meta_core.schema import MetaExtractionResult, NonHtmlResult


def join_title(chunks: list[str]) -> str | None:
    text = "".join(chunks).strip()
    return text or None


def _first_icon_href(state: AccumulatedState) -> str | None:
    for icon in state.icons:
        if icon.rel == "icon":
            return icon.href
    return None


def build_result(facts: RequestFacts, state: AccumulatedState) -> MetaExtractionResult:
    """
    Combine request facts with the accumulated state. Pure: `state` is copied, not shared.
    """
    by_name = state.meta_by_name
    return MetaExtractionResult(
        requested_url=facts.requested_url,
        final_url=facts.final_url or facts.requested_url,
        status=facts.status,
        content_type=facts.content_type,
        lang=state.lang,
        title=join_title(state.title_chunks),
        description=by_name.get("description") or state.og.get("description") or None,
        canonical=state.canonical,
        charset=state.charset,
        theme_color=by_name.get("theme-color") or None,
        author=by_name.get("author") or None,
        keywords=by_name.get("keywords") or None,
        robots=by_name.get("robots") or None,
        generator=by_name.get("generator") or None,
        favicon=_first_icon_href(state),
        icons=tuple(state.icons),
        alternates=tuple(state.alternates),
        og=dict(state.og),
        twitter=dict(state.twitter),
        meta_by_name=dict(by_name),
        meta_by_property=dict(state.meta_by_property),
        meta_tags=tuple(state.meta_tags),
        link_tags=tuple(state.link_tags),
    )


def build_non_html_result(facts: RequestFacts) -> NonHtmlResult:
    return NonHtmlResult(
        requested_url=facts.requested_url,
        final_url=facts.final_url or facts.requested_url,
        status=facts.status,
        content_type=facts.content_type,
    )
